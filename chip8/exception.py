class Chip8Exception(Exception):
    """
    Base class for every fault the Chip 8 CPU can raise. A fault halts the
    CPU: the instance remembers it and refuses to run further cycles until
    it is reset.
    """


class UnknownOpCodeException(Chip8Exception):
    """
    A class to raise unknown op code exceptions.
    """
    def __init__(self, op_code, program_counter):
        self.op_code = op_code
        self.program_counter = program_counter
        Chip8Exception.__init__(
            self, "Unknown op-code: {:04X} at PC {:04X}".format(op_code, program_counter))


class OutOfBoundsException(Chip8Exception):
    """
    Raised when the program counter, the index register or a key lookup
    points past the end of the memory (or keypad) it addresses.
    """
    def __init__(self, address, op_code, program_counter, target='memory'):
        self.address = address
        self.op_code = op_code
        self.program_counter = program_counter
        self.target = target
        Chip8Exception.__init__(
            self, "Out of bounds {} access at {:04X} (op-code: {:04X} at PC {:04X})".format(
                target, address, op_code, program_counter))


class StackOverflowException(Chip8Exception):
    def __init__(self, op_code, program_counter):
        self.op_code = op_code
        self.program_counter = program_counter
        Chip8Exception.__init__(
            self, "Stack overflow: {:04X} at PC {:04X}".format(op_code, program_counter))


class StackUnderflowException(Chip8Exception):
    def __init__(self, op_code, program_counter):
        self.op_code = op_code
        self.program_counter = program_counter
        Chip8Exception.__init__(
            self, "Stack underflow: {:04X} at PC {:04X}".format(op_code, program_counter))


class RomTooLargeException(Chip8Exception):
    """
    Raised by the ROM loader when the ROM does not fit between the program
    start address and the end of memory. Nothing is written in that case.
    """
    def __init__(self, rom_size, available):
        self.rom_size = rom_size
        self.available = available
        Chip8Exception.__init__(
            self, "ROM is {} bytes, only {} bytes of program memory available".format(
                rom_size, available))
