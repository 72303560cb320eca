import logging
from random import randint

from chip8.addresses import (
    ADDRESS_MASK, BYTE_MASK, BYTE_MODULUS, FLAG_REGISTER, FONT_GLYPH_SIZE,
    FONT_SET, FONT_START, MAX_MEMORY, MAX_ROM_SIZE, NIBBLE_MASK, NUM_KEYS,
    NUM_REGISTERS, OPERATION_MASK, PROGRAM_COUNTER_START, SPRITE_WIDTH,
    STACK_DEPTH, WORD_MASK, X_MASK, Y_MASK,
)
from chip8.exception import (
    Chip8Exception, OutOfBoundsException, RomTooLargeException,
    StackOverflowException, StackUnderflowException, UnknownOpCodeException,
)
from chip8.framebuffer import FrameBuffer

logger = logging.getLogger(__name__)


def random_byte():
    """
    Default random source for Ctnn: a uniform byte from the platform PRNG.
    """
    return randint(0, 255)


# C L A S S E S ###############################################################


class CPU(object):
    """
    The Chip 8 virtual machine. Good references for the instruction set:

        http://devernay.free.fr/hacks/chip8/C8TECH10.HTM
        http://michael.toren.net/mirrors/chip8/chip8def.htm

    State held here:

        * V0 - VF, sixteen 8-bit registers; VF doubles as the carry,
          borrow and collision flag
        * I, the 16-bit index register, and PC, the 16-bit program counter
        * a 16 entry call stack and its pointer SP
        * the 8-bit delay (DT) and sound (ST) timers
        * 4K of memory, 16 keys and a 64 x 32 monochrome frame buffer

    A host drives it by setting the keys, calling cpu_execute_cycle() once
    per tick and repainting from cpu_framebuffer() whenever cpu_redraw is set.
    """
    def __init__(self, random_source=random_byte, tone_callback=None, tick_timers=True):
        """
        Build a zeroed CPU. It is not runnable until cpu_initialize() has
        installed the font and pointed the program counter at the program.

        :param random_source: zero-argument callable returning 0-255 for Ctnn
        :param tone_callback: called once for every tick the sound timer is active
        :param tick_timers: decrement the timers after every cycle; pass False
            when the host decrements them on its own clock
        """
        # There are two timer registers, one for sound and one that is general
        # purpose known as the delay timer.
        self.cpu_timers = {
            'delay': 0,
            'sound': 0,
        }

        # Defines the general purpose, index, stack pointer and program
        # counter registers.
        self.cpu_registers = {
            'v': [0] * NUM_REGISTERS,
            'index': 0,
            'sp': 0,
            'pc': 0,
        }

        # The operation_lookup table is executed according to the most
        # significant nibble of the operand (e.g. operand 8nnn would call
        # self.cpu_execute_logical_instruction)
        self.cpu_operation_lookup = {
            0x0: self.cpu_clear_return,                  # see subfunctions below
            0x1: self.cpu_jump_to_address,               # 1nnn - JUMP nnn
            0x2: self.cpu_jump_to_subroutine,            # 2nnn - CALL nnn
            0x3: self.cpu_skip_if_reg_equal_val,         # 3snn - SKE  Vs, nn
            0x4: self.cpu_skip_if_reg_not_equal_val,     # 4snn - SKNE Vs, nn
            0x5: self.cpu_skip_if_reg_equal_reg,         # 5st0 - SKE  Vs, Vt
            0x6: self.cpu_move_value_to_reg,             # 6snn - LOAD Vs, nn
            0x7: self.cpu_add_value_to_reg,              # 7snn - ADD  Vs, nn
            0x8: self.cpu_execute_logical_instruction,   # see subfunctions below
            0x9: self.cpu_skip_if_reg_not_equal_reg,     # 9st0 - SKNE Vs, Vt
            0xA: self.cpu_load_index_reg_with_value,     # Annn - LOAD I, nnn
            0xB: self.cpu_jump_to_v0_plus_value,         # Bnnn - JUMP V0 + nnn
            0xC: self.cpu_generate_random_number,        # Ctnn - RAND Vt, nn
            0xD: self.cpu_draw_sprite,                   # Dstn - DRAW Vs, Vt, n
            0xE: self.cpu_keyboard_routines,             # see subfunctions below
            0xF: self.cpu_misc_routines,                 # see subfunctions below
        }

        # Operands starting with 0 must match one of these exactly. The
        # 0nnn machine code call is not supported.
        self.cpu_clear_return_lookup = {
            0x00E0: self.cpu_clear_screen,               # 00E0 - CLS
            0x00EE: self.cpu_return_from_subroutine,     # 00EE - RTS
        }

        # This set of operations is invoked when the operand loaded into the
        # CPU starts with 8 (e.g. operand 8st0 would call
        # self.cpu_move_reg_into_reg)
        self.cpu_logical_operation_lookup = {
            0x0: self.cpu_move_reg_into_reg,             # 8st0 - LOAD Vs, Vt
            0x1: self.cpu_logical_or,                    # 8st1 - OR   Vs, Vt
            0x2: self.cpu_logical_and,                   # 8st2 - AND  Vs, Vt
            0x3: self.cpu_exclusive_or,                  # 8st3 - XOR  Vs, Vt
            0x4: self.cpu_add_reg_to_reg,                # 8st4 - ADD  Vs, Vt
            0x5: self.cpu_subtract_reg_from_reg,         # 8st5 - SUB  Vs, Vt
            0x6: self.cpu_right_shift_reg,               # 8st6 - SHR  Vs
            0x7: self.cpu_subtract_reg_from_reg1,        # 8st7 - SUBN Vs, Vt
            0xE: self.cpu_left_shift_reg,                # 8stE - SHL  Vs
        }

        # Operands starting with E select a keyboard routine by their low byte
        self.cpu_keyboard_routine_lookup = {
            0x9E: self.cpu_skip_if_key_pressed,          # Es9E - SKPR Vs
            0xA1: self.cpu_skip_if_key_not_pressed,      # EsA1 - SKUP Vs
        }

        # This set of operations is invoked when the operand loaded into the
        # CPU starts with F (e.g. operand Ft07 would call
        # self.cpu_move_delay_timer_into_reg)
        self.cpu_misc_routine_lookup = {
            0x07: self.cpu_move_delay_timer_into_reg,            # Ft07 - LOAD Vt, DELAY
            0x0A: self.cpu_wait_for_keypress,                    # Ft0A - KEYD Vt
            0x15: self.cpu_move_reg_into_delay_timer,            # Fs15 - LOAD DELAY, Vs
            0x18: self.cpu_move_reg_into_sound_timer,            # Fs18 - LOAD SOUND, Vs
            0x1E: self.cpu_add_reg_into_index,                   # Fs1E - ADD  I, Vs
            0x29: self.cpu_load_index_with_reg_sprite,           # Fs29 - LOAD I, Vs
            0x33: self.cpu_store_bcd_in_memory,                  # Fs33 - BCD
            0x55: self.cpu_store_regs_in_memory,                 # Fs55 - STOR [I], Vs
            0x65: self.cpu_read_regs_from_memory,                # Fs65 - LOAD Vs, [I]
        }
        self.cpu_operand = 0
        self.cpu_operand_address = 0
        self.cpu_memory = bytearray(MAX_MEMORY)
        self.cpu_stack = [0] * STACK_DEPTH
        self.cpu_keys = [False] * NUM_KEYS
        self.cpu_frame_buffer = FrameBuffer()
        self.cpu_redraw = False
        self.cpu_tone = False
        self.cpu_fault = None
        self.cpu_random_source = random_source
        self.cpu_tone_callback = tone_callback
        self.cpu_tick_timers = tick_timers

    def __str__(self):
        val = 'PC: {:4X}  OP: {:4X}\n'.format(
            self.cpu_operand_address, self.cpu_operand)
        for index in range(NUM_REGISTERS):
            val += 'V{:X}: {:2X}\n'.format(index, self.cpu_registers['v'][index])
        val += 'I: {:4X}\n'.format(self.cpu_registers['index'])
        val += 'SP: {:X}\n'.format(self.cpu_registers['sp'])
        val += 'DT: {:2X}  ST: {:2X}\n'.format(
            self.cpu_timers['delay'], self.cpu_timers['sound'])
        return val

    # L I F E C Y C L E #######################################################

    def cpu_initialize(self):
        """
        Reset the CPU by blanking out memory, registers, stack, keys and
        screen, installing the font and pointing the program counter at the
        start of the program. Any previously recorded fault is forgotten.
        """
        self.cpu_memory[:] = bytes(MAX_MEMORY)
        self.cpu_memory[FONT_START:FONT_START + len(FONT_SET)] = FONT_SET
        self.cpu_registers['v'] = [0] * NUM_REGISTERS
        self.cpu_registers['pc'] = PROGRAM_COUNTER_START
        self.cpu_registers['sp'] = 0
        self.cpu_registers['index'] = 0
        self.cpu_stack = [0] * STACK_DEPTH
        self.cpu_keys = [False] * NUM_KEYS
        self.cpu_timers['delay'] = 0
        self.cpu_timers['sound'] = 0
        self.cpu_frame_buffer.clear()
        self.cpu_redraw = False
        self.cpu_tone = False
        self.cpu_fault = None
        self.cpu_operand = 0
        self.cpu_operand_address = PROGRAM_COUNTER_START
        logger.debug('CPU initialized')

    def cpu_load_rom(self, rom_data):
        """
        Copy the ROM into memory at the program start address. A ROM that
        does not fit is rejected without touching memory.

        :param rom_data: the raw bytes of the ROM
        """
        if len(rom_data) > MAX_ROM_SIZE:
            raise RomTooLargeException(len(rom_data), MAX_ROM_SIZE)
        end = PROGRAM_COUNTER_START + len(rom_data)
        self.cpu_memory[PROGRAM_COUNTER_START:end] = rom_data
        logger.info('Loaded %d byte ROM at %04X', len(rom_data), PROGRAM_COUNTER_START)

    @property
    def cpu_halted(self):
        return self.cpu_fault is not None

    # H O S T   I N T E R F A C E #############################################

    def cpu_set_keys(self, keys):
        """
        Replace the state of all 16 keys. Index i of keys is the pressed
        state of Chip 8 key i.

        :param keys: a sequence of 16 truthy / falsy values
        """
        if len(keys) != NUM_KEYS:
            raise ValueError('Expected {} key states, got {}'.format(NUM_KEYS, len(keys)))
        self.cpu_keys = [bool(pressed) for pressed in keys]

    def cpu_press_key(self, key_number):
        self.cpu_keys[key_number] = True

    def cpu_release_key(self, key_number):
        self.cpu_keys[key_number] = False

    def cpu_framebuffer(self):
        """
        Returns a read-only (32 x 64) view of the screen pixels, row-major,
        with each entry 0 (off) or 1 (on).
        """
        return self.cpu_frame_buffer.view()

    def cpu_clear_redraw(self):
        """
        Called by the host once it has consumed a frame.
        """
        self.cpu_redraw = False

    # F E T C H / C Y C L E ###################################################

    def cpu_fetch_opcode(self):
        """
        Read the big-endian operand at the program counter without advancing
        it.

        :return: the 16-bit operand
        """
        cpu_pc = self.cpu_registers['pc']
        if cpu_pc > MAX_MEMORY - 2:
            raise OutOfBoundsException(cpu_pc, self.cpu_operand, cpu_pc)
        return (self.cpu_memory[cpu_pc] << 8) | self.cpu_memory[cpu_pc + 1]

    def cpu_execute_cycle(self):
        """
        Execute the instruction pointed to by the program counter, then
        decrement the timers (unless the host has taken over timer ticks).
        The program counter is advanced by 2 before the instruction runs, so
        jumps, calls and skips simply overwrite it.

        A fault is recorded in cpu_fault and raised. Once faulted, every
        further call re-raises the same fault until cpu_initialize().
        """
        if self.cpu_fault is not None:
            raise self.cpu_fault
        try:
            self.cpu_operand_address = self.cpu_registers['pc']
            cpu_operand = self.cpu_fetch_opcode()
            self.cpu_registers['pc'] += 2
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug('PC: %04X  OP: %04X', self.cpu_operand_address, cpu_operand)
            self.cpu_process_opcode(cpu_operand)
        except Chip8Exception as error:
            self.cpu_fault = error
            logger.error('CPU halted: %s', error)
            raise
        if self.cpu_tick_timers:
            self.cpu_decrement_timers()

    def cpu_process_opcode(self, cpu_operand):
        """
        Dispatch a single operand against the current state. The program
        counter is not advanced here; cpu_execute_cycle() does that before
        calling. For testing purposes, operands can be passed directly.

        :param cpu_operand: the 16-bit operand to execute
        :return: returns the operand executed
        """
        self.cpu_operand = cpu_operand
        cpu_operation = (self.cpu_operand & OPERATION_MASK) >> 12
        self.cpu_operation_lookup[cpu_operation]()
        return self.cpu_operand

    def cpu_decrement_timers(self):
        """
        Decrement both the sound and delay timer. While the sound timer is
        active the tone signal is raised for this tick.

        :return: True if a tone was signalled
        """
        if self.cpu_timers['delay'] != 0:
            self.cpu_timers['delay'] -= 1

        self.cpu_tone = self.cpu_timers['sound'] != 0
        if self.cpu_tone:
            self.cpu_timers['sound'] -= 1
            logger.debug('BEEP!')
            if self.cpu_tone_callback is not None:
                self.cpu_tone_callback()
        return self.cpu_tone

    # H E L P E R S ###########################################################

    def cpu_unknown_opcode(self):
        return UnknownOpCodeException(self.cpu_operand, self.cpu_operand_address)

    def cpu_check_memory(self, address, length=1):
        """
        Raise an OutOfBoundsException unless memory[address:address + length]
        lies entirely inside memory.
        """
        if length > 0 and address + length - 1 >= MAX_MEMORY:
            raise OutOfBoundsException(
                max(address, MAX_MEMORY), self.cpu_operand, self.cpu_operand_address)

    def cpu_set_flag(self, value):
        self.cpu_registers['v'][FLAG_REGISTER] = value

    # D I S P A T C H #########################################################

    def cpu_clear_return(self):
        """
        Opcodes starting with a 0 are one of the following instructions:

            00E0 - Clear the display
            00EE - Return from subroutine

        Any other operand in this family is unknown.
        """
        try:
            cpu_routine = self.cpu_clear_return_lookup[self.cpu_operand]
        except KeyError:
            raise self.cpu_unknown_opcode()
        cpu_routine()

    def cpu_execute_logical_instruction(self):
        """
        Operands starting with 8 pick an ALU routine by their low nibble.
        """
        cpu_operation = self.cpu_operand & NIBBLE_MASK
        try:
            cpu_routine = self.cpu_logical_operation_lookup[cpu_operation]
        except KeyError:
            raise self.cpu_unknown_opcode()
        cpu_routine()

    def cpu_keyboard_routines(self):
        """
        Operands starting with E pick a key test by their low byte (9E or A1).
        """
        cpu_operation = self.cpu_operand & BYTE_MASK
        try:
            cpu_routine = self.cpu_keyboard_routine_lookup[cpu_operation]
        except KeyError:
            raise self.cpu_unknown_opcode()
        cpu_routine()

    def cpu_misc_routines(self):
        """
        Operands starting with F pick a routine by their low byte.
        """
        cpu_operation = self.cpu_operand & BYTE_MASK
        try:
            cpu_routine = self.cpu_misc_routine_lookup[cpu_operation]
        except KeyError:
            raise self.cpu_unknown_opcode()
        cpu_routine()

    # I N S T R U C T I O N S #################################################
    #
    # Each routine decodes its own operands from self.cpu_operand. Mnemonics
    # name register nibbles with s and t and immediates with nn and nnn.

    def cpu_clear_screen(self):
        """
        00E0 - CLS
        """
        self.cpu_frame_buffer.clear()
        self.cpu_redraw = True

    def cpu_return_from_subroutine(self):
        """
        00EE - RTS

        Pops the most recent return address into the program counter. An
        empty stack is a fault rather than a wrap to slot 15.
        """
        if self.cpu_registers['sp'] == 0:
            raise StackUnderflowException(self.cpu_operand, self.cpu_operand_address)
        self.cpu_registers['sp'] -= 1
        self.cpu_registers['pc'] = self.cpu_stack[self.cpu_registers['sp']]

    def cpu_jump_to_address(self):
        """
        1nnn - JUMP nnn
        """
        self.cpu_registers['pc'] = self.cpu_operand & ADDRESS_MASK

    def cpu_jump_to_subroutine(self):
        """
        2nnn - CALL nnn

        Pushes the already advanced program counter, so the matching RTS
        resumes at the instruction after the call. Sixteen nested calls fill
        the stack; a seventeenth is a fault.
        """
        if self.cpu_registers['sp'] == STACK_DEPTH:
            raise StackOverflowException(self.cpu_operand, self.cpu_operand_address)
        self.cpu_stack[self.cpu_registers['sp']] = self.cpu_registers['pc']
        self.cpu_registers['sp'] += 1
        self.cpu_registers['pc'] = self.cpu_operand & ADDRESS_MASK

    def cpu_skip_if_reg_equal_val(self):
        """
        3snn - SKE Vs, nn

        Skipping means stepping the program counter over one more 2 byte
        instruction.
        """
        cpu_source = (self.cpu_operand & X_MASK) >> 8
        if self.cpu_registers['v'][cpu_source] == (self.cpu_operand & BYTE_MASK):
            self.cpu_registers['pc'] += 2

    def cpu_skip_if_reg_not_equal_val(self):
        """
        4snn - SKNE Vs, nn
        """
        cpu_source = (self.cpu_operand & X_MASK) >> 8
        if self.cpu_registers['v'][cpu_source] != (self.cpu_operand & BYTE_MASK):
            self.cpu_registers['pc'] += 2

    def cpu_skip_if_reg_equal_reg(self):
        """
        5st0 - SKE Vs, Vt

        The low nibble must be 0; 5st1 and friends are not instructions.
        """
        if self.cpu_operand & NIBBLE_MASK:
            raise self.cpu_unknown_opcode()
        cpu_source = (self.cpu_operand & X_MASK) >> 8
        cpu_target = (self.cpu_operand & Y_MASK) >> 4
        if self.cpu_registers['v'][cpu_source] == self.cpu_registers['v'][cpu_target]:
            self.cpu_registers['pc'] += 2

    def cpu_move_value_to_reg(self):
        # 6snn - LOAD Vs, nn
        cpu_target = (self.cpu_operand & X_MASK) >> 8
        self.cpu_registers['v'][cpu_target] = self.cpu_operand & BYTE_MASK

    def cpu_add_value_to_reg(self):
        """
        7snn - ADD Vs, nn

        Wraps at 256. Unlike 8st4 this never touches VF.
        """
        cpu_target = (self.cpu_operand & X_MASK) >> 8
        cpu_sum = self.cpu_registers['v'][cpu_target] + (self.cpu_operand & BYTE_MASK)
        self.cpu_registers['v'][cpu_target] = cpu_sum % BYTE_MODULUS

    def cpu_move_reg_into_reg(self):
        # 8st0 - LOAD Vs, Vt
        cpu_target = (self.cpu_operand & X_MASK) >> 8
        cpu_source = (self.cpu_operand & Y_MASK) >> 4
        self.cpu_registers['v'][cpu_target] = self.cpu_registers['v'][cpu_source]

    def cpu_logical_or(self):
        # 8st1 - OR   Vs, Vt
        cpu_target = (self.cpu_operand & X_MASK) >> 8
        cpu_source = (self.cpu_operand & Y_MASK) >> 4
        self.cpu_registers['v'][cpu_target] |= self.cpu_registers['v'][cpu_source]

    def cpu_logical_and(self):
        # 8st2 - AND  Vs, Vt
        cpu_target = (self.cpu_operand & X_MASK) >> 8
        cpu_source = (self.cpu_operand & Y_MASK) >> 4
        self.cpu_registers['v'][cpu_target] &= self.cpu_registers['v'][cpu_source]

    def cpu_exclusive_or(self):
        # 8st3 - XOR  Vs, Vt
        cpu_target = (self.cpu_operand & X_MASK) >> 8
        cpu_source = (self.cpu_operand & Y_MASK) >> 4
        self.cpu_registers['v'][cpu_target] ^= self.cpu_registers['v'][cpu_source]

    def cpu_add_reg_to_reg(self):
        """
        8st4 - ADD  Vs, Vt

        Vs = (Vs + Vt) mod 256, then VF = 1 when the true sum did not fit in
        a byte. The flag is written last, so ADD VF, Vt leaves the carry in VF.
        """
        cpu_target = (self.cpu_operand & X_MASK) >> 8
        cpu_source = (self.cpu_operand & Y_MASK) >> 4
        cpu_sum = self.cpu_registers['v'][cpu_target] + self.cpu_registers['v'][cpu_source]
        self.cpu_registers['v'][cpu_target] = cpu_sum % BYTE_MODULUS
        self.cpu_set_flag(1 if cpu_sum > 0xFF else 0)

    def cpu_subtract_reg_from_reg(self):
        """
        8st5 - SUB  Vs, Vt

        Vs = (Vs - Vt) mod 256. VF = 1 means no borrow (Vs >= Vt).
        """
        cpu_target = (self.cpu_operand & X_MASK) >> 8
        cpu_source = (self.cpu_operand & Y_MASK) >> 4
        cpu_minuend = self.cpu_registers['v'][cpu_target]
        cpu_subtrahend = self.cpu_registers['v'][cpu_source]
        self.cpu_registers['v'][cpu_target] = (cpu_minuend - cpu_subtrahend) % BYTE_MODULUS
        self.cpu_set_flag(1 if cpu_minuend >= cpu_subtrahend else 0)

    def cpu_right_shift_reg(self):
        """
        8st6 - SHR  Vs

        Vt is ignored. The bit that falls off the right goes to VF.
        """
        cpu_source = (self.cpu_operand & X_MASK) >> 8
        self.cpu_set_flag(self.cpu_registers['v'][cpu_source] & 0x1)
        self.cpu_registers['v'][cpu_source] >>= 1

    def cpu_subtract_reg_from_reg1(self):
        """
        8st7 - SUBN Vs, Vt

        The reversed subtraction: Vs = (Vt - Vs) mod 256, VF = 1 when Vt >= Vs.
        """
        cpu_target = (self.cpu_operand & X_MASK) >> 8
        cpu_source = (self.cpu_operand & Y_MASK) >> 4
        cpu_subtrahend = self.cpu_registers['v'][cpu_target]
        cpu_minuend = self.cpu_registers['v'][cpu_source]
        self.cpu_registers['v'][cpu_target] = (cpu_minuend - cpu_subtrahend) % BYTE_MODULUS
        self.cpu_set_flag(1 if cpu_minuend >= cpu_subtrahend else 0)

    def cpu_left_shift_reg(self):
        """
        8stE - SHL  Vs

        Vt is ignored. The bit that falls off the left goes to VF.
        """
        cpu_source = (self.cpu_operand & X_MASK) >> 8
        self.cpu_set_flag((self.cpu_registers['v'][cpu_source] & 0x80) >> 7)
        self.cpu_registers['v'][cpu_source] = \
            (self.cpu_registers['v'][cpu_source] << 1) % BYTE_MODULUS

    def cpu_skip_if_reg_not_equal_reg(self):
        """
        9st0 - SKNE Vs, Vt
        """
        if self.cpu_operand & NIBBLE_MASK:
            raise self.cpu_unknown_opcode()
        cpu_source = (self.cpu_operand & X_MASK) >> 8
        cpu_target = (self.cpu_operand & Y_MASK) >> 4
        if self.cpu_registers['v'][cpu_source] != self.cpu_registers['v'][cpu_target]:
            self.cpu_registers['pc'] += 2

    def cpu_load_index_reg_with_value(self):
        # Annn - LOAD I, nnn
        self.cpu_registers['index'] = self.cpu_operand & ADDRESS_MASK

    def cpu_jump_to_v0_plus_value(self):
        """
        Bnnn - JUMP V0 + nnn

        The target can land past the end of memory (V0 = FF, nnn = FFF);
        that is reported by the next fetch, not here.
        """
        self.cpu_registers['pc'] = self.cpu_registers['v'][0] + (self.cpu_operand & ADDRESS_MASK)

    def cpu_generate_random_number(self):
        """
        Ctnn - RAND Vt, nn

        Vt = random byte AND nn. The byte comes from the injected random
        source so tests can pin it.
        """
        cpu_mask = self.cpu_operand & BYTE_MASK
        cpu_target = (self.cpu_operand & X_MASK) >> 8
        self.cpu_registers['v'][cpu_target] = cpu_mask & self.cpu_random_source()

    def cpu_draw_sprite(self):
        """
        Dstn - DRAW Vs, Vt, n

        Draws an 8 pixel wide, n row tall sprite read from memory starting at
        the index register, with its top left corner at (Vs, Vt). Each row is
        one byte and its most significant bit is the leftmost pixel. Set bits
        are XORed onto the screen, clear bits leave the screen alone, so
        drawing the same sprite twice erases it.

        VF is cleared first and becomes 1 if any pixel anywhere in the sprite
        went from on to off. Pixels past the right or bottom edge are
        dropped rather than wrapped. Sprite rows that would be read from past
        the end of memory are a fault, raised before anything is drawn.

        The redraw flag is raised even if nothing visible changed.
        """
        cpu_x_source = (self.cpu_operand & X_MASK) >> 8
        cpu_y_source = (self.cpu_operand & Y_MASK) >> 4
        cpu_x_pos = self.cpu_registers['v'][cpu_x_source]
        cpu_y_pos = self.cpu_registers['v'][cpu_y_source]
        cpu_num_rows = self.cpu_operand & NIBBLE_MASK
        cpu_index = self.cpu_registers['index']
        self.cpu_check_memory(cpu_index, cpu_num_rows)
        self.cpu_set_flag(0)

        for cpu_row in range(cpu_num_rows):
            cpu_row_bits = self.cpu_memory[cpu_index + cpu_row]
            cpu_y_coord = cpu_y_pos + cpu_row

            for cpu_column in range(SPRITE_WIDTH):
                if not cpu_row_bits & (0x80 >> cpu_column):
                    continue
                cpu_x_coord = cpu_x_pos + cpu_column
                if not self.cpu_frame_buffer.in_bounds(cpu_x_coord, cpu_y_coord):
                    continue
                if self.cpu_frame_buffer.toggle_pixel(cpu_x_coord, cpu_y_coord):
                    self.cpu_set_flag(1)

        self.cpu_redraw = True

    def cpu_check_key(self):
        cpu_source = (self.cpu_operand & X_MASK) >> 8
        cpu_key_number = self.cpu_registers['v'][cpu_source]
        if cpu_key_number >= NUM_KEYS:
            raise OutOfBoundsException(
                cpu_key_number, self.cpu_operand, self.cpu_operand_address, target='key')
        return self.cpu_keys[cpu_key_number]

    def cpu_skip_if_key_pressed(self):
        # Es9E - SKPR Vs
        if self.cpu_check_key():
            self.cpu_registers['pc'] += 2

    def cpu_skip_if_key_not_pressed(self):
        # EsA1 - SKUP Vs
        if not self.cpu_check_key():
            self.cpu_registers['pc'] += 2

    def cpu_move_delay_timer_into_reg(self):
        # Ft07 - LOAD Vt, DELAY
        cpu_target = (self.cpu_operand & X_MASK) >> 8
        self.cpu_registers['v'][cpu_target] = self.cpu_timers['delay']

    def cpu_wait_for_keypress(self):
        """
        Ft0A - KEYD Vt

        There is no separate waiting state. While every key is up the program
        counter is wound back onto this instruction, so the next cycle runs
        it again (and the timers keep counting down in between). The first
        cycle that sees a key down stores the lowest numbered pressed key in
        Vt and lets execution continue.
        """
        cpu_target = (self.cpu_operand & X_MASK) >> 8
        for cpu_key_number, cpu_pressed in enumerate(self.cpu_keys):
            if cpu_pressed:
                self.cpu_registers['v'][cpu_target] = cpu_key_number
                return
        self.cpu_registers['pc'] -= 2

    def cpu_move_reg_into_delay_timer(self):
        # Fs15 - LOAD DELAY, Vs
        cpu_source = (self.cpu_operand & X_MASK) >> 8
        self.cpu_timers['delay'] = self.cpu_registers['v'][cpu_source]

    def cpu_move_reg_into_sound_timer(self):
        # Fs18 - LOAD SOUND, Vs
        cpu_source = (self.cpu_operand & X_MASK) >> 8
        self.cpu_timers['sound'] = self.cpu_registers['v'][cpu_source]

    def cpu_add_reg_into_index(self):
        """
        Fs1E - ADD  I, Vs

        16 bit add that wraps; VF is not a carry here.
        """
        cpu_source = (self.cpu_operand & X_MASK) >> 8
        self.cpu_registers['index'] = \
            (self.cpu_registers['index'] + self.cpu_registers['v'][cpu_source]) & WORD_MASK

    def cpu_load_index_with_reg_sprite(self):
        """
        Fs29 - LOAD I, Vs

        Points the index at the built-in glyph for hex digit Vs. Glyphs are
        packed FONT_GLYPH_SIZE bytes apart from FONT_START.
        """
        cpu_source = (self.cpu_operand & X_MASK) >> 8
        self.cpu_registers['index'] = \
            FONT_START + self.cpu_registers['v'][cpu_source] * FONT_GLYPH_SIZE

    def cpu_store_bcd_in_memory(self):
        """
        Fs33 - BCD Vs

        Writes the three decimal digits of Vs, most significant first, to
        memory[I], memory[I + 1] and memory[I + 2]. 123 becomes 1, 2, 3 and
        7 becomes 0, 0, 7.
        """
        cpu_source = (self.cpu_operand & X_MASK) >> 8
        cpu_index = self.cpu_registers['index']
        self.cpu_check_memory(cpu_index, 3)
        cpu_value = self.cpu_registers['v'][cpu_source]
        self.cpu_memory[cpu_index] = cpu_value // 100
        self.cpu_memory[cpu_index + 1] = (cpu_value // 10) % 10
        self.cpu_memory[cpu_index + 2] = cpu_value % 10

    def cpu_store_regs_in_memory(self):
        """
        Fs55 - STOR [I], Vs

        Copies V0 up to and including Vs into memory at I. I is unchanged.
        """
        cpu_last = (self.cpu_operand & X_MASK) >> 8
        cpu_index = self.cpu_registers['index']
        self.cpu_check_memory(cpu_index, cpu_last + 1)
        self.cpu_memory[cpu_index:cpu_index + cpu_last + 1] = \
            bytes(self.cpu_registers['v'][:cpu_last + 1])

    def cpu_read_regs_from_memory(self):
        """
        Fs65 - LOAD Vs, [I]

        The inverse of Fs55: fills V0 up to and including Vs from memory at I.
        """
        cpu_last = (self.cpu_operand & X_MASK) >> 8
        cpu_index = self.cpu_registers['index']
        self.cpu_check_memory(cpu_index, cpu_last + 1)
        self.cpu_registers['v'][:cpu_last + 1] = \
            list(self.cpu_memory[cpu_index:cpu_index + cpu_last + 1])
