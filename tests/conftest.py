import pytest

from chip8.cpu import CPU

# Value returned by the deterministic random source used in tests
RANDOM_BYTE = 0xAB


def opcodes_to_rom(*opcodes):
    return b''.join(opcode.to_bytes(2, 'big') for opcode in opcodes)


@pytest.fixture
def assemble():
    """Turns a list of 16-bit opcodes into big-endian ROM bytes."""
    return opcodes_to_rom


@pytest.fixture
def cpu():
    """An initialized CPU whose random source always returns RANDOM_BYTE."""
    project_cpu = CPU(random_source=lambda: RANDOM_BYTE)
    project_cpu.cpu_initialize()
    return project_cpu


@pytest.fixture
def load_program(cpu):
    """Loads opcodes at the program start and returns the CPU."""
    def _load(*opcodes):
        cpu.cpu_load_rom(opcodes_to_rom(*opcodes))
        return cpu
    return _load
