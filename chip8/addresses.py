# The total amount of memory to allocate for the emulator
MAX_MEMORY = 4096

# Where the program counter should originally point. ROMs are loaded here.
PROGRAM_COUNTER_START = 0x200

# The largest ROM that fits between the program start and the end of memory
MAX_ROM_SIZE = MAX_MEMORY - PROGRAM_COUNTER_START

# The total number of registers in the Chip 8 CPU
NUM_REGISTERS = 0x10

# Register VF doubles as the carry, borrow and collision flag
FLAG_REGISTER = 0xF

# Number of return addresses the call stack can hold
STACK_DEPTH = 16

# Number of keys on the hex keypad
NUM_KEYS = 16

# Screen geometry in pixels
SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32

# Every sprite is one byte wide
SPRITE_WIDTH = 8

# Where the built-in font lives, and how many bytes each glyph takes
FONT_START = 0x000
FONT_GLYPH_SIZE = 5

# The hex digit glyphs 0-F, installed at FONT_START on reset
FONT_SET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])

# Operand masks. An operand is laid out as four nibbles:
#
#    Bits:  15-12     11-8      7-4       3-0
#           family     x         y         n
OPERATION_MASK = 0xF000
X_MASK = 0x0F00
Y_MASK = 0x00F0
NIBBLE_MASK = 0x000F
BYTE_MASK = 0x00FF
ADDRESS_MASK = 0x0FFF

# Widths used to wrap arithmetic
BYTE_MODULUS = 0x100
WORD_MASK = 0xFFFF
