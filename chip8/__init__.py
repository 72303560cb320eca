"""
A CHIP-8 interpreter: the CPU core plus a pygame host to run ROMs with.
"""

__version__ = "1.0.0"
