"""
pylc3.constants - A collection of constants used throughout PyLC3.
"""

MEMORY_SIZE = 0x10000

WORD_MASK = 0xFFFF
BYTE_MASK = 0xFF
SIGN_BIT = 0x8000

# Programs are expected to start here unless told otherwise.
PC_START = 0x3000

# Memory mapped registers.
KBSR = 0xFE00 # Keyboard status.
KBDR = 0xFE02 # Keyboard data.

KEYBOARD_READY = 1 << 15
