"""
pylc3.helpers - A collection of helper functions used throughout PyLC3.
"""

# Standard library imports
import struct

# PyLC3 imports
from pylc3.constants import WORD_MASK

# Constants
SIGNED_WORD = struct.Struct("<h")
UNSIGNED_WORD = struct.Struct("<H")

# Functions
def sign_extend(value, bit_count):
    """ Sign extend a bit_count wide two's complement field into a 16 bit word. """
    if (value >> (bit_count - 1)) & 0x1:
        value |= (WORD_MASK << bit_count)
    return value & WORD_MASK
    
def signed_word(value):
    """ Interpret an unsigned word as a signed word. """
    return SIGNED_WORD.unpack(UNSIGNED_WORD.pack(value & WORD_MASK))[0]
    
def word_to_bytes(value):
    """ Convert a word into a tuple of 2 bytes (low, high). """
    if value < 0 or value > 0xFFFF:
        raise ValueError("value must be in the range [0, 0xFFFF]!")
    return (value & 0x00FF), ((value & 0xFF00) >> 8)
    
def parse_number(text):
    """
    Parse a number written in LC-3 or Python notation.
    
    Accepts x3000, 0x3000, #12, b1010, 0b1010 and plain decimal.  Raises ValueError
    for anything else.
    """
    text = text.strip()
    lowered = text.lower()
    if lowered.startswith("-"):
        return -parse_number(text[1:])
    if lowered.startswith("0x") or lowered.startswith("0b"):
        return int(lowered, 0)
    if lowered.startswith("x"):
        return int(lowered[1:], 16)
    if lowered.startswith("b") and len(lowered) > 1:
        return int(lowered[1:], 2)
    if lowered.startswith("#"):
        return int(lowered[1:], 10)
    return int(lowered, 10)
    
def parse_address(text):
    """ Parse a number with parse_number() and wrap it into the 16 bit address space. """
    return parse_number(text) & WORD_MASK
    
def printable_char(value):
    """ Return a printable representation of the low byte of value, "." if not printable. """
    value = value & 0xFF
    return chr(value) if 0x20 <= value < 0x7F else "."
