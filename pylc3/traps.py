"""
pylc3.traps - TRAP service routines for PyLC3.

These are implemented in Python rather than as LC-3 code in a system image, the TRAP
opcode dispatches straight to them using the 8 bit trap vector.
"""

# PyLC3 imports
from pylc3.constants import WORD_MASK, BYTE_MASK
from pylc3.exceptions import InvalidTrapException
from pylc3.helpers import word_to_bytes

# Logging setup
import logging
log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

# Constants
TRAP_GETC = 0x20 # Read a character, not echoed.
TRAP_OUT = 0x21 # Write the character in R0.
TRAP_PUTS = 0x22 # Write a string, one character per word.
TRAP_IN = 0x23 # Prompt for and read a character, echoed.
TRAP_PUTSP = 0x24 # Write a string, two characters per word.
TRAP_HALT = 0x25 # Stop the machine.

TRAP_NAMES = {
    TRAP_GETC : "GETC",
    TRAP_OUT : "OUT",
    TRAP_PUTS : "PUTS",
    TRAP_IN : "IN",
    TRAP_PUTSP : "PUTSP",
    TRAP_HALT : "HALT",
}

IN_PROMPT = b"Enter a character: "
HALT_MESSAGE = b"HALT\n"

# Classes
class TrapController(object):
    """ Services TRAP instructions using a character input source and output sink. """
    def __init__(self, source, sink):
        self.cpu = None
        self.source = source
        self.sink = sink
        
        self.trap_vector_table = {
            TRAP_GETC : self.trap_getc,
            TRAP_OUT : self.trap_out,
            TRAP_PUTS : self.trap_puts,
            TRAP_IN : self.trap_in,
            TRAP_PUTSP : self.trap_putsp,
            TRAP_HALT : self.trap_halt,
        }
        
    def install(self, cpu):
        """ Attach these trap routines to a CPU. """
        self.cpu = cpu
        
    def execute(self, vector):
        """ Run the trap routine for the supplied 8 bit vector. """
        handler = self.trap_vector_table.get(vector, None)
        if handler is None:
            self.signal_invalid_trap(vector)
        handler()
        
    def signal_invalid_trap(self, vector):
        """ Unknown trap vector handler. """
        address = (self.cpu.regs.PC - 1) & WORD_MASK
        log.error("Invalid trap vector: x%02x at PC x%04x", vector, address)
        self.cpu.hlt = True
        raise InvalidTrapException(vector, address)
        
    # Local functions.
    def write_string(self, data):
        """ Write a bytes object to the output. """
        for value in data:
            self.sink.write_byte(value)
            
    def read_string_words(self):
        """ Generate the words of a zero terminated string starting at the address in R0. """
        address = self.cpu.regs.R0
        value = self.cpu.bus.mem_peek_word(address)
        while value:
            yield value
            address = (address + 1) & WORD_MASK
            value = self.cpu.bus.mem_peek_word(address)
            
    # ********** Trap routines. **********
    def trap_getc(self):
        """ GETC - Read a single character into R0 without echoing it. """
        self.cpu.regs.R0 = self.source.read_key() & WORD_MASK
        
    def trap_out(self):
        """ OUT - Write the character in R0[7:0]. """
        self.sink.write_byte(self.cpu.regs.R0 & BYTE_MASK)
        self.sink.flush()
        
    def trap_puts(self):
        """ PUTS - Write the string at R0, one character per word. """
        for value in self.read_string_words():
            self.sink.write_byte(value & BYTE_MASK)
        self.sink.flush()
        
    def trap_in(self):
        """ IN - Prompt for a character, echo it and store it in R0. """
        self.write_string(IN_PROMPT)
        self.sink.flush()
        value = self.source.read_key() & WORD_MASK
        self.sink.write_byte(value & BYTE_MASK)
        self.sink.flush()
        self.cpu.regs.R0 = value
        
    def trap_putsp(self):
        """ PUTSP - Write the string at R0, two characters per word, low byte first. """
        for value in self.read_string_words():
            # A zero low byte is written too, the loop only stops on a zero word.
            low, high = word_to_bytes(value)
            self.sink.write_byte(low)
            if high:
                self.sink.write_byte(high)
        self.sink.flush()
        
    def trap_halt(self):
        """ HALT - Print the halt notice and stop the CPU. """
        self.write_string(HALT_MESSAGE)
        self.sink.flush()
        log.info("HALT at PC x%04x", (self.cpu.regs.PC - 1) & WORD_MASK)
        self.cpu.hlt = True
