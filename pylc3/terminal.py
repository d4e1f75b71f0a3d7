"""
pylc3.terminal - Host terminal console for PyLC3.

Reads keys from stdin and writes characters to stdout.  When stdin is a terminal it is
put in cbreak mode (no line buffering, no echo) for as long as the console is entered.
"""

# Standard library imports
import os
import sys
import select
import termios
import tty

# PyLC3 imports
from pylc3.exceptions import InputClosedException
from pylc3.interface import CharacterInput, CharacterOutput

# Logging setup
import logging
log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

# Classes
class TerminalConsole(CharacterInput, CharacterOutput):
    """ Console using the process standard streams. """
    def __init__(self, input_file = None, output_file = None):
        self.input_file = input_file if input_file is not None else sys.stdin
        self.output_file = output_file if output_file is not None else sys.stdout.buffer
        self.saved_attributes = None
        
    def __enter__(self):
        self.disable_input_buffering()
        return self
        
    def __exit__(self, exc_type, exc_value, traceback):
        self.restore_input_buffering()
        
    def disable_input_buffering(self):
        """ Switch a terminal on stdin into cbreak mode, remembering the old settings. """
        fd = self.input_file.fileno()
        if not os.isatty(fd) or self.saved_attributes is not None:
            return
            
        self.saved_attributes = termios.tcgetattr(fd)
        tty.setcbreak(fd, termios.TCSANOW)
        log.debug("Terminal switched to cbreak mode.")
        
    def restore_input_buffering(self):
        """ Put the terminal back the way it was found. """
        if self.saved_attributes is None:
            return
            
        termios.tcsetattr(self.input_file.fileno(), termios.TCSANOW, self.saved_attributes)
        self.saved_attributes = None
        log.debug("Terminal settings restored.")
        
    # CharacterInput interface.
    def key_available(self):
        readable, _, _ = select.select([self.input_file], [], [], 0)
        return len(readable) > 0
        
    def read_key(self):
        data = os.read(self.input_file.fileno(), 1)
        if not data:
            raise InputClosedException("End of input reached.")
        return data[0]
        
    # CharacterOutput interface.
    def write_byte(self, value):
        self.output_file.write(bytes((value & 0xFF,)))
        
    def flush(self):
        self.output_file.flush()
