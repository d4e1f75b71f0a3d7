"""
pylc3.tests.utils - Helpers for writing unit tests.
"""

import os
import inspect
from collections import deque

from pylc3.exceptions import InputClosedException
from pylc3.interface import CharacterInput, CharacterOutput
from pylc3.machine import Machine

def get_test_file(suite, filename):
    """ Get the path to a test file for a given suite. """
    return os.path.join(
        os.path.dirname(inspect.getfile(suite.__class__)),
        "files",
        filename,
    )
    
class ConsoleSpy(CharacterInput, CharacterOutput):
    """ Stubs out the console for testing, input is queued up front and output collected. """
    def __init__(self, typed = b""):
        self.pending = deque(bytearray(typed))
        self.output = bytearray()
        self.flush_count = 0
        self.restore_count = 0
        self.disable_count = 0
        
    def type_keys(self, typed):
        self.pending.extend(bytearray(typed))
        
    def key_available(self):
        return len(self.pending) > 0
        
    def read_key(self):
        if not self.pending:
            raise InputClosedException("No more test input.")
        return self.pending.popleft()
        
    def write_byte(self, value):
        self.output.append(value)
        
    def flush(self):
        self.flush_count += 1
        
    def disable_input_buffering(self):
        self.disable_count += 1
        
    def restore_input_buffering(self):
        self.restore_count += 1
        
class MachineTestable(Machine):
    """ Machine wired to a ConsoleSpy for unit testing. """
    def __init__(self, typed = b"", **kwargs):
        self.console = ConsoleSpy(typed)
        super(MachineTestable, self).__init__(self.console, self.console, **kwargs)
        
    def write_program(self, *words, **kwargs):
        """ Write instruction words into memory starting at the PC (or origin). """
        origin = kwargs.get("origin", self.cpu.regs.PC)
        for offset, word in enumerate(words):
            self.bus.mem_write_word(origin + offset, word)
            
    def get_output(self):
        return bytes(self.console.output)
