"""
pylc3.machine - A complete LC-3 machine: memory, keyboard, CPU and trap routines.
"""

# PyLC3 imports
from pylc3.bus import SystemBus
from pylc3.constants import PC_START
from pylc3.cpu import CPU
from pylc3.keyboard import KeyboardDevice
from pylc3.memory import RAM
from pylc3.traps import TrapController

# Logging setup
import logging
log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

# Classes
class Machine(object):
    """
    Owns all of the state of one simulated LC-3.
    
    source is a CharacterInput used by the keyboard registers and the input traps,
    sink is a CharacterOutput used by the output traps.  They are often the same object.
    """
    def __init__(self, source, sink, start_address = PC_START):
        self.source = source
        self.sink = sink
        self.start_address = start_address
        
        self.bus = SystemBus()
        self.ram = RAM()
        self.bus.install_memory(self.ram)
        
        self.keyboard = KeyboardDevice(source)
        self.bus.install_device(self.keyboard)
        
        self.cpu = CPU()
        self.cpu.install_bus(self.bus)
        self.cpu.install_traps(TrapController(source, sink))
        self.cpu.reset(start_address)
        
    @property
    def halted(self):
        """ True once the CPU has stopped. """
        return self.cpu.hlt
        
    def load_image(self, filename):
        """ Load a program image file into memory, returns (origin, number of words). """
        return self.ram.load_from_file(filename)
        
    def load_image_data(self, data):
        """ Load a program image from bytes, returns (origin, number of words). """
        return self.ram.load_image(data)
        
    def reset(self, pc = None):
        """ Reset the CPU and devices, memory contents are kept. """
        self.bus.reset()
        self.cpu.reset(self.start_address if pc is None else pc)
        
    def run(self, limit = None, fetch = None):
        """
        Run until the CPU halts or limit instructions have executed.
        
        fetch can be supplied to run through something wrapping the CPU, like the
        debugger.  Returns the number of instructions executed.
        """
        if fetch is None:
            fetch = self.cpu.fetch
            
        count = 0
        while not self.cpu.hlt:
            if limit is not None and count >= limit:
                break
            count += 1
            fetch()
        return count
        
    def shutdown(self):
        """ Flush output and return the console to its normal state.  Safe to call more than once. """
        self.sink.flush()
        for device in (self.source, self.sink):
            restore = getattr(device, "restore_input_buffering", None)
            if restore is not None:
                restore()
