"""
pylc3.bus - System bus and device interface for PyLC3.
"""

# PyLC3 imports
from pylc3.constants import WORD_MASK

# Logging setup
import logging
log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

# Classes
class Device(object):
    """ Base class for a device on the system bus. """
    def __init__(self):
        self.bus = None
        
    # Common stuff.
    def install(self, bus):
        """ Install this device into the supplied system bus. """
        self.bus = bus
        
    def reset(self):
        """ Called to reset the device at the beginning of time. """
        pass
        
    # Memory bus.
    def get_mapped_addresses(self): # pylint: disable=no-self-use
        """ Return a list of addresses claimed by this device. """
        return []
        
    def mem_read_word(self, address):
        """ Read a word from the supplied address. """
        raise NotImplementedError("This device doesn't support memory mapping.")
        
    def mem_peek_word(self, address):
        """ Read a word from the supplied address without any side effects. """
        return self.mem_read_word(address)
        
    def mem_write_word(self, address, value):
        """ Write a word to the supplied address. """
        raise NotImplementedError("This device doesn't support memory mapping.")
        
class SystemBus(object):
    """ The main system bus for PyLC3 including RAM and memory mapped devices. """
    def __init__(self):
        self.ram = None
        self.devices = []
        self.mmio_decoder = {}
        
        self.debugger = None
        
    def install_memory(self, ram):
        """ Install the main memory used for every address not claimed by a device. """
        ram.install(self)
        self.ram = ram
        
    def install_device(self, device):
        """ Install a memory mapped device into the system bus. """
        device.install(self)
        self.devices.append(device)
        for address in device.get_mapped_addresses():
            if address in self.mmio_decoder:
                log.warning("Address x%04x already claimed by %r, replacing with %r.",
                            address, self.mmio_decoder[address], device)
            self.mmio_decoder[address] = device
            
    def reset(self):
        """ Reset every installed device. """
        if self.ram is not None:
            self.ram.reset()
        for device in self.devices:
            device.reset()
            
    def mem_read_word(self, address):
        """ Read a word from the supplied memory address. """
        address &= WORD_MASK
        device = self.mmio_decoder.get(address, None)
        if device is not None:
            return device.mem_read_word(address)
        return self.ram.mem_read_word(address)
        
    def mem_peek_word(self, address):
        """ Read a word from the supplied address without triggering device side effects. """
        address &= WORD_MASK
        device = self.mmio_decoder.get(address, None)
        if device is not None:
            return device.mem_peek_word(address)
        return self.ram.mem_read_word(address)
        
    def mem_write_word(self, address, value):
        """ Write a word to the supplied memory address. """
        address &= WORD_MASK
        value &= WORD_MASK
        device = self.mmio_decoder.get(address, None)
        if device is not None:
            device.mem_write_word(address, value)
        else:
            self.ram.mem_write_word(address, value)
            
    def force_debugger_break(self, message = None):
        """ Force the debugger to break into single step mode. """
        if self.debugger is not None:
            if message:
                log.critical("Force break: %s", message)
                
            self.debugger.single_step = True
