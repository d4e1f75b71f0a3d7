"""
pylc3.keyboard - Memory mapped keyboard status and data registers for PyLC3.
"""

# PyLC3 imports
from pylc3.bus import Device
from pylc3.constants import KBSR, KBDR, KEYBOARD_READY, WORD_MASK

# Logging setup
import logging
log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

# Classes
class KeyboardDevice(Device):
    """ Polled keyboard interface at KBSR/KBDR backed by a CharacterInput. """
    def __init__(self, source, **kwargs):
        super(KeyboardDevice, self).__init__(**kwargs)
        self.source = source
        self.status = 0x0000
        self.data = 0x0000
        
    def __repr__(self):
        return "<%s(status=0x%04x, data=0x%04x)>" % (self.__class__.__name__, self.status, self.data)
        
    def reset(self):
        self.status = 0x0000
        self.data = 0x0000
        
    # Device interface.
    def get_mapped_addresses(self):
        return [KBSR, KBDR]
        
    def mem_read_word(self, address):
        if address == KBSR:
            self.poll()
            return self.status
        return self.data
        
    def mem_peek_word(self, address):
        return self.status if address == KBSR else self.data
        
    def mem_write_word(self, address, value):
        if address == KBSR:
            self.status = value
        else:
            self.data = value
            
    # Local functions.
    def poll(self):
        """ Check the input source without blocking and latch a pending character. """
        if self.source.key_available():
            self.status = KEYBOARD_READY
            self.data = self.source.read_key() & WORD_MASK
            log.debug("Keyboard latched 0x%02x.", self.data)
        else:
            self.status = 0x0000
