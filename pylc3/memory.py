"""
pylc3.memory - Main memory and program image loading for PyLC3.

A program image is a stream of big-endian words.  The first word is the origin
and every following word is copied into consecutive addresses starting there.
"""

# Standard library imports
import array
import struct

# PyLC3 imports
from pylc3.bus import Device
from pylc3.constants import MEMORY_SIZE, WORD_MASK
from pylc3.exceptions import ImageLoadException

# Logging setup
import logging
log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

# Constants
IMAGE_WORD = struct.Struct(">H")

# Functions
def parse_image(data):
    """
    Split raw image bytes into (origin, words).
    
    Returns (None, []) if the data doesn't even contain an origin.  A trailing odd byte
    is dropped and no more words are returned than fit between the origin and the end
    of memory.
    """
    if len(data) < IMAGE_WORD.size:
        return None, []
        
    origin = IMAGE_WORD.unpack_from(data, 0)[0]
    count = min((len(data) - IMAGE_WORD.size) // IMAGE_WORD.size, MEMORY_SIZE - origin)
    words = list(struct.unpack_from(">%dH" % count, data, IMAGE_WORD.size))
    return origin, words
    
# Classes
class RAM(Device): # pylint:disable=abstract-method
    """ A device emulating the 64K words of LC-3 memory. """
    def __init__(self, size = MEMORY_SIZE, **kwargs):
        super(RAM, self).__init__(**kwargs)
        self.contents = array.array("H", (0,) * size)
        
        # Inline these calls directly to the array object for speed.
        self.mem_read_word = self.contents.__getitem__
        
    def __repr__(self):
        return "<%s(size=0x%x)>" % (self.__class__.__name__, len(self.contents))
        
    def get_memory_size(self):
        """ Return the number of words in this device. """
        return len(self.contents)
        
    def mem_write_word(self, address, value):
        self.contents[address] = value & WORD_MASK
        
    def load_image(self, data):
        """ Load an image from a bytes object, returns (origin, number of words loaded). """
        origin, words = parse_image(data)
        if origin is None:
            log.warning("Image too short to contain an origin, nothing loaded.")
            return None, 0
            
        self.contents[origin:origin + len(words)] = array.array("H", words)
        return origin, len(words)
        
    def load_from_fileptr(self, fileptr):
        """ Load an image from an open binary file object. """
        return self.load_image(fileptr.read())
        
    def load_from_file(self, filename):
        """ Load this RAM with the contents of an image file. """
        try:
            with open(filename, "rb") as fileptr:
                origin, count = self.load_from_fileptr(fileptr)
        except (IOError, OSError) as err:
            raise ImageLoadException(filename, err.strerror or str(err))
            
        if origin is not None:
            log.info("Loaded %d words from %s at x%04x.", count, filename, origin)
        return origin, count
