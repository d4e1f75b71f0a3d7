"""
pylc3.exceptions - PyLC3-specific exceptions.
"""

# Classes
class PyLC3Exception(Exception):
    """ Base class for all PyLC3 exceptions. """
    
class InvalidOpcodeException(PyLC3Exception):
    """ Exception raised when a reserved or unused opcode is encountered. """
    def __init__(self, opcode, address, instruction = None):
        super(InvalidOpcodeException, self).__init__()
        self.opcode = opcode
        self.address = address
        self.instruction = instruction
        
    def __str__(self):
        return "Invalid opcode: 0x%x at PC x%04x" % (self.opcode, self.address)
        
class InvalidTrapException(PyLC3Exception):
    """ Exception raised when a TRAP instruction uses an unknown vector. """
    def __init__(self, vector, address):
        super(InvalidTrapException, self).__init__()
        self.vector = vector
        self.address = address
        
    def __str__(self):
        return "Invalid trap vector: x%02x at PC x%04x" % (self.vector, self.address)
        
class ImageLoadException(PyLC3Exception):
    """ Exception raised when a program image can't be read. """
    def __init__(self, filename, reason):
        super(ImageLoadException, self).__init__()
        self.filename = filename
        self.reason = reason
        
    def __str__(self):
        return "Failed to load image %s: %s" % (self.filename, self.reason)
        
class InputClosedException(PyLC3Exception):
    """ Exception raised when the character input source has no more data. """
