"""
pylc3.interface - Interfaces for the character devices used by the keyboard and trap routines.
"""

# Classes
class CharacterInput(object):
    """ Interface for a source of typed characters. """
    
    def key_available(self):
        """ Returns True if a character can be read without blocking. """
        raise NotImplementedError
        
    def read_key(self):
        """ Block until a character is available and return its numeric value. """
        raise NotImplementedError
        
class CharacterOutput(object):
    """ Interface for a sink of output characters. """
    
    def write_byte(self, value):
        """ Output a single byte. """
        raise NotImplementedError
        
    def flush(self):
        """ Make sure everything written so far is visible. """
        raise NotImplementedError
