"""
pylc3.ui - Pygame wrapper for PyLC3.
"""

# Standard library imports
import sys
from collections import deque

# PyGame Imports
import pygame
from pygame.locals import *

# PyLC3 imports
from pylc3.interface import CharacterInput

# Logging setup
import logging
log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

# Constants
UPDATE_DISPLAY = USEREVENT + 0
UPDATE_INTERVAL_MS = 20
KEY_WAIT_MS = 10

PYGAME_KEY_TO_ASCII = {
    # Pylint cannot infer the constants from Pygame.
    # pylint: disable=undefined-variable
    K_RETURN : 0x0A,
    K_KP_ENTER : 0x0A,
    K_BACKSPACE : 0x08,
    K_TAB : 0x09,
    K_ESCAPE : 0x1B,
    K_DELETE : 0x7F,
    # pylint: enable=undefined-variable
}

# Functions
def translate_key(event):
    """ Convert a Pygame KEYDOWN event into an ASCII code, None if it has no character. """
    value = PYGAME_KEY_TO_ASCII.get(event.key, None)
    if value is not None:
        return value
        
    text = getattr(event, "unicode", "")
    if len(text) == 1 and ord(text) < 0x80:
        return ord(text)
    return None
    
# Classes
class PygameKeyboard(CharacterInput):
    """ Queue of characters typed into the Pygame window. """
    def __init__(self):
        self.pending = deque()
        self.manager = None
        
    def key_pressed(self, value):
        """ Function called when a key has been translated to a character. """
        self.pending.append(value)
        
    # CharacterInput interface.
    def key_available(self):
        return len(self.pending) > 0
        
    def read_key(self):
        # Keep the window alive while a trap waits for input.
        while not self.pending:
            self.manager.poll()
            pygame.time.wait(KEY_WAIT_MS)
        return self.pending.popleft()
        
class PygameManager(object):
    """ Manages interactions with the Pygame UI for PyLC3. """
    def __init__(self, keyboard, display):
        self.keyboard = keyboard
        self.keyboard.manager = self
        self.display = display
        self.display.reset()
        pygame.time.set_timer(UPDATE_DISPLAY, UPDATE_INTERVAL_MS)
        
    def poll(self):
        """ Run one iteration of the Pygame machine. """
        for event in pygame.event.get():
            if event.type == QUIT:
                log.critical("Pygame QUIT detected, powering down...")
                sys.exit()
                
            elif event.type == KEYDOWN:
                value = translate_key(event)
                if value is not None:
                    self.keyboard.key_pressed(value)
                    
            elif event.type == UPDATE_DISPLAY:
                self.display.draw()
