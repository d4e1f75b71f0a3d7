"""
pylc3.display - Text console window for PyLC3 based on Pygame.
"""

# PyLC3 imports
from pylc3.interface import CharacterOutput

# Pygame Imports
import pygame

# Logging setup
import logging
log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

# Constants
CONSOLE_COLUMNS = 80
CONSOLE_ROWS = 25

FONT_NAMES = "couriernew,courier,dejavusansmono,monospace"
FONT_SIZE = 16

GREEN = (0x00, 0xC0, 0x00)
BLACK = (0x00, 0x00, 0x00)

NEWLINE = 0x0A
CARRIAGE_RETURN = 0x0D
BACKSPACE = 0x08
TAB = 0x09
TAB_WIDTH = 8

# Classes
class ConsoleDisplay(CharacterOutput):
    """ A scrolling grid of characters written by the trap routines. """
    def __init__(self, columns = CONSOLE_COLUMNS, rows = CONSOLE_ROWS):
        self.columns = columns
        self.rows = rows
        self.lines = [bytearray(b" " * columns) for _ in range(rows)]
        self.cursor_row = 0
        self.cursor_column = 0
        
        self.screen = None
        self.font = None
        self.char_size = (0, 0)
        self.needs_draw = True
        
    def reset(self):
        pygame.init()
        self.font = pygame.font.SysFont(FONT_NAMES, FONT_SIZE)
        self.char_size = self.font.size("M")
        self.screen = pygame.display.set_mode(self.get_resolution())
        pygame.display.set_caption("PyLC3 Console")
        self.needs_draw = True
        
    def get_resolution(self):
        """ Returns a tuple (width, height) of the display size. """
        return self.columns * self.char_size[0], self.rows * self.char_size[1]
        
    def get_text(self):
        """ Return the visible text with trailing blanks removed from each line. """
        return "\n".join(line.decode("latin-1").rstrip() for line in self.lines).rstrip("\n")
        
    # CharacterOutput interface.
    def write_byte(self, value):
        value &= 0xFF
        if value == NEWLINE:
            self.new_line()
        elif value == CARRIAGE_RETURN:
            self.cursor_column = 0
        elif value == BACKSPACE:
            if self.cursor_column > 0:
                self.cursor_column -= 1
                self.lines[self.cursor_row][self.cursor_column] = 0x20
        elif value == TAB:
            for _ in range(TAB_WIDTH - (self.cursor_column % TAB_WIDTH)):
                self.put_char(0x20)
        elif value >= 0x20:
            self.put_char(value)
        self.needs_draw = True
        
    def flush(self):
        if self.screen is not None:
            self.draw()
            
    # Local functions.
    def put_char(self, value):
        """ Store a printable character at the cursor and advance, wrapping at the edge. """
        if self.cursor_column >= self.columns:
            self.new_line()
        self.lines[self.cursor_row][self.cursor_column] = value
        self.cursor_column += 1
        
    def new_line(self):
        """ Move the cursor to the start of the next line, scrolling if needed. """
        self.cursor_column = 0
        if self.cursor_row == self.rows - 1:
            self.lines.pop(0)
            self.lines.append(bytearray(b" " * self.columns))
        else:
            self.cursor_row += 1
            
    def draw(self):
        """ Update the "physical" display if necessary. """
        if not self.needs_draw or self.screen is None:
            return
            
        width, height = self.char_size
        self.screen.fill(BLACK)
        for row, line in enumerate(self.lines):
            text = line.decode("latin-1").rstrip()
            if text:
                self.screen.blit(self.font.render(text, True, GREEN, BLACK), (0, row * height))
                
        # Underline cursor.
        column = min(self.cursor_column, self.columns - 1)
        pygame.draw.rect(self.screen, GREEN, [column * width, ((self.cursor_row + 1) * height) - 2, width, 2])
        
        pygame.display.flip()
        self.needs_draw = False
