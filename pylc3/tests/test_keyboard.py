import unittest

from pylc3.bus import SystemBus
from pylc3.constants import KBSR, KBDR, KEYBOARD_READY
from pylc3.keyboard import *
from pylc3.memory import RAM
from pylc3.tests.utils import ConsoleSpy

class KeyboardDeviceTests(unittest.TestCase):
    def setUp(self):
        self.console = ConsoleSpy()
        self.keyboard = KeyboardDevice(self.console)
        
        self.bus = SystemBus()
        self.bus.install_memory(RAM())
        self.bus.install_device(self.keyboard)
        
    def test_address_list(self):
        self.assertEqual(self.keyboard.get_mapped_addresses(), [0xFE00, 0xFE02])
        
    def test_initial_state(self):
        self.assertEqual(self.keyboard.status, 0)
        self.assertEqual(self.keyboard.data, 0)
        
    def test_status_clear_without_input(self):
        self.keyboard.status = KEYBOARD_READY
        self.assertEqual(self.bus.mem_read_word(KBSR), 0)
        
    def test_status_read_latches_character(self):
        self.console.type_keys(b"a")
        self.assertEqual(self.bus.mem_read_word(KBSR), 0x8000)
        self.assertEqual(self.bus.mem_read_word(KBDR), ord("a"))
        self.assertFalse(self.console.key_available())
        
    def test_data_read_does_not_poll(self):
        self.console.type_keys(b"a")
        self.assertEqual(self.bus.mem_read_word(KBDR), 0)
        self.assertTrue(self.console.key_available())
        
    def test_one_character_per_status_read(self):
        self.console.type_keys(b"xy")
        self.bus.mem_read_word(KBSR)
        self.assertEqual(self.bus.mem_read_word(KBDR), ord("x"))
        self.bus.mem_read_word(KBSR)
        self.assertEqual(self.bus.mem_read_word(KBDR), ord("y"))
        self.assertEqual(self.bus.mem_read_word(KBSR), 0)
        
        # The last character stays in the data register.
        self.assertEqual(self.bus.mem_read_word(KBDR), ord("y"))
        
    def test_peek_does_not_poll(self):
        self.console.type_keys(b"a")
        self.assertEqual(self.bus.mem_peek_word(KBSR), 0)
        self.assertTrue(self.console.key_available())
        
    def test_writes_store(self):
        self.bus.mem_write_word(KBSR, 0x1234)
        self.bus.mem_write_word(KBDR, 0x0041)
        self.assertEqual(self.keyboard.status, 0x1234)
        self.assertEqual(self.keyboard.data, 0x0041)
        
    def test_reset(self):
        self.keyboard.status = KEYBOARD_READY
        self.keyboard.data = 0x41
        self.bus.reset()
        self.assertEqual(self.keyboard.status, 0)
        self.assertEqual(self.keyboard.data, 0)
