import unittest

from pylc3.exceptions import ImageLoadException
from pylc3.machine import Machine
from pylc3.tests.utils import ConsoleSpy, MachineTestable, get_test_file

class MachineTests(unittest.TestCase):
    def setUp(self):
        self.machine = MachineTestable()
        
    def test_initial_state(self):
        self.assertEqual(self.machine.cpu.regs.PC, 0x3000)
        self.assertFalse(self.machine.halted)
        self.assertIs(self.machine.cpu.bus, self.machine.bus)
        self.assertIs(self.machine.bus.ram, self.machine.ram)
        
    def test_custom_start_address(self):
        machine = MachineTestable(start_address = 0x0200)
        self.assertEqual(machine.cpu.regs.PC, 0x0200)
        
    def test_halt_image_runs_one_instruction(self):
        self.assertEqual(self.machine.load_image_data(b"\x30\x00\xf0\x25"), (0x3000, 1))
        self.assertEqual(self.machine.run(), 1)
        self.assertTrue(self.machine.halted)
        self.assertEqual(self.machine.get_output(), b"HALT\n")
        
    def test_hello_image(self):
        self.machine.load_image(get_test_file(self, "hello.obj"))
        self.assertEqual(self.machine.run(), 3)
        self.assertEqual(self.machine.get_output(), b"HiHALT\n")
        
    def test_halt_image_file(self):
        self.assertEqual(self.machine.load_image(get_test_file(self, "halt.obj")), (0x3000, 1))
        self.assertEqual(self.machine.run(), 1)
        
    def test_missing_image(self):
        with self.assertRaises(ImageLoadException):
            self.machine.load_image(get_test_file(self, "nope.obj"))
            
    def test_run_limit(self):
        # ADD R0, R0, #1 / BRnzp #-2 loops forever.
        self.machine.write_program(0x1021, 0x0FFE)
        self.assertEqual(self.machine.run(101), 101)
        self.assertEqual(self.machine.cpu.regs.R0, 51)
        self.assertFalse(self.machine.halted)
        
    def test_run_with_custom_fetch(self):
        fetched = []
        
        def fetch():
            fetched.append(self.machine.cpu.regs.PC)
            self.machine.cpu.fetch()
            
        self.machine.write_program(0x1021, 0xF025)
        self.assertEqual(self.machine.run(fetch = fetch), 2)
        self.assertEqual(fetched, [0x3000, 0x3001])
        
    def test_reset_keeps_memory(self):
        self.machine.write_program(0xF025)
        self.machine.run()
        self.machine.reset()
        self.assertFalse(self.machine.halted)
        self.assertEqual(self.machine.cpu.regs.PC, 0x3000)
        self.assertEqual(self.machine.bus.mem_read_word(0x3000), 0xF025)
        
    def test_shutdown_restores_console(self):
        self.machine.shutdown()
        self.machine.shutdown()
        self.assertEqual(self.machine.console.flush_count, 2)
        # Same object is both source and sink.
        self.assertEqual(self.machine.console.restore_count, 4)
        
    def test_machines_are_independent(self):
        other = MachineTestable()
        self.machine.bus.mem_write_word(0x4000, 0x1234)
        self.machine.cpu.regs.R1 = 0x0042
        self.assertEqual(other.bus.mem_read_word(0x4000), 0)
        self.assertEqual(other.cpu.regs.R1, 0)
        
    def test_keyboard_polling_program(self):
        # Spin on KBSR until a key arrives, then load KBDR into R0 and halt.
        machine = MachineTestable(typed = b"!")
        machine.write_program(
            0xA203, # x3000 LDI R1, KBSR_PTR
            0x07FE, # x3001 BRzp x3000
            0xA002, # x3002 LDI R0, KBDR_PTR
            0xF025, # x3003 HALT
            0xFE00, # x3004 KBSR_PTR
            0xFE02, # x3005 KBDR_PTR
        )
        machine.run()
        self.assertEqual(machine.cpu.regs.R0, ord("!"))
        
class SeparateSourceAndSinkTests(unittest.TestCase):
    def test_separate_devices(self):
        source = ConsoleSpy(b"a")
        sink = ConsoleSpy()
        machine = Machine(source, sink)
        machine.bus.mem_write_word(0x3000, 0xF023) # IN
        machine.bus.mem_write_word(0x3001, 0xF025) # HALT
        machine.run()
        self.assertEqual(bytes(sink.output), b"Enter a character: aHALT\n")
        self.assertEqual(source.output, bytearray())
        machine.shutdown()
        self.assertEqual(source.restore_count, 1)
        self.assertEqual(sink.restore_count, 1)
