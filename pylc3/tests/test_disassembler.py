import unittest

from pylc3.disassembler import disassemble

class DisassemblerTests(unittest.TestCase):
    def test_operate(self):
        data = [
            (0x1065, "ADD R0, R1, #5"),
            (0x1042, "ADD R0, R1, R2"),
            (0x14BF, "ADD R2, R2, #-1"),
            (0x5020, "AND R0, R0, #0"),
            (0x5642, "AND R3, R1, R2"),
            (0x923F, "NOT R1, R0"),
        ]
        for instruction, expected in data:
            self.assertEqual(disassemble(instruction), expected)
            
    def test_branches(self):
        data = [
            (0x0402, "BRz #2"),
            (0x0FFF, "BR #-1"),
            (0x0A05, "BRnp #5"),
            (0x0000, "NOP"),
        ]
        for instruction, expected in data:
            self.assertEqual(disassemble(instruction), expected)
            
    def test_branch_with_address(self):
        self.assertEqual(disassemble(0x0402, 0x3000), "BRz x3003")
        self.assertEqual(disassemble(0x0FFF, 0x3000), "BR x3000")
        
    def test_jumps(self):
        self.assertEqual(disassemble(0xC080), "JMP R2")
        self.assertEqual(disassemble(0xC1C0), "RET")
        self.assertEqual(disassemble(0x4804, 0x3000), "JSR x3005")
        self.assertEqual(disassemble(0x4FFE), "JSR #-2")
        self.assertEqual(disassemble(0x40C0), "JSRR R3")
        
    def test_memory(self):
        data = [
            (0x2001, "LD R0, x3002"),
            (0xA001, "LDI R0, x3002"),
            (0xE002, "LEA R0, x3003"),
            (0x3001, "ST R0, x3002"),
            (0xB201, "STI R1, x3002"),
        ]
        for instruction, expected in data:
            self.assertEqual(disassemble(instruction, 0x3000), expected)
            
    def test_base_offset(self):
        self.assertEqual(disassemble(0x607F), "LDR R0, R1, #-1")
        self.assertEqual(disassemble(0x74C4), "STR R2, R3, #4")
        
    def test_traps(self):
        self.assertEqual(disassemble(0xF025), "HALT")
        self.assertEqual(disassemble(0xF020), "GETC")
        self.assertEqual(disassemble(0xF030), "TRAP x30")
        
    def test_unused_opcodes(self):
        self.assertEqual(disassemble(0x8000), ".FILL x8000")
        self.assertEqual(disassemble(0xD123), ".FILL xD123")
