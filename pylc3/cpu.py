"""
pylc3.cpu - LC-3 CPU module for PyLC3.
"""

# Standard library imports
from ctypes import Structure, c_ushort

# PyLC3 imports
from pylc3.constants import WORD_MASK, SIGN_BIT, PC_START
from pylc3.exceptions import InvalidOpcodeException
from pylc3.helpers import sign_extend

# Logging setup
import logging
log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

# Constants
OP_BR = 0x0
OP_ADD = 0x1
OP_LD = 0x2
OP_ST = 0x3
OP_JSR = 0x4
OP_AND = 0x5
OP_LDR = 0x6
OP_STR = 0x7
OP_RTI = 0x8 # Unused.
OP_NOT = 0x9
OP_LDI = 0xA
OP_STI = 0xB
OP_JMP = 0xC
OP_RES = 0xD # Reserved.
OP_LEA = 0xE
OP_TRAP = 0xF

OPCODE_NAMES = {
    OP_BR : "BR",
    OP_ADD : "ADD",
    OP_LD : "LD",
    OP_ST : "ST",
    OP_JSR : "JSR",
    OP_AND : "AND",
    OP_LDR : "LDR",
    OP_STR : "STR",
    OP_RTI : "RTI",
    OP_NOT : "NOT",
    OP_LDI : "LDI",
    OP_STI : "STI",
    OP_JMP : "JMP",
    OP_RES : "RES",
    OP_LEA : "LEA",
    OP_TRAP : "TRAP",
}

OPCODE_SHIFT = 12

# Operand fields.
REG_MASK = 0x07
DR_SHIFT = 9
SR1_SHIFT = 6
COND_SHIFT = 9
IMMEDIATE_FLAG = 0x0020
JSR_OFFSET_FLAG = 0x0800
TRAP_VECTOR_MASK = 0xFF

IMM5_MASK = 0x001F
OFFSET6_MASK = 0x003F
OFFSET9_MASK = 0x01FF
OFFSET11_MASK = 0x07FF

GPR_NAMES = ("R0", "R1", "R2", "R3", "R4", "R5", "R6", "R7")

# Functions
def decode_opcode(instruction):
    """ Return the opcode from the top nibble of an instruction word. """
    return (instruction >> OPCODE_SHIFT) & 0x0F

def decode_dr(instruction):
    """ Destination (or source for stores) register field, bits 11:9. """
    return (instruction >> DR_SHIFT) & REG_MASK

def decode_sr1(instruction):
    """ First source or base register field, bits 8:6. """
    return (instruction >> SR1_SHIFT) & REG_MASK

def decode_sr2(instruction):
    """ Second source register field, bits 2:0. """
    return instruction & REG_MASK

# Classes
class Registers(Structure):
    """ General purpose registers and the program counter, all 16 bit wrapping. """
    _fields_ = [
        ("R0", c_ushort),
        ("R1", c_ushort),
        ("R2", c_ushort),
        ("R3", c_ushort),
        ("R4", c_ushort),
        ("R5", c_ushort),
        ("R6", c_ushort),
        ("R7", c_ushort), # Link register.
        ("PC", c_ushort),
    ]

    def __init__(self):
        Structure.__init__(self)

        # These are all initialized to zero by ctypes but this is done so PyLint isn't confused.
        # pylint: disable=invalid-name
        self.R0 = 0x0000
        self.R1 = 0x0000
        self.R2 = 0x0000
        self.R3 = 0x0000
        self.R4 = 0x0000
        self.R5 = 0x0000
        self.R6 = 0x0000
        self.R7 = 0x0000
        self.PC = 0x0000
        # pylint: enable=invalid-name

    def __getitem__(self, key):
        if isinstance(key, int):
            key = GPR_NAMES[key]
        return getattr(self, key)

    def __setitem__(self, key, value):
        if isinstance(key, int):
            key = GPR_NAMES[key]
        setattr(self, key, value)

class ConditionCodes(object):
    """ LC-3 condition code register, exactly one of N, Z or P once set. """
    POSITIVE = 0x1
    ZERO = 0x2
    NEGATIVE = 0x4

    def __init__(self):
        self.value = 0

    def __str__(self):
        if self.value == self.NEGATIVE:
            return "N"
        elif self.value == self.ZERO:
            return "Z"
        elif self.value == self.POSITIVE:
            return "P"
        return "-"

    def set_from_result(self, value):
        """ Set the condition codes from a value written to a register. """
        value &= WORD_MASK
        if value == 0:
            self.value = self.ZERO
        elif value & SIGN_BIT:
            self.value = self.NEGATIVE
        else:
            self.value = self.POSITIVE

    @property
    def negative(self):
        """ True if the last result was negative. """
        return self.value == self.NEGATIVE

    @property
    def zero(self):
        """ True if the last result was zero. """
        return self.value == self.ZERO

    @property
    def positive(self):
        """ True if the last result was positive. """
        return self.value == self.POSITIVE

class CPU(object):
    def __init__(self):
        # System bus for memory access.
        self.bus = None

        # Trap routines, see pylc3.traps.
        self.traps = None

        # CPU halt flag.
        self.hlt = False

        # Condition codes.
        self.flags = ConditionCodes()

        # Normal registers.
        self.regs = Registers()
        self.regs.PC = PC_START

        # Instruction decoding, indexed by opcode.
        self.opcode_vector = [
            self.opcode_br,
            self.opcode_add,
            self.opcode_ld,
            self.opcode_st,
            self.opcode_jsr,
            self.opcode_and,
            self.opcode_ldr,
            self.opcode_str,
            self.signal_invalid_opcode, # RTI is not supported without privilege modes.
            self.opcode_not,
            self.opcode_ldi,
            self.opcode_sti,
            self.opcode_jmp,
            self.signal_invalid_opcode, # Reserved.
            self.opcode_lea,
            self.opcode_trap,
        ]

    def install_bus(self, bus):
        """ Register the bus with the CPU. """
        self.bus = bus
        self.mem_read_word = self.bus.mem_read_word
        self.mem_write_word = self.bus.mem_write_word

    def install_traps(self, traps):
        """ Register the trap routines with the CPU. """
        self.traps = traps
        traps.install(self)

    def reset(self, pc = PC_START):
        """ Clear the registers and flags and prepare to execute at pc. """
        self.regs = Registers()
        self.regs.PC = pc
        self.flags = ConditionCodes()
        self.hlt = False

    def read_instruction_word(self):
        """ Read a word from PC and increment PC to point at the next instruction. """
        address = self.regs.PC
        self.regs.PC += 1
        return self.mem_read_word(address)

    def fetch(self):
        """ Fetch and execute one instruction. """
        instruction = self.read_instruction_word()
        self.opcode_vector[instruction >> OPCODE_SHIFT](instruction)

    def signal_invalid_opcode(self, instruction):
        """ Invalid opcode handler. """
        opcode = decode_opcode(instruction)
        address = (self.regs.PC - 1) & WORD_MASK
        log.error("Invalid opcode: 0x%x (%s) at PC x%04x", opcode, OPCODE_NAMES[opcode], address)

        # Nothing else executes after this.
        self.hlt = True
        raise InvalidOpcodeException(opcode, address, instruction)

    def update_flags(self, register):
        """ Set the condition codes from the value in a general purpose register. """
        self.flags.set_from_result(self.regs[register])

    def pc_offset(self, instruction, mask, bits):
        """ Return the address PC + sign extended offset field. """
        return (self.regs.PC + sign_extend(instruction & mask, bits)) & WORD_MASK

    def base_offset(self, instruction):
        """ Return the address BaseR + sign extended offset6. """
        return (self.regs[decode_sr1(instruction)] + sign_extend(instruction & OFFSET6_MASK, 6)) & WORD_MASK

    # ********** Operate opcodes. **********
    def _second_operand(self, instruction):
        """ Return either the sign extended imm5 or the contents of SR2. """
        if instruction & IMMEDIATE_FLAG:
            return sign_extend(instruction & IMM5_MASK, 5)
        return self.regs[decode_sr2(instruction)]

    def opcode_add(self, instruction):
        """ ADD - DR = SR1 + (SR2 or imm5). """
        dr = decode_dr(instruction)
        self.regs[dr] = (self.regs[decode_sr1(instruction)] + self._second_operand(instruction)) & WORD_MASK
        self.update_flags(dr)

    def opcode_and(self, instruction):
        """ AND - DR = SR1 & (SR2 or imm5). """
        dr = decode_dr(instruction)
        self.regs[dr] = self.regs[decode_sr1(instruction)] & self._second_operand(instruction)
        self.update_flags(dr)

    def opcode_not(self, instruction):
        """ NOT - DR = ~SR. """
        dr = decode_dr(instruction)
        self.regs[dr] = ~self.regs[decode_sr1(instruction)] & WORD_MASK
        self.update_flags(dr)

    # ********** Control opcodes. **********
    def opcode_br(self, instruction):
        """ BR - Branch PC relative if any of the requested condition codes are set. """
        if (instruction >> COND_SHIFT) & self.flags.value:
            self.regs.PC = self.pc_offset(instruction, OFFSET9_MASK, 9)

    def opcode_jmp(self, instruction):
        """ JMP/RET - Jump to the address in the base register. """
        self.regs.PC = self.regs[decode_sr1(instruction)]

    def opcode_jsr(self, instruction):
        """ JSR/JSRR - Save the return address in R7 and jump PC relative or to a base register. """
        # R7 is written before the base register is read, so JSRR R7 falls through.
        self.regs.R7 = self.regs.PC
        if instruction & JSR_OFFSET_FLAG:
            self.regs.PC = self.pc_offset(instruction, OFFSET11_MASK, 11)
        else:
            self.regs.PC = self.regs[decode_sr1(instruction)]

    def opcode_trap(self, instruction):
        """ TRAP - Run the trap routine, R7 is left alone. """
        self.traps.execute(instruction & TRAP_VECTOR_MASK)

    # ********** Load opcodes. **********
    def opcode_ld(self, instruction):
        """ LD - DR = mem[PC + offset9]. """
        dr = decode_dr(instruction)
        self.regs[dr] = self.mem_read_word(self.pc_offset(instruction, OFFSET9_MASK, 9))
        self.update_flags(dr)

    def opcode_ldi(self, instruction):
        """ LDI - DR = mem[mem[PC + offset9]]. """
        dr = decode_dr(instruction)
        self.regs[dr] = self.mem_read_word(self.mem_read_word(self.pc_offset(instruction, OFFSET9_MASK, 9)))
        self.update_flags(dr)

    def opcode_ldr(self, instruction):
        """ LDR - DR = mem[BaseR + offset6]. """
        dr = decode_dr(instruction)
        self.regs[dr] = self.mem_read_word(self.base_offset(instruction))
        self.update_flags(dr)

    def opcode_lea(self, instruction):
        """ LEA - DR = PC + offset9. """
        dr = decode_dr(instruction)
        self.regs[dr] = self.pc_offset(instruction, OFFSET9_MASK, 9)
        self.update_flags(dr)

    # ********** Store opcodes. **********
    def opcode_st(self, instruction):
        """ ST - mem[PC + offset9] = SR. """
        self.mem_write_word(self.pc_offset(instruction, OFFSET9_MASK, 9), self.regs[decode_dr(instruction)])

    def opcode_sti(self, instruction):
        """ STI - mem[mem[PC + offset9]] = SR. """
        self.mem_write_word(self.mem_read_word(self.pc_offset(instruction, OFFSET9_MASK, 9)),
                            self.regs[decode_dr(instruction)])

    def opcode_str(self, instruction):
        """ STR - mem[BaseR + offset6] = SR. """
        self.mem_write_word(self.base_offset(instruction), self.regs[decode_dr(instruction)])
