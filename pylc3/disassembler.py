"""
pylc3.disassembler - Turns LC-3 instruction words back into assembly text.
"""

# PyLC3 imports
from pylc3.constants import WORD_MASK
from pylc3.cpu import *
from pylc3.helpers import sign_extend, signed_word
from pylc3.traps import TRAP_NAMES

# Functions
def _register(number):
    return "R%d" % number

def _target(address, instruction, mask, bits):
    """ Format a PC relative operand, as an absolute address if we know where we are. """
    offset = sign_extend(instruction & mask, bits)
    if address is None:
        return "#%d" % signed_word(offset)
    return "x%04X" % ((address + 1 + offset) & WORD_MASK)

def _operate(name, instruction):
    dr = _register(decode_dr(instruction))
    sr1 = _register(decode_sr1(instruction))
    if instruction & IMMEDIATE_FLAG:
        return "%s %s, %s, #%d" % (name, dr, sr1, signed_word(sign_extend(instruction & IMM5_MASK, 5)))
    return "%s %s, %s, %s" % (name, dr, sr1, _register(decode_sr2(instruction)))

def disassemble(instruction, address = None):
    """
    Return the assembly text for a single instruction word.

    address is where the instruction lives, when supplied PC relative operands are shown
    as absolute addresses (x3004) rather than offsets (#3).
    """
    instruction &= WORD_MASK
    opcode = decode_opcode(instruction)

    if opcode in (OP_ADD, OP_AND):
        return _operate(OPCODE_NAMES[opcode], instruction)

    elif opcode == OP_NOT:
        return "NOT %s, %s" % (_register(decode_dr(instruction)), _register(decode_sr1(instruction)))

    elif opcode == OP_BR:
        conditions = (instruction >> COND_SHIFT) & 0x7
        if conditions == 0:
            return "NOP"
        suffix = "".join(flag for bit, flag in ((0x4, "n"), (0x2, "z"), (0x1, "p")) if conditions & bit)
        if conditions == 0x7:
            suffix = ""
        return "BR%s %s" % (suffix, _target(address, instruction, OFFSET9_MASK, 9))

    elif opcode == OP_JMP:
        base = decode_sr1(instruction)
        return "RET" if base == 7 else "JMP %s" % _register(base)

    elif opcode == OP_JSR:
        if instruction & JSR_OFFSET_FLAG:
            return "JSR %s" % _target(address, instruction, OFFSET11_MASK, 11)
        return "JSRR %s" % _register(decode_sr1(instruction))

    elif opcode in (OP_LD, OP_LDI, OP_LEA, OP_ST, OP_STI):
        return "%s %s, %s" % (OPCODE_NAMES[opcode], _register(decode_dr(instruction)),
                              _target(address, instruction, OFFSET9_MASK, 9))

    elif opcode in (OP_LDR, OP_STR):
        return "%s %s, %s, #%d" % (OPCODE_NAMES[opcode], _register(decode_dr(instruction)),
                                   _register(decode_sr1(instruction)),
                                   signed_word(sign_extend(instruction & OFFSET6_MASK, 6)))

    elif opcode == OP_TRAP:
        vector = instruction & TRAP_VECTOR_MASK
        return TRAP_NAMES.get(vector, "TRAP x%02X" % vector)

    # RTI and the reserved opcode can't be executed, show them as data.
    return ".FILL x%04X" % instruction
