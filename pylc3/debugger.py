"""
pylc3.debugger - Debugger module for PyLC3.
"""

# Standard library imports
import re
import sys
from collections import Counter

# PyLC3 imports
from pylc3.constants import WORD_MASK
from pylc3.cpu import GPR_NAMES, OPCODE_NAMES, OPCODE_SHIFT, OP_JMP, decode_sr1
from pylc3.disassembler import disassemble
from pylc3.helpers import parse_address, printable_char

# Logging setup
import logging
log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

# Constants
GDB_EXAMINE_REGEX = re.compile("^x\\/(\\d+)([xdc]?)w?$")

def is_return(instruction):
    """ Return True if the instruction is RET (JMP R7). """
    return instruction >> OPCODE_SHIFT == OP_JMP and decode_sr1(instruction) == 7

# Classes
class Debugger(object):
    """ Interactive debugger for PyLC3. """
    def __init__(self, cpu, bus, console = None):
        self.cpu = cpu
        self.bus = bus
        self.bus.debugger = self

        # Terminal the program runs on, switched back to line mode while prompting.
        self.console = console

        self.breakpoints = []
        self.single_step = False
        self.debugger_shortcut = []
        self.dump_enabled = False
        self.step_out = False

        self.location_counter = Counter()
        self.instruction_counter = Counter()
        self.trace_fileptr = None
        self.trace_filename = "trace.log"

    # ********** Debugger functions. **********
    def fetch(self):
        """ Wraps the CPU fetch() to print info and/or pause execution. """
        if self.dump_enabled:
            self.dump_all()

        next_instruction = self.peek_instruction_word()
        if self.dump_enabled:
            log.debug("next_instruction = 0x%04x %s", next_instruction,
                      disassemble(next_instruction, self.cpu.regs.PC))

        if self.trace_fileptr:
            self.write_trace(next_instruction)

        # Check if we are trying to step out of a JSR-ed subroutine.
        if self.step_out:
            if is_return(next_instruction):
                log.debug("Return detected!")
                # At this point we want to drop to the debugger and not step out any longer.
                self.step_out = False
                self.single_step = True

        if self.should_break():
            self.enter_debugger()

        self.location_counter.update({self.cpu.regs.PC : 1})
        self.instruction_counter.update({OPCODE_NAMES[next_instruction >> OPCODE_SHIFT] : 1})
        self.cpu.fetch()

    def write_trace(self, instruction):
        """ Write one line describing the instruction about to execute to the trace file. """
        self.trace_fileptr.write("\t".join(
            ["x%04x" % self.cpu.regs.PC, "0x%04x" % instruction, disassemble(instruction, self.cpu.regs.PC)] +
            ["0x%04x" % self.cpu.regs[index] for index in range(len(GPR_NAMES))] +
            [str(self.cpu.flags)]
        ) + "\n")

    def dump_all(self, level = logging.DEBUG):
        """ Dump all registers and flags. """
        self.dump_regs(level, "R0", "R1", "R2", "R3")
        self.dump_regs(level, "R4", "R5", "R6", "R7")
        self.dump_pc_and_flags(level)

    def dump_regs(self, level, *regs):
        """ Dump a list of CPU registers to the log. """
        log.log(level, "  ".join(["%s = 0x%04x" % (reg, self.cpu.regs[reg]) for reg in regs]))

    def dump_pc_and_flags(self, level):
        """ Dump the program counter and the condition codes to the log. """
        log.log(level, "PC = x%04x  COND = %s", self.cpu.regs.PC, self.cpu.flags)

    def should_break(self):
        """ Return True if we should break now. """
        return self.single_step or self.cpu.regs.PC in self.breakpoints

    def peek_instruction_word(self):
        """ Return the word at PC, but do not increment PC. """
        return self.bus.mem_peek_word(self.cpu.regs.PC)

    def break_signal(self, _signum, _frame):
        """ Control-C handler to enter single-step mode. """
        print("Control-C")
        self.single_step = True

    def console_call(self, name):
        """ Call a terminal mode function on the console if it has one. """
        function = getattr(self.console, name, None)
        if function is not None:
            function()

    def enter_debugger(self):
        """ Interactive debugger menu, the console is in line mode while it runs. """
        self.console_call("restore_input_buffering")
        try:
            self.debugger_menu()
        finally:
            self.console_call("disable_input_buffering")

    def debugger_menu(self):
        """ Prompt for commands until one resumes execution. """
        while True:
            instruction = self.peek_instruction_word()
            print("\nNext instruction: x%04x: 0x%04x  %s" % (self.cpu.regs.PC, instruction,
                                                           disassemble(instruction, self.cpu.regs.PC)))
            if len(self.debugger_shortcut) != 0:
                print("[%s] >" % " ".join(self.debugger_shortcut), end=" ")
            else:
                print(">", end=" ")

            try:
                words = input().split()
                # File names keep their case.
                cmd = [word.lower() for word in words[:2]] + words[2:]
            except KeyboardInterrupt:
                print("^C")
                continue

            try:
                resume = self.process_command(cmd)
                if resume:
                    break
            except Exception:
                log.exception("Unhandled exception processing: %r", cmd)

    def process_command(self, cmd):
        """ Actually process the command from the user, returns True to resume execution. """
        if len(cmd) == 0 and len(self.debugger_shortcut) != 0:
            cmd = self.debugger_shortcut
            print("Using: %s" % " ".join(cmd))
        else:
            self.debugger_shortcut = cmd

        if len(cmd) == 0:
            return False

        if len(cmd) == 1 and cmd[0] in ("continue", "c"):
            self.single_step = False
            return True

        elif len(cmd) == 1 and cmd[0] in ("step", "s"):
            self.single_step = True
            return True

        elif len(cmd) == 1 and cmd[0] in ("quit", "q"):
            sys.exit(0)

        elif len(cmd) == 1 and cmd[0] in ("dump", "d"):
            self.dump_all(logging.INFO)

        elif len(cmd) in (2, 3) and cmd[0] == "trace":
            if cmd[1] == "on" and self.trace_fileptr is None:
                if len(cmd) == 3:
                    self.trace_filename = cmd[2]
                self.trace_fileptr = open(self.trace_filename, "w")
                print("Tracing to %s." % self.trace_filename)
            elif cmd[1] == "off" and self.trace_fileptr is not None:
                self.trace_fileptr.close()
                self.trace_fileptr = None
            else:
                print("Trace is %s." % ("off" if self.trace_fileptr is None else "on"))

        elif len(cmd) == 1 and cmd[0] in ("step-out", "out"):
            # Set the step out flag and disable single stepping so we run to the next return.
            self.step_out = True
            self.single_step = False
            return True

        elif len(cmd) == 2 and cmd[0] in ("lc", "location-counter"):
            if cmd[1] == "clear":
                self.location_counter.clear()
            else:
                for location, count in self.location_counter.most_common(int(cmd[1])):
                    print("location = x%04x, count = %d" % (location, count))

        elif len(cmd) == 2 and cmd[0] in ("ic", "instruction-counter"):
            if cmd[1] == "clear":
                self.instruction_counter.clear()
            else:
                for instruction, count in self.instruction_counter.most_common(int(cmd[1])):
                    print("instruction = %s, count = %d" % (instruction, count))

        elif len(cmd) >= 1 and cmd[0] == "info":
            self.debugger_shortcut = []
            if len(cmd) == 2 and cmd[1] in ("breakpoints", "break"):
                print("Breakpoints:")
                for breakpoint in self.breakpoints:
                    print("  x%04x" % breakpoint)

        elif len(cmd) == 2 and cmd[0] == "break":
            self.debugger_shortcut = []
            address = parse_address(cmd[1])
            if address not in self.breakpoints:
                self.breakpoints.append(address)

        elif len(cmd) == 2 and cmd[0] == "clear":
            self.debugger_shortcut = []
            if cmd[1] == "all":
                self.breakpoints = []
            elif cmd[1] == "dump":
                self.dump_enabled = False
            else:
                self.breakpoints.remove(parse_address(cmd[1]))

        elif len(cmd) >= 1 and cmd[0] == "set":
            self.debugger_shortcut = []
            if len(cmd) == 2 and cmd[1] == "dump":
                self.dump_enabled = True
                self.dump_all()

        elif len(cmd) >= 2 and cmd[0] in ("dis", "disassemble"):
            address = parse_address(cmd[1])
            count = int(cmd[2]) if len(cmd) >= 3 else 1
            for index in range(count):
                location = (address + index) & WORD_MASK
                instruction = self.bus.mem_peek_word(location)
                print("x%04x: 0x%04x  %s" % (location, instruction, disassemble(instruction, location)))
            self.debugger_shortcut = [cmd[0], "x%04x" % ((address + count) & WORD_MASK)] + cmd[2:]

        elif len(cmd) >= 1 and cmd[0][0] == "x":
            self.examine_memory(cmd)

        else:
            print("i don't know what %r is." % " ".join(cmd))

        return False

    def examine_memory(self, cmd):
        """ Handle the gdb style x/<count><format> <address> command. """
        count = 1
        format = "x"
        if len(cmd[0]) > 1:
            match = GDB_EXAMINE_REGEX.match(cmd[0])
            if match is None:
                print("invalid examine command: %r" % cmd[0])
                return
            count = int(match.group(1))
            format = match.group(2) or "x"

        if len(cmd) < 2:
            print("you need an address")
            return

        address = parse_address(cmd[1])
        data = [self.bus.mem_peek_word((address + index) & WORD_MASK) for index in range(count)]

        if format == "d":
            items = ["%6d" % item for item in data]
        elif format == "c":
            items = [printable_char(item) for item in data]
        else:
            items = ["%04x" % item for item in data]

        print("x%04x:" % address, " ".join(items))
        self.debugger_shortcut = [cmd[0], "x%04x" % ((address + count) & WORD_MASK)]
