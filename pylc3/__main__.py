#!/usr/bin/env python

"""
pylc3 - Main application for running LC-3 program images.
"""

# Standard library imports
import os
import sys
import signal
from optparse import OptionParser

# PyLC3 imports
from pylc3.constants import PC_START
from pylc3.debugger import Debugger
from pylc3.exceptions import PyLC3Exception, ImageLoadException, InputClosedException
from pylc3.helpers import parse_address
from pylc3.machine import Machine
from pylc3.terminal import TerminalConsole

# Logging setup
import logging
log = logging.getLogger("pylc3")

# Constants
PYGAME_POLL_INTERVAL = 500

# Functions
def parse_cmdline(argv = None):
    """ Parse the command line arguments. """
    parser = OptionParser(usage = "%prog [options] image-file [image-file ...]")
    parser.add_option("--debug", action = "store_true", dest = "debug",
                      help = "Enable DEBUG log level and start in the debugger.")
    parser.add_option("--display", action = "store", dest = "display", default = "terminal",
                      help = "Console to use, terminal or pygame, default: terminal.")
    parser.add_option("--start-address", action = "store", dest = "start_address", default = "x%04x" % PC_START,
                      help = "Address of the first instruction, default: x3000.")
    parser.add_option("--trace", action = "store", dest = "trace",
                      help = "File to write an instruction trace to.")
    parser.add_option("--log-file", action = "store", dest = "log_file",
                      help = "File to output debugging log.")
    parser.add_option("--log-filter", action = "store", dest = "log_filter",
                      help = "Log filter to apply to stderr handler.")
    options, args = parser.parse_args(argv)
    if len(args) == 0:
        parser.error("at least one image file is required")
    return options, args

def setup_logging(options):
    """ Configure the root logger from the command line options. """
    log_level = logging.DEBUG if options.debug else logging.INFO
    log_formatter = logging.Formatter("%(asctime)s.%(msecs)03d %(name)s(%(levelname)s): %(message)s", "%m/%d %H:%M:%S")
    stderr_handler = logging.StreamHandler()
    stderr_handler.setFormatter(log_formatter)
    if options.log_filter:
        stderr_handler.addFilter(logging.Filter(options.log_filter))
    root_logger = logging.root
    root_logger.setLevel(log_level)
    root_logger.addHandler(stderr_handler)

    if options.log_file:
        file_handler = logging.FileHandler(options.log_file)
        file_handler.setFormatter(log_formatter)
        log.addHandler(file_handler)

def create_console(options):
    """ Return (source, sink, poll) for the selected display, poll may be None. """
    if options.display == "terminal":
        console = TerminalConsole()
        return console, console, None

    elif options.display == "pygame":
        # Only pull in Pygame when it is asked for.
        from pylc3.display import ConsoleDisplay
        from pylc3.ui import PygameKeyboard, PygameManager

        keyboard = PygameKeyboard()
        display = ConsoleDisplay()
        manager = PygameManager(keyboard, display)
        return keyboard, display, manager.poll

    raise ValueError("Unsupported display type: %r" % options.display)

def run(machine, fetch, poll):
    """ Run the machine until it halts, polling the UI every so often. """
    if poll is None:
        machine.run(fetch = fetch)
        return

    while not machine.halted:
        poll()
        machine.run(PYGAME_POLL_INTERVAL, fetch)

def main(argv = None):
    """ Main application that runs the PyLC3 machine, returns the exit status. """
    options, args = parse_cmdline(argv)
    setup_logging(options)

    try:
        start_address = parse_address(options.start_address)
        source, sink, poll = create_console(options)
    except ValueError as err:
        log.error("%s", err)
        return 2

    machine = Machine(source, sink, start_address)

    for filename in args:
        try:
            machine.load_image(filename)
        except ImageLoadException as err:
            log.error("%s", err)
            return 1

    debugger = Debugger(machine.cpu, machine.bus, source)
    if options.trace:
        debugger.trace_filename = options.trace
        debugger.trace_fileptr = open(options.trace, "w")

    if options.debug:
        debugger.single_step = True
        signal.signal(signal.SIGINT, debugger.break_signal)

    fetch = debugger.fetch if (options.debug or options.trace) else machine.cpu.fetch

    status = 0
    try:
        if isinstance(source, TerminalConsole):
            source.disable_input_buffering()
        run(machine, fetch, poll)

    except InputClosedException:
        log.warning("Input closed at PC x%04x, stopping.", machine.cpu.regs.PC)

    except KeyboardInterrupt:
        log.warning("Interrupted at PC x%04x.", machine.cpu.regs.PC)
        status = 130

    except PyLC3Exception:
        # Already logged where it was raised, just add the registers.
        debugger.dump_all(logging.ERROR)
        status = 1

    finally:
        machine.shutdown()
        if debugger.trace_fileptr is not None:
            debugger.trace_fileptr.close()

    return status

if __name__ == "__main__":
    if os.environ.get("PYLC3_PROFILING"):
        import cProfile
        cProfile.run("main()", sort = "time")
    else:
        sys.exit(main())
