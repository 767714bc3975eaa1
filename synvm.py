#!/usr/bin/env python3
"""
synvm - Synacor VM command line

Usage:
    python synvm.py [image.bin] [--input script.txt] [--trace info.log]
                    [--serial PORT [--baud N]] [--max-steps N]
                    [--memory-size N] [--disassemble] [-v | -q]

Runs the image (default: challenge.bin) on the terminal. With --input the
script is fed to IN first and the session continues interactively.

Exit status:
    0  HALT
    1  the program trapped (VMError)
    2  the image or console could not be opened
    3  --max-steps reached

Examples:
    python synvm.py challenge.bin
    python synvm.py challenge.bin --input walkthrough.txt --trace info.log
    python synvm.py challenge.bin --disassemble | less
"""

import argparse
import logging
import sys
import os

import serial

# Allow running from project root without installing
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from synacor_vm import __version__
from synacor_vm.config import (
    ADDRESS_SPACE_WORDS, DEFAULT_IMAGE, DEFAULT_SERIAL_BAUD, DEFAULT_TRACE_LOGGER,
)
from synacor_vm.disasm import disassemble
from synacor_vm.emu import StopReason, VirtualMachine
from synacor_vm.errors import ImageError, VMError
from synacor_vm.mem.loader import load_image
from synacor_vm.periph.console import BufferConsole, SerialConsole, StreamConsole
from synacor_vm.trace import LoggingTracer

log = logging.getLogger('synvm')

EXIT_HALT = 0
EXIT_TRAP = 1
EXIT_SETUP = 2
EXIT_LIMIT = 3


def parse_int_arg(value: str) -> int:
    """Parse an integer argument that may be hex (0x...) or decimal."""
    return int(value.strip(), 0)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="synvm",
        description="Synacor Challenge virtual machine",
    )
    parser.add_argument("image", nargs="?", default=DEFAULT_IMAGE,
                        help=f"Program image (default: {DEFAULT_IMAGE})")
    parser.add_argument("--input", metavar="FILE",
                        help="Feed FILE to IN before reading the terminal")
    parser.add_argument("--serial", metavar="PORT",
                        help="Use a serial port (or pyserial URL) as the console")
    parser.add_argument("--baud", type=int, default=DEFAULT_SERIAL_BAUD,
                        help=f"Serial baud rate (default: {DEFAULT_SERIAL_BAUD})")
    parser.add_argument("--trace", metavar="FILE",
                        help="Write a per-instruction trace to FILE")
    parser.add_argument("--max-steps", type=parse_int_arg, default=None,
                        help="Stop after N instructions")
    parser.add_argument("--memory-size", type=parse_int_arg,
                        default=ADDRESS_SPACE_WORDS,
                        help=f"Address space in words (default: {ADDRESS_SPACE_WORDS})")
    parser.add_argument("--disassemble", action="store_true",
                        help="Print a listing of the image and exit")
    parser.add_argument("--verbose", "-v", action="count", default=0,
                        help="Increase verbosity")
    parser.add_argument("--quiet", "-q", action="store_true",
                        help="Only report errors")
    parser.add_argument("--version", action="version",
                        version=f"synvm {__version__}")
    return parser


def setup_logging(args):
    if args.quiet:
        level = logging.ERROR
    elif args.verbose == 0:
        level = logging.WARNING
    elif args.verbose == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG
    logging.basicConfig(level=level, stream=sys.stderr,
                        format='%(levelname)s %(name)s: %(message)s')

    if args.trace:
        trace_log = logging.getLogger(DEFAULT_TRACE_LOGGER)
        handler = logging.FileHandler(args.trace, mode='w', encoding='utf-8')
        handler.setFormatter(logging.Formatter('%(message)s'))
        trace_log.addHandler(handler)
        trace_log.setLevel(logging.DEBUG)
        trace_log.propagate = False


def open_console(args):
    """Return (console, serial_port); serial_port is None for the terminal."""
    port = None
    if args.serial:
        port = console = SerialConsole(args.serial, args.baud)
    else:
        console = StreamConsole()
    if args.input:
        with open(args.input, 'rb') as f:
            console = BufferConsole(f.read(), fallback=console)
    return console, port


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args)

    try:
        words = load_image(args.image)
    except ImageError as e:
        log.error(str(e))
        return EXIT_SETUP

    if args.disassemble:
        for entry in disassemble(words):
            print(entry.format())
        return EXIT_HALT

    try:
        console, port = open_console(args)
        vm = VirtualMachine(
            words, console=console,
            memory_size=max(args.memory_size, len(words)),
            tracer=LoggingTracer() if args.trace else None,
        )
    except (OSError, serial.SerialException, ValueError) as e:
        log.error(f"Cannot start: {e}")
        return EXIT_SETUP

    try:
        reason = vm.run(max_steps=args.max_steps)
    except VMError as e:
        log.error(f"Trap: {e}")
        log.error(vm.display())
        return EXIT_TRAP
    except KeyboardInterrupt:
        log.warning(f"Interrupted at {vm.isp}")
        return EXIT_TRAP
    finally:
        if port is not None:
            port.close()

    if reason is StopReason.LIMIT:
        log.warning(f"Stopped after {args.max_steps} instructions")
        return EXIT_LIMIT
    log.info("Execution terminated.")
    return EXIT_HALT


if __name__ == '__main__':
    sys.exit(main())
