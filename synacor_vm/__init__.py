"""
Synacor VM
==========
A virtual machine for the Synacor Challenge architecture: 15-bit words,
eight registers, an unbounded stack and 22 opcodes over one flat
address space shared by code and data.

Architecture:
    ┌───────────┐    ┌──────────┐    ┌─────────────────────────────┐
    │ image.bin │───>│  Loader  │───>│ VirtualMachine              │
    │ (LE u16)  │    │ (words)  │    │  fetch -> decode -> execute │
    └───────────┘    └──────────┘    └──────────────┬──────────────┘
                                                    │ OUT / IN
                                              ┌─────┴─────┐
                                              │  Console  │
                                              └───────────┘

    - mem/loader.py:     bytes -> words, owns file errors (ImageError)
    - mem/memory.py:     address space
    - cpu/word.py:       literal / register-reference operand encoding
    - cpu/decoder.py:    opcode table + operand resolution
    - cpu/alu.py:        15-bit arithmetic
    - emu.py:            the fetch-decode-execute loop
    - periph/console.py: character I/O boundary
    - trace.py:          optional per-instruction trace
"""

__version__ = "0.2.0"

from .errors import (
    VMError, InvalidOpcode, InvalidOperandEncoding, InvalidWriteTarget,
    StackUnderflow, AddressOutOfRange, DivisionByZero, InputExhausted,
    ImageError,
)
from .cpu.word import Literal, RegisterRef, decode_word
from .cpu.decoder import Opcode, decode_opcode
from .mem.loader import load_image, words_from_bytes
from .periph.console import BufferConsole, StreamConsole, SerialConsole
from .trace import TraceRecord, TraceLog, LoggingTracer
from .emu import VirtualMachine, StopReason


def run_program(words, input: bytes = b'', *, max_steps=None, **kwargs):
    """Run an image against scripted input and return (vm, reason).

    Output is captured in vm.console.output. VMError propagates.
    """
    vm = VirtualMachine(words, console=BufferConsole(input), **kwargs)
    reason = vm.run(max_steps=max_steps)
    return vm, reason
