"""
Synacor VM - Main Emulator Class

Integrates:
  - Register bank (cpu/regs.py)
  - Stack (cpu/stack.py)
  - Address space (mem/memory.py)
  - Opcode table + operand resolution (cpu/decoder.py)
  - ALU operations (cpu/alu.py)
  - Console for OUT/IN (periph/console.py)

Execution model, one instruction per step():
  1. Fetch opcode word at isp, advance isp
  2. Decode each operand left to right (each advances isp by one)
  3. Hand the decoded instruction to the tracer, if any
  4. Execute - write the destination / redirect isp
  5. Count the instruction

Termination:
  - HALT:   HALT instruction (the only normal end)
  - LIMIT:  max_steps given to run() was used up
  - any VMError is raised out of step()/run() with the failing address
    and opcode attached; execution does not continue past it
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from .config import CHAR_MASK
from .cpu import alu
from .cpu.decoder import (
    Opcode, OPERANDS, decode_opcode, resolve_value, resolve_write_slot,
)
from .cpu.regs import RegisterBank
from .cpu.stack import Stack
from .cpu.word import Operand, decode_word
from .errors import InputExhausted, VMError
from .mem.loader import load_image
from .mem.memory import Memory
from .periph.console import StreamConsole
from .trace import TraceLog, TraceRecord

log = logging.getLogger(__name__)


class StopReason(Enum):
    HALT = 'HALT'
    LIMIT = 'LIMIT'


class VirtualMachine:
    """Synacor architecture virtual machine.

    Usage:
        vm = VirtualMachine(words, console=BufferConsole("look\\n"))
        reason = vm.run()
        print(vm.console.text)

    One instance owns one run: registers, stack, memory and isp are
    created here and never shared.
    """

    def __init__(self, image: Iterable[int], *, console=None,
                 memory_size: Optional[int] = None,
                 tracer: Optional[Callable[[TraceRecord], None]] = None):
        # Core components
        self.regs = RegisterBank()
        self.stack = Stack()
        self.mem = Memory(image, size=memory_size)
        self.isp = 0

        self.console = console if console is not None else StreamConsole()
        self.tracer = tracer

        self.halted = False
        self.steps = 0

        # Instruction dispatch table (built in _build_dispatch)
        self._dispatch = self._build_dispatch()

    @classmethod
    def from_file(cls, path: Union[str, Path], **kwargs) -> 'VirtualMachine':
        """Load an image file and build a VM around it."""
        return cls(load_image(path), **kwargs)

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def step(self) -> Optional[StopReason]:
        """Execute one instruction. Returns StopReason.HALT once halted."""
        if self.halted:
            return StopReason.HALT

        pc = self.isp
        opcode = None
        try:
            opcode = decode_opcode(self.mem.read(pc))
            self.isp = pc + 1
            operands = tuple(self.decode_operand() for _ in OPERANDS[opcode])

            if self.tracer is not None:
                self.tracer(TraceRecord(pc, opcode.name, operands,
                                        self.regs.snapshot()))

            self._dispatch[opcode](*operands)
        except VMError as e:
            if e.address is None:
                e.address = pc
            if e.opcode is None and opcode is not None:
                e.opcode = opcode.name
            raise

        self.steps += 1
        if self.halted:
            return StopReason.HALT
        return None

    def run(self, max_steps: Optional[int] = None) -> StopReason:
        """Run until HALT (or until max_steps instructions have executed).

        VMError propagates to the caller; see errors.py.
        """
        executed = 0
        while max_steps is None or executed < max_steps:
            reason = self.step()
            executed += 1
            if reason is StopReason.HALT:
                log.info(f"Halted at {self.isp - 1} after {self.steps} instructions")
                return reason
        log.info(f"Step limit of {max_steps} reached at {self.isp}")
        return StopReason.LIMIT

    # ══════════════════════════════════════════════
    # Operand decoding
    # ══════════════════════════════════════════════

    def decode_operand(self) -> Operand:
        """Read the word at isp, advance isp, classify it."""
        raw = self.mem.read(self.isp)
        self.isp += 1
        return decode_word(raw)

    def resolve_value(self, operand: Operand) -> int:
        return resolve_value(operand, self.regs)

    def resolve_write_slot(self, operand: Operand) -> int:
        return resolve_write_slot(operand)

    def _jump(self, target: int):
        self.isp = self.mem.check(target)

    # ══════════════════════════════════════════════
    # Instruction handlers
    # ══════════════════════════════════════════════
    # Handler signature: handler(*operands), operands already decoded in
    # instruction order. Destinations are resolved before values so a
    # literal destination traps before any side effect.

    def _build_dispatch(self) -> dict:
        return {
            Opcode.HALT: self._op_halt,
            Opcode.SET:  self._op_set,
            Opcode.PUSH: self._op_push,
            Opcode.POP:  self._op_pop,
            Opcode.EQ:   self._binary(alu.eq),
            Opcode.GT:   self._binary(alu.gt),
            Opcode.JMP:  self._op_jmp,
            Opcode.JT:   self._op_jt,
            Opcode.JF:   self._op_jf,
            Opcode.ADD:  self._binary(alu.add15),
            Opcode.MULT: self._binary(alu.mult15),
            Opcode.MOD:  self._binary(alu.mod15),
            Opcode.AND:  self._binary(alu.and15),
            Opcode.OR:   self._binary(alu.or15),
            Opcode.NOT:  self._op_not,
            Opcode.RMEM: self._op_rmem,
            Opcode.WMEM: self._op_wmem,
            Opcode.CALL: self._op_call,
            Opcode.RET:  self._op_ret,
            Opcode.OUT:  self._op_out,
            Opcode.IN:   self._op_in,
            Opcode.NOOP: self._op_noop,
        }

    def _binary(self, fn):
        """Handler for the `a <- fn(b, c)` family (EQ GT ADD MULT MOD AND OR)."""
        def handler(a, b, c):
            slot = self.resolve_write_slot(a)
            self.regs[slot] = fn(self.resolve_value(b), self.resolve_value(c))
        return handler

    # ── Control ──

    def _op_halt(self):
        self.halted = True

    def _op_noop(self):
        pass

    # ── Register / stack ──

    def _op_set(self, a, b):
        slot = self.resolve_write_slot(a)
        self.regs[slot] = self.resolve_value(b)

    def _op_push(self, a):
        self.stack.push(self.resolve_value(a))

    def _op_pop(self, a):
        slot = self.resolve_write_slot(a)
        self.regs[slot] = self.stack.pop()

    def _op_not(self, a, b):
        slot = self.resolve_write_slot(a)
        self.regs[slot] = alu.not15(self.resolve_value(b))

    # ── Memory ──

    def _op_rmem(self, a, b):
        slot = self.resolve_write_slot(a)
        self.regs[slot] = self.mem.read(self.resolve_value(b))

    def _op_wmem(self, a, b):
        self.mem.write(self.resolve_value(a), self.resolve_value(b))

    # ── Jump / call ──

    def _op_jmp(self, a):
        self._jump(self.resolve_value(a))

    def _op_jt(self, a, b):
        if self.resolve_value(a) != 0:
            self._jump(self.resolve_value(b))

    def _op_jf(self, a, b):
        if self.resolve_value(a) == 0:
            self._jump(self.resolve_value(b))

    def _op_call(self, a):
        target = self.mem.check(self.resolve_value(a))
        self.stack.push(self.isp)
        self.isp = target

    def _op_ret(self):
        self._jump(self.stack.pop())

    # ── I/O ──

    def _op_out(self, a):
        self.console.write(self.resolve_value(a) & CHAR_MASK)

    def _op_in(self, a):
        slot = self.resolve_write_slot(a)
        char = self.console.read()
        if char is None:
            raise InputExhausted("Input exhausted")
        self.regs[slot] = char & CHAR_MASK

    # ══════════════════════════════════════════════
    # Trace / inspection
    # ══════════════════════════════════════════════

    def enable_trace(self, enable: bool = True):
        """Collect trace records in memory (replaces any other tracer)."""
        self.tracer = TraceLog() if enable else None

    def get_trace(self) -> str:
        if isinstance(self.tracer, TraceLog):
            return self.tracer.format()
        return ''

    def clear_trace(self):
        if isinstance(self.tracer, TraceLog):
            self.tracer.clear()

    def state(self) -> tuple:
        """(registers, stack, memory) snapshot for comparing runs."""
        return (self.regs.snapshot(), self.stack.snapshot(),
                self.mem.snapshot())

    def display(self) -> str:
        return (f"isp={self.isp:05d} {self.regs.display()} "
                f"stack={len(self.stack)} steps={self.steps}")
