"""
Synacor VM - Diagnostic Trace

A tracer is any callable taking one TraceRecord. The VM calls it once
per instruction, after operands are decoded and before the effect, so
the register snapshot shows the state the instruction read. Tracing is
observation only: with no tracer installed the VM behaves identically.
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple

from .config import DEFAULT_TRACE_LOGGER


@dataclass(frozen=True)
class TraceRecord:
    address: int
    opcode: str
    operands: tuple
    registers: Tuple[int, ...]

    def format(self) -> str:
        args = ', '.join(str(op) for op in self.operands)
        regs = ' '.join(f"{v:05d}" for v in self.registers)
        return f"{self.address:05d}: {self.opcode:4s} {args:24s} [{regs}]"


class TraceLog:
    """Collects records in memory."""

    def __init__(self):
        self.records: List[TraceRecord] = []

    def __call__(self, record: TraceRecord):
        self.records.append(record)

    def format(self) -> str:
        return '\n'.join(r.format() for r in self.records)

    def clear(self):
        self.records.clear()


class LoggingTracer:
    """Emits each record at DEBUG on the trace logger.

    Route it to a file with a handler on DEFAULT_TRACE_LOGGER; the
    record is only formatted when DEBUG is enabled for that logger.
    """

    def __init__(self, logger_name: str = DEFAULT_TRACE_LOGGER):
        self.logger = logging.getLogger(logger_name)

    def __call__(self, record: TraceRecord):
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(record.format())
