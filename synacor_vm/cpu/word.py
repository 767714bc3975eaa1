"""
Synacor VM - Word & Addressing Primitives

A memory cell holds a raw 16-bit word. Read as an operand it is one of:

  0     .. 32767   Literal(value)      - the value itself
  32768 .. 32775   RegisterRef(slot)   - register r0..r7
  32776 .. 65535   invalid             - InvalidOperandEncoding

Values the program computes are 15-bit: anything stored back into a
register or a memory cell is reduced mod 32768 first.
"""

from typing import NamedTuple, Union

from ..config import MAX_LITERAL, REGISTER_BASE, MAX_RAW_WORD, WORD_MODULUS
from ..errors import InvalidOperandEncoding


class Literal(NamedTuple):
    """Immediate operand - carries its value directly."""
    value: int

    def __str__(self):
        return str(self.value)


class RegisterRef(NamedTuple):
    """Register operand - names a Register Bank slot (0-7)."""
    slot: int

    def __str__(self):
        return f"r{self.slot}"


Operand = Union[Literal, RegisterRef]


def decode_word(raw: int) -> Operand:
    """Classify a raw memory word as a Literal or a RegisterRef."""
    if 0 <= raw <= MAX_LITERAL:
        return Literal(raw)
    if REGISTER_BASE <= raw <= MAX_RAW_WORD:
        return RegisterRef(raw - REGISTER_BASE)
    raise InvalidOperandEncoding(
        f"Invalid operand encoding {raw}", operand=raw)


def to_word(value: int) -> int:
    """Reduce an arithmetic result to the 15-bit value domain."""
    return value % WORD_MODULUS
