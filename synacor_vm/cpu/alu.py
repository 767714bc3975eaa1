"""
Synacor VM - ALU Operations

Pure functions over 15-bit operand values. Each returns the value to be
stored in the destination register; the caller resolves operands and
picks the destination.

ADD and MULT reduce mod 32768 after computing the exact result. Python
integers do not overflow, so the MULT product (up to 32767 * 32767) is
formed in full before the reduction.
"""

from ..config import WORD_MODULUS, VALUE_MASK
from ..errors import DivisionByZero


def add15(b: int, c: int) -> int:
    """(b + c) mod 32768"""
    return (b + c) % WORD_MODULUS


def mult15(b: int, c: int) -> int:
    """(b * c) mod 32768, from the full-width product."""
    return (b * c) % WORD_MODULUS


def mod15(b: int, c: int) -> int:
    """b mod c. A zero divisor traps."""
    if c == 0:
        raise DivisionByZero("Modulo by zero", operand=c)
    return b % c


def and15(b: int, c: int) -> int:
    return b & c


def or15(b: int, c: int) -> int:
    return b | c


def not15(b: int) -> int:
    """Bitwise complement, masked to 15 bits."""
    return ~b & VALUE_MASK


def eq(b: int, c: int) -> int:
    return 1 if b == c else 0


def gt(b: int, c: int) -> int:
    return 1 if b > c else 0
