"""
Synacor VM - Register Bank

Eight general purpose registers r0..r7, all zero at construction.
Writes are reduced to the 15-bit value domain so no register can ever
hold a raw register-reference encoding, whatever the source cell held.
"""

from typing import Tuple

from ..config import REGISTER_COUNT
from .word import to_word


class RegisterBank:
    """Fixed-size bank of word registers, indexed by slot."""

    __slots__ = ('_slots',)

    def __init__(self):
        self._slots = [0] * REGISTER_COUNT

    def __getitem__(self, slot: int) -> int:
        return self._slots[slot]

    def __setitem__(self, slot: int, value: int):
        self._slots[slot] = to_word(value)

    def __len__(self):
        return REGISTER_COUNT

    def __iter__(self):
        return iter(self._slots)

    def snapshot(self) -> Tuple[int, ...]:
        """Immutable copy of all eight registers (trace records, tests)."""
        return tuple(self._slots)

    def display(self) -> str:
        """Format register state for debugging."""
        return ' '.join(f"r{i}={v:05d}" for i, v in enumerate(self._slots))

    def reset(self):
        self._slots = [0] * REGISTER_COUNT
