"""
Synacor VM - Address Space

One flat, 0-indexed array of words holding both code and data. Cells
keep the raw 16-bit word they were loaded with (code contains register
references); anything the program writes is a 15-bit value.

Sizing: by default the space is exactly as long as the image. Pass a
larger size to zero-pad, e.g. the full 32768-cell space a 15-bit
address can reach. Every access outside [0, size) raises
AddressOutOfRange.
"""

from typing import Dict, Iterable, Optional

from ..errors import AddressOutOfRange


class Memory:
    """Word-addressable memory initialised from a program image."""

    def __init__(self, image: Iterable[int] = (), size: Optional[int] = None):
        words = list(image)
        if size is None:
            size = len(words)
        if len(words) > size:
            raise ValueError(
                f"Image of {len(words)} words does not fit in {size} cells")
        self._mem = words + [0] * (size - len(words))

    def __len__(self):
        return len(self._mem)

    # --- Core read/write ---

    def check(self, addr: int) -> int:
        """Return addr if it names a cell, else raise AddressOutOfRange."""
        if not 0 <= addr < len(self._mem):
            raise AddressOutOfRange(
                f"Address {addr} outside memory of {len(self._mem)} words",
                operand=addr)
        return addr

    def read(self, addr: int) -> int:
        return self._mem[self.check(addr)]

    def write(self, addr: int, value: int):
        self._mem[self.check(addr)] = value

    # --- Snapshots (state comparison) ---

    def snapshot(self, start: int = 0, end: Optional[int] = None) -> tuple:
        """Copy cells start..end (inclusive; default: to the last cell)."""
        if end is None:
            end = len(self._mem) - 1
        return tuple(self._mem[start:end + 1])

    @staticmethod
    def diff_snapshots(snap_a, snap_b, base_addr: int = 0) -> Dict[int, tuple]:
        """Compare two snapshots, return {addr: (old, new)} for changes."""
        changes = {}
        for i in range(min(len(snap_a), len(snap_b))):
            if snap_a[i] != snap_b[i]:
                changes[base_addr + i] = (snap_a[i], snap_b[i])
        return changes
