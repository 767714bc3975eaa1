"""
Synacor VM - Disassembler

Walks a word image linearly using the VM's own opcode table. Code and
data share the address space, so any word that does not start a valid
instruction (unknown opcode, bad operand encoding, operands running off
the end) is listed as a single `.word` and the walk resumes at the next
cell.

    >>> for line in disassemble([9, 32768, 4, 4, 19, 32768, 0]):
    ...     print(line.format())
    00000: 0009 8000 0004 0004 ADD  r0, 4, 4
    00004: 0013 8000           OUT  r0
    00006: 0000                HALT
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from .cpu.decoder import OPERANDS, Opcode, decode_opcode
from .cpu.word import decode_word
from .errors import VMError


@dataclass
class Listing:
    address: int
    words: tuple
    mnemonic: str
    operands: tuple = ()

    def format(self) -> str:
        raw = ' '.join(f"{w:04X}" for w in self.words)
        text = f"{self.address:05d}: {raw:19s} {self.mnemonic:4s}"
        if self.operands:
            text += ' ' + ', '.join(self.operands)
        return text.rstrip()


def decode_one(words: Sequence[int], addr: int) -> Listing:
    """Decode the instruction starting at addr (or a `.word` entry)."""
    raw = words[addr]
    try:
        opcode = decode_opcode(raw)
        kinds = OPERANDS[opcode]
        end = addr + 1 + len(kinds)
        if end > len(words):
            raise IndexError(addr)
        operands = tuple(str(decode_word(w)) for w in words[addr + 1:end])
    except (VMError, IndexError):
        return Listing(addr, (raw,), '.word', (str(raw),))
    if opcode is Opcode.OUT and operands[0].isdigit():
        char = int(operands[0]) & 0xFF
        if 0x20 <= char < 0x7F:
            operands = (f"{operands[0]} '{chr(char)}'",)
    return Listing(addr, tuple(words[addr:end]), opcode.name, operands)


def disassemble(words: Sequence[int], start: int = 0,
                count: Optional[int] = None) -> List[Listing]:
    """Disassemble up to `count` entries starting at `start`."""
    listing = []
    addr = start
    while addr < len(words) and (count is None or len(listing) < count):
        entry = decode_one(words, addr)
        listing.append(entry)
        addr += len(entry.words)
    return listing
