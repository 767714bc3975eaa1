"""
Synacor VM - Opcode Table + Operand Resolution

Opcode map (value: mnemonic, operand signature):

   0 HALT            8 JF   v v        16 WMEM v v
   1 SET  d v        9 ADD  d v v      17 CALL v
   2 PUSH v         10 MULT d v v      18 RET
   3 POP  d         11 MOD  d v v      19 OUT  v
   4 EQ   d v v     12 AND  d v v      20 IN   d
   5 GT   d v v     13 OR   d v v      21 NOOP
   6 JMP  v         14 NOT  d v
   7 JT   v v       15 RMEM d v

  d = destination register (must decode to a RegisterRef)
  v = value (Literal, or RegisterRef resolved by reading the register)

decode_opcode() validates the raw word against this table; no raw word
is ever reinterpreted as an Opcode without the lookup succeeding.
"""

from enum import IntEnum
from typing import Dict, Tuple

from ..errors import InvalidOpcode, InvalidWriteTarget
from .regs import RegisterBank
from .word import Literal, Operand, RegisterRef


# Operand kinds
DEST = 'd'
VALUE = 'v'


class Opcode(IntEnum):
    HALT = 0
    SET = 1
    PUSH = 2
    POP = 3
    EQ = 4
    GT = 5
    JMP = 6
    JT = 7
    JF = 8
    ADD = 9
    MULT = 10
    MOD = 11
    AND = 12
    OR = 13
    NOT = 14
    RMEM = 15
    WMEM = 16
    CALL = 17
    RET = 18
    OUT = 19
    IN = 20
    NOOP = 21


OPERANDS: Dict[Opcode, Tuple[str, ...]] = {
    Opcode.HALT: (),
    Opcode.SET:  (DEST, VALUE),
    Opcode.PUSH: (VALUE,),
    Opcode.POP:  (DEST,),
    Opcode.EQ:   (DEST, VALUE, VALUE),
    Opcode.GT:   (DEST, VALUE, VALUE),
    Opcode.JMP:  (VALUE,),
    Opcode.JT:   (VALUE, VALUE),
    Opcode.JF:   (VALUE, VALUE),
    Opcode.ADD:  (DEST, VALUE, VALUE),
    Opcode.MULT: (DEST, VALUE, VALUE),
    Opcode.MOD:  (DEST, VALUE, VALUE),
    Opcode.AND:  (DEST, VALUE, VALUE),
    Opcode.OR:   (DEST, VALUE, VALUE),
    Opcode.NOT:  (DEST, VALUE),
    Opcode.RMEM: (DEST, VALUE),
    Opcode.WMEM: (VALUE, VALUE),
    Opcode.CALL: (VALUE,),
    Opcode.RET:  (),
    Opcode.OUT:  (VALUE,),
    Opcode.IN:   (DEST,),
    Opcode.NOOP: (),
}


def decode_opcode(raw: int) -> Opcode:
    """Map a raw word to its Opcode, or raise InvalidOpcode."""
    try:
        return Opcode(raw)
    except ValueError:
        raise InvalidOpcode(f"Invalid opcode {raw}", opcode=raw) from None


def operand_count(opcode: Opcode) -> int:
    return len(OPERANDS[opcode])


def resolve_value(operand: Operand, regs: RegisterBank) -> int:
    """Literal -> its value; RegisterRef -> current register content."""
    if isinstance(operand, RegisterRef):
        return regs[operand.slot]
    return operand.value


def resolve_write_slot(operand: Operand) -> int:
    """RegisterRef -> its slot. A literal can never be written to."""
    if isinstance(operand, Literal):
        raise InvalidWriteTarget(
            f"Literal {operand.value} used as destination register",
            operand=operand)
    return operand.slot
