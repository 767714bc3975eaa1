"""
Operand encoding, opcode table and ALU tests.

Boundary values come straight from the architecture description:
32767 is the largest literal, 32768..32775 are r0..r7, 32776 and up are
invalid.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import itertools

import pytest

from synacor_vm.cpu import alu
from synacor_vm.cpu.decoder import (
    Opcode, OPERANDS, DEST, VALUE, decode_opcode, operand_count,
    resolve_value, resolve_write_slot,
)
from synacor_vm.cpu.regs import RegisterBank
from synacor_vm.cpu.word import Literal, RegisterRef, decode_word, to_word
from synacor_vm.errors import (
    DivisionByZero, InvalidOpcode, InvalidOperandEncoding, InvalidWriteTarget,
)


# ─── Operand encoding ─────────────────────

class TestDecodeWord:
    def test_zero_is_literal(self):
        assert decode_word(0) == Literal(0)

    def test_largest_literal(self):
        """32767 is still a literal."""
        assert decode_word(32767) == Literal(32767)

    def test_first_register(self):
        assert decode_word(32768) == RegisterRef(0)

    def test_last_register(self):
        """32775 names r7."""
        assert decode_word(32775) == RegisterRef(7)

    def test_first_invalid_word(self):
        """32776 is past the register range."""
        with pytest.raises(InvalidOperandEncoding) as exc:
            decode_word(32776)
        assert exc.value.operand == 32776

    def test_max_raw_word_invalid(self):
        with pytest.raises(InvalidOperandEncoding):
            decode_word(0xFFFF)

    def test_operand_text(self):
        assert str(Literal(42)) == "42"
        assert str(RegisterRef(3)) == "r3"

    def test_to_word_reduces(self):
        assert to_word(32768) == 0
        assert to_word(32769) == 1
        assert to_word(32767) == 32767


# ─── Opcode table ─────────────────────

class TestOpcodeTable:
    def test_all_22_opcodes(self):
        assert len(Opcode) == 22
        assert set(OPERANDS) == set(Opcode)

    def test_decode_known_opcodes(self):
        for raw in range(22):
            assert decode_opcode(raw) == raw

    def test_decode_unknown_opcode(self):
        with pytest.raises(InvalidOpcode) as exc:
            decode_opcode(22)
        assert exc.value.opcode == 22

    def test_decode_register_encoding_is_not_opcode(self):
        with pytest.raises(InvalidOpcode):
            decode_opcode(32768)

    def test_operand_counts(self):
        cases = {
            Opcode.HALT: 0, Opcode.SET: 2, Opcode.PUSH: 1, Opcode.POP: 1,
            Opcode.EQ: 3, Opcode.JMP: 1, Opcode.JT: 2, Opcode.ADD: 3,
            Opcode.NOT: 2, Opcode.WMEM: 2, Opcode.CALL: 1, Opcode.RET: 0,
            Opcode.OUT: 1, Opcode.IN: 1, Opcode.NOOP: 0,
        }
        for opcode, count in cases.items():
            assert operand_count(opcode) == count, opcode.name

    def test_register_writers_take_destination_first(self):
        writers = [Opcode.SET, Opcode.POP, Opcode.EQ, Opcode.GT, Opcode.ADD,
                   Opcode.MULT, Opcode.MOD, Opcode.AND, Opcode.OR,
                   Opcode.NOT, Opcode.RMEM, Opcode.IN]
        for opcode in writers:
            assert OPERANDS[opcode][0] == DEST
            assert DEST not in OPERANDS[opcode][1:]
        assert OPERANDS[Opcode.WMEM] == (VALUE, VALUE)


# ─── Resolution ─────────────────────

class TestResolve:
    def test_literal_value(self):
        assert resolve_value(Literal(99), RegisterBank()) == 99

    def test_register_value(self):
        regs = RegisterBank()
        regs[5] = 1234
        assert resolve_value(RegisterRef(5), regs) == 1234

    def test_register_write_slot(self):
        assert resolve_write_slot(RegisterRef(7)) == 7

    def test_literal_write_slot_rejected(self):
        with pytest.raises(InvalidWriteTarget) as exc:
            resolve_write_slot(Literal(3))
        assert exc.value.operand == Literal(3)


# ─── ALU ─────────────────────

EDGE_VALUES = [0, 1, 2, 3, 255, 16384, 32766, 32767]


class TestALU:
    def test_add_wraps(self):
        assert alu.add15(32758, 15) == 5
        assert alu.add15(32767, 32767) == 32766

    def test_add_commutative_associative(self):
        for a, b, c in itertools.product(EDGE_VALUES, repeat=3):
            assert alu.add15(a, b) == alu.add15(b, a)
            assert alu.add15(alu.add15(a, b), c) == alu.add15(a, alu.add15(b, c))

    def test_mult_full_width_product(self):
        """32767 * 32767 = 1073676289; mod 32768 that is 1."""
        assert alu.mult15(32767, 32767) == 1
        assert alu.mult15(16384, 2) == 0
        assert alu.mult15(300, 200) == 60000 % 32768

    def test_mult_commutative_associative(self):
        for a, b, c in itertools.product(EDGE_VALUES, repeat=3):
            assert alu.mult15(a, b) == alu.mult15(b, a)
            assert alu.mult15(alu.mult15(a, b), c) == alu.mult15(a, alu.mult15(b, c))

    def test_mod(self):
        assert alu.mod15(10, 3) == 1
        assert alu.mod15(3, 10) == 3

    def test_mod_by_zero(self):
        with pytest.raises(DivisionByZero):
            alu.mod15(4, 0)

    def test_not_masks_to_15_bits(self):
        assert alu.not15(0) == 32767
        assert alu.not15(32767) == 0
        assert alu.not15(0x5555) == 0x2AAA

    def test_bitwise(self):
        assert alu.and15(0b1100, 0b1010) == 0b1000
        assert alu.or15(0b1100, 0b1010) == 0b1110

    def test_compare(self):
        assert alu.eq(7, 7) == 1
        assert alu.eq(7, 8) == 0
        assert alu.gt(8, 7) == 1
        assert alu.gt(7, 7) == 0

    def test_results_stay_in_word_domain(self):
        ops = [alu.add15, alu.mult15, alu.and15, alu.or15]
        for fn in ops:
            for a, b in itertools.product(EDGE_VALUES, repeat=2):
                assert 0 <= fn(a, b) <= 32767
        for a in EDGE_VALUES:
            assert 0 <= alu.not15(a) <= 32767
