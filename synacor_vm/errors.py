"""
Synacor VM - Error Taxonomy

Every VMError is fatal to the run. The loop stops at the failing
instruction and re-raises with the instruction's address and opcode
attached, so a caller can reproduce the condition from the message alone.

ImageError belongs to the program loader, not the machine: a bad image
never reaches the VM.
"""

from typing import Optional, Union


class VMError(Exception):
    """Base class for traps raised while executing an image.

    Attributes:
        address: isp of the instruction that trapped (start of the opcode)
        opcode:  opcode name, or the raw word when it did not decode
        operand: the offending operand or raw value, when there is one
    """

    def __init__(self, message: str, *, address: Optional[int] = None,
                 opcode: Optional[Union[str, int]] = None, operand=None):
        super().__init__(message)
        self.message = message
        self.address = address
        self.opcode = opcode
        self.operand = operand

    def __str__(self):
        context = []
        if self.address is not None:
            context.append(f"at {self.address}")
        if self.opcode is not None:
            context.append(f"opcode {self.opcode}")
        if self.operand is not None:
            context.append(f"operand {self.operand!r}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class InvalidOpcode(VMError):
    """Word at isp is not one of the 22 recognized opcodes."""


class InvalidOperandEncoding(VMError):
    """Raw operand word is neither a literal nor a register reference."""


class InvalidWriteTarget(VMError):
    """A literal was decoded where a destination register was required."""


class StackUnderflow(VMError):
    """POP or RET on an empty stack."""


class AddressOutOfRange(VMError):
    """Memory access or jump target outside the address space."""


class DivisionByZero(VMError):
    """MOD with a zero divisor."""


class InputExhausted(VMError):
    """IN executed after the input boundary reported end of input."""


class ImageError(Exception):
    """Program image could not be read or is not a whole number of words."""
