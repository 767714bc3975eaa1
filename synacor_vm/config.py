"""
Synacor VM - Machine Constants and Front-End Defaults

Everything the VM treats as a fixed property of the architecture lives
here, next to the defaults the command line falls back to. Override the
defaults per call (keyword arguments) rather than editing this module.
"""

# =============================================================================
#  WORD DOMAIN
# =============================================================================
WORD_MODULUS = 32768       # arithmetic results are reduced mod 2^15
MAX_LITERAL = 32767        # largest value a literal operand can carry
VALUE_MASK = 0x7FFF        # 15-bit mask (NOT)
CHAR_MASK = 0xFF           # OUT/IN move one 8-bit character

# Register references: raw words 32768..32775 name r0..r7
REGISTER_BASE = 32768
REGISTER_COUNT = 8
MAX_RAW_WORD = REGISTER_BASE + REGISTER_COUNT - 1


# =============================================================================
#  ADDRESS SPACE
# =============================================================================
# Cells reachable by a 15-bit address. The core sizes memory to the image;
# the front end pads up to this so programs can write past their own end.
ADDRESS_SPACE_WORDS = 32768


# =============================================================================
#  FRONT END
# =============================================================================
DEFAULT_IMAGE = "challenge.bin"
DEFAULT_SERIAL_BAUD = 9600
DEFAULT_TRACE_LOGGER = "synacor_vm.trace"
