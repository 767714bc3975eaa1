"""
Synacor VM - Program Image Loader

A program image is a flat file of 16-bit little-endian words:

  byte 2n   low byte of word n
  byte 2n+1 high byte of word n

The loader owns every file-level failure (missing file, trailing odd
byte) and reports it as ImageError; the VM only ever sees a clean list
of words.
"""

import logging
import struct
from pathlib import Path
from typing import List, Union

from ..errors import ImageError

log = logging.getLogger(__name__)

_WORD = struct.Struct('<H')


def words_from_bytes(data: bytes) -> List[int]:
    """Pair raw bytes little-endian into 16-bit words."""
    if len(data) % _WORD.size:
        raise ImageError(
            f"Image is {len(data)} bytes; expected an even number "
            f"(trailing byte 0x{data[-1]:02X})")
    return [word for (word,) in _WORD.iter_unpack(data)]


def words_to_bytes(words) -> bytes:
    """Inverse of words_from_bytes, for writing test images."""
    return b''.join(_WORD.pack(w) for w in words)


def load_image(path: Union[str, Path]) -> List[int]:
    """Read a program image file and decode it to words."""
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ImageError(f"Cannot read image {path}: {e}") from e
    words = words_from_bytes(data)
    log.info(f"Loaded image {path.name}: {len(words)} words")
    return words
