"""
Synacor VM - Character I/O Boundary

OUT and IN talk to a console: any object with

  write(byte: int) -> None          one 8-bit character, in emission order
  read() -> Optional[int]           one 8-bit character, blocking;
                                    None once input is exhausted

The VM never buffers or reorders: each write() is forwarded as it
happens. End of input is reported as None and turned into a fatal
InputExhausted trap by the VM, since the instruction set has no EOF.

Implementations:
  StreamConsole  - binary streams (stdin/stdout by default)
  BufferConsole  - scripted input + captured output (tests, replay files)
  SerialConsole  - a serial port or pyserial URL (e.g. "loop://")
"""

import logging
import sys
from collections import deque
from typing import Optional, Union

import serial

from ..config import CHAR_MASK, DEFAULT_SERIAL_BAUD

log = logging.getLogger(__name__)


class StreamConsole:
    """Console over a pair of binary streams."""

    def __init__(self, stdin=None, stdout=None):
        self._in = stdin if stdin is not None else sys.stdin.buffer
        self._out = stdout if stdout is not None else sys.stdout.buffer

    def write(self, byte: int):
        self._out.write(bytes([byte & CHAR_MASK]))
        self._out.flush()

    def read(self) -> Optional[int]:
        data = self._in.read(1)
        if not data:
            return None
        return data[0]


class BufferConsole:
    """In-memory console.

    Input is served from a queue filled by the constructor or
    inject_input(). Every character written is kept in `output`.

    With a fallback console, output is echoed to it and reads continue
    from it once the queue is empty - a command script followed by an
    interactive session.
    """

    def __init__(self, input: Union[bytes, str] = b'', fallback=None):
        self.output = bytearray()
        self._rx_queue: deque = deque()
        self._fallback = fallback
        self.inject_input(input)

    def inject_input(self, data: Union[bytes, str]):
        if isinstance(data, str):
            data = data.encode('latin-1')
        self._rx_queue.extend(data)

    @property
    def pending(self) -> int:
        """Characters still queued for IN."""
        return len(self._rx_queue)

    @property
    def text(self) -> str:
        return self.output.decode('latin-1')

    def write(self, byte: int):
        byte &= CHAR_MASK
        self.output.append(byte)
        if self._fallback is not None:
            self._fallback.write(byte)

    def read(self) -> Optional[int]:
        if self._rx_queue:
            return self._rx_queue.popleft()
        if self._fallback is not None:
            return self._fallback.read()
        return None


class SerialConsole:
    """Console on a serial line, opened through pyserial.

    `port` is a device name (COM3, /dev/ttyUSB0) or any pyserial URL.
    Reads block until a character arrives (timeout=None); with a finite
    timeout an empty read counts as end of input.
    """

    def __init__(self, port: str, baud: int = DEFAULT_SERIAL_BAUD,
                 timeout: Optional[float] = None):
        self.port = port
        self.serial = serial.serial_for_url(
            port, baudrate=baud, timeout=timeout, write_timeout=timeout)
        log.info(f"Opened {port} at {baud} baud")

    def write(self, byte: int):
        self.serial.write(bytes([byte & CHAR_MASK]))
        self.serial.flush()

    def read(self) -> Optional[int]:
        data = self.serial.read(1)
        if not data:
            return None
        return data[0]

    def close(self):
        if self.serial.is_open:
            self.serial.close()
            log.info(f"Closed {self.port}")

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
