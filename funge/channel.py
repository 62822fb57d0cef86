"""
funge.channel
=============
Byte / line oriented I/O used by the input and output instructions.

The dispatcher never touches ``sys.stdin`` / ``sys.stdout`` directly; it is
handed an ``IOChannel``.  Two implementations ship here:

``StreamChannel``
    Wraps a pair of binary streams (by default the process's stdin and
    stdout buffers).  Used by the CLI.

``MemoryChannel``
    Reads from a fixed byte string and collects output in memory.  Used by
    tests and by callers embedding the VM.

Error contract
--------------
Every method may raise ``OSError``.  Input errors are treated as transient
and retried by the dispatcher; output errors are fatal.
"""

from __future__ import annotations

import io
import sys
from abc import ABC, abstractmethod
from typing import BinaryIO, Optional, Union


class IOChannel(ABC):

    @abstractmethod
    def read_byte(self) -> Optional[int]:
        """Block until one byte is available; ``None`` at end of input."""

    @abstractmethod
    def read_line(self) -> str:
        """Block until a full line is available; ``""`` at end of input."""

    @abstractmethod
    def write_byte(self, value: int) -> None:
        ...

    @abstractmethod
    def write_text(self, text: str) -> None:
        ...

    @abstractmethod
    def flush(self) -> None:
        ...


class StreamChannel(IOChannel):
    """IOChannel over binary streams.

    Both input instructions share ``reader``, so bytes consumed by ``~`` are
    not seen again by ``&`` and vice versa.
    """

    def __init__(self, reader: Optional[BinaryIO] = None,
                 writer: Optional[BinaryIO] = None):
        self.reader = reader if reader is not None else sys.stdin.buffer
        self.writer = writer if writer is not None else sys.stdout.buffer

    def read_byte(self) -> Optional[int]:
        data = self.reader.read(1)
        if not data:
            return None
        return data[0]

    def read_line(self) -> str:
        return self.reader.readline().decode("utf-8", errors="replace")

    def write_byte(self, value: int) -> None:
        self.writer.write(bytes((value,)))

    def write_text(self, text: str) -> None:
        self.writer.write(text.encode("ascii"))

    def flush(self) -> None:
        self.writer.flush()


class MemoryChannel(StreamChannel):
    """In-memory channel: fixed input, captured output."""

    def __init__(self, data: Union[bytes, str] = b""):
        if isinstance(data, str):
            data = data.encode("utf-8")
        super().__init__(io.BytesIO(data), io.BytesIO())

    @property
    def output(self) -> bytes:
        return self.writer.getvalue()

    @property
    def text(self) -> str:
        return self.output.decode("latin-1")
