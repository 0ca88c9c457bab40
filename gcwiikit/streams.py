"""Binary stream helpers: exact reads, big-endian integers and windowed readers."""

from __future__ import annotations

import io
import struct
from typing import BinaryIO

_COPY_CHUNK = 0x10000


def buf_copy(reader: BinaryIO, writer: BinaryIO) -> int:
    """Copy everything left in ``reader`` to ``writer``; return the byte count."""
    copied = 0
    while True:
        chunk = reader.read(_COPY_CHUNK)
        if not chunk:
            return copied
        writer.write(chunk)
        copied += len(chunk)


def align_up(value: int, align: int) -> int:
    """Round ``value`` up to a multiple of the power-of-two ``align``."""
    return (value + (align - 1)) & ~(align - 1)


def align_down(value: int, align: int) -> int:
    """Round ``value`` down to a multiple of the power-of-two ``align``."""
    return value & ~(align - 1)


def read_exact(reader: BinaryIO, size: int) -> bytes:
    """Read exactly ``size`` bytes, raising EOFError if the stream ends early."""
    chunks = []
    remaining = size
    while remaining > 0:
        chunk = reader.read(remaining)
        if not chunk:
            raise EOFError(f"expected {size} bytes, got {size - remaining}")
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def read_exact_at(reader: BinaryIO, size: int, offset: int) -> bytes:
    """Read exactly ``size`` bytes starting at absolute ``offset``."""
    reader.seek(offset)
    return read_exact(reader, size)


def read_u16_be(reader: BinaryIO) -> int:
    """Read a big-endian unsigned 16-bit integer."""
    return struct.unpack(">H", read_exact(reader, 2))[0]


def read_u32_be(reader: BinaryIO) -> int:
    """Read a big-endian unsigned 32-bit integer."""
    return struct.unpack(">I", read_exact(reader, 4))[0]


def read_u64_be(reader: BinaryIO) -> int:
    """Read a big-endian unsigned 64-bit integer."""
    return struct.unpack(">Q", read_exact(reader, 8))[0]


def read_with_zero_fill(reader: BinaryIO, size: int) -> tuple[bytes, int]:
    """Read up to ``size`` bytes, padding with zeroes at end of stream.

    Returns the ``size``-byte block and the number of bytes actually read.
    """
    chunks = []
    total = 0
    while total < size:
        chunk = reader.read(size - total)
        if not chunk:
            break
        chunks.append(chunk)
        total += len(chunk)
    return b"".join(chunks) + bytes(size - total), total


class WindowedReader(io.RawIOBase):
    """A read-only view of a fixed window of an underlying seekable stream."""

    def __init__(self, base: BinaryIO, offset: int, size: int) -> None:
        super().__init__()
        self._base = base
        self._begin = offset
        self._end = offset + size
        self._pos = offset
        base.seek(offset)

    def __len__(self) -> int:
        return self._end - self._begin

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def read(self, size: int | None = -1) -> bytes:
        limit = max(self._end - self._pos, 0)
        if size is None or size < 0 or size > limit:
            size = limit
        if size == 0:
            return b""
        data = self._base.read(size)[:size]
        self._pos += len(data)
        return data

    def readinto(self, buffer) -> int:
        view = memoryview(buffer).cast("B")
        data = self.read(len(view))
        view[:len(data)] = data
        return len(data)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        if whence == io.SEEK_SET:
            pos = self._begin + offset
        elif whence == io.SEEK_CUR:
            pos = self._pos + offset
        elif whence == io.SEEK_END:
            pos = self._end + offset
        else:
            raise ValueError(f"invalid whence: {whence}")
        pos = min(max(pos, self._begin), self._end)
        self._pos = self._base.seek(pos)
        return self._pos - self._begin

    def tell(self) -> int:
        return self._pos - self._begin