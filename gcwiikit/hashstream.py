"""A forward-only output stream that tracks a CRC32 of everything written."""

from __future__ import annotations

import io
import os
import zlib
from pathlib import Path
from typing import BinaryIO

from .lfg import SECTOR_SIZE

_ZERO_SECTOR = bytes(SECTOR_SIZE)


class DiscFormatError(ValueError):
    """Raised when disc input data does not have the expected shape."""


class HashStream:
    """Writes through to ``inner`` while computing a CRC32.

    Seeking forward fills the gap with zeroes; seeking backward is an error.
    """

    def __init__(self, inner: BinaryIO) -> None:
        self._inner = inner
        self._crc = 0
        self._position = 0

    def writable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def write(self, data: bytes) -> int:
        data = bytes(data)
        self._crc = zlib.crc32(data, self._crc)
        self._position += len(data)
        self._inner.write(data)
        return len(data)

    def write_zeroes(self, length: int) -> None:
        """Write ``length`` zero bytes."""
        while length > 0:
            chunk = min(length, SECTOR_SIZE)
            self.write(_ZERO_SECTOR[:chunk])
            length -= chunk

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        if whence == io.SEEK_SET:
            new_position = offset
        elif whence == io.SEEK_CUR:
            new_position = max(self._position + offset, 0)
        elif whence == io.SEEK_END:
            raise io.UnsupportedOperation("HashStream: SEEK_END is not supported")
        else:
            raise ValueError(f"invalid whence: {whence}")
        if new_position < self._position:
            raise ValueError("HashStream: Cannot seek backwards")
        self.write_zeroes(new_position - self._position)
        return new_position

    def tell(self) -> int:
        return self._position

    def flush(self) -> None:
        self._inner.flush()

    def finish(self) -> int:
        """Return the CRC32 of all data written so far."""
        return self._crc


def file_size(path: str | os.PathLike) -> int:
    """Return the size of a file, with the path named in any error."""
    try:
        return Path(path).stat().st_size
    except OSError as e:
        raise OSError(e.errno, f"Failed to get metadata for {path}: {e.strerror}") from e


def check_file_size(path: str | os.PathLike, expected: int) -> None:
    """Raise DiscFormatError unless the file is exactly ``expected`` bytes."""
    actual = file_size(path)
    if actual != expected:
        raise DiscFormatError(f"File {path} has size {actual}, expected {expected}")