"""Lagged Fibonacci generator for GameCube / Wii partition junk data."""

from __future__ import annotations

import struct
from typing import BinaryIO

SECTOR_SIZE = 0x8000

LFG_K = 521
LFG_K_BYTES = LFG_K * 4
LFG_J = 32
SEED_SIZE = 17
SEED_SIZE_BYTES = SEED_SIZE * 4

_MASK32 = 0xFFFFFFFF
_WORDS_FORMAT = f">{LFG_K}I"
_SEED_FORMAT = f">{SEED_SIZE}I"


def _disc_id_bytes(disc_id: bytes) -> bytes:
    disc_id = bytes(disc_id)
    if len(disc_id) != 4:
        raise ValueError(f"disc ID must be 4 bytes, got {len(disc_id)}")
    return disc_id


def generate_seed(disc_id: bytes, disc_num: int, sector: int) -> list[int]:
    """Generate the 17-word junk data seed for a disc ID, disc number and sector."""
    d = _disc_id_bytes(disc_id)
    seed = int.from_bytes(
        bytes([d[2], d[1], (d[3] + d[2]) & 0xFF, (d[0] + d[1]) & 0xFF]), "big"
    ) ^ (disc_num & 0xFF)
    n = ((seed * 0x260BCD5) & _MASK32) ^ (((sector & _MASK32) * 0x1EF29123) & _MASK32)
    out = []
    for _ in range(SEED_SIZE):
        value = 0
        for _ in range(LFG_J):
            n = (n * 0x5D588B65 + 1) & _MASK32
            value = (value >> 1) | (n & 0x80000000)
        out.append(value)
    out[16] ^= (out[0] >> 9) ^ ((out[16] << 23) & _MASK32)
    return out


def generate_seed_be(disc_id: bytes, disc_num: int, sector: int) -> bytes:
    """Generate the junk data seed serialised as big-endian bytes."""
    return struct.pack(_SEED_FORMAT, *generate_seed(disc_id, disc_num, sector))


def _common_prefix_len(a: bytes, b: bytes) -> int:
    return next(
        (i for i, (x, y) in enumerate(zip(a, b)) if x != y),
        min(len(a), len(b)),
    )


class LaggedFibonacci:
    """Lagged Fibonacci generator producing GC / Wii junk data."""

    def __init__(self) -> None:
        self._buffer = [0] * LFG_K
        self._bytes: bytes | None = None
        self._position = 0

    def _init(self) -> None:
        b = self._buffer
        for i in range(SEED_SIZE, LFG_K):
            b[i] = (
                ((b[i - SEED_SIZE] << 23) & _MASK32)
                ^ (b[i - SEED_SIZE + 1] >> 9)
                ^ b[i - 1]
            )
        # Apply the output shift (18 instead of 16) up front.
        self._buffer = [(x & 0xFF00FFFF) | ((x >> 2) & 0x00FF0000) for x in b]
        for _ in range(4):
            self._forward()

    def _forward(self) -> None:
        b = self._buffer
        b[:LFG_J] = [x ^ y for x, y in zip(b[:LFG_J], b[LFG_K - LFG_J:])]
        for start in range(LFG_J, LFG_K, LFG_J):
            end = min(start + LFG_J, LFG_K)
            b[start:end] = [
                x ^ y for x, y in zip(b[start:end], b[start - LFG_J:end - LFG_J])
            ]
        self._bytes = None

    def _output(self) -> bytes:
        if self._bytes is None:
            self._bytes = struct.pack(_WORDS_FORMAT, *self._buffer)
        return self._bytes

    def _normalize(self) -> None:
        while self._position >= LFG_K_BYTES:
            self._forward()
            self._position -= LFG_K_BYTES

    def _seed_with_words(self, words: list[int] | tuple[int, ...]) -> None:
        self._buffer[:SEED_SIZE] = list(words)
        self._position = 0
        self._init()

    def init_with_seed(self, disc_id: bytes, disc_num: int, partition_offset: int) -> None:
        """Seed from disc ID, disc number and the offset within the partition."""
        sector, sector_offset = divmod(partition_offset, SECTOR_SIZE)
        self._seed_with_words(generate_seed(disc_id, disc_num, sector))
        self.skip(sector_offset)

    def init_with_reader(self, reader: BinaryIO) -> None:
        """Seed from a big-endian seed read from a binary stream."""
        chunks = []
        remaining = SEED_SIZE_BYTES
        while remaining > 0:
            chunk = reader.read(remaining)
            if not chunk:
                raise EOFError("Filling LFG seed")
            chunks.append(chunk)
            remaining -= len(chunk)
        self._seed_with_words(struct.unpack(_SEED_FORMAT, b"".join(chunks)))

    def init_with_bytes(self, data: bytes) -> None:
        """Seed from the first 68 bytes of a big-endian seed buffer."""
        if len(data) < SEED_SIZE_BYTES:
            raise EOFError("Filling LFG seed")
        self._seed_with_words(struct.unpack(_SEED_FORMAT, bytes(data[:SEED_SIZE_BYTES])))

    def skip(self, n: int) -> None:
        """Skip ``n`` bytes of junk data."""
        self._position += n
        self._normalize()

    def _chunks(self, length: int):
        while length > 0:
            self._normalize()
            take = min(length, LFG_K_BYTES - self._position)
            yield self._output()[self._position:self._position + take]
            self._position += take
            length -= take

    def fill(self, size: int) -> bytes:
        """Return the next ``size`` bytes of junk data."""
        return b"".join(self._chunks(size))

    def write(self, w: BinaryIO, length: int) -> None:
        """Write ``length`` bytes of junk data to a binary stream."""
        for chunk in self._chunks(length):
            w.write(chunk)

    def _sector_spans(self, length: int, partition_offset: int):
        while length > 0:
            span = min(SECTOR_SIZE - partition_offset % SECTOR_SIZE, length)
            yield partition_offset, span
            length -= span
            partition_offset += span

    def fill_sector_chunked(
        self, size: int, disc_id: bytes, disc_num: int, partition_offset: int
    ) -> bytes:
        """Return junk data, reseeding at every 32 KiB sector boundary."""
        parts = []
        for offset, span in self._sector_spans(size, partition_offset):
            self.init_with_seed(disc_id, disc_num, offset)
            parts.append(self.fill(span))
        return b"".join(parts)

    def write_sector_chunked(
        self,
        w: BinaryIO,
        length: int,
        disc_id: bytes,
        disc_num: int,
        partition_offset: int,
    ) -> None:
        """Write junk data, reseeding at every 32 KiB sector boundary."""
        for offset, span in self._sector_spans(length, partition_offset):
            self.init_with_seed(disc_id, disc_num, offset)
            self.write(w, span)

    def check(
        self, buf: bytes, disc_id: bytes, disc_num: int, partition_offset: int
    ) -> int:
        """Count leading bytes of ``buf`` matching junk data, up to the next sector boundary."""
        self.init_with_seed(disc_id, disc_num, partition_offset)
        span = min(SECTOR_SIZE - partition_offset % SECTOR_SIZE, len(buf))
        return _common_prefix_len(buf[:span], self.fill(span))

    def check_sector_chunked(
        self, buf: bytes, disc_id: bytes, disc_num: int, partition_offset: int
    ) -> int:
        """Count leading bytes of ``buf`` matching junk data across sector boundaries."""
        total = 0
        pos = 0
        for offset, span in self._sector_spans(len(buf), partition_offset):
            self.init_with_seed(disc_id, disc_num, offset)
            matching = _common_prefix_len(buf[pos:pos + span], self.fill(span))
            total += matching
            if matching != span:
                break
            pos += span
        return total