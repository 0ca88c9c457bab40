"""A compact, CRC32-sorted database of known-good disc dumps built from DAT files."""

from __future__ import annotations

import bisect
import os
import struct
import threading
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Iterable, Iterator

import zstandard

_HEADER = struct.Struct("<II")
_ENTRY = struct.Struct("<III16s20s")
_NAME_LEN = struct.Struct("<I")
ENTRY_SIZE = _ENTRY.size
_SECTOR_SIZE = 0x8000


@dataclass(frozen=True)
class GameResult:
    """One database entry: a game name and the checksums of its disc image."""

    name: str
    crc32: int
    md5: bytes
    sha1: bytes
    sectors: int = 0


def _hex_field(rom: ET.Element, attr: str, size: int, game: str) -> bytes:
    text = rom.get(attr)
    if text is None:
        raise ValueError(f"Game {game!r}: rom is missing the {attr!r} attribute")
    try:
        value = bytes.fromhex(text)
    except ValueError as exc:
        raise ValueError(f"Game {game!r}: invalid hex in {attr!r}: {text!r}") from exc
    if len(value) != size:
        raise ValueError(
            f"Game {game!r}: {attr!r} must be {size} bytes, got {len(value)}"
        )
    return value


def parse_dat(path: str | os.PathLike) -> list[GameResult]:
    """Parse a DAT file, keeping only games that consist of exactly one rom."""
    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as exc:
        raise ValueError(f"Failed to parse dat file {path}: {exc}") from exc
    results = []
    for game in root.findall("game"):
        name = game.get("name")
        if name is None:
            raise ValueError(f"Failed to parse dat file {path}: game without a name")
        roms = game.findall("rom")
        if len(roms) != 1:
            continue
        rom = roms[0]
        size_text = rom.get("size")
        if size_text is None:
            raise ValueError(f"Game {name!r}: rom is missing the 'size' attribute")
        try:
            size = int(size_text)
        except ValueError as exc:
            raise ValueError(f"Game {name!r}: invalid size {size_text!r}") from exc
        results.append(
            GameResult(
                name=name,
                crc32=int.from_bytes(_hex_field(rom, "crc", 4, name), "big"),
                md5=_hex_field(rom, "md5", 16, name),
                sha1=_hex_field(rom, "sha1", 20, name),
                sectors=-(-size // _SECTOR_SIZE),
            )
        )
    return results


class RedumpDatabase:
    """A read-only game database stored in its packed binary form."""

    def __init__(self, data: bytes) -> None:
        data = bytes(data)
        if len(data) < _HEADER.size:
            raise ValueError("Redump data too short for header")
        count, entry_size = _HEADER.unpack_from(data, 0)
        if entry_size != ENTRY_SIZE:
            raise ValueError(f"Unexpected entry size {entry_size}, expected {ENTRY_SIZE}")
        table_start = _HEADER.size + count * ENTRY_SIZE
        if len(data) < table_start:
            raise ValueError("Redump data too short for entries")
        strings = memoryview(data)[table_start:]
        entries = []
        for crc32, offset, sectors, md5, sha1 in _ENTRY.iter_unpack(
            data[_HEADER.size:table_start]
        ):
            if offset + _NAME_LEN.size > len(strings):
                raise ValueError(f"Name offset {offset} out of range")
            (name_len,) = _NAME_LEN.unpack_from(strings, offset)
            start = offset + _NAME_LEN.size
            if start + name_len > len(strings):
                raise ValueError(f"Name at offset {offset} out of range")
            name = bytes(strings[start:start + name_len]).decode("utf-8")
            entries.append(GameResult(name, crc32, md5, sha1, sectors))
        self._data = data
        self._entries = entries
        self._crcs = [entry.crc32 for entry in entries]

    @classmethod
    def from_entries(cls, entries: Iterable[GameResult]) -> "RedumpDatabase":
        """Build a database from entries, sorting them by CRC32."""
        ordered = sorted(entries, key=lambda entry: entry.crc32)
        records = []
        names = []
        offset = 0
        for entry in ordered:
            encoded = entry.name.encode("utf-8")
            records.append(
                _ENTRY.pack(entry.crc32, offset, entry.sectors, entry.md5, entry.sha1)
            )
            names.append(_NAME_LEN.pack(len(encoded)) + encoded)
            offset += _NAME_LEN.size + len(encoded)
        data = _HEADER.pack(len(ordered), ENTRY_SIZE) + b"".join(records) + b"".join(names)
        return cls(data)

    @classmethod
    def from_dats(cls, paths: Iterable[str | os.PathLike]) -> "RedumpDatabase":
        """Build a database from one or more DAT files."""
        entries: list[GameResult] = []
        for path in paths:
            entries.extend(parse_dat(path))
        return cls.from_entries(entries)

    @classmethod
    def from_compressed(cls, data: bytes) -> "RedumpDatabase":
        """Load a database from its zstd-compressed packed form."""
        try:
            raw = zstandard.ZstdDecompressor().decompress(bytes(data))
        except zstandard.ZstdError as exc:
            raise ValueError(f"Failed to decompress redump data: {exc}") from exc
        return cls(raw)

    def to_bytes(self) -> bytes:
        """Return the packed binary form."""
        return self._data

    def to_compressed(self) -> bytes:
        """Return the packed form compressed with zstd, recording its size."""
        compressor = zstandard.ZstdCompressor(
            level=zstandard.MAX_COMPRESSION_LEVEL, write_content_size=True
        )
        return compressor.compress(self._data)

    def find_by_crc32(self, crc32: int) -> GameResult | None:
        """Find the entry with the given CRC32, if any."""
        index = bisect.bisect_left(self._crcs, crc32)
        if index < len(self._crcs) and self._crcs[index] == crc32:
            return self._entries[index]
        return None

    def __iter__(self) -> Iterator[GameResult]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


_loaded: RedumpDatabase | None = None
_lock = threading.Lock()


def load_dats(paths: Iterable[str | os.PathLike]) -> None:
    """Load DAT files as the process-wide database; this can be done once."""
    global _loaded
    database = RedumpDatabase.from_dats(paths)
    with _lock:
        if _loaded is not None:
            raise RuntimeError("dats already loaded")
        _loaded = database


def find_by_crc32(crc32: int) -> GameResult | None:
    """Look up a CRC32 in the process-wide database."""
    database = _loaded
    return None if database is None else database.find_by_crc32(crc32)


def iter_entries() -> Iterator[GameResult]:
    """Iterate over the process-wide database in CRC32 order."""
    database = _loaded
    if database is not None:
        yield from database