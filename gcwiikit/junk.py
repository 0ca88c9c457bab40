"""Disc layout helpers for rebuilding GameCube images with junk data."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .lfg import SECTOR_SIZE

_log = logging.getLogger(__name__)

# Beta and sample discs whose junk data does not use their own game ID.
_OVERRIDE_JUNK_IDS: dict[tuple[bytes, int, int], bytes] = {
    (b"DALJ01", 0, 0): b"DPIJ",
    (b"DFIJ13", 0, 0): b"GFIJ",
    (b"DMTJ18", 0, 0): b"GMTJ",
    (b"DSWJ13", 0, 0): b"GSWJ",
    (b"GHEE91", 0, 1): b"GHEJ",
    (b"GKQE01", 0, 0): b"GKQJ",
    (b"GL3EE8", 0, 0): b"GL3J",
    (b"GL3EE8", 1, 0): b"GL3J",
    (b"GXQP41", 0, 0): b"GXQF",
    (b"GY3E01", 0, 0): b"GY3J",
    (b"PZHP69", 0, 0): b"GNDP",
}


@dataclass
class FileWriteInfo:
    """A file placed at a fixed offset in the disc layout."""

    name: str
    offset: int
    length: int


def _game_id_bytes(game_id: bytes | str) -> bytes:
    if isinstance(game_id, str):
        game_id = game_id.encode("ascii")
    return bytes(game_id)


def gcm_align(n: int) -> int:
    """Align to 4 bytes with the 28-byte padding used before junk data."""
    return (n + 31) & ~3


def get_override_junk_id(
    game_id: bytes | str, disc_num: int, disc_version: int
) -> bytes | None:
    """Return the junk ID for discs whose junk does not match their game ID."""
    return _OVERRIDE_JUNK_IDS.get((_game_id_bytes(game_id), disc_num, disc_version))


def get_junk_id(game_id: bytes | str, disc_num: int, disc_version: int) -> bytes:
    """Return the 4-byte ID used to seed a disc's junk data."""
    override = get_override_junk_id(game_id, disc_num, disc_version)
    if override is not None:
        _log.info("Using override junk ID: %s", override.decode("ascii"))
        return override
    game_id = _game_id_bytes(game_id)
    if len(game_id) < 4:
        raise ValueError(f"game ID must be at least 4 bytes, got {len(game_id)}")
    return game_id[:4]


def sort_files(files: list[FileWriteInfo]) -> list[FileWriteInfo]:
    """Sort files by offset and length in place, raising ValueError on overlap."""
    files.sort(key=lambda info: (info.offset, info.length))
    for prev, cur in zip(files, files[1:]):
        if cur.offset < prev.offset + prev.length:
            raise ValueError(
                f"File {cur.name} (0x{cur.offset:X}-0x{cur.offset + cur.length:X}) "
                f"overlaps with {prev.name} "
                f"(0x{prev.offset:X}-0x{prev.offset + prev.length:X})"
            )
    return files


def find_file_gap(file_infos: list[FileWriteInfo], fst_end: int) -> int | None:
    """Find where inner-rim files end and a gap before outer-rim files begins."""
    last_offset = 0
    for info in file_infos:
        if last_offset > fst_end and info.offset > last_offset + SECTOR_SIZE:
            _log.debug("Found file gap at %X -> %X", last_offset, info.offset)
            return last_offset
        last_offset = info.offset + info.length
    return None