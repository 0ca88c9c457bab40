"""Rebuilding a GameCube disc image from files laid out at fixed offsets."""

from __future__ import annotations

import logging
from typing import BinaryIO, Callable, Sequence

from .hashstream import HashStream
from .junk import FileWriteInfo, find_file_gap, gcm_align
from .lfg import SECTOR_SIZE, LaggedFibonacci
from .streams import align_up

_log = logging.getLogger(__name__)

MINI_DVD_SIZE = 1_459_978_240

FileCallback = Callable[[HashStream], None]


def write_junk_data(
    lfg: LaggedFibonacci,
    out: BinaryIO,
    junk_id: bytes,
    disc_num: int,
    pos: int,
    end: int,
) -> None:
    """Seek to ``pos`` and write junk data up to ``end``."""
    out.seek(pos)
    lfg.write_sector_chunked(out, end - pos, junk_id, disc_num, pos)


def write_files(
    w: BinaryIO,
    file_infos: Sequence[FileWriteInfo],
    disc_num: int,
    fst_end: int,
    junk_id: bytes | None,
    callback: Callable[[HashStream, str], None],
) -> int:
    """Write sorted files, zero padding and junk data as a full mini DVD image.

    ``callback(out, name)`` must write exactly the named file's contents.
    Returns the CRC32 of the whole image.
    """
    file_gap = find_file_gap(list(file_infos), fst_end)
    lfg = LaggedFibonacci()
    out = HashStream(w)
    last_end = 0
    for info in file_infos:
        if junk_id is not None:
            aligned_end = gcm_align(last_end)
            if info.offset > aligned_end and last_end >= fst_end:
                # Junk normally starts after 28 bytes of padding, except between the
                # inner and outer rim files.
                junk_start = align_up(last_end, 4) if file_gap == last_end else aligned_end
                _log.debug("Writing junk data at %X -> %X", junk_start, info.offset)
                write_junk_data(lfg, out, junk_id, disc_num, junk_start, info.offset)
        _log.debug(
            "Writing file %s at %X -> %X", info.name, info.offset, info.offset + info.length
        )
        out.seek(info.offset)
        if info.length > 0:
            try:
                callback(out, info.name)
            except OSError as exc:
                raise OSError(f"Failed to write file {info.name}: {exc}") from exc
            cur = out.tell()
            if cur != info.offset + info.length:
                raise ValueError(
                    f"Wrote {cur - info.offset} bytes, expected {info.length}"
                )
        last_end = info.offset + info.length
    if junk_id is not None:
        aligned_end = gcm_align(last_end)
        if fst_end <= aligned_end < MINI_DVD_SIZE:
            _log.debug("Writing junk data at %X -> %X", aligned_end, MINI_DVD_SIZE)
            write_junk_data(lfg, out, junk_id, disc_num, aligned_end, MINI_DVD_SIZE)
            last_end = MINI_DVD_SIZE
    out.write_zeroes(MINI_DVD_SIZE - last_end)
    out.flush()
    return out.finish()


def check_junk_data(
    reader: BinaryIO, offset: int, length: int, junk_id: bytes, disc_num: int
) -> bool:
    """Whether ``length`` bytes at ``offset`` are exactly the disc's junk data."""
    if length == 0:
        return False
    reader.seek(offset)
    lfg = LaggedFibonacci()
    pos = offset
    remaining = length
    while remaining > 0:
        chunk = reader.read(min(remaining, SECTOR_SIZE))
        if not chunk:
            raise EOFError(f"Failed to read disc file at offset {offset}")
        if lfg.check_sector_chunked(chunk, junk_id, disc_num, pos) != len(chunk):
            return False
        pos += len(chunk)
        remaining -= len(chunk)
    return True