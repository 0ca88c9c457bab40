import io
import zlib

import pytest

from gcwiikit.hashstream import DiscFormatError, HashStream, check_file_size, file_size
from gcwiikit.lfg import SECTOR_SIZE, LaggedFibonacci


def test_write_passes_through_and_hashes():
    inner = io.BytesIO()
    stream = HashStream(inner)
    assert stream.write(b"hello ") == 6
    stream.write(b"world")
    assert inner.getvalue() == b"hello world"
    assert stream.tell() == 11
    assert stream.finish() == zlib.crc32(b"hello world")


def test_empty_stream_crc_is_zero():
    assert HashStream(io.BytesIO()).finish() == 0


def test_write_zeroes_spans_sectors():
    inner = io.BytesIO()
    stream = HashStream(inner)
    length = SECTOR_SIZE * 2 + 17
    stream.write_zeroes(length)
    assert inner.getvalue() == bytes(length)
    assert stream.tell() == length


def test_seek_forward_fills_zeroes():
    inner = io.BytesIO()
    stream = HashStream(inner)
    stream.write(b"ab")
    assert stream.seek(10) == 10
    stream.write(b"c")
    assert stream.seek(2, io.SEEK_CUR) == 13
    assert inner.getvalue() == b"ab" + bytes(8) + b"c" + bytes(2)
    assert stream.finish() == zlib.crc32(inner.getvalue())


def test_seek_to_current_position_is_noop():
    inner = io.BytesIO()
    stream = HashStream(inner)
    stream.write(b"xyz")
    assert stream.seek(3) == 3
    assert inner.getvalue() == b"xyz"


def test_seek_backwards_rejected():
    stream = HashStream(io.BytesIO())
    stream.write(b"abcd")
    with pytest.raises(ValueError):
        stream.seek(1)


def test_seek_end_unsupported():
    stream = HashStream(io.BytesIO())
    with pytest.raises(io.UnsupportedOperation):
        stream.seek(0, io.SEEK_END)


def test_junk_written_through_stream_matches_fill():
    disc_id = b"GM8E"
    inner = io.BytesIO()
    stream = HashStream(inner)
    LaggedFibonacci().write_sector_chunked(stream, 64, disc_id, 0, 0x27FF0)
    expected = LaggedFibonacci().fill_sector_chunked(64, disc_id, 0, 0x27FF0)
    assert inner.getvalue() == expected
    assert stream.finish() == zlib.crc32(expected)


def test_file_size_and_check(tmp_path):
    path = tmp_path / "boot.bin"
    path.write_bytes(bytes(40))
    assert file_size(path) == 40
    check_file_size(path, 40)
    with pytest.raises(DiscFormatError):
        check_file_size(path, 41)


def test_file_size_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        file_size(tmp_path / "missing.bin")