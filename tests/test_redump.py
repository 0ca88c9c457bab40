import struct

import pytest

from gcwiikit.redump import (
    GameResult,
    RedumpDatabase,
    find_by_crc32,
    iter_entries,
    load_dats,
    parse_dat,
)


def _entry(name, crc32, sectors=1):
    return GameResult(name, crc32, bytes([crc32 & 0xFF]) * 16, bytes([0xAB]) * 20, sectors)


def _write_dat(path, games):
    lines = ['<?xml version="1.0"?>', "<datafile>", "<header><name>Test</name></header>"]
    for name, roms in games:
        lines.append(f'<game name="{name}">')
        for size, crc in roms:
            lines.append(
                f'<rom name="{name}.iso" size="{size}" crc="{crc}" '
                f'md5="{"11" * 16}" sha1="{"22" * 20}"/>'
            )
        lines.append("</game>")
    lines.append("</datafile>")
    path.write_text("\n".join(lines), encoding="utf-8")
    return path


def test_from_entries_sorts_and_finds():
    entries = [_entry("Zeta", 300), _entry("Alpha", 100), _entry("Mid", 200)]
    db = RedumpDatabase.from_entries(entries)
    assert len(db) == 3
    assert [e.crc32 for e in db] == [100, 200, 300]
    assert db.find_by_crc32(200) == entries[2]
    assert db.find_by_crc32(150) is None
    assert db.find_by_crc32(999) is None


def test_bytes_round_trip():
    entries = [_entry("Game A", 5), _entry("Game \u00e9", 7, sectors=3)]
    db = RedumpDatabase.from_entries(entries)
    again = RedumpDatabase(db.to_bytes())
    assert list(again) == list(db)
    assert again.to_bytes() == db.to_bytes()


def test_header_layout():
    db = RedumpDatabase.from_entries([_entry("A", 1), _entry("B", 2)])
    assert db.to_bytes()[:8] == struct.pack("<II", 2, 48)


def test_compressed_round_trip():
    db = RedumpDatabase.from_entries([_entry(f"Game {i}", i * 17) for i in range(50)])
    restored = RedumpDatabase.from_compressed(db.to_compressed())
    assert list(restored) == list(db)


def test_invalid_data_raises():
    with pytest.raises(ValueError):
        RedumpDatabase(b"\x00\x00")
    with pytest.raises(ValueError):
        RedumpDatabase(struct.pack("<II", 1, 12))
    with pytest.raises(ValueError):
        RedumpDatabase(struct.pack("<II", 5, 48))
    with pytest.raises(ValueError):
        RedumpDatabase.from_compressed(b"not zstd data")


def test_parse_dat(tmp_path):
    path = _write_dat(
        tmp_path / "a.dat",
        [
            ("Single", [(0x8000, "1a2b3c4d")]),
            ("Multi", [(10, "00000001"), (10, "00000002")]),
            ("Partial", [(0x8001, "00000010")]),
        ],
    )
    games = parse_dat(path)
    assert [g.name for g in games] == ["Single", "Partial"]
    assert games[0].crc32 == 0x1A2B3C4D
    assert games[0].md5 == bytes.fromhex("11" * 16)
    assert games[0].sha1 == bytes.fromhex("22" * 20)
    assert games[0].sectors == 1
    assert games[1].sectors == 2


def test_parse_dat_errors(tmp_path):
    bad_xml = tmp_path / "bad.dat"
    bad_xml.write_text("<datafile><game>", encoding="utf-8")
    with pytest.raises(ValueError):
        parse_dat(bad_xml)
    bad_crc = _write_dat(tmp_path / "crc.dat", [("X", [(1, "1234")])])
    with pytest.raises(ValueError):
        parse_dat(bad_crc)


def test_from_dats(tmp_path):
    first = _write_dat(tmp_path / "1.dat", [("B", [(1, "00000020")])])
    second = _write_dat(tmp_path / "2.dat", [("A", [(1, "00000010")])])
    db = RedumpDatabase.from_dats([first, second])
    assert [g.name for g in db] == ["A", "B"]


def test_global_load(tmp_path):
    path = _write_dat(tmp_path / "g.dat", [("Global", [(1, "deadbeef")])])
    load_dats([path])
    found = find_by_crc32(0xDEADBEEF)
    assert found is not None and found.name == "Global"
    assert [g.name for g in iter_entries()] == ["Global"]
    with pytest.raises(RuntimeError):
        load_dats([path])