# gcwiikit

Building blocks for checking and rebuilding GameCube and Wii disc images in
Python.

## Modules

- `gcwiikit.lfg`: the lagged Fibonacci generator that produces the "junk"
  padding found on GameCube and Wii discs. `generate_seed` and
  `generate_seed_be` compute the 17-word seed for a disc ID, disc number and
  sector; `LaggedFibonacci` produces the data (`init_with_seed`,
  `init_with_reader`, `init_with_bytes`, `skip`, `fill`, `write`,
  `fill_sector_chunked`, `write_sector_chunked`) and compares existing data
  against it (`check`, `check_sector_chunked`). The `*_sector_chunked`
  methods reseed at every 32 KiB sector boundary.
- `gcwiikit.aes`: AES-128-CBC without padding (`aes_cbc_encrypt`,
  `aes_cbc_decrypt`) and Wii partition sector handling: `encrypt_sector`,
  `decrypt_sector` and `decrypt_sector_data` work on 0x8000-byte sectors,
  taking the data IV from offset 0x3D0 of the encrypted hash block.
- `gcwiikit.streams`: `WindowedReader`, a read-only view of a fixed window of
  a seekable stream; `buf_copy`, `read_exact`, `read_exact_at`,
  `read_with_zero_fill`, the big-endian readers `read_u16_be`, `read_u32_be`,
  `read_u64_be`, and the power-of-two helpers `align_up` and `align_down`.
- `gcwiikit.paths`: `path_display` renders a path without root and `.`
  components; `has_extension` compares a file extension ignoring ASCII case.
- `gcwiikit.hashstream`: `HashStream`, a forward-only output stream that
  keeps a CRC32 of everything written and fills forward seeks with zeroes
  (`finish` returns the CRC32); `file_size` and `check_file_size`, the latter
  raising `DiscFormatError` on a size mismatch.
- `gcwiikit.redump`: `parse_dat` reads a DAT file, keeping games with exactly
  one rom; `RedumpDatabase` holds the entries sorted by CRC32 in a packed
  binary form (`from_entries`, `from_dats`, `from_compressed`, `to_bytes`,
  `to_compressed`, `find_by_crc32`, iteration and `len`). `load_dats`,
  `find_by_crc32` and `iter_entries` work on one process-wide database, which
  can be loaded only once.
- `gcwiikit.junk`: `FileWriteInfo`, `gcm_align`, `get_override_junk_id` and
  `get_junk_id` (the junk seed ID for a game, with overrides for a few beta
  and sample discs), `sort_files` (raises `ValueError` on overlapping files)
  and `find_file_gap`.
- `gcwiikit.layout`: `write_files` writes sorted files, zero padding and junk
  data as a full mini DVD image (1,459,978,240 bytes) and returns its CRC32;
  `write_junk_data` writes one junk span; `check_junk_data` tells whether a
  region of a stream is exactly the disc's junk data.

## Installation

```
pip install gcwiikit
```

## Examples

Generate junk data for a disc at a given partition offset:

```python
from gcwiikit.lfg import LaggedFibonacci

lfg = LaggedFibonacci()
lfg.init_with_seed(b"GALE", 0, 0x600000)
print(lfg.fill(16).hex())  # e94767bd41504d5d6148b199a0120cba
```

Look up a disc by CRC32 in DAT files:

```python
from gcwiikit.redump import RedumpDatabase

db = RedumpDatabase.from_dats(["gc-redump.dat"])
entry = db.find_by_crc32(0x12345678)
if entry is not None:
    print(entry.name, entry.sha1.hex())
```

Check file layout before rebuilding an image:

```python
from gcwiikit.junk import FileWriteInfo, find_file_gap, sort_files

files = sort_files([
    FileWriteInfo("sys/bi2.bin", 0x440, 0x2000),
    FileWriteInfo("sys/boot.bin", 0, 0x440),
])
print([f.name for f in files], find_file_gap(files, 0x2440))
```

## What this package does not do

There is no command-line tool. The package does not open or write disc image
container formats (ISO readers, WBFS, CISO, GCZ, WIA, RVZ and the like), does
not compress or decompress data blocks, and does not compute MD5, SHA-1 or
XXH64 checksums of whole images; apart from the CRC32 kept by `HashStream`,
checksums to compare against a `RedumpDatabase` have to come from elsewhere.

## Running the tests

```
pip install -e .[test]
pytest
```