"""AES-128-CBC helpers and Wii partition sector encryption."""

from __future__ import annotations

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

SECTOR_SIZE = 0x8000
HASHES_SIZE = 0x400
SECTOR_DATA_SIZE = SECTOR_SIZE - HASHES_SIZE

_IV_OFFSET = 0x3D0
_ZERO_IV = bytes(16)


def _cipher(key: bytes, iv: bytes, data: bytes) -> Cipher:
    if len(key) != 16:
        raise ValueError(f"AES-128 key must be 16 bytes, got {len(key)}")
    if len(iv) != 16:
        raise ValueError(f"IV must be 16 bytes, got {len(iv)}")
    if len(data) % 16 != 0:
        raise ValueError(f"data length {len(data)} is not a multiple of 16")
    return Cipher(algorithms.AES(bytes(key)), modes.CBC(bytes(iv)))


def aes_cbc_encrypt(key: bytes, iv: bytes, data: bytes) -> bytes:
    """Encrypt data with AES-128-CBC without padding."""
    encryptor = _cipher(key, iv, data).encryptor()
    return encryptor.update(bytes(data)) + encryptor.finalize()


def aes_cbc_decrypt(key: bytes, iv: bytes, data: bytes) -> bytes:
    """Decrypt data with AES-128-CBC without padding."""
    decryptor = _cipher(key, iv, data).decryptor()
    return decryptor.update(bytes(data)) + decryptor.finalize()


def _check_sector(sector: bytes) -> None:
    if len(sector) != SECTOR_SIZE:
        raise ValueError(f"sector must be {SECTOR_SIZE} bytes, got {len(sector)}")


def encrypt_sector(sector: bytes, key: bytes) -> bytes:
    """Encrypt a Wii partition sector (hash block, then data)."""
    _check_sector(sector)
    hashes = aes_cbc_encrypt(key, _ZERO_IV, sector[:HASHES_SIZE])
    # The data IV is taken from the encrypted hash block.
    iv = hashes[_IV_OFFSET:_IV_OFFSET + 16]
    return hashes + aes_cbc_encrypt(key, iv, sector[HASHES_SIZE:])


def decrypt_sector(sector: bytes, key: bytes) -> bytes:
    """Decrypt a Wii partition sector, including its hash block."""
    _check_sector(sector)
    iv = bytes(sector[_IV_OFFSET:_IV_OFFSET + 16])
    hashes = aes_cbc_decrypt(key, _ZERO_IV, sector[:HASHES_SIZE])
    return hashes + aes_cbc_decrypt(key, iv, sector[HASHES_SIZE:])


def decrypt_sector_data(sector: bytes, key: bytes) -> bytes:
    """Decrypt only the data portion of a Wii partition sector."""
    _check_sector(sector)
    iv = bytes(sector[_IV_OFFSET:_IV_OFFSET + 16])
    return aes_cbc_decrypt(key, iv, sector[HASHES_SIZE:])