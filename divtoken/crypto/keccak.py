"""
divtoken.crypto.keccak — Keccak-256 (pre-SHA3 padding, Ethereum flavour).

`hashlib.sha3_256` uses the FIPS-202 padding and produces different digests,
so Keccak comes from PyCryptodome.
"""

from __future__ import annotations

from Crypto.Hash import keccak as _keccak


def _ensure_bytes(x: bytes | bytearray | memoryview, name: str) -> bytes:
    if not isinstance(x, (bytes, bytearray, memoryview)):
        raise TypeError(f"{name} must be bytes-like, got {type(x).__name__}")
    return bytes(x)


def keccak256(data: bytes | bytearray | memoryview) -> bytes:
    h = _keccak.new(digest_bits=256)
    h.update(_ensure_bytes(data, "data"))
    return h.digest()


__all__ = ["keccak256"]
