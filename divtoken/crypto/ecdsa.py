"""
divtoken.crypto.ecdsa — secp256k1 signing and address recovery.

Addresses follow the Ethereum convention: the last 20 bytes of
keccak256(x || y) of the uncompressed public key. Signatures are the usual
65-byte `r || s || v` encoding with `v` in {27, 28}; `v` in {0, 1} is
accepted and shifted.

Recovery is strict: `r` must lie in [1, N-1] and `s` in [1, N/2] (the
low-s form), which rules out the malleable twin of every valid signature.
Anything that does not recover to a point on the curve raises
`SignatureError`.

Claim messages
--------------
A claim signature covers `keccak256(account)` wrapped in the personal-sign
envelope:

    digest = keccak256(b"\\x19Ethereum Signed Message:\\n32" + keccak256(account))

so authorizers can produce them with any standard Ethereum wallet.
"""

from __future__ import annotations

import secrets
from typing import Tuple

from py_ecc.secp256k1 import secp256k1 as _curve

from .keccak import keccak256

N: int = _curve.N
HALF_N: int = N // 2

SIGNATURE_LEN = 65
PRIVATE_KEY_LEN = 32
PERSONAL_SIGN_PREFIX = b"\x19Ethereum Signed Message:\n32"

PublicKey = Tuple[int, int]


class SignatureError(ValueError):
    """Raised for malformed or unrecoverable signatures and bad keys."""


# ---------------------------------------------------------------------------
# Keys & addresses
# ---------------------------------------------------------------------------

def _require_private_key(priv: bytes) -> bytes:
    if not isinstance(priv, (bytes, bytearray)) or len(priv) != PRIVATE_KEY_LEN:
        raise SignatureError("private key must be 32 bytes")
    k = int.from_bytes(priv, "big")
    if not 0 < k < N:
        raise SignatureError("private key out of range")
    return bytes(priv)


def generate_private_key() -> bytes:
    while True:
        candidate = secrets.token_bytes(PRIVATE_KEY_LEN)
        if 0 < int.from_bytes(candidate, "big") < N:
            return candidate


def public_key(priv: bytes) -> PublicKey:
    x, y = _curve.privtopub(_require_private_key(priv))
    return int(x), int(y)


def address_from_public_key(pub: PublicKey) -> bytes:
    x, y = pub
    return keccak256(x.to_bytes(32, "big") + y.to_bytes(32, "big"))[-20:]


def address_of(priv: bytes) -> bytes:
    return address_from_public_key(public_key(priv))


# ---------------------------------------------------------------------------
# Signatures
# ---------------------------------------------------------------------------

def encode_signature(v: int, r: int, s: int) -> bytes:
    return r.to_bytes(32, "big") + s.to_bytes(32, "big") + bytes([v])


def decode_signature(signature: bytes) -> Tuple[int, int, int]:
    """Split a 65-byte signature into (v, r, s), validating ranges."""
    if not isinstance(signature, (bytes, bytearray)) or len(signature) != SIGNATURE_LEN:
        raise SignatureError("signature must be 65 bytes")
    r = int.from_bytes(signature[0:32], "big")
    s = int.from_bytes(signature[32:64], "big")
    v = signature[64]
    if v in (0, 1):
        v += 27
    if v not in (27, 28):
        raise SignatureError(f"invalid recovery id {signature[64]}")
    if not 0 < r < N:
        raise SignatureError("r out of range")
    if not 0 < s <= HALF_N:
        raise SignatureError("s out of range (high-s signatures are rejected)")
    return v, r, s


def sign_digest(digest: bytes, priv: bytes) -> bytes:
    if len(digest) != 32:
        raise SignatureError("digest must be 32 bytes")
    v, r, s = _curve.ecdsa_raw_sign(bytes(digest), _require_private_key(priv))
    return encode_signature(v, r, s)


def recover_address(digest: bytes, signature: bytes) -> bytes:
    """Return the address whose key produced `signature` over `digest`."""
    if len(digest) != 32:
        raise SignatureError("digest must be 32 bytes")
    vrs = decode_signature(signature)
    try:
        point = _curve.ecdsa_raw_recover(bytes(digest), vrs)
    except ValueError as e:
        raise SignatureError(str(e)) from e
    # older py_ecc releases return False instead of raising
    if not point:
        raise SignatureError("signature does not recover to a curve point")
    x, y = point
    if x == 0 and y == 0:
        raise SignatureError("signature recovers to the point at infinity")
    return address_from_public_key((int(x), int(y)))


# ---------------------------------------------------------------------------
# Claim messages
# ---------------------------------------------------------------------------

def personal_sign_digest(message_hash: bytes) -> bytes:
    return keccak256(PERSONAL_SIGN_PREFIX + bytes(message_hash))


def claim_digest(account: bytes) -> bytes:
    """Digest an authorizer signs to let `account` claim."""
    return personal_sign_digest(keccak256(account))


def sign_claim(priv: bytes, account: bytes) -> bytes:
    return sign_digest(claim_digest(account), priv)


def recover_claim_signer(account: bytes, signature: bytes) -> bytes:
    return recover_address(claim_digest(account), signature)


__all__ = [
    "N",
    "SIGNATURE_LEN",
    "PublicKey",
    "SignatureError",
    "generate_private_key",
    "public_key",
    "address_from_public_key",
    "address_of",
    "encode_signature",
    "decode_signature",
    "sign_digest",
    "recover_address",
    "personal_sign_digest",
    "claim_digest",
    "sign_claim",
    "recover_claim_signer",
]
