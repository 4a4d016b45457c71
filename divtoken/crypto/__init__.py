"""
divtoken.crypto — hashing and secp256k1 helpers used by the claim flow.
"""

from __future__ import annotations

from .ecdsa import (SignatureError, address_of, claim_digest,
                    generate_private_key, recover_address,
                    recover_claim_signer, sign_claim, sign_digest)
from .keccak import keccak256

__all__ = [
    "keccak256",
    "SignatureError",
    "address_of",
    "claim_digest",
    "generate_private_key",
    "recover_address",
    "recover_claim_signer",
    "sign_claim",
    "sign_digest",
]
