"""
divtoken.tests helpers

- Deterministic test defaults (Hypothesis profile).
- Stable addresses, a fixed authorizer key and call-context shortcuts.
- `seed()` mints directly through the base ledger (bypassing the one-token
  claim) so tests can start from arbitrary holdings.
"""

from __future__ import annotations

import hashlib
import os
from typing import Optional

from divtoken.context import CallContext
from divtoken.crypto.ecdsa import address_of, sign_claim
from divtoken.token import DividendToken

os.environ.setdefault("PYTHONHASHSEED", "0")

# Hypothesis defaults: fewer examples locally, deeper on CI.
try:  # pragma: no cover - optional dependency
    from hypothesis import settings

    settings.register_profile("local", settings(max_examples=60, deadline=None))
    settings.register_profile("ci", settings(max_examples=300, deadline=None))
    _profile = os.environ.get("HYPOTHESIS_PROFILE") or ("ci" if os.environ.get("CI") else "local")
    settings.load_profile(_profile)
except ImportError:
    pass

# Well-known throwaway key (never use outside tests).
AUTHORIZER_KEY = bytes.fromhex("4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318")
OTHER_KEY = bytes.fromhex("8da4ef21b864d2cc526dbdb2a120bd2874c36c9d0a1fb7f8c63d7f7a8b41de8f")

DEADLINE = 1_700_000_000
BEFORE_DEADLINE = DEADLINE - 3_600


def det_address(tag: str) -> bytes:
    """Stable 20-byte address derived from a tag."""
    return hashlib.sha3_256(tag.encode("utf-8")).digest()[:20]


ALICE = det_address("alice")
BOB = det_address("bob")
CAROL = det_address("carol")


def ctx(sender: bytes, timestamp: int = BEFORE_DEADLINE) -> CallContext:
    return CallContext(sender=sender, timestamp=timestamp)


def make_token(*, decimals: int = 18, deadline: int = DEADLINE) -> DividendToken:
    return DividendToken(
        authorizer=address_of(AUTHORIZER_KEY),
        claim_deadline=deadline,
        decimals=decimals,
    )


def claim(token: DividendToken, account: bytes, timestamp: int = BEFORE_DEADLINE,
          key: Optional[bytes] = None) -> int:
    sig = sign_claim(key or AUTHORIZER_KEY, account)
    return token.claim(ctx(account, timestamp), sig)


def seed(token: DividendToken, account: bytes, amount: int) -> None:
    """Mint `amount` to `account` as one committed call (corrections applied)."""
    with token._lock, token._journal.atomic():
        token._ledger.mint(account, amount)


__all__ = [
    "AUTHORIZER_KEY",
    "OTHER_KEY",
    "DEADLINE",
    "BEFORE_DEADLINE",
    "ALICE",
    "BOB",
    "CAROL",
    "det_address",
    "ctx",
    "make_token",
    "claim",
    "seed",
]
