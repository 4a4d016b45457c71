"""
divtoken.context — per-call environment handed to token mutations.

A `CallContext` carries the two ambient inputs a mutation may depend on:
who is calling and what time it is. Keeping them explicit (instead of reading
a wall clock inside the engine) makes every call deterministic and lets tests
place calls anywhere on the decay curve.

Addresses are 20-byte values (secp256k1 / Ethereum style). Hex strings with or
without "0x" are accepted by `to_address` and normalized to bytes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .errors import InvalidAddress

ADDRESS_LEN = 20
ZERO_ADDRESS: bytes = b"\x00" * ADDRESS_LEN

AddressLike = Union[bytes, bytearray, memoryview, str]


def _strip_0x(s: str) -> str:
    return s[2:] if s.startswith(("0x", "0X")) else s


def to_address(value: AddressLike) -> bytes:
    """
    Coerce `value` to a 20-byte address.

    Raises InvalidAddress for bad hex, wrong length or unsupported types.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
    elif isinstance(value, str):
        h = _strip_0x(value.strip())
        try:
            raw = bytes.fromhex(h)
        except ValueError as e:
            raise InvalidAddress("address is not valid hex", value=value) from e
    else:
        raise InvalidAddress(f"cannot use {type(value).__name__} as address", value=value)
    if len(raw) != ADDRESS_LEN:
        raise InvalidAddress(f"address must be {ADDRESS_LEN} bytes, got {len(raw)}", value=value)
    return raw


def to_hex(b: Union[bytes, bytearray, memoryview]) -> str:
    """Encode bytes as 0x-prefixed lowercase hex."""
    return "0x" + bytes(b).hex()


@dataclass(frozen=True)
class CallContext:
    """
    Environment of a single token call.

    Fields
    ------
    sender:    Calling account (20 bytes; hex accepted at construction).
    timestamp: Current time in unix seconds (non-negative int).
    """
    sender: bytes
    timestamp: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "sender", to_address(self.sender))
        ts = self.timestamp
        if not isinstance(ts, int) or isinstance(ts, bool):
            raise TypeError(f"timestamp must be int, got {type(ts).__name__}")
        if ts < 0:
            raise ValueError(f"timestamp must be non-negative, got {ts}")


__all__ = [
    "ADDRESS_LEN",
    "ZERO_ADDRESS",
    "AddressLike",
    "CallContext",
    "to_address",
    "to_hex",
]
