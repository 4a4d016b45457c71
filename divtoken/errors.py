"""
divtoken.errors — typed failures raised by the token and its dividend engine.

Every public mutation runs inside a journal checkpoint; raising any of these
exceptions discards the whole call (state writes and staged events alike).
Callers receive the exception unchanged and must resubmit a corrected call.

Hierarchy
---------
TokenError (base)
 ├─ AlreadyClaimed        : identity already used its one-time claim
 ├─ Expired               : claim submitted at/after the claim deadline
 ├─ Unauthorized          : claim signature does not recover to the authorizer
 ├─ ArithmeticOverflow    : checked uint256/int256 math left its range
 ├─ DivisionByZero        : zero divisor (e.g. distributing over zero supply)
 ├─ InsufficientBalance   : debit larger than the balance
 ├─ InsufficientAllowance : transfer_from above the allowance
 └─ InvalidAddress        : malformed account identifier

`ArithmeticOverflow` and `DivisionByZero` signal broken invariants rather
than user mistakes; they are never clamped or swallowed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class TokenError(Exception):
    """
    Base token error.

    Attributes:
        message: Human-readable explanation.
        code:    Stable machine code string (e.g. 'ALREADY_CLAIMED').
        data:    Optional structured details (JSON-serializable).
    """
    message: str = "token error"
    code: str = "TOKEN_ERROR"
    data: Optional[Dict[str, Any]] = field(default=None)

    def __str__(self) -> str:
        if self.data:
            return f"{self.code}: {self.message} ({self.data})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


class AlreadyClaimed(TokenError):
    def __init__(self, message: str = "already claimed", *, account: Optional[str] = None):
        super().__init__(
            message=message,
            code="ALREADY_CLAIMED",
            data={"account": account} if account is not None else None,
        )


class Expired(TokenError):
    def __init__(
        self,
        message: str = "claim window closed",
        *,
        now: Optional[int] = None,
        deadline: Optional[int] = None,
    ):
        d: Dict[str, Any] = {}
        if now is not None:
            d["now"] = now
        if deadline is not None:
            d["deadline"] = deadline
        super().__init__(message=message, code="EXPIRED", data=d or None)


class Unauthorized(TokenError):
    """
    Signature rejected.

    `recovered` is set when recovery produced an address that is not the
    authorizer; it is None for structurally invalid signatures.
    """
    def __init__(
        self,
        message: str = "signature not from authorizer",
        *,
        recovered: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            code="UNAUTHORIZED",
            data={"recovered": recovered} if recovered is not None else None,
        )


class ArithmeticOverflow(TokenError):
    def __init__(self, message: str = "arithmetic overflow", *, op: Optional[str] = None):
        super().__init__(
            message=message,
            code="ARITHMETIC_OVERFLOW",
            data={"op": op} if op is not None else None,
        )


class DivisionByZero(TokenError):
    def __init__(self, message: str = "division by zero", *, op: Optional[str] = None):
        super().__init__(
            message=message,
            code="DIVISION_BY_ZERO",
            data={"op": op} if op is not None else None,
        )


class InsufficientBalance(TokenError):
    def __init__(self, message: str = "insufficient balance", *, have: int = 0, need: int = 0):
        super().__init__(
            message=message,
            code="INSUFFICIENT_BALANCE",
            data={"have": have, "need": need},
        )


class InsufficientAllowance(TokenError):
    def __init__(self, message: str = "allowance too low", *, have: int = 0, need: int = 0):
        super().__init__(
            message=message,
            code="INSUFFICIENT_ALLOWANCE",
            data={"have": have, "need": need},
        )


class InvalidAddress(TokenError):
    def __init__(self, message: str = "invalid address", *, value: Any = None):
        super().__init__(
            message=message,
            code="INVALID_ADDRESS",
            data={"value": repr(value)} if value is not None else None,
        )


__all__ = [
    "TokenError",
    "AlreadyClaimed",
    "Expired",
    "Unauthorized",
    "ArithmeticOverflow",
    "DivisionByZero",
    "InsufficientBalance",
    "InsufficientAllowance",
    "InvalidAddress",
]
