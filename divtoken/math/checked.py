"""
divtoken.math.checked
=====================

Checked fixed-width integer helpers for ledger and dividend arithmetic.

Python ints never overflow, so the 256-bit domains used by the accounting
engine are enforced explicitly here. Every helper is **fail-fast**: leaving
the domain raises `ArithmeticOverflow`, a zero divisor raises
`DivisionByZero`. Nothing saturates and nothing wraps.

Domains
-------
- uint256: [0, 2**256 - 1]   (balances, supply, accumulator, withdrawn)
- int256:  [-2**255, 2**255 - 1]   (correction terms)

Casts between the two (`to_i256`, `to_u256`) fail instead of reinterpreting
bits. Division of non-negative values floors.
"""

from __future__ import annotations

from typing import Final

from ..errors import ArithmeticOverflow, DivisionByZero

U256_MAX: Final[int] = (1 << 256) - 1
I256_MAX: Final[int] = (1 << 255) - 1
I256_MIN: Final[int] = -(1 << 255)


# ---------------------------------------------------------------------------
# Guards
# ---------------------------------------------------------------------------

def _require_int(*xs: int) -> None:
    for x in xs:
        # bool is an int subclass; amounts must be real ints.
        if not isinstance(x, int) or isinstance(x, bool):
            raise TypeError(f"expected int, got {type(x).__name__}")


def is_u256(x: int) -> bool:
    return isinstance(x, int) and not isinstance(x, bool) and 0 <= x <= U256_MAX


def is_i256(x: int) -> bool:
    return isinstance(x, int) and not isinstance(x, bool) and I256_MIN <= x <= I256_MAX


def require_u256(*xs: int) -> None:
    """Raise unless every argument is an int in the uint256 domain."""
    _require_int(*xs)
    for x in xs:
        if x < 0 or x > U256_MAX:
            raise ArithmeticOverflow("value outside uint256", op="require_u256")


def require_i256(*xs: int) -> None:
    _require_int(*xs)
    for x in xs:
        if x < I256_MIN or x > I256_MAX:
            raise ArithmeticOverflow("value outside int256", op="require_i256")


def _u256_result(x: int, op: str) -> int:
    if x < 0:
        raise ArithmeticOverflow("uint256 underflow", op=op)
    if x > U256_MAX:
        raise ArithmeticOverflow("uint256 overflow", op=op)
    return x


def _i256_result(x: int, op: str) -> int:
    if x < I256_MIN or x > I256_MAX:
        raise ArithmeticOverflow("int256 overflow", op=op)
    return x


# ---------------------------------------------------------------------------
# uint256
# ---------------------------------------------------------------------------

def u256_add(x: int, y: int) -> int:
    require_u256(x, y)
    return _u256_result(x + y, "u256_add")


def u256_sub(x: int, y: int) -> int:
    """Checked sub: raises on underflow (y > x)."""
    require_u256(x, y)
    return _u256_result(x - y, "u256_sub")


def u256_mul(x: int, y: int) -> int:
    require_u256(x, y)
    return _u256_result(x * y, "u256_mul")


def u256_div(x: int, y: int) -> int:
    """Floor division; raises DivisionByZero when y == 0."""
    require_u256(x, y)
    if y == 0:
        raise DivisionByZero(op="u256_div")
    return x // y


def u256_mul_div(x: int, y: int, d: int) -> int:
    """
    floor(x * y / d) where the product itself must fit uint256.

    A product that does not fit a 256-bit word is an overflow even if the
    quotient would fit.
    """
    return u256_div(u256_mul(x, y), d)


# ---------------------------------------------------------------------------
# int256
# ---------------------------------------------------------------------------

def i256_add(x: int, y: int) -> int:
    require_i256(x, y)
    return _i256_result(x + y, "i256_add")


def i256_sub(x: int, y: int) -> int:
    require_i256(x, y)
    return _i256_result(x - y, "i256_sub")


def i256_mul(x: int, y: int) -> int:
    require_i256(x, y)
    return _i256_result(x * y, "i256_mul")


# ---------------------------------------------------------------------------
# Casts
# ---------------------------------------------------------------------------

def to_i256(x: int) -> int:
    """uint256 -> int256; raises if x does not fit the signed range."""
    require_u256(x)
    if x > I256_MAX:
        raise ArithmeticOverflow("uint256 does not fit int256", op="to_i256")
    return x


def to_u256(x: int) -> int:
    """int256 -> uint256; raises on negative input."""
    require_i256(x)
    if x < 0:
        raise ArithmeticOverflow("negative int256 cast to uint256", op="to_u256")
    return x


__all__ = [
    "U256_MAX", "I256_MAX", "I256_MIN",
    "is_u256", "is_i256", "require_u256", "require_i256",
    "u256_add", "u256_sub", "u256_mul", "u256_div", "u256_mul_div",
    "i256_add", "i256_sub", "i256_mul",
    "to_i256", "to_u256",
]
