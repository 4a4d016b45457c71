"""
divtoken.math — checked integer arithmetic and fixed-point constants.

The dividend engine keeps a per-share accumulator in fixed point with scale
`MAGNITUDE`; all quantities live in 256-bit domains enforced by
`divtoken.math.checked`.
"""

from __future__ import annotations

from typing import Final

from .checked import (I256_MAX, I256_MIN, U256_MAX, i256_add,
                      i256_mul, i256_sub, is_i256, is_u256, require_i256,
                      require_u256, to_i256, to_u256, u256_add, u256_div,
                      u256_mul, u256_mul_div, u256_sub)

# Fixed-point scale of the per-share accumulator.
MAGNITUDE: Final[int] = 1 << 128

__all__ = [
    "MAGNITUDE",
    "U256_MAX", "I256_MAX", "I256_MIN",
    "is_u256", "is_i256", "require_u256", "require_i256",
    "u256_add", "u256_sub", "u256_mul", "u256_div", "u256_mul_div",
    "i256_add", "i256_sub", "i256_mul",
    "to_i256", "to_u256",
]
