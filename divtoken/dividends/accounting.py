"""
divtoken.dividends.accounting — per-share accumulator and entitlement queries.

The engine keeps one global number, the per-share accumulator, scaled by
MAGNITUDE. A holder's lifetime entitlement is

    accumulative(a) = (accumulator * balance(a) + correction(a)) // MAGNITUDE

The correction term (maintained by `divtoken.dividends.correction`) cancels
the accumulator growth that happened before the holder owned each share, so
the formula stays right no matter how often balances change. Queries never
mutate state.
"""

from __future__ import annotations

import logging

from ..math import MAGNITUDE
from ..math.checked import (i256_add, require_u256, to_i256, to_u256,
                            u256_add, u256_mul, u256_sub)
from ..state.journal import Journal

log = logging.getLogger(__name__)

K_PER_SHARE = "per_share_accumulator"


class DividendAccounting:
    """Owner of the per-share accumulator; answers entitlement queries."""

    def __init__(self, journal: Journal) -> None:
        self._journal = journal

    # ------------------------------------------------------------------ #
    # Accumulator
    # ------------------------------------------------------------------ #

    def per_share_accumulator(self) -> int:
        return self._journal.get_global(K_PER_SHARE)

    def raise_accumulator(self, increment: int) -> int:
        """Add `increment` (checked) and return the new accumulator."""
        require_u256(increment)
        if increment == 0:
            return self.per_share_accumulator()
        new_value = u256_add(self.per_share_accumulator(), increment)
        self._journal.set_global(K_PER_SHARE, new_value)
        log.debug("accumulator += %d -> %d", increment, new_value)
        return new_value

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def accumulative_dividend_of(self, account: bytes) -> int:
        """Total dividends ever earned by `account`, withdrawn or not."""
        acc = self._journal.get_account(account)
        scaled = i256_add(to_i256(u256_mul(self.per_share_accumulator(), acc.balance)), acc.correction)
        return to_u256(scaled) // MAGNITUDE

    def withdrawn_dividend_of(self, account: bytes) -> int:
        return self._journal.get_account(account).withdrawn

    def withdrawable_dividend_of(self, account: bytes) -> int:
        """
        Earned minus withdrawn. A negative value would mean the invariant is
        broken, so it raises ArithmeticOverflow instead of wrapping.
        """
        return u256_sub(self.accumulative_dividend_of(account), self.withdrawn_dividend_of(account))


__all__ = ["DividendAccounting", "K_PER_SHARE"]
