"""
divtoken.dividends.scheduler — halving-style decay of incoming payments.

A payment `amount` arriving at time `now` is folded into the per-share
accumulator after a time-based haircut:

    era       = 0                                       if now <= deadline
              = (now - deadline) // HALVING_PERIOD      otherwise
    effective = 0                      if era >= FINAL_ERA
              = amount // (era + 1)    otherwise
    increment = effective * MAGNITUDE // total_supply

Remainders of both divisions are dropped and never carried forward. From
FINAL_ERA on, distribution is a permanent no-op.

Zero supply: an `effective > 0` payment over zero supply raises
DivisionByZero (the triggering call is rejected). A zero effective
contribution is a no-op and skips that check.

Example
-------
>>> era_at(now=1_000, deadline=1_000)
0
>>> effective_contribution(100, era=3)
25
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Final

from ..errors import DivisionByZero
from ..math import MAGNITUDE
from ..math.checked import require_u256, u256_mul_div
from .accounting import DividendAccounting

log = logging.getLogger(__name__)

HALVING_PERIOD: Final[int] = 21 * 24 * 60 * 60
FINAL_ERA: Final[int] = 60


def era_at(now: int, deadline: int) -> int:
    """Decay period index of `now` relative to the claim deadline."""
    if now <= deadline:
        return 0
    return (now - deadline) // HALVING_PERIOD


def effective_contribution(amount: int, era: int) -> int:
    """Portion of `amount` that enters the pool in `era`."""
    require_u256(amount)
    if era < 0:
        raise ValueError("era must be non-negative")
    if era >= FINAL_ERA:
        return 0
    return amount // (era + 1)


@dataclass(frozen=True)
class Distribution:
    """What one payment did to the pool."""
    amount: int
    era: int
    effective: int
    increment: int


class DistributionScheduler:
    """
    Turns payments into accumulator increments.

    `total_supply` is a zero-argument callable (the base ledger's view) so the
    scheduler reads supply at the moment of distribution.
    """

    def __init__(
        self,
        accounting: DividendAccounting,
        total_supply: Callable[[], int],
        claim_deadline: int,
    ) -> None:
        self._accounting = accounting
        self._total_supply = total_supply
        self._deadline = int(claim_deadline)

    @property
    def claim_deadline(self) -> int:
        return self._deadline

    def distribute(self, amount: int, now: int) -> Distribution:
        require_u256(amount)
        era = era_at(now, self._deadline)
        effective = effective_contribution(amount, era)
        if effective == 0:
            log.debug("distribute amount=%d era=%d absorbed", amount, era)
            return Distribution(amount=amount, era=era, effective=0, increment=0)

        supply = self._total_supply()
        if supply == 0:
            raise DivisionByZero("cannot distribute over zero total supply", op="distribute")
        increment = u256_mul_div(effective, MAGNITUDE, supply)
        self._accounting.raise_accumulator(increment)
        log.debug(
            "distribute amount=%d era=%d effective=%d supply=%d increment=%d",
            amount, era, effective, supply, increment,
        )
        return Distribution(amount=amount, era=era, effective=effective, increment=increment)


__all__ = [
    "HALVING_PERIOD",
    "FINAL_ERA",
    "Distribution",
    "DistributionScheduler",
    "era_at",
    "effective_contribution",
]
