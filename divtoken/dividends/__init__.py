"""
divtoken.dividends — the accounting core.

Components (leaf to root):

    CorrectionLedger      per-account offsets applied on every balance change
    DividendAccounting    global per-share accumulator + entitlement queries
    DistributionScheduler payment -> accumulator increment, with halving decay
    ClaimAuthorizer       one-time signed grant per identity
    WithdrawalTracker     earned dividends -> minted shares

`divtoken.token.DividendToken` wires them to a base ledger and runs every
mutation atomically.
"""

from __future__ import annotations

from .accounting import K_PER_SHARE, DividendAccounting
from .claims import ClaimAuthorizer
from .correction import CorrectionLedger
from .scheduler import (FINAL_ERA, HALVING_PERIOD, Distribution,
                        DistributionScheduler, effective_contribution, era_at)
from .withdrawals import WithdrawalTracker

__all__ = [
    "K_PER_SHARE",
    "DividendAccounting",
    "CorrectionLedger",
    "DistributionScheduler",
    "Distribution",
    "ClaimAuthorizer",
    "WithdrawalTracker",
    "HALVING_PERIOD",
    "FINAL_ERA",
    "era_at",
    "effective_contribution",
]
