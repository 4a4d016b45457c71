"""
divtoken.dividends.correction — keeps entitlement fixed across balance changes.

For a balance change of `delta` (new - old, signed):

    correction -= accumulator * delta

The accumulator term of `accumulative()` moves by `accumulator * delta`, the
correction moves by the same amount in the other direction, so the
holder's entitlement is unchanged by the mutation itself. A transfer applies
this to both sides with opposite signs; mint and burn touch only the non-zero
side.

The update is one checked int256 multiply-and-subtract. Overflow raises
ArithmeticOverflow and the surrounding call is rolled back.

This component only adjusts corrections. It never funds a distribution, so
grant -> correction can not recurse.
"""

from __future__ import annotations

import logging

from ..context import ZERO_ADDRESS
from ..math.checked import i256_mul, i256_sub, require_i256, to_i256
from ..state.journal import Journal
from .accounting import DividendAccounting

log = logging.getLogger(__name__)


class CorrectionLedger:
    def __init__(self, journal: Journal, accounting: DividendAccounting) -> None:
        self._journal = journal
        self._accounting = accounting

    def correction_of(self, account: bytes) -> int:
        return self._journal.get_account(account).correction

    def apply_balance_change(self, account: bytes, delta: int) -> None:
        """Balance hook: offset the accumulator term for `delta` new/removed shares."""
        require_i256(delta)
        if delta == 0 or account == ZERO_ADDRESS:
            return
        shift = i256_mul(to_i256(self._accounting.per_share_accumulator()), delta)
        acc = self._journal.account_for_write(account)
        acc.correction = i256_sub(acc.correction, shift)
        log.debug("correction %s delta=%d shift=%d", account.hex(), delta, shift)


__all__ = ["CorrectionLedger"]
