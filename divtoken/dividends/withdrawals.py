"""
divtoken.dividends.withdrawals — realize earned dividends as new shares.

Withdrawing records the withdrawable amount as withdrawn, emits
DividendWithdrawn and mints that many shares to the holder. The mint is an
ordinary balance increase: it grows total supply and goes through the
Correction Ledger, which is all "dividends on dividends" needs.

A zero withdrawable amount is a silent no-op (no event, no write).
"""

from __future__ import annotations

import logging

from ..context import to_hex
from ..ledger import BaseLedger
from ..math.checked import u256_add
from ..state.events import EVT_DIVIDEND_WITHDRAWN, make_event
from ..state.journal import Journal
from .accounting import DividendAccounting

log = logging.getLogger(__name__)


class WithdrawalTracker:
    def __init__(self, journal: Journal, ledger: BaseLedger, accounting: DividendAccounting) -> None:
        self._journal = journal
        self._ledger = ledger
        self._accounting = accounting

    def withdraw(self, caller: bytes) -> int:
        """Withdraw everything `caller` can; returns the amount (0 for a no-op)."""
        amount = self._accounting.withdrawable_dividend_of(caller)
        if amount == 0:
            return 0

        acc = self._journal.account_for_write(caller)
        acc.withdrawn = u256_add(acc.withdrawn, amount)
        self._journal.emit(make_event(EVT_DIVIDEND_WITHDRAWN, {"to": caller, "amount": amount}))
        self._ledger.mint(caller, amount)
        log.info("dividend withdrawn account=%s amount=%d", to_hex(caller), amount)
        return amount


__all__ = ["WithdrawalTracker"]
