"""
divtoken.ledger — base share ledger (balances, supply, allowances).

This is the plain fungible-token bookkeeping the dividend engine sits on.
It knows nothing about dividends; instead every balance mutation is reported
to a `BalanceHook` as a signed delta, and the token wires that hook to the
Correction Ledger. The zero address is never given a record: mints and burns
report only the non-zero side.

Events (staged in the journal):
    Transfer {"from", "to", "value"}      on transfer, mint (from=zero), burn (to=zero)
    Approval {"owner", "spender", "value"}

All amounts are uint256 and checked; shortfalls raise InsufficientBalance /
InsufficientAllowance, range breaches raise ArithmeticOverflow.
"""

from __future__ import annotations

from typing import Callable, Optional

from .context import ZERO_ADDRESS
from .errors import InsufficientAllowance, InsufficientBalance, InvalidAddress
from .math.checked import require_u256, u256_add, u256_sub
from .state.events import EVT_APPROVAL, EVT_TRANSFER, make_event
from .state.journal import Journal

K_TOTAL_SUPPLY = "total_supply"

BalanceHook = Callable[[bytes, int], None]


def _noop_hook(account: bytes, delta: int) -> None:
    return None


class BaseLedger:
    """
    Balance/supply/allowance bookkeeping over a `Journal`.

    `on_balance_change(account, delta)` is invoked after each balance write
    with `delta = new - old` (signed). It must not call back into the ledger.
    """

    def __init__(self, journal: Journal, on_balance_change: Optional[BalanceHook] = None) -> None:
        self._journal = journal
        self._hook: BalanceHook = on_balance_change or _noop_hook

    # ------------------------------------------------------------------ #
    # Views
    # ------------------------------------------------------------------ #

    def balance_of(self, account: bytes) -> int:
        return self._journal.get_account(account).balance

    def total_supply(self) -> int:
        return self._journal.get_global(K_TOTAL_SUPPLY)

    def allowance(self, owner: bytes, spender: bytes) -> int:
        return self._journal.get_allowance(owner, spender)

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    @staticmethod
    def _require_not_zero(account: bytes, what: str) -> None:
        if account == ZERO_ADDRESS:
            raise InvalidAddress(f"{what} cannot be the zero address", value="0x" + account.hex())

    def _credit(self, account: bytes, amount: int) -> None:
        acc = self._journal.account_for_write(account)
        acc.balance = u256_add(acc.balance, amount)
        self._hook(account, amount)

    def _debit(self, account: bytes, amount: int) -> None:
        acc = self._journal.account_for_write(account)
        if acc.balance < amount:
            raise InsufficientBalance(have=acc.balance, need=amount)
        acc.balance = u256_sub(acc.balance, amount)
        self._hook(account, -amount)

    # ------------------------------------------------------------------ #
    # Mutations
    # ------------------------------------------------------------------ #

    def transfer(self, sender: bytes, to: bytes, amount: int) -> None:
        require_u256(amount)
        self._require_not_zero(sender, "sender")
        self._require_not_zero(to, "recipient")
        if amount > 0:
            self._debit(sender, amount)
            self._credit(to, amount)
        self._journal.emit(make_event(EVT_TRANSFER, {"from": sender, "to": to, "value": amount}))

    def mint(self, to: bytes, amount: int) -> None:
        require_u256(amount)
        self._require_not_zero(to, "recipient")
        if amount == 0:
            return
        self._journal.set_global(K_TOTAL_SUPPLY, u256_add(self.total_supply(), amount))
        self._credit(to, amount)
        self._journal.emit(make_event(EVT_TRANSFER, {"from": ZERO_ADDRESS, "to": to, "value": amount}))

    def burn(self, owner: bytes, amount: int) -> None:
        require_u256(amount)
        self._require_not_zero(owner, "owner")
        if amount == 0:
            return
        self._debit(owner, amount)
        self._journal.set_global(K_TOTAL_SUPPLY, u256_sub(self.total_supply(), amount))
        self._journal.emit(make_event(EVT_TRANSFER, {"from": owner, "to": ZERO_ADDRESS, "value": amount}))

    def approve(self, owner: bytes, spender: bytes, amount: int) -> None:
        require_u256(amount)
        self._require_not_zero(owner, "owner")
        self._require_not_zero(spender, "spender")
        self._journal.set_allowance(owner, spender, amount)
        self._journal.emit(make_event(EVT_APPROVAL, {"owner": owner, "spender": spender, "value": amount}))

    def spend_allowance(self, owner: bytes, spender: bytes, amount: int) -> None:
        """Debit `amount` from the (owner, spender) allowance."""
        require_u256(amount)
        current = self.allowance(owner, spender)
        if current < amount:
            raise InsufficientAllowance(have=current, need=amount)
        self._journal.set_allowance(owner, spender, u256_sub(current, amount))


__all__ = ["BaseLedger", "BalanceHook", "K_TOTAL_SUPPLY"]
