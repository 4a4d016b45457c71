"""
divtoken.token — the public dividend token.

`DividendToken` wires the base ledger to the dividend core:

    BaseLedger --(balance delta)--> CorrectionLedger
    transfer / transfer_from ------> DistributionScheduler -> DividendAccounting
    claim -------------------------> ClaimAuthorizer -> BaseLedger.mint
    withdraw_dividend -------------> WithdrawalTracker -> BaseLedger.mint

Every mutation runs under the instance lock inside one journal checkpoint.
If anything raises, the checkpoint is reverted: balances, corrections, the
accumulator, flags and staged events all stay as they were before the call.

Public interface
----------------
# views
name, symbol, decimals, authorizer, claim_deadline, claim_amount
total_supply() -> int
balance_of(addr) -> int
allowance(owner, spender) -> int
per_share_accumulator() -> int
accumulative_dividend_of(addr) -> int
withdrawable_dividend_of(addr) -> int
withdrawn_dividend_of(addr) -> int
claimed(addr) -> bool
events -> EventLog

# mutations (explicit CallContext: sender + timestamp)
transfer(ctx, to, amount) -> bool          funds the pool with `amount`
transfer_from(ctx, owner, to, amount) -> bool   likewise
approve(ctx, spender, amount) -> bool
burn(ctx, amount) -> bool
claim(ctx, signature) -> int               granted amount
withdraw_dividend(ctx) -> int              withdrawn amount (0 = no-op)

Addresses may be given as 20 bytes or 0x-hex strings.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from .config import TokenConfig
from .context import AddressLike, CallContext, to_address, to_hex
from .dividends.accounting import DividendAccounting
from .dividends.claims import ClaimAuthorizer
from .dividends.correction import CorrectionLedger
from .dividends.scheduler import Distribution, DistributionScheduler
from .dividends.withdrawals import WithdrawalTracker
from .errors import InvalidAddress, TokenError
from .ledger import BaseLedger
from .math.checked import require_u256
from .state.events import EventLog
from .state.journal import Journal

log = logging.getLogger(__name__)


class DividendToken:
    def __init__(
        self,
        *,
        authorizer: AddressLike,
        claim_deadline: int,
        name: str = "Dividend",
        symbol: str = "DIV",
        decimals: int = 18,
    ) -> None:
        if not isinstance(claim_deadline, int) or claim_deadline < 0:
            raise ValueError("claim_deadline must be a non-negative int")
        if not isinstance(decimals, int) or not 0 <= decimals <= 36:
            raise ValueError("decimals must be an int in [0, 36]")

        self._name = name
        self._symbol = symbol
        self._decimals = decimals
        self._authorizer = to_address(authorizer)
        self._claim_deadline = claim_deadline

        self._lock = threading.RLock()
        self._journal = Journal()
        self._accounting = DividendAccounting(self._journal)
        self._corrections = CorrectionLedger(self._journal, self._accounting)
        self._ledger = BaseLedger(self._journal, self._corrections.apply_balance_change)
        self._scheduler = DistributionScheduler(
            self._accounting, self._ledger.total_supply, claim_deadline
        )
        self._claims = ClaimAuthorizer(
            self._journal,
            self._ledger,
            authorizer=self._authorizer,
            claim_deadline=claim_deadline,
            claim_amount=10 ** decimals,
        )
        self._withdrawals = WithdrawalTracker(self._journal, self._ledger, self._accounting)
        self._last_distribution: Optional[Distribution] = None

        log.info(
            "token %s (%s) authorizer=%s claim_deadline=%d",
            name, symbol, to_hex(self._authorizer), claim_deadline,
        )

    @classmethod
    def from_config(cls, cfg: TokenConfig, **overrides: Any) -> "DividendToken":
        """Build from a TokenConfig; keyword overrides win over config fields."""
        params: Dict[str, Any] = {
            "authorizer": cfg.authorizer,
            "claim_deadline": cfg.claim_deadline,
            "name": cfg.name,
            "symbol": cfg.symbol,
            "decimals": cfg.decimals,
        }
        params.update(overrides)
        if params["authorizer"] is None:
            raise InvalidAddress("an authorizer address is required (DIVTOKEN_AUTHORIZER)")
        return cls(**params)

    # ------------------------------------------------------------------ #
    # Atomic call wrapper
    # ------------------------------------------------------------------ #

    @contextmanager
    def _atomic(self, op: str, ctx: CallContext) -> Iterator[None]:
        if not isinstance(ctx, CallContext):
            raise TypeError("ctx must be a CallContext")
        with self._lock:
            try:
                with self._journal.atomic():
                    yield
            except TokenError as e:
                log.warning("%s by %s rolled back: %s", op, to_hex(ctx.sender), e)
                raise

    # ------------------------------------------------------------------ #
    # Metadata
    # ------------------------------------------------------------------ #

    @property
    def name(self) -> str:
        return self._name

    @property
    def symbol(self) -> str:
        return self._symbol

    @property
    def decimals(self) -> int:
        return self._decimals

    @property
    def authorizer(self) -> bytes:
        return self._authorizer

    @property
    def claim_deadline(self) -> int:
        return self._claim_deadline

    @property
    def claim_amount(self) -> int:
        return self._claims.claim_amount

    @property
    def events(self) -> EventLog:
        return self._journal.event_log

    @property
    def last_distribution(self) -> Optional[Distribution]:
        """Outcome of the most recent committed transfer's distribution."""
        return self._last_distribution

    # ------------------------------------------------------------------ #
    # Views
    # ------------------------------------------------------------------ #

    def total_supply(self) -> int:
        with self._lock:
            return self._ledger.total_supply()

    def balance_of(self, account: AddressLike) -> int:
        with self._lock:
            return self._ledger.balance_of(to_address(account))

    def allowance(self, owner: AddressLike, spender: AddressLike) -> int:
        with self._lock:
            return self._ledger.allowance(to_address(owner), to_address(spender))

    def per_share_accumulator(self) -> int:
        with self._lock:
            return self._accounting.per_share_accumulator()

    def accumulative_dividend_of(self, account: AddressLike) -> int:
        with self._lock:
            return self._accounting.accumulative_dividend_of(to_address(account))

    def withdrawable_dividend_of(self, account: AddressLike) -> int:
        with self._lock:
            return self._accounting.withdrawable_dividend_of(to_address(account))

    def withdrawn_dividend_of(self, account: AddressLike) -> int:
        with self._lock:
            return self._accounting.withdrawn_dividend_of(to_address(account))

    def claimed(self, account: AddressLike) -> bool:
        with self._lock:
            return self._claims.claimed(to_address(account))

    def correction_of(self, account: AddressLike) -> int:
        with self._lock:
            return self._corrections.correction_of(to_address(account))

    def holders(self) -> List[bytes]:
        """Addresses holding a non-zero balance, sorted."""
        with self._lock:
            return [a for a in self._journal.addresses() if self._ledger.balance_of(a) > 0]

    # ------------------------------------------------------------------ #
    # Mutations
    # ------------------------------------------------------------------ #

    def transfer(self, ctx: CallContext, to: AddressLike, amount: int) -> bool:
        """Move `amount` and feed the same amount into the dividend pool."""
        dest = to_address(to)
        require_u256(amount)
        with self._atomic("transfer", ctx):
            self._ledger.transfer(ctx.sender, dest, amount)
            self._last_distribution = self._scheduler.distribute(amount, ctx.timestamp)
        return True

    def transfer_from(self, ctx: CallContext, owner: AddressLike, to: AddressLike, amount: int) -> bool:
        src = to_address(owner)
        dest = to_address(to)
        require_u256(amount)
        with self._atomic("transfer_from", ctx):
            self._ledger.spend_allowance(src, ctx.sender, amount)
            self._ledger.transfer(src, dest, amount)
            self._last_distribution = self._scheduler.distribute(amount, ctx.timestamp)
        return True

    def approve(self, ctx: CallContext, spender: AddressLike, amount: int) -> bool:
        sp = to_address(spender)
        require_u256(amount)
        with self._atomic("approve", ctx):
            self._ledger.approve(ctx.sender, sp, amount)
        return True

    def burn(self, ctx: CallContext, amount: int) -> bool:
        require_u256(amount)
        with self._atomic("burn", ctx):
            self._ledger.burn(ctx.sender, amount)
        return True

    def claim(self, ctx: CallContext, signature: bytes) -> int:
        with self._atomic("claim", ctx):
            return self._claims.claim(ctx.sender, signature, ctx.timestamp)

    def withdraw_dividend(self, ctx: CallContext) -> int:
        with self._atomic("withdraw_dividend", ctx):
            return self._withdrawals.withdraw(ctx.sender)


__all__ = ["DividendToken"]
