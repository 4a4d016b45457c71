"""
divtoken.dividends.claims — one-time, signature-gated initial allocation.

Each identity moves Unclaimed -> Claimed exactly once. A claim needs a
signature by the authorizer key over a message derived from the claimant's
address alone (see `divtoken.crypto.ecdsa.claim_digest`). The signature
carries no nonce, so replay protection is the `claimed` flag and nothing
else.

Checks, in order:
    1. already claimed          -> AlreadyClaimed
    2. now >= claim_deadline    -> Expired
    3. signer != authorizer     -> Unauthorized (also for malformed signatures)

On success the flag is set first, then CLAIM_AMOUNT is minted to the
claimant through the base ledger, so the mint passes through the
Correction Ledger like any other balance change.
"""

from __future__ import annotations

import logging

from ..context import to_hex
from ..crypto.ecdsa import SignatureError, recover_claim_signer
from ..errors import AlreadyClaimed, Expired, Unauthorized
from ..ledger import BaseLedger
from ..state.events import EVT_CLAIMED, make_event
from ..state.journal import Journal

log = logging.getLogger(__name__)


class ClaimAuthorizer:
    def __init__(
        self,
        journal: Journal,
        ledger: BaseLedger,
        *,
        authorizer: bytes,
        claim_deadline: int,
        claim_amount: int,
    ) -> None:
        self._journal = journal
        self._ledger = ledger
        self._authorizer = bytes(authorizer)
        self._deadline = int(claim_deadline)
        self._amount = int(claim_amount)

    @property
    def authorizer(self) -> bytes:
        return self._authorizer

    @property
    def claim_deadline(self) -> int:
        return self._deadline

    @property
    def claim_amount(self) -> int:
        return self._amount

    def claimed(self, account: bytes) -> bool:
        return self._journal.get_account(account).claimed

    def verify(self, account: bytes, signature: bytes) -> None:
        """Raise Unauthorized unless `signature` is the authorizer's for `account`."""
        try:
            signer = recover_claim_signer(account, signature)
        except SignatureError as e:
            raise Unauthorized(f"malformed signature: {e}") from e
        if signer != self._authorizer:
            raise Unauthorized(recovered=to_hex(signer))

    def claim(self, caller: bytes, signature: bytes, now: int) -> int:
        """Run the claim for `caller`; returns the granted amount."""
        if self.claimed(caller):
            raise AlreadyClaimed(account=to_hex(caller))
        if now >= self._deadline:
            raise Expired(now=now, deadline=self._deadline)
        self.verify(caller, signature)

        self._journal.account_for_write(caller).claimed = True
        self._ledger.mint(caller, self._amount)
        self._journal.emit(make_event(EVT_CLAIMED, {"account": caller, "amount": self._amount}))
        log.info("claim account=%s amount=%d", to_hex(caller), self._amount)
        return self._amount


__all__ = ["ClaimAuthorizer"]
