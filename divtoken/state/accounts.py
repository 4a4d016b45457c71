"""
divtoken.state.accounts — per-holder records.

An Account carries the four per-identity fields of the token:

- balance:    uint256 share balance (written by the base ledger)
- correction: int256 offset scaled by MAGNITUDE (written by the Correction Ledger)
- withdrawn:  uint256 dividends already realized (written by the Withdrawal Tracker)
- claimed:    one-way flag (written by the Claim Authorizer)

Records are created lazily the first time an address is written. Reads of an
unknown address see `Account()` (all zero / False). The module does no
bookkeeping of its own; ownership of each field is enforced by which
component writes it.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..math.checked import is_i256, is_u256


@dataclass(slots=True)
class Account:
    """
    Invariants:
    - balance and withdrawn are uint256
    - correction is int256
    - claimed never goes from True back to False
    """
    balance: int = 0
    correction: int = 0
    withdrawn: int = 0
    claimed: bool = False

    def __post_init__(self) -> None:
        if not is_u256(self.balance):
            raise ValueError("balance must be uint256")
        if not is_u256(self.withdrawn):
            raise ValueError("withdrawn must be uint256")
        if not is_i256(self.correction):
            raise ValueError("correction must be int256")
        self.claimed = bool(self.claimed)

    def copy(self) -> "Account":
        return Account(
            balance=self.balance,
            correction=self.correction,
            withdrawn=self.withdrawn,
            claimed=self.claimed,
        )


__all__ = ["Account"]
