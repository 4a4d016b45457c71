"""
divtoken — dividend-bearing fungible token with a halving distribution schedule.

Holders accrue a share of every transfer's value through a single global
per-share accumulator; per-account correction terms keep each holder's
entitlement stable while balances move. A signature-gated, one-time claim
seeds initial balances before a fixed deadline.

Heavy modules should be imported explicitly (`divtoken.token`, `divtoken.cli`);
importing the package itself only exposes metadata.
"""

from .version import __version__

__all__ = ["__version__"]
