"""
divtoken.config — token metadata and deployment parameters from the environment.

Configuration precedence:
  1) Explicit keyword arguments to `DividendToken(...)` / CLI options
  2) Environment variables (DIVTOKEN_*)
  3) Defaults below

Environment variables (all optional):
  DIVTOKEN_NAME              token name                       default: "Dividend"
  DIVTOKEN_SYMBOL            token symbol                     default: "DIV"
  DIVTOKEN_DECIMALS          decimals (0..36)                 default: 18
  DIVTOKEN_AUTHORIZER        0x-hex 20-byte claim authorizer  default: unset
  DIVTOKEN_CLAIM_DEADLINE    unix seconds                     default: 0
  DIVTOKEN_LOG_LEVEL         logging level name               default: WARNING

The decay constants (MAGNITUDE, HALVING_PERIOD, FINAL_ERA) are protocol
constants and not configurable.

Usage:
    from divtoken.config import load_config
    cfg = load_config()
    token = DividendToken.from_config(cfg)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Mapping, Optional

from .context import to_address, to_hex
from .errors import InvalidAddress

log = logging.getLogger(__name__)

DEFAULT_NAME = "Dividend"
DEFAULT_SYMBOL = "DIV"
DEFAULT_DECIMALS = 18
MAX_DECIMALS = 36
DEFAULT_LOG_LEVEL = "WARNING"

# ----------------------------- helpers ---------------------------------------


def _env_int(env: Mapping[str, str], name: str, default: int, *, min_v: int, max_v: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        v = int(raw, 0)
    except ValueError:
        log.warning("ignoring non-integer %s=%r", name, raw)
        return default
    if v < min_v:
        return min_v
    if v > max_v:
        return max_v
    return v


def _env_str(env: Mapping[str, str], name: str, default: str) -> str:
    raw = env.get(name)
    if raw is None:
        return default
    raw = raw.strip()
    return raw or default


def _env_address(env: Mapping[str, str], name: str) -> Optional[bytes]:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return to_address(raw)
    except InvalidAddress:
        log.warning("ignoring malformed %s=%r", name, raw)
        return None


# ------------------------------- config --------------------------------------


@dataclass(frozen=True)
class TokenConfig:
    name: str = DEFAULT_NAME
    symbol: str = DEFAULT_SYMBOL
    decimals: int = DEFAULT_DECIMALS
    authorizer: Optional[bytes] = None
    claim_deadline: int = 0
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def claim_amount(self) -> int:
        """One whole token in base units."""
        return 10 ** self.decimals

    def as_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "symbol": self.symbol,
            "decimals": self.decimals,
            "authorizer": to_hex(self.authorizer) if self.authorizer else None,
            "claim_deadline": self.claim_deadline,
            "claim_amount": self.claim_amount,
            "log_level": self.log_level,
        }


def config_from_env(env: Optional[Mapping[str, str]] = None) -> TokenConfig:
    """Build a TokenConfig from `env` (defaults to os.environ); uncached."""
    e = os.environ if env is None else env
    return TokenConfig(
        name=_env_str(e, "DIVTOKEN_NAME", DEFAULT_NAME),
        symbol=_env_str(e, "DIVTOKEN_SYMBOL", DEFAULT_SYMBOL).upper(),
        decimals=_env_int(e, "DIVTOKEN_DECIMALS", DEFAULT_DECIMALS, min_v=0, max_v=MAX_DECIMALS),
        authorizer=_env_address(e, "DIVTOKEN_AUTHORIZER"),
        claim_deadline=_env_int(e, "DIVTOKEN_CLAIM_DEADLINE", 0, min_v=0, max_v=(1 << 64) - 1),
        log_level=_env_str(e, "DIVTOKEN_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
    )


@lru_cache(maxsize=1)
def load_config() -> TokenConfig:
    """Process-wide configuration from the environment (cached)."""
    return config_from_env()


__all__ = ["TokenConfig", "config_from_env", "load_config"]
