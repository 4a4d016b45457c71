from __future__ import annotations

import pytest

from divtoken.config import load_config
from divtoken.state.journal import Journal
from divtoken.tests import make_token
from divtoken.token import DividendToken


@pytest.fixture
def token() -> DividendToken:
    return make_token()


@pytest.fixture
def small_token() -> DividendToken:
    """decimals=0: the claim grant is a single unit, amounts stay readable."""
    return make_token(decimals=0)


@pytest.fixture
def journal() -> Journal:
    return Journal()


@pytest.fixture(autouse=True)
def _clear_config_cache():
    load_config.cache_clear()
    yield
    load_config.cache_clear()
