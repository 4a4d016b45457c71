"""
End-to-end behaviour of DividendToken: claim -> transfer -> withdraw, the
public ERC20-style surface, rollback, and randomized invariant checks.
"""
from __future__ import annotations

from typing import Dict, List

import pytest
from hypothesis import given
from hypothesis import strategies as st

from divtoken.config import TokenConfig
from divtoken.context import CallContext, ZERO_ADDRESS
from divtoken.crypto.ecdsa import address_of
from divtoken.dividends.scheduler import HALVING_PERIOD
from divtoken.errors import (DivisionByZero, InsufficientAllowance,
                             InsufficientBalance, InvalidAddress, TokenError)
from divtoken.math import MAGNITUDE
from divtoken.state.events import EVT_APPROVAL, EVT_TRANSFER
from divtoken.tests import (ALICE, AUTHORIZER_KEY, BOB, CAROL, DEADLINE,
                            claim, ctx, make_token, seed)
from divtoken.token import DividendToken


def _snapshot(t: DividendToken, who: List[bytes]) -> Dict[str, object]:
    return {
        "supply": t.total_supply(),
        "acc": t.per_share_accumulator(),
        "events": len(t.events),
        "accounts": [
            (t.balance_of(a), t.correction_of(a), t.withdrawn_dividend_of(a), t.claimed(a))
            for a in who
        ],
    }


# ---------------------------------------------------------------------------
# Scenario
# ---------------------------------------------------------------------------

def test_claim_transfer_withdraw_scenario(token):
    assert token.total_supply() == 0

    grant = claim(token, ALICE)
    assert token.total_supply() == grant

    v = 4 * 10 ** 17
    supply = token.total_supply()
    acc0 = token.per_share_accumulator()
    token.transfer(ctx(ALICE), BOB, v)
    assert token.per_share_accumulator() - acc0 == v * MAGNITUDE // supply

    acc = token.per_share_accumulator()
    expected = acc * token.balance_of(BOB) // MAGNITUDE - token.withdrawn_dividend_of(BOB)
    assert expected > 0
    assert token.withdraw_dividend(ctx(BOB)) == expected
    assert token.withdrawn_dividend_of(BOB) == expected
    assert token.withdrawable_dividend_of(BOB) == 0

    # BOB received after nothing was distributed, ALICE kept the rest
    sum_acc = token.accumulative_dividend_of(ALICE) + token.accumulative_dividend_of(BOB)
    assert sum_acc <= v


def test_transfer_over_zero_supply_is_rejected(token):
    # no holders at all: the transfer itself fails first
    with pytest.raises(InsufficientBalance):
        token.transfer(ctx(ALICE), BOB, 1)
    # a zero-value transfer distributes nothing and succeeds
    assert token.transfer(ctx(ALICE), BOB, 0)


def test_distribution_over_burned_supply_raises_and_rolls_back(small_token):
    t = small_token
    seed(t, ALICE, 5)
    t.burn(ctx(ALICE), 5)
    assert t.total_supply() == 0
    # transfer of zero value is fine, but nothing to distribute over
    assert t.transfer(ctx(ALICE), BOB, 0)
    with pytest.raises(DivisionByZero):
        with t._lock, t._journal.atomic():
            t._scheduler.distribute(1, DEADLINE)
    assert t.per_share_accumulator() == 0


# ---------------------------------------------------------------------------
# ERC20-style surface
# ---------------------------------------------------------------------------

def test_approve_and_transfer_from_funds_the_pool(small_token):
    t = small_token
    seed(t, ALICE, 100)
    t.approve(ctx(ALICE), CAROL, 30)
    assert t.allowance(ALICE, CAROL) == 30
    assert t.events.last().name == EVT_APPROVAL

    t.transfer_from(ctx(CAROL), ALICE, BOB, 20)
    assert t.allowance(ALICE, CAROL) == 10
    assert t.balance_of(BOB) == 20
    assert t.per_share_accumulator() == 20 * MAGNITUDE // 100
    assert t.events.last(EVT_TRANSFER).args == {"from": ALICE, "to": BOB, "value": 20}

    with pytest.raises(InsufficientAllowance):
        t.transfer_from(ctx(CAROL), ALICE, BOB, 11)
    assert t.allowance(ALICE, CAROL) == 10
    assert t.balance_of(BOB) == 20


def test_burn_keeps_entitlement(small_token):
    t = small_token
    seed(t, ALICE, 512)
    seed(t, BOB, 512)
    t.transfer(ctx(BOB), ALICE, 256)
    before = t.accumulative_dividend_of(ALICE)
    t.burn(ctx(ALICE), 100)
    assert t.accumulative_dividend_of(ALICE) == before
    assert t.total_supply() == 924
    assert t.events.last().args == {"from": ALICE, "to": ZERO_ADDRESS, "value": 100}


def test_zero_address_rejected(small_token):
    seed(small_token, ALICE, 10)
    with pytest.raises(InvalidAddress):
        small_token.transfer(ctx(ALICE), ZERO_ADDRESS, 1)
    with pytest.raises(InvalidAddress):
        small_token.transfer(ctx(ALICE), "0x1234", 1)
    assert small_token.balance_of(ALICE) == 10


def test_hex_addresses_accepted(small_token):
    seed(small_token, ALICE, 10)
    small_token.transfer(ctx("0x" + ALICE.hex()), "0x" + BOB.hex(), 3)
    assert small_token.balance_of("0x" + BOB.hex()) == 3
    assert small_token.holders() == sorted([ALICE, BOB])


def test_insufficient_balance_rolls_back_everything(small_token):
    t = small_token
    seed(t, ALICE, 10)
    t.transfer(ctx(ALICE), BOB, 4)
    snap = _snapshot(t, [ALICE, BOB, CAROL])
    with pytest.raises(InsufficientBalance) as ei:
        t.transfer(ctx(BOB), CAROL, 5)
    assert ei.value.to_dict() == {
        "code": "INSUFFICIENT_BALANCE",
        "message": "insufficient balance",
        "data": {"have": 4, "need": 5},
    }
    assert _snapshot(t, [ALICE, BOB, CAROL]) == snap


def test_ctx_must_be_call_context(small_token):
    with pytest.raises(TypeError):
        small_token.transfer((ALICE, 0), BOB, 0)  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        CallContext(sender=ALICE, timestamp=-1)


def test_metadata_and_from_config():
    cfg = TokenConfig(
        name="Bonus",
        symbol="BNS",
        decimals=6,
        authorizer=address_of(AUTHORIZER_KEY),
        claim_deadline=DEADLINE,
    )
    t = DividendToken.from_config(cfg)
    assert (t.name, t.symbol, t.decimals) == ("Bonus", "BNS", 6)
    assert t.claim_amount == 10 ** 6
    assert t.authorizer == address_of(AUTHORIZER_KEY)
    assert DividendToken.from_config(cfg, decimals=2).claim_amount == 100

    with pytest.raises(InvalidAddress):
        DividendToken.from_config(TokenConfig())


# ---------------------------------------------------------------------------
# Randomized invariants
# ---------------------------------------------------------------------------

PEOPLE = [ALICE, BOB, CAROL]

ops = st.lists(
    st.tuples(
        st.sampled_from(["transfer", "withdraw", "burn"]),
        st.integers(min_value=0, max_value=2),
        st.integers(min_value=0, max_value=2),
        st.integers(min_value=0, max_value=5_000),
        st.integers(min_value=0, max_value=8 * HALVING_PERIOD),
    ),
    min_size=1,
    max_size=25,
)


@given(ops)
def test_random_operations_keep_invariants(sequence):
    t = make_token(decimals=0)
    seed(t, ALICE, 10_000)
    seed(t, BOB, 3_000)
    now = DEADLINE - 100
    distributed = 0
    prev_acc = {a: 0 for a in PEOPLE}
    prev_withdrawn = {a: 0 for a in PEOPLE}

    for op, i, j, amount, dt in sequence:
        now += dt
        who, dest = PEOPLE[i], PEOPLE[j]
        try:
            if op == "transfer":
                t.transfer(ctx(who, now), dest, amount)
                distributed += t.last_distribution.effective
            elif op == "withdraw":
                t.withdraw_dividend(ctx(who, now))
            else:
                t.burn(ctx(who, now), amount)
        except (InsufficientBalance, DivisionByZero):
            pass
        except TokenError as e:  # pragma: no cover - would be a bug
            pytest.fail(f"unexpected {e!r}")

        total = 0
        for a in PEOPLE:
            accumulated = t.accumulative_dividend_of(a)
            withdrawn = t.withdrawn_dividend_of(a)
            # raises ArithmeticOverflow if ever negative
            assert t.withdrawable_dividend_of(a) == accumulated - withdrawn
            assert accumulated >= prev_acc[a]
            assert withdrawn >= prev_withdrawn[a]
            prev_acc[a], prev_withdrawn[a] = accumulated, withdrawn
            total += accumulated
        assert total <= distributed
