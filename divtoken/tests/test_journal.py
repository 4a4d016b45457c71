from __future__ import annotations

import pytest

from divtoken.state.accounts import Account
from divtoken.state.events import Event, EventLog, make_event
from divtoken.state.journal import Journal

A = b"\x11" * 20
B = b"\x22" * 20


def _ev(n: int) -> Event:
    return make_event("Transfer", {"from": A, "to": B, "value": n})


def test_unknown_account_reads_empty(journal: Journal):
    acc = journal.get_account(A)
    assert acc.balance == 0 and acc.correction == 0 and acc.withdrawn == 0
    assert acc.claimed is False
    assert not journal.has_account(A)


def test_atomic_commit_applies_state_and_publishes_events(journal: Journal):
    with journal.atomic():
        journal.account_for_write(A).balance = 10
        journal.set_global("total_supply", 10)
        journal.set_allowance(A, B, 3)
        journal.emit(_ev(10))
        # staged, not yet published
        assert len(journal.event_log) == 0

    assert journal.depth() == 1
    assert journal.get_account(A).balance == 10
    assert journal.get_global("total_supply") == 10
    assert journal.get_allowance(A, B) == 3
    assert [e.args["value"] for e in journal.event_log] == [10]


def test_atomic_reverts_everything_on_error(journal: Journal):
    with journal.atomic():
        journal.account_for_write(A).balance = 5
        journal.emit(_ev(5))

    with pytest.raises(RuntimeError):
        with journal.atomic():
            journal.account_for_write(A).balance = 99
            journal.account_for_write(B).correction = -7
            journal.set_global("total_supply", 123)
            journal.emit(_ev(99))
            raise RuntimeError("boom")

    assert journal.depth() == 1
    assert journal.get_account(A).balance == 5
    assert not journal.has_account(B)
    assert journal.get_global("total_supply") == 0
    assert len(journal.event_log) == 1


def test_nested_checkpoint_revert_keeps_outer_writes(journal: Journal):
    with journal.atomic():
        journal.account_for_write(A).balance = 1
        journal.begin()
        journal.account_for_write(A).balance = 2
        journal.emit(_ev(2))
        journal.revert()
        assert journal.get_account(A).balance == 1
    assert journal.get_account(A).balance == 1
    assert len(journal.event_log) == 0


def test_copy_on_write_does_not_touch_base_until_commit():
    base = {A: Account(balance=4)}
    j = Journal(accounts=base)
    j.begin()
    j.account_for_write(A).balance = 8
    assert base[A].balance == 4
    j.commit()
    assert base[A].balance == 8


def test_zero_allowance_is_dropped_from_base(journal: Journal):
    with journal.atomic():
        journal.set_allowance(A, B, 5)
    with journal.atomic():
        journal.set_allowance(A, B, 0)
    assert journal.get_allowance(A, B) == 0
    assert journal._base_allowances == {}


def test_addresses_sorted_and_include_pending(journal: Journal):
    with journal.atomic():
        journal.account_for_write(B)
    journal.begin()
    journal.account_for_write(A)
    assert journal.addresses() == [A, B]
    journal.revert()
    assert journal.addresses() == [B]


def test_emit_rejects_non_events(journal: Journal):
    with pytest.raises(TypeError):
        journal.emit({"name": "Transfer"})  # type: ignore[arg-type]


def test_event_validation():
    with pytest.raises(ValueError):
        make_event("bad name", {})
    with pytest.raises(ValueError):
        make_event("Transfer", {"bad-key": 1})
    with pytest.raises(TypeError):
        make_event("Transfer", {"value": 1.5})
    with pytest.raises(ValueError):
        make_event("Transfer", {"value": 1 << 300})
    ev = make_event("Claimed", {"account": bytearray(b"\x01" * 20), "amount": 3})
    assert ev.to_dict() == {"name": "Claimed", "args": {"account": "0x" + "01" * 20, "amount": 3}}


def test_event_log_queries():
    log = EventLog()
    log.extend([_ev(1), make_event("Claimed", {"account": A, "amount": 1}), _ev(2)])
    assert len(log) == 3
    assert [e.args["value"] for e in log.named("Transfer")] == [1, 2]
    assert log.last().args["value"] == 2
    assert log.last("Claimed").name == "Claimed"
    assert log.last("DividendWithdrawn") is None


def test_unknown_accounts_are_independent_reads(journal: Journal):
    view = journal.get_account(A)
    view.balance = 7
    assert journal.get_account(A).balance == 0
    assert journal.get_account(B).balance == 0
    assert not journal.has_account(A)
