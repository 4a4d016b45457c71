"""
divtoken.state.journal — checkpointed writes with commit/revert.

Every public token mutation runs inside one checkpoint: writes land in the
top overlay, reads consult overlays top → base, and the whole overlay is
either merged down (commit) or dropped (revert). This gives each call the
all-or-nothing behaviour the accounting engine relies on: a failure halfway
through a transfer leaves no half-applied correction behind.

State tracked
-------------
- accounts:    address -> Account (copy-on-write into the top overlay)
- globals:     name -> int (per-share accumulator, total supply)
- allowances:  (owner, spender) -> int
- events:      staged Event objects, published to the EventLog on final commit

Intended usage
--------------
    j = Journal()
    with j.atomic():
        acc = j.account_for_write(addr)
        acc.balance += 1
        j.set_global("total_supply", j.get_global("total_supply") + 1)
        j.emit(make_event("Transfer", {...}))

Any exception inside `atomic()` reverts the checkpoint and re-raises.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import (Dict, Iterator, List, MutableMapping, Optional, Set,
                    Tuple)

from .accounts import Account
from .events import Event, EventLog

log = logging.getLogger(__name__)

AllowanceKey = Tuple[bytes, bytes]


def _b(x: bytes | bytearray | memoryview, *, name: str) -> bytes:
    if not isinstance(x, (bytes, bytearray, memoryview)):
        raise TypeError(f"{name} must be bytes-like")
    return bytes(x)


# =============================================================================
# Overlay model
# =============================================================================


@dataclass
class _Overlay:
    accounts: Dict[bytes, Account] = field(default_factory=dict)
    globals: Dict[str, int] = field(default_factory=dict)
    allowances: Dict[AllowanceKey, int] = field(default_factory=dict)
    events: List[Event] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.accounts or self.globals or self.allowances or self.events)


# =============================================================================
# Journal
# =============================================================================


class Journal:
    """
    Copy-on-write journal over a base state.

    Parameters
    ----------
    accounts : MutableMapping[bytes, Account], optional
        Base (committed) account records.
    globals_ : MutableMapping[str, int], optional
        Base (committed) global integers.
    event_log : EventLog, optional
        Receives staged events when the outermost checkpoint commits.
    """

    def __init__(
        self,
        accounts: Optional[MutableMapping[bytes, Account]] = None,
        globals_: Optional[MutableMapping[str, int]] = None,
        event_log: Optional[EventLog] = None,
    ) -> None:
        self._base_accounts: MutableMapping[bytes, Account] = accounts if accounts is not None else {}
        self._base_globals: MutableMapping[str, int] = globals_ if globals_ is not None else {}
        self._base_allowances: Dict[AllowanceKey, int] = {}
        self.event_log = event_log if event_log is not None else EventLog()
        # Root overlay stays in place; checkpoints stack on top of it.
        self._layers: List[_Overlay] = [_Overlay()]

    # --------------------------------------------------------------------- #
    # Checkpointing
    # --------------------------------------------------------------------- #

    def depth(self) -> int:
        """Number of overlays (>= 1)."""
        return len(self._layers)

    def begin(self) -> int:
        """Start a new checkpoint; returns the new depth."""
        self._layers.append(_Overlay())
        return len(self._layers)

    def commit(self) -> None:
        """
        Merge the top overlay into its parent. When the parent is the root,
        the result is applied to the base state and staged events are
        published.
        """
        if len(self._layers) <= 1:
            self._apply_to_base(self._layers[0])
            self._layers[0] = _Overlay()
            return
        top = self._layers.pop()
        self._merge_layers(self._layers[-1], top)
        if len(self._layers) == 1:
            root = self._layers[0]
            self._apply_to_base(root)
            self._layers[0] = _Overlay()

    def revert(self) -> None:
        """Discard the top overlay (or clear the root)."""
        if len(self._layers) > 1:
            self._layers.pop()
        else:
            self._layers[0] = _Overlay()

    @contextmanager
    def atomic(self) -> Iterator[int]:
        """
        Run a block inside a checkpoint. Commits on normal exit; on any
        exception the checkpoint is reverted and the exception propagates.
        """
        marker = self.begin()
        try:
            yield marker
        except BaseException as exc:
            while len(self._layers) >= marker:
                self.revert()
            log.debug("checkpoint %d reverted: %s", marker, exc)
            raise
        else:
            while len(self._layers) > marker:
                self.commit()
            self.commit()

    # --------------------------------------------------------------------- #
    # Accounts
    # --------------------------------------------------------------------- #

    def _lookup_account(self, addr: bytes) -> Optional[Account]:
        for layer in reversed(self._layers):
            acc = layer.accounts.get(addr)
            if acc is not None:
                return acc
        return self._base_accounts.get(addr)

    def get_account(self, address: bytes | bytearray | memoryview) -> Account:
        """Read view; unknown addresses get a fresh empty account. Write through `account_for_write`."""
        acc = self._lookup_account(_b(address, name="address"))
        return acc if acc is not None else Account()

    def has_account(self, address: bytes | bytearray | memoryview) -> bool:
        return self._lookup_account(_b(address, name="address")) is not None

    def account_for_write(self, address: bytes | bytearray | memoryview) -> Account:
        """
        Account suitable for mutation in the top overlay; copied up from a
        lower layer or created fresh.
        """
        addr = _b(address, name="address")
        top = self._layers[-1]
        acc = top.accounts.get(addr)
        if acc is not None:
            return acc
        src = self._lookup_account(addr)
        acc = src.copy() if src is not None else Account()
        top.accounts[addr] = acc
        return acc

    def addresses(self) -> List[bytes]:
        """Every address with a visible record, sorted."""
        seen: Set[bytes] = set(self._base_accounts.keys())
        for layer in self._layers:
            seen.update(layer.accounts.keys())
        return sorted(seen)

    # --------------------------------------------------------------------- #
    # Globals
    # --------------------------------------------------------------------- #

    def get_global(self, name: str, default: int = 0) -> int:
        for layer in reversed(self._layers):
            if name in layer.globals:
                return layer.globals[name]
        return self._base_globals.get(name, default)

    def set_global(self, name: str, value: int) -> None:
        self._layers[-1].globals[name] = int(value)

    # --------------------------------------------------------------------- #
    # Allowances
    # --------------------------------------------------------------------- #

    def get_allowance(self, owner: bytes, spender: bytes) -> int:
        key = (_b(owner, name="owner"), _b(spender, name="spender"))
        for layer in reversed(self._layers):
            if key in layer.allowances:
                return layer.allowances[key]
        return self._base_allowances.get(key, 0)

    def set_allowance(self, owner: bytes, spender: bytes, value: int) -> None:
        key = (_b(owner, name="owner"), _b(spender, name="spender"))
        self._layers[-1].allowances[key] = int(value)

    # --------------------------------------------------------------------- #
    # Events
    # --------------------------------------------------------------------- #

    def emit(self, event: Event) -> None:
        """Stage an event; it becomes visible only after the final commit."""
        if not isinstance(event, Event):
            raise TypeError("emit expects an Event")
        self._layers[-1].events.append(event)

    # --------------------------------------------------------------------- #
    # Internal merge/apply
    # --------------------------------------------------------------------- #

    @staticmethod
    def _merge_layers(dst: _Overlay, src: _Overlay) -> None:
        for addr, acc in src.accounts.items():
            dst.accounts[addr] = acc
        dst.globals.update(src.globals)
        dst.allowances.update(src.allowances)
        dst.events.extend(src.events)

    def _apply_to_base(self, layer: _Overlay) -> None:
        if layer.is_empty():
            return
        for addr, acc in layer.accounts.items():
            self._base_accounts[addr] = acc.copy()
        for name, value in layer.globals.items():
            self._base_globals[name] = value
        for key, value in layer.allowances.items():
            if value == 0:
                self._base_allowances.pop(key, None)
            else:
                self._base_allowances[key] = value
        self.event_log.extend(layer.events)


__all__ = ["Journal", "AllowanceKey"]
