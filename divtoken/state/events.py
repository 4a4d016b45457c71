"""
divtoken.state.events — token notifications and the committed event log.

Events are staged in the journal while a call runs and only reach the
`EventLog` when the call commits, so a reverted call leaves no trace.

Names emitted by the token:

    Transfer            {"from": bytes, "to": bytes, "value": int}
    Approval            {"owner": bytes, "spender": bytes, "value": int}
    DividendWithdrawn   {"to": bytes, "amount": int}
    Claimed             {"account": bytes, "amount": int}

Argument values are restricted to bytes, bool and int (256-bit signed range).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

EVT_TRANSFER = "Transfer"
EVT_APPROVAL = "Approval"
EVT_DIVIDEND_WITHDRAWN = "DividendWithdrawn"
EVT_CLAIMED = "Claimed"

MAX_EVENT_NAME_LEN = 64
MAX_INT_BITS = 256

_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9]*$")
_KEY_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

log = logging.getLogger(__name__)


def _check_value(key: str, value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, bool):
        # bool is a subclass of int, so check it before int.
        return value
    if isinstance(value, int):
        if value.bit_length() > MAX_INT_BITS:
            raise ValueError(f"event arg {key!r} out of range")
        return int(value)
    raise TypeError(f"unsupported event arg type for {key!r}: {type(value).__name__}")


@dataclass(frozen=True)
class Event:
    name: str
    args: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not _NAME_RE.match(self.name):
            raise ValueError(f"invalid event name: {self.name!r}")
        if len(self.name) > MAX_EVENT_NAME_LEN:
            raise ValueError("event name too long")
        checked: Dict[str, Any] = {}
        for k, v in self.args.items():
            if not isinstance(k, str) or not _KEY_RE.match(k):
                raise ValueError(f"invalid event key: {k!r}")
            checked[k] = _check_value(k, v)
        object.__setattr__(self, "args", checked)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly view: bytes become 0x-hex."""
        return {
            "name": self.name,
            "args": {
                k: ("0x" + v.hex()) if isinstance(v, bytes) else v
                for k, v in self.args.items()
            },
        }


def make_event(name: str, args: Mapping[str, Any]) -> Event:
    return Event(name=name, args=dict(args))


class EventLog:
    """Append-only log of committed events, in commit order."""

    def __init__(self) -> None:
        self._events: List[Event] = []

    def extend(self, events: Iterable[Event]) -> None:
        for ev in events:
            log.debug("event %s %s", ev.name, ev.args)
            self._events.append(ev)

    def __iter__(self) -> Iterator[Event]:
        return iter(tuple(self._events))

    def __len__(self) -> int:
        return len(self._events)

    def all(self) -> List[Event]:
        return list(self._events)

    def named(self, name: str) -> List[Event]:
        return [e for e in self._events if e.name == name]

    def last(self, name: Optional[str] = None) -> Optional[Event]:
        for ev in reversed(self._events):
            if name is None or ev.name == name:
                return ev
        return None


__all__ = [
    "EVT_TRANSFER",
    "EVT_APPROVAL",
    "EVT_DIVIDEND_WITHDRAWN",
    "EVT_CLAIMED",
    "Event",
    "EventLog",
    "make_event",
]
