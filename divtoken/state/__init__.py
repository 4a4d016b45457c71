"""
divtoken.state — account records, the checkpointed journal and events.
"""

from __future__ import annotations

from .accounts import Account
from .events import (EVT_APPROVAL, EVT_CLAIMED, EVT_DIVIDEND_WITHDRAWN,
                     EVT_TRANSFER, Event, EventLog, make_event)
from .journal import Journal

__all__ = [
    "Account",
    "Event",
    "EventLog",
    "make_event",
    "EVT_TRANSFER",
    "EVT_APPROVAL",
    "EVT_DIVIDEND_WITHDRAWN",
    "EVT_CLAIMED",
    "Journal",
]
