"""
Human-readable environment notifications.

Storm start, each thunder event, storm end and phase changes are logged and
kept in a bounded in-memory buffer for the API.
"""

import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from skycycle.logger import get_logger

logger = get_logger("events")


class EventKind(str, Enum):
    """Notification types."""
    STORM_STARTED = "storm_started"
    THUNDER = "thunder"
    STORM_ENDED = "storm_ended"
    PHASE_CHANGED = "phase_changed"


@dataclass(frozen=True)
class EnvironmentEvent:
    """Single notification."""
    kind: EventKind
    message: str
    timestamp: datetime = field(default_factory=datetime.now)
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
            "details": dict(self.details),
        }


class EventLog:
    """
    Bounded, thread-safe record of recent notifications.

    Oldest events are dropped once max_events is reached.
    """

    def __init__(self, max_events: int = 200):
        self.lock = threading.Lock()
        self._events: deque[EnvironmentEvent] = deque(maxlen=max_events)

    def record(self, kind: EventKind, message: str, **details) -> EnvironmentEvent:
        """
        Store a notification and log it at INFO.

        Args:
            kind: Event type
            message: Human-readable text
            **details: Extra values shown by the API

        Returns:
            The stored event
        """
        event = EnvironmentEvent(kind=kind, message=message, details=details)
        with self.lock:
            self._events.append(event)
        logger.info(message)
        return event

    def recent(self, limit: Optional[int] = None, kind: Optional[EventKind] = None) -> list[EnvironmentEvent]:
        """Return events oldest first, optionally filtered and limited to the newest `limit`."""
        with self.lock:
            events = list(self._events)
        if kind is not None:
            events = [e for e in events if e.kind == kind]
        if limit is not None:
            events = events[-limit:] if limit > 0 else []
        return events

    def count(self, kind: EventKind) -> int:
        with self.lock:
            return sum(1 for e in self._events if e.kind == kind)

    def clear(self) -> None:
        with self.lock:
            self._events.clear()
