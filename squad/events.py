"""Event Log — append-only record of every pipeline step, in display order."""

import uuid
from datetime import datetime
from typing import Callable

from squad.state import AgentRole, LogEvent, Severity

LogObserver = Callable[[LogEvent], None]


class EventLog:
    """Ordered sequence of LogEvents.

    Entries are never edited or reordered. Observers are called with each new
    event right after it is appended, so a display can re-render in order.
    """

    def __init__(self) -> None:
        self._events: list[LogEvent] = []
        self._observers: list[LogObserver] = []

    def append(
        self,
        role: AgentRole,
        message: str,
        severity: Severity = Severity.INFO,
    ) -> LogEvent:
        event = LogEvent(
            id=uuid.uuid4().hex,
            role=AgentRole(role),
            message=message,
            timestamp=datetime.now(),
            severity=Severity(severity),
        )
        self._events.append(event)
        for observer in self._observers:
            observer(event)
        return event

    def clear(self) -> None:
        self._events = []

    def subscribe(self, observer: LogObserver) -> None:
        self._observers.append(observer)

    def unsubscribe(self, observer: LogObserver) -> None:
        self._observers.remove(observer)

    @property
    def events(self) -> tuple[LogEvent, ...]:
        """Read-only snapshot of the log."""
        return tuple(self._events)

    def __iter__(self):
        return iter(tuple(self._events))

    def __len__(self) -> int:
        return len(self._events)
