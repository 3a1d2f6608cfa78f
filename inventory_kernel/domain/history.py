"""
Audit history (``inventory_kernel.domain.history``).

Responsibility
--------------
The immutable ``HistoryEvent`` record and the single operation allowed on an
entity's history log: appending.

Invariants
----------
- A history log is a ``tuple``; past entries can never be replaced,
  reordered, or removed.  ``append_events`` returns a new tuple whose prefix
  is the old log.
- Insertion order is the storage order.  Newest-first presentation is a
  read-side concern (``newest_first``).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from inventory_kernel.domain.clock import Clock
from inventory_kernel.domain.ids import IdGenerator


class HistoryEventType(Enum):
    """Kinds of change recorded in an entity's history."""
    CREATION = "creation"
    ASSIGNMENT = "assignment"
    STATUS = "status"
    MAINTENANCE = "maintenance"
    UPDATE = "update"
    LOCATION = "location"
    CHECKOUT = "checkout"
    CHECKIN = "checkin"
    PROCUREMENT = "procurement"


@dataclass(frozen=True)
class HistoryEvent:
    """
    One discrete, immutable change to one entity.

    ``entity_id`` is the owning record (an asset, a seat, a license...).
    ``timestamp`` is an ISO-8601 string taken from the injected clock.
    """
    id: str
    entity_id: str
    timestamp: str
    event_type: HistoryEventType
    description: str
    changed_from: str | None = None
    changed_to: str | None = None

    @property
    def occurred_at(self) -> datetime:
        parsed = datetime.fromisoformat(self.timestamp.replace("Z", "+00:00"))
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed


History = tuple[HistoryEvent, ...]


def append_events(history: History, *events: HistoryEvent) -> History:
    """Return ``history`` extended with ``events`` (the only mutation)."""
    if not events:
        return history
    return (*history, *events)


class EventRecorder:
    """
    Builds the history events of one command.

    The clock is read lazily, once, so a command that changes nothing does
    not consume a timestamp and every event of one command shares the same
    time.  ``recorded`` counts events built so far (for logging).
    """

    def __init__(self, clock: Clock, ids: IdGenerator):
        self._clock = clock
        self._ids = ids
        self._timestamp: str | None = None
        self.recorded = 0

    @property
    def timestamp(self) -> str:
        if self._timestamp is None:
            self._timestamp = self._clock.now_iso()
        return self._timestamp

    def record(
        self,
        entity_id: str,
        event_type: HistoryEventType,
        description: str,
        changed_from: str | None = None,
        changed_to: str | None = None,
    ) -> HistoryEvent:
        event = HistoryEvent(
            id=self._ids.next_id(),
            entity_id=entity_id,
            timestamp=self.timestamp,
            event_type=event_type,
            description=description,
            changed_from=changed_from,
            changed_to=changed_to,
        )
        self.recorded += 1
        return event


def newest_first(history: History) -> list[HistoryEvent]:
    """Events sorted by timestamp, newest first (insertion order breaks ties)."""
    ordered = list(enumerate(history))
    ordered.sort(key=lambda pair: (pair[1].occurred_at, pair[0]), reverse=True)
    return [event for _, event in ordered]
