"""Storage collaborator boundary.

The codec only needs a store that can enumerate every event and persist decoded
drafts under fresh ids. :class:`InMemoryEventStore` is the reference
implementation used by the command line tool and the tests.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Optional, Protocol

from .ics.models import DEFAULT_CATEGORY, DEFAULT_COLOR, Event, EventDraft

logger = logging.getLogger(__name__)


class EventStore(Protocol):
    """What the import/export pipelines need from storage."""

    def all_events(self) -> list[Event]:
        """Return every stored event."""

    def save_draft(self, draft: EventDraft, all_day: bool = False) -> int:
        """Persist a decoded draft and return its new id."""


class InMemoryEventStore:
    """Thread-safe dict-backed event store with ids counting up from 1."""

    def __init__(self, settings: Any = None) -> None:
        self.default_category = getattr(settings, "default_category", DEFAULT_CATEGORY)
        self.default_color = getattr(settings, "default_color", DEFAULT_COLOR)
        self._events: dict[int, Event] = {}
        self._last_id = 0
        self._lock = threading.Lock()

    def _next_id(self) -> int:
        self._last_id = max([self._last_id, *self._events]) + 1
        return self._last_id

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def save_draft(self, draft: EventDraft, all_day: bool = False) -> int:
        """Persist a decoded draft under a new id."""
        with self._lock:
            event_id = self._next_id()
            self._events[event_id] = draft.to_event(
                event_id,
                all_day=all_day,
                created_at=datetime.now(timezone.utc),
                category=self.default_category,
                color=self.default_color,
            )
        logger.debug("Stored draft %r as event %d", draft.title, event_id)
        return event_id

    def save_event(self, event: Event) -> int:
        """Insert or replace an event; events with id 0 get a new id."""
        with self._lock:
            if event.id == 0:
                event = event.model_copy(
                    update={
                        "id": self._next_id(),
                        "created_at": event.created_at or datetime.now(timezone.utc),
                    }
                )
            self._events[event.id] = event
            return event.id

    def get_event(self, event_id: int) -> Optional[Event]:
        with self._lock:
            return self._events.get(event_id)

    def delete_event(self, event_id: int) -> bool:
        with self._lock:
            return self._events.pop(event_id, None) is not None

    def all_events(self) -> list[Event]:
        """Return every stored event in id order."""
        with self._lock:
            return [self._events[event_id] for event_id in sorted(self._events)]
