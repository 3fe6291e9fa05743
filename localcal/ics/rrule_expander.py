"""Recurrence expansion of stored events into concrete occurrences."""

import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any, Optional

from dateutil.relativedelta import relativedelta

from .dates import to_utc
from .models import Event, Frequency, Occurrence

logger = logging.getLogger(__name__)

# Base occurrence plus at most 364 generated ones
MAX_OCCURRENCES_PER_EVENT = 365
DEFAULT_HORIZON_YEARS = 1


def step_delta(frequency: Frequency, steps: int) -> Optional[relativedelta]:
    """Offset of ``steps`` units of ``frequency`` from the base start.

    Month and year offsets clamp to the last day of a shorter target month, so
    Jan 31 + 1 month is Feb 28 (Feb 29 in leap years) and Feb 29 + 1 year is Feb 28.
    """
    if frequency == Frequency.DAILY:
        return relativedelta(days=steps)
    if frequency == Frequency.WEEKLY:
        return relativedelta(days=7 * steps)
    if frequency == Frequency.MONTHLY:
        return relativedelta(months=steps)
    if frequency == Frequency.YEARLY:
        return relativedelta(years=steps)
    return None


def default_horizon(now: Optional[datetime] = None, years: int = DEFAULT_HORIZON_YEARS) -> datetime:
    """Expansion horizon ``years`` after ``now`` (current UTC time by default)."""
    return (now or datetime.now(timezone.utc)) + relativedelta(years=years)


class RecurrenceExpander:
    """Expand events with recurrence rules into bounded occurrence lists."""

    def __init__(self, settings: Any = None) -> None:
        """Initialize expander.

        Args:
            settings: Application settings; ``expansion_horizon_years`` is read
                from it when given
        """
        self.settings = settings
        self.horizon_years = getattr(settings, "expansion_horizon_years", DEFAULT_HORIZON_YEARS)

    def horizon(self, now: Optional[datetime] = None) -> datetime:
        """Configured horizon measured from ``now``."""
        return default_horizon(now, self.horizon_years)

    def expand(self, events: Iterable[Event], horizon: datetime) -> list[Occurrence]:
        """Expand every event into its occurrences up to ``horizon``.

        Each event contributes its own start/end first, followed by generated
        occurrences in increasing start order.
        """
        occurrences: list[Occurrence] = []
        for event in events:
            occurrences.extend(self.expand_event(event, horizon))
        return occurrences

    def expand_event(self, event: Event, horizon: datetime) -> list[Occurrence]:
        """Expand a single event."""
        occurrences = [
            Occurrence(source_id=event.id, start=event.start, end=event.end, source=event)
        ]

        rule = event.recurrence
        if rule is None or not rule.is_active:
            return occurrences

        interval = max(rule.interval, 1)
        duration = event.end - event.start
        horizon_utc = to_utc(horizon)

        for i in range(1, MAX_OCCURRENCES_PER_EVENT):
            delta = step_delta(rule.frequency, i * interval)
            if delta is None:
                break
            try:
                start = event.start + delta
                end = start + duration
                past_horizon = to_utc(start) > horizon_utc
            except (OverflowError, ValueError):
                logger.debug("Event %s: occurrence %d outside the representable range", event.id, i)
                break

            if past_horizon:
                break
            if rule.until is not None and start.date() > rule.until:
                break

            occurrences.append(Occurrence(source_id=event.id, start=start, end=end, source=event))

        logger.debug("Event %s expanded to %d occurrences", event.id, len(occurrences))
        return occurrences


def expand(events: Iterable[Event], horizon: datetime) -> list[Occurrence]:
    """Expand events with a default :class:`RecurrenceExpander`."""
    return RecurrenceExpander().expand(events, horizon)
