"""ICS export of stored events."""

import logging
from collections.abc import Iterable
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from tempfile import gettempdir
from typing import Any, Optional, Union

from .dates import escape_text, format_date, format_utc, format_utc_midnight
from .exceptions import ICSExportError
from .models import DEFAULT_CATEGORY, Event, Occurrence, RecurrenceRule

logger = logging.getLogger(__name__)

CRLF = "\r\n"

DEFAULT_PRODID = "-//LocalCal//EN"
DEFAULT_UID_DOMAIN = "localcal"
DEFAULT_REMINDER_DESCRIPTION = "Reminder"
DEFAULT_EXPORT_PREFIX = "localcal"


def build_rrule(rule: Optional[RecurrenceRule]) -> str:
    """Build the RRULE value for a rule, or an empty string when it does not recur."""
    if rule is None or not rule.is_active:
        return ""
    parts = [f"FREQ={rule.frequency.value.upper()}"]
    if rule.interval > 1:
        parts.append(f"INTERVAL={rule.interval}")
    if rule.until is not None:
        parts.append(f"UNTIL={format_utc_midnight(rule.until)}")
    return ";".join(parts)


def unique_events(items: Iterable[Union[Event, Occurrence]]) -> list[Event]:
    """Resolve occurrences to their source events and keep the first record per id."""
    seen: set[int] = set()
    events: list[Event] = []
    for item in items:
        event = item.source if isinstance(item, Occurrence) else item
        if event.id in seen:
            continue
        seen.add(event.id)
        events.append(event)
    return events


class ICSExporter:
    """Serialize stored events to iCalendar text."""

    def __init__(self, settings: Any = None) -> None:
        """Initialize exporter.

        Args:
            settings: Application settings; PRODID, UID domain, reminder text and
                export location are read from it when given
        """
        self.settings = settings
        self.prodid = getattr(settings, "prodid", DEFAULT_PRODID)
        self.uid_domain = getattr(settings, "uid_domain", DEFAULT_UID_DOMAIN)
        self.reminder_description = getattr(
            settings, "reminder_description", DEFAULT_REMINDER_DESCRIPTION
        )

    def encode(
        self, events: Iterable[Union[Event, Occurrence]], now: Optional[datetime] = None
    ) -> str:
        """Encode events as a VCALENDAR document.

        Input may mix events with their expanded occurrences; each event id is
        written once, from the first record seen for it.

        Args:
            events: Events and/or occurrences to export
            now: DTSTAMP for events without a creation time (defaults to the current time)

        Returns:
            ICS text with CRLF line endings
        """
        stamp = now or datetime.now(timezone.utc)
        lines = [
            "BEGIN:VCALENDAR",
            "VERSION:2.0",
            f"PRODID:{self.prodid}",
            "CALSCALE:GREGORIAN",
        ]

        exported = unique_events(events)
        for event in exported:
            lines.extend(self._event_lines(event, stamp))

        lines.append("END:VCALENDAR")
        logger.debug("Encoded %d events", len(exported))
        return CRLF.join(lines) + CRLF

    def _event_lines(self, event: Event, stamp: datetime) -> list[str]:
        lines = ["BEGIN:VEVENT", f"UID:{event.id}@{self.uid_domain}"]

        if event.all_day:
            # DTEND of a date-valued event is exclusive; date.max has no successor
            end_date: date = event.end.date()
            if end_date < date.max:
                end_date += timedelta(days=1)
            lines.append(f"DTSTART;VALUE=DATE:{format_date(event.start.date())}")
            lines.append(f"DTEND;VALUE=DATE:{format_date(end_date)}")
        else:
            lines.append(f"DTSTART:{format_utc(event.start)}")
            lines.append(f"DTEND:{format_utc(event.end)}")

        lines.append(f"SUMMARY:{escape_text(event.title)}")

        if event.description:
            lines.append(f"DESCRIPTION:{escape_text(event.description)}")
        if event.zoom_link:
            lines.append(f"URL:{event.zoom_link}")
        if event.category and event.category != DEFAULT_CATEGORY:
            lines.append(f"CATEGORIES:{escape_text(event.category)}")

        if event.reminder_minutes > 0:
            lines.extend(
                [
                    "BEGIN:VALARM",
                    f"TRIGGER:-PT{event.reminder_minutes}M",
                    "ACTION:DISPLAY",
                    f"DESCRIPTION:{escape_text(self.reminder_description)}",
                    "END:VALARM",
                ]
            )

        rrule = build_rrule(event.recurrence)
        if rrule:
            lines.append(f"RRULE:{rrule}")

        lines.append(f"DTSTAMP:{format_utc(event.created_at or stamp)}")
        lines.append("END:VEVENT")
        return lines

    def export_to_file(
        self,
        events: Iterable[Union[Event, Occurrence]],
        directory: Optional[Union[str, Path]] = None,
        now: Optional[datetime] = None,
    ) -> Path:
        """Write an export file and return its path.

        The file is named ``<prefix>-export-YYYY-MM-DD.ics`` and placed in
        ``directory``, the configured export directory, or the OS temp directory.

        Raises:
            ICSExportError: If the file cannot be written
        """
        stamp = now or datetime.now(timezone.utc)
        target_dir = Path(
            directory or getattr(self.settings, "export_directory", None) or gettempdir()
        )
        prefix = getattr(self.settings, "export_filename_prefix", DEFAULT_EXPORT_PREFIX)
        file_path = target_dir / f"{prefix}-export-{stamp:%Y-%m-%d}.ics"

        content = self.encode(events, now=stamp)
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            with file_path.open("w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            raise ICSExportError(f"failed to write ICS export: {e}", path=str(file_path)) from e

        logger.info("Exported calendar to %s", file_path)
        return file_path


def encode(events: Iterable[Union[Event, Occurrence]], now: Optional[datetime] = None) -> str:
    """Encode events with default exporter settings."""
    return ICSExporter().encode(events, now=now)
