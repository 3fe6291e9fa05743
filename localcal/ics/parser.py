"""Lenient line-oriented ICS decoder.

Malformed content never aborts a decode: unparseable values, unknown properties
and truncated blocks are skipped, and whatever was skipped is reported as a
:class:`ParseIssue` next to the decoded drafts. Only failing to read the source
raises (:class:`ICSFormatError`).
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Union

from .dates import parse_digits, parse_ics_date, parse_ics_datetime, unescape_text
from .exceptions import ICSFormatError, ICSValueError
from .models import DecodeResult, EventDraft, Frequency, ParseIssue, RecurrenceRule
from .properties import BEGIN_EVENT, END_EVENT, ICSProperty, classify_property, split_content_line

logger = logging.getLogger(__name__)

_FREQUENCIES = {
    "DAILY": Frequency.DAILY,
    "WEEKLY": Frequency.WEEKLY,
    "MONTHLY": Frequency.MONTHLY,
    "YEARLY": Frequency.YEARLY,
}

# Negative (before start) alarm offset, e.g. -PT15M, -PT1H, -P1D
_TRIGGER_PATTERN = re.compile(r"-P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?)?")

ZOOM_MARKER = "zoom"


@dataclass
class _DecodeState:
    """Mutable state of one decode call."""

    drafts: list[EventDraft] = field(default_factory=list)
    issues: list[ParseIssue] = field(default_factory=list)
    current: Optional[EventDraft] = None
    in_event: bool = False
    event_line: int = 0
    components: list[str] = field(default_factory=list)

    def issue(self, line_number: int, prop: str, value: str, reason: str) -> None:
        logger.debug("Line %d: skipped %s=%r (%s)", line_number, prop, value, reason)
        self.issues.append(
            ParseIssue(line_number=line_number, property=prop, value=value, reason=reason)
        )


PropertyHandler = Callable[[_DecodeState, EventDraft, str, int], None]


class ICSDecoder:
    """Decode ICS text into event drafts."""

    def __init__(self) -> None:
        self._handlers: dict[ICSProperty, PropertyHandler] = {
            ICSProperty.SUMMARY: self._apply_summary,
            ICSProperty.DTSTART: self._apply_dtstart,
            ICSProperty.DTEND: self._apply_dtend,
            ICSProperty.DESCRIPTION: self._apply_description,
            ICSProperty.URL: self._apply_url,
            ICSProperty.RRULE: self._apply_rrule,
        }

    @property
    def handled_properties(self) -> frozenset[ICSProperty]:
        """Properties with a handler."""
        return frozenset(self._handlers)

    def decode(self, content: Union[str, bytes]) -> DecodeResult:
        """Decode an in-memory ICS buffer.

        Args:
            content: ICS text, or UTF-8 encoded bytes

        Returns:
            Decoded drafts plus diagnostics for everything that was skipped

        Raises:
            ICSFormatError: If ``content`` is bytes that are not valid UTF-8
        """
        if isinstance(content, bytes):
            try:
                content = content.decode("utf-8-sig")
            except UnicodeDecodeError as e:
                raise ICSFormatError(f"ICS content is not valid UTF-8: {e}") from e

        state = _DecodeState()
        for line_number, raw_line in enumerate(content.splitlines(), start=1):
            self._process_line(state, raw_line.strip(), line_number)

        if state.in_event:
            state.issue(state.event_line, "VEVENT", "", "unterminated VEVENT block dropped")

        logger.info(
            "Decoded %d events (%d recurring), %d issues",
            len(state.drafts),
            sum(1 for draft in state.drafts if draft.is_recurring),
            len(state.issues),
        )
        return DecodeResult(drafts=state.drafts, issues=state.issues)

    def decode_file(self, path: Union[str, Path]) -> DecodeResult:
        """Read and decode an ICS file.

        Raises:
            ICSFormatError: If the file cannot be opened or read as UTF-8 text
        """
        file_path = Path(path)
        try:
            content = file_path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise ICSFormatError(f"failed to read ICS file: {e}", path=str(file_path)) from e

        logger.debug("Read %d characters from %s", len(content), file_path)
        return self.decode(content)

    def _process_line(self, state: _DecodeState, line: str, line_number: int) -> None:
        if line == BEGIN_EVENT:
            if state.in_event:
                state.issue(state.event_line, "VEVENT", "", "unterminated VEVENT block dropped")
            state.current = EventDraft()
            state.in_event = True
            state.event_line = line_number
            state.components = []
            return

        if line == END_EVENT:
            if state.in_event and state.current is not None:
                state.drafts.append(state.current)
            state.in_event = False
            state.current = None
            state.components = []
            return

        if not state.in_event or state.current is None:
            return

        key, value = split_content_line(line)

        # Nested components (VALARM and friends)
        if key == "BEGIN" and value:
            state.components.append(value)
            return
        if state.components:
            if key == "END" and value == state.components[-1]:
                state.components.pop()
            elif state.components[-1] == "VALARM" and key == "TRIGGER":
                self._apply_trigger(state, state.current, value, line_number)
            return

        prop = classify_property(key)
        if prop is ICSProperty.UNRECOGNIZED:
            return
        self._handlers[prop](state, state.current, value, line_number)

    def _apply_summary(self, state: _DecodeState, draft: EventDraft, value: str, line: int) -> None:
        draft.title = value

    def _apply_dtstart(self, state: _DecodeState, draft: EventDraft, value: str, line: int) -> None:
        try:
            draft.start = parse_ics_datetime(value)
        except ICSValueError as e:
            state.issue(line, ICSProperty.DTSTART.value, value, e.message)

    def _apply_dtend(self, state: _DecodeState, draft: EventDraft, value: str, line: int) -> None:
        try:
            draft.end = parse_ics_datetime(value)
        except ICSValueError as e:
            state.issue(line, ICSProperty.DTEND.value, value, e.message)

    def _apply_description(
        self, state: _DecodeState, draft: EventDraft, value: str, line: int
    ) -> None:
        draft.description = unescape_text(value)

    def _apply_url(self, state: _DecodeState, draft: EventDraft, value: str, line: int) -> None:
        if ZOOM_MARKER in value:
            draft.zoom_link = value
        else:
            state.issue(line, ICSProperty.URL.value, value, "not a zoom link, discarded")

    def _apply_rrule(self, state: _DecodeState, draft: EventDraft, value: str, line: int) -> None:
        rule = draft.recurrence.model_copy() if draft.recurrence else RecurrenceRule()

        for part in value.split(";"):
            name, sep, part_value = part.partition("=")
            if not sep:
                continue

            if name == "FREQ":
                frequency = _FREQUENCIES.get(part_value)
                if frequency is None:
                    state.issue(line, "RRULE.FREQ", part_value, "unsupported frequency")
                else:
                    rule.frequency = frequency

            elif name == "INTERVAL":
                interval = parse_digits(part_value)
                if interval > 0:
                    rule.interval = interval
                else:
                    state.issue(line, "RRULE.INTERVAL", part_value, "no positive interval")

            elif name == "UNTIL":
                try:
                    rule.until = parse_ics_date(part_value)
                except ICSValueError as e:
                    state.issue(line, "RRULE.UNTIL", part_value, e.message)

        draft.recurrence = rule

    def _apply_trigger(self, state: _DecodeState, draft: EventDraft, value: str, line: int) -> None:
        match = _TRIGGER_PATTERN.fullmatch(value)
        if not match or not any(match.groups()):
            state.issue(line, "VALARM.TRIGGER", value, "unsupported alarm trigger")
            return
        days, hours, minutes = (int(group or 0) for group in match.groups())
        draft.reminder_minutes = days * 1440 + hours * 60 + minutes


_decoder = ICSDecoder()


def decode(content: Union[str, bytes]) -> DecodeResult:
    """Decode ICS content with a shared :class:`ICSDecoder`."""
    return _decoder.decode(content)


def decode_file(path: Union[str, Path]) -> DecodeResult:
    """Read and decode an ICS file with a shared :class:`ICSDecoder`."""
    return _decoder.decode_file(path)
