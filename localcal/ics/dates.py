"""ICS date grammar, UTC normalization and text escaping helpers."""

import re
from datetime import date, datetime, timezone

from .exceptions import ICSValueError

ICS_UTC_FORMAT = "%Y%m%dT%H%M%SZ"
ICS_DATE_FORMAT = "%Y%m%d"

# Tried in order, first match wins
_DATE_GRAMMAR: tuple[tuple[re.Pattern[str], str, bool], ...] = (
    (re.compile(r"\d{8}T\d{6}Z"), ICS_UTC_FORMAT, True),
    (re.compile(r"\d{8}T\d{6}"), "%Y%m%dT%H%M%S", False),
    (re.compile(r"\d{8}"), ICS_DATE_FORMAT, False),
)


def parse_ics_datetime(value: str) -> datetime:
    """Parse an ICS DATE or DATE-TIME value.

    ``YYYYMMDDThhmmssZ`` yields an aware UTC datetime, ``YYYYMMDDThhmmss`` a
    naive (floating) datetime and ``YYYYMMDD`` a naive midnight.

    Raises:
        ICSValueError: If the value matches none of the accepted forms
    """
    for pattern, fmt, is_utc in _DATE_GRAMMAR:
        if not pattern.fullmatch(value):
            continue
        try:
            parsed = datetime.strptime(value, fmt)
        except ValueError:
            continue
        return parsed.replace(tzinfo=timezone.utc) if is_utc else parsed
    raise ICSValueError(f"unable to parse ICS date: {value!r}", value)


def parse_ics_date(value: str) -> date:
    """Parse an ICS date value and keep only its calendar date."""
    return parse_ics_datetime(value).date()


def to_utc(dt: datetime) -> datetime:
    """Return ``dt`` as an aware UTC datetime; naive values are taken as local time.

    Instants that the offset pushes outside years 1-9999 clamp to the nearest
    representable UTC bound.
    """
    try:
        return dt.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        bound = datetime.max if dt.year > 1 else datetime.min
        return bound.replace(tzinfo=timezone.utc)


def format_utc(dt: datetime) -> str:
    """Format a datetime as an ICS UTC instant."""
    # glibc strftime does not zero-pad %Y below year 1000
    utc = to_utc(dt)
    return f"{utc.year:04d}{utc:%m%dT%H%M%S}Z"


def format_date(value: date) -> str:
    """Format a calendar date as an ICS DATE value."""
    return f"{value.year:04d}{value:%m%d}"


def format_utc_midnight(value: date) -> str:
    """Format a calendar date as midnight UTC, the form used for RRULE UNTIL."""
    return f"{format_date(value)}T000000Z"


def escape_text(value: str) -> str:
    """Escape a TEXT property value.

    Backslashes go first so the backslashes added for the other characters are
    left alone.
    """
    return (
        value.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\n", "\\n")
        .replace("\r", "")
    )


def unescape_text(value: str) -> str:
    """Turn literal ``\\n`` sequences back into line breaks."""
    return value.replace("\\n", "\n")


def parse_digits(value: str) -> int:
    """Read every decimal digit in ``value`` as one integer, skipping anything else."""
    number = 0
    for char in value:
        if "0" <= char <= "9":
            number = number * 10 + (ord(char) - ord("0"))
    return number
