"""Recognized ICS content lines and property-key classification."""

from enum import Enum

# Property names whose parameters (``;TZID=...``, ``;VALUE=DATE``) are stripped
# before dispatch. Parameterized forms of every other property stay unrecognized.
PARAMETERIZED_PROPERTIES = frozenset({"DTSTART", "DTEND"})

BEGIN_EVENT = "BEGIN:VEVENT"
END_EVENT = "END:VEVENT"


class ICSProperty(str, Enum):
    """VEVENT properties the decoder acts on."""

    SUMMARY = "SUMMARY"
    DTSTART = "DTSTART"
    DTEND = "DTEND"
    DESCRIPTION = "DESCRIPTION"
    URL = "URL"
    RRULE = "RRULE"
    UNRECOGNIZED = "UNRECOGNIZED"


_BY_NAME = {prop.value: prop for prop in ICSProperty if prop is not ICSProperty.UNRECOGNIZED}


def split_content_line(line: str) -> tuple[str, str]:
    """Split a content line at its first colon.

    Args:
        line: Trimmed content line

    Returns:
        (key, value); a line without a colon is all key with an empty value
    """
    key, sep, value = line.partition(":")
    if not sep:
        return line, ""
    return key, value


def dispatch_key(key: str) -> str:
    """Return the key used for property dispatch.

    Only DTSTART and DTEND lose their parameters; any other parameterized key is
    returned untouched.
    """
    base, sep, _params = key.partition(";")
    if sep and base in PARAMETERIZED_PROPERTIES:
        return base
    return key


def classify_property(key: str) -> ICSProperty:
    """Map a raw property key to its recognized property."""
    return _BY_NAME.get(dispatch_key(key), ICSProperty.UNRECOGNIZED)
