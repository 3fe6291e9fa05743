"""ICS calendar decoding, encoding and recurrence expansion."""

from .exceptions import (
    ICSError,
    ICSExportError,
    ICSFormatError,
    ICSParseError,
    ICSValueError,
)
from .exporter import ICSExporter, encode
from .models import (
    DecodeResult,
    Event,
    EventDraft,
    Frequency,
    Occurrence,
    ParseIssue,
    RecurrenceRule,
)
from .parser import ICSDecoder, decode, decode_file
from .rrule_expander import RecurrenceExpander, default_horizon, expand

__all__ = [
    "DecodeResult",
    "Event",
    "EventDraft",
    "Frequency",
    "ICSDecoder",
    "ICSError",
    "ICSExportError",
    "ICSExporter",
    "ICSFormatError",
    "ICSParseError",
    "ICSValueError",
    "Occurrence",
    "ParseIssue",
    "RecurrenceExpander",
    "RecurrenceRule",
    "decode",
    "decode_file",
    "default_horizon",
    "encode",
    "expand",
]
