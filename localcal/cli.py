"""Command-line interface for LocalCal.

Provides three commands over an ICS file:

- ``decode``: show the events and diagnostics the decoder produces
- ``expand``: list the occurrences of every event up to a horizon
- ``convert``: decode and re-encode, normalizing the file to LocalCal's output
"""

import argparse
import json
import logging
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

from .config.settings import LocalCalSettings
from .ics.exceptions import ICSError
from .ics.exporter import ICSExporter, build_rrule
from .ics.parser import ICSDecoder
from .ics.rrule_expander import RecurrenceExpander
from .store import InMemoryEventStore
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "VERBOSE", "INFO", "WARNING", "ERROR", "CRITICAL"]


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="localcal",
        description="Decode, expand and re-encode iCalendar (.ics) files",
    )
    parser.add_argument("--config", type=Path, help="Path to a config.yaml file")
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        type=str.upper,
        help="Console log level (overrides configuration)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    decode_parser = subparsers.add_parser("decode", help="Show decoded events and diagnostics")
    decode_parser.add_argument("file", type=Path, help="ICS file to read")
    decode_parser.add_argument("--json", action="store_true", help="Emit JSON instead of text")

    expand_parser = subparsers.add_parser("expand", help="List occurrences up to a horizon")
    expand_parser.add_argument("file", type=Path, help="ICS file to read")
    expand_parser.add_argument(
        "--days",
        type=int,
        default=None,
        help="Horizon in days from now (default: configured horizon)",
    )

    convert_parser = subparsers.add_parser("convert", help="Decode and re-encode an ICS file")
    convert_parser.add_argument("file", type=Path, help="ICS file to read")
    convert_parser.add_argument(
        "-o", "--output", type=Path, default=None, help="Output file (default: stdout)"
    )

    return parser


def _run_decode(args: argparse.Namespace, settings: LocalCalSettings) -> int:
    result = ICSDecoder().decode_file(args.file)

    if args.json:
        print(json.dumps(result.model_dump(mode="json"), indent=2))
        return 0

    for draft in result.drafts:
        start = draft.start.isoformat() if draft.start else "-"
        end = draft.end.isoformat() if draft.end else "-"
        line = f"{start}  {end}  {draft.title}"
        rrule = build_rrule(draft.recurrence)
        if rrule:
            line += f"  [{rrule}]"
        print(line)

    for issue in result.issues:
        print(f"line {issue.line_number}: {issue.property} {issue.value!r}: {issue.reason}")

    return 0


def _run_expand(args: argparse.Namespace, settings: LocalCalSettings) -> int:
    store = InMemoryEventStore(settings)
    for draft in ICSDecoder().decode_file(args.file).drafts:
        store.save_draft(draft)

    expander = RecurrenceExpander(settings)
    now = datetime.now(timezone.utc)
    horizon = now + timedelta(days=args.days) if args.days is not None else expander.horizon(now)

    for occurrence in expander.expand(store.all_events(), horizon):
        print(
            f"{occurrence.source_id:>4}  {occurrence.start.isoformat()}  "
            f"{occurrence.end.isoformat()}  {occurrence.source.title}"
        )
    return 0


def _run_convert(args: argparse.Namespace, settings: LocalCalSettings) -> int:
    store = InMemoryEventStore(settings)
    for draft in ICSDecoder().decode_file(args.file).drafts:
        store.save_draft(draft)

    content = ICSExporter(settings).encode(store.all_events())

    if args.output is None:
        sys.stdout.write(content)
        return 0

    try:
        with args.output.open("w", encoding="utf-8", newline="") as f:
            f.write(content)
    except OSError as e:
        logger.error("Could not write %s: %s", args.output, e)
        return 1

    logger.info("Wrote %d events to %s", len(store), args.output)
    return 0


COMMANDS = {
    "decode": _run_decode,
    "expand": _run_expand,
    "convert": _run_convert,
}


def main(argv: Optional[list[str]] = None) -> int:
    """Run the command line tool.

    Returns:
        Process exit code
    """
    args = create_parser().parse_args(argv)

    settings = LocalCalSettings(_config_file=args.config)
    setup_logging(settings, level_override=args.log_level)

    try:
        return COMMANDS[args.command](args, settings)
    except ICSError as e:
        logger.error("%s", e.message)
        return 1
