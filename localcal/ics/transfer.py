"""Import and export pipelines between ICS files and an event store."""

import logging
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional, Union

from .exporter import ICSExporter
from .parser import ICSDecoder
from .rrule_expander import RecurrenceExpander

if TYPE_CHECKING:
    from ..store import EventStore

logger = logging.getLogger(__name__)


def import_ics_file(path: Union[str, Path], store: "EventStore") -> int:
    """Decode an ICS file and persist every draft.

    Drafts the store refuses are skipped.

    Returns:
        Number of events imported

    Raises:
        ICSFormatError: If the file cannot be read
    """
    result = ICSDecoder().decode_file(path)

    imported = 0
    for draft in result.drafts:
        try:
            store.save_draft(draft)
        except Exception:
            logger.warning("Failed to store imported event %r", draft.title, exc_info=True)
            continue
        imported += 1

    logger.info(
        "Imported %d of %d events from %s (%d issues)",
        imported,
        len(result.drafts),
        path,
        len(result.issues),
    )
    return imported


def export_ics_file(
    store: "EventStore",
    directory: Optional[Union[str, Path]] = None,
    settings: Any = None,
    now: Optional[datetime] = None,
) -> Path:
    """Export every stored event to an ICS file.

    Events are expanded the same way they are for display; the exporter then
    collapses the occurrences back onto their source events.

    Raises:
        ICSExportError: If the file cannot be written
    """
    expander = RecurrenceExpander(settings)
    occurrences = expander.expand(store.all_events(), expander.horizon(now))
    return ICSExporter(settings).export_to_file(occurrences, directory=directory, now=now)
