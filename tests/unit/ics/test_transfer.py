"""Unit tests for the ICS import and export pipelines."""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from localcal.config.settings import LocalCalSettings
from localcal.ics.exceptions import ICSFormatError
from localcal.ics.models import EventDraft
from localcal.ics.parser import decode_file
from localcal.ics.transfer import export_ics_file, import_ics_file
from localcal.store import InMemoryEventStore

pytestmark = pytest.mark.unit

NOW = datetime(2025, 3, 1, tzinfo=timezone.utc)


class RefusingStore(InMemoryEventStore):
    """Store that rejects drafts with a given title."""

    def __init__(self, refused_title: str) -> None:
        super().__init__()
        self.refused_title = refused_title

    def save_draft(self, draft: EventDraft, all_day: bool = False) -> int:
        if draft.title == self.refused_title:
            raise RuntimeError("storage full")
        return super().save_draft(draft, all_day)


@pytest.fixture
def ics_file(tmp_path: Path, sample_ics_content: str) -> Path:
    path = tmp_path / "calendar.ics"
    path.write_text(sample_ics_content, encoding="utf-8", newline="")
    return path


class TestImport:
    """Test importing ICS files into a store."""

    def test_imports_every_event(self, ics_file: Path) -> None:
        store = InMemoryEventStore()
        assert import_ics_file(ics_file, store) == 2
        assert [event.title for event in store.all_events()] == ["Quarterly review", "Team lunch"]

    def test_refused_drafts_are_skipped(self, ics_file: Path) -> None:
        store = RefusingStore("Quarterly review")
        assert import_ics_file(ics_file, store) == 1
        assert [event.title for event in store.all_events()] == ["Team lunch"]

    def test_unreadable_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ICSFormatError):
            import_ics_file(tmp_path / "missing.ics", InMemoryEventStore())


class TestExport:
    """Test exporting a store to a file."""

    def test_export_writes_each_event_once(
        self, ics_file: Path, tmp_path: Path, settings: LocalCalSettings
    ) -> None:
        store = InMemoryEventStore(settings)
        import_ics_file(ics_file, store)

        path = export_ics_file(store, directory=tmp_path / "out", settings=settings, now=NOW)

        assert path.name == "localcal-export-2025-03-01.ics"
        content = path.read_bytes().decode("utf-8")
        assert content.count("BEGIN:VEVENT") == 2
        assert "RRULE:FREQ=WEEKLY;INTERVAL=2;UNTIL=20250601T000000Z\r\n" in content

        exported = decode_file(path)
        assert [draft.title for draft in exported.drafts] == ["Quarterly review", "Team lunch"]

    def test_export_empty_store(self, tmp_path: Path) -> None:
        path = export_ics_file(InMemoryEventStore(), directory=tmp_path, now=NOW)
        assert path.read_bytes().count(b"BEGIN:VEVENT") == 0
