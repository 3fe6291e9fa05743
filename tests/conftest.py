"""Shared test configuration and fixtures."""

import logging
import os
from collections.abc import Generator
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

from localcal.config.settings import LocalCalSettings, reset_settings
from localcal.ics.models import Event, Frequency, RecurrenceRule

UTC = timezone.utc


def pytest_configure(config: Any) -> None:
    config.addinivalue_line("markers", "unit: fast isolated unit tests")


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Drop LOCALCAL_* variables and restore the package logger after each test."""
    for key in list(os.environ):
        if key.startswith("LOCALCAL_"):
            monkeypatch.delenv(key, raising=False)

    yield

    reset_settings()
    package_logger = logging.getLogger("localcal")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def settings(tmp_path: Path) -> LocalCalSettings:
    """Settings isolated from any user configuration file."""
    return LocalCalSettings(config_dir=tmp_path / "config")


@pytest.fixture
def base_start() -> datetime:
    """Fixed timezone-aware start time used across tests."""
    return datetime(2025, 3, 10, 9, 0, tzinfo=UTC)


@pytest.fixture
def simple_event(base_start: datetime) -> Event:
    """A one-hour, non-recurring event."""
    return Event(
        id=1,
        title="Planning",
        start=base_start,
        end=base_start + timedelta(hours=1),
        created_at=datetime(2025, 1, 2, 3, 4, 5, tzinfo=UTC),
    )


@pytest.fixture
def daily_event(base_start: datetime) -> Event:
    """A one-hour event repeating every day with no end."""
    return Event(
        id=7,
        title="Standup",
        start=base_start,
        end=base_start + timedelta(hours=1),
        recurrence=RecurrenceRule(frequency=Frequency.DAILY),
    )


@pytest.fixture
def sample_ics_content() -> str:
    """Calendar export with a plain event, a recurring event and noise."""
    return "\r\n".join(
        [
            "BEGIN:VCALENDAR",
            "VERSION:2.0",
            "PRODID:-//Example Corp//Calendar 1.0//EN",
            "SUMMARY:Not an event property",
            "BEGIN:VEVENT",
            "UID:abc-123@example.com",
            "DTSTAMP:20250101T000000Z",
            "SUMMARY:Quarterly review",
            "DTSTART:20250310T090000Z",
            "DTEND:20250310T103000Z",
            "DESCRIPTION:Bring numbers\\nand slides",
            "URL:https://us02web.zoom.us/j/123456",
            "LOCATION:Room 4",
            "END:VEVENT",
            "BEGIN:VEVENT",
            "SUMMARY:Team lunch",
            "DTSTART;TZID=Europe/Berlin:20250312T120000",
            "DTEND;TZID=Europe/Berlin:20250312T130000",
            "RRULE:FREQ=WEEKLY;INTERVAL=2;UNTIL=20250601T000000Z",
            "END:VEVENT",
            "END:VCALENDAR",
            "",
        ]
    )
