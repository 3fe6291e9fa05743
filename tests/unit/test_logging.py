"""Unit tests for logging setup."""

import logging
import os
from pathlib import Path

import pytest

from localcal.config.settings import LocalCalSettings, LoggingSettings
from localcal.utils.logging import (
    VERBOSE,
    AutoColoredFormatter,
    TimestampedFileHandler,
    get_log_level,
    setup_logging,
)

pytestmark = pytest.mark.unit


def _settings(tmp_path: Path, **logging_options: object) -> LocalCalSettings:
    return LocalCalSettings(config_dir=tmp_path, logging=LoggingSettings(**logging_options))


class TestGetLogLevel:
    """Test level name resolution."""

    @pytest.mark.parametrize(
        "name,expected",
        [("DEBUG", 10), ("verbose", VERBOSE), ("Info", 20), ("WARNING", 30), ("CRITICAL", 50)],
    )
    def test_known_levels(self, name: str, expected: int) -> None:
        assert get_log_level(name) == expected

    def test_unknown_level_raises(self) -> None:
        with pytest.raises(ValueError):
            get_log_level("CHATTY")


class TestSetupLogging:
    """Test handler configuration."""

    def test_console_handler(self, tmp_path: Path) -> None:
        logger = setup_logging(_settings(tmp_path, console_level="WARNING"))

        assert logger.name == "localcal"
        assert logger.propagate is False
        (handler,) = logger.handlers
        assert isinstance(handler, logging.StreamHandler)
        assert handler.level == logging.WARNING
        assert isinstance(handler.formatter, AutoColoredFormatter)

    def test_level_override(self, tmp_path: Path) -> None:
        logger = setup_logging(_settings(tmp_path), level_override="VERBOSE")
        assert logger.handlers[0].level == VERBOSE

    def test_file_handler(self, tmp_path: Path) -> None:
        settings = _settings(
            tmp_path,
            console_enabled=False,
            file_enabled=True,
            file_directory=str(tmp_path / "logs"),
        )
        logger = setup_logging(settings)

        (handler,) = logger.handlers
        assert isinstance(handler, TimestampedFileHandler)
        logger.info("written to file")
        handler.flush()

        (log_file,) = (tmp_path / "logs").glob("localcal_*.log")
        assert "written to file" in log_file.read_text(encoding="utf-8")

    def test_no_outputs_gives_null_handler(self, tmp_path: Path) -> None:
        logger = setup_logging(_settings(tmp_path, console_enabled=False))
        (handler,) = logger.handlers
        assert isinstance(handler, logging.NullHandler)

    def test_repeated_setup_replaces_handlers(self, tmp_path: Path) -> None:
        settings = _settings(tmp_path)
        setup_logging(settings)
        logger = setup_logging(settings)
        assert len(logger.handlers) == 1

    def test_third_party_levels(self, tmp_path: Path) -> None:
        setup_logging(_settings(tmp_path, third_party_level="ERROR"))
        assert logging.getLogger("dateutil").level == logging.ERROR


class TestTimestampedFileHandler:
    """Test log file rotation."""

    def test_cleanup_keeps_newest_files(self, tmp_path: Path) -> None:
        for index, name in enumerate(["a", "b", "c"], start=1):
            old = tmp_path / f"localcal_old_{name}.log"
            old.write_text("old", encoding="utf-8")
            os.utime(old, (index * 1000, index * 1000))

        handler = TimestampedFileHandler(tmp_path, prefix="localcal", max_files=2)
        handler.close()

        remaining = sorted(path.name for path in tmp_path.glob("localcal_*.log"))
        assert len(remaining) == 2
        assert "localcal_old_c.log" in remaining
        assert Path(handler.baseFilename).name in remaining


class TestAutoColoredFormatter:
    """Test level name coloring."""

    def _record(self, level: int) -> logging.LogRecord:
        return logging.LogRecord("localcal", level, __file__, 1, "message", None, None)

    def test_colors_disabled(self) -> None:
        formatter = AutoColoredFormatter("%(levelname)s %(message)s", enable_colors=False)
        assert formatter.format(self._record(logging.ERROR)) == "ERROR message"

    def test_basic_colors(self) -> None:
        formatter = AutoColoredFormatter("%(levelname)s %(message)s", enable_colors=False)
        formatter.color_mode = "basic"
        assert formatter.format(self._record(logging.ERROR)) == "\033[31mERROR\033[0m message"
