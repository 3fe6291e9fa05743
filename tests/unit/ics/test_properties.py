"""Unit tests for ICS property classification."""

import pytest

from localcal.ics.parser import ICSDecoder
from localcal.ics.properties import (
    ICSProperty,
    classify_property,
    dispatch_key,
    split_content_line,
)

pytestmark = pytest.mark.unit


class TestSplitContentLine:
    """Test splitting content lines into key and value."""

    def test_splits_at_first_colon(self) -> None:
        assert split_content_line("URL:https://zoom.us/j/1") == ("URL", "https://zoom.us/j/1")

    def test_line_without_colon_is_all_key(self) -> None:
        assert split_content_line("GARBAGE") == ("GARBAGE", "")

    def test_empty_value(self) -> None:
        assert split_content_line("SUMMARY:") == ("SUMMARY", "")


class TestDispatchKey:
    """Test which parameterized keys lose their parameters."""

    @pytest.mark.parametrize(
        "key,expected",
        [
            ("DTSTART;TZID=America/New_York", "DTSTART"),
            ("DTSTART;VALUE=DATE", "DTSTART"),
            ("DTEND;VALUE=DATE", "DTEND"),
            ("SUMMARY;LANGUAGE=en", "SUMMARY;LANGUAGE=en"),
            ("DESCRIPTION;ALTREP=\"cid:x\"", "DESCRIPTION;ALTREP=\"cid:x\""),
            ("SUMMARY", "SUMMARY"),
        ],
    )
    def test_dispatch_key(self, key: str, expected: str) -> None:
        assert dispatch_key(key) == expected


class TestClassifyProperty:
    """Test mapping of keys onto recognized properties."""

    @pytest.mark.parametrize(
        "key,expected",
        [
            ("SUMMARY", ICSProperty.SUMMARY),
            ("DTSTART", ICSProperty.DTSTART),
            ("DTSTART;VALUE=DATE", ICSProperty.DTSTART),
            ("DTEND;TZID=Europe/Berlin", ICSProperty.DTEND),
            ("DESCRIPTION", ICSProperty.DESCRIPTION),
            ("URL", ICSProperty.URL),
            ("RRULE", ICSProperty.RRULE),
            ("SUMMARY;LANGUAGE=en", ICSProperty.UNRECOGNIZED),
            ("LOCATION", ICSProperty.UNRECOGNIZED),
            ("UNRECOGNIZED", ICSProperty.UNRECOGNIZED),
            ("summary", ICSProperty.UNRECOGNIZED),
        ],
    )
    def test_classify(self, key: str, expected: ICSProperty) -> None:
        assert classify_property(key) is expected

    def test_decoder_handles_every_recognized_property(self) -> None:
        recognized = {prop for prop in ICSProperty if prop is not ICSProperty.UNRECOGNIZED}
        assert ICSDecoder().handled_properties == recognized
