"""Data models for ICS calendar processing."""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

DEFAULT_CATEGORY = "default"
DEFAULT_COLOR = "#3b82f6"

# Stand-in for a start/end the source calendar never supplied
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


class Frequency(str, Enum):
    """Recurrence frequency values."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    NONE = "none"


class RecurrenceRule(BaseModel):
    """Recurrence rule embedded in an event.

    A rule whose frequency is ``Frequency.NONE`` behaves exactly like no rule.
    """

    frequency: Frequency = Field(default=Frequency.NONE, description="Recurrence frequency")
    interval: int = Field(default=1, description="Step multiplier, always >= 1")
    until: Optional[date] = Field(
        default=None, description="Last calendar date an occurrence may start on (inclusive)"
    )

    @field_validator("interval", mode="before")
    @classmethod
    def normalize_interval(cls, value: Any) -> int:
        """Normalize missing or non-positive intervals to 1."""
        if value is None:
            return 1
        value = int(value)
        return value if value >= 1 else 1

    @field_validator("until", mode="before")
    @classmethod
    def truncate_until(cls, value: Any) -> Any:
        """Drop any time-of-day component from the until bound."""
        if isinstance(value, datetime):
            return value.date()
        return value

    @property
    def is_active(self) -> bool:
        """Check if the rule actually recurs."""
        return self.frequency != Frequency.NONE

    @property
    def until_iso(self) -> str:
        """Until bound as ``YYYY-MM-DD``, or an empty string."""
        return self.until.isoformat() if self.until else ""


class Event(BaseModel):
    """Stored calendar event as handed out by the storage collaborator."""

    id: int = Field(default=0, description="Storage-assigned identity, 0 when not persisted")
    title: str = Field(default="", description="Event title")
    start: datetime = Field(..., description="Event start time")
    end: datetime = Field(..., description="Event end time, not checked against start")
    all_day: bool = Field(default=False, description="All-day event flag")

    description: str = Field(default="", description="Free-form description")
    zoom_link: str = Field(default="", description="Online meeting URL")
    category: str = Field(default=DEFAULT_CATEGORY, description="Category name")
    color: str = Field(default=DEFAULT_COLOR, description="Display color")

    reminder_minutes: int = Field(default=0, ge=0, description="Reminder offset, 0 disables")
    recurrence: Optional[RecurrenceRule] = Field(default=None, description="Recurrence rule")

    created_at: Optional[datetime] = Field(default=None, description="Creation time")

    @property
    def is_recurring(self) -> bool:
        """Check if the event carries an active recurrence rule."""
        return self.recurrence is not None and self.recurrence.is_active

    @field_serializer("start", "end")
    def serialize_datetime(self, dt: datetime) -> str:
        """Serialize datetime to ISO format."""
        return dt.isoformat()

    @field_serializer("created_at", when_used="unless-none")
    def serialize_created_at(self, dt: datetime) -> str:
        """Serialize creation time to ISO format."""
        return dt.isoformat()


class EventDraft(BaseModel):
    """Event decoded from ICS content, not yet persisted."""

    title: str = ""
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    description: str = ""
    zoom_link: str = ""
    reminder_minutes: int = 0
    recurrence: Optional[RecurrenceRule] = None

    @property
    def is_recurring(self) -> bool:
        """Check if the draft carries an active recurrence rule."""
        return self.recurrence is not None and self.recurrence.is_active

    def to_event(
        self,
        event_id: int,
        *,
        all_day: bool = False,
        created_at: Optional[datetime] = None,
        category: str = DEFAULT_CATEGORY,
        color: str = DEFAULT_COLOR,
    ) -> Event:
        """Build the stored form of this draft.

        Args:
            event_id: Identity assigned by storage
            all_day: Whether the caller treats the draft as an all-day event
            created_at: Creation timestamp recorded by storage
            category: Category to store
            color: Color to store

        Returns:
            Event with defaults filled in for anything the source omitted
        """
        start = self.start if self.start is not None else ZERO_TIME
        end = self.end if self.end is not None else start
        return Event(
            id=event_id,
            title=self.title,
            start=start,
            end=end,
            all_day=all_day,
            description=self.description,
            zoom_link=self.zoom_link,
            category=category or DEFAULT_CATEGORY,
            color=color or DEFAULT_COLOR,
            reminder_minutes=max(self.reminder_minutes, 0),
            recurrence=self.recurrence.model_copy() if self.recurrence else None,
            created_at=created_at,
        )


class Occurrence(BaseModel):
    """One concrete instance of an event, produced by recurrence expansion."""

    source_id: int = Field(..., description="ID of the originating event")
    start: datetime
    end: datetime
    source: Event = Field(..., exclude=True, repr=False, description="Originating event")

    model_config = ConfigDict(frozen=True)

    @field_serializer("start", "end")
    def serialize_datetime(self, dt: datetime) -> str:
        """Serialize datetime to ISO format."""
        return dt.isoformat()


class ParseIssue(BaseModel):
    """A fragment of ICS content the decoder skipped or could not use."""

    line_number: int
    property: str
    value: str = ""
    reason: str


class DecodeResult(BaseModel):
    """Result of decoding ICS content."""

    drafts: list[EventDraft] = Field(default_factory=list, description="Completed events")
    issues: list[ParseIssue] = Field(default_factory=list, description="Non-fatal diagnostics")

    @property
    def event_count(self) -> int:
        """Number of decoded events."""
        return len(self.drafts)

    @property
    def recurring_event_count(self) -> int:
        """Number of decoded events with an active recurrence rule."""
        return sum(1 for draft in self.drafts if draft.is_recurring)
