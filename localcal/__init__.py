"""LocalCal - iCalendar codec and recurrence engine for a personal calendar."""

__version__ = "1.0.0"
__author__ = "LocalCal Team"
__description__ = "iCalendar (ICS) import/export and recurrence expansion for a personal calendar"

__all__ = [
    "__author__",
    "__description__",
    "__version__",
]
