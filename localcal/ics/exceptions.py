"""ICS-specific exceptions for error handling."""

from typing import Optional


class ICSError(Exception):
    """Base exception for ICS-related errors."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path


class ICSFormatError(ICSError):
    """Exception raised when ICS source content cannot be read."""


class ICSParseError(ICSError):
    """Exception raised when ICS content cannot be parsed."""


class ICSValueError(ICSParseError):
    """Exception raised when a single property value cannot be parsed."""

    def __init__(self, message: str, value: str):
        super().__init__(message)
        self.value = value


class ICSExportError(ICSError):
    """Exception raised when an ICS export cannot be written."""
