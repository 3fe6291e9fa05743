"""Configuration management for LocalCal."""

from .settings import LocalCalSettings, LoggingSettings, get_settings, reset_settings

__all__ = ["LocalCalSettings", "LoggingSettings", "get_settings", "reset_settings"]
