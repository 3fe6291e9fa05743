"""Settings management using Pydantic for type validation and configuration."""

import logging
import os
from pathlib import Path
from typing import Any, Optional, cast

import yaml
from pydantic import BaseModel, Field, PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "LOCALCAL_"


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    # Console Logging
    console_enabled: bool = Field(default=True, description="Enable console logging")
    console_level: str = Field(
        default="INFO",
        description="Console log level: DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL",
    )
    console_colors: bool = Field(
        default=True, description="Enable colored console output (auto-detected)"
    )

    # File Logging
    file_enabled: bool = Field(default=False, description="Enable file logging")
    file_level: str = Field(default="DEBUG", description="File log level")
    file_directory: Optional[str] = Field(
        default=None, description="Custom log directory (defaults to config_dir/logs)"
    )
    file_prefix: str = Field(default="localcal", description="Log file prefix")
    max_log_files: int = Field(default=5, description="Maximum number of log files to keep")

    # Third-party Libraries
    third_party_level: str = Field(
        default="WARNING", description="Log level for third-party libraries"
    )


class LocalCalSettings(BaseSettings):
    """Application settings with environment variable support."""

    # Private attributes
    _explicit_args: set = PrivateAttr(default_factory=set)
    _env_vars_set: set = PrivateAttr(default_factory=set)
    _config_source: Optional[Path] = PrivateAttr(default=None)

    # ICS output
    prodid: str = Field(default="-//LocalCal//EN", description="PRODID written on export")
    uid_domain: str = Field(default="localcal", description="Right-hand side of exported UIDs")
    reminder_description: str = Field(
        default="Reminder", description="DESCRIPTION text of exported VALARM blocks"
    )

    # Stored event defaults
    default_category: str = Field(default="default", description="Category for new events")
    default_color: str = Field(default="#3b82f6", description="Color for new events")

    # Recurrence expansion
    expansion_horizon_years: int = Field(
        default=1, ge=0, description="How far ahead recurring events are expanded"
    )

    # Export
    export_directory: Optional[Path] = Field(
        default=None, description="Directory for exported .ics files (defaults to temp dir)"
    )
    export_filename_prefix: str = Field(default="localcal", description="Export file prefix")

    # File Paths
    config_dir: Path = Field(default_factory=lambda: Path.home() / ".config" / "localcal")

    # Logging Configuration
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings, description="Logging settings"
    )

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        validate_assignment=True,
    )

    def __init__(self, **kwargs: Any) -> None:
        config_file = kwargs.pop("_config_file", None)

        env_vars_set = {
            key[len(ENV_PREFIX) :].lower() for key in os.environ if key.startswith(ENV_PREFIX)
        }

        super().__init__(**kwargs)

        # Explicit arguments and environment variables win over YAML
        self._explicit_args = set(kwargs.keys())
        self._env_vars_set = env_vars_set

        self._load_yaml_config(Path(config_file) if config_file else None)

    def _find_config_file(self, config_file: Optional[Path]) -> Optional[Path]:
        """Find config file: explicit path, then project config/, then config_dir."""
        if config_file is not None:
            return config_file if config_file.exists() else None

        project_root = Path(__file__).parent.parent.parent
        project_config = project_root / "config" / "config.yaml"
        if project_config.exists():
            return project_config

        user_config = self.config_dir / "config.yaml"
        if user_config.exists():
            return user_config

        return None

    def _is_overridden(self, setting: str) -> bool:
        return setting in self._explicit_args or setting in self._env_vars_set

    def _apply_section(self, section: Any, mapping: dict[str, str]) -> None:
        """Copy YAML keys onto settings fields unless set explicitly or by env."""
        if not isinstance(section, dict):
            return
        for yaml_key, setting in mapping.items():
            if yaml_key in section and not self._is_overridden(setting):
                setattr(self, setting, section[yaml_key])

    def _load_logging_config(self, config_data: dict) -> None:
        """Load logging configuration from YAML data."""
        logging_config = config_data.get("logging")
        if not isinstance(logging_config, dict) or self._is_overridden("logging"):
            return

        merged = self.logging.model_dump()
        for key, value in logging_config.items():
            if key in LoggingSettings.model_fields and f"logging__{key}" not in self._env_vars_set:
                merged[key] = value
        self.logging = LoggingSettings(**merged)

    def _load_yaml_config(self, config_file: Optional[Path]) -> None:
        """Load configuration from YAML file if it exists."""
        config_path = self._find_config_file(config_file)
        if not config_path:
            return

        try:
            with config_path.open(encoding="utf-8") as f:
                config_data = yaml.safe_load(f)

            if not config_data:
                return

            self._apply_section(
                config_data.get("ics"),
                {
                    "prodid": "prodid",
                    "uid_domain": "uid_domain",
                    "reminder_description": "reminder_description",
                },
            )
            self._apply_section(
                config_data.get("defaults"),
                {"category": "default_category", "color": "default_color"},
            )
            self._apply_section(
                config_data.get("expansion"), {"horizon_years": "expansion_horizon_years"}
            )
            self._apply_section(
                config_data.get("export"),
                {"directory": "export_directory", "filename_prefix": "export_filename_prefix"},
            )
            self._load_logging_config(config_data)
            self._config_source = config_path

        except Exception as e:
            # Don't fail if YAML loading fails, just continue with defaults/env vars
            logging.warning(f"Could not load YAML config from {config_path}: {e}")

    @property
    def config_source(self) -> Optional[Path]:
        """YAML file the settings were loaded from, if any."""
        return self._config_source

    @property
    def log_directory(self) -> Path:
        """Directory for log files."""
        if self.logging.file_directory:
            return Path(self.logging.file_directory)
        return self.config_dir / "logs"


# Global settings management
_settings_instance: Optional[LocalCalSettings] = None


def get_settings() -> LocalCalSettings:
    """Get the global settings instance, creating it lazily if needed."""
    if globals()["_settings_instance"] is None:
        globals()["_settings_instance"] = LocalCalSettings()
    return cast(LocalCalSettings, globals()["_settings_instance"])


def reset_settings() -> None:
    """Reset the global settings instance (primarily for testing)."""
    globals()["_settings_instance"] = None
