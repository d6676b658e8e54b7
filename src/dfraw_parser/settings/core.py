"""
Core settings management for dfraw_parser.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from PySide6.QtCore import QSettings

from .logging import LoggingSettings
from .parser import ParserSettings
from .paths import PathSettings
from .validation import SettingsValidator, ValidationResult

logger = logging.getLogger(__name__)

# Stamped into app/version on first run
CONFIG_VERSION = "1.0"


class ConfigError(Exception):
    """Raised when configuration is invalid or cannot be accessed."""
    pass


class AppSettings:
    """
    Configuration management using QSettings.

    Provides type-safe access to application settings with automatic
    cross-platform storage and validation.
    """

    def __init__(self, profile: str = "default", settings_file: Optional[Union[str, Path]] = None):
        """Initialize settings for a profile.

        Args:
            profile: Settings profile name (default: "default")
            settings_file: Optional INI file to use instead of the
                           platform's native settings store
        """
        if settings_file:
            self.settings = QSettings(str(settings_file), QSettings.Format.IniFormat)
        else:
            self.settings = QSettings("dfraw_parser", "dfraw_parser")
        self.profile = profile

        # Use profile as a group: dfraw_parser/dfraw_parser/default/...
        self.settings.beginGroup(profile)

        # Initialize subsystems
        self._validator = SettingsValidator(self)
        self._paths = PathSettings(self.settings)
        self._parser = ParserSettings(self.settings)
        self._logging = LoggingSettings(self.settings)

        self._ensure_version()

        logger.debug(
            f"Settings initialized for profile '{profile}', stored at: {self.settings.fileName()}"
        )

    # === SUBSYSTEM ACCESS ===

    @property
    def paths(self) -> PathSettings:
        """Access path settings subsystem."""
        return self._paths

    @property
    def parser(self) -> ParserSettings:
        """Access parser settings subsystem."""
        return self._parser

    @property
    def logging(self) -> LoggingSettings:
        """Access logging settings subsystem."""
        return self._logging

    # === VERSION AND FIRST RUN ===

    def _ensure_version(self) -> None:
        """Write the configuration version on first run."""
        if not str(self.settings.value("app/version", "") or ""):
            self.settings.setValue("app/version", CONFIG_VERSION)
            self.settings.setValue("app/first_run", True)
            self.settings.sync()
            logger.info("First run detected, initializing configuration")

    @property
    def is_first_run(self) -> bool:
        """Check if this is the first run of the application."""
        value = self.settings.value("app/first_run", True)
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes")
        return bool(value)

    def set_first_run_complete(self) -> None:
        """Mark first run as complete."""
        self.settings.setValue("app/first_run", False)
        self.settings.sync()

    @property
    def version(self) -> str:
        """Get configuration version."""
        value = self.settings.value("app/version", CONFIG_VERSION)
        return str(value) if value else CONFIG_VERSION

    # === PATH SETTINGS (DELEGATED) ===

    @property
    def raws_dirs(self) -> List[Path]:
        """Get the raw directories parsed by default."""
        return self._paths.raws_dirs

    @raws_dirs.setter
    def raws_dirs(self, value: List[Path]) -> None:
        """Set the raw directories parsed by default."""
        self._paths.raws_dirs = value

    @property
    def output_path(self) -> Path:
        """Get the file records are written to."""
        return self._paths.output_path

    @output_path.setter
    def output_path(self, value: Optional[Path]) -> None:
        """Set the file records are written to."""
        self._paths.output_path = value

    @property
    def recent_raws_dirs(self) -> List[str]:
        """Get list of recently parsed raw directories."""
        return self._paths.recent_raws_dirs

    def add_recent_raws_dir(self, raws_dir: Union[str, Path]) -> None:
        """Add a directory to the recent list (max 10 items)."""
        self._paths.add_recent_raws_dir(raws_dir)

    def clear_recent_raws_dirs(self) -> None:
        """Clear recent raw directories list."""
        self._paths.clear_recent_raws_dirs()

    # === PARSER SETTINGS (DELEGATED) ===

    @property
    def encoding(self) -> str:
        """Get the text encoding used to read raw files."""
        return self._parser.encoding

    @encoding.setter
    def encoding(self, value: str) -> None:
        """Set the text encoding used to read raw files."""
        self._parser.encoding = value

    @property
    def apply_copy_from(self) -> bool:
        """Check if copy-from references are resolved."""
        return self._parser.apply_copy_from

    @apply_copy_from.setter
    def apply_copy_from(self, value: bool) -> None:
        """Set copy-from resolution on or off."""
        self._parser.apply_copy_from = value

    @property
    def max_workers(self) -> int:
        """Get the number of parser threads."""
        return self._parser.max_workers

    @max_workers.setter
    def max_workers(self, value: int) -> None:
        """Set the number of parser threads."""
        self._parser.max_workers = value

    @property
    def output_format(self) -> str:
        """Get the output layout."""
        return self._parser.output_format

    @output_format.setter
    def output_format(self, value: str) -> None:
        """Set the output layout."""
        self._parser.output_format = value

    # === LOGGING SETTINGS (DELEGATED) ===

    @property
    def console_logging(self) -> bool:
        """Check if console logging is enabled."""
        return self._logging.console_logging

    @console_logging.setter
    def console_logging(self, value: bool) -> None:
        """Set console logging enabled state."""
        self._logging.console_logging = value

    @property
    def console_log_level(self) -> str:
        """Get console logging level."""
        return self._logging.console_log_level

    @console_log_level.setter
    def console_log_level(self, value: str) -> None:
        """Set console logging level."""
        self._logging.console_log_level = value

    @property
    def console_use_colors(self) -> bool:
        """Check if console should use colors."""
        return self._logging.console_use_colors

    @console_use_colors.setter
    def console_use_colors(self, value: bool) -> None:
        """Set console color usage."""
        self._logging.console_use_colors = value

    @property
    def file_logging(self) -> bool:
        """Check if file logging is enabled."""
        return self._logging.file_logging

    @file_logging.setter
    def file_logging(self, value: bool) -> None:
        """Set file logging enabled state."""
        self._logging.file_logging = value

    @property
    def log_file_path(self) -> str:
        """Get log file path."""
        return self._logging.log_file_path

    @log_file_path.setter
    def log_file_path(self, value: str) -> None:
        """Set log file path."""
        self._logging.log_file_path = value

    @property
    def log_file_absolute_path(self) -> Path:
        """Get absolute path to log file."""
        return self._logging.log_file_absolute_path

    # === VALIDATION ===

    def validate(self, check_raws_dirs: bool = True) -> ValidationResult:
        """Validate current configuration."""
        return self._validator.validate(check_raws_dirs)

    # === UTILITY METHODS ===

    def get_settings_file_path(self) -> str:
        """Get the file path where settings are stored."""
        return self.settings.fileName()

    def sync(self) -> None:
        """Force synchronization of settings to storage."""
        self.settings.sync()
