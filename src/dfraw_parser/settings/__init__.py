"""
Settings package for dfraw_parser.

This package provides a modular, type-safe configuration management system
using Qt's QSettings for cross-platform storage.

Usage:
    from dfraw_parser.settings import AppSettings, ValidationResult

    settings = AppSettings()
    result = settings.validate()
"""

from .core import CONFIG_VERSION, AppSettings, ConfigError
from .logging import LoggingSettings
from .parser import ParserSettings
from .paths import PathSettings
from .validation import ValidationResult

__all__ = [
    "AppSettings",
    "CONFIG_VERSION",
    "ConfigError",
    "ValidationResult",
    "PathSettings",
    "ParserSettings",
    "LoggingSettings",
]
