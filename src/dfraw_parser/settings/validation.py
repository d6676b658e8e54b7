"""
Settings validation system for dfraw_parser.
"""

import codecs
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, List

from .parser import OUTPUT_FORMATS

if TYPE_CHECKING:
    from .core import AppSettings

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: List[str]
    warnings: List[str]


class SettingsValidator:
    """Validates configuration settings."""

    def __init__(self, settings: "AppSettings"):
        self.settings = settings

    def validate(self, check_raws_dirs: bool = True) -> ValidationResult:
        """Validate current configuration.

        Args:
            check_raws_dirs: Skip the stored raws directories when the caller
                             supplies its own
        """
        errors: List[str] = []
        warnings: List[str] = []

        # Validate raw directories
        raws_dirs = self.settings.raws_dirs if check_raws_dirs else []
        if check_raws_dirs and not raws_dirs:
            warnings.append("No raws directories set")
        for raws_dir in raws_dirs:
            if not raws_dir.exists():
                errors.append(f"Raws directory does not exist: {raws_dir}")
            elif raws_dir.is_dir() and not any(raws_dir.rglob("*.txt")):
                warnings.append(f"Raws directory has no .txt files: {raws_dir}")

        # Validate parser options (INI files can hold anything)
        try:
            codecs.lookup(self.settings.encoding)
        except LookupError:
            errors.append(f"Unknown encoding: {self.settings.encoding}")

        if self.settings.max_workers < 1:
            errors.append(f"Worker count must be positive: {self.settings.max_workers}")

        if self.settings.output_format not in OUTPUT_FORMATS:
            errors.append(f"Unknown output format: {self.settings.output_format}")

        # Validate recent directories
        recent_dirs = self.settings.recent_raws_dirs
        valid_recent: List[str] = []
        for dir_path in recent_dirs:
            if Path(dir_path).exists():
                valid_recent.append(dir_path)
            else:
                warnings.append(f"Recent raws directory no longer exists: {dir_path}")

        # Clean up invalid recent directories
        if len(valid_recent) != len(recent_dirs):
            self.settings.settings.setValue("paths/recent_raws_dirs", valid_recent)
            self.settings.settings.sync()

        result = ValidationResult(is_valid=len(errors) == 0, errors=errors, warnings=warnings)
        if not result.is_valid:
            logger.debug(f"Configuration invalid: {errors}")
        return result
