"""
Parser-related settings for dfraw_parser.
"""

import codecs
import logging

from .base import SettingsSection

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"
DEFAULT_MAX_WORKERS = 8
OUTPUT_FORMATS = ("json", "jsonl")


class ParserSettings(SettingsSection):
    """Manages how raw files are read and written."""

    @property
    def encoding(self) -> str:
        """Get the text encoding used to read raw files."""
        return self._get_str("parser/encoding", DEFAULT_ENCODING) or DEFAULT_ENCODING

    @encoding.setter
    def encoding(self, value: str) -> None:
        """Set the raw file encoding (e.g. utf-8 or cp437)."""
        try:
            codecs.lookup(value)
        except LookupError:
            logger.warning(f"Unknown encoding: {value}, keeping current: {self.encoding}")
            return
        self._set("parser/encoding", value)

    @property
    def apply_copy_from(self) -> bool:
        """Check if copy-from references are resolved after parsing."""
        return self._get_bool("parser/apply_copy_from", True)

    @apply_copy_from.setter
    def apply_copy_from(self, value: bool) -> None:
        """Set copy-from resolution on or off."""
        self._set("parser/apply_copy_from", value)

    @property
    def max_workers(self) -> int:
        """Get the number of threads used to parse files."""
        return self._get_int("parser/max_workers", DEFAULT_MAX_WORKERS)

    @max_workers.setter
    def max_workers(self, value: int) -> None:
        """Set the parser thread count."""
        if value > 0:
            self._set("parser/max_workers", value)
        else:
            logger.warning(
                f"Invalid worker count: {value}, keeping current: {self.max_workers}"
            )

    @property
    def output_format(self) -> str:
        """Get the output layout (json or jsonl)."""
        return self._get_str("parser/output_format", "json").lower()

    @output_format.setter
    def output_format(self, value: str) -> None:
        """Set the output layout."""
        if value.lower() in OUTPUT_FORMATS:
            self._set("parser/output_format", value.lower())
        else:
            logger.warning(
                f"Invalid output format: {value}, keeping current: {self.output_format}"
            )
