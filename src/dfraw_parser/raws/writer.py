"""
Record output for the raws package.

Serializes records with orjson either as a single JSON array or as JSON
lines (one record per line).
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Iterable, List

import orjson

from .models import RawRecord

logger = logging.getLogger(__name__)


class OutputFormat(Enum):
    """Supported output layouts."""
    JSON = "json"
    JSONL = "jsonl"

    @classmethod
    def from_value(cls, value: "str | OutputFormat") -> "OutputFormat":
        """Accept an enum member or its string value (case-insensitive)."""
        if isinstance(value, OutputFormat):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            logger.warning(f"Unknown output format '{value}', using json")
            return cls.JSON


def dumps_records(
    records: Iterable[RawRecord],
    output_format: "str | OutputFormat" = OutputFormat.JSON,
    pretty: bool = False,
) -> bytes:
    """Serialize records to bytes.

    Args:
        records: Records to serialize
        output_format: JSON array or JSON lines
        pretty: Indent the JSON array output

    Returns:
        UTF-8 encoded JSON
    """
    data: List[dict] = [record.to_dict() for record in records]
    fmt = OutputFormat.from_value(output_format)

    if fmt is OutputFormat.JSONL:
        return b"".join(orjson.dumps(item) + b"\n" for item in data)

    option = orjson.OPT_INDENT_2 if pretty else 0
    return orjson.dumps(data, option=option)


def write_records(
    records: Iterable[RawRecord],
    output_path: "str | Path",
    output_format: "str | OutputFormat" = OutputFormat.JSON,
    pretty: bool = False,
) -> Path:
    """Write records to ``output_path``, creating parent directories.

    Returns:
        The path written to
    """
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = dumps_records(records, output_format, pretty)
    with path.open("wb") as f:  # orjson works with bytes
        f.write(payload)
    logger.info(f"Wrote {len(payload)} bytes to {path}")
    return path
