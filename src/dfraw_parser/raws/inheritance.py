"""
Copy-from resolution for raw records.

Handles ``[COPY_TAGS_FROM:base]`` after all files are merged: the base is the
record of the same type with that raw id, from any file, and designated
fields that the dependent left unset are backfilled from it. Only a single
copy step is applied; the base is used as parsed.
"""

import logging
from typing import Callable, Iterable, List, Optional, Tuple

from .models import UNSET, RawRecord

# Groups of fields copied together. A group is only filled when every field
# in it is still unset on the dependent record.
COPY_FIELD_GROUPS: List[Tuple[str, ...]] = [
    ("old_age_min", "old_age_max"),
    ("pet_value",),
    ("body_temperature",),
    ("cluster_min", "cluster_max"),
    ("population_min", "population_max"),
    ("description",),
    ("tile",),
]


def is_unset(value: object) -> bool:
    """Check whether a field value is still at its unset sentinel."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value == UNSET
    if isinstance(value, str):
        return value == ""
    return value is None


class CopyFromResolver:
    """Backfills unset fields of dependent records from their base record."""

    def __init__(self, find_base: Callable[[RawRecord], Optional[RawRecord]]):
        """Initialize the resolver with a base lookup function.

        Args:
            find_base: Function that takes a dependent record and returns the
                       record its ``copy_tags_from`` names, or None
        """
        self._find_base = find_base
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def resolve_record(self, record: RawRecord) -> RawRecord:
        """Fill unset designated fields of ``record`` from its base.

        Args:
            record: A finalized record, possibly carrying a copy-from reference

        Returns:
            The same record, backfilled where its base provides values
        """
        if not record.copy_tags_from:
            return record

        base = self._find_base(record)
        if base is None:
            self.logger.debug(
                f"{record.object_id}: base {record.type}:{record.copy_tags_from} "
                f"not found, leaving record unchanged"
            )
            return record
        if base is record:
            return record

        record.copy_from_object_id = base.object_id
        copied = self._copy_groups(base, record)
        if copied:
            self.logger.debug(
                f"Copied {', '.join(copied)} from {base.object_id} to {record.object_id}"
            )
        return record

    def resolve_all(self, records: Iterable[RawRecord]) -> int:
        """Resolve every record in ``records``.

        Returns:
            Number of records that referenced a base
        """
        dependents = 0
        for record in records:
            if record.copy_tags_from:
                dependents += 1
                self.resolve_record(record)
        return dependents

    def _copy_groups(self, base: RawRecord, record: RawRecord) -> List[str]:
        """Copy each field group that is unset on record and set on base."""
        copied: List[str] = []
        for group in COPY_FIELD_GROUPS:
            if not all(hasattr(record, name) and hasattr(base, name) for name in group):
                continue
            if not all(is_unset(getattr(record, name)) for name in group):
                continue
            if all(is_unset(getattr(base, name)) for name in group):
                continue
            for name in group:
                setattr(record, name, getattr(base, name))
            copied.extend(group)
        return copied
