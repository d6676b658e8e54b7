"""
Managers for raw record indexing and retrieval.

Provides RecordsManager class that handles storage, indexing by type, module,
object id and raw id, and simple lookups over parsed records.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from .models import RawFile, RawRecord


class RecordsManager:
    """Manager for indexing and retrieving raw records.

    Maintains four indices:
    - records_by_type: object type -> records (across all modules)
    - records_by_module: module_id -> object type -> records
    - records_by_id: object_id -> record
    - records_by_identifier: (object type, raw id) -> records, the copy-from join key
    """

    def __init__(self):
        self.records: List[RawRecord] = []
        self.records_by_type: Dict[str, List[RawRecord]] = defaultdict(list)
        self.records_by_module: Dict[str, Dict[str, List[RawRecord]]] = defaultdict(
            lambda: defaultdict(list)
        )
        self.records_by_id: Dict[str, RawRecord] = {}
        self.records_by_identifier: Dict[Tuple[str, str], List[RawRecord]] = defaultdict(list)

        # Types and modules in order of discovery
        self.types: List[str] = []
        self.available_modules: List[str] = []
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.logger.debug("RecordsManager initialized")

    def add_raw_file(self, raw_file: RawFile) -> None:
        """Add the records of a parsed file to all indices."""
        self.add_records(raw_file.records)

    def add_records(self, records: List[RawRecord]) -> None:
        """Add a batch of finalized records to all indices."""
        for record in records:
            if record.module_id not in self.available_modules:
                self.available_modules.append(record.module_id)

            self.records.append(record)
            self.records_by_type[record.type].append(record)
            self.records_by_module[record.module_id][record.type].append(record)

            existing = self.records_by_id.get(record.object_id)
            if existing is not None and existing is not record:
                # Later modules override earlier ones for lookups
                self.logger.debug(
                    f"Duplicate object id {record.object_id} "
                    f"({existing.module_id} -> {record.module_id})"
                )
            self.records_by_id[record.object_id] = record
            self.records_by_identifier[(record.type, record.id)].append(record)

    def finalize_types(self) -> None:
        """Finalize the list of discovered types (sorted)."""
        self.types = sorted(self.records_by_type.keys())

    def get_record_by_id(self, object_id: str) -> Optional[RawRecord]:
        """Return the record registered under ``object_id``."""
        return self.records_by_id.get(object_id)

    def find_copy_base(self, record: RawRecord) -> Optional[RawRecord]:
        """Return the record that ``record.copy_tags_from`` names.

        The base has the same object type and raw id. A base declared in the
        dependent's own file wins; otherwise the last one added wins, matching
        the override order of object id lookups.
        """
        if not record.copy_tags_from:
            return None
        candidates = self.records_by_identifier.get((record.type, record.copy_tags_from), [])
        for candidate in reversed(candidates):
            if candidate.filename == record.filename:
                return candidate
        return candidates[-1] if candidates else None

    def get_records_by_type(self, object_type: str) -> List[RawRecord]:
        """Return all records of the specified type (across all modules)."""
        return self.records_by_type.get(object_type, [])

    def get_records_by_type_from_module(
        self, object_type: str, module_id: str
    ) -> List[RawRecord]:
        """Return records of the specified type from a particular module."""
        return self.records_by_module.get(module_id, {}).get(object_type, [])

    def get_types(self) -> List[str]:
        """Return a copy of the discovered record types list."""
        return self.types.copy()

    def get_available_modules(self) -> List[str]:
        """Return a copy of the list of available modules."""
        return self.available_modules.copy()

    def search(self, query: str, object_type: Optional[str] = None) -> List[RawRecord]:
        """Return records whose names, description or ids contain ``query``.

        Args:
            query: Case-insensitive substring; empty matches everything
            object_type: Restrict the search to one type

        Returns:
            Matching records in insertion order
        """
        needle = query.strip().lower()
        pool = self.get_records_by_type(object_type) if object_type else self.records
        if not needle:
            return list(pool)
        return [record for record in pool if needle in record.searchable_text()]
