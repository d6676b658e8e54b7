"""
Main service for working with Dwarf Fortress raws.

Provides high-level API for loading raw directories, indexing the records
and resolving copy-from references once every file is merged.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

from .inheritance import CopyFromResolver
from .loaders import MODULE_INFO_FILENAME, RawFileLoader
from .managers import RecordsManager
from .models import DEFAULT_MODULE_ID, ModuleInfo, RawFile, RawRecord
from .writer import OutputFormat, write_records

if TYPE_CHECKING:
    from ..settings import AppSettings

DEFAULT_MAX_WORKERS = 8


class RawsService:
    """Service for working with raw files.

    Responsible for finding raw files under the configured directories,
    parsing them in a thread pool, tracking which module provided each
    record, and resolving copy-from references after the merge.
    """

    def __init__(
        self,
        raws_paths: "Sequence[str | Path] | str | Path",
        settings: Optional["AppSettings"] = None,
        encoding: Optional[str] = None,
        max_workers: Optional[int] = None,
        apply_copy_from: Optional[bool] = None,
    ):
        """Initialize the service and load every raw file.

        Args:
            raws_paths: Raw directories (or single raw files) to parse.
            settings: App settings for encoding, worker count and copy-from.
            encoding: Overrides the configured file encoding
            max_workers: Overrides the configured thread count
            apply_copy_from: Overrides the configured copy-from switch
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        if isinstance(raws_paths, (str, Path)):
            raws_paths = [raws_paths]
        self.raws_paths = [Path(p) for p in raws_paths]
        self.settings = settings

        if encoding is None:
            encoding = settings.encoding if settings else "utf-8"
        if max_workers is None:
            max_workers = settings.max_workers if settings else DEFAULT_MAX_WORKERS
        if apply_copy_from is None:
            apply_copy_from = settings.apply_copy_from if settings else True
        self.max_workers = max_workers
        self.apply_copy_from = apply_copy_from

        # Initialize components
        self.loader = RawFileLoader(encoding=encoding)
        self.manager = RecordsManager()
        self.resolver = CopyFromResolver(find_base=self.manager.find_copy_base)

        self.modules: Dict[str, ModuleInfo] = {}
        self.raw_files: List[RawFile] = []
        self.failed_files: List[Path] = []

        self.logger.info(f"Initializing RawsService with paths: {self.raws_paths}")
        self._load_data()
        if self.apply_copy_from:
            self._resolve_copy_from()

    def _load_data(self) -> None:
        """Discover and parse all raw files, then merge them into the manager."""
        self.logger.info("Starting raw parsing process...")

        jobs: List[Tuple[Path, str]] = []
        for raws_path in self.raws_paths:
            if not raws_path.exists():
                self.logger.error(f"Raws path does not exist: {raws_path}")
                continue
            jobs.extend(self._discover_files(raws_path))

        if not jobs:
            self.logger.warning("No raw files found")
            return

        self.logger.info(f"Found {len(jobs)} raw files")
        self._parse_files(jobs)
        self.manager.finalize_types()

        self.logger.info(
            f"Raw parsing completed. Found {len(self.manager.records)} records of "
            f"{len(self.manager.types)} types across {len(self.manager.available_modules)} modules"
        )
        if self.failed_files:
            self.logger.warning(f"{len(self.failed_files)} raw files could not be read")

    def _discover_files(self, root: Path) -> List[Tuple[Path, str]]:
        """List raw files under ``root`` paired with their module id."""
        if root.is_file():
            return [(root, DEFAULT_MODULE_ID)]

        # Any directory holding an info.txt is a module
        module_dirs: Dict[Path, str] = {}
        for info_file in root.rglob(MODULE_INFO_FILENAME):
            module = self.loader.read_module_info(info_file)
            self.modules[module.id] = module
            module_dirs[info_file.parent] = module.id
            self.logger.debug(f"Found module '{module.id}' v{module.displayed_version}")

        jobs: List[Tuple[Path, str]] = []
        for raw_file in sorted(root.rglob("*.txt")):
            if raw_file.name.lower() == MODULE_INFO_FILENAME:
                continue
            jobs.append((raw_file, self._module_for(raw_file, root, module_dirs)))
        return jobs

    @staticmethod
    def _module_for(raw_file: Path, root: Path, module_dirs: Dict[Path, str]) -> str:
        """Return the id of the innermost module containing ``raw_file``."""
        for parent in raw_file.parents:
            if parent in module_dirs:
                return module_dirs[parent]
            if parent == root:
                break
        return DEFAULT_MODULE_ID

    def _parse_files(self, jobs: List[Tuple[Path, str]]) -> None:
        """Parse files in parallel; one failing file never stops the batch.

        Results are merged in discovery order so record order does not
        depend on thread scheduling.
        """
        parsed_files: Dict[Path, RawFile] = {}
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_file = {
                executor.submit(self.loader.read_raw_file, raw_file, module_id): raw_file
                for raw_file, module_id in jobs
            }

            processed_count = 0
            total_files = len(future_to_file)

            for future in as_completed(future_to_file):
                raw_file = future_to_file[future]
                try:
                    parsed = future.result()
                except Exception:
                    self.logger.exception(f"Failed to parse raw file {raw_file}")
                    self.failed_files.append(raw_file)
                    continue

                if any(w.startswith("read error") for w in parsed.warnings):
                    self.failed_files.append(raw_file)

                parsed_files[raw_file] = parsed
                processed_count += 1

                if processed_count % 250 == 0:
                    self.logger.debug(f"Processed {processed_count}/{total_files} raw files")

        for raw_file, _ in jobs:
            parsed = parsed_files.pop(raw_file, None)
            if parsed is not None:
                self.raw_files.append(parsed)
                self.manager.add_raw_file(parsed)

    def _resolve_copy_from(self) -> None:
        """Apply copy-from backfill over the merged record set."""
        dependents = self.resolver.resolve_all(self.manager.records)
        self.logger.info(f"Resolved copy-from for {dependents} records")

    # Public API methods - delegate to manager

    def get_records(self, object_type: Optional[str] = None) -> List[RawRecord]:
        """Return all records, or the records of one type."""
        if object_type:
            return self.manager.get_records_by_type(object_type)
        return list(self.manager.records)

    def get_record(self, object_id: str) -> Optional[RawRecord]:
        """Return a record by its object id."""
        return self.manager.get_record_by_id(object_id)

    def get_types(self) -> List[str]:
        """Return a copy of the discovered record types list."""
        return self.manager.get_types()

    def get_available_modules(self) -> List[str]:
        """Return a copy of the list of modules that provided records."""
        return self.manager.get_available_modules()

    def search(self, query: str, object_type: Optional[str] = None) -> List[RawRecord]:
        """Search records by name, description or id."""
        return self.manager.search(query, object_type)

    def export(
        self,
        output_path: "str | Path",
        output_format: "str | OutputFormat | None" = None,
        pretty: bool = False,
    ) -> Path:
        """Write every record to ``output_path``.

        Args:
            output_path: Destination file
            output_format: json or jsonl; defaults to the configured format
            pretty: Indent JSON array output

        Returns:
            The path written to
        """
        if output_format is None:
            output_format = self.settings.output_format if self.settings else OutputFormat.JSON
        return write_records(self.manager.records, output_path, output_format, pretty)
