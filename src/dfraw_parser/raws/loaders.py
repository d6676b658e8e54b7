"""
File loaders for Dwarf Fortress raws.

Reads raw text files from disk and hands them to the record builder. Each
call is independent, so the service can run many of them in a thread pool.
"""

import logging
from pathlib import Path

from .builder import RawObjectBuilder
from .models import DEFAULT_MODULE_ID, ModuleInfo, RawFile
from .tokenizer import tokenize

MODULE_INFO_FILENAME = "info.txt"


class RawFileLoader:
    """Loads and parses raw files and module info files."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.logger.debug(f"RawFileLoader initialized (encoding: {encoding})")

    def _read_text(self, path: Path) -> str:
        # Undecodable bytes are replaced instead of failing the file
        with path.open("r", encoding=self.encoding, errors="replace") as f:
            return f.read()

    def read_raw_file(self, raw_file: Path, module_id: str = DEFAULT_MODULE_ID) -> RawFile:
        """Read a raw file and build its records.

        Read errors are logged and produce an empty RawFile carrying the
        error, so a batch keeps going.

        Args:
            raw_file: Path to the raw text file
            module_id: Identifier of the module providing this file

        Returns:
            RawFile with records tagged with ``module_id``
        """
        try:
            text = self._read_text(raw_file)
        except OSError as e:
            self.logger.error(f"Error reading raw file {raw_file}: {e}")
            return RawFile(filename=raw_file.stem, path=raw_file, warnings=[f"read error: {e}"])

        parsed = RawObjectBuilder().build(text, raw_file)
        for record in parsed.records:
            record.module_id = module_id

        self.logger.debug(
            f"Parsed {raw_file.name}: {len(parsed.records)} records "
            f"({parsed.object_type or 'no object type'})"
        )
        return parsed

    def read_module_info(self, info_file: Path) -> ModuleInfo:
        """Read a module's ``info.txt``.

        Falls back to the directory name as module id when the file cannot
        be read or has no ``[ID]`` tag.
        """
        info = ModuleInfo(id=info_file.parent.name, path=info_file.parent)
        try:
            text = self._read_text(info_file)
        except OSError as e:
            self.logger.error(f"Error reading module info {info_file}: {e}")
            return info

        for token in tokenize(text):
            if token.key == "ID":
                info.id = token.value
            elif token.key == "NAME":
                info.name = token.value
            elif token.key == "NUMERIC_VERSION":
                try:
                    info.numeric_version = int(token.value)
                except ValueError:
                    self.logger.warning(
                        f"{info_file}: NUMERIC_VERSION '{token.value}' is not an integer"
                    )
            elif token.key == "DISPLAYED_VERSION":
                info.displayed_version = token.value
            elif token.key == "AUTHOR":
                info.author = token.value
            elif token.key == "DESCRIPTION":
                info.description = token.value

        return info
