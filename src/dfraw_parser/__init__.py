"""
dfraw_parser: Dwarf Fortress raw file parser

Reads bracket-tagged raw files into typed records and exports them as JSON.
"""

__version__ = "0.1.0"
__author__ = "dfraw_parser Contributors"

from .raws import CreatureRecord, RawObjectBuilder, RawRecord, RawsService
from .utils.logging_config import setup_logging

__all__ = [
    # Services
    "RawsService",
    "RawObjectBuilder",

    # Logging
    "setup_logging",

    # Data models
    "RawRecord",
    "CreatureRecord",
]
