"""
Module for working with Dwarf Fortress raw files.

Provides services for tokenizing raw text, building typed records from tags,
indexing them by type and module, and resolving copy-from references.
"""

from .builder import ParserContext, RawObjectBuilder
from .dispatch import TAG_RULES, TagRule, TagScope, get_rule, tag_rule
from .inheritance import CopyFromResolver
from .loaders import RawFileLoader
from .managers import RecordsManager
from .models import (
    UNSET,
    BodySize,
    CasteRecord,
    CreatureRecord,
    EggDescription,
    MilkDescription,
    ModuleInfo,
    NaturalSkill,
    RawFile,
    RawRecord,
    make_object_id,
    slugify,
)
from .service import RawsService
from .tokenizer import Token, tokenize
from .writer import OutputFormat, dumps_records, write_records

# Public exports
__all__ = [
    # Main service
    "RawsService",
    # Models
    "RawRecord",
    "CreatureRecord",
    "CasteRecord",
    "BodySize",
    "NaturalSkill",
    "MilkDescription",
    "EggDescription",
    "RawFile",
    "ModuleInfo",
    # Constants and helpers
    "UNSET",
    "slugify",
    "make_object_id",
    # Parsing pipeline
    "Token",
    "tokenize",
    "ParserContext",
    "RawObjectBuilder",
    "TagRule",
    "TagScope",
    "TAG_RULES",
    "tag_rule",
    "get_rule",
    # Component classes (for advanced usage)
    "RecordsManager",
    "RawFileLoader",
    "CopyFromResolver",
    # Output
    "OutputFormat",
    "dumps_records",
    "write_records",
]
