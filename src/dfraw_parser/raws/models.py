"""
Data models for Dwarf Fortress raw objects.

Contains the dataclasses produced by the record builder, plus the sentinel
values and key constants shared across the raws package. Each model is
intentionally lightweight: no file-system or parsing logic.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, TypeAlias

# Sentinel for numeric fields that were never set by a tag
UNSET = -1

# Structural tag keys handled by the builder itself
OBJECT_KEY = "OBJECT"
CASTE_KEY = "CASTE"
SELECT_CASTE_KEY = "SELECT_CASTE"
ALL_CASTES_ID = "ALL"

# Default module id for files outside any module with an info.txt
DEFAULT_MODULE_ID = "vanilla"

RecordDict: TypeAlias = Dict[str, Any]
"""A single record serialized to a JSON-compatible dict."""


def slugify(text: str) -> str:
    """Lowercase text and collapse runs of non-alphanumerics into '-'."""
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower())
    return slug.strip("-")


def make_object_id(filename: str, object_type: str, identifier: str) -> str:
    """Build the cross-reference key for a record.

    Args:
        filename: Raw filename the record was declared in
        object_type: Declared object type, e.g. ``CREATURE``
        identifier: Record identifier from the ``[TYPE:ID]`` tag

    Returns:
        ``<filename>-<TYPE>-<slug(id)>``
    """
    return f"{filename}-{object_type}-{slugify(identifier)}"


# =============================================================================
# Value objects
# =============================================================================

@dataclass
class BodySize:
    """Body size at an age, from ``[BODY_SIZE:years:days:size]``."""
    years: int
    days: int
    size: int

    def to_dict(self) -> RecordDict:
        return {"years": self.years, "days": self.days, "size": self.size}


@dataclass
class NaturalSkill:
    """Innate skill level, from ``[NATURAL_SKILL:skill:value]``."""
    skill: str
    value: int

    def to_dict(self) -> RecordDict:
        return {"skill": self.skill, "value": self.value}


@dataclass
class MilkDescription:
    """What a caste can be milked for, from ``[MILKABLE:material:amount]``."""
    material: str
    amount: int = 0

    def to_dict(self) -> RecordDict:
        return {"material": self.material, "amount": self.amount}


@dataclass
class EggDescription:
    """Egg laying details collected from ``EGG_SIZE`` and ``CLUTCH_SIZE``."""
    egg_size: int = 0
    clutch_min: int = UNSET
    clutch_max: int = UNSET

    def to_dict(self) -> RecordDict:
        return {
            "eggSize": self.egg_size,
            "clutchMin": self.clutch_min,
            "clutchMax": self.clutch_max,
        }


# =============================================================================
# Records
# =============================================================================

@dataclass
class CasteRecord:
    """A named sub-variant of a creature (e.g. MALE, FEMALE)."""
    id: str
    names: List[str] = field(default_factory=list)
    litter: str = ""
    milk: Optional[MilkDescription] = None
    egg: Optional[EggDescription] = None

    def to_dict(self) -> RecordDict:
        return {
            "id": self.id,
            "names": list(self.names),
            "litter": self.litter,
            "milk": self.milk.to_dict() if self.milk else None,
            "egg": self.egg.to_dict() if self.egg else None,
        }


@dataclass
class RawRecord:
    """Base for every object declared by a ``[TYPE:ID]`` tag.

    ``object_id`` stays empty while the record is open and is assigned once,
    when the builder finalizes the record.
    """
    filename: str
    type: str
    id: str
    object_id: str = ""
    module_id: str = DEFAULT_MODULE_ID
    copy_tags_from: str = ""
    copy_from_object_id: str = ""
    warnings: List[str] = field(default_factory=list)

    @property
    def is_finalized(self) -> bool:
        return bool(self.object_id)

    def finalize(self) -> None:
        """Assign the object id. Later calls leave it untouched."""
        if not self.object_id:
            self.object_id = make_object_id(self.filename, self.type, self.id)

    def searchable_text(self) -> str:
        """Lowercased text used for substring search over records."""
        return " ".join([self.id, self.object_id]).lower()

    def to_dict(self) -> RecordDict:
        return {
            "objectId": self.object_id,
            "filename": self.filename,
            "type": self.type,
            "id": self.id,
            "moduleId": self.module_id,
            "copyTagsFrom": self.copy_tags_from,
            "copyFromObjectId": self.copy_from_object_id,
            "warnings": list(self.warnings),
        }


@dataclass
class CreatureRecord(RawRecord):
    """A ``[CREATURE:ID]`` object with the fields the dispatch table maps."""
    name: str = ""
    names: List[str] = field(default_factory=list)
    description: str = ""
    age_grown: int = 0
    old_age_min: int = UNSET
    old_age_max: int = UNSET
    pet_value: int = UNSET
    tile: str = ""
    creature_class: str = ""
    body_temperature: int = UNSET
    biomes: List[str] = field(default_factory=list)
    cluster_min: int = UNSET
    cluster_max: int = UNSET
    population_min: int = UNSET
    population_max: int = UNSET
    difficulty: int = 1
    prone_to_rage: int = UNSET
    lays_eggs: bool = False
    body_sizes: List[BodySize] = field(default_factory=list)
    natural_skills: List[NaturalSkill] = field(default_factory=list)
    pref_strings: List[str] = field(default_factory=list)
    attribute_tags: List[str] = field(default_factory=list)
    castes: List[CasteRecord] = field(default_factory=list)

    def add_attribute_tag(self, tag: str) -> None:
        """Append a tag to the catch-all list, keeping it an ordered set."""
        if tag not in self.attribute_tags:
            self.attribute_tags.append(tag)

    def find_caste(self, caste_id: str) -> int:
        """Return the index of the caste with ``caste_id``, or -1."""
        for index, caste in enumerate(self.castes):
            if caste.id == caste_id:
                return index
        return -1

    def searchable_text(self) -> str:
        parts = [super().searchable_text(), self.name, self.description]
        parts.extend(self.names)
        for caste in self.castes:
            parts.extend(caste.names)
        return " ".join(p for p in parts if p).lower()

    def to_dict(self) -> RecordDict:
        data = super().to_dict()
        data.update(
            {
                "name": self.name,
                "names": list(self.names),
                "description": self.description,
                "ageGrown": self.age_grown,
                "oldAgeMin": self.old_age_min,
                "oldAgeMax": self.old_age_max,
                "petValue": self.pet_value,
                "tile": self.tile,
                "creatureClass": self.creature_class,
                "bodyTemperature": self.body_temperature,
                "biomes": list(self.biomes),
                "clusterMin": self.cluster_min,
                "clusterMax": self.cluster_max,
                "populationMin": self.population_min,
                "populationMax": self.population_max,
                "difficulty": self.difficulty,
                "proneToRage": self.prone_to_rage,
                "laysEggs": self.lays_eggs,
                "bodySizes": [size.to_dict() for size in self.body_sizes],
                "naturalSkills": [skill.to_dict() for skill in self.natural_skills],
                "prefStrings": list(self.pref_strings),
                "attributeTags": list(self.attribute_tags),
                "castes": [caste.to_dict() for caste in self.castes],
            }
        )
        return data


# Object types the builder knows how to materialize
RECORD_TYPES: Dict[str, type[RawRecord]] = {
    "CREATURE": CreatureRecord,
}


# =============================================================================
# Files and modules
# =============================================================================

@dataclass
class RawFile:
    """The result of parsing a single raw file."""
    filename: str
    object_type: Optional[str] = None
    records: List[RawRecord] = field(default_factory=list)
    path: Optional[Path] = None
    warnings: List[str] = field(default_factory=list)


@dataclass
class ModuleInfo:
    """Identity of a raw module, read from its ``info.txt``."""
    id: str
    name: str = ""
    numeric_version: int = 0
    displayed_version: str = ""
    author: str = ""
    description: str = ""
    path: Optional[Path] = None
