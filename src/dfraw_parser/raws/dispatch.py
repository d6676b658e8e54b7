"""
Tag dispatch table for raw records.

Each recognized tag key maps to a ``TagRule`` carrying its scope and the
function that applies the tag value to its target. Rules are registered with
the ``tag_rule`` decorator, grouped by the object type they belong to, so a
new tag is supported by adding one decorated function.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .models import (
    BodySize,
    CasteRecord,
    CreatureRecord,
    EggDescription,
    MilkDescription,
    NaturalSkill,
)

Reporter = Callable[[str], None]
"""Receives a warning message for the record being built."""

TagApply = Callable[[Any, str, Reporter], None]


class TagScope(Enum):
    """Which object a tag mutates."""
    RECORD = "record"
    CASTE = "caste"


@dataclass(frozen=True)
class TagRule:
    """How a single tag key is applied."""
    key: str
    scope: TagScope
    apply: TagApply


# object type -> tag key -> rule
TAG_RULES: Dict[str, Dict[str, TagRule]] = {}

# Valueless tag families that are noise rather than attributes
DROPPED_TAG_PREFIXES = ("ATTACK_FLAG_", "TL_")


def tag_rule(
    *keys: str, scope: TagScope = TagScope.RECORD, object_type: str = "CREATURE"
) -> Callable[[TagApply], TagApply]:
    """Register the decorated function as the rule for ``keys``."""

    def decorator(func: TagApply) -> TagApply:
        rules = TAG_RULES.setdefault(object_type, {})
        for key in keys:
            rules[key] = TagRule(key=key, scope=scope, apply=func)
        return func

    return decorator


def get_rule(object_type: str, key: str) -> Optional[TagRule]:
    """Return the rule for ``key`` within ``object_type``, if registered."""
    return TAG_RULES.get(object_type, {}).get(key)


def is_dropped_tag(key: str) -> bool:
    """Check whether a valueless tag belongs to a dropped family."""
    return key.startswith(DROPPED_TAG_PREFIXES)


# =============================================================================
# Value parsing helpers
# =============================================================================

def parse_int(text: str, tag: str, report: Reporter) -> Optional[int]:
    """Parse an integer tag argument, reporting failures."""
    try:
        return int(text.strip())
    except ValueError:
        report(f"[{tag}] '{text}' is not an integer")
        return None


def parse_ints(value: str, tag: str, count: int, report: Reporter) -> Optional[List[int]]:
    """Parse the first ``count`` colon-separated integers of a tag value.

    Returns None (after reporting) if any position is missing or invalid,
    so the caller leaves the whole field at its default.
    """
    parts = value.split(":")
    if len(parts) < count:
        report(f"[{tag}:{value}] expects {count} values, got {len(parts)}")
        return None
    numbers: List[int] = []
    for part in parts[:count]:
        number = parse_int(part, tag, report)
        if number is None:
            return None
        numbers.append(number)
    return numbers


def split_names(value: str) -> List[str]:
    """Split a name tag into at most singular, plural and adjective."""
    return value.split(":")[:3]


def parse_tile(value: str) -> str:
    """Unquote a character tile (``'d'``); numeric tiles are kept as written."""
    if len(value) == 3 and value[0] == value[2] == "'":
        return value[1]
    return value


# =============================================================================
# Creature rules
# =============================================================================

@tag_rule("NAME")
def _name(record: CreatureRecord, value: str, report: Reporter) -> None:
    record.names = split_names(value)
    record.name = record.names[0] if record.names else ""


@tag_rule("DESCRIPTION")
def _description(record: CreatureRecord, value: str, report: Reporter) -> None:
    record.description = value


@tag_rule("CHILD")
def _child(record: CreatureRecord, value: str, report: Reporter) -> None:
    age = parse_int(value, "CHILD", report)
    if age is not None:
        record.age_grown = age


@tag_rule("MAXAGE")
def _max_age(record: CreatureRecord, value: str, report: Reporter) -> None:
    ages = parse_ints(value, "MAXAGE", 2, report)
    if ages:
        record.old_age_min, record.old_age_max = ages


@tag_rule("PETVALUE")
def _pet_value(record: CreatureRecord, value: str, report: Reporter) -> None:
    pet_value = parse_int(value, "PETVALUE", report)
    if pet_value is not None:
        record.pet_value = pet_value


@tag_rule("CREATURE_TILE")
def _tile(record: CreatureRecord, value: str, report: Reporter) -> None:
    record.tile = parse_tile(value)


@tag_rule("CREATURE_CLASS")
def _creature_class(record: CreatureRecord, value: str, report: Reporter) -> None:
    record.creature_class = value


@tag_rule("HOMEOTHERM")
def _homeotherm(record: CreatureRecord, value: str, report: Reporter) -> None:
    temperature = parse_int(value, "HOMEOTHERM", report)
    if temperature is not None:
        record.body_temperature = temperature


@tag_rule("BIOME")
def _biome(record: CreatureRecord, value: str, report: Reporter) -> None:
    record.biomes.append(value)


def _set_cluster(record: CreatureRecord, value: str, tag: str, report: Reporter) -> None:
    sizes = parse_ints(value, tag, 2, report)
    if sizes:
        record.cluster_min, record.cluster_max = sizes


@tag_rule("CLUSTER_NUMBER")
def _cluster_number(record: CreatureRecord, value: str, report: Reporter) -> None:
    _set_cluster(record, value, "CLUSTER_NUMBER", report)


@tag_rule("CLUSTER_SIZE")
def _cluster_size(record: CreatureRecord, value: str, report: Reporter) -> None:
    _set_cluster(record, value, "CLUSTER_SIZE", report)


@tag_rule("POPULATION_NUMBER")
def _population(record: CreatureRecord, value: str, report: Reporter) -> None:
    sizes = parse_ints(value, "POPULATION_NUMBER", 2, report)
    if sizes:
        record.population_min, record.population_max = sizes


@tag_rule("DIFFICULTY")
def _difficulty(record: CreatureRecord, value: str, report: Reporter) -> None:
    difficulty = parse_int(value, "DIFFICULTY", report)
    if difficulty is not None:
        record.difficulty = difficulty


@tag_rule("PRONE_TO_RAGE")
def _prone_to_rage(record: CreatureRecord, value: str, report: Reporter) -> None:
    chance = parse_int(value, "PRONE_TO_RAGE", report)
    if chance is not None:
        record.prone_to_rage = chance


@tag_rule("BODY_SIZE")
def _body_size(record: CreatureRecord, value: str, report: Reporter) -> None:
    numbers = parse_ints(value, "BODY_SIZE", 3, report)
    if numbers:
        years, days, size = numbers
        record.body_sizes.append(BodySize(years=years, days=days, size=size))


@tag_rule("NATURAL_SKILL")
def _natural_skill(record: CreatureRecord, value: str, report: Reporter) -> None:
    skill, _, level = value.partition(":")
    number = parse_int(level, "NATURAL_SKILL", report)
    if number is not None:
        record.natural_skills.append(NaturalSkill(skill=skill, value=number))


@tag_rule("PREFSTRING")
def _pref_string(record: CreatureRecord, value: str, report: Reporter) -> None:
    record.pref_strings.append(value)


@tag_rule("COPY_TAGS_FROM")
def _copy_tags_from(record: CreatureRecord, value: str, report: Reporter) -> None:
    # The base is found after all files are merged
    record.copy_tags_from = value


@tag_rule("LAYS_EGGS")
def _lays_eggs(record: CreatureRecord, value: str, report: Reporter) -> None:
    record.lays_eggs = True


# =============================================================================
# Caste rules
# =============================================================================

@tag_rule("CASTE_NAME", scope=TagScope.CASTE)
def _caste_name(caste: CasteRecord, value: str, report: Reporter) -> None:
    caste.names = split_names(value)


@tag_rule("LITTER_SIZE", scope=TagScope.CASTE)
def _litter_size(caste: CasteRecord, value: str, report: Reporter) -> None:
    caste.litter = value


@tag_rule("MILKABLE", scope=TagScope.CASTE)
def _milkable(caste: CasteRecord, value: str, report: Reporter) -> None:
    # [MILKABLE:LOCAL_CREATURE_MAT:MILK:20000] - material tokens, then the amount
    material, _, amount_text = value.rpartition(":")
    if not material:
        report(f"[MILKABLE:{value}] has no amount")
        caste.milk = MilkDescription(material=value)
        return
    amount = parse_int(amount_text, "MILKABLE", report)
    caste.milk = MilkDescription(material=material, amount=amount or 0)


@tag_rule("EGG_SIZE", scope=TagScope.CASTE)
def _egg_size(caste: CasteRecord, value: str, report: Reporter) -> None:
    size = parse_int(value, "EGG_SIZE", report)
    if size is None:
        return
    if caste.egg is None:
        caste.egg = EggDescription()
    caste.egg.egg_size = size


@tag_rule("CLUTCH_SIZE", scope=TagScope.CASTE)
def _clutch_size(caste: CasteRecord, value: str, report: Reporter) -> None:
    sizes = parse_ints(value, "CLUTCH_SIZE", 2, report)
    if not sizes:
        return
    if caste.egg is None:
        caste.egg = EggDescription()
    caste.egg.clutch_min, caste.egg.clutch_max = sizes
