"""Tests for the raw record builder state machine."""

from pathlib import Path
from typing import Optional

from dfraw_parser.raws.builder import (
    ALL_CASTES,
    CASTE_NOT_FOUND,
    NO_CASTE,
    BuilderState,
    ParserContext,
    RawObjectBuilder,
)
from dfraw_parser.raws.models import UNSET, CreatureRecord
from dfraw_parser.raws.tokenizer import Token, tokenize


def build(text: str, path: Optional[Path] = None):
    return RawObjectBuilder().build(text, path)


class TestEndToEnd:
    """Test complete files through the builder."""

    def test_single_creature(self) -> None:
        """Test the reference dog file yields one fully populated record."""
        text = (
            "[OBJECT:CREATURE]\n[CREATURE:DOG]\n[NAME:dog:dogs:canine]\n"
            "[PETVALUE:50]\n[CASTE:MALE]\n[EGG_SIZE:0]\n"
        )
        parsed = build(text)

        assert parsed.object_type == "CREATURE"
        assert len(parsed.records) == 1
        dog = parsed.records[0]
        assert isinstance(dog, CreatureRecord)
        assert dog.id == "DOG"
        assert dog.names == ["dog", "dogs", "canine"]
        assert dog.pet_value == 50
        assert [c.id for c in dog.castes] == ["MALE"]
        assert dog.castes[0].egg is not None
        assert dog.castes[0].egg.egg_size == 0
        assert dog.castes[0].egg.clutch_min == UNSET
        assert dog.warnings == []

    def test_record_count_matches_declarations(self) -> None:
        """Test one record per [CREATURE:*] tag, in declaration order."""
        text = "creature_small\n[OBJECT:CREATURE]\n" + "".join(
            f"[CREATURE:C{i}][NAME:c{i}]\n" for i in range(5)
        )
        parsed = build(text)
        assert [r.id for r in parsed.records] == [f"C{i}" for i in range(5)]
        assert all(r.is_finalized for r in parsed.records)

    def test_filename_from_header(self) -> None:
        """Test the header line names the file and feeds object ids."""
        parsed = build("creature_domestic\n\n[OBJECT:CREATURE]\n[CREATURE:GIANT DOG]")
        assert parsed.filename == "creature_domestic"
        assert parsed.records[0].object_id == "creature_domestic-CREATURE-giant-dog"

    def test_filename_from_path(self) -> None:
        """Test the path stem is used without a header line."""
        parsed = build("[OBJECT:CREATURE][CREATURE:CAT]", Path("raw/objects/creature_cats.txt"))
        assert parsed.filename == "creature_cats"
        assert parsed.records[0].object_id == "creature_cats-CREATURE-cat"

    def test_unsupported_object_type(self) -> None:
        """Test an unsupported declared type yields no records."""
        parsed = build("plant_standard\n[OBJECT:PLANT]\n[PLANT:OAK][NAME:oak]")
        assert parsed.object_type == "PLANT"
        assert parsed.records == []
        assert any("PLANT" in w for w in parsed.warnings)

    def test_missing_object_tag(self) -> None:
        """Test tags outside any object scope are ignored with a file warning."""
        parsed = build("[CREATURE:DOG][NAME:dog]")
        assert parsed.records == []
        assert parsed.warnings == ["no [OBJECT] tag found"]

    def test_object_switch_closes_record(self) -> None:
        """Test a new [OBJECT] finalizes the open record."""
        parsed = build("[OBJECT:CREATURE][CREATURE:DOG][OBJECT:PLANT][PLANT:OAK][PETVALUE:5]")
        assert [r.id for r in parsed.records] == ["DOG"]
        assert parsed.records[0].pet_value == UNSET

    def test_to_dict_keys(self) -> None:
        """Test serialized records use camelCase field names."""
        data = build("[OBJECT:CREATURE][CREATURE:DOG][PETVALUE:50]").records[0].to_dict()
        assert data["objectId"] == "unknown-CREATURE-dog"
        assert data["petValue"] == 50
        assert data["oldAgeMin"] == UNSET
        assert data["castes"] == []


class TestCasteScoping:
    """Test caste-scoped tags find the right target."""

    def test_scoped_fields_do_not_leak(self) -> None:
        """Test each caste keeps its own egg size."""
        parsed = build(
            "[OBJECT:CREATURE][CREATURE:BIRD]"
            "[CASTE:MALE][EGG_SIZE:10][CASTE:FEMALE][EGG_SIZE:20]"
        )
        male, female = parsed.records[0].castes
        assert male.egg.egg_size == 10
        assert female.egg.egg_size == 20

    def test_record_tags_after_select_caste(self) -> None:
        """Test record-scoped tags still target the record while a caste is active."""
        parsed = build("[OBJECT:CREATURE][CREATURE:DOG][CASTE:MALE][SELECT_CASTE:MALE][PETVALUE:5]")
        dog = parsed.records[0]
        assert dog.pet_value == 5
        assert dog.castes[0].egg is None

    def test_select_caste_reopens(self) -> None:
        """Test SELECT_CASTE returns to an earlier caste."""
        parsed = build(
            "[OBJECT:CREATURE][CREATURE:COW][CASTE:FEMALE][CASTE:MALE]"
            "[SELECT_CASTE:FEMALE][MILKABLE:LOCAL_CREATURE_MAT:MILK:20000]"
        )
        female, male = parsed.records[0].castes
        assert female.milk.amount == 20000
        assert male.milk is None

    def test_select_unknown_caste(self) -> None:
        """Test tags after an unknown SELECT_CASTE are reported, not misapplied."""
        parsed = build(
            "[OBJECT:CREATURE][CREATURE:DOG][CASTE:MALE]"
            "[SELECT_CASTE:FEMALE][EGG_SIZE:5][NAME:dog]"
        )
        dog = parsed.records[0]
        assert dog.castes[0].egg is None
        assert dog.name == "dog"
        assert any("FEMALE" in w for w in dog.warnings)
        assert any("does not exist" in w for w in dog.warnings)

    def test_caste_tag_without_caste(self) -> None:
        """Test a caste tag with no active caste is reported and skipped."""
        parsed = build("[OBJECT:CREATURE]\n[CREATURE:DOG]\n[EGG_SIZE:5]\n[PETVALUE:3]")
        dog = parsed.records[0]
        assert dog.pet_value == 3
        assert dog.warnings == ["line 3: [EGG_SIZE] ignored, no active caste"]

    def test_select_all_castes(self) -> None:
        """Test SELECT_CASTE:ALL applies caste tags to every caste."""
        parsed = build(
            "[OBJECT:CREATURE][CREATURE:DOG][CASTE:MALE][CASTE:FEMALE]"
            "[SELECT_CASTE:ALL][CASTE_NAME:dog:dogs:canine]"
        )
        assert [c.names for c in parsed.records[0].castes] == [["dog", "dogs", "canine"]] * 2

    def test_new_record_resets_caste(self) -> None:
        """Test the active caste does not carry over into the next record."""
        parsed = build(
            "[OBJECT:CREATURE][CREATURE:DOG][CASTE:MALE]"
            "[CREATURE:CAT][EGG_SIZE:5]"
        )
        dog, cat = parsed.records
        assert dog.castes[0].egg is None
        assert cat.castes == []
        assert cat.warnings


class TestMalformedContent:
    """Test malformed values degrade to warnings."""

    def test_bad_maxage_keeps_other_fields(self) -> None:
        """Test a malformed age range only affects that field."""
        parsed = build("[OBJECT:CREATURE][CREATURE:DOG][MAXAGE:abc:80][NAME:dog][PETVALUE:50]")
        dog = parsed.records[0]
        assert (dog.old_age_min, dog.old_age_max) == (UNSET, UNSET)
        assert dog.name == "dog"
        assert dog.pet_value == 50
        assert len(dog.warnings) == 1

    def test_attribute_tags(self) -> None:
        """Test unknown valueless tags are collected once, dropped families are not."""
        parsed = build(
            "[OBJECT:CREATURE][CREATURE:DOG][LARGE_ROAMING][FLIER][FLIER]"
            "[ATTACK_FLAG_EDGE][TL_COLOR_MODIFIER][GAIT:WALK:Sprint:900]"
        )
        assert parsed.records[0].attribute_tags == ["LARGE_ROAMING", "FLIER"]

    def test_structural_tags_are_not_attributes(self) -> None:
        """Test CASTE and registered flags never land in the catch-all list."""
        parsed = build("[OBJECT:CREATURE][CREATURE:CHICKEN][LAYS_EGGS][CASTE:FEMALE]")
        chicken = parsed.records[0]
        assert chicken.lays_eggs is True
        assert chicken.attribute_tags == []


class TestParserContext:
    """Test context-in, context-out stepping."""

    def test_state_progression(self) -> None:
        """Test each structural token moves the state forward."""
        builder = RawObjectBuilder()
        context = ParserContext(filename="creature_test")
        assert context.state is BuilderState.NO_OBJECT

        context = builder.step(context, Token("OBJECT", "CREATURE"))
        assert context.state is BuilderState.IN_OBJECT

        context = builder.step(context, Token("CREATURE", "DOG"))
        assert context.state is BuilderState.IN_RECORD
        assert context.caste_index == NO_CASTE
        assert not context.current_record.is_finalized

        context = builder.step(context, Token("CASTE", "MALE"))
        assert context.caste_index == 0

        context = builder.finish(context)
        assert context.state is BuilderState.IN_OBJECT
        assert context.records[0].object_id == "creature_test-CREATURE-dog"

    def test_step_returns_new_context(self) -> None:
        """Test steps that change scope return a new context value."""
        builder = RawObjectBuilder()
        before = ParserContext(filename="f")
        after = builder.step(before, Token("OBJECT", "CREATURE"))
        assert after is not before
        assert before.object_type is None

    def test_caste_sentinels(self) -> None:
        """Test SELECT_CASTE sentinel values."""
        builder = RawObjectBuilder()
        context = builder.step(ParserContext(filename="f"), Token("OBJECT", "CREATURE"))
        context = builder.step(context, Token("CREATURE", "DOG"))
        context = builder.step(context, Token("SELECT_CASTE", "ALL"))
        assert context.caste_index == ALL_CASTES
        context = builder.step(context, Token("SELECT_CASTE", "QUEEN"))
        assert context.caste_index == CASTE_NOT_FOUND

    def test_run_matches_build(self) -> None:
        """Test run over tokens gives the same records as build."""
        text = "[OBJECT:CREATURE][CREATURE:DOG][CREATURE:CAT]"
        context = RawObjectBuilder().run(ParserContext(filename="unknown"), tokenize(text))
        assert [r.object_id for r in context.records] == [
            r.object_id for r in build(text).records
        ]
