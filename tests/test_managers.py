"""Tests for record indexing and the JSON writer."""

from pathlib import Path

import orjson

from dfraw_parser.raws.managers import RecordsManager
from dfraw_parser.raws.models import CreatureRecord, RawFile
from dfraw_parser.raws.writer import OutputFormat, dumps_records, write_records


def creature(identifier: str, module_id: str = "vanilla", **fields) -> CreatureRecord:
    record = CreatureRecord(
        filename="creature_test", type="CREATURE", id=identifier, module_id=module_id, **fields
    )
    record.finalize()
    return record


class TestRecordsManager:
    """Test indices and lookups."""

    def test_indices(self) -> None:
        """Test records are indexed by type, module and object id."""
        manager = RecordsManager()
        dog = creature("DOG", name="dog")
        elk = creature("ELK", module_id="more_animals", name="elk")
        manager.add_raw_file(RawFile(filename="creature_test", object_type="CREATURE", records=[dog, elk]))
        manager.finalize_types()

        assert manager.get_types() == ["CREATURE"]
        assert manager.get_available_modules() == ["vanilla", "more_animals"]
        assert manager.get_record_by_id("creature_test-CREATURE-dog") is dog
        assert manager.get_records_by_type_from_module("CREATURE", "more_animals") == [elk]
        assert manager.get_records_by_type("PLANT") == []

    def test_later_duplicate_wins_lookup(self) -> None:
        """Test the last record added owns a duplicated object id."""
        manager = RecordsManager()
        first = creature("DOG")
        second = creature("DOG", module_id="dog_overhaul")
        manager.add_records([first, second])
        assert manager.get_record_by_id(first.object_id) is second
        assert len(manager.records) == 2

    def test_find_copy_base(self) -> None:
        """Test bases are found by type and id with same-file records first."""
        manager = RecordsManager()
        local = creature("WOLF")
        elsewhere = CreatureRecord(filename="creature_other", type="CREATURE", id="WOLF")
        elsewhere.finalize()
        pup = creature("PUP")
        pup.copy_tags_from = "WOLF"
        stray = CreatureRecord(filename="creature_third", type="CREATURE", id="STRAY")
        stray.copy_tags_from = "WOLF"
        manager.add_records([local, elsewhere, pup])

        assert manager.find_copy_base(pup) is local
        assert manager.find_copy_base(stray) is elsewhere
        pup.copy_tags_from = "BEAR"
        assert manager.find_copy_base(pup) is None
        assert manager.find_copy_base(local) is None

    def test_search(self) -> None:
        """Test substring search over names, description and ids."""
        manager = RecordsManager()
        dog = creature("DOG", name="dog", description="A loyal companion.")
        cat = creature("CAT", name="cat")
        manager.add_records([dog, cat])

        assert manager.search("LOYAL") == [dog]
        assert manager.search("creature_test-creature-cat") == [cat]
        assert manager.search("") == [dog, cat]
        assert manager.search("dog", object_type="PLANT") == []


class TestWriter:
    """Test orjson output."""

    def test_json_array(self) -> None:
        """Test the default layout is a JSON array of records."""
        data = orjson.loads(dumps_records([creature("DOG"), creature("CAT")]))
        assert [item["id"] for item in data] == ["DOG", "CAT"]

    def test_json_lines(self) -> None:
        """Test JSON lines hold one record per line."""
        payload = dumps_records([creature("DOG"), creature("CAT")], "jsonl")
        lines = payload.splitlines()
        assert len(lines) == 2
        assert orjson.loads(lines[1])["objectId"] == "creature_test-CREATURE-cat"

    def test_pretty(self) -> None:
        """Test pretty output is indented."""
        assert b"\n  " in dumps_records([creature("DOG")], OutputFormat.JSON, pretty=True)

    def test_format_from_value(self) -> None:
        """Test format names are case-insensitive and unknown names fall back."""
        assert OutputFormat.from_value("JSONL") is OutputFormat.JSONL
        assert OutputFormat.from_value("xml") is OutputFormat.JSON

    def test_write_creates_parents(self, tmp_path: Path) -> None:
        """Test write_records creates the output directory."""
        path = write_records([creature("DOG")], tmp_path / "out" / "raws.json")
        assert path.exists()
        assert orjson.loads(path.read_bytes())[0]["id"] == "DOG"
