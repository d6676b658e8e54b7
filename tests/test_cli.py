"""Tests for the command line entry point."""

import logging
from pathlib import Path
from typing import Callable, Iterator

import orjson
import pytest

from dfraw_parser.__main__ import build_parser, main


@pytest.fixture(autouse=True)
def restore_root_logging() -> Iterator[None]:
    """main() reconfigures the root logger; undo it after each test."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    yield
    root_logger.handlers[:] = handlers


@pytest.fixture
def raws_dir(write_raw: Callable[..., Path], tmp_path: Path) -> Path:
    write_raw(
        "objects/creature_domestic.txt",
        "creature_domestic\n[OBJECT:CREATURE]\n[CREATURE:DOG][MAXAGE:10:20]\n"
        "[CREATURE:PUPPY][COPY_TAGS_FROM:DOG]\n",
    )
    return tmp_path / "raws"


class TestArguments:
    """Test argument parsing."""

    def test_repeatable_raws_dir(self) -> None:
        """Test --raws-dir collects every occurrence."""
        args = build_parser().parse_args(["--raws-dir", "a", "--raws-dir", "b", "--no-copy-from"])
        assert args.raws_dir == ["a", "b"]
        assert args.no_copy_from
        assert args.format is None

    def test_bad_format_rejected(self) -> None:
        """Test argparse rejects unknown output formats."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--format", "xml"])


class TestMain:
    """Test full runs of main()."""

    def test_export_json(self, raws_dir: Path, settings_file: Path, tmp_path: Path) -> None:
        """Test a run writes every record and resolves copy-from."""
        out = tmp_path / "out" / "raws.json"
        code = main(["--raws-dir", str(raws_dir), "--out", str(out), "--settings-file", str(settings_file)])
        assert code == 0

        data = {item["id"]: item for item in orjson.loads(out.read_bytes())}
        assert set(data) == {"DOG", "PUPPY"}
        assert data["PUPPY"]["oldAgeMax"] == 20

    def test_export_jsonl_without_copy_from(
        self, raws_dir: Path, settings_file: Path, tmp_path: Path
    ) -> None:
        """Test format and copy-from flags are honored."""
        out = tmp_path / "raws.jsonl"
        code = main([
            "--raws-dir", str(raws_dir), "--out", str(out), "--format", "jsonl",
            "--no-copy-from", "--workers", "1", "--settings-file", str(settings_file),
        ])
        assert code == 0

        records = [orjson.loads(line) for line in out.read_bytes().splitlines()]
        assert [r["oldAgeMax"] for r in records] == [20, -1]

    def test_raws_dir_from_settings(self, raws_dir: Path, settings_file: Path, tmp_path: Path) -> None:
        """Test stored raws directories and output path are used by default."""
        from dfraw_parser.settings import AppSettings

        stored = AppSettings(settings_file=settings_file)
        stored.raws_dirs = [raws_dir]
        stored.output_path = tmp_path / "stored.json"
        stored.sync()

        assert main(["--settings-file", str(settings_file)]) == 0
        assert (tmp_path / "stored.json").exists()

        remembered = AppSettings(settings_file=settings_file)
        assert remembered.recent_raws_dirs == [str(raws_dir.resolve())]
        assert not remembered.is_first_run

    def test_missing_raws_dir(self, settings_file: Path, tmp_path: Path) -> None:
        """Test a missing directory exits with an error."""
        assert main(["--raws-dir", str(tmp_path / "nope"), "--settings-file", str(settings_file)]) == 1

    def test_no_raws_dir_configured(self, settings_file: Path) -> None:
        """Test running without any raws directory exits with an error."""
        assert main(["--settings-file", str(settings_file)]) == 1

    def test_invalid_overrides(self, raws_dir: Path, settings_file: Path) -> None:
        """Test unusable worker counts and encodings exit with an error."""
        base = ["--raws-dir", str(raws_dir), "--settings-file", str(settings_file)]
        assert main(base + ["--workers", "0"]) == 1
        assert main(base + ["--encoding", "klingon"]) == 1
