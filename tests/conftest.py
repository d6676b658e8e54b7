"""Shared fixtures for dfraw_parser tests."""

from pathlib import Path
from typing import Callable

import pytest


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    """INI file that keeps tests away from the user's real settings."""
    return tmp_path / "dfraw_parser.ini"


@pytest.fixture
def app_settings(settings_file: Path):
    """AppSettings backed by a throwaway INI file."""
    from dfraw_parser.settings import AppSettings

    return AppSettings(profile="test", settings_file=settings_file)


@pytest.fixture
def write_raw(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a raw text file below ``tmp_path/raws`` and return its path."""

    def _write(relative_path: str, text: str, encoding: str = "utf-8") -> Path:
        path = tmp_path / "raws" / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding=encoding)
        return path

    return _write
