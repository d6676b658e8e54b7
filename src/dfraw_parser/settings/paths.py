"""
Path-related settings for dfraw_parser.
"""

from pathlib import Path
from typing import List, Optional, Union

from .base import SettingsSection

MAX_RECENT_RAWS_DIRS = 10
DEFAULT_OUTPUT_PATH = "out/raws.json"


class PathSettings(SettingsSection):
    """Manages raws directories and the output location."""

    @property
    def raws_dirs(self) -> List[Path]:
        """Get the raw directories parsed by default."""
        return [Path(p) for p in self._get_list("paths/raws_dirs") if p]

    @raws_dirs.setter
    def raws_dirs(self, value: List[Path]) -> None:
        """Set the raw directories parsed by default."""
        self._set("paths/raws_dirs", [str(p) for p in value])

    @property
    def output_path(self) -> Path:
        """Get the file records are written to."""
        return Path(self._get_str("paths/output", DEFAULT_OUTPUT_PATH) or DEFAULT_OUTPUT_PATH)

    @output_path.setter
    def output_path(self, value: Optional[Path]) -> None:
        """Set the output file; None restores the default."""
        self._set("paths/output", str(value) if value else DEFAULT_OUTPUT_PATH)

    @property
    def recent_raws_dirs(self) -> List[str]:
        """Get list of recently parsed raw directories."""
        return self._get_list("paths/recent_raws_dirs", [])

    def add_recent_raws_dir(self, raws_dir: Union[str, Path]) -> None:
        """Add a directory to the recent list (most recent first)."""
        recent = self.recent_raws_dirs
        dir_str = str(raws_dir)

        if dir_str in recent:
            recent.remove(dir_str)
        recent.insert(0, dir_str)

        self._set("paths/recent_raws_dirs", recent[:MAX_RECENT_RAWS_DIRS])

    def clear_recent_raws_dirs(self) -> None:
        """Clear recent raw directories list."""
        self._set("paths/recent_raws_dirs", [])
