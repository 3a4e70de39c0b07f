"""
Source that reads advisory documents from a directory on disk.

Only files directly inside the directory are considered; subdirectories
are not descended into.
"""
from pathlib import Path
from typing import Any, Dict, List

from .base_source import BaseSource


class DirectorySource(BaseSource):
    """
    Loads advisory documents from a local directory.

    Config keys:
    - path: Directory holding one <package>.advisories.yaml per package
    """

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        self.source_id = "directory"
        if not config.get("path"):
            raise ValueError("Directory source requires a 'path'")
        self.path = Path(config["path"])

    def describe(self) -> str:
        return f"directory {self.path}"

    def list_files(self) -> List[str]:
        if not self.path.is_dir():
            raise FileNotFoundError(f"Advisory directory not found: {self.path}")
        return [p.name for p in self.path.iterdir() if p.is_file()]

    def read_file(self, filename: str) -> bytes:
        return (self.path / filename).read_bytes()
