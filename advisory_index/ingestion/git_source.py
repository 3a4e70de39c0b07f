"""
Source that reads advisory documents from a git revision.

Files are read straight from the object database with `git ls-tree` and
`git show`, so the working tree is never checked out or modified.
"""
import logging
import subprocess
from pathlib import Path
from typing import Any, Dict, List

from .base_source import BaseSource


logger = logging.getLogger(__name__)


class GitSource(BaseSource):
    """
    Loads advisory documents as they were at a given revision.

    Config keys:
    - path: Repository directory (default: current directory)
    - rev: Any revision git understands (default: HEAD)
    - subdir: Directory inside the repository holding the documents
    """

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        self.source_id = "git"
        self.repo = Path(config.get("path") or ".")
        self.rev = config.get("rev") or "HEAD"
        self.subdir = (config.get("subdir") or "").strip("/")

    def describe(self) -> str:
        return f"git {self.repo}@{self.rev}"

    def _git(self, *args: str) -> bytes:
        """
        Run a git command in the repository and return its stdout.

        Raises:
            RuntimeError: If git exits with a non-zero status
        """
        result = subprocess.run(
            ["git", "-C", str(self.repo), *args],
            capture_output=True,
        )
        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            logger.error(f"git {' '.join(args)} failed:\n{stderr}")
            raise RuntimeError(f"git {args[0]} failed with code {result.returncode}: {stderr}")
        return result.stdout

    def _tree_path(self, filename: str) -> str:
        return f"{self.subdir}/{filename}" if self.subdir else filename

    def list_files(self) -> List[str]:
        treeish = f"{self.rev}:{self.subdir}" if self.subdir else self.rev
        output = self._git("ls-tree", "-z", treeish).decode("utf-8")

        filenames = []
        # Entries look like "<mode> <type> <object>\t<name>"
        for entry in output.split("\0"):
            if not entry:
                continue
            meta, name = entry.split("\t", 1)
            if meta.split(" ")[1] == "blob":
                filenames.append(name)
        return filenames

    def read_file(self, filename: str) -> bytes:
        return self._git("show", f"{self.rev}:{self._tree_path(filename)}")
