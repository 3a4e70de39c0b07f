"""
Base source interface for building advisory indices.

A source knows how to enumerate and read candidate files from some
storage location. Filtering, parsing and duplicate detection are shared
by all sources and live here.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..model import Document, Index
from .document_parser import ADVISORY_FILE_SUFFIX, is_advisory_document, load_yaml, parse_document


logger = logging.getLogger(__name__)


class DuplicatePackageError(ValueError):
    """Raised when two files in one source describe the same package."""


@dataclass
class SourceHealth:
    """Health status of an index source."""
    source_id: str
    is_healthy: bool
    last_load: Optional[datetime]
    documents_loaded: int
    files_skipped: int = 0
    error_message: Optional[str] = None


class BaseSource(ABC):
    """
    Abstract base class for index sources.

    Subclasses implement list_files() and read_file(). load() turns the
    files into an Index and records health for reporting.
    """

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.source_id: str = ""
        self._last_load: Optional[datetime] = None
        self._last_error: Optional[str] = None
        self._documents_loaded: int = 0
        self._files_skipped: int = 0

    @abstractmethod
    def list_files(self) -> List[str]:
        """
        List candidate file names at the top level of the source.

        Returns:
            File names relative to the source root
        """
        pass

    @abstractmethod
    def read_file(self, filename: str) -> bytes:
        """Return the raw content of one file listed by list_files()."""
        pass

    def describe(self) -> str:
        """Human-readable location of this source."""
        return self.source_id

    def load(self) -> Index:
        """
        Load every advisory document from the source.

        Returns:
            Index of the parsed documents

        Raises:
            DocumentParseError: If an advisory document is malformed
            DuplicatePackageError: If two files name the same package
        """
        self._last_load = datetime.utcnow()
        self._documents_loaded = 0
        self._files_skipped = 0

        try:
            documents: Dict[str, Document] = {}
            filenames: Dict[str, str] = {}

            # Sorted for a stable load order
            for filename in sorted(self.list_files()):
                if not filename.endswith(ADVISORY_FILE_SUFFIX):
                    continue

                document = self.normalize(self.read_file(filename), filename)
                if document is None:
                    self._files_skipped += 1
                    continue

                if document.name in documents:
                    raise DuplicatePackageError(
                        f"Package {document.name} is defined in both "
                        f"{filenames[document.name]} and {filename}"
                    )
                documents[document.name] = document
                filenames[document.name] = filename

            self._documents_loaded = len(documents)
            self._last_error = None

        except Exception as e:
            self._last_error = f"{type(e).__name__}: {e}"
            logger.error(f"Failed to load {self.describe()}: {self._last_error}")
            raise

        logger.info(
            f"Loaded {self._documents_loaded} documents from {self.describe()}"
            f" ({self._files_skipped} skipped)"
        )
        return Index(documents.values())

    def normalize(self, content: bytes, filename: str) -> Optional[Document]:
        """
        Parse raw file content into a Document.

        Returns:
            Document, or None if the file is not an advisory document
        """
        raw = load_yaml(content, filename)
        if not is_advisory_document(raw):
            logger.debug(f"Skipping {filename}: not an advisory document")
            return None
        return parse_document(raw, filename)

    def get_health(self) -> SourceHealth:
        """Return health status of this source."""
        return SourceHealth(
            source_id=self.source_id,
            is_healthy=self._last_error is None,
            last_load=self._last_load,
            documents_loaded=self._documents_loaded,
            files_skipped=self._files_skipped,
            error_message=self._last_error,
        )
