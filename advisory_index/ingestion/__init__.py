"""
Ingestion layer for advisory indices.

Provides sources that build an Index from:
- A directory of YAML advisory documents
- A git revision of such a directory
"""
from .base_source import BaseSource, DuplicatePackageError, SourceHealth
from .directory_source import DirectorySource
from .document_parser import DocumentParseError, is_advisory_document, parse_document
from .git_source import GitSource

__all__ = [
    "BaseSource",
    "SourceHealth",
    "DuplicatePackageError",
    "DirectorySource",
    "GitSource",
    "DocumentParseError",
    "is_advisory_document",
    "parse_document",
]
