"""
Data model for advisory indices.

Main exports:
- Index: Documents keyed by package name
- Document: One package's advisory data
- Package: Package identity
- Advisory: Handling of one vulnerability identifier
- Event: One timeline entry of an advisory
- EventType: Closed set of advisory lifecycle markers
"""
from .advisory import (
    Advisory,
    Document,
    Event,
    EventType,
    Index,
    Package,
    format_timestamp,
)

__all__ = [
    "Advisory",
    "Document",
    "Event",
    "EventType",
    "Index",
    "Package",
    "format_timestamp",
]
