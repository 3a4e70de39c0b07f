"""
Parser for advisory documents stored as YAML.

Expected structure:
    schema-version: 2.0.1
    package:
      name: ko
    advisories:
      - id: CVE-2023-24535
        aliases:
          - GHSA-2222-2222-2222
        events:
          - timestamp: 2023-11-11T00:00:00Z
            type: true-positive-determination

A file is treated as an advisory document only when it has a non-empty
package name and a non-empty schema version. Other YAML files that share
the directory are skipped rather than rejected.
"""
import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

import yaml

from ..model import Advisory, Document, Event, EventType, Package


logger = logging.getLogger(__name__)

ADVISORY_FILE_SUFFIX = ".yaml"


class DocumentParseError(ValueError):
    """Raised when an advisory document is structurally invalid."""


def load_yaml(content: bytes, filename: str) -> Optional[Any]:
    """
    Decode YAML content, returning None if it cannot be parsed.

    Unparseable files cannot be identified as advisory documents, so they
    are skipped in the same way as any other non-advisory file.
    """
    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as e:
        logger.debug(f"Skipping {filename}: not valid YAML ({e})")
        return None


def is_advisory_document(raw: Any) -> bool:
    """Check whether decoded YAML looks like an advisory document."""
    if not isinstance(raw, dict):
        return False

    package = raw.get("package")
    if not isinstance(package, dict) or not package.get("name"):
        return False

    if not raw.get("schema-version"):
        return False

    return True


def parse_timestamp(value: Any, filename: str) -> datetime:
    """
    Normalize a timestamp to an aware UTC datetime.

    Accepts YAML timestamps, dates and ISO-8601 strings. Naive values
    are taken to be UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as e:
            raise DocumentParseError(f"{filename}: invalid timestamp {value!r}") from e
    else:
        raise DocumentParseError(f"{filename}: invalid timestamp {value!r}")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_event(raw: Any, filename: str, advisory_id: str) -> Event:
    if not isinstance(raw, dict):
        raise DocumentParseError(f"{filename}: event in {advisory_id} is not a mapping")

    if "timestamp" not in raw:
        raise DocumentParseError(f"{filename}: event in {advisory_id} has no timestamp")

    try:
        event_type = EventType(raw.get("type"))
    except ValueError as e:
        raise DocumentParseError(
            f"{filename}: unknown event type {raw.get('type')!r} in {advisory_id}"
        ) from e

    data = raw.get("data")
    if data is not None and not isinstance(data, dict):
        raise DocumentParseError(f"{filename}: event data in {advisory_id} is not a mapping")

    return Event(
        timestamp=parse_timestamp(raw["timestamp"], filename),
        type=event_type,
        data=data,
    )


def parse_advisory(raw: Any, filename: str) -> Advisory:
    if not isinstance(raw, dict):
        raise DocumentParseError(f"{filename}: advisory entry is not a mapping")

    advisory_id = raw.get("id")
    if not advisory_id or not isinstance(advisory_id, str):
        raise DocumentParseError(f"{filename}: advisory is missing an id")

    aliases = raw.get("aliases") or []
    if not isinstance(aliases, list):
        raise DocumentParseError(f"{filename}: aliases of {advisory_id} must be a list")

    events = raw.get("events") or []
    if not isinstance(events, list):
        raise DocumentParseError(f"{filename}: events of {advisory_id} must be a list")

    return Advisory(
        id=advisory_id,
        aliases=frozenset(str(alias) for alias in aliases),
        events=tuple(parse_event(event, filename, advisory_id) for event in events),
    )


def parse_document(raw: Dict[str, Any], filename: str) -> Document:
    """
    Build a Document from decoded YAML.

    Args:
        raw: Decoded YAML that passed is_advisory_document()
        filename: Source file name, used in error messages

    Returns:
        Parsed Document

    Raises:
        DocumentParseError: If the document is structurally invalid or
            repeats an advisory id
    """
    if not is_advisory_document(raw):
        raise DocumentParseError(f"{filename}: not an advisory document")

    raw_advisories = raw.get("advisories") or []
    if not isinstance(raw_advisories, list):
        raise DocumentParseError(f"{filename}: advisories must be a list")

    advisories: List[Advisory] = []
    seen = set()
    for raw_advisory in raw_advisories:
        advisory = parse_advisory(raw_advisory, filename)
        if advisory.id in seen:
            raise DocumentParseError(f"{filename}: duplicate advisory {advisory.id}")
        seen.add(advisory.id)
        advisories.append(advisory)

    return Document(
        schema_version=str(raw["schema-version"]),
        package=Package(name=str(raw["package"]["name"])),
        advisories=tuple(advisories),
    )
