"""
Shared pytest fixtures for advisory index tests.

This module provides reusable builders for advisory values and access
to the on-disk diff scenarios under testdata/diff/<case>/{a,b}.
"""
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from advisory_index.ingestion import DirectorySource
from advisory_index.model import Advisory, Document, Event, EventType, Index, Package


TESTDATA_DIR = Path(__file__).parent / "testdata"

# Sentinel for "unset/earliest" timestamps
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
EPOCH_PLUS_1_DAY = EPOCH + timedelta(days=1)

# Fixed "now" for deterministic test runs: Nov 11 2023 00:00:00 UTC
NOW = datetime(2023, 11, 11, tzinfo=timezone.utc)


def make_event(timestamp=EPOCH, event_type=EventType.TRUE_POSITIVE_DETERMINATION, data=None):
    return Event(timestamp=timestamp, type=event_type, data=data)


def make_advisory(advisory_id, events=None, aliases=()):
    if events is None:
        events = [make_event()]
    return Advisory(id=advisory_id, aliases=frozenset(aliases), events=tuple(events))


def make_document(name="ko", advisories=(), schema_version="2.0.1"):
    return Document(
        schema_version=schema_version,
        package=Package(name=name),
        advisories=tuple(advisories),
    )


@pytest.fixture
def testdata_dir():
    return TESTDATA_DIR


@pytest.fixture
def load_case():
    """
    Load the two indices of a diff scenario.

    Returns:
        Function taking a case name and returning (old_index, new_index)
    """
    def _load(name: str):
        case_dir = TESTDATA_DIR / "diff" / name
        old = DirectorySource({"path": str(case_dir / "a")}).load()
        new = DirectorySource({"path": str(case_dir / "b")}).load()
        return old, new

    return _load


@pytest.fixture
def sample_index():
    """
    Index with two packages and a mix of events, aliases and data.

    Returns:
        Index used as a baseline by property tests
    """
    return Index([
        make_document("ko", [
            make_advisory("CVE-2023-24535", [
                make_event(EPOCH, EventType.DETECTION),
                make_event(NOW, EventType.TRUE_POSITIVE_DETERMINATION),
            ], aliases=["GHSA-2222-2222-2222"]),
            make_advisory("CVE-2023-11111", [
                make_event(EPOCH, EventType.FALSE_POSITIVE_DETERMINATION,
                           data={"type": "vulnerable-code-not-included-in-package"}),
            ]),
        ]),
        make_document("crane", [
            make_advisory("CVE-2024-0001", [
                make_event(EPOCH, EventType.TRUE_POSITIVE_DETERMINATION),
                make_event(NOW, EventType.FIXED, data={"fixed-version": "0.19.1-r0"}),
            ]),
        ]),
    ])
