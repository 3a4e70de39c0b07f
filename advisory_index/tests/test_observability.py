"""
Validation tests for the observability layer.

These tests verify:
- DiffMetrics counts documents, advisories and events from a diff
- DiffMetrics serializes to dict properly
- DiffReporter generates Markdown and JSON output
"""
import json
from datetime import datetime

from advisory_index.diff import index_diff
from advisory_index.model import EventType, Index
from advisory_index.observability import DiffMetrics, DiffReporter

from conftest import EPOCH, NOW, make_advisory, make_document, make_event


def build_diff():
    """ko gains a fix event and loses an alias, crane is removed, grype is added."""
    old = Index([
        make_document("ko", [
            make_advisory("CVE-2023-24535", [make_event(EPOCH)], aliases=["GHSA-2222-2222-2222"]),
            make_advisory("CVE-2023-11111", [make_event(EPOCH)]),
        ]),
        make_document("crane", [make_advisory("CVE-2024-0001"), make_advisory("CVE-2024-0002")]),
    ])
    new = Index([
        make_document("ko", [
            make_advisory("CVE-2023-24535", [make_event(EPOCH)]),
            make_advisory("CVE-2023-11111", [
                make_event(EPOCH),
                make_event(NOW, EventType.FIXED, data={"fixed-version": "0.15.2-r1"}),
            ]),
            make_advisory("CVE-2023-33333"),
        ]),
        make_document("grype", [make_advisory("CVE-2024-0003")]),
    ])
    return index_diff(old, new)


def test_metrics_record_result():
    """Verify DiffMetrics counts every level of the diff."""
    metrics = DiffMetrics(run_id="test_run", started_at=datetime.utcnow())

    metrics.record_result(build_diff())

    assert metrics.documents_added == 1
    assert metrics.documents_removed == 1
    assert metrics.documents_modified == 1
    assert metrics.advisories_added == 2  # grype's advisory + CVE-2023-33333
    assert metrics.advisories_removed == 2  # both of crane's
    assert metrics.advisories_modified == 2
    assert metrics.events_added == 1
    assert metrics.events_removed == 0
    assert metrics.has_changes


def test_metrics_empty_result():
    metrics = DiffMetrics(run_id="test_run", started_at=datetime.utcnow())

    metrics.record_result(index_diff(Index(), Index()))

    assert not metrics.has_changes
    assert metrics.advisories_added == 0


def test_metrics_serialization():
    """Verify DiffMetrics can be serialized to dict."""
    metrics = DiffMetrics(
        run_id="test_run",
        started_at=datetime(2024, 1, 15, 12, 0, 0),
        completed_at=datetime(2024, 1, 15, 12, 0, 2)
    )
    metrics.record_result(build_diff())
    metrics.record_error("old source unreadable", {"source": "old"})

    data = metrics.to_dict()

    assert data["run_id"] == "test_run"
    assert data["documents_added"] == 1
    assert data["events_added"] == 1
    assert data["errors"] == 1
    assert data["issues"][0]["context"] == {"source": "old"}
    assert isinstance(data["started_at"], str)
    json.dumps(data)


def test_reporter_generates_markdown():
    """Verify DiffReporter generates the expected sections."""
    result = build_diff()
    metrics = DiffMetrics(
        run_id="test_run",
        started_at=datetime(2024, 1, 15, 12, 0, 0),
        completed_at=datetime(2024, 1, 15, 12, 0, 2)
    )
    metrics.record_result(result)
    metrics.source_health["old"] = {"healthy": True, "location": "directory a", "documents": 2}

    report = DiffReporter().generate_report(result, metrics)

    assert "# Advisory Diff Report" in report
    assert "**Run ID:** test_run" in report
    assert "**Duration:** 2.0 seconds" in report
    assert "## Added Documents" in report
    assert "grype" in report
    assert "## Removed Documents" in report
    assert "crane" in report
    assert "### ko" in report
    assert "-GHSA-2222-2222-2222" in report
    assert "+1 / -0" in report
    assert "CVE-2023-33333" in report
    assert "## Source Health" in report
    assert "No advisory changes." not in report


def test_reporter_empty_diff():
    metrics = DiffMetrics(run_id="test_run", started_at=datetime.utcnow())

    report = DiffReporter().generate_report(index_diff(Index(), Index()), metrics)

    assert "No advisory changes." in report
    assert "## Modified Documents" not in report


def test_reporter_marks_reordered_timeline():
    first, second = make_event(EPOCH), make_event(NOW)
    result = index_diff(
        Index([make_document("ko", [make_advisory("CVE-2023-24535", [first, second])])]),
        Index([make_document("ko", [make_advisory("CVE-2023-24535", [second, first])])]),
    )
    metrics = DiffMetrics(run_id="test_run", started_at=datetime.utcnow())

    report = DiffReporter().generate_report(result, metrics)

    assert "reordered" in report


def test_reporter_saves_files(tmp_path):
    """Verify report and JSON export are written."""
    result = build_diff()
    metrics = DiffMetrics(run_id="test_run", started_at=datetime.utcnow())
    metrics.record_result(result)
    reporter = DiffReporter()

    report_path = reporter.save_report(reporter.generate_report(result, metrics), tmp_path / "out")
    json_path = reporter.export_json(result, metrics, tmp_path / "out")

    assert report_path.exists()
    assert report_path.suffix == ".md"

    data = json.loads(json_path.read_text())
    assert data["metrics"]["run_id"] == "test_run"
    assert [d["package"]["name"] for d in data["diff"]["added"]] == ["grype"]
    modified = data["diff"]["modified"][0]
    assert modified["name"] == "ko"
    assert modified["added"][0]["id"] == "CVE-2023-33333"
    fixed = [m for m in modified["modified"] if m["id"] == "CVE-2023-11111"][0]
    assert fixed["added_events"] == [{
        "timestamp": "2023-11-11T00:00:00Z",
        "type": "fixed",
        "data": {"fixed-version": "0.15.2-r1"},
    }]
