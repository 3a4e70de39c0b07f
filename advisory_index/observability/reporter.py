"""
Generate human-readable diff reports in Markdown format.

This module provides DiffReporter, which turns an IndexDiffResult and its
DiffMetrics into a Markdown report, and exports both as JSON for
automation.

Report sections:
- Header with run metadata (ID, timestamp, duration)
- Summary table with document, advisory and event counts
- Added and removed documents
- Per-package advisory changes
- Source health status

Design decisions:
- Markdown output so reports render in pull requests
- Uses tabulate for GitHub-flavored tables
- Files saved with timestamp for historical tracking
"""
import json
from datetime import datetime
from pathlib import Path
from typing import List

from tabulate import tabulate

from ..diff import DiffResult, DocumentDiffResult, IndexDiffResult
from .metrics import DiffMetrics


def _format_aliases(aliases) -> str:
    return ", ".join(sorted(aliases)) if aliases else "-"


def _latest_type(advisory) -> str:
    latest = advisory.latest_event
    return latest.type.value if latest else "-"


class DiffReporter:
    """
    Generates Markdown reports from diff results.

    Reports are designed to be:
    - Readable as plain text
    - Renderable as Markdown in GitHub/GitLab
    - Suitable for posting on a pull request
    """

    def generate_report(self, result: IndexDiffResult, metrics: DiffMetrics) -> str:
        """
        Generate full diff report in Markdown format.

        Args:
            result: Output of index_diff()
            metrics: DiffMetrics for the same run

        Returns:
            Markdown-formatted report as string
        """
        lines = []

        # Header
        lines.append("# Advisory Diff Report")
        lines.append(f"**Run ID:** {metrics.run_id}")
        lines.append(f"**Started:** {metrics.started_at.isoformat()}")
        if metrics.completed_at:
            duration = (metrics.completed_at - metrics.started_at).total_seconds()
            lines.append(f"**Duration:** {duration:.1f} seconds")
        lines.append("")

        # Summary table
        lines.append("## Summary")
        summary_data = [
            ["Documents Added", metrics.documents_added],
            ["Documents Removed", metrics.documents_removed],
            ["Documents Modified", metrics.documents_modified],
            ["Advisories Added", metrics.advisories_added],
            ["Advisories Removed", metrics.advisories_removed],
            ["Advisories Modified", metrics.advisories_modified],
            ["Events Added", metrics.events_added],
            ["Events Removed", metrics.events_removed],
            ["Errors", metrics.errors],
        ]
        lines.append(tabulate(summary_data, headers=["Metric", "Value"], tablefmt="github"))
        lines.append("")

        if result.is_empty:
            lines.append("No advisory changes.")
            lines.append("")

        if result.added:
            lines.append("## Added Documents")
            added_data = [[d.name, d.schema_version, len(d.advisories)] for d in result.added]
            lines.append(tabulate(added_data, headers=["Package", "Schema", "Advisories"], tablefmt="github"))
            lines.append("")

        if result.removed:
            lines.append("## Removed Documents")
            removed_data = [[d.name, d.schema_version, len(d.advisories)] for d in result.removed]
            lines.append(tabulate(removed_data, headers=["Package", "Schema", "Advisories"], tablefmt="github"))
            lines.append("")

        if result.modified:
            lines.append("## Modified Documents")
            for doc_diff in result.modified:
                lines.append(f"### {doc_diff.name}")
                lines.append(tabulate(
                    self._advisory_rows(doc_diff),
                    headers=["Change", "Advisory", "Aliases", "Events", "Latest"],
                    tablefmt="github"
                ))
                lines.append("")

        # Source health
        if metrics.source_health:
            lines.append("## Source Health")
            health_data = []
            for source, health in metrics.source_health.items():
                status = "✓" if health.get("healthy", False) else "✗"
                health_data.append([status, source, health.get("location", ""), health.get("documents", 0)])
            lines.append(tabulate(health_data, headers=["Status", "Source", "Location", "Documents"], tablefmt="github"))
            lines.append("")

        return "\n".join(lines)

    def _advisory_rows(self, doc_diff: DocumentDiffResult) -> List[list]:
        rows = []
        for adv in doc_diff.added:
            rows.append(["added", adv.id, _format_aliases(adv.aliases), f"{len(adv.events)}", _latest_type(adv)])
        for adv in doc_diff.removed:
            rows.append(["removed", adv.id, _format_aliases(adv.aliases), f"{len(adv.events)}", _latest_type(adv)])
        for diff in doc_diff.modified:
            rows.append(["modified", diff.id, self._alias_change(diff), self._event_change(diff), _latest_type(diff.added)])
        return rows

    def _alias_change(self, diff: DiffResult) -> str:
        if diff.added.aliases == diff.removed.aliases:
            return _format_aliases(diff.added.aliases)
        gained = sorted(diff.added.aliases - diff.removed.aliases)
        lost = sorted(diff.removed.aliases - diff.added.aliases)
        return " ".join([f"+{a}" for a in gained] + [f"-{a}" for a in lost])

    def _event_change(self, diff: DiffResult) -> str:
        if not diff.added_events and not diff.removed_events:
            # Same event membership, the timeline order or multiplicity changed
            return "reordered" if diff.added.events != diff.removed.events else "-"
        return f"+{len(diff.added_events)} / -{len(diff.removed_events)}"

    def save_report(self, report: str, output_dir: Path) -> Path:
        """
        Save report to file with timestamp.

        Args:
            report: Markdown report content
            output_dir: Directory to save report in

        Returns:
            Path to saved report file
        """
        output_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.utcnow().strftime("%Y%m%d-%H%M%S")
        filepath = output_dir / f"diff-report-{timestamp}.md"
        filepath.write_text(report, encoding="utf-8")
        return filepath

    def export_json(self, result: IndexDiffResult, metrics: DiffMetrics, output_dir: Path) -> Path:
        """
        Write the diff and its metrics as JSON.

        Output format:
        {
          "generated_at": "2024-01-11T12:00:00Z",
          "metrics": {...},
          "diff": {"added": [...], "removed": [...], "modified": [...]}
        }
        """
        output_dir.mkdir(parents=True, exist_ok=True)
        output = {
            "generated_at": datetime.utcnow().isoformat() + "Z",
            "metrics": metrics.to_dict(),
            "diff": result.to_dict()
        }

        filepath = output_dir / "advisory_diff.json"
        with open(filepath, "w") as f:
            json.dump(output, f, indent=2, default=str)
        return filepath
