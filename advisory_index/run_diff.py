#!/usr/bin/env python3
"""
Orchestrator for diffing two snapshots of an advisory directory.

This module coordinates a diff run:
1. Loading: Build an Index from the "old" and "new" sources
2. Diffing: Compare the two indices
3. Reporting: Record metrics, write Markdown and JSON outputs

The runner is designed to be:
- Read-only: Sources are never modified
- Observable: Metrics and logging for every stage
- Deterministic: Same inputs always produce the same diff
- Gate-friendly: Exit status can signal that advisories changed

Usage:
    python -m advisory_index.run_diff --old advisories-before --new advisories
    python -m advisory_index.run_diff --config diff.yaml --fail-on-changes

Config file format:
    sources:
      old: {type: git, path: ., rev: origin/main}
      new: {type: directory, path: .}
    output:
      dir: output
      formats: [markdown, json]
    fail_on_changes: false
"""
import sys
import yaml
import logging
import argparse
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .diff import IndexDiffResult, index_diff
from .ingestion import BaseSource, DirectorySource, GitSource
from .model import Index
from .observability import DiffMetrics, DiffReporter


logger = logging.getLogger(__name__)

SOURCE_TYPES = {
    "directory": DirectorySource,
    "git": GitSource,
}

OUTPUT_FORMATS = {"markdown", "json"}

EXIT_NO_CHANGES = 0
EXIT_CHANGES = 1
EXIT_ERROR = 2


class DiffRunError(RuntimeError):
    """A diff run failed. Carries the metrics recorded up to the failure."""

    def __init__(self, message: str, metrics: DiffMetrics):
        super().__init__(message)
        self.metrics = metrics


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Read a YAML configuration file.

    Raises:
        FileNotFoundError: If the config file does not exist
        ValueError: If the file does not hold a mapping
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path) as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")
    return config


def create_source(config: Dict[str, Any]) -> BaseSource:
    """
    Build a source from its config section.

    Raises:
        ValueError: If the source type is unknown
    """
    source_type = config.get("type", "directory")
    if source_type not in SOURCE_TYPES:
        raise ValueError(f"Unknown source type: {source_type}")
    return SOURCE_TYPES[source_type](config)


class AdvisoryDiffRunner:
    """
    Runs a diff between the "old" and "new" advisory sources.

    Design decisions:
    - Sources are built and validated at construction time
    - Both indices are fully loaded before diffing starts
    - Load failures halt the run; nothing is diffed against a partial index
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize runner with configuration.

        Args:
            config: Parsed configuration (see module docstring)
        """
        self.config = config

        if not isinstance(self.config.get("sources"), dict):
            raise ValueError("Missing required config key: sources")

        for side in ("old", "new"):
            if not isinstance(self.config["sources"].get(side), dict):
                raise ValueError(f"Missing required source configuration: sources.{side}")

        output = self.config.get("output") or {}
        self.output_dir = Path(output.get("dir", "output"))
        self.formats = set(output.get("formats", ["markdown", "json"]))
        unknown = self.formats - OUTPUT_FORMATS
        if unknown:
            raise ValueError(f"Unknown output formats: {', '.join(sorted(unknown))}")

        self.fail_on_changes = bool(self.config.get("fail_on_changes", False))

        self.sources = {
            side: create_source(self.config["sources"][side])
            for side in ("old", "new")
        }
        self.reporter = DiffReporter()

        logger.info(
            f"Runner initialized: {self.sources['old'].describe()} -> "
            f"{self.sources['new'].describe()}"
        )

    @classmethod
    def from_file(cls, config_path: str) -> "AdvisoryDiffRunner":
        """
        Create a runner from a YAML configuration file.

        Raises:
            FileNotFoundError: If the config file does not exist
        """
        return cls(load_config(config_path))

    def run(self) -> Tuple[IndexDiffResult, DiffMetrics]:
        """
        Execute a complete diff run.

        Returns:
            Tuple of (diff result, metrics)

        Raises:
            DiffRunError: If loading or reporting fails; its metrics
                attribute holds the recorded error and source health
        """
        run_id = f"diff_{datetime.utcnow().strftime('%Y%m%d_%H%M%S')}"
        metrics = DiffMetrics(run_id=run_id, started_at=datetime.utcnow())

        logger.info(f"=== Starting Diff Run: {run_id} ===")

        try:
            logger.info("Stage 1: Loading indices")
            old_index = self._load("old", metrics)
            new_index = self._load("new", metrics)

            logger.info("Stage 2: Diffing indices")
            result = index_diff(old_index, new_index)
            metrics.record_result(result)
            metrics.completed_at = datetime.utcnow()

            logger.info("Stage 3: Writing outputs")
            self._write_outputs(result, metrics)

            logger.info(f"=== Diff Complete ===")
            logger.info(
                f"Documents: +{metrics.documents_added} -{metrics.documents_removed} "
                f"~{metrics.documents_modified}"
            )
            logger.info(
                f"Advisories: +{metrics.advisories_added} -{metrics.advisories_removed} "
                f"~{metrics.advisories_modified}"
            )

        except Exception as e:
            metrics.record_error(str(e))
            logger.error(f"Diff run failed: {e}", exc_info=True)
            raise DiffRunError(f"Diff run failed: {e}", metrics) from e

        return result, metrics

    def _load(self, side: str, metrics: DiffMetrics) -> Index:
        """
        Load one side and record its health.

        Args:
            side: "old" or "new"
            metrics: DiffMetrics to update
        """
        source = self.sources[side]
        logger.info(f"  Loading {side} from {source.describe()}")

        try:
            index = source.load()
        finally:
            health = source.get_health()
            metrics.source_health[side] = {
                "healthy": health.is_healthy,
                "location": source.describe(),
                "documents": health.documents_loaded,
                "skipped": health.files_skipped,
                "error": health.error_message
            }

        return index

    def _write_outputs(self, result: IndexDiffResult, metrics: DiffMetrics):
        if "markdown" in self.formats:
            report = self.reporter.generate_report(result, metrics)
            report_path = self.reporter.save_report(report, self.output_dir)
            logger.info(f"  Report: {report_path}")

        if "json" in self.formats:
            json_path = self.reporter.export_json(result, metrics, self.output_dir)
            logger.info(f"  JSON: {json_path}")

    def exit_code(self, result: IndexDiffResult) -> int:
        """Exit status for a finished run."""
        if self.fail_on_changes and not result.is_empty:
            return EXIT_CHANGES
        return EXIT_NO_CHANGES


def build_config(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Merge the config file (if any) with command-line overrides.

    Raises:
        FileNotFoundError: If --config points at a missing file
    """
    config = load_config(args.config) if args.config else {}

    sources = dict(config.get("sources") or {})
    if args.old:
        sources["old"] = {"type": "directory", "path": args.old}
    if args.new:
        sources["new"] = {"type": "directory", "path": args.new}
    config["sources"] = sources

    if args.output_dir:
        config["output"] = dict(config.get("output") or {}, dir=args.output_dir)
    if args.fail_on_changes:
        config["fail_on_changes"] = True

    return config


def main(argv: Optional[list] = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Diff two snapshots of an advisory directory"
    )
    parser.add_argument("--config", help="Path to YAML configuration file")
    parser.add_argument("--old", help="Directory holding the old advisory documents")
    parser.add_argument("--new", help="Directory holding the new advisory documents")
    parser.add_argument("--output-dir", help="Directory for reports (default: output)")
    parser.add_argument(
        "--fail-on-changes",
        action="store_true",
        help="Exit with status 1 when advisories changed"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        runner = AdvisoryDiffRunner(build_config(args))
        result, metrics = runner.run()

        # Print summary
        print("\n" + "=" * 60)
        print("Advisory Diff Summary")
        print("=" * 60)
        print(f"Run ID: {metrics.run_id}")
        print(f"Documents added:    {metrics.documents_added:4}")
        print(f"Documents removed:  {metrics.documents_removed:4}")
        print(f"Documents modified: {metrics.documents_modified:4}")
        for doc_diff in result.modified:
            print(f"  {doc_diff.name:30} +{len(doc_diff.added)} -{len(doc_diff.removed)} ~{len(doc_diff.modified)}")
        print("=" * 60)

        return runner.exit_code(result)

    except Exception as e:
        logger.error(f"Diff failed: {e}")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
