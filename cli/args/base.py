from __future__ import annotations

import argparse
from pathlib import Path

MODES = ("summary", "findings", "rules", "files", "export")


def add_base_args(parser: argparse.ArgumentParser, *, root_dir: Path) -> None:
    """Register CLI flags that are shared across every mode.

    This includes:
    - mode selection
    - the report to load
    - output format / destination
    - runtime knobs (config, logging, worker vs in-process)
    """

    parser.add_argument(
        "--mode",
        choices=list(MODES),
        default="summary",
        help=(
            "summary = counts by severity/rule/file, findings = list visible findings, "
            "rules = rule directory with finding counts, files = files hit by visible findings, "
            "export = write the filtered result as JSON (see --out)"
        ),
    )
    parser.add_argument(
        "--file",
        dest="report_file",
        required=True,
        help="Path to a SARIF report (.sarif or .json)",
    )

    parser.add_argument(
        "--format",
        dest="output_format",
        choices=["text", "json"],
        default="text",
        help="Output format for summary/findings/rules/files (default: text)",
    )
    parser.add_argument(
        "--out",
        default=None,
        help="(export mode) Destination JSON file (default: <report name>.insight.json next to the report)",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="(findings|rules|files mode) Show at most this many rows",
    )
    parser.add_argument(
        "--finding",
        dest="finding_id",
        default=None,
        help="(findings mode) Show full details for one finding id (e.g. 0-3)",
    )

    # Enrichment
    parser.add_argument(
        "--enrich",
        action="store_true",
        help="(rules|export mode) Attach CWE/CVE records from the enrichment catalog",
    )
    parser.add_argument(
        "--catalog",
        default=None,
        help="YAML enrichment catalog (default: the small built-in catalog)",
    )

    # Runtime
    parser.add_argument(
        "--config",
        default=None,
        help=(
            "YAML config file with settings:/presets: blocks "
            f"(default: $SARIF_INSIGHT_CONFIG, e.g. {root_dir / 'sarif_insight.yaml'})"
        ),
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: from settings, WARNING)",
    )
    parser.add_argument(
        "--in-process",
        action="store_true",
        help="Parse on the calling thread instead of a worker process (useful for debugging)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Do not print parse progress to stderr",
    )
