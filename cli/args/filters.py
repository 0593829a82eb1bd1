from __future__ import annotations

import argparse
from typing import Any, Dict

from cli.common import parse_csv
from sarif_insight.domain import SEVERITIES, parse_severity


def add_filter_args(parser: argparse.ArgumentParser) -> None:
    """Register the finding filter flags.

    Explicit flags are layered on top of ``--preset`` (a named filter from the
    config file's ``presets:`` block), so ``--preset triage --search sql``
    narrows the preset further.
    """

    parser.add_argument(
        "--preset",
        default=None,
        help="Start from a named filter preset defined in the config file",
    )
    parser.add_argument(
        "--severity",
        default=None,
        help=f"Comma-separated severities to keep ({', '.join(SEVERITIES)})",
    )
    parser.add_argument(
        "--rule",
        dest="rules",
        default=None,
        help="Comma-separated rule ids to keep",
    )
    parser.add_argument(
        "--file-filter",
        dest="files",
        default=None,
        help="Comma-separated file URIs; a finding is kept if any of its locations matches exactly",
    )
    parser.add_argument(
        "--file-pattern",
        default=None,
        help="Keep findings with a location URI containing this substring",
    )
    parser.add_argument(
        "--search",
        default=None,
        help="Case-insensitive search over message text and rule id",
    )
    parser.add_argument(
        "--show-suppressed",
        action="store_true",
        default=None,
        help="Include suppressed findings (hidden by default)",
    )
    parser.add_argument(
        "--hide-fixed",
        action="store_true",
        help="Exclude findings that carry a fix",
    )


def filter_changes_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """Return only the filter fields the user actually set on the command line.

    Raises ``ValueError`` for an unknown ``--severity`` value.
    """
    changes: Dict[str, Any] = {}
    if args.severity:
        changes["severities"] = [parse_severity(s) for s in parse_csv(args.severity)]
    if args.rules:
        changes["rule_ids"] = parse_csv(args.rules)
    if args.files:
        changes["files"] = parse_csv(args.files)
    if args.file_pattern:
        changes["file_pattern"] = args.file_pattern
    if args.search:
        changes["search"] = args.search
    if args.show_suppressed:
        changes["show_suppressed"] = True
    if args.hide_fixed:
        changes["show_fixed"] = False
    return changes
