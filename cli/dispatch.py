from __future__ import annotations

import argparse
from pathlib import Path
from typing import Callable, Dict, Optional, Sequence

from cli.args.base import add_base_args
from cli.args.filters import add_filter_args, filter_changes_from_args
from cli.commands.export import run_export
from cli.commands.files import run_files
from cli.commands.findings import run_findings
from cli.commands.rules import run_rules
from cli.commands.summary import run_summary
from cli.ui import ProgressPrinter, print_error
from ingest.analyzer import SarifAnalyzer
from ingest.wiring import ROOT_DIR, build_analyzer
from sarif_insight.errors import SarifInsightError

EXIT_PARSE_FAILED = 2

CommandFn = Callable[[argparse.Namespace, SarifAnalyzer], int]

COMMANDS: Dict[str, CommandFn] = {
    "summary": run_summary,
    "findings": run_findings,
    "rules": run_rules,
    "files": run_files,
    "export": run_export,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sarif-insight",
        description="Parse a SARIF 2.1.0 report and summarize, filter or export its findings.",
    )
    add_base_args(parser, root_dir=ROOT_DIR)
    add_filter_args(parser)
    return parser


def apply_filters(args: argparse.Namespace, analyzer: SarifAnalyzer) -> None:
    """Preset first, then explicit flags on top of it."""
    state = analyzer.state
    if args.preset:
        try:
            state.use_filters(analyzer.settings.preset(args.preset))
        except KeyError as e:
            raise SystemExit(str(e.args[0]) if e.args else str(e))
    state.set_filters(**filter_changes_from_args(args))


def dispatch(args: argparse.Namespace, analyzer: SarifAnalyzer) -> int:
    mode = args.mode or "summary"
    command = COMMANDS[mode]

    printer = None if args.quiet else ProgressPrinter()
    try:
        analyzer.load(
            Path(args.report_file),
            on_progress=printer,
            in_process=bool(args.in_process),
        )
    except SarifInsightError as e:
        if printer is not None:
            printer.done()
        print_error(e.message, details=e.details)
        return EXIT_PARSE_FAILED
    if printer is not None:
        printer.done()

    apply_filters(args, analyzer)
    return command(args, analyzer)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        filter_changes_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    try:
        analyzer = build_analyzer(
            config_path=Path(args.config) if args.config else None,
            catalog_path=Path(args.catalog) if args.catalog else None,
            log_level=args.log_level,
        )
    except ValueError as e:
        parser.error(str(e))

    try:
        return dispatch(args, analyzer)
    finally:
        analyzer.cancel()
