from __future__ import annotations

import argparse

from cli.common import print_json
from ingest.analyzer import SarifAnalyzer
from sarif_insight.domain import SEVERITIES

TOP_N = 10


def run_summary(args: argparse.Namespace, analyzer: SarifAnalyzer) -> int:
    result = analyzer.state.result
    if result is None:
        raise SystemExit("No report loaded.")

    summary = result.summary
    if args.output_format == "json":
        print_json(
            {
                "report": result.report.to_dict(),
                "summary": summary.to_dict(),
                "warnings": [w.to_dict() for w in result.warnings],
            }
        )
        return 0

    report = result.report
    print(f"\n📄 {report.file_name or args.report_file}")
    print(f"  SARIF version : {report.version}")
    print(f"  Runs          : {summary.total_runs}")
    for run in report.runs:
        version = f" {run.tool.version}" if run.tool.version else ""
        print(f"    - [{run.run_index}] {run.tool.name}{version} ({run.result_count} results, {run.tool.rule_count} rules)")
    print(f"  Findings      : {summary.total_findings}")
    print(f"  Fixable       : {summary.fixable}")
    print(f"  Suppressed    : {summary.suppressed}")

    print("\nBy severity:")
    for sev in SEVERITIES:
        print(f"  {sev:<8} {summary.severity_counts.get(sev, 0)}")

    top_rules = summary.top_rules(TOP_N)
    if top_rules:
        print("\nTop rules:")
        for rule_id, count in top_rules:
            print(f"  {count:>6}  {rule_id}")

    top_files = summary.top_files(TOP_N)
    if top_files:
        print("\nTop files:")
        for uri, count in top_files:
            print(f"  {count:>6}  {uri}")

    for w in result.warnings:
        print(f"\n⚠️ {w.message}")
    return 0
