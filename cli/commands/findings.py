from __future__ import annotations

import argparse

from cli.common import format_location, print_json, truncate
from ingest.analyzer import SarifAnalyzer
from sarif_insight.domain import Finding


def _print_detail(f: Finding) -> None:
    print(f"\n🔎 Finding {f.id}")
    print(f"  Rule      : {f.rule_id}" + (f" ({f.rule.display_name})" if f.rule and f.rule.display_name != f.rule_id else ""))
    print(f"  Severity  : {f.severity}")
    print(f"  Message   : {f.message}")
    if f.rule and f.rule.help_uri:
        print(f"  Help      : {f.rule.help_uri}")
    for loc in f.locations:
        line = f":{loc.region.start_line}" if loc.region and loc.region.start_line is not None else ""
        print(f"  Location  : {loc.uri or '-'}{line}")
    for loc in f.related_locations:
        label = f" ({loc.message})" if loc.message else ""
        print(f"  Related   : {loc.uri or '-'}{label}")
    print(f"  Fixable   : {'yes' if f.is_fixable else 'no'}")
    print(f"  Suppressed: {'yes' if f.is_suppressed else 'no'}")


def run_findings(args: argparse.Namespace, analyzer: SarifAnalyzer) -> int:
    state = analyzer.state

    if args.finding_id:
        state.select(args.finding_id)
        finding = state.selected_finding()
        if finding is None:
            raise SystemExit(f"Unknown finding id: {args.finding_id}")
        if args.output_format == "json":
            print_json(finding.to_dict())
        else:
            _print_detail(finding)
        return 0

    findings = analyzer.findings()
    total = len(findings)
    if args.limit is not None:
        findings = findings[: max(0, args.limit)]

    if args.output_format == "json":
        print_json([f.to_dict() for f in findings])
        return 0

    for f in findings:
        print(f"{f.id:>8}  {f.severity:<7}  {f.rule_id:<30}  {format_location(f):<40}  {truncate(f.message, 80)}")
    shown = f"{len(findings)} of {total}" if len(findings) != total else str(total)
    print(f"\n{shown} finding(s) shown")
    return 0
