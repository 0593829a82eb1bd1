from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict

from ingest.analyzer import SarifAnalyzer
from sarif_insight.io import write_json_atomic


def default_export_path(report_file: str) -> Path:
    p = Path(report_file)
    return p.with_name(p.stem + ".insight.json")


def build_export(analyzer: SarifAnalyzer, *, enrich: bool = False) -> Dict[str, Any]:
    """The filtered view of the current result as one JSON-able document."""
    state = analyzer.state
    result = state.result
    if result is None:
        raise SystemExit("No report loaded.")

    findings = state.filtered_findings()
    doc: Dict[str, Any] = {
        "report": result.report.to_dict(),
        "summary": result.summary.to_dict(),
        "filters": state.filters.to_dict(),
        "visible_findings": len(findings),
        "findings": [f.to_dict() for f in findings],
        "rules": [e.to_dict() for e in result.rules_list()],
        "visible_rules": [e.to_dict() for e in state.visible_rules_list()],
        "files": [{"uri": uri, "count": count} for uri, count in state.files_list()],
        "warnings": [w.to_dict() for w in result.warnings],
    }
    if enrich:
        doc["enrichment"] = {
            rule_id: (record.to_dict() if record else None)
            for rule_id, record in analyzer.enrich_rules().items()
        }
    return doc


def run_export(args: argparse.Namespace, analyzer: SarifAnalyzer) -> int:
    out = Path(args.out) if args.out else default_export_path(args.report_file)
    doc = build_export(analyzer, enrich=args.enrich)
    write_json_atomic(out, doc)
    print(f"✅ Wrote {doc['visible_findings']} finding(s) to {out}")
    return 0
