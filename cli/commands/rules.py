from __future__ import annotations

import argparse
from typing import Any, Dict, List

from cli.common import print_json
from ingest.analyzer import SarifAnalyzer


def run_rules(args: argparse.Namespace, analyzer: SarifAnalyzer) -> int:
    entries = analyzer.state.rules_list()
    if args.limit is not None:
        entries = entries[: max(0, args.limit)]

    enrichment = analyzer.enrich_rules() if args.enrich else {}

    if args.output_format == "json":
        rows: List[Dict[str, Any]] = []
        for e in entries:
            row = e.to_dict()
            if args.enrich:
                record = enrichment.get(e.id)
                row["enrichment"] = record.to_dict() if record else None
            rows.append(row)
        print_json(rows)
        return 0

    for e in entries:
        tool = f"[{e.tool_name}] " if e.tool_name else ""
        print(f"{e.count:>6}  {tool}{e.id}  {e.name if e.name != e.id else ''}".rstrip())
        if e.help_uri:
            print(f"        {e.help_uri}")
        record = enrichment.get(e.id)
        if record is not None and record.cwe is not None:
            print(f"        {record.cwe.id}: {record.cwe.name}")
        if record is not None and record.cve is not None:
            score = f" (score {record.cve.score})" if record.cve.score is not None else ""
            print(f"        {record.cve.id}: {record.cve.severity}{score}")
    print(f"\n{len(entries)} rule(s)")
    return 0
