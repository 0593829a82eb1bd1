from __future__ import annotations

import argparse

from cli.common import print_json
from ingest.analyzer import SarifAnalyzer


def run_files(args: argparse.Namespace, analyzer: SarifAnalyzer) -> int:
    rows = analyzer.state.files_list()
    if args.limit is not None:
        rows = rows[: max(0, args.limit)]

    if args.output_format == "json":
        print_json([{"uri": uri, "count": count} for uri, count in rows])
        return 0

    for uri, count in rows:
        print(f"{count:>6}  {uri}")
    print(f"\n{len(rows)} file(s)")
    return 0
