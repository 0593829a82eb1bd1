#!/usr/bin/env python3
"""
Thin CLI wrapper for the SARIF ingestion engine.

Modes:
  summary  - counts by severity / rule / file (default)
  findings - list the findings visible under the filters
  rules    - rule directory with finding counts (optionally enriched)
  files    - files hit by the visible findings
  export   - write the filtered result as JSON

Usage:
  python sarif_cli.py --file results.sarif
  python sarif_cli.py --file results.sarif --mode findings --severity error,warning --search sql
  python sarif_cli.py --file results.sarif --mode rules --enrich --format json
  python sarif_cli.py --file results.sarif --mode export --preset triage --out triage.json
"""

from __future__ import annotations

from cli.dispatch import main

if __name__ == "__main__":
    raise SystemExit(main())
