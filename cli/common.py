"""cli.common

Small shared helpers for CLI command modules.

The CLI is split by "mode" (summary/findings/rules/files/export). A few
helpers are useful across several modes; keeping them here avoids drift when
two command modules would otherwise copy the same logic.
"""

from __future__ import annotations

import json
import sys
from typing import Any, Optional, TextIO

from sarif_insight.domain import Finding


def parse_csv(raw: Optional[str]) -> list[str]:
    """Parse a comma-separated list value into a list of non-empty strings."""
    if not raw:
        return []
    return [x.strip() for x in raw.split(",") if x.strip()]


def print_json(data: Any, *, stream: Optional[TextIO] = None) -> None:
    out = stream or sys.stdout
    out.write(json.dumps(data, indent=2, ensure_ascii=False))
    out.write("\n")


def format_location(finding: Finding) -> str:
    uri = finding.primary_uri
    if not uri:
        return "-"
    line = finding.primary_line
    return f"{uri}:{line}" if line is not None else uri


def truncate(text: str, width: int = 100) -> str:
    text = " ".join(str(text or "").split())
    return text if len(text) <= width else text[: width - 3] + "..."
