"""sarif_insight.domain.summary

Aggregate counts derived from one parse.

Invariants (checked by tests, produced by :mod:`ingest.summary`):

- ``severity_counts`` always has every key in :data:`SEVERITIES`
- ``sum(severity_counts.values()) == total_findings``
- ``sum(rule_counts.values()) == total_findings``

Percentages are left to the caller; everything here is an integer count.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from .severity import SEVERITIES


def _empty_severity_counts() -> Dict[str, int]:
    return {s: 0 for s in SEVERITIES}


@dataclass(frozen=True)
class Summary:
    total_runs: int = 0
    total_findings: int = 0
    severity_counts: Dict[str, int] = field(default_factory=_empty_severity_counts)
    rule_counts: Dict[str, int] = field(default_factory=dict)
    file_counts: Dict[str, int] = field(default_factory=dict)
    tools: Tuple[str, ...] = ()
    fixable: int = 0
    suppressed: int = 0

    def top_rules(self, n: int = 10) -> List[Tuple[str, int]]:
        return sorted(self.rule_counts.items(), key=lambda kv: (-kv[1], kv[0]))[: int(n)]

    def top_files(self, n: int = 10) -> List[Tuple[str, int]]:
        return sorted(self.file_counts.items(), key=lambda kv: (-kv[1], kv[0]))[: int(n)]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_runs": self.total_runs,
            "total_findings": self.total_findings,
            "severity_counts": dict(self.severity_counts),
            "rule_counts": dict(self.rule_counts),
            "file_counts": dict(self.file_counts),
            "tools": list(self.tools),
            "fixable": self.fixable,
            "suppressed": self.suppressed,
        }
