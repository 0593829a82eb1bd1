"""sarif_insight.domain.result

The complete, immutable output of one parse.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from sarif_insight.errors import VersionMismatch

from .finding import Finding
from .report import Report
from .rule import Rule
from .summary import Summary


@dataclass(frozen=True)
class RuleListEntry:
    id: str
    name: str
    count: int
    help_uri: Optional[str] = None
    tool_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "count": self.count,
            "help_uri": self.help_uri,
            "tool_name": self.tool_name,
        }


@dataclass(frozen=True)
class ParseResult:
    report: Report
    summary: Summary
    findings: Tuple[Finding, ...] = ()
    rules: Mapping[str, Rule] = field(default_factory=dict)
    warnings: Tuple[VersionMismatch, ...] = ()

    def finding_by_id(self, finding_id: str) -> Optional[Finding]:
        for f in self.findings:
            if f.id == finding_id:
                return f
        return None

    def rules_list(self) -> List[RuleListEntry]:
        """Rules in directory order with how many findings reference each."""
        counts = self.summary.rule_counts
        return [
            RuleListEntry(
                id=rule_id,
                name=rule.display_name,
                count=int(counts.get(rule_id, 0)),
                help_uri=rule.help_uri,
                tool_name=rule.tool_name,
            )
            for rule_id, rule in self.rules.items()
        ]

    def files_list(self) -> List[Tuple[str, int]]:
        return self.summary.top_files(len(self.summary.file_counts))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "report": self.report.to_dict(),
            "summary": self.summary.to_dict(),
            "findings": [f.to_dict() for f in self.findings],
            "rules": {k: v.to_dict() for k, v in self.rules.items()},
            "warnings": [w.to_dict() for w in self.warnings],
        }
