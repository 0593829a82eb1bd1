"""ingest.summary

Fold normalized findings into a :class:`~sarif_insight.domain.Summary`.

One pass, no finding visited twice. File tallies are per *location*: a
finding with locations in three files bumps three file counters (and one
with two locations in the same file bumps that file twice). Locations without
a URI are not counted.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from sarif_insight.domain import SEVERITIES, Finding, Report, Summary


class SummaryBuilder:
    def __init__(self) -> None:
        self.total_findings = 0
        self.severity_counts: Dict[str, int] = {s: 0 for s in SEVERITIES}
        self.rule_counts: Dict[str, int] = {}
        self.file_counts: Dict[str, int] = {}
        self.fixable = 0
        self.suppressed = 0
        self.tools: List[str] = []
        self.total_runs = 0

    def add_tool(self, name: str) -> None:
        self.total_runs += 1
        if name and name not in self.tools:
            self.tools.append(name)

    def add(self, finding: Finding) -> None:
        self.total_findings += 1
        # Severity is already normalized to one of SEVERITIES.
        self.severity_counts[finding.severity] += 1
        self.rule_counts[finding.rule_id] = self.rule_counts.get(finding.rule_id, 0) + 1

        for loc in finding.locations:
            if loc.uri:
                self.file_counts[loc.uri] = self.file_counts.get(loc.uri, 0) + 1

        if finding.fixes:
            self.fixable += 1
        if finding.suppressions:
            self.suppressed += 1

    def build(self) -> Summary:
        return Summary(
            total_runs=self.total_runs,
            total_findings=self.total_findings,
            severity_counts=dict(self.severity_counts),
            rule_counts=dict(self.rule_counts),
            file_counts=dict(self.file_counts),
            tools=tuple(self.tools),
            fixable=self.fixable,
            suppressed=self.suppressed,
        )


def summarize(findings: Iterable[Finding], *, report: Optional[Report] = None) -> Summary:
    """Compute a summary from findings (and the report's tool inventory)."""
    builder = SummaryBuilder()
    if report is not None:
        for run in report.runs:
            builder.add_tool(run.tool.name)
    for f in findings:
        builder.add(f)
    return builder.build()
