"""sarif_insight.domain

Domain objects produced by a parse and consumed by every view.

Key idea
--------
SARIF producers vary wildly in which optional fields they fill in. The engine
turns a raw document into these typed, immutable records once, applying all
defaults at that boundary, so filters and summaries never see a ``None``
where a list or a string is expected.
"""

from __future__ import annotations

from .filters import FilterState
from .finding import UNKNOWN_RULE_ID, Finding, Location, Region
from .report import Report, Run, Tool
from .result import ParseResult, RuleListEntry
from .rule import Rule
from .severity import DEFAULT_SEVERITY, SEVERITIES, normalize_severity, parse_severity, severity_rank
from .summary import Summary

__all__ = [
    "DEFAULT_SEVERITY",
    "FilterState",
    "Finding",
    "Location",
    "ParseResult",
    "Region",
    "Report",
    "Rule",
    "RuleListEntry",
    "Run",
    "SEVERITIES",
    "Summary",
    "Tool",
    "UNKNOWN_RULE_ID",
    "normalize_severity",
    "parse_severity",
    "severity_rank",
]
