"""ingest.filters

Evaluate a :class:`~sarif_insight.domain.FilterState` over findings.

The predicate is a short-circuiting conjunction, cheapest rejects first:

1. severity set membership
2. rule-id set membership
3. suppressed visibility
4. fixed visibility
5. file: exact URI set, then substring pattern, against any location URI
6. free-text search: case-insensitive substring of the message (text or
   markdown) or the rule id

An empty set or term never filters. The result is always an order-preserving
subset of the input. The default state only hides suppressed findings, so
for a report without suppressions it returns the input unchanged.
"""

from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from sarif_insight.domain import FilterState, Finding, Rule, RuleListEntry, severity_rank


def matches(finding: Finding, state: FilterState) -> bool:
    if state.severities and finding.severity not in state.severities:
        return False

    if state.rule_ids and finding.rule_id not in state.rule_ids:
        return False

    if not state.show_suppressed and finding.suppressions:
        return False

    if not state.show_fixed and finding.fixes:
        return False

    if state.files or state.file_pattern:
        uris = finding.uris
        if state.files and not any(u in state.files for u in uris):
            return False
        if state.file_pattern and not any(state.file_pattern in u for u in uris):
            return False

    if state.search:
        needle = state.search.lower()
        hay = (finding.message, finding.message_markdown or "", finding.rule_id)
        if not any(needle in h.lower() for h in hay):
            return False

    return True


def filter_findings(findings: Sequence[Finding], state: FilterState | None = None) -> List[Finding]:
    state = state if state is not None else FilterState()
    if state == FilterState.unrestricted():
        return list(findings)
    return [f for f in findings if matches(f, state)]


def files_list(findings: Iterable[Finding]) -> List[Tuple[str, int]]:
    """(uri, location count) pairs, most-hit first."""
    counts: Counter = Counter()
    for f in findings:
        counts.update(f.uris)
    return sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))


def rules_list(findings: Iterable[Finding], rules: Mapping[str, Rule]) -> List[RuleListEntry]:
    """Directory entries for the rules hit by *findings*, in directory order."""
    counts: Counter = Counter(f.rule_id for f in findings)
    return [
        RuleListEntry(
            id=rule_id,
            name=rule.display_name,
            count=counts[rule_id],
            help_uri=rule.help_uri,
            tool_name=rule.tool_name,
        )
        for rule_id, rule in rules.items()
        if counts[rule_id]
    ]


def available_facets(findings: Iterable[Finding]) -> Dict[str, List[str]]:
    """Distinct filter values present in *findings* (for building choices)."""
    severities = set()
    rule_ids = set()
    uris = set()
    for f in findings:
        severities.add(f.severity)
        rule_ids.add(f.rule_id)
        uris.update(f.uris)
    return {
        "severity": sorted(severities, key=lambda s: -severity_rank(s)),
        "rule_ids": sorted(rule_ids),
        "files": sorted(uris),
    }
