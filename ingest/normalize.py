"""ingest.normalize

Walk a validated report and produce a flat list of :class:`Finding` records.

Order is the source order (runs, then results within each run), so the same
bytes always produce the same ids in the same order. For each run the driver's
declared rules are registered *before* its results are walked, so findings
resolve to declared definitions rather than placeholders.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from sarif_insight.domain import (
    UNKNOWN_RULE_ID,
    Finding,
    Location,
    Report,
    Run,
    Tool,
    normalize_severity,
)
from sarif_insight.domain._coerce import as_list, dict_items, message_markdown, message_text, opt_str

from .registry import RuleRegistry

ResultCallback = Callable[[int, int], None]


def count_results(doc: Mapping[str, Any]) -> int:
    return sum(len(as_list(run.get("results"))) for run in doc.get("runs") or [])


def _locations(v: Any) -> Tuple[Location, ...]:
    return tuple(Location.from_sarif(d) for d in dict_items(v))


def normalize_result(
    res: Mapping[str, Any],
    *,
    run_index: int,
    result_index: int,
    registry: RuleRegistry,
) -> Finding:
    rule_id = opt_str(res.get("ruleId"))
    if rule_id is None:
        # SARIF allows the id on a nested reportingDescriptorReference instead.
        rule_ref = res.get("rule")
        rule_id = opt_str(rule_ref.get("id")) if isinstance(rule_ref, dict) else None
    rule_id = rule_id or UNKNOWN_RULE_ID

    msg = res.get("message")
    return Finding(
        id=Finding.make_id(run_index, result_index),
        run_index=run_index,
        result_index=result_index,
        rule_id=rule_id,
        severity=normalize_severity(res.get("level")),
        message=message_text(msg) or "",
        message_markdown=message_markdown(msg),
        locations=_locations(res.get("locations")),
        related_locations=_locations(res.get("relatedLocations")),
        fixes=tuple(dict(x) for x in dict_items(res.get("fixes"))),
        suppressions=tuple(dict(x) for x in dict_items(res.get("suppressions"))),
        rule=registry.resolve(run_index, rule_id),
    )


def normalize_report(
    doc: Mapping[str, Any],
    *,
    registry: Optional[RuleRegistry] = None,
    file_name: Optional[str] = None,
    on_result: Optional[ResultCallback] = None,
) -> Tuple[Report, List[Finding]]:
    """Return the report metadata and its findings in source order.

    *doc* must already have passed :func:`ingest.validate.validate_report`.
    *on_result* is called as ``on_result(done, total)`` before each result is
    processed; the progress layer decides which calls are worth reporting.
    """
    registry = registry if registry is not None else RuleRegistry()
    total = count_results(doc)
    done = 0

    runs: List[Run] = []
    findings: List[Finding] = []

    for run_index, run_obj in enumerate(doc.get("runs") or []):
        driver: Dict[str, Any] = run_obj["tool"]["driver"]
        registry.register_run(run_index, driver)

        results = as_list(run_obj.get("results"))
        runs.append(Run(run_index=run_index, tool=Tool.from_driver(driver), result_count=len(results)))

        for result_index, res in enumerate(results):
            if on_result is not None:
                on_result(done, total)
            done += 1
            if not isinstance(res, dict):
                continue
            findings.append(
                normalize_result(res, run_index=run_index, result_index=result_index, registry=registry)
            )

    report = Report(
        version=str(doc.get("version")),
        runs=tuple(runs),
        schema_uri=opt_str(doc.get("$schema")),
        file_name=file_name,
    )
    return report, findings
