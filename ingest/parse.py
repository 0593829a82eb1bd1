"""ingest.parse

The parse pipeline: decode -> validate -> normalize -> summarize.

:func:`parse_report_text` is the synchronous entrypoint. It is what the
background worker runs (see :mod:`ingest.transport`) and what tests and the
``--in-process`` CLI flag call directly.
"""

from __future__ import annotations

from typing import List, Optional

from sarif_insight.domain import ParseResult

from .normalize import normalize_report
from .progress import (
    ANALYZING_RESULTS,
    ANALYZING_TOOLS,
    CALCULATING,
    COMPLETE,
    DEFAULT_INTERVAL,
    FINALIZING,
    PARSING_JSON,
    VALIDATING,
    ProgressCallback,
    ProgressTracker,
)
from .registry import RuleRegistry
from .stages import ParseContext, ScratchStore, register_stage, run_stages
from .summary import SummaryBuilder
from .validate import DEFAULT_TARGET_VERSION, decode_report_text, validate_report


class StoreKeys:
    DOCUMENT = "document"
    WARNINGS = "warnings"
    REGISTRY = "registry"
    REPORT = "report"
    FINDINGS = "findings"
    SUMMARY = "summary"


PARSE_STAGES: List[str] = ["decode", "validate", "normalize", "summarize"]


@register_stage("decode", description="Decode JSON text.", produces=(StoreKeys.DOCUMENT,))
def stage_decode(ctx: ParseContext, store: ScratchStore, tracker: ProgressTracker) -> None:
    tracker.checkpoint(PARSING_JSON)
    store.put(StoreKeys.DOCUMENT, decode_report_text(ctx.text))


@register_stage(
    "validate",
    description="Check the minimal SARIF shape.",
    requires=(StoreKeys.DOCUMENT,),
    produces=(StoreKeys.WARNINGS,),
)
def stage_validate(ctx: ParseContext, store: ScratchStore, tracker: ProgressTracker) -> None:
    tracker.checkpoint(VALIDATING)
    warnings = validate_report(store.require(StoreKeys.DOCUMENT), target_version=ctx.target_version)
    store.put(StoreKeys.WARNINGS, warnings)


@register_stage(
    "normalize",
    description="Register rules and build findings in source order.",
    requires=(StoreKeys.DOCUMENT,),
    produces=(StoreKeys.REGISTRY, StoreKeys.REPORT, StoreKeys.FINDINGS),
)
def stage_normalize(ctx: ParseContext, store: ScratchStore, tracker: ProgressTracker) -> None:
    tracker.checkpoint(CALCULATING)
    registry = RuleRegistry()
    tracker.checkpoint(ANALYZING_TOOLS)
    tracker.checkpoint(ANALYZING_RESULTS)
    report, findings = normalize_report(
        store.require(StoreKeys.DOCUMENT),
        registry=registry,
        file_name=ctx.file_name,
        on_result=tracker.on_result,
    )
    store.put(StoreKeys.REGISTRY, registry)
    store.put(StoreKeys.REPORT, report)
    store.put(StoreKeys.FINDINGS, findings)
    # The raw document is no longer needed; drop it before summarizing.
    store.data.pop(StoreKeys.DOCUMENT, None)


@register_stage(
    "summarize",
    description="Fold findings into counts.",
    requires=(StoreKeys.REPORT, StoreKeys.FINDINGS),
    produces=(StoreKeys.SUMMARY,),
)
def stage_summarize(ctx: ParseContext, store: ScratchStore, tracker: ProgressTracker) -> None:
    builder = SummaryBuilder()
    for run in store.require(StoreKeys.REPORT).runs:
        builder.add_tool(run.tool.name)
    for f in store.require(StoreKeys.FINDINGS):
        builder.add(f)
    store.put(StoreKeys.SUMMARY, builder.build())
    tracker.checkpoint(FINALIZING)


def parse_report_text(
    text: str,
    *,
    file_name: str = "report.sarif",
    target_version: str = DEFAULT_TARGET_VERSION,
    progress_interval: int = DEFAULT_INTERVAL,
    on_progress: Optional[ProgressCallback] = None,
) -> ParseResult:
    """Parse SARIF text into a :class:`ParseResult`.

    Raises :class:`~sarif_insight.errors.MalformedInput` or
    :class:`~sarif_insight.errors.InvalidSchema`; version mismatches are
    returned in ``result.warnings``.
    """
    ctx = ParseContext(
        file_name=file_name,
        text=text,
        target_version=target_version,
        progress_interval=progress_interval,
    )
    tracker = ProgressTracker(on_progress, interval=ctx.progress_interval)
    store = run_stages(ctx, stage_names=PARSE_STAGES, tracker=tracker)

    result = ParseResult(
        report=store.require(StoreKeys.REPORT),
        summary=store.require(StoreKeys.SUMMARY),
        findings=tuple(store.require(StoreKeys.FINDINGS)),
        rules=store.require(StoreKeys.REGISTRY).merged(),
        warnings=tuple(store.get(StoreKeys.WARNINGS) or ()),
    )
    tracker.checkpoint(COMPLETE)
    return result
