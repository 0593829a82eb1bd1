"""ingest

The SARIF ingestion engine.

Pipeline: decode -> validate -> normalize (with the rule registry) ->
summarize, run off the caller's thread by :mod:`ingest.transport`, plus an
in-memory filter engine applied afterwards.

Most callers want :func:`ingest.wiring.build_analyzer` or, for a one-off
synchronous parse, :func:`ingest.parse.parse_report_text`.
"""

from __future__ import annotations

from .filters import filter_findings, matches
from .parse import parse_report_text
from .registry import RuleRegistry
from .state import AnalyzerState
from .summary import summarize
from .transport import ParseRequest, ParseSlot, ParseWorker, handle_request

__all__ = [
    "AnalyzerState",
    "ParseRequest",
    "ParseSlot",
    "ParseWorker",
    "RuleRegistry",
    "filter_findings",
    "handle_request",
    "matches",
    "parse_report_text",
    "summarize",
]
