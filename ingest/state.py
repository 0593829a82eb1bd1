"""ingest.state

An explicit, caller-owned state container.

The engine itself is stateless between parses. Whatever is "current" (the
last successful result, the filter state, loading/progress/error flags, the
selected finding) lives in an :class:`AnalyzerState` that the caller creates
and passes to whichever component needs it.

Transitions:

- :meth:`AnalyzerState.begin_parse`: loading on, progress 0, error cleared
- progress message: progress updated
- complete message: result replaced atomically, loading off, progress 100
- failed message: error set, progress 0, loading off; the previous result is
  left untouched so the caller is back at its idle state
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from sarif_insight.domain import FilterState, Finding, ParseResult, RuleListEntry

from .filters import files_list, filter_findings, rules_list
from .transport import Message, ParseComplete, ParseFailed, ParseProgress

logger = logging.getLogger(__name__)


@dataclass
class AnalyzerState:
    result: Optional[ParseResult] = None
    filters: FilterState = field(default_factory=FilterState)

    is_loading: bool = False
    progress: int = 0
    stage: str = ""
    error: Optional[str] = None
    selected_finding_id: Optional[str] = None

    _filtered: Optional[List[Finding]] = field(default=None, repr=False)

    def begin_parse(self) -> None:
        self.is_loading = True
        self.progress = 0
        self.stage = ""
        self.error = None

    def apply_message(self, msg: Message) -> None:
        if isinstance(msg, ParseProgress):
            self.progress = msg.progress
            self.stage = msg.stage
        elif isinstance(msg, ParseComplete):
            self.set_result(msg.result)
            self.progress = 100
        elif isinstance(msg, ParseFailed):
            logger.info("parse failed (%s): %s", msg.kind, msg.error)
            self.is_loading = False
            self.progress = 0
            self.error = msg.error
        else:
            raise TypeError(f"Unknown message type: {type(msg)!r}")

    def set_result(self, result: ParseResult) -> None:
        self.result = result
        self.is_loading = False
        self.error = None
        self.selected_finding_id = None
        self._filtered = None

    def clear(self) -> None:
        """Drop the result and reset filters and selection."""
        self.result = None
        self.filters = FilterState()
        self.selected_finding_id = None
        self.error = None
        self.is_loading = False
        self.progress = 0
        self.stage = ""
        self._filtered = None

    def set_filters(self, **changes: Any) -> FilterState:
        """Merge *changes* into the current filters (partial update)."""
        for key in ("severities", "rule_ids", "files"):
            if key in changes:
                changes[key] = getattr(FilterState.build(**{key: changes[key]}), key)
        self.filters = self.filters.replace(**changes)
        self._filtered = None
        return self.filters

    def use_filters(self, filters: FilterState) -> FilterState:
        """Replace the filters wholesale (e.g. with a named preset)."""
        self.filters = filters
        self._filtered = None
        return self.filters

    def reset_filters(self) -> None:
        self.filters = FilterState()
        self._filtered = None

    def filtered_findings(self) -> List[Finding]:
        if self.result is None:
            return []
        if self._filtered is None:
            self._filtered = filter_findings(self.result.findings, self.filters)
        return list(self._filtered)

    def select(self, finding_id: Optional[str]) -> None:
        self.selected_finding_id = finding_id

    def selected_finding(self) -> Optional[Finding]:
        if self.result is None or self.selected_finding_id is None:
            return None
        return self.result.finding_by_id(self.selected_finding_id)

    def rules_list(self) -> List[RuleListEntry]:
        return self.result.rules_list() if self.result is not None else []

    def visible_rules_list(self) -> List[RuleListEntry]:
        """Rules hit by the currently visible findings, with visible counts."""
        if self.result is None:
            return []
        return rules_list(self.filtered_findings(), self.result.rules)

    def files_list(self) -> List[Tuple[str, int]]:
        """Files hit by the currently visible findings, most-hit first."""
        return files_list(self.filtered_findings())
