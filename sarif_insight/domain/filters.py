"""sarif_insight.domain.filters

The caller-held filter state.

The engine never owns a :class:`FilterState`; callers keep one (usually in
:class:`ingest.state.AnalyzerState`) and pass it to
:func:`ingest.filters.filter_findings` whenever it changes.

Defaults mean "no restriction" everywhere except the two visibility toggles:
suppressed findings are hidden, fixable findings are shown. A report with no
suppressions therefore passes through the default state unchanged;
:meth:`FilterState.unrestricted` also lets suppressed findings through.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, Mapping

from .severity import parse_severity


def _as_frozenset(v: Any) -> FrozenSet[str]:
    if v is None:
        return frozenset()
    if isinstance(v, str):
        v = [v]
    if isinstance(v, Mapping):
        return frozenset()
    try:
        items = list(v)
    except TypeError:
        return frozenset()
    return frozenset(str(x) for x in items if x is not None and str(x).strip())


@dataclass(frozen=True)
class FilterState:
    severities: FrozenSet[str] = frozenset()
    rule_ids: FrozenSet[str] = frozenset()
    files: FrozenSet[str] = frozenset()
    file_pattern: str = ""
    search: str = ""
    show_suppressed: bool = False
    show_fixed: bool = True

    @classmethod
    def build(
        cls,
        *,
        severities: Iterable[str] | None = None,
        rule_ids: Iterable[str] | None = None,
        files: Iterable[str] | None = None,
        file_pattern: str = "",
        search: str = "",
        show_suppressed: bool = False,
        show_fixed: bool = True,
    ) -> "FilterState":
        """Build from loose inputs (CLI flags, YAML presets).

        Raises ``ValueError`` for an unknown severity.
        """
        return cls(
            severities=frozenset(parse_severity(s) for s in _as_frozenset(severities)),
            rule_ids=_as_frozenset(rule_ids),
            files=_as_frozenset(files),
            file_pattern=str(file_pattern or ""),
            search=str(search or ""),
            show_suppressed=bool(show_suppressed),
            show_fixed=bool(show_fixed),
        )

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "FilterState":
        if not isinstance(d, Mapping):
            return cls()
        return cls.build(
            severities=_as_frozenset(d.get("severity", d.get("severities"))),
            rule_ids=_as_frozenset(d.get("rule_ids", d.get("rules"))),
            files=_as_frozenset(d.get("files")),
            file_pattern=str(d.get("file_pattern") or ""),
            search=str(d.get("search") or ""),
            show_suppressed=bool(d.get("show_suppressed", False)),
            show_fixed=bool(d.get("show_fixed", True)),
        )

    @classmethod
    def unrestricted(cls) -> "FilterState":
        """A state that lets every finding through, suppressed ones included."""
        return cls(show_suppressed=True)

    def replace(self, **changes: Any) -> "FilterState":
        return dataclasses.replace(self, **changes)

    def is_default(self) -> bool:
        return self == FilterState()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "severity": sorted(self.severities),
            "rule_ids": sorted(self.rule_ids),
            "files": sorted(self.files),
            "file_pattern": self.file_pattern,
            "search": self.search,
            "show_suppressed": self.show_suppressed,
            "show_fixed": self.show_fixed,
        }
