"""sarif_insight.domain.report

Report-level metadata: the document version and its runs.

Raw results are not kept here; they live on as :class:`~.finding.Finding`
objects. A run's identity is its position in the document's ``runs`` array.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from ._coerce import as_list, opt_str


@dataclass(frozen=True)
class Tool:
    name: str
    version: Optional[str] = None
    information_uri: Optional[str] = None
    rule_count: int = 0

    @classmethod
    def from_driver(cls, driver: Mapping[str, Any]) -> "Tool":
        return cls(
            name=str(driver.get("name")),
            version=opt_str(driver.get("version")) or opt_str(driver.get("semanticVersion")),
            information_uri=opt_str(driver.get("informationUri")),
            rule_count=len(as_list(driver.get("rules"))),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "information_uri": self.information_uri,
            "rule_count": self.rule_count,
        }


@dataclass(frozen=True)
class Run:
    run_index: int
    tool: Tool
    result_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_index": self.run_index,
            "tool": self.tool.to_dict(),
            "result_count": self.result_count,
        }


@dataclass(frozen=True)
class Report:
    version: str
    runs: Tuple[Run, ...] = ()
    schema_uri: Optional[str] = None
    file_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "schema_uri": self.schema_uri,
            "file_name": self.file_name,
            "runs": [r.to_dict() for r in self.runs],
        }
