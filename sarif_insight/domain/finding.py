"""sarif_insight.domain.finding

Normalized finding and its locations.

Why dataclasses instead of the raw SARIF dicts?
-----------------------------------------------
A SARIF ``result`` has dozens of optional, loosely-typed fields. Passing the
raw dicts around means every consumer re-implements the same defaults
(``level`` missing, ``ruleId`` missing, ``locations`` null) and they drift.
A :class:`Finding` is built once by the normalizer with those defaults
applied, and is never mutated afterwards.

Lists copied from the source (fixes, suppressions) are kept as tuples of the
verbatim JSON objects: the engine only needs to know whether they are empty,
and detail views want the full object.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ._coerce import as_dict, message_text, opt_int, opt_str
from .rule import Rule

UNKNOWN_RULE_ID = "unknown"


@dataclass(frozen=True)
class Region:
    start_line: Optional[int] = None
    start_column: Optional[int] = None
    end_line: Optional[int] = None
    end_column: Optional[int] = None
    snippet: Optional[str] = None

    @classmethod
    def from_sarif(cls, d: Mapping[str, Any]) -> "Region":
        return cls(
            start_line=opt_int(d.get("startLine")),
            start_column=opt_int(d.get("startColumn")),
            end_line=opt_int(d.get("endLine")),
            end_column=opt_int(d.get("endColumn")),
            snippet=opt_str(as_dict(d.get("snippet")).get("text")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start_line": self.start_line,
            "start_column": self.start_column,
            "end_line": self.end_line,
            "end_column": self.end_column,
            "snippet": self.snippet,
        }


@dataclass(frozen=True)
class Location:
    """A read-only projection of a SARIF ``location`` object.

    The URI is taken as-is; nothing checks that it resolves to a file.
    """

    uri: Optional[str] = None
    region: Optional[Region] = None
    message: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_sarif(cls, d: Mapping[str, Any]) -> "Location":
        phys = as_dict(d.get("physicalLocation"))
        artifact = as_dict(phys.get("artifactLocation"))
        region = phys.get("region")
        return cls(
            uri=opt_str(artifact.get("uri")),
            region=Region.from_sarif(region) if isinstance(region, dict) else None,
            message=message_text(d.get("message")),
            raw=dict(d),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "uri": self.uri,
            "region": self.region.to_dict() if self.region else None,
            "message": self.message,
        }


@dataclass(frozen=True)
class Finding:
    """One normalized SARIF result.

    ``id`` is ``"{run_index}-{result_index}"``: unique within one parsed
    document and identical across re-parses of the same bytes.
    """

    id: str
    run_index: int
    result_index: int

    rule_id: str
    severity: str
    message: str

    message_markdown: Optional[str] = None
    locations: Tuple[Location, ...] = ()
    related_locations: Tuple[Location, ...] = ()
    fixes: Tuple[Dict[str, Any], ...] = ()
    suppressions: Tuple[Dict[str, Any], ...] = ()

    rule: Optional[Rule] = field(default=None, compare=False)

    @staticmethod
    def make_id(run_index: int, result_index: int) -> str:
        return f"{run_index}-{result_index}"

    @property
    def is_fixable(self) -> bool:
        return bool(self.fixes)

    @property
    def is_suppressed(self) -> bool:
        return bool(self.suppressions)

    @property
    def uris(self) -> List[str]:
        return [loc.uri for loc in self.locations if loc.uri]

    @property
    def primary_uri(self) -> Optional[str]:
        uris = self.uris
        return uris[0] if uris else None

    @property
    def primary_line(self) -> Optional[int]:
        for loc in self.locations:
            if loc.region and loc.region.start_line is not None:
                return loc.region.start_line
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "run_index": self.run_index,
            "result_index": self.result_index,
            "rule_id": self.rule_id,
            "severity": self.severity,
            "message": self.message,
            "message_markdown": self.message_markdown,
            "locations": [loc.to_dict() for loc in self.locations],
            "related_locations": [loc.to_dict() for loc in self.related_locations],
            "fixes": list(self.fixes),
            "suppressions": list(self.suppressions),
        }
