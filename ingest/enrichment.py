"""ingest.enrichment

Attach CVE / CWE records to rules.

The engine does not look anything up over the network. It extracts candidate
identifiers from what a rule already carries (property bag, tags, help URI)
and asks an :class:`EnrichmentProvider` for records. The provider is supplied
by the caller; :class:`CatalogProvider` answers from an in-memory catalog,
either the small built-in one or one loaded from a YAML file::

    cwe:
      "79":
        name: Cross-site Scripting (XSS)
        description: ...
        weakness_type: Base
        references: [https://cwe.mitre.org/data/definitions/79.html]
    cve:
      CVE-2021-23337:
        description: ...
        severity: HIGH
        score: 7.2

Results are cached per ``(rule_id, help_uri)`` by :class:`EnrichmentService`;
a provider failure is logged and yields ``None`` for that rule.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Protocol

from sarif_insight.domain import Rule

logger = logging.getLogger(__name__)

_CWE_RE = re.compile(r"CWE-(\d+)", re.IGNORECASE)
_CVE_RE = re.compile(r"CVE-\d{4}-\d+", re.IGNORECASE)


@dataclass(frozen=True)
class CWEInfo:
    id: str
    name: str
    description: str
    weakness_type: str = ""
    references: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "weakness_type": self.weakness_type,
            "references": list(self.references),
        }


@dataclass(frozen=True)
class CVEInfo:
    id: str
    description: str
    severity: str = ""
    score: Optional[float] = None
    references: List[str] = field(default_factory=list)
    published_date: Optional[str] = None
    last_modified_date: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "severity": self.severity,
            "score": self.score,
            "references": list(self.references),
            "published_date": self.published_date,
            "last_modified_date": self.last_modified_date,
        }


@dataclass(frozen=True)
class VulnerabilityEnrichment:
    enrichment_date: str
    cwe: Optional[CWEInfo] = None
    cve: Optional[CVEInfo] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enrichment_date": self.enrichment_date,
            "cwe": self.cwe.to_dict() if self.cwe else None,
            "cve": self.cve.to_dict() if self.cve else None,
        }


def _candidate_strings(properties: Optional[Mapping[str, Any]], key: str) -> List[str]:
    out: List[str] = []
    props = properties if isinstance(properties, Mapping) else {}
    v = props.get(key)
    if isinstance(v, str):
        out.append(v)
    elif isinstance(v, list):
        out += [str(x) for x in v if isinstance(x, str)]
    tags = props.get("tags")
    if isinstance(tags, list):
        out += [str(t) for t in tags if isinstance(t, str)]
    return out


def extract_cwe_id(properties: Optional[Mapping[str, Any]], help_uri: Optional[str]) -> Optional[str]:
    """Return the numeric part of the first CWE id found, e.g. ``"79"``."""
    for s in _candidate_strings(properties, "cwe") + ([help_uri] if help_uri else []):
        m = _CWE_RE.search(s)
        if m:
            return m.group(1)
    return None


def extract_cve_id(properties: Optional[Mapping[str, Any]], help_uri: Optional[str]) -> Optional[str]:
    """Return the first CVE id found, upper-cased, e.g. ``"CVE-2021-23337"``."""
    for s in _candidate_strings(properties, "cve") + ([help_uri] if help_uri else []):
        m = _CVE_RE.search(s)
        if m:
            return m.group(0).upper()
    return None


class EnrichmentProvider(Protocol):
    def cwe(self, cwe_number: str) -> Optional[CWEInfo]: ...

    def cve(self, cve_id: str) -> Optional[CVEInfo]: ...


BUILTIN_CATALOG: Dict[str, Dict[str, Any]] = {
    "cwe": {
        "79": {
            "name": "Cross-site Scripting (XSS)",
            "description": (
                "The software does not neutralize or incorrectly neutralizes user-controllable input "
                "before it is placed in output that is used as a web page that is served to other users."
            ),
            "weakness_type": "Base",
            "references": [
                "https://cwe.mitre.org/data/definitions/79.html",
                "https://owasp.org/www-community/attacks/xss/",
            ],
        },
        "89": {
            "name": "Improper Neutralization of Special Elements used in an SQL Command (SQL Injection)",
            "description": (
                "The software constructs all or part of an SQL command using externally-influenced input, "
                "but it does not neutralize or incorrectly neutralizes special elements that could modify "
                "the intended SQL command."
            ),
            "weakness_type": "Base",
            "references": ["https://cwe.mitre.org/data/definitions/89.html"],
        },
        "1321": {
            "name": "Improperly Controlled Modification of Object Prototype Attributes (Prototype Pollution)",
            "description": (
                "The software receives input from an upstream component that specifies attributes that are "
                "to be initialized or updated in an object, but it does not properly control modifications "
                "of attributes of the object prototype."
            ),
            "weakness_type": "Base",
            "references": [
                "https://cwe.mitre.org/data/definitions/1321.html",
                "https://portswigger.net/web-security/prototype-pollution",
            ],
        },
    },
    "cve": {
        "CVE-2021-23337": {
            "description": (
                "Lodash versions prior to 4.17.21 are vulnerable to Command Injection via the template function."
            ),
            "severity": "HIGH",
            "score": 7.2,
            "references": [
                "https://nvd.nist.gov/vuln/detail/CVE-2021-23337",
                "https://security.snyk.io/vuln/SNYK-JS-LODASH-1040724",
            ],
            "published_date": "2021-02-15T13:15:00.000Z",
            "last_modified_date": "2021-03-01T18:32:00.000Z",
        },
    },
}


class CatalogProvider:
    """Answer lookups from an in-memory ``{"cwe": {...}, "cve": {...}}`` mapping."""

    def __init__(self, catalog: Optional[Mapping[str, Any]] = None) -> None:
        catalog = BUILTIN_CATALOG if catalog is None else catalog
        cwe = catalog.get("cwe") if isinstance(catalog, Mapping) else None
        cve = catalog.get("cve") if isinstance(catalog, Mapping) else None
        self._cwe: Dict[str, Mapping[str, Any]] = {str(k): v for k, v in (cwe or {}).items() if isinstance(v, Mapping)}
        self._cve: Dict[str, Mapping[str, Any]] = {str(k).upper(): v for k, v in (cve or {}).items() if isinstance(v, Mapping)}

    @classmethod
    def from_yaml(cls, path: Path) -> "CatalogProvider":
        import yaml  # type: ignore

        data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Enrichment catalog must be a mapping: {path}")
        return cls(data)

    def cwe(self, cwe_number: str) -> Optional[CWEInfo]:
        raw = self._cwe.get(str(cwe_number))
        if raw is None:
            return None
        return CWEInfo(
            id=f"CWE-{cwe_number}",
            name=str(raw.get("name") or ""),
            description=str(raw.get("description") or ""),
            weakness_type=str(raw.get("weakness_type") or ""),
            references=[str(x) for x in raw.get("references") or []],
        )

    def cve(self, cve_id: str) -> Optional[CVEInfo]:
        raw = self._cve.get(str(cve_id).upper())
        if raw is None:
            return None
        score = raw.get("score")
        return CVEInfo(
            id=str(cve_id).upper(),
            description=str(raw.get("description") or ""),
            severity=str(raw.get("severity") or ""),
            score=float(score) if isinstance(score, (int, float)) and not isinstance(score, bool) else None,
            references=[str(x) for x in raw.get("references") or []],
            published_date=raw.get("published_date"),
            last_modified_date=raw.get("last_modified_date"),
        )


class EnrichmentService:
    def __init__(self, provider: Optional[EnrichmentProvider] = None) -> None:
        self.provider: EnrichmentProvider = provider if provider is not None else CatalogProvider()
        self._cache: Dict[str, Optional[VulnerabilityEnrichment]] = {}

    def __len__(self) -> int:
        return len(self._cache)

    def enrich_rule(
        self,
        rule_id: str,
        help_uri: Optional[str] = None,
        properties: Optional[Mapping[str, Any]] = None,
    ) -> Optional[VulnerabilityEnrichment]:
        key = f"{rule_id}-{help_uri}"
        if key in self._cache:
            return self._cache[key]

        try:
            cwe_number = extract_cwe_id(properties, help_uri)
            cve_id = extract_cve_id(properties, help_uri)
            enrichment = VulnerabilityEnrichment(
                enrichment_date=datetime.now(timezone.utc).isoformat(),
                cwe=self.provider.cwe(cwe_number) if cwe_number else None,
                cve=self.provider.cve(cve_id) if cve_id else None,
            )
        except Exception as e:
            # Failed lookups are not cached; a later call may succeed.
            logger.warning("Failed to enrich rule %s: %s", rule_id, e)
            return None

        self._cache[key] = enrichment
        return enrichment

    def enrich_rules(self, rules: Mapping[str, Rule]) -> Dict[str, Optional[VulnerabilityEnrichment]]:
        return {
            rule_id: self.enrich_rule(rule_id, rule.help_uri, rule.properties)
            for rule_id, rule in rules.items()
        }
