"""sarif_insight.domain.rule

Canonical rule catalog entry (SARIF ``reportingDescriptor``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from ._coerce import as_dict, message_markdown, message_text, opt_str
from .severity import SEVERITIES


@dataclass(frozen=True)
class Rule:
    """One rule, tagged with the tool and run that declared it.

    ``placeholder`` is True for entries synthesised because a finding
    referenced an id the tool's driver never declared. Display layers rely on
    every referenced id having *some* entry.
    """

    id: str
    tool_name: str
    run_index: int

    name: Optional[str] = None
    short_description: Optional[str] = None
    full_description: Optional[str] = None
    help_text: Optional[str] = None
    help_markdown: Optional[str] = None
    help_uri: Optional[str] = None
    default_level: Optional[str] = None
    properties: Dict[str, Any] = field(default_factory=dict)

    placeholder: bool = False

    @classmethod
    def from_sarif(cls, d: Mapping[str, Any], *, tool_name: str, run_index: int) -> "Rule":
        help_obj = d.get("help")
        level = as_dict(d.get("defaultConfiguration")).get("level")
        return cls(
            id=str(d["id"]),
            tool_name=tool_name,
            run_index=run_index,
            name=opt_str(d.get("name")),
            short_description=message_text(d.get("shortDescription")),
            full_description=message_text(d.get("fullDescription")),
            help_text=message_text(help_obj),
            help_markdown=message_markdown(help_obj),
            help_uri=opt_str(d.get("helpUri")),
            default_level=level if level in SEVERITIES else None,
            properties=dict(as_dict(d.get("properties"))),
        )

    @classmethod
    def make_placeholder(cls, rule_id: str, *, tool_name: str, run_index: int) -> "Rule":
        return cls(id=rule_id, tool_name=tool_name, run_index=run_index, placeholder=True)

    @property
    def display_name(self) -> str:
        return self.name or self.short_description or self.id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "short_description": self.short_description,
            "full_description": self.full_description,
            "help_text": self.help_text,
            "help_markdown": self.help_markdown,
            "help_uri": self.help_uri,
            "default_level": self.default_level,
            "properties": dict(self.properties),
            "tool_name": self.tool_name,
            "run_index": self.run_index,
            "placeholder": self.placeholder,
        }
