"""ingest.registry

Rule catalog merged across runs.

Two views are maintained:

- a **run-scoped** mapping ``(run_index, rule_id) -> Rule``. Findings always
  resolve against their own run, so two tools that happen to reuse an id keep
  their own descriptions.
- a **merged directory** ``rule_id -> Rule`` for views that list rules across
  the whole report. The first *declared* definition of an id wins; a
  placeholder (an id seen only on findings) is replaced when a later run
  declares the id properly.

Closure property: after normalization every rule id referenced by a finding
has an entry in both views.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from sarif_insight.domain import Rule
from sarif_insight.domain._coerce import dict_items

logger = logging.getLogger(__name__)


class RuleRegistry:
    def __init__(self) -> None:
        self._scoped: Dict[Tuple[int, str], Rule] = {}
        self._merged: Dict[str, Rule] = {}
        self._tool_names: Dict[int, str] = {}

    def __len__(self) -> int:
        return len(self._merged)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._merged

    def register_run(self, run_index: int, driver: Mapping[str, Any]) -> int:
        """Register every rule the driver declares. Returns the number added."""
        tool_name = str(driver.get("name"))
        self._tool_names[run_index] = tool_name

        added = 0
        for raw in dict_items(driver.get("rules")):
            rule_id = raw.get("id")
            if not isinstance(rule_id, str) or not rule_id:
                continue
            rule = Rule.from_sarif(raw, tool_name=tool_name, run_index=run_index)
            # Within one run a duplicated id keeps its first declaration.
            if (run_index, rule_id) in self._scoped:
                continue
            self._scoped[(run_index, rule_id)] = rule
            self._merge(rule)
            added += 1
        return added

    def _merge(self, rule: Rule) -> None:
        existing = self._merged.get(rule.id)
        if existing is None:
            self._merged[rule.id] = rule
            return
        if existing.placeholder and not rule.placeholder:
            self._merged[rule.id] = rule
            return
        if not rule.placeholder and existing.run_index != rule.run_index:
            logger.debug(
                "rule %s declared again by %s (run %d); keeping definition from %s (run %d)",
                rule.id,
                rule.tool_name,
                rule.run_index,
                existing.tool_name,
                existing.run_index,
            )

    def get(self, run_index: int, rule_id: str) -> Optional[Rule]:
        return self._scoped.get((run_index, rule_id))

    def resolve(self, run_index: int, rule_id: str) -> Rule:
        """Return the run's rule for *rule_id*, creating a placeholder if needed."""
        rule = self._scoped.get((run_index, rule_id))
        if rule is not None:
            return rule
        rule = Rule.make_placeholder(
            rule_id,
            tool_name=self._tool_names.get(run_index, ""),
            run_index=run_index,
        )
        self._scoped[(run_index, rule_id)] = rule
        self._merge(rule)
        return rule

    def merged(self) -> Dict[str, Rule]:
        return dict(self._merged)

    def for_run(self, run_index: int) -> Dict[str, Rule]:
        return {rid: r for (ri, rid), r in self._scoped.items() if ri == run_index}
