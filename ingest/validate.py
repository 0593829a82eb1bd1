"""ingest.validate

Decode and shape-check a report before any aggregation.

The check is deliberately minimal: a ``version`` string, a ``runs`` array,
and a ``tool.driver.name`` string on every run. Everything else in SARIF is
optional as far as the engine is concerned and degrades to defaults in the
normalizer.
"""

from __future__ import annotations

import json
import logging
from typing import Any, List, Optional

from sarif_insight.errors import InvalidSchema, MalformedInput, VersionMismatch

logger = logging.getLogger(__name__)

DEFAULT_TARGET_VERSION = "2.1"


def decode_report_text(text: Optional[str]) -> Any:
    """Decode JSON text, mapping decoder failures to :class:`MalformedInput`."""
    if not text:
        raise MalformedInput("No file content provided")
    try:
        return json.loads(text)
    except (json.JSONDecodeError, RecursionError) as e:
        # Pathologically deep nesting exhausts the decoder's recursion limit.
        raise MalformedInput(f"Invalid JSON format: {e}") from e


def schema_problems(doc: Any) -> List[str]:
    """Return a list of human-readable shape problems (empty when valid)."""
    if not isinstance(doc, dict):
        return ["not_an_object"]

    problems: List[str] = []
    if not isinstance(doc.get("version"), str):
        problems.append("version")

    runs = doc.get("runs")
    if not isinstance(runs, list):
        problems.append("runs")
        return problems

    for i, run in enumerate(runs):
        if not isinstance(run, dict):
            problems.append(f"runs[{i}]")
            continue
        tool = run.get("tool")
        if not isinstance(tool, dict):
            problems.append(f"runs[{i}].tool")
            continue
        driver = tool.get("driver")
        if not isinstance(driver, dict):
            problems.append(f"runs[{i}].tool.driver")
            continue
        if not isinstance(driver.get("name"), str):
            problems.append(f"runs[{i}].tool.driver.name")
    return problems


def major_minor(version: str) -> str:
    parts = str(version).strip().split(".")
    return ".".join(parts[:2])


def check_version(version: str, *, target_version: str = DEFAULT_TARGET_VERSION) -> Optional[VersionMismatch]:
    if major_minor(version) == major_minor(target_version):
        return None
    return VersionMismatch(found=str(version), expected=major_minor(target_version))


def validate_report(doc: Any, *, target_version: str = DEFAULT_TARGET_VERSION) -> List[VersionMismatch]:
    """Raise :class:`InvalidSchema` for a malformed document.

    Returns non-fatal version warnings; they are also logged here.
    """
    problems = schema_problems(doc)
    if problems:
        raise InvalidSchema(problems)

    warnings: List[VersionMismatch] = []
    mismatch = check_version(doc["version"], target_version=target_version)
    if mismatch is not None:
        logger.warning(mismatch.message)
        warnings.append(mismatch)
    return warnings
