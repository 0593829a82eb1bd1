"""sarif_insight.domain.severity

The closed severity vocabulary used across summaries and filters.

SARIF ``level`` allows ``none | note | warning | error`` and some producers
also emit ``info``. Findings carry exactly one of :data:`SEVERITIES`:

- missing level -> ``warning`` (the SARIF default)
- ``none`` -> ``note`` (both sit in the lowest band)
- anything unrecognised -> ``warning``
"""

from __future__ import annotations

from typing import Any, Tuple

ERROR = "error"
WARNING = "warning"
NOTE = "note"
INFO = "info"

# Highest first; summaries and text reports use this order.
SEVERITIES: Tuple[str, ...] = (ERROR, WARNING, NOTE, INFO)

DEFAULT_SEVERITY = WARNING

_ALIASES = {"none": NOTE}


def normalize_severity(level: Any) -> str:
    if not isinstance(level, str) or not level.strip():
        return DEFAULT_SEVERITY
    lvl = level.strip().lower()
    if lvl in SEVERITIES:
        return lvl
    return _ALIASES.get(lvl, DEFAULT_SEVERITY)


def parse_severity(value: Any) -> str:
    """Strict form of :func:`normalize_severity` for user-supplied filter values.

    Accepts the four severities and the SARIF ``none`` alias, case-insensitive;
    raises ``ValueError`` for anything else.
    """
    lvl = str(value).strip().lower() if value is not None else ""
    if lvl in SEVERITIES:
        return lvl
    if lvl in _ALIASES:
        return _ALIASES[lvl]
    raise ValueError(f"Unknown severity: {value!r}. Expected one of: {', '.join(SEVERITIES)}")


def severity_rank(sev: Any) -> int:
    s = str(sev or "").strip().lower()
    if s == ERROR:
        return 4
    if s == WARNING:
        return 3
    if s == NOTE:
        return 2
    if s == INFO:
        return 1
    return 0
