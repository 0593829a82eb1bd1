"""Small coercion helpers for reading loosely-typed SARIF JSON.

SARIF producers disagree on a lot of optional fields. These helpers turn
"wrong type" into "absent" so domain constructors never carry an untyped
value forward.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional


def as_dict(v: Any) -> Dict[str, Any]:
    return v if isinstance(v, dict) else {}


def as_list(v: Any) -> List[Any]:
    return v if isinstance(v, list) else []


def dict_items(v: Any) -> List[Dict[str, Any]]:
    """Return only the object entries of a JSON array."""
    return [x for x in as_list(v) if isinstance(x, dict)]


def opt_str(v: Any) -> Optional[str]:
    if isinstance(v, str) and v.strip():
        return v
    return None


def opt_int(v: Any) -> Optional[int]:
    # bool is a subclass of int; treat as invalid.
    if isinstance(v, bool) or not isinstance(v, int):
        return None
    return v


def message_text(v: Any) -> Optional[str]:
    """Read ``text`` from a SARIF message / multiformat string object."""
    if isinstance(v, Mapping):
        return opt_str(v.get("text"))
    return None


def message_markdown(v: Any) -> Optional[str]:
    if isinstance(v, Mapping):
        return opt_str(v.get("markdown"))
    return None
