"""sarif_insight.io

Filesystem helpers shared by the engine and the CLI.
"""

from __future__ import annotations

from .fs import read_json, write_json_atomic, write_text_atomic

__all__ = [
    "read_json",
    "write_json_atomic",
    "write_text_atomic",
]
