"""sarif_insight.io.fs

Atomic writers for exported analytics and a reader for report files.

Exports (summary JSON, filtered findings) are written via a temp file and
``os.replace`` so an interrupted export never leaves a half-written file that
a later run would try to read back.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, IO


def _atomic_write(path: Path, write_fn: Callable[[IO[str]], None], *, encoding: str = "utf-8") -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f"{p.name}.", suffix=".tmp", dir=str(p.parent))
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "w", encoding=encoding) as f:
            write_fn(f)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, p)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()


def write_text_atomic(path: Path, text: str, *, encoding: str = "utf-8") -> None:
    """Write text atomically."""

    def _write(f: IO[str]) -> None:
        f.write(text)

    _atomic_write(Path(path), _write, encoding=encoding)


def write_json_atomic(
    path: Path,
    data: Any,
    *,
    indent: int = 2,
    sort_keys: bool = False,
    ensure_ascii: bool = False,
) -> None:
    """Write JSON atomically.

    Key order is preserved by default: severity and rule breakdowns are
    emitted in a meaningful order (severity rank, first occurrence).
    """

    def _write(f: IO[str]) -> None:
        json.dump(data, f, indent=indent, sort_keys=sort_keys, ensure_ascii=ensure_ascii)
        f.write("\n")

    _atomic_write(Path(path), _write)


def read_json(path: Path, *, encoding: str = "utf-8") -> Any:
    with Path(path).open("r", encoding=encoding) as f:
        return json.load(f)


def read_report_text(path: Path) -> str:
    """Read a report file as text.

    ``utf-8-sig`` strips the byte order mark some Windows tools prepend to
    their SARIF output; ``json.loads`` rejects it otherwise.
    """
    return Path(path).read_text(encoding="utf-8-sig")
