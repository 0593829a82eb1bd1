"""ingest.upload

Caller-side checks applied before a file is ever handed to a worker.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from sarif_insight.errors import UploadRejected

DEFAULT_MAX_FILE_BYTES = 50 * 1024 * 1024
DEFAULT_EXTENSIONS = (".sarif", ".json")


def _format_mb(n: int) -> str:
    mb = n / (1024 * 1024)
    return f"{mb:g}MB"


def check_upload(
    file_name: str,
    size: int,
    *,
    max_bytes: int = DEFAULT_MAX_FILE_BYTES,
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
) -> None:
    """Raise :class:`UploadRejected` with a user-facing message."""
    name = str(file_name or "").lower()
    if not any(name.endswith(ext.lower()) for ext in extensions):
        choices = " or ".join(extensions)
        raise UploadRejected(f"Please select a {choices} file")
    if int(size) > int(max_bytes):
        raise UploadRejected(f"File is too large. Maximum size is {_format_mb(int(max_bytes))}.")


def check_upload_path(
    path: Path,
    *,
    max_bytes: int = DEFAULT_MAX_FILE_BYTES,
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
) -> None:
    p = Path(path)
    if not p.is_file():
        raise UploadRejected(f"File not found: {p}")
    check_upload(p.name, p.stat().st_size, max_bytes=max_bytes, extensions=extensions)
