"""sarif_insight.errors

Error taxonomy for report ingestion.

Every failure that terminates a parse is a :class:`SarifInsightError`
subclass. The ``kind`` attribute is the stable name used on the wire (see
:mod:`ingest.transport`), so callers can branch on it without importing the
classes.

A version mismatch is *not* an error: it is a :class:`VersionMismatch` record
returned next to the parse result and logged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

INVALID_SCHEMA_MESSAGE = "Invalid SARIF format. Expected a valid SARIF 2.1.0 log file."


class SarifInsightError(Exception):
    """Base class for errors that terminate a parse."""

    kind: str = "SarifInsightError"

    def __init__(self, message: str, *, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class MalformedInput(SarifInsightError):
    """The input text is not valid JSON (or is empty)."""

    kind = "MalformedInput"


class InvalidSchema(SarifInsightError):
    """The input decodes but lacks the minimal SARIF shape."""

    kind = "InvalidSchema"

    def __init__(self, problems: Sequence[str] = (), *, message: str = INVALID_SCHEMA_MESSAGE) -> None:
        self.problems: List[str] = [str(p) for p in problems]
        details = "; ".join(self.problems) if self.problems else None
        super().__init__(message, details=details)


class TransportFailure(SarifInsightError):
    """The background parse task crashed, was killed, or went silent."""

    kind = "TransportFailure"


class UploadRejected(SarifInsightError):
    """Caller-side input check failed; the file never reaches the engine."""

    kind = "UploadRejected"


@dataclass(frozen=True)
class VersionMismatch:
    """Non-fatal: the report's major.minor differs from the targeted version."""

    found: str
    expected: str

    @property
    def message(self) -> str:
        return f"SARIF version {self.found} may not be fully compatible. Expected {self.expected}.x"

    def to_dict(self) -> dict:
        return {"kind": "VersionMismatch", "found": self.found, "expected": self.expected, "message": self.message}
