"""ingest.transport

Request/response protocol between a caller and a background parse task.

Protocol
--------
The caller sends exactly one :class:`ParseRequest`. The task answers with
zero or more :class:`ParseProgress` messages (non-decreasing percentages)
followed by exactly one terminal message, :class:`ParseComplete` or
:class:`ParseFailed`. Nothing is sent after the terminal message.

Each message has ``to_dict()`` producing the wire shape::

    {"type": "PARSE_SARIF",    "payload": {"fileContent": ..., "fileName": ...}}
    {"type": "PARSE_PROGRESS", "payload": {"progress": 0..100, "stage": ...}}
    {"type": "PARSE_COMPLETE", "payload": {"report": ..., "summary": ..., "findings": [...]}}
    {"type": "PARSE_ERROR",    "payload": {"error": ..., "details": ...}}

Execution
---------
:func:`handle_request` runs the protocol in the current process.
:class:`ParseWorker` runs it in a child process so a large report does not
block the caller; :class:`ParseSlot` keeps at most one worker alive per
logical file, terminating the previous one before starting the next.
"""

from __future__ import annotations

import logging
import multiprocessing
import queue as queue_mod
import traceback
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Union

from sarif_insight.domain import ParseResult
from sarif_insight.errors import (
    InvalidSchema,
    MalformedInput,
    SarifInsightError,
    TransportFailure,
)

from .parse import parse_report_text
from .progress import DEFAULT_INTERVAL
from .validate import DEFAULT_TARGET_VERSION

logger = logging.getLogger(__name__)

PARSE_SARIF = "PARSE_SARIF"
PARSE_PROGRESS = "PARSE_PROGRESS"
PARSE_COMPLETE = "PARSE_COMPLETE"
PARSE_ERROR = "PARSE_ERROR"


@dataclass(frozen=True)
class ParseRequest:
    file_content: str
    file_name: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": PARSE_SARIF, "payload": {"fileContent": self.file_content, "fileName": self.file_name}}

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "ParseRequest":
        if not isinstance(d, Mapping) or d.get("type") != PARSE_SARIF:
            raise ValueError(f"not a {PARSE_SARIF} message")
        payload = d.get("payload") or {}
        return cls(
            file_content=str(payload.get("fileContent") or ""),
            file_name=str(payload.get("fileName") or ""),
        )


@dataclass(frozen=True)
class ParseProgress:
    progress: int
    stage: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": PARSE_PROGRESS, "payload": {"progress": self.progress, "stage": self.stage}}


@dataclass(frozen=True)
class ParseComplete:
    result: ParseResult

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": PARSE_COMPLETE,
            "payload": {
                "report": self.result.report.to_dict(),
                "summary": self.result.summary.to_dict(),
                "findings": [f.to_dict() for f in self.result.findings],
            },
        }


@dataclass(frozen=True)
class ParseFailed:
    error: str
    kind: str
    details: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.error}
        if self.details is not None:
            payload["details"] = self.details
        return {"type": PARSE_ERROR, "payload": payload}

    def to_exception(self) -> SarifInsightError:
        cls = _ERRORS_BY_KIND.get(self.kind, TransportFailure)
        if cls is InvalidSchema:
            err: SarifInsightError = InvalidSchema(message=self.error)
            err.details = self.details
            return err
        return cls(self.error, details=self.details)


Message = Union[ParseProgress, ParseComplete, ParseFailed]
Emit = Callable[[Message], None]

_ERRORS_BY_KIND = {
    MalformedInput.kind: MalformedInput,
    InvalidSchema.kind: InvalidSchema,
    TransportFailure.kind: TransportFailure,
}


def is_terminal(msg: Message) -> bool:
    return isinstance(msg, (ParseComplete, ParseFailed))


def handle_request(
    request: ParseRequest,
    emit: Emit,
    *,
    target_version: str = DEFAULT_TARGET_VERSION,
    progress_interval: int = DEFAULT_INTERVAL,
) -> Message:
    """Run one parse, emitting progress and exactly one terminal message.

    The terminal message is also returned.
    """

    def _on_progress(progress: int, stage: str) -> None:
        emit(ParseProgress(progress=progress, stage=stage))

    prefix = f'Failed to parse SARIF file "{request.file_name}": '
    terminal: Message
    try:
        result = parse_report_text(
            request.file_content,
            file_name=request.file_name,
            target_version=target_version,
            progress_interval=progress_interval,
            on_progress=_on_progress,
        )
        terminal = ParseComplete(result=result)
    except SarifInsightError as e:
        logger.info("parse of %s failed: %s", request.file_name, e.message)
        terminal = ParseFailed(error=prefix + e.message, kind=e.kind, details=e.details)
    except Exception as e:
        logger.exception("unexpected failure while parsing %s", request.file_name)
        terminal = ParseFailed(
            error=f"Worker error: {e}",
            kind=TransportFailure.kind,
            details=traceback.format_exc(limit=20),
        )
    emit(terminal)
    return terminal


def _worker_main(
    request_dict: Dict[str, Any],
    out: Any,
    target_version: str,
    progress_interval: int,
) -> None:
    """Child process entrypoint."""
    handle_request(
        ParseRequest.from_dict(request_dict),
        out.put,
        target_version=target_version,
        progress_interval=progress_interval,
    )


class ParseWorker:
    """One background parse in a child process.

    Iterate :meth:`messages` to receive the stream. If the child dies without
    sending a terminal message (killed, crashed interpreter), a
    ``TransportFailure`` :class:`ParseFailed` is synthesised so the stream
    still ends with exactly one terminal message.
    """

    def __init__(
        self,
        *,
        target_version: str = DEFAULT_TARGET_VERSION,
        progress_interval: int = DEFAULT_INTERVAL,
        poll_seconds: float = 0.5,
        mp_context: Any = None,
    ) -> None:
        self.target_version = target_version
        self.progress_interval = progress_interval
        self.poll_seconds = float(poll_seconds)
        self._ctx = mp_context or multiprocessing.get_context()
        self._queue: Any = None
        self._process: Any = None
        self._finished = False

    @property
    def started(self) -> bool:
        return self._process is not None

    @property
    def finished(self) -> bool:
        return self._finished

    def start(self, request: ParseRequest) -> None:
        if self._process is not None:
            raise RuntimeError("ParseWorker is one-shot; create a new worker per request")
        self._queue = self._ctx.Queue()
        self._process = self._ctx.Process(
            target=_worker_main,
            args=(request.to_dict(), self._queue, self.target_version, self.progress_interval),
            name=f"sarif-parse:{request.file_name}",
            daemon=True,
        )
        self._process.start()
        logger.debug("started parse worker pid=%s for %s", self._process.pid, request.file_name)

    def _drain(self) -> Iterator[Message]:
        while True:
            try:
                yield self._queue.get(timeout=0.1)
            except queue_mod.Empty:
                return

    def messages(self) -> Iterator[Message]:
        if self._process is None:
            raise RuntimeError("ParseWorker.start() has not been called")
        if self._finished:
            return

        while True:
            try:
                msg = self._queue.get(timeout=self.poll_seconds)
            except queue_mod.Empty:
                if self._process.is_alive():
                    continue
                # Child is gone; pick up anything it flushed before exiting.
                for late in self._drain():
                    yield late
                    if is_terminal(late):
                        self._close()
                        return
                exitcode = self._process.exitcode
                self._close()
                yield ParseFailed(
                    error=f"Worker error: parse process exited with code {exitcode}",
                    kind=TransportFailure.kind,
                )
                return

            yield msg
            if is_terminal(msg):
                self._close()
                return

    def run(
        self,
        request: ParseRequest,
        *,
        on_progress: Optional[Callable[[int, str], None]] = None,
    ) -> ParseResult:
        """Start, wait for the terminal message, and return or raise."""
        self.start(request)
        for msg in self.messages():
            if isinstance(msg, ParseProgress):
                if on_progress is not None:
                    on_progress(msg.progress, msg.stage)
            elif isinstance(msg, ParseComplete):
                return msg.result
            elif isinstance(msg, ParseFailed):
                raise msg.to_exception()
        raise TransportFailure("Worker error: no terminal message received")

    def terminate(self) -> None:
        """Kill the child; any in-progress state is discarded."""
        if self._process is not None and self._process.is_alive():
            logger.debug("terminating parse worker pid=%s", self._process.pid)
            self._process.terminate()
        self._close()

    def _close(self) -> None:
        self._finished = True
        if self._process is not None:
            self._process.join(timeout=5)
        if self._queue is not None:
            self._queue.close()
            self._queue.cancel_join_thread()


class ParseSlot:
    """At most one in-flight parse for one logical file."""

    def __init__(self, worker_factory: Callable[[], ParseWorker] = ParseWorker) -> None:
        self._factory = worker_factory
        self._current: Optional[ParseWorker] = None

    @property
    def current(self) -> Optional[ParseWorker]:
        return self._current

    def start(self, request: ParseRequest) -> ParseWorker:
        self.cancel()
        worker = self._factory()
        worker.start(request)
        self._current = worker
        return worker

    def cancel(self) -> None:
        if self._current is not None:
            self._current.terminate()
            self._current = None
