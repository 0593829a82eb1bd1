"""ingest.analyzer

A single, high-level object in front of the engine.

Callers (the CLI, scripts, notebooks) should not have to wire the upload
check, the worker slot, the message loop and the state container themselves.
:class:`SarifAnalyzer` does that and exposes a small API:

- ``load(path)``: check, read and parse a report; the result lands in
  ``analyzer.state``
- ``findings(...)``: the currently visible findings under the state's filters
- ``enrich_rules()``: enrichment records for the current rule directory

Build one via :func:`ingest.wiring.build_analyzer`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional

from sarif_insight.domain import Finding, ParseResult
from sarif_insight.io.fs import read_report_text

from .enrichment import EnrichmentService, VulnerabilityEnrichment
from .settings import Settings
from .state import AnalyzerState
from .transport import (
    Message,
    ParseComplete,
    ParseFailed,
    ParseRequest,
    ParseSlot,
    ParseWorker,
    handle_request,
)
from .upload import check_upload_path

logger = logging.getLogger(__name__)

ProgressFn = Callable[[int, str], None]


class SarifAnalyzer:
    def __init__(
        self,
        *,
        settings: Optional[Settings] = None,
        state: Optional[AnalyzerState] = None,
        enrichment: Optional[EnrichmentService] = None,
        slot: Optional[ParseSlot] = None,
    ) -> None:
        self.settings = settings or Settings()
        self.state = state if state is not None else AnalyzerState()
        self.enrichment = enrichment if enrichment is not None else EnrichmentService()
        self.slot = slot if slot is not None else ParseSlot(self._new_worker)

    def _new_worker(self) -> ParseWorker:
        return ParseWorker(
            target_version=self.settings.target_version,
            progress_interval=self.settings.progress_interval,
            poll_seconds=self.settings.worker_poll_seconds,
        )

    def _apply(self, msg: Message, on_progress: Optional[ProgressFn]) -> None:
        self.state.apply_message(msg)
        if on_progress is not None and not isinstance(msg, (ParseComplete, ParseFailed)):
            on_progress(self.state.progress, self.state.stage)

    def load(
        self,
        path: Path,
        *,
        on_progress: Optional[ProgressFn] = None,
        in_process: bool = False,
    ) -> ParseResult:
        """Parse *path* and make it the current result.

        Raises ``UploadRejected`` before any parsing, or the parse error
        carried by the terminal message.
        """
        p = Path(path)
        check_upload_path(
            p,
            max_bytes=self.settings.max_file_bytes,
            extensions=self.settings.allowed_extensions,
        )
        request = ParseRequest(file_content=read_report_text(p), file_name=p.name)
        return self.parse(request, on_progress=on_progress, in_process=in_process)

    def parse(
        self,
        request: ParseRequest,
        *,
        on_progress: Optional[ProgressFn] = None,
        in_process: bool = False,
    ) -> ParseResult:
        self.state.begin_parse()

        if in_process:
            terminal = handle_request(
                request,
                lambda m: self._apply(m, on_progress),
                target_version=self.settings.target_version,
                progress_interval=self.settings.progress_interval,
            )
        else:
            worker = self.slot.start(request)
            terminal = None
            for msg in worker.messages():
                self._apply(msg, on_progress)
                terminal = msg

        if isinstance(terminal, ParseComplete):
            for w in terminal.result.warnings:
                logger.warning("%s: %s", request.file_name, w.message)
            return terminal.result
        if isinstance(terminal, ParseFailed):
            raise terminal.to_exception()
        raise RuntimeError("parse ended without a terminal message")

    def cancel(self) -> None:
        self.slot.cancel()
        self.state.is_loading = False

    def findings(self) -> List[Finding]:
        return self.state.filtered_findings()

    def enrich_rules(self) -> Dict[str, Optional[VulnerabilityEnrichment]]:
        if self.state.result is None:
            return {}
        return self.enrichment.enrich_rules(self.state.result.rules)
