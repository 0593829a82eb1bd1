"""ingest.progress

Progress checkpoints for a parse.

Checkpoints are best effort: fixed stage boundaries plus one update every
``interval`` results while walking findings. The tracker guarantees what the
caller relies on for a progress bar: values are integers in 0..100 and never
go backwards.
"""

from __future__ import annotations

from typing import Callable, Optional

ProgressCallback = Callable[[int, str], None]

# Stage checkpoints.
PARSING_JSON = (10, "Parsing JSON...")
VALIDATING = (20, "Validating SARIF structure...")
CALCULATING = (25, "Calculating statistics...")
ANALYZING_TOOLS = (30, "Analyzing tools...")
ANALYZING_RESULTS = (50, "Analyzing results...")
FINALIZING = (90, "Finalizing...")
COMPLETE = (100, "Complete")

# Results are walked between these two points.
RESULTS_START = 50
RESULTS_SPAN = 40

DEFAULT_INTERVAL = 1000


class ProgressTracker:
    def __init__(self, emit: Optional[ProgressCallback] = None, *, interval: int = DEFAULT_INTERVAL) -> None:
        self._emit = emit
        self.interval = max(1, int(interval))
        self.last = -1

    def report(self, progress: int, stage: str) -> None:
        p = min(100, max(0, int(progress)))
        if p < self.last:
            return
        self.last = p
        if self._emit is not None:
            self._emit(p, stage)

    def checkpoint(self, point: tuple) -> None:
        self.report(point[0], point[1])

    def on_result(self, done: int, total: int) -> None:
        """Result-walk callback for :func:`ingest.normalize.normalize_report`."""
        if total <= 0 or done % self.interval != 0:
            return
        p = RESULTS_START + (done * RESULTS_SPAN) // total
        self.report(p, f"Processing result {done + 1} of {total}...")
