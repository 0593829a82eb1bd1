from __future__ import annotations

import sys
from typing import Optional, TextIO


class ProgressPrinter:
    """Render worker progress on stderr, one line per stage change.

    Result-walk updates ("Processing result N of M...") change the stage on
    every tick, so they are rewritten in place instead of scrolling.
    """

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream or sys.stderr
        self._last_stage = ""
        self._inline = False

    def __call__(self, progress: int, stage: str) -> None:
        if stage == self._last_stage:
            return
        line = f"[{progress:3d}%] {stage}"
        if stage.startswith("Processing result"):
            self.stream.write("\r" + line)
            self._inline = True
        else:
            if self._inline:
                self.stream.write("\n")
                self._inline = False
            self.stream.write(line + "\n")
        self.stream.flush()
        self._last_stage = stage

    def done(self) -> None:
        if self._inline:
            self.stream.write("\n")
            self._inline = False
        self.stream.flush()


def print_error(message: str, *, details: Optional[str] = None, stream: Optional[TextIO] = None) -> None:
    out = stream or sys.stderr
    out.write(f"❌ {message}\n")
    if details:
        out.write(f"   {details}\n")
