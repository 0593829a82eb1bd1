"""ingest.stages

A small stage framework for the parse pipeline.

- **ParseContext (ctx)**: an immutable job packet (file name, knobs)
- **ScratchStore (store)**: an in-memory scratchpad shared by stages
- **Stages**: registered functions ``(ctx, store) -> None``
- :func:`run_stages`: runs an ordered list of stage names

Unlike a reporting pipeline, a parse cannot continue past a failed stage: the
first exception propagates to the caller, which turns it into exactly one
terminal error message.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from .progress import ProgressTracker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParseContext:
    file_name: str
    text: str = field(repr=False)
    target_version: str = "2.1"
    progress_interval: int = 1000


@dataclass
class ScratchStore:
    """Intermediate values for one parse. Discarded when the parse ends."""

    data: Dict[str, Any] = field(default_factory=dict)
    timings: Dict[str, float] = field(default_factory=dict)

    def put(self, key: str, value: Any) -> None:
        self.data[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def require(self, key: str) -> Any:
        if key not in self.data:
            raise KeyError(f"Required value missing from store: {key}")
        return self.data[key]


StageFunc = Callable[[ParseContext, ScratchStore, ProgressTracker], None]


@dataclass(frozen=True)
class StageDefinition:
    """A registered stage.

    ``requires`` / ``produces`` name store keys. They are checked before and
    after the stage runs so a mis-ordered pipeline fails loudly instead of
    producing an empty summary.
    """

    name: str
    func: StageFunc
    description: str = ""
    requires: Tuple[str, ...] = ()
    produces: Tuple[str, ...] = ()


_STAGES: Dict[str, StageDefinition] = {}


def register_stage(
    name: str,
    *,
    description: str = "",
    requires: Sequence[str] = (),
    produces: Sequence[str] = (),
):
    """Decorator to register a stage."""

    def _decorator(fn: StageFunc) -> StageFunc:
        _STAGES[name] = StageDefinition(
            name=name,
            func=fn,
            description=description,
            requires=tuple(requires),
            produces=tuple(produces),
        )
        return fn

    return _decorator


def get_stage(name: str) -> StageDefinition:
    if name not in _STAGES:
        raise KeyError(f"Unknown stage: {name}")
    return _STAGES[name]


def run_stages(
    ctx: ParseContext,
    *,
    stage_names: Sequence[str],
    tracker: ProgressTracker,
    store: Optional[ScratchStore] = None,
) -> ScratchStore:
    store = store if store is not None else ScratchStore()

    for sd in [get_stage(n) for n in stage_names]:
        missing = [k for k in sd.requires if k not in store.data]
        if missing:
            raise RuntimeError(f"stage '{sd.name}' missing required store keys: {missing}")

        t0 = time.perf_counter()
        sd.func(ctx, store, tracker)
        store.timings[sd.name] = time.perf_counter() - t0
        logger.debug("stage %s finished in %.3fs", sd.name, store.timings[sd.name])

        not_produced = [k for k in sd.produces if k not in store.data]
        if not_produced:
            raise RuntimeError(f"stage '{sd.name}' did not produce: {not_produced}")

    return store
