"""ingest.settings

Runtime knobs for the engine and the CLI.

Precedence, lowest to highest:

1. defaults in :class:`Settings`
2. a YAML config file (``settings:`` and ``presets:`` blocks)
3. ``SARIF_INSIGHT_*`` environment variables

The ``.env`` file is loaded into the environment by
:func:`ingest.wiring.load_environment` before this module reads it.

Example config::

    settings:
      max_file_bytes: 104857600
      progress_interval: 500
    presets:
      errors:
        severity: [error]
      triage:
        severity: [error, warning]
        show_fixed: false
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from sarif_insight.domain import FilterState

from .progress import DEFAULT_INTERVAL
from .upload import DEFAULT_EXTENSIONS, DEFAULT_MAX_FILE_BYTES
from .validate import DEFAULT_TARGET_VERSION

ENV_PREFIX = "SARIF_INSIGHT_"


@dataclass(frozen=True)
class Settings:
    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES
    allowed_extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    target_version: str = DEFAULT_TARGET_VERSION
    progress_interval: int = DEFAULT_INTERVAL
    log_level: str = "WARNING"
    worker_poll_seconds: float = 0.5
    presets: Mapping[str, FilterState] = field(default_factory=dict)

    def preset(self, name: str) -> FilterState:
        if name not in self.presets:
            known = ", ".join(sorted(self.presets)) or "(none)"
            raise KeyError(f"Unknown filter preset: {name}. Known presets: {known}")
        return self.presets[name]


def _coerce_block(raw: Mapping[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if "max_file_bytes" in raw:
        out["max_file_bytes"] = int(raw["max_file_bytes"])
    if "allowed_extensions" in raw:
        exts = raw["allowed_extensions"]
        if isinstance(exts, str):
            exts = exts.split(",")
        out["allowed_extensions"] = tuple(str(e).strip() for e in exts if str(e).strip())
    if "target_version" in raw:
        out["target_version"] = str(raw["target_version"])
    if "progress_interval" in raw:
        out["progress_interval"] = max(1, int(raw["progress_interval"]))
    if "log_level" in raw:
        out["log_level"] = str(raw["log_level"]).upper()
    if "worker_poll_seconds" in raw:
        out["worker_poll_seconds"] = float(raw["worker_poll_seconds"])
    return out


def load_config_file(path: Path) -> Dict[str, Any]:
    """Load a YAML config file. Returns ``{}`` for an empty file."""
    import yaml  # type: ignore

    p = Path(path)
    data = yaml.safe_load(p.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping at the top level: {p}")
    return data


def _env_block(env: Mapping[str, str]) -> Dict[str, Any]:
    raw: Dict[str, Any] = {}
    for key in (
        "max_file_bytes",
        "allowed_extensions",
        "target_version",
        "progress_interval",
        "log_level",
        "worker_poll_seconds",
    ):
        v = env.get(ENV_PREFIX + key.upper())
        if v is not None and v.strip():
            raw[key] = v.strip()
    return _coerce_block(raw)


def load_settings(
    config_path: Optional[Path] = None,
    *,
    env: Optional[Mapping[str, str]] = None,
) -> Settings:
    env = os.environ if env is None else env
    settings = Settings()

    if config_path is None and env.get(ENV_PREFIX + "CONFIG"):
        config_path = Path(env[ENV_PREFIX + "CONFIG"])

    if config_path is not None:
        data = load_config_file(Path(config_path))
        block = data.get("settings") or {}
        if isinstance(block, dict):
            settings = replace(settings, **_coerce_block(block))
        presets = data.get("presets") or {}
        if isinstance(presets, dict):
            settings = replace(
                settings,
                presets={str(k): FilterState.from_dict(v or {}) for k, v in presets.items()},
            )

    return replace(settings, **_env_block(env))
