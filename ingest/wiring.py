"""ingest.wiring

This module is the **composition root** for the Python runtime: the single
place where the running application is assembled from its building blocks.

- load environment variables (``.env`` at the project root)
- configure logging
- read settings (defaults, YAML config, environment)
- choose the enrichment provider
- build the :class:`~ingest.analyzer.SarifAnalyzer` facade

Keeping this in one place prevents configuration from being duplicated across
entrypoints (CLI, scripts, notebooks, CI).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .analyzer import SarifAnalyzer
from .enrichment import CatalogProvider, EnrichmentService
from .settings import Settings, load_settings

ROOT_DIR: Path = Path(__file__).resolve().parents[1]
ENV_PATH: Path = ROOT_DIR / ".env"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def load_environment(dotenv_path: Path = ENV_PATH) -> bool:
    """Load ``.env`` into ``os.environ`` without overriding existing values."""
    if not Path(dotenv_path).exists():
        return False
    return bool(load_dotenv(dotenv_path, override=False))


def configure_logging(level: str = "WARNING") -> None:
    numeric = logging.getLevelName(str(level).upper())
    if not isinstance(numeric, int):
        numeric = logging.WARNING
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
    logging.getLogger().setLevel(numeric)


def build_analyzer(
    *,
    settings: Optional[Settings] = None,
    config_path: Optional[Path] = None,
    catalog_path: Optional[Path] = None,
    load_env: bool = True,
    log_level: Optional[str] = None,
) -> SarifAnalyzer:
    if load_env:
        load_environment(ENV_PATH)

    if settings is None:
        settings = load_settings(config_path)

    configure_logging(log_level or settings.log_level)

    provider = CatalogProvider.from_yaml(catalog_path) if catalog_path else CatalogProvider()
    return SarifAnalyzer(settings=settings, enrichment=EnrichmentService(provider))
