from pathlib import Path

import pytest

from ingest.settings import Settings, load_settings
from sarif_insight.domain import FilterState


def _write_config(tmp_path: Path) -> Path:
    p = tmp_path / "sarif_insight.yaml"
    p.write_text(
        "settings:\n"
        "  max_file_bytes: 1024\n"
        "  progress_interval: 250\n"
        "  allowed_extensions: [.sarif]\n"
        "presets:\n"
        "  errors:\n"
        "    severity: [ERROR]\n"
        "  triage:\n"
        "    severity: [error, warning]\n"
        "    show_fixed: false\n",
        encoding="utf-8",
    )
    return p


def test_defaults_without_config_or_env() -> None:
    s = load_settings(env={})
    assert s == Settings()
    assert s.max_file_bytes == 50 * 1024 * 1024
    assert s.allowed_extensions == (".sarif", ".json")
    assert s.target_version == "2.1"


def test_yaml_config_and_presets(tmp_path: Path) -> None:
    s = load_settings(_write_config(tmp_path), env={})

    assert s.max_file_bytes == 1024
    assert s.progress_interval == 250
    assert s.allowed_extensions == (".sarif",)
    assert s.preset("errors") == FilterState.build(severities=["error"])
    assert s.preset("triage").show_fixed is False


def test_env_overrides_config(tmp_path: Path) -> None:
    env = {
        "SARIF_INSIGHT_CONFIG": str(_write_config(tmp_path)),
        "SARIF_INSIGHT_MAX_FILE_BYTES": "2048",
        "SARIF_INSIGHT_LOG_LEVEL": "debug",
        "SARIF_INSIGHT_ALLOWED_EXTENSIONS": ".sarif,.json,.txt",
    }
    s = load_settings(env=env)

    assert s.max_file_bytes == 2048
    assert s.progress_interval == 250
    assert s.log_level == "DEBUG"
    assert s.allowed_extensions == (".sarif", ".json", ".txt")


def test_unknown_preset_lists_known_ones(tmp_path: Path) -> None:
    s = load_settings(_write_config(tmp_path), env={})
    with pytest.raises(KeyError, match="errors, triage"):
        s.preset("nope")


def test_empty_config_file(tmp_path: Path) -> None:
    p = tmp_path / "empty.yaml"
    p.write_text("", encoding="utf-8")
    assert load_settings(p, env={}) == Settings()


def test_non_mapping_config_is_rejected(tmp_path: Path) -> None:
    p = tmp_path / "bad.yaml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_settings(p, env={})


def test_preset_with_unknown_severity_is_rejected(tmp_path: Path) -> None:
    p = tmp_path / "typo.yaml"
    p.write_text("presets:\n  typo:\n    severity: [crit]\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Unknown severity"):
        load_settings(p, env={})
