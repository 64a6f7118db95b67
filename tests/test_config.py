from __future__ import annotations

import json
from pathlib import Path

import pytest

from tempo_sync import ConfigError, load_config


def _write(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_load_config_resolves_source_path_against_config_dir(tmp_path: Path) -> None:
    config_dir = tmp_path / "conf"
    config_dir.mkdir()
    config_path = _write(
        config_dir / "tempo-sync.json",
        {"server_url": "https://tempo.example.com", "source_path": "exports/samples.ndjson", "max_concurrent": 2},
    )

    config = load_config(config_path)

    assert config.source_path == (config_dir / "exports" / "samples.ndjson").resolve()
    assert config.max_concurrent == 2


def test_load_config_keeps_absolute_source_path(tmp_path: Path) -> None:
    absolute = tmp_path / "elsewhere" / "samples.ndjson"
    config_path = _write(
        tmp_path / "tempo-sync.json", {"server_url": "https://tempo.example.com", "source_path": str(absolute)}
    )

    assert load_config(config_path).source_path == absolute


def test_load_config_without_source_path(tmp_path: Path) -> None:
    config_path = _write(tmp_path / "tempo-sync.json", {"server_url": "https://tempo.example.com"})

    assert load_config(config_path).source_path is None


def test_load_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="failed reading config file"):
        load_config(tmp_path / "missing.json")


def test_load_config_invalid_json(tmp_path: Path) -> None:
    config_path = tmp_path / "tempo-sync.json"
    config_path.write_text("{server_url: nope", encoding="utf-8")

    with pytest.raises(ConfigError, match="invalid JSON"):
        load_config(config_path)


def test_load_config_invalid_values(tmp_path: Path) -> None:
    config_path = _write(tmp_path / "tempo-sync.json", {"server_url": "https://tempo.example.com", "batch_size": 0})

    with pytest.raises(ConfigError, match="invalid config"):
        load_config(config_path)
