"""Shared test fixtures for tempo-sync tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tempo_sync import TempoSyncConfig
from tests.fakes.source import make_samples

HEART_RATE = "HKQuantityTypeIdentifierHeartRate"
STEP_COUNT = "HKQuantityTypeIdentifierStepCount"


@pytest.fixture
def sample_export(tmp_path: Path) -> Path:
    """An NDJSON export with 5 heart-rate and 3 step-count samples."""
    path = tmp_path / "samples.ndjson"
    samples = make_samples(HEART_RATE, 5) + make_samples(STEP_COUNT, 3)
    path.write_text("\n".join(json.dumps(sample.to_wire()) for sample in samples) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def sample_config(sample_export: Path) -> TempoSyncConfig:
    """Config pointing at :func:`sample_export` with two metrics."""
    return TempoSyncConfig(
        server_url="https://tempo.example.com",
        metric_types=[HEART_RATE, STEP_COUNT],
        batch_size=2,
        max_concurrent=2,
        max_retries=0,
        source_path=sample_export,
    )
