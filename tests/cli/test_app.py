from __future__ import annotations

import logging
import sys

import pytest

from tempo_sync import ConfigError, RemoteError, SourceError, SyncError, SyncInProgressError
from tempo_sync.cli import main
from tempo_sync.cli.app import EXIT_INCOMPLETE
from tempo_sync.contracts.exceptions import CursorStalledError, UploadError, WatermarkError
from tempo_sync.contracts.progress import ProgressState, SyncPhase

HR = "HKQuantityTypeIdentifierHeartRate"


def _returning(value: object):  # type: ignore[no-untyped-def]
    def _run(coro: object) -> object:
        coro.close()  # type: ignore[attr-defined]
        return value

    return _run


def test_main_returns_zero_when_every_metric_completes(monkeypatch: pytest.MonkeyPatch) -> None:
    snapshot = {HR: ProgressState(metric_type=HR, phase=SyncPhase.COMPLETE)}
    monkeypatch.setattr("tempo_sync.cli.asyncio.run", _returning(snapshot))

    assert main(["sync", "--config", "tempo.json"]) == 0


@pytest.mark.parametrize("phase", [SyncPhase.FAILED, SyncPhase.CANCELLED])
def test_main_reports_incomplete_run(monkeypatch: pytest.MonkeyPatch, phase: SyncPhase) -> None:
    snapshot = {HR: ProgressState(metric_type=HR, phase=phase)}
    monkeypatch.setattr("tempo_sync.cli.asyncio.run", _returning(snapshot))

    assert main(["sync", "--config", "tempo.json"]) == EXIT_INCOMPLETE


def test_main_status_returns_zero(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("tempo_sync.cli.asyncio.run", _returning({}))

    assert main(["status", "--config", "tempo.json"]) == 0


def test_main_enables_verbose_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("tempo_sync.cli.asyncio.run", _returning({}))

    captured: dict[str, object] = {}

    def _fake_basic_config(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr("tempo_sync.cli.logging.basicConfig", _fake_basic_config)

    main(["sync", "--config", "tempo.json", "--verbose"])

    assert captured["level"] == logging.DEBUG
    assert captured["stream"] == sys.stderr


@pytest.mark.parametrize(
    ("error", "exit_code"),
    [
        (ConfigError("bad config"), 3),
        (SourceError("export unreadable"), 3),
        (RemoteError("server unreachable"), 4),
        (WatermarkError("GET status returned HTTP 500", status_code=500), 4),
        (UploadError("POST sync returned HTTP 502", status_code=502), 4),
        (SyncError("sync failed"), 5),
        (SyncInProgressError("already running"), 5),
        (CursorStalledError("stuck", metric_type=HR), 5),
        (RuntimeError("boom"), 1),
    ],
)
def test_main_maps_errors_to_exit_codes(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    error: Exception,
    exit_code: int,
) -> None:
    def _raise(coro: object) -> None:
        coro.close()  # type: ignore[attr-defined]
        raise error

    monkeypatch.setattr("tempo_sync.cli.asyncio.run", _raise)

    actual = main(["sync", "--config", "tempo.json"])

    assert actual == exit_code
    captured = capsys.readouterr()
    assert "error:" in captured.err
    assert str(error) in captured.err
