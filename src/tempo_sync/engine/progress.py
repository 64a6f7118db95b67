"""Progress reporting protocol for the sync engine.

This is engine-level instrumentation, not a collaborator contract.
The orchestrator pushes every per-metric transition to a ``SyncProgress``;
consumers (e.g. the CLI's Rich display) implement it to render feedback.
Polling callers use ``SyncOrchestrator.progress_snapshot()`` instead.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from tempo_sync.contracts.progress import ProgressSnapshot, ProgressState
from tempo_sync.contracts.sample import MetricType


class SyncProgress(ABC):
    """Observer interface for sync run progress events."""

    @abstractmethod
    def run_start(self, metric_types: Sequence[MetricType]) -> None:
        """A run is starting; every metric is in the waiting phase."""
        ...  # pragma: no cover

    @abstractmethod
    def metric_update(self, state: ProgressState) -> None:
        """*state* is the newest progress of its metric."""
        ...  # pragma: no cover

    @abstractmethod
    def run_done(self, snapshot: ProgressSnapshot) -> None:
        """Every metric reached a terminal phase; *snapshot* is final."""
        ...  # pragma: no cover


class NullSyncProgress(SyncProgress):
    """No-op implementation used when no progress display is requested."""

    def run_start(self, metric_types: Sequence[MetricType]) -> None:
        pass

    def metric_update(self, state: ProgressState) -> None:
        pass

    def run_done(self, snapshot: ProgressSnapshot) -> None:
        pass
