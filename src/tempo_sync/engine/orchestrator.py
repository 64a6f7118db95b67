"""Sync orchestrator driving one pipeline per metric."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable, Iterable
from datetime import datetime
from types import MappingProxyType
from typing import Any

from tempo_sync.contracts.exceptions import SyncError, SyncInProgressError
from tempo_sync.contracts.progress import ProgressSnapshot, ProgressState, SyncPhase
from tempo_sync.contracts.remote import BatchUploader, WatermarkClient
from tempo_sync.contracts.sample import BEGINNING_OF_TIME, MetricType
from tempo_sync.contracts.source import BatchSource
from tempo_sync.engine.pipeline import DEFAULT_BATCH_SIZE, MetricSyncPipeline
from tempo_sync.engine.pool import DEFAULT_CAPACITY, WorkerPool
from tempo_sync.engine.progress import NullSyncProgress, SyncProgress

logger = logging.getLogger(__name__)

_EMPTY: ProgressSnapshot = MappingProxyType({})


class SyncOrchestrator:
    """Runs incremental sync for a set of metrics with bounded parallelism.

    ``start`` returns as soon as the run task is scheduled. The run fetches
    the server watermarks once, then spawns one :class:`MetricSyncPipeline`
    per metric, each admitted through a shared :class:`WorkerPool`.

    Progress lives in one immutable mapping that is replaced wholesale on
    every transition, so ``progress_snapshot`` always returns a consistent
    view without locking. Each pipeline only ever writes its own metric.

    Args:
        source: Local batch source.
        watermarks: Client for the server's per-metric cursors.
        uploader: Client that stores batches on the server.
        max_concurrent: Pool capacity, the cap on running pipelines.
        batch_size: Samples requested per fetch.
        progress: Optional observer for push-style progress.
    """

    def __init__(
        self,
        source: BatchSource,
        watermarks: WatermarkClient,
        uploader: BatchUploader,
        *,
        max_concurrent: int = DEFAULT_CAPACITY,
        batch_size: int = DEFAULT_BATCH_SIZE,
        progress: SyncProgress | None = None,
    ) -> None:
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self._source = source
        self._watermarks = watermarks
        self._uploader = uploader
        self._max_concurrent = max_concurrent
        self._batch_size = batch_size
        self._progress: SyncProgress = progress or NullSyncProgress()

        self._states: ProgressSnapshot = _EMPTY
        self._cancel_event: asyncio.Event | None = None
        self._run_task: asyncio.Task[None] | None = None
        self._changed = asyncio.Event()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def start(self, metric_types: Iterable[MetricType]) -> None:
        """Begin a run in the background; must be called from a running loop.

        Raises:
            SyncInProgressError: If the previous run has not finished.
            SyncError: If *metric_types* contains duplicates.
        """
        if self.is_run_active():
            raise SyncInProgressError("A sync run is already active")
        metrics = list(metric_types)
        if len(set(metrics)) != len(metrics):
            raise SyncError("metric_types must not contain duplicates")

        loop = asyncio.get_running_loop()
        cancel_event = asyncio.Event()
        self._cancel_event = cancel_event
        self._replace_states({metric: ProgressState(metric_type=metric) for metric in metrics})
        self._notify_observer(self._progress.run_start, metrics)
        logger.info("Starting sync of %d metric(s) with %d worker(s)", len(metrics), self._max_concurrent)
        self._run_task = loop.create_task(self._run(metrics, cancel_event), name="tempo-sync-run")

    def cancel(self) -> None:
        """Ask every pipeline of the current run to stop at its next checkpoint."""
        if self._cancel_event is None or self._cancel_event.is_set():
            return
        logger.info("Sync cancellation requested")
        self._cancel_event.set()

    def progress_snapshot(self) -> ProgressSnapshot:
        return self._states

    def is_run_active(self) -> bool:
        """True while any metric is unfinished or the run task is still winding down."""
        if self._run_task is not None and not self._run_task.done():
            return True
        return self._has_pending_metrics()

    async def wait(self) -> ProgressSnapshot:
        """Wait for the current run to finish and return its final snapshot."""
        if self._run_task is not None:
            await self._run_task
        return self._states

    async def run(self, metric_types: Iterable[MetricType]) -> ProgressSnapshot:
        self.start(metric_types)
        return await self.wait()

    async def snapshots(self) -> AsyncIterator[ProgressSnapshot]:
        """Yield each new snapshot until every metric is terminal.

        The final snapshot is always yielded, and the stream only ends once
        the run task has finished, so ``start`` may be called right after.
        Intermediate snapshots may be skipped when several transitions land
        while the consumer is busy.
        """
        if not self._states:
            return
        last: ProgressSnapshot | None = None
        while True:
            changed = self._changed
            snapshot = self._states
            if snapshot is not last:
                last = snapshot
                yield snapshot
            if all(state.is_terminal for state in snapshot.values()):
                if self._run_task is not None:
                    await asyncio.wait([self._run_task])
                return
            if self._states is snapshot:
                await changed.wait()

    def dismiss(self) -> None:
        """Clear the finished run's progress."""
        if self.is_run_active():
            raise SyncInProgressError("Cannot dismiss an active sync run")
        self._cancel_event = None
        self._run_task = None
        self._replace_states({})

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    async def _run(self, metrics: list[MetricType], cancel_event: asyncio.Event) -> None:
        try:
            watermarks = await self._fetch_watermarks()
            pool = WorkerPool(self._max_concurrent)
            async with asyncio.TaskGroup() as tg:
                for metric in metrics:
                    pipeline = MetricSyncPipeline(
                        metric,
                        source=self._source,
                        uploader=self._uploader,
                        pool=pool,
                        cancel_event=cancel_event,
                        publish=self._publish,
                        batch_size=self._batch_size,
                    )
                    tg.create_task(
                        pipeline.run(watermarks.get(metric, BEGINNING_OF_TIME)),
                        name=f"tempo-sync:{metric}",
                    )
        except asyncio.CancelledError:
            self._cancel_remaining()
            raise
        finally:
            if not self._has_pending_metrics():
                self._notify_observer(self._progress.run_done, self._states)

    async def _fetch_watermarks(self) -> dict[MetricType, datetime]:
        try:
            watermarks = await self._watermarks.get_watermarks()
        except Exception as exc:
            logger.warning("Failed to fetch watermarks, syncing from the beginning: %s", exc)
            return {}
        logger.debug("Fetched %d watermark(s)", len(watermarks))
        return watermarks

    def _has_pending_metrics(self) -> bool:
        return any(not state.is_terminal for state in self._states.values())

    def _cancel_remaining(self) -> None:
        for state in self._states.values():
            if not state.is_terminal:
                self._publish(state.advance(SyncPhase.CANCELLED))

    # ------------------------------------------------------------------
    # Progress publication
    # ------------------------------------------------------------------

    def _publish(self, state: ProgressState) -> None:
        states = dict(self._states)
        states[state.metric_type] = state
        self._replace_states(states)
        self._notify_observer(self._progress.metric_update, state)

    def _replace_states(self, states: dict[MetricType, ProgressState]) -> None:
        self._states = MappingProxyType(states)
        changed, self._changed = self._changed, asyncio.Event()
        changed.set()

    def _notify_observer(self, callback: Callable[..., None], *args: Any) -> None:
        try:
            callback(*args)
        except Exception:
            logger.exception("Progress observer %s failed", type(self._progress).__name__)
