"""Per-metric fetch/upload loop."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from tempo_sync.contracts.exceptions import CursorStalledError
from tempo_sync.contracts.progress import ProgressState, SyncPhase
from tempo_sync.contracts.remote import BatchUploader
from tempo_sync.contracts.sample import MetricType
from tempo_sync.contracts.source import BatchSource
from tempo_sync.engine.pool import WorkerPool

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 1000


class MetricSyncPipeline:
    """Drives one metric from its start cursor to exhaustion.

    Fetch, upload and cursor advance run strictly in sequence; there is no
    fetch-ahead. Cancellation is observed at two checkpoints per batch:
    before fetching and again before uploading. The cursor moves only after
    a successful upload, to the sort key of the last *fetched* sample, so a
    crash in between re-sends that batch on resume and the server drops the
    duplicates by id.

    ``F`` is published once, when the pipeline acquires its pool slot, so a
    pipeline cancelled while queued still goes ``F`` then ``X`` without
    fetching anything.

    Every exception from the source or uploader ends this pipeline in the
    failed phase and is not re-raised; only a hard ``CancelledError`` from
    the hosting task propagates.
    """

    def __init__(
        self,
        metric_type: MetricType,
        *,
        source: BatchSource,
        uploader: BatchUploader,
        pool: WorkerPool,
        cancel_event: asyncio.Event,
        publish: Callable[[ProgressState], None],
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self._metric_type = metric_type
        self._source = source
        self._uploader = uploader
        self._pool = pool
        self._cancel_event = cancel_event
        self._publish = publish
        self._batch_size = batch_size
        self._state = ProgressState(metric_type=metric_type)

    @property
    def metric_type(self) -> MetricType:
        return self._metric_type

    @property
    def state(self) -> ProgressState:
        return self._state

    async def run(self, start_cursor: datetime) -> ProgressState:
        try:
            async with self._pool.slot():
                self._transition(SyncPhase.FETCHING, cursor=start_cursor)
                await self._sync_batches(start_cursor)
        except asyncio.CancelledError:
            if not self._state.is_terminal:
                self._transition(SyncPhase.CANCELLED)
            raise
        except Exception as exc:
            logger.warning("Sync failed for %s: %s", self._metric_type, exc)
            self._transition(SyncPhase.FAILED, error=str(exc) or type(exc).__name__)
        return self._state

    async def _sync_batches(self, cursor: datetime) -> None:
        processed = 0
        while True:
            if self._cancel_event.is_set():
                self._transition(SyncPhase.CANCELLED)
                return

            batch = await self._source.fetch_batch(self._metric_type, cursor, self._batch_size)
            if not batch:
                self._transition(SyncPhase.COMPLETE, samples_total=processed)
                return

            self._transition(SyncPhase.UPLOADING, samples_processed=processed, samples_total=None)

            if self._cancel_event.is_set():
                self._transition(SyncPhase.CANCELLED)
                return

            result = await self._uploader.upload_batch(batch)
            processed += result.stored

            previous = cursor
            cursor = max(cursor, batch[-1].sort_key)
            self._transition(SyncPhase.UPLOADING, samples_processed=processed, cursor=cursor)

            if len(batch) < self._batch_size:
                self._transition(SyncPhase.COMPLETE, samples_total=processed)
                return
            if cursor == previous:
                raise CursorStalledError(
                    f"{self._metric_type}: a full batch of {len(batch)} samples ends at the current cursor "
                    f"{cursor.isoformat()}; raise batch_size to get past it",
                    metric_type=self._metric_type,
                )

    def _transition(self, phase: SyncPhase, **changes: Any) -> None:
        self._state = self._state.advance(phase, **changes)
        logger.debug("%s -> %s", self._metric_type, self._state.describe())
        self._publish(self._state)
