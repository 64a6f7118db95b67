"""SDK composition root for tempo-sync."""

from __future__ import annotations

import logging
from collections.abc import Iterable

import httpx

from tempo_sync.contracts.config import TempoSyncConfig
from tempo_sync.contracts.exceptions import ConfigError
from tempo_sync.contracts.progress import ProgressSnapshot
from tempo_sync.contracts.remote import BatchUploader
from tempo_sync.contracts.sample import MetricType
from tempo_sync.contracts.source import BatchSource
from tempo_sync.engine import SyncOrchestrator
from tempo_sync.engine.progress import SyncProgress
from tempo_sync.remote import DryRunUploader, TempoClient
from tempo_sync.sources import load_ndjson_source

logger = logging.getLogger(__name__)


class TempoSync:
    """tempo-sync SDK public API.

    Wires a batch source, the server client and a :class:`SyncOrchestrator`
    from one :class:`TempoSyncConfig`. In dry-run mode watermarks are still
    read from the server but batches go to a :class:`DryRunUploader`.
    """

    def __init__(
        self,
        *,
        config: TempoSyncConfig,
        source: BatchSource,
        progress: SyncProgress | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._source = source
        self._progress = progress
        self._transport = transport
        self._orchestrator: SyncOrchestrator | None = None

    @classmethod
    def from_config(
        cls,
        config: TempoSyncConfig,
        *,
        source: BatchSource | None = None,
        progress: SyncProgress | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> TempoSync:
        if source is None:
            if config.source_path is None:
                raise ConfigError("source_path is required when no batch source is supplied")
            source = load_ndjson_source(config.source_path)
        return cls(config=config, source=source, progress=progress, transport=transport)

    @property
    def config(self) -> TempoSyncConfig:
        return self._config

    async def sync(self, metric_types: Iterable[MetricType] | None = None, *, dry_run: bool = False) -> ProgressSnapshot:
        """Run one incremental sync and return the final per-metric progress."""
        metrics = list(metric_types) if metric_types is not None else list(self._config.metric_types)
        async with TempoClient.from_config(self._config, transport=self._transport) as client:
            uploader: BatchUploader = DryRunUploader() if dry_run else client
            self._orchestrator = SyncOrchestrator(
                self._source,
                client,
                uploader,
                max_concurrent=self._config.max_concurrent,
                batch_size=self._config.batch_size,
                progress=self._progress,
            )
            if dry_run:
                logger.info("[dry-run] No samples will be uploaded")
            return await self._orchestrator.run(metrics)

    def cancel(self) -> None:
        if self._orchestrator is not None:
            self._orchestrator.cancel()
