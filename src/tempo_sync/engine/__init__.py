"""Engine module exports."""

from tempo_sync.engine.orchestrator import SyncOrchestrator
from tempo_sync.engine.pipeline import DEFAULT_BATCH_SIZE, MetricSyncPipeline
from tempo_sync.engine.pool import DEFAULT_CAPACITY, WorkerPool
from tempo_sync.engine.progress import NullSyncProgress, SyncProgress

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "DEFAULT_CAPACITY",
    "MetricSyncPipeline",
    "NullSyncProgress",
    "SyncOrchestrator",
    "SyncProgress",
    "WorkerPool",
]
