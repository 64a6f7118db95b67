"""Public API surface for tempo-sync."""

__version__ = "0.3.0"

from tempo_sync.config import load_config
from tempo_sync.contracts.config import TempoSyncConfig
from tempo_sync.contracts.exceptions import (
    ConfigError,
    RemoteError,
    SourceError,
    SyncError,
    SyncInProgressError,
    TempoSyncError,
)
from tempo_sync.contracts.progress import ProgressSnapshot, ProgressState, SyncPhase, SyncSummary
from tempo_sync.contracts.remote import BatchUploader, WatermarkClient
from tempo_sync.contracts.sample import BEGINNING_OF_TIME, MetricType, Sample, UploadResult
from tempo_sync.contracts.source import BatchSource
from tempo_sync.engine import SyncOrchestrator, SyncProgress, WorkerPool
from tempo_sync.sdk import TempoSync

__all__ = [
    "BEGINNING_OF_TIME",
    "BatchSource",
    "BatchUploader",
    "ConfigError",
    "MetricType",
    "ProgressSnapshot",
    "ProgressState",
    "RemoteError",
    "Sample",
    "SourceError",
    "SyncError",
    "SyncInProgressError",
    "SyncOrchestrator",
    "SyncPhase",
    "SyncProgress",
    "SyncSummary",
    "TempoSync",
    "TempoSyncConfig",
    "TempoSyncError",
    "UploadResult",
    "WatermarkClient",
    "WorkerPool",
    "__version__",
    "load_config",
]
