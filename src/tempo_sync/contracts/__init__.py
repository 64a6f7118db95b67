"""Public contracts for tempo-sync."""

from tempo_sync.contracts.config import DEFAULT_METRIC_TYPES, TempoSyncConfig
from tempo_sync.contracts.exceptions import (
    ConfigError,
    CursorStalledError,
    InvalidTransitionError,
    RemoteError,
    SourceError,
    SyncError,
    SyncInProgressError,
    TempoSyncError,
    UploadError,
    WatermarkError,
)
from tempo_sync.contracts.progress import ProgressSnapshot, ProgressState, SyncPhase, SyncSummary
from tempo_sync.contracts.remote import BatchUploader, WatermarkClient
from tempo_sync.contracts.sample import BEGINNING_OF_TIME, MetricType, Sample, UploadResult
from tempo_sync.contracts.source import BatchSource

__all__ = [
    "BEGINNING_OF_TIME",
    "DEFAULT_METRIC_TYPES",
    "BatchSource",
    "BatchUploader",
    "ConfigError",
    "CursorStalledError",
    "InvalidTransitionError",
    "MetricType",
    "ProgressSnapshot",
    "ProgressState",
    "RemoteError",
    "Sample",
    "SourceError",
    "SyncError",
    "SyncInProgressError",
    "SyncPhase",
    "SyncSummary",
    "TempoSyncConfig",
    "TempoSyncError",
    "UploadError",
    "UploadResult",
    "WatermarkClient",
    "WatermarkError",
]
