"""Exception hierarchy for tempo-sync."""

from __future__ import annotations


class TempoSyncError(Exception):
    """Base exception for all tempo-sync errors."""


class ConfigError(TempoSyncError):
    """Configuration loading or validation failure."""


class SourceError(TempoSyncError):
    """The local batch source could not produce a batch."""


class RemoteError(TempoSyncError):
    """Base failure talking to the aggregation server."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class WatermarkError(RemoteError):
    """Watermark fetch failed or returned an unusable payload."""


class UploadError(RemoteError):
    """Batch upload failed or returned an unusable payload."""


class SyncError(TempoSyncError):
    """Engine-level synchronization failure."""


class SyncInProgressError(SyncError):
    """A sync run is already active on this orchestrator."""


class InvalidTransitionError(SyncError):
    """A progress state was asked to leave a terminal phase."""


class CursorStalledError(SyncError):
    """A full batch did not move the metric cursor forward."""

    def __init__(self, message: str, *, metric_type: str) -> None:
        super().__init__(message)
        self.metric_type = metric_type
