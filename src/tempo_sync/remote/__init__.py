"""Aggregation server adapters."""

from tempo_sync.remote.client import TempoClient
from tempo_sync.remote.dry_run import DryRunUploader

__all__ = ["DryRunUploader", "TempoClient"]
