"""Local batch sources."""

from tempo_sync.sources.memory import MemoryBatchSource
from tempo_sync.sources.ndjson import load_ndjson_source

__all__ = ["MemoryBatchSource", "load_ndjson_source"]
