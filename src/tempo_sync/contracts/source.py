"""Local batch source contract."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from tempo_sync.contracts.sample import MetricType, Sample


class BatchSource(ABC):
    """Yields ordered pages of samples for one metric stream.

    ``fetch_batch`` returns at most *limit* samples whose sort key is at or
    after *cursor*, ascending by sort key. An empty list means the stream
    is exhausted.
    """

    @abstractmethod
    async def fetch_batch(self, metric_type: MetricType, cursor: datetime, limit: int) -> list[Sample]: ...
