"""In-memory batch source."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from collections.abc import Iterable
from datetime import datetime

from tempo_sync.contracts.sample import MetricType, Sample
from tempo_sync.contracts.source import BatchSource


class MemoryBatchSource(BatchSource):
    """Serves batches from samples held in memory.

    Samples are indexed per metric and sorted by sort key once at
    construction. A fetch includes samples sitting exactly on the cursor,
    so samples sharing the timestamp a full batch ended on are not
    skipped; the boundary sample itself is sent again and the server drops
    it by id. ``inclusive=False`` starts strictly after the cursor instead.
    """

    def __init__(self, samples: Iterable[Sample], *, inclusive: bool = True) -> None:
        by_metric: dict[MetricType, list[Sample]] = {}
        for sample in samples:
            by_metric.setdefault(sample.metric_type, []).append(sample)
        self._samples = {metric: sorted(items, key=lambda s: s.sort_key) for metric, items in by_metric.items()}
        self._keys = {metric: [s.sort_key for s in items] for metric, items in self._samples.items()}
        self._inclusive = inclusive

    @property
    def metric_types(self) -> list[MetricType]:
        return sorted(self._samples)

    def count(self, metric_type: MetricType) -> int:
        return len(self._samples.get(metric_type, ()))

    async def fetch_batch(self, metric_type: MetricType, cursor: datetime, limit: int) -> list[Sample]:
        if limit < 1:
            raise ValueError("limit must be at least 1")
        samples = self._samples.get(metric_type)
        if not samples:
            return []
        bisect = bisect_left if self._inclusive else bisect_right
        start = bisect(self._keys[metric_type], cursor)
        return samples[start : start + limit]
