"""Remote aggregation server contracts."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime

from tempo_sync.contracts.sample import MetricType, Sample, UploadResult


class WatermarkClient(ABC):
    @abstractmethod
    async def get_watermarks(self) -> dict[MetricType, datetime]: ...


class BatchUploader(ABC):
    """Sends one batch of samples to the server.

    Re-sending overlapping samples is allowed; the server de-duplicates by
    sample id and reports only newly stored records in ``stored``.
    """

    @abstractmethod
    async def upload_batch(self, samples: Sequence[Sample]) -> UploadResult: ...
