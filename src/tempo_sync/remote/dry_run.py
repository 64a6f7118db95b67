"""Offline uploader used for dry-run syncs."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from tempo_sync.contracts.remote import BatchUploader
from tempo_sync.contracts.sample import Sample, UploadResult

logger = logging.getLogger(__name__)


class DryRunUploader(BatchUploader):
    """Pretends every sample was stored, without touching the network.

    Uploaded ids are remembered so repeated samples report ``stored=0``,
    the same way the server treats duplicates.
    """

    def __init__(self) -> None:
        self._seen: set[str] = set()
        self.batches = 0

    async def upload_batch(self, samples: Sequence[Sample]) -> UploadResult:
        stored = 0
        for sample in samples:
            key = str(sample.id)
            if key not in self._seen:
                self._seen.add(key)
                stored += 1
        self.batches += 1
        if samples:
            logger.info("[dry-run] would upload %d %s sample(s)", len(samples), samples[0].metric_type)
        return UploadResult(received=len(samples), stored=stored)
