"""Newline-delimited JSON sample exports."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from tempo_sync.contracts.exceptions import SourceError
from tempo_sync.contracts.sample import Sample
from tempo_sync.sources.memory import MemoryBatchSource

logger = logging.getLogger(__name__)


def load_ndjson_source(path: str | Path) -> MemoryBatchSource:
    """Load a sample export with one wire-format sample per line.

    Blank lines are ignored.

    Raises:
        SourceError: If the file cannot be read or a line is not a valid sample.
    """
    export_path = Path(path)
    try:
        lines = export_path.read_text(encoding="utf-8").splitlines()
    except OSError as exc:
        raise SourceError(f"failed reading sample export: {export_path}") from exc

    samples: list[Sample] = []
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            samples.append(Sample.model_validate(json.loads(line)))
        except json.JSONDecodeError as exc:
            raise SourceError(f"{export_path}:{line_number}: invalid JSON") from exc
        except ValidationError as exc:
            raise SourceError(f"{export_path}:{line_number}: invalid sample: {exc}") from exc

    logger.debug("Loaded %d sample(s) from %s", len(samples), export_path)
    return MemoryBatchSource(samples)
