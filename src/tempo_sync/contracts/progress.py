"""Per-metric progress model."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from tempo_sync.contracts.exceptions import InvalidTransitionError
from tempo_sync.contracts.sample import MetricType


class SyncPhase(str, Enum):
    """Pipeline phase; values are the single-character codes the server UI uses."""

    WAITING = "W"
    FETCHING = "F"
    UPLOADING = "U"
    COMPLETE = "C"
    FAILED = "E"
    CANCELLED = "X"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_PHASES


_TERMINAL_PHASES = frozenset({SyncPhase.COMPLETE, SyncPhase.FAILED, SyncPhase.CANCELLED})


class ProgressState(BaseModel):
    """Immutable progress of one metric within one sync run.

    A new instance is produced for every transition; once a terminal phase
    is reached :meth:`advance` refuses to move it anywhere else.
    """

    metric_type: MetricType
    phase: SyncPhase = SyncPhase.WAITING
    samples_processed: int = Field(default=0, ge=0)
    samples_total: int | None = None
    cursor: datetime | None = None
    error: str | None = None

    model_config = {"frozen": True}

    @property
    def is_terminal(self) -> bool:
        return self.phase.is_terminal

    def advance(self, phase: SyncPhase, **changes: Any) -> ProgressState:
        if self.is_terminal:
            raise InvalidTransitionError(
                f"{self.metric_type}: cannot move from terminal phase {self.phase.value} to {phase.value}"
            )
        return self.model_copy(update={"phase": phase, **changes})

    def describe(self) -> str:
        if self.samples_total is not None:
            return f"{self.phase.value} {self.samples_processed}/{self.samples_total}"
        return f"{self.phase.value} {self.samples_processed}"


ProgressSnapshot = Mapping[MetricType, ProgressState]


class SyncSummary(BaseModel):
    """Aggregate outcome of one run, derived from its final snapshot."""

    complete: int = 0
    failed: int = 0
    cancelled: int = 0
    pending: int = 0
    samples_processed: int = 0

    model_config = {"frozen": True}

    @classmethod
    def from_snapshot(cls, snapshot: ProgressSnapshot) -> SyncSummary:
        counts = {SyncPhase.COMPLETE: 0, SyncPhase.FAILED: 0, SyncPhase.CANCELLED: 0}
        pending = 0
        for state in snapshot.values():
            if state.phase in counts:
                counts[state.phase] += 1
            else:
                pending += 1
        return cls(
            complete=counts[SyncPhase.COMPLETE],
            failed=counts[SyncPhase.FAILED],
            cancelled=counts[SyncPhase.CANCELLED],
            pending=pending,
            samples_processed=sum(state.samples_processed for state in snapshot.values()),
        )

    @property
    def succeeded(self) -> bool:
        return self.failed == 0 and self.cancelled == 0 and self.pending == 0
