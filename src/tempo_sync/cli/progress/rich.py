"""Rich-based sync progress display."""

from __future__ import annotations

from collections.abc import Sequence
from types import TracebackType
from typing import ClassVar

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.progress import TaskID as RichTaskID

from tempo_sync.contracts.progress import ProgressSnapshot, ProgressState, SyncPhase
from tempo_sync.contracts.sample import MetricType
from tempo_sync.engine.progress import SyncProgress


def format_cursor(state: ProgressState) -> str:
    if state.cursor is None or state.cursor.year == 1:
        return ""
    return state.cursor.strftime("%Y-%m-%d %H:%M:%S")


class RichSyncProgress(SyncProgress):
    """Live terminal display with one row per metric.

    Use as a context manager so the live display is properly started/stopped::

        with RichSyncProgress() as progress:
            snapshot = await orchestrator.run(metric_types)
    """

    _PHASE_LABELS: ClassVar[dict[SyncPhase, str]] = {
        SyncPhase.WAITING: "[dim]W[/]",
        SyncPhase.FETCHING: "[cyan]F[/]",
        SyncPhase.UPLOADING: "[blue]U[/]",
        SyncPhase.COMPLETE: "[green]C[/]",
        SyncPhase.FAILED: "[red]E[/]",
        SyncPhase.CANCELLED: "[yellow]X[/]",
    }

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console(stderr=True)
        self._progress = Progress(
            SpinnerColumn(finished_text=" "),
            TextColumn("{task.description:<44}"),
            TextColumn("{task.fields[phase]}"),
            TextColumn("{task.fields[count]:>10}"),
            TextColumn("[dim]{task.fields[cursor]}"),
            TimeElapsedColumn(),
            console=self._console,
            transient=False,
        )
        self._task_ids: dict[MetricType, RichTaskID] = {}

    # -- context manager --------------------------------------------------

    def __enter__(self) -> RichSyncProgress:
        self._progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self._progress.stop()

    # -- SyncProgress implementation --------------------------------------

    def run_start(self, metric_types: Sequence[MetricType]) -> None:
        for task_id in self._task_ids.values():
            self._progress.remove_task(task_id)
        self._task_ids = {}
        for metric in metric_types:
            self._task_ids[metric] = self._progress.add_task(
                metric,
                total=None,
                phase=self._PHASE_LABELS[SyncPhase.WAITING],
                count="0",
                cursor="",
            )

    def metric_update(self, state: ProgressState) -> None:
        task_id = self._task_ids.get(state.metric_type)
        if task_id is None:
            return
        count = str(state.samples_processed)
        if state.samples_total is not None:
            count = f"{state.samples_processed}/{state.samples_total}"
        self._progress.update(
            task_id,
            phase=self._PHASE_LABELS[state.phase],
            count=count,
            cursor=format_cursor(state),
        )
        if state.is_terminal:
            # Indeterminate row; mark finished by setting total = completed.
            self._progress.update(task_id, total=1, completed=1)

    def run_done(self, snapshot: ProgressSnapshot) -> None:
        self._progress.refresh()
