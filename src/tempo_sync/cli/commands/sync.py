"""Sync command."""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal

from tempo_sync import SyncSummary, TempoSync, TempoSyncConfig
from tempo_sync.cli.progress.rich import RichSyncProgress, format_cursor
from tempo_sync.contracts.progress import ProgressSnapshot

logger = logging.getLogger(__name__)


def format_sync_summary(snapshot: ProgressSnapshot, config: TempoSyncConfig, *, dry_run: bool) -> str:
    summary = SyncSummary.from_snapshot(snapshot)
    mode = "dry-run" if dry_run else "apply"
    lines = [
        "",
        f"tempo-sync - sync finished ({mode})",
        "",
        f"  Server:    {config.server_url}",
        f"  Metrics:   {len(snapshot)} total "
        f"({summary.complete} complete, {summary.failed} failed, {summary.cancelled} cancelled)",
        f"  Stored:    {summary.samples_processed} sample(s)",
        "",
    ]

    width = max((len(metric) for metric in snapshot), default=0)
    for metric in sorted(snapshot):
        state = snapshot[metric]
        line = f"  {state.phase.value}  {metric:<{width}}  {state.samples_processed:>8}"
        cursor = format_cursor(state)
        if cursor:
            line += f"  {cursor}"
        if state.error:
            line += f"  ({state.error})"
        lines.append(line)

    if dry_run:
        lines.append("")
        lines.append("  [dry-run] No samples were uploaded")

    lines.append("")
    return "\n".join(lines)


async def _sync_with_interrupt(syncer: TempoSync, metrics: list[str] | None, *, dry_run: bool) -> ProgressSnapshot:
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, syncer.cancel)
    except (NotImplementedError, RuntimeError):
        logger.debug("SIGINT handler unavailable; Ctrl-C will abort instead of cancelling cooperatively")
        return await syncer.sync(metrics, dry_run=dry_run)
    try:
        return await syncer.sync(metrics, dry_run=dry_run)
    finally:
        loop.remove_signal_handler(signal.SIGINT)


async def run_sync(args: argparse.Namespace) -> ProgressSnapshot:
    import tempo_sync.cli as cli

    config = cli.load_config(args.config)

    if not args.verbose:
        with RichSyncProgress() as progress:
            syncer = cli.TempoSync.from_config(config, progress=progress)
            snapshot = await _sync_with_interrupt(syncer, args.metrics, dry_run=args.dry_run)
    else:
        syncer = cli.TempoSync.from_config(config)
        snapshot = await _sync_with_interrupt(syncer, args.metrics, dry_run=args.dry_run)

    print(cli._format_summary(snapshot, config, dry_run=args.dry_run))
    return snapshot


__all__ = ["format_sync_summary", "run_sync"]
