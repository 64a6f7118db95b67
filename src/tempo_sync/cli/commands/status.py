"""Status command."""

from __future__ import annotations

import argparse
from datetime import datetime

from tempo_sync.contracts.sample import MetricType


def format_status(watermarks: dict[MetricType, datetime], metric_types: list[MetricType]) -> str:
    lines = ["", "tempo-sync - server watermarks", ""]
    known = sorted(set(metric_types) | set(watermarks))
    width = max((len(metric) for metric in known), default=0)
    for metric in known:
        cursor = watermarks.get(metric)
        rendered = cursor.isoformat() if cursor is not None else "never synced"
        lines.append(f"  {metric:<{width}}  {rendered}")
    lines.append("")
    return "\n".join(lines)


async def run_status(args: argparse.Namespace) -> dict[MetricType, datetime]:
    import tempo_sync.cli as cli

    config = cli.load_config(args.config)
    async with cli.TempoClient.from_config(config) as client:
        watermarks = await client.get_watermarks()
    print(format_status(watermarks, config.metric_types))
    return watermarks


__all__ = ["format_status", "run_status"]
