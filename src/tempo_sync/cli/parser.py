"""CLI parser construction."""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version


def _package_version() -> str:
    try:
        return version("tempo-sync")
    except PackageNotFoundError:
        return "0.0.0"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tempo-sync")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_package_version()}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser("sync", help="Upload new samples to the server")
    sync_parser.add_argument("--config", default="./tempo-sync.json", help="Path to tempo-sync.json")
    sync_parser.add_argument("--dry-run", action="store_true", help="Read watermarks but do not upload")
    sync_parser.add_argument(
        "--metric",
        dest="metrics",
        action="append",
        default=None,
        metavar="ID",
        help="Metric type to sync (repeatable; default: metric_types from config)",
    )
    sync_parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    status_parser = subparsers.add_parser("status", help="Show the server's per-metric watermarks")
    status_parser.add_argument("--config", default="./tempo-sync.json", help="Path to tempo-sync.json")
    status_parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    return parser
