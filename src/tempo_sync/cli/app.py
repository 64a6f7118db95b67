"""CLI app entrypoint and error mapping."""

from __future__ import annotations

import sys

from tempo_sync import ConfigError, RemoteError, SourceError, SyncError, SyncSummary

EXIT_INCOMPLETE = 6


def main(argv: list[str] | None = None) -> int:
    import tempo_sync.cli as cli

    parser = cli.build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        cli.logging.basicConfig(level=cli.logging.DEBUG, format="%(name)s %(message)s", stream=sys.stderr)

    try:
        if args.command == "status":
            cli.asyncio.run(cli._run_status(args))
            return 0
        snapshot = cli.asyncio.run(cli._run_sync(args))
    except (ConfigError, SourceError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 3
    except RemoteError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 4
    except SyncError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 5
    except Exception as exc:  # pragma: no cover
        print(f"error: {exc}", file=sys.stderr)
        return 1

    return 0 if SyncSummary.from_snapshot(snapshot).succeeded else EXIT_INCOMPLETE


__all__ = ["EXIT_INCOMPLETE", "main"]
