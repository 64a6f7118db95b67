"""Module entrypoint for ``python -m tempo_sync``."""

from tempo_sync.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
