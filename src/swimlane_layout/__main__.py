"""Module entrypoint for ``python -m swimlane_layout``."""

from __future__ import annotations

from swimlane_layout.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())
