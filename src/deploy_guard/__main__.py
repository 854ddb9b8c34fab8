"""Module entrypoint for ``python -m deploy_guard``."""

from __future__ import annotations

from deploy_guard.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())
