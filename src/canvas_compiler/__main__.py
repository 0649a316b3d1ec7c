"""Module entrypoint for ``python -m canvas_compiler``."""

from __future__ import annotations

from canvas_compiler.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())
