"""Output rendering abstraction for the canvas-compiler CLI.

File: src/canvas_compiler/ui/render.py

Purpose
- Provide a thin plain-text rendering layer for CLI reports.

Functional requirements
- Deterministic output with no dependencies beyond the standard library.
- Every method writes to the renderer's stream (stdout by default).
"""

from __future__ import annotations

import sys
from typing import TextIO


class CLIRenderer:
    """Thin CLI output renderer producing clean plain-text lines."""

    def __init__(self, *, verbose: bool = False, stream: TextIO | None = None) -> None:
        self.verbose = verbose
        self._stream = stream

    def heading(self, text: str) -> None:
        """Print a heading line."""

        self._write(text)

    def kv(self, key: str, value: object) -> None:
        """Print a key: value pair."""

        self._write(f"  {key}: {value}")

    def warning(self, text: str) -> None:
        self._write(f"  Warning: {text}")

    def ok(self, label: str) -> None:
        """Print a passing check."""

        self._write(f"  OK  {label}")

    def fail(self, label: str) -> None:
        """Print a failing check."""

        self._write(f"  FAIL  {label}")

    def _write(self, line: str) -> None:
        print(line, file=self._stream if self._stream is not None else sys.stdout)


def create_renderer(*, verbose: bool = False, stream: TextIO | None = None) -> CLIRenderer:
    """Create a CLI renderer with the given settings."""

    return CLIRenderer(verbose=verbose, stream=stream)


__all__ = ["CLIRenderer", "create_renderer"]
