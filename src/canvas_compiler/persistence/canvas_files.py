"""Canvas file I/O: read JSON Canvas documents and write compiled artifacts."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from canvas_compiler.compiler.pipeline import compile_with_report
from canvas_compiler.config.settings import CompileSettings, coerce_settings
from canvas_compiler.constants import COMPILED_SUFFIX, INPUT_SUFFIXES, PURE_SUFFIX

logger = logging.getLogger(__name__)


class CanvasFileError(OSError):
    """Raised when a canvas file cannot be read, parsed, or written."""


@dataclass(frozen=True, slots=True)
class CompileReport:
    """Outcome of compiling one file."""

    in_path: Path
    out_path: Path
    nodes_in: int
    edges_in: int
    nodes_out: int
    edges_out: int

    def to_dict(self) -> dict[str, object]:
        return {
            "in_path": self.in_path.as_posix(),
            "out_path": self.out_path.as_posix(),
            "nodes_in": self.nodes_in,
            "edges_in": self.edges_in,
            "nodes_out": self.nodes_out,
            "edges_out": self.edges_out,
        }


def read_canvas(path: str | Path) -> Any:
    """Parse ``path`` as UTF-8 JSON. Shape checks are left to validation."""

    resolved = Path(path)
    try:
        text = resolved.read_text(encoding="utf-8")
    except OSError as exc:
        raise CanvasFileError(f"unable to read canvas file {resolved}: {exc}") from exc

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise CanvasFileError(f"invalid JSON in {resolved}: {exc}") from exc


def dump_canvas_json(document: Mapping[str, object]) -> str:
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"


def write_canvas_json(path: str | Path, document: Mapping[str, object]) -> Path:
    """Atomically write ``document`` as pretty JSON and return the resolved path."""

    resolved = Path(path).resolve()
    payload = dump_canvas_json(document)
    try:
        resolved.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{resolved.name}.", suffix=".tmp", dir=resolved.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
                handle.write(payload)
            os.replace(tmp_name, resolved)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as exc:
        raise CanvasFileError(f"unable to write {resolved}: {exc}") from exc
    return resolved


def default_output_path(in_path: str | Path, *, pure: bool = False) -> Path:
    """Return ``<stem>.json`` (or ``<stem>.pure.json``) beside ``in_path``.

    A ``.json`` input whose compiled path would equal the input gets
    ``<stem>.compiled.json`` instead so the source is never overwritten.
    """

    resolved = Path(in_path).resolve()
    stem = _strip_input_suffix(resolved.name)
    suffix = PURE_SUFFIX if pure else COMPILED_SUFFIX
    candidate = resolved.with_name(f"{stem}{suffix}")
    if candidate == resolved:
        candidate = resolved.with_name(f"{stem}.compiled{suffix}")
    return candidate


def compile_canvas_file(
    in_path: str | Path,
    out_path: str | Path | None = None,
    settings: CompileSettings | Mapping[str, object] | None = None,
) -> CompileReport:
    """Read, compile, and write one canvas file.

    Nothing is written when reading or validation fails.
    """

    resolved_in = Path(in_path).resolve()
    resolved_settings = coerce_settings(settings)
    document = read_canvas(resolved_in)

    result = compile_with_report(document, resolved_settings)
    target = (
        Path(out_path)
        if out_path is not None
        else default_output_path(resolved_in, pure=resolved_settings.strip_metadata)
    )
    written = write_canvas_json(target, result.document)

    logger.info(
        "canvas file written",
        extra={"in_path": resolved_in, "out_path": written, "nodes": result.nodes_out},
    )
    return CompileReport(
        in_path=resolved_in,
        out_path=written,
        nodes_in=result.nodes_in,
        edges_in=result.edges_in,
        nodes_out=result.nodes_out,
        edges_out=result.edges_out,
    )


def export_pure_file(
    in_path: str | Path,
    out_path: str | Path | None = None,
    settings: CompileSettings | Mapping[str, object] | None = None,
) -> CompileReport:
    """Compile ``in_path`` and write only its pure-data projection."""

    resolved_settings = coerce_settings(settings).replace(strip_metadata=True)
    target = out_path if out_path is not None else default_output_path(in_path, pure=True)
    return compile_canvas_file(in_path, target, resolved_settings)


def _strip_input_suffix(name: str) -> str:
    lowered = name.lower()
    for suffix in INPUT_SUFFIXES:
        if lowered.endswith(suffix) and len(name) > len(suffix):
            return name[: -len(suffix)]
    return name


__all__ = [
    "CanvasFileError",
    "CompileReport",
    "compile_canvas_file",
    "default_output_path",
    "dump_canvas_json",
    "export_pure_file",
    "read_canvas",
    "write_canvas_json",
]
