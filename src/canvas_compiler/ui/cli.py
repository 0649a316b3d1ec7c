"""Command-line interface router for canvas-compiler."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from canvas_compiler.compiler import CanvasValidationError, build_hierarchy, validate_document
from canvas_compiler.config import (
    CompileSettings,
    ConfigLoadError,
    ConfigValidationError,
    SettingsError,
    compile_settings_from_config,
    load_config,
)
from canvas_compiler.observability import LOG_FORMATS, setup_logging
from canvas_compiler.persistence import (
    CanvasFileError,
    CompileReport,
    compile_canvas_file,
    export_pure_file,
    read_canvas,
)
from canvas_compiler.ui.render import CLIRenderer, create_renderer


@dataclass(frozen=True, slots=True)
class CLIError(RuntimeError):
    """Typed CLI failure with an explicit process exit code."""

    message: str
    exit_code: int = 1

    def __str__(self) -> str:
        return self.message


# Flag dest -> dotted config path.
_COMPILE_FLAG_PATHS: dict[str, str] = {
    "color_nodes": "compile.color_sort_nodes",
    "color_edges": "compile.color_sort_edges",
    "flow_sort": "compile.flow_sort_nodes",
    "group_orphan_nodes": "compile.semantic_sort_orphans",
    "strip_metadata": "compile.strip_metadata",
    "strip_edges_when_flow_sorted": "compile.strip_edges_when_flow_sorted",
}


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse command router for all supported CLI workflows."""

    parser = argparse.ArgumentParser(
        prog="canvas-compile",
        description=(
            "canvas-compiler: deterministic ordering of JSON Canvas documents.\n\n"
            "Common workflows:\n"
            "  canvas-compile compile board.canvas            Write board.json\n"
            "  canvas-compile export board.canvas             Write board.pure.json\n"
            "  canvas-compile check board.canvas              Validate only\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Path to TOML config (default: ./canvas-compiler.toml if present).",
    )
    common.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Log at DEBUG level.",
    )
    common.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=None,
        help="Log line format on stderr (default: from config, else text).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # compile -------------------------------------------------------------
    compile_parser = subparsers.add_parser(
        "compile",
        parents=[common],
        help="Compile a canvas into deterministic reading order",
        description=(
            "Order nodes and edges by position, containment, color and flow.\n\n"
            "Examples:\n"
            "  canvas-compile compile board.canvas\n"
            "  canvas-compile compile board.canvas --flow-sort --out ordered.json\n"
            "  canvas-compile compile board.canvas --strip-metadata --json\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    compile_parser.add_argument("in_path", help="Path to the .canvas (or .json) input")
    compile_parser.add_argument("--out", dest="out_path", default=None, help="Output path")
    compile_parser.add_argument(
        "--color-nodes",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Use node color as a sort key (default: on)",
    )
    compile_parser.add_argument(
        "--color-edges",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Use edge color as a sort key (default: on)",
    )
    compile_parser.add_argument(
        "--flow-sort",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Order connected nodes by directional flow (default: off)",
    )
    compile_parser.add_argument(
        "--strip-metadata",
        action="store_const",
        const=True,
        default=None,
        help="Write the pure-data projection instead of the ordered canvas",
    )
    compile_parser.add_argument(
        "--strip-edges-when-flow-sorted",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Drop edges from pure output (default: on)",
    )
    compile_parser.add_argument(
        "--group-orphan-nodes",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Order root orphans by type, color and content instead of position (default: off)",
    )
    compile_parser.add_argument(
        "--json", action="store_true", help="Emit deterministic JSON output"
    )
    compile_parser.set_defaults(handler=_cmd_compile)

    # export --------------------------------------------------------------
    export_parser = subparsers.add_parser(
        "export",
        parents=[common],
        help="Export the pure-data projection of a canvas",
        description=(
            "Compile and strip spatial/visual metadata; labeled edges become node relations.\n\n"
            "Examples:\n"
            "  canvas-compile export board.canvas\n"
            "  canvas-compile export board.canvas --out data.json\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    export_parser.add_argument("in_path", help="Path to the .canvas (or .json) input")
    export_parser.add_argument("--out", dest="out_path", default=None, help="Output path")
    export_parser.add_argument("--json", action="store_true", help="Emit deterministic JSON output")
    export_parser.set_defaults(handler=_cmd_export)

    # check ---------------------------------------------------------------
    check_parser = subparsers.add_parser(
        "check",
        parents=[common],
        help="Validate a canvas without writing anything",
        description=(
            "Run identifier and referential-integrity checks.\n\n"
            "Examples:\n"
            "  canvas-compile check board.canvas\n"
            "  canvas-compile check board.canvas --json\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    check_parser.add_argument("in_path", help="Path to the .canvas (or .json) input")
    check_parser.add_argument("--json", action="store_true", help="Emit deterministic JSON output")
    check_parser.set_defaults(handler=_cmd_check)

    return parser


# ---------------------------------------------------------------------------
# Entrypoints
# ---------------------------------------------------------------------------


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Parse argv, route to a command handler, and return process exit code."""

    parser = build_parser()
    namespace = parser.parse_args(list(argv) if argv is not None else None)
    handler = getattr(namespace, "handler", None)
    if not callable(handler):
        parser.print_help(sys.stderr)
        return 2

    try:
        result = handler(namespace)
    except CLIError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code
    return int(result)


def main(argv: Sequence[str] | None = None) -> int:
    return run_cli(argv)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _cmd_compile(args: argparse.Namespace) -> int:
    settings = _bootstrap(args)
    in_path = _require_input(args)

    try:
        report = compile_canvas_file(in_path, _optional_str(args.out_path), settings)
    except CanvasValidationError as exc:
        raise CLIError(str(exc), exit_code=1) from exc
    except CanvasFileError as exc:
        raise CLIError(str(exc), exit_code=2) from exc

    _emit_report("compile", report, settings, args)
    return 0


def _cmd_export(args: argparse.Namespace) -> int:
    settings = _bootstrap(args)
    in_path = _require_input(args)

    try:
        report = export_pure_file(in_path, _optional_str(args.out_path), settings)
    except CanvasValidationError as exc:
        raise CLIError(str(exc), exit_code=1) from exc
    except CanvasFileError as exc:
        raise CLIError(str(exc), exit_code=2) from exc

    _emit_report("export", report, settings.replace(strip_metadata=True), args)
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    _bootstrap(args)
    in_path = _require_input(args)

    try:
        document = read_canvas(in_path)
    except CanvasFileError as exc:
        raise CLIError(str(exc), exit_code=2) from exc

    payload: dict[str, object] = {"command": "check", "in_path": in_path.as_posix()}
    try:
        validated = validate_document(document)
    except CanvasValidationError as exc:
        payload.update({"valid": False, "error": exc.as_dict()})
        if _flag(args, "json"):
            _emit_json(payload)
        else:
            renderer = _get_renderer(args)
            renderer.heading(f"Check {in_path.name}")
            renderer.fail(str(exc))
        return 1

    parent_map = build_hierarchy(validated.nodes)
    groups = sum(1 for node in validated.nodes if node.is_group)
    roots = len(parent_map.roots(validated.nodes))
    payload.update(
        {
            "valid": True,
            "nodes": len(validated.nodes),
            "edges": len(validated.edges),
            "groups": groups,
            "roots": roots,
        }
    )

    if _flag(args, "json"):
        _emit_json(payload)
        return 0

    renderer = _get_renderer(args)
    renderer.heading(f"Check {in_path.name}")
    renderer.ok("identifiers and edge references are valid")
    renderer.kv("Nodes", len(validated.nodes))
    renderer.kv("Edges", len(validated.edges))
    renderer.kv("Groups", groups)
    renderer.kv("Top-level nodes", roots)
    return 0


# ---------------------------------------------------------------------------
# Rendering helpers
# ---------------------------------------------------------------------------


def _emit_json(payload: Mapping[str, object]) -> None:
    """Emit a JSON payload to stdout with deterministic formatting."""

    print(json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False))


def _get_renderer(args: argparse.Namespace) -> CLIRenderer:
    return create_renderer(verbose=_flag(args, "verbose"))


def _emit_report(
    command: str,
    report: CompileReport,
    settings: CompileSettings,
    args: argparse.Namespace,
) -> None:
    if _flag(args, "json"):
        _emit_json(
            {
                "command": command,
                **report.to_dict(),
                "settings": settings.to_mapping(),
            }
        )
        return

    renderer = _get_renderer(args)
    renderer.heading(f"Compiled {report.in_path.name} -> {report.out_path}")
    renderer.kv("Nodes", f"{report.nodes_in} in, {report.nodes_out} out")
    renderer.kv("Edges", f"{report.edges_in} in, {report.edges_out} out")
    if renderer.verbose:
        enabled = [name for name, value in settings.to_mapping().items() if value]
        renderer.kv("Enabled", ", ".join(enabled) or "(none)")
    if settings.strip_metadata and settings.strips_edges and report.edges_in:
        renderer.warning("edges were dropped from the pure-data output")


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _bootstrap(args: argparse.Namespace) -> CompileSettings:
    """Load config with CLI overrides, configure logging, and return compile settings."""

    config = _load_effective_config(args)
    observability = config.get("observability")
    level: object = "WARNING"
    log_format: object = "text"
    if isinstance(observability, Mapping):
        level = observability.get("log_level", level)
        log_format = observability.get("log_format", log_format)
    if _flag(args, "verbose"):
        level = "DEBUG"
    setup_logging(str(level), str(log_format))

    try:
        return compile_settings_from_config(config)
    except SettingsError as exc:
        raise CLIError(str(exc), exit_code=2) from exc


def _load_effective_config(args: argparse.Namespace) -> dict[str, Any]:
    config_path = _optional_str(getattr(args, "config_path", None))

    overrides: dict[str, object] = {
        path: getattr(args, dest, None) for dest, path in _COMPILE_FLAG_PATHS.items()
    }
    overrides["observability.log_format"] = getattr(args, "log_format", None)

    try:
        return load_config(config_path, cli_overrides=overrides)
    except (ConfigLoadError, ConfigValidationError) as exc:
        raise CLIError(str(exc), exit_code=2) from exc


def _require_input(args: argparse.Namespace) -> Path:
    raw = _optional_str(getattr(args, "in_path", None))
    if raw is None:
        raise CLIError("missing input path", exit_code=2)
    resolved = Path(raw).expanduser().resolve()
    if not resolved.is_file():
        raise CLIError(f"input file not found: {resolved}", exit_code=2)
    return resolved


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise CLIError("invalid optional string argument", exit_code=2)
    cleaned = value.strip()
    return cleaned or None


def _flag(args: argparse.Namespace, name: str) -> bool:
    value = getattr(args, name, False)
    return bool(value)


__all__ = ["CLIError", "build_parser", "main", "run_cli"]
