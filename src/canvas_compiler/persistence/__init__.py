"""Persistence layer: canvas file reading and compiled artifact writing."""

from canvas_compiler.persistence.canvas_files import (
    CanvasFileError,
    CompileReport,
    compile_canvas_file,
    default_output_path,
    dump_canvas_json,
    export_pure_file,
    read_canvas,
    write_canvas_json,
)

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
