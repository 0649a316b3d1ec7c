"""canvas-compiler: deterministic reading order for JSON Canvas documents."""

from canvas_compiler.compiler import (
    CanvasValidationError,
    CompileResult,
    compile,
    compile_canvas,
    compile_with_report,
    projectPure,
    project_pure,
)
from canvas_compiler.config import CompileSettings, SettingsError

__version__ = "0.1.0"

__all__ = [
    "CanvasValidationError",
    "CompileResult",
    "CompileSettings",
    "SettingsError",
    "__version__",
    "compile",
    "compile_canvas",
    "compile_with_report",
    "projectPure",
    "project_pure",
]
