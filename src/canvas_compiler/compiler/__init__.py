"""Compilation engine: validation, containment, flow topology, ordering, projection."""

from canvas_compiler.compiler.errors import (
    CanvasValidationError,
    DanglingEdgeReference,
    DuplicateEdgeId,
    DuplicateNodeId,
    EdgeMissingEndpoint,
    InvalidDocument,
    MissingEdgeId,
    MissingNodeId,
)
from canvas_compiler.compiler.flatten import flatten_hierarchy
from canvas_compiler.compiler.flow import FlowGroup, FlowIndex, build_flow_groups
from canvas_compiler.compiler.hierarchy import ParentMap, build_hierarchy
from canvas_compiler.compiler.ordering import SortScope, sort_edges, sort_nodes
from canvas_compiler.compiler.pipeline import (
    CanvasDocument,
    CompileResult,
    compile_canvas,
    compile_with_report,
)
from canvas_compiler.compiler.projection import project_pure
from canvas_compiler.compiler.validation import ValidatedDocument, validate_document

compile = compile_canvas  # noqa: A001 - external contract name.
projectPure = project_pure  # noqa: N816 - external contract name.

__all__ = [
    "CanvasDocument",
    "CanvasValidationError",
    "CompileResult",
    "DanglingEdgeReference",
    "DuplicateEdgeId",
    "DuplicateNodeId",
    "EdgeMissingEndpoint",
    "FlowGroup",
    "FlowIndex",
    "InvalidDocument",
    "MissingEdgeId",
    "MissingNodeId",
    "ParentMap",
    "SortScope",
    "ValidatedDocument",
    "build_flow_groups",
    "build_hierarchy",
    "compile",
    "compile_canvas",
    "compile_with_report",
    "flatten_hierarchy",
    "projectPure",
    "project_pure",
    "sort_edges",
    "sort_nodes",
    "validate_document",
]
