"""Compile facade: validate -> hierarchy -> flatten -> edge order -> optional projection."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from canvas_compiler.compiler.flatten import flatten_hierarchy
from canvas_compiler.compiler.hierarchy import build_hierarchy
from canvas_compiler.compiler.ordering import sort_edges
from canvas_compiler.compiler.projection import project_pure
from canvas_compiler.compiler.validation import validate_document
from canvas_compiler.config.settings import CompileSettings, coerce_settings

logger = logging.getLogger(__name__)

CanvasDocument = dict[str, list[Any]]


@dataclass(frozen=True, slots=True)
class CompileResult:
    """Compiled document plus before/after collection sizes."""

    document: CanvasDocument
    settings: CompileSettings
    nodes_in: int
    edges_in: int

    @property
    def nodes_out(self) -> int:
        return len(self.document["nodes"])

    @property
    def edges_out(self) -> int:
        return len(self.document["edges"])


def compile_with_report(
    document: object,
    settings: CompileSettings | Mapping[str, object] | None = None,
) -> CompileResult:
    """Compile ``document`` and report collection sizes.

    Raises ``CanvasValidationError`` before any ordering work when the
    document is invalid.
    """

    resolved = coerce_settings(settings)
    validated = validate_document(document)

    parent_map = build_hierarchy(validated.nodes)
    ordered_nodes = flatten_hierarchy(validated.nodes, parent_map, resolved, validated.edges)
    ordered_edges = sort_edges(validated.edges, validated.nodes, resolved)

    compiled: CanvasDocument = {
        "nodes": [node.raw for node in ordered_nodes],
        "edges": [edge.raw for edge in ordered_edges],
    }
    if resolved.strip_metadata:
        compiled = project_pure(compiled, resolved)

    logger.info(
        "canvas compiled",
        extra={
            "nodes": len(validated.nodes),
            "edges": len(validated.edges),
            "groups": sum(1 for node in validated.nodes if node.is_group),
            "flow_sort": resolved.flow_sort_nodes,
            "strip_metadata": resolved.strip_metadata,
        },
    )
    return CompileResult(
        document=compiled,
        settings=resolved,
        nodes_in=len(validated.nodes),
        edges_in=len(validated.edges),
    )


def compile_canvas(
    document: object,
    settings: CompileSettings | Mapping[str, object] | None = None,
) -> CanvasDocument:
    """Return a new ``{"nodes", "edges"}`` mapping in deterministic order.

    Outside metadata projection the members are the input's own node and
    edge mappings, unmodified, only reordered.
    """

    return compile_with_report(document, settings).document


__all__ = ["CanvasDocument", "CompileResult", "compile_canvas", "compile_with_report"]
