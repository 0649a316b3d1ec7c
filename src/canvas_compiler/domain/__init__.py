"""Domain types for JSON Canvas documents: typed node/edge views and id normalization."""

from canvas_compiler.domain.ids import normalize_id
from canvas_compiler.domain.models import (
    Box,
    CanvasEdge,
    CanvasNode,
    EdgeDirection,
    FileContent,
    GroupContent,
    LinkContent,
    NodeContent,
    OpaqueContent,
    TextContent,
    classify_direction,
    content_key,
)

__all__ = [
    "Box",
    "CanvasEdge",
    "CanvasNode",
    "EdgeDirection",
    "FileContent",
    "GroupContent",
    "LinkContent",
    "NodeContent",
    "OpaqueContent",
    "TextContent",
    "classify_direction",
    "content_key",
    "normalize_id",
]
