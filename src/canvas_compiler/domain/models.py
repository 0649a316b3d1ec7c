"""Typed views over raw JSON Canvas nodes and edges.

The raw mappings are kept untouched and re-emitted verbatim; the typed views
only carry what ordering needs: normalized ids, a bounding box, a color key,
and a tagged content variant per node type.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Final

from canvas_compiler.constants import (
    DEFAULT_FROM_END,
    DEFAULT_TO_END,
    END_ARROW,
    NODE_TYPE_FILE,
    NODE_TYPE_GROUP,
    NODE_TYPE_LINK,
    NODE_TYPE_TEXT,
)
from canvas_compiler.domain.ids import normalize_id

_LINK_TYPE_PRIORITY: Final[int] = 1
_DEFAULT_TYPE_PRIORITY: Final[int] = 0


def finite_number(value: object) -> float:
    """Return ``value`` as a float when it is a finite number, else ``0.0``."""

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    parsed = float(value)
    if not math.isfinite(parsed):
        return 0.0
    return parsed


def color_key(value: object) -> str:
    """Lowercased color string; a missing color is ``""`` and sorts first."""

    if isinstance(value, str):
        return value.lower()
    return ""


@dataclass(frozen=True, slots=True)
class Box:
    """Axis-aligned bounding box in canvas coordinates."""

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @classmethod
    def from_raw(cls, raw: Mapping[str, object]) -> Box:
        return cls(
            x=finite_number(raw.get("x")),
            y=finite_number(raw.get("y")),
            width=finite_number(raw.get("width")),
            height=finite_number(raw.get("height")),
        )

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def position(self) -> tuple[float, float]:
        """Reading-order position: ``(y, x)``."""
        return (self.y, self.x)

    def encloses(self, other: Box) -> bool:
        """True when ``other`` lies entirely within this box (edges inclusive)."""

        return (
            other.x >= self.x
            and other.y >= self.y
            and other.x + other.width <= self.x + self.width
            and other.y + other.height <= self.y + self.height
        )


# ---------------------------------------------------------------------------
# Node content variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TextContent:
    text: str | None


@dataclass(frozen=True, slots=True)
class FileContent:
    file: str | None


@dataclass(frozen=True, slots=True)
class LinkContent:
    url: str | None


@dataclass(frozen=True, slots=True)
class GroupContent:
    label: str | None


@dataclass(frozen=True, slots=True)
class OpaqueContent:
    """Content of a node whose ``type`` is not one of the JSON Canvas types."""

    type_name: str


NodeContent = TextContent | FileContent | LinkContent | GroupContent | OpaqueContent


def _optional_str(value: object) -> str | None:
    return value if isinstance(value, str) else None


def parse_content(raw: Mapping[str, object]) -> NodeContent:
    """Build the content variant selected by the node's ``type``."""

    node_type = raw.get("type")
    if node_type == NODE_TYPE_TEXT:
        return TextContent(text=_optional_str(raw.get("text")))
    if node_type == NODE_TYPE_FILE:
        return FileContent(file=_optional_str(raw.get("file")))
    if node_type == NODE_TYPE_LINK:
        return LinkContent(url=_optional_str(raw.get("url")))
    if node_type == NODE_TYPE_GROUP:
        return GroupContent(label=_optional_str(raw.get("label")))
    return OpaqueContent(type_name=node_type if isinstance(node_type, str) else "")


def content_key(content: NodeContent, node_id: str) -> str:
    """Type-specific content string used as the final semantic tiebreaker.

    text -> the text, file -> the basename, link -> the full URL (protocol
    kept), group -> the label. Everything falls back to the node id.
    """

    if isinstance(content, TextContent):
        if content.text is not None:
            return content.text.lower().strip()
    elif isinstance(content, FileContent):
        if content.file is not None:
            basename = content.file.rsplit("/", 1)[-1] or content.file
            return basename.lower().strip()
    elif isinstance(content, LinkContent):
        if content.url is not None:
            return content.url.lower().strip()
    elif isinstance(content, GroupContent):
        if content.label is not None:
            return content.label.lower().strip()
    elif not isinstance(content, OpaqueContent):
        raise TypeError(f"unsupported node content: {type(content).__name__}")
    return node_id.lower()


# ---------------------------------------------------------------------------
# Nodes and edges
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CanvasNode:
    """Validated node view. ``raw`` is the untouched input mapping."""

    id: str
    type: str
    box: Box
    color: str
    content: NodeContent
    raw: Mapping[str, object] = field(repr=False, compare=False)

    @classmethod
    def from_raw(cls, raw: Mapping[str, object], *, node_id: str) -> CanvasNode:
        node_type = raw.get("type")
        return cls(
            id=node_id,
            type=node_type if isinstance(node_type, str) else "",
            box=Box.from_raw(raw),
            color=color_key(raw.get("color")),
            content=parse_content(raw),
            raw=raw,
        )

    @property
    def is_group(self) -> bool:
        return self.type == NODE_TYPE_GROUP

    @property
    def position(self) -> tuple[float, float]:
        return self.box.position

    @property
    def type_priority(self) -> int:
        """Link nodes sort after every other node type."""
        if self.type == NODE_TYPE_LINK:
            return _LINK_TYPE_PRIORITY
        return _DEFAULT_TYPE_PRIORITY

    @property
    def content_key(self) -> str:
        return content_key(self.content, self.id)


class EdgeDirection(StrEnum):
    FORWARD = "forward"
    REVERSE = "reverse"
    BIDIRECTIONAL = "bidirectional"
    NONE = "none"


def _end_marker(value: object, default: str) -> str:
    if value is None:
        return default
    if isinstance(value, str):
        return value
    return ""


def classify_direction(from_end: str, to_end: str) -> EdgeDirection:
    """Map resolved endpoint markers to a flow direction."""

    from_arrow = from_end == END_ARROW
    to_arrow = to_end == END_ARROW
    if from_arrow and to_arrow:
        return EdgeDirection.BIDIRECTIONAL
    if to_arrow:
        return EdgeDirection.FORWARD
    if from_arrow:
        return EdgeDirection.REVERSE
    return EdgeDirection.NONE


@dataclass(frozen=True, slots=True)
class CanvasEdge:
    """Validated edge view. ``raw`` is the untouched input mapping."""

    id: str
    from_node: str
    to_node: str
    from_end: str
    to_end: str
    color: str
    raw: Mapping[str, object] = field(repr=False, compare=False)

    @classmethod
    def from_raw(
        cls,
        raw: Mapping[str, object],
        *,
        edge_id: str,
        from_node: str,
        to_node: str,
    ) -> CanvasEdge:
        return cls(
            id=edge_id,
            from_node=from_node,
            to_node=to_node,
            from_end=_end_marker(raw.get("fromEnd"), DEFAULT_FROM_END),
            to_end=_end_marker(raw.get("toEnd"), DEFAULT_TO_END),
            color=color_key(raw.get("color")),
            raw=raw,
        )

    @property
    def direction(self) -> EdgeDirection:
        return classify_direction(self.from_end, self.to_end)


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
    "color_key",
    "content_key",
    "finite_number",
    "parse_content",
]
