"""Multi-key deterministic ordering for nodes and edges.

Orderings are expressed as key tuples rather than pairwise comparators, so
every sort is a total order and independent of input order. Each chain ends
with the normalized id.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Sequence
from enum import StrEnum

from canvas_compiler.compiler.flow import EMPTY_FLOW_INDEX, FlowIndex, build_flow_groups
from canvas_compiler.config.settings import CompileSettings
from canvas_compiler.domain.models import CanvasEdge, CanvasNode

NodeKey = tuple[object, ...]
EdgeKey = tuple[float, float, float, float, float, float, str, str]

_GROUPED_RANK = 0
_ISOLATED_RANK = 1


class SortScope(StrEnum):
    """Where a batch of nodes sits in the containment hierarchy."""

    ROOT_ORPHANS = "root_orphans"
    ROOT_GROUPS = "root_groups"
    GROUP_CHILDREN = "group_children"
    SUBGROUPS = "subgroups"


def is_semantic_scope(scope: SortScope, settings: CompileSettings) -> bool:
    """Group children always sort semantically; root orphans only on request."""

    if scope is SortScope.GROUP_CHILDREN:
        return True
    return scope is SortScope.ROOT_ORPHANS and settings.semantic_sort_orphans


def uses_node_color(scope: SortScope, settings: CompileSettings) -> bool:
    """Subgroups are ordered purely spatially, never by color."""

    return settings.color_sort_nodes and scope is not SortScope.SUBGROUPS


def node_sort_key(
    node: CanvasNode,
    *,
    semantic: bool,
    color: bool,
    flow: FlowIndex = EMPTY_FLOW_INDEX,
) -> NodeKey:
    """Key tuple for ``node`` within one scope.

    Members of a FlowGroup sort as one block placed at the group's anchor;
    inside the block they follow flow depth, then position, color, content.
    Spatial scopes interleave blocks and isolated nodes by position, a block
    winning ties. Semantic scopes place blocks ahead of isolated nodes.
    """

    node_color = node.color if color else ""
    group = flow.group_of(node.id)

    if group is not None:
        inner = (
            group.depth_of(node.id),
            node.box.y,
            node.box.x,
            node_color,
            node.content_key,
            node.id,
        )
        anchor_y, anchor_x = group.anchor
        if semantic:
            # Anchor-vs-isolated comparison here would mix position and content
            # keys and lose transitivity, so whole blocks lead the scope.
            return (_GROUPED_RANK, anchor_y, anchor_x, group.key, inner)
        return (anchor_y, anchor_x, _GROUPED_RANK, group.key, inner)

    tail = (node.type_priority, node_color, node.content_key, node.id)
    if semantic:
        return (_ISOLATED_RANK, *tail)
    return (node.box.y, node.box.x, _ISOLATED_RANK, "", tail)


def sort_nodes(
    nodes: Iterable[CanvasNode],
    scope: SortScope,
    settings: CompileSettings,
    edges: Sequence[CanvasEdge] = (),
) -> list[CanvasNode]:
    """Return ``nodes`` ordered for ``scope``.

    With flow sorting enabled the FlowGroups are computed over exactly the
    nodes passed in, using only edges internal to that set.
    """

    batch = list(nodes)
    flow = build_flow_groups(batch, edges) if settings.flow_sort_nodes else EMPTY_FLOW_INDEX
    key = _node_key_function(scope, settings, flow)
    return sorted(batch, key=key)


def _node_key_function(
    scope: SortScope,
    settings: CompileSettings,
    flow: FlowIndex,
) -> Callable[[CanvasNode], NodeKey]:
    semantic = is_semantic_scope(scope, settings)
    color = uses_node_color(scope, settings)

    def key(node: CanvasNode) -> NodeKey:
        return node_sort_key(node, semantic=semantic, color=color, flow=flow)

    return key


def edge_sort_key(
    edge: CanvasEdge,
    *,
    positions: Callable[[str], tuple[float, float]],
    color: bool,
    flow: FlowIndex = EMPTY_FLOW_INDEX,
) -> EdgeKey:
    """Key tuple for ``edge``: endpoint flow depths, endpoint positions, color, id.

    Endpoints outside every FlowGroup have no depth and sort after resolved
    depths.
    """

    from_y, from_x = positions(edge.from_node)
    to_y, to_x = positions(edge.to_node)
    return (
        _depth_or_inf(flow, edge.from_node),
        _depth_or_inf(flow, edge.to_node),
        from_y,
        from_x,
        to_y,
        to_x,
        edge.color if color else "",
        edge.id,
    )


def sort_edges(
    edges: Sequence[CanvasEdge],
    nodes: Sequence[CanvasNode],
    settings: CompileSettings,
) -> list[CanvasEdge]:
    """Order all edges against the document-wide node position index."""

    positions = {node.id: node.position for node in nodes}
    flow = build_flow_groups(nodes, edges) if settings.flow_sort_nodes else EMPTY_FLOW_INDEX

    def position_of(node_id: str) -> tuple[float, float]:
        return positions.get(node_id, (0.0, 0.0))

    return sorted(
        edges,
        key=lambda edge: edge_sort_key(
            edge,
            positions=position_of,
            color=settings.color_sort_edges,
            flow=flow,
        ),
    )


def _depth_or_inf(flow: FlowIndex, node_id: str) -> float:
    depth = flow.depth_of(node_id)
    if depth is None:
        return math.inf
    return float(depth)


__all__ = [
    "SortScope",
    "edge_sort_key",
    "is_semantic_scope",
    "node_sort_key",
    "sort_edges",
    "sort_nodes",
    "uses_node_color",
]
