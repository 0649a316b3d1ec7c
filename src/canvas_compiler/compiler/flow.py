"""Directed flow topology: connected components and topological depth per scope."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable, Mapping, Sequence, Set
from dataclasses import dataclass
from types import MappingProxyType

from canvas_compiler.domain.models import CanvasEdge, CanvasNode, EdgeDirection

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FlowGroup:
    """Maximal set of >= 2 nodes connected by directional edges in one scope."""

    members: frozenset[str]
    anchor: tuple[float, float]
    depths: Mapping[str, int]
    key: str

    def depth_of(self, node_id: str) -> int:
        return self.depths.get(node_id, 0)

    def sort_key(self) -> tuple[float, float, str]:
        return (*self.anchor, self.key)


@dataclass(frozen=True, slots=True)
class FlowIndex:
    """FlowGroups of one scope plus a node -> group lookup."""

    groups: tuple[FlowGroup, ...]
    by_node: Mapping[str, FlowGroup]

    def group_of(self, node_id: str) -> FlowGroup | None:
        return self.by_node.get(node_id)

    def depth_of(self, node_id: str) -> int | None:
        group = self.by_node.get(node_id)
        if group is None:
            return None
        return group.depth_of(node_id)

    def __bool__(self) -> bool:
        return bool(self.groups)


EMPTY_FLOW_INDEX = FlowIndex(groups=(), by_node=MappingProxyType({}))


@dataclass(slots=True)
class _ScopeGraph:
    adjacency: dict[str, set[str]]
    outgoing: dict[str, set[str]]
    incoming: dict[str, set[str]]


def build_flow_groups(nodes: Sequence[CanvasNode], edges: Iterable[CanvasEdge]) -> FlowIndex:
    """Find FlowGroups among ``nodes`` using only edges internal to that scope.

    Forward and reverse edges contribute both connectivity and direction.
    Bidirectional edges only connect; they record no direction. Edges with
    no arrow at either end are ignored.
    """

    if not nodes:
        return EMPTY_FLOW_INDEX

    positions = {node.id: node.position for node in nodes}
    graph = _build_scope_graph(positions.keys(), edges)

    groups: list[FlowGroup] = []
    for component in _connected_components(graph.adjacency):
        if len(component) < 2:
            continue
        anchor = min(positions[node_id] for node_id in component)
        depths = _assign_depths(component, graph)
        groups.append(
            FlowGroup(
                members=frozenset(component),
                anchor=anchor,
                depths=MappingProxyType(depths),
                key=min(component),
            )
        )

    groups.sort(key=lambda group: group.sort_key())
    by_node = {node_id: group for group in groups for node_id in group.members}
    logger.debug(
        "flow groups built",
        extra={"scope_size": len(nodes), "flow_groups": len(groups), "grouped": len(by_node)},
    )
    return FlowIndex(groups=tuple(groups), by_node=MappingProxyType(by_node))


def _build_scope_graph(scope: Iterable[str], edges: Iterable[CanvasEdge]) -> _ScopeGraph:
    graph = _ScopeGraph(adjacency={}, outgoing={}, incoming={})
    for node_id in scope:
        graph.adjacency[node_id] = set()
        graph.outgoing[node_id] = set()
        graph.incoming[node_id] = set()

    for edge in edges:
        if edge.from_node not in graph.adjacency or edge.to_node not in graph.adjacency:
            continue
        direction = edge.direction
        if direction is EdgeDirection.NONE:
            continue

        graph.adjacency[edge.from_node].add(edge.to_node)
        graph.adjacency[edge.to_node].add(edge.from_node)

        if direction is EdgeDirection.FORWARD:
            source, target = edge.from_node, edge.to_node
        elif direction is EdgeDirection.REVERSE:
            source, target = edge.to_node, edge.from_node
        else:
            continue
        graph.outgoing[source].add(target)
        graph.incoming[target].add(source)

    return graph


def _connected_components(adjacency: Mapping[str, Set[str]]) -> list[set[str]]:
    visited: set[str] = set()
    components: list[set[str]] = []

    for start in sorted(adjacency):
        if start in visited:
            continue
        component: set[str] = set()
        pending: deque[str] = deque([start])
        visited.add(start)
        while pending:
            current = pending.popleft()
            component.add(current)
            for neighbor in sorted(adjacency[current]):
                if neighbor not in visited:
                    visited.add(neighbor)
                    pending.append(neighbor)
        components.append(component)

    return components


def _assign_depths(component: Set[str], graph: _ScopeGraph) -> dict[str, int]:
    """Longest-path depth from in-degree-zero members (Kahn's algorithm).

    A member reached by the pass keeps the depth it was given even when a
    cycle stops it from being released. Members never reached at all sit on
    or behind a cycle and all receive ``max depth + 1``.
    """

    indegree = {
        node_id: sum(1 for source in graph.incoming[node_id] if source in component)
        for node_id in component
    }
    depths: dict[str, int] = {}
    ready: deque[str] = deque()
    for node_id in sorted(component):
        if indegree[node_id] == 0:
            depths[node_id] = 0
            ready.append(node_id)

    while ready:
        current = ready.popleft()
        current_depth = depths[current]
        for successor in sorted(graph.outgoing[current]):
            if successor not in component:
                continue
            indegree[successor] -= 1
            depths[successor] = max(depths.get(successor, 0), current_depth + 1)
            if indegree[successor] == 0:
                ready.append(successor)

    unresolved = sorted(node_id for node_id in component if node_id not in depths)
    if unresolved:
        cycle_depth = max(depths.values(), default=0) + 1
        for node_id in unresolved:
            depths[node_id] = cycle_depth

    return depths


__all__ = ["EMPTY_FLOW_INDEX", "FlowGroup", "FlowIndex", "build_flow_groups"]
