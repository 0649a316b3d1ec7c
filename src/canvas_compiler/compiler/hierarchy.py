"""Containment hierarchy: assign each node to its innermost enclosing group."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from canvas_compiler.domain.models import CanvasNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ParentMap:
    """Immediate containment forest.

    ``children`` maps a group id to its direct children in input order;
    ``parents`` maps a contained node id to its group id.
    """

    children: Mapping[str, tuple[CanvasNode, ...]]
    parents: Mapping[str, str]

    def children_of(self, group_id: str) -> tuple[CanvasNode, ...]:
        return self.children.get(group_id, ())

    def parent_of(self, node_id: str) -> str | None:
        return self.parents.get(node_id)

    def is_root(self, node_id: str) -> bool:
        return node_id not in self.parents

    def roots(self, nodes: Iterable[CanvasNode]) -> tuple[CanvasNode, ...]:
        return tuple(node for node in nodes if self.is_root(node.id))


def build_hierarchy(nodes: Sequence[CanvasNode]) -> ParentMap:
    """Compute the containment forest for ``nodes``.

    Each node (groups included) is assigned to the smallest-area group whose
    box fully encloses it. Equal areas resolve to the smaller id. Groups with
    identical boxes enclose each other; only the smaller id may parent the
    larger, which keeps the result acyclic.
    """

    groups = [node for node in nodes if node.is_group]
    children: dict[str, list[CanvasNode]] = {}
    parents: dict[str, str] = {}

    for node in nodes:
        parent = _innermost_parent(node, groups)
        if parent is None:
            continue
        parents[node.id] = parent.id
        children.setdefault(parent.id, []).append(node)

    logger.debug(
        "containment hierarchy built",
        extra={"groups": len(groups), "contained": len(parents), "nodes": len(nodes)},
    )
    return ParentMap(
        children=MappingProxyType({key: tuple(value) for key, value in children.items()}),
        parents=MappingProxyType(parents),
    )


def _innermost_parent(node: CanvasNode, groups: Sequence[CanvasNode]) -> CanvasNode | None:
    best: CanvasNode | None = None
    for group in groups:
        if not _can_parent(group, node):
            continue
        if best is None or (group.box.area, group.id) < (best.box.area, best.id):
            best = group
    return best


def _can_parent(group: CanvasNode, node: CanvasNode) -> bool:
    if group.id == node.id:
        return False
    if not group.box.encloses(node.box):
        return False
    if node.is_group and node.box.encloses(group.box):
        return group.id < node.id
    return True


__all__ = ["ParentMap", "build_hierarchy"]
