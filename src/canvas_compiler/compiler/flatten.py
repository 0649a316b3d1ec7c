"""Hierarchical flattening: emit every group immediately followed by its subtree."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from canvas_compiler.compiler.hierarchy import ParentMap
from canvas_compiler.compiler.ordering import SortScope, sort_nodes
from canvas_compiler.config.settings import CompileSettings
from canvas_compiler.domain.models import CanvasEdge, CanvasNode

logger = logging.getLogger(__name__)


def flatten_hierarchy(
    nodes: Sequence[CanvasNode],
    parent_map: ParentMap,
    settings: CompileSettings,
    edges: Sequence[CanvasEdge] = (),
) -> list[CanvasNode]:
    """Return the final node sequence.

    Root orphans come first, then root groups in spatial order. A group is
    followed by its non-group children, then by each child subgroup together
    with that subgroup's own subtree.
    """

    roots = parent_map.roots(nodes)
    root_orphans = [node for node in roots if not node.is_group]
    root_groups = [node for node in roots if node.is_group]

    ordered = sort_nodes(root_orphans, SortScope.ROOT_ORPHANS, settings, edges)

    pending = sort_nodes(root_groups, SortScope.ROOT_GROUPS, settings, edges)
    pending.reverse()
    while pending:
        group = pending.pop()
        ordered.append(group)

        children = parent_map.children_of(group.id)
        if not children:
            continue

        arranged = sort_nodes(children, SortScope.GROUP_CHILDREN, settings, edges)
        ordered.extend(child for child in arranged if not child.is_group)

        subgroups = sort_nodes(
            (child for child in arranged if child.is_group),
            SortScope.SUBGROUPS,
            settings,
            edges,
        )
        pending.extend(reversed(subgroups))

    if len(ordered) != len(nodes):
        raise RuntimeError(
            f"flattening emitted {len(ordered)} of {len(nodes)} nodes; containment is not a forest"
        )

    logger.debug(
        "hierarchy flattened",
        extra={"root_orphans": len(root_orphans), "root_groups": len(root_groups)},
    )
    return ordered


__all__ = ["flatten_hierarchy"]
