"""Validation gate: identifier well-formedness and referential integrity."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from canvas_compiler.compiler.errors import (
    DanglingEdgeReference,
    DuplicateEdgeId,
    DuplicateNodeId,
    EdgeMissingEndpoint,
    InvalidDocument,
    MissingEdgeId,
    MissingNodeId,
)
from canvas_compiler.domain.ids import normalize_id
from canvas_compiler.domain.models import CanvasEdge, CanvasNode


@dataclass(frozen=True, slots=True)
class ValidatedDocument:
    """Typed, validated view of a canvas document in input order."""

    nodes: tuple[CanvasNode, ...]
    edges: tuple[CanvasEdge, ...]
    nodes_by_id: Mapping[str, CanvasNode]


def document_collection(document: Mapping[str, object], key: str) -> list[object]:
    """Return ``document[key]`` when it is a list; anything else reads as empty."""

    raw = document.get(key)
    if isinstance(raw, list):
        return raw
    return []


def validate_document(document: object) -> ValidatedDocument:
    """Validate ``document`` and return typed node/edge views.

    Raises a ``CanvasValidationError`` subclass on the first violation; the
    document is never partially accepted.
    """

    if not isinstance(document, Mapping):
        raise InvalidDocument(f"canvas document must be an object, got {type(document).__name__}")

    nodes = _validate_nodes(document_collection(document, "nodes"))
    nodes_by_id = {node.id: node for node in nodes}
    edges = _validate_edges(document_collection(document, "edges"), nodes_by_id)

    return ValidatedDocument(
        nodes=nodes,
        edges=edges,
        nodes_by_id=MappingProxyType(nodes_by_id),
    )


def _validate_nodes(raw_nodes: Sequence[object]) -> tuple[CanvasNode, ...]:
    seen: set[str] = set()
    nodes: list[CanvasNode] = []
    for index, raw in enumerate(raw_nodes):
        entry = require_entry(raw, "nodes", index)
        node_id = normalize_id(entry.get("id"))
        if not node_id:
            raise MissingNodeId(index)
        if node_id in seen:
            raise DuplicateNodeId(node_id)
        seen.add(node_id)
        nodes.append(CanvasNode.from_raw(entry, node_id=node_id))
    return tuple(nodes)


def _validate_edges(
    raw_edges: Sequence[object],
    nodes_by_id: Mapping[str, CanvasNode],
) -> tuple[CanvasEdge, ...]:
    seen: set[str] = set()
    edges: list[CanvasEdge] = []
    for index, raw in enumerate(raw_edges):
        entry = require_entry(raw, "edges", index)
        edge_id = normalize_id(entry.get("id"))
        if not edge_id:
            raise MissingEdgeId(index)
        if edge_id in seen:
            raise DuplicateEdgeId(edge_id)
        seen.add(edge_id)

        from_node = normalize_id(entry.get("fromNode"))
        to_node = normalize_id(entry.get("toNode"))
        if not from_node:
            raise EdgeMissingEndpoint(edge_id, "fromNode")
        if not to_node:
            raise EdgeMissingEndpoint(edge_id, "toNode")
        if from_node not in nodes_by_id:
            raise DanglingEdgeReference(edge_id, "fromNode", from_node)
        if to_node not in nodes_by_id:
            raise DanglingEdgeReference(edge_id, "toNode", to_node)

        edges.append(
            CanvasEdge.from_raw(entry, edge_id=edge_id, from_node=from_node, to_node=to_node)
        )
    return tuple(edges)


def require_entry(raw: object, collection: str, index: int) -> Mapping[str, object]:
    """Return ``raw`` when it is an object.

    A null or non-object entry has no readable id, so it fails as that
    collection's missing-id error.
    """

    if not isinstance(raw, Mapping):
        if collection == "nodes":
            raise MissingNodeId(index)
        raise MissingEdgeId(index)
    return raw


__all__ = ["ValidatedDocument", "document_collection", "require_entry", "validate_document"]
