"""Pure-data projection: drop presentation fields and embed labeled edges."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from canvas_compiler.compiler.errors import InvalidDocument
from canvas_compiler.compiler.validation import document_collection, require_entry
from canvas_compiler.config.settings import CompileSettings, coerce_settings
from canvas_compiler.constants import (
    CONTENT_FIELDS,
    NODE_TYPE_FILE,
    NODE_TYPE_GROUP,
    NODE_TYPE_LINK,
    NODE_TYPE_TEXT,
)
from canvas_compiler.domain.ids import normalize_id

_CONTENT_FIELD_BY_TYPE = {
    NODE_TYPE_TEXT: "text",
    NODE_TYPE_FILE: "file",
    NODE_TYPE_LINK: "url",
    NODE_TYPE_GROUP: "label",
}

Relation = dict[str, Any]


def project_pure(
    document: Mapping[str, object],
    settings: CompileSettings | Mapping[str, object] | None = None,
) -> dict[str, list[dict[str, Any]]]:
    """Return the pure-data form of an already ordered canvas document.

    Nodes keep ``id``, ``type``, their content field and, when labeled edges
    touch them, ``from``/``to`` relation lists. Labeled edges live only in
    those lists. Unlabeled edges survive as ``{id, fromNode, toNode}`` unless
    the settings strip edges. ``document`` is not modified.
    """

    resolved = coerce_settings(settings)
    if not isinstance(document, Mapping):
        raise InvalidDocument(f"canvas document must be an object, got {type(document).__name__}")

    raw_edges = [
        require_entry(raw, "edges", index)
        for index, raw in enumerate(document_collection(document, "edges"))
    ]
    labeled = [edge for edge in raw_edges if "label" in edge]
    unlabeled = [edge for edge in raw_edges if "label" not in edge]

    incoming, outgoing = _embed_relations(labeled)

    nodes = [
        _strip_node(require_entry(raw, "nodes", index), incoming, outgoing)
        for index, raw in enumerate(document_collection(document, "nodes"))
    ]

    edges: list[dict[str, Any]] = []
    if not resolved.strips_edges:
        edges = [_strip_edge(edge) for edge in unlabeled]

    return {"nodes": nodes, "edges": edges}


def _embed_relations(
    labeled: list[Mapping[str, object]],
) -> tuple[dict[str, list[Relation]], dict[str, list[Relation]]]:
    incoming: dict[str, list[Relation]] = {}
    outgoing: dict[str, list[Relation]] = {}
    for edge in labeled:
        from_id = normalize_id(edge.get("fromNode"))
        to_id = normalize_id(edge.get("toNode"))
        label = edge["label"]
        outgoing.setdefault(from_id, []).append({"node": to_id, "label": copy.deepcopy(label)})
        incoming.setdefault(to_id, []).append({"node": from_id, "label": copy.deepcopy(label)})
    return incoming, outgoing


def _strip_node(
    node: Mapping[str, object],
    incoming: Mapping[str, list[Relation]],
    outgoing: Mapping[str, list[Relation]],
) -> dict[str, Any]:
    stripped: dict[str, Any] = {}
    for key in ("id", "type"):
        if key in node:
            stripped[key] = copy.deepcopy(node[key])

    for key in _content_fields_for(node.get("type")):
        if key in node:
            stripped[key] = copy.deepcopy(node[key])

    node_id = normalize_id(node.get("id"))
    if node_id in incoming:
        stripped["from"] = incoming[node_id]
    if node_id in outgoing:
        stripped["to"] = outgoing[node_id]
    return stripped


def _content_fields_for(node_type: object) -> tuple[str, ...]:
    if isinstance(node_type, str) and node_type in _CONTENT_FIELD_BY_TYPE:
        return (_CONTENT_FIELD_BY_TYPE[node_type],)
    return CONTENT_FIELDS


def _strip_edge(edge: Mapping[str, object]) -> dict[str, Any]:
    return {
        key: copy.deepcopy(edge[key]) for key in ("id", "fromNode", "toNode") if key in edge
    }


__all__ = ["project_pure"]
