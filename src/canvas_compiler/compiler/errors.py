"""Validation error taxonomy for canvas compilation.

Every error is fatal to the compile call. Each one carries a stable ``code``
and a ``context`` mapping naming the offending ids so callers can report
them without parsing the message.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType


class CanvasValidationError(ValueError):
    """Base class for documents rejected by the validation gate."""

    code: str = "CanvasValidationError"

    def __init__(self, message: str, **context: object) -> None:
        self.context: Mapping[str, object] = MappingProxyType(dict(context))
        super().__init__(message)

    def as_dict(self) -> dict[str, object]:
        """JSON-friendly description for machine-readable CLI output."""
        return {"code": self.code, "message": str(self), **dict(self.context)}


class InvalidDocument(CanvasValidationError):
    """The document or one of its entries is not a JSON object."""

    code = "InvalidDocument"

    def __init__(
        self,
        message: str,
        *,
        collection: str | None = None,
        index: int | None = None,
    ) -> None:
        super().__init__(message, collection=collection, index=index)
        self.collection = collection
        self.index = index


class MissingNodeId(CanvasValidationError):
    code = "MissingNodeId"

    def __init__(self, index: int) -> None:
        super().__init__(f"node at index {index} is missing an id", index=index)
        self.index = index


class DuplicateNodeId(CanvasValidationError):
    code = "DuplicateNodeId"

    def __init__(self, node_id: str) -> None:
        super().__init__(f"duplicate node id: {node_id}", node_id=node_id)
        self.node_id = node_id


class MissingEdgeId(CanvasValidationError):
    code = "MissingEdgeId"

    def __init__(self, index: int) -> None:
        super().__init__(f"edge at index {index} is missing an id", index=index)
        self.index = index


class DuplicateEdgeId(CanvasValidationError):
    code = "DuplicateEdgeId"

    def __init__(self, edge_id: str) -> None:
        super().__init__(f"duplicate edge id: {edge_id}", edge_id=edge_id)
        self.edge_id = edge_id


class EdgeMissingEndpoint(CanvasValidationError):
    code = "EdgeMissingEndpoint"

    def __init__(self, edge_id: str, endpoint: str) -> None:
        super().__init__(f"edge {edge_id} missing {endpoint}", edge_id=edge_id, endpoint=endpoint)
        self.edge_id = edge_id
        self.endpoint = endpoint


class DanglingEdgeReference(CanvasValidationError):
    code = "DanglingEdgeReference"

    def __init__(self, edge_id: str, endpoint: str, node_id: str) -> None:
        super().__init__(
            f"edge {edge_id} references missing {endpoint}: {node_id}",
            edge_id=edge_id,
            endpoint=endpoint,
            node_id=node_id,
        )
        self.edge_id = edge_id
        self.endpoint = endpoint
        self.node_id = node_id


__all__ = [
    "CanvasValidationError",
    "DanglingEdgeReference",
    "DuplicateEdgeId",
    "DuplicateNodeId",
    "EdgeMissingEndpoint",
    "InvalidDocument",
    "MissingEdgeId",
    "MissingNodeId",
]
