"""Stable constants shared across the compiler, config, and CLI layers."""

from __future__ import annotations

from typing import Final

# Schema versions for persisted contracts.
CONFIG_SCHEMA_VERSION: Final[int] = 1

# Default config file and environment prefix.
DEFAULT_CONFIG_FILE: Final[str] = "canvas-compiler.toml"
ENV_PREFIX: Final[str] = "CANVAS_"

# JSON Canvas node types.
NODE_TYPE_TEXT: Final[str] = "text"
NODE_TYPE_FILE: Final[str] = "file"
NODE_TYPE_LINK: Final[str] = "link"
NODE_TYPE_GROUP: Final[str] = "group"

# Node content fields, one per node type.
CONTENT_FIELDS: Final[tuple[str, ...]] = ("text", "file", "url", "label")

# Edge endpoint markers.
END_ARROW: Final[str] = "arrow"
END_NONE: Final[str] = "none"
DEFAULT_FROM_END: Final[str] = END_NONE
DEFAULT_TO_END: Final[str] = END_ARROW

# Output file suffixes.
COMPILED_SUFFIX: Final[str] = ".json"
PURE_SUFFIX: Final[str] = ".pure.json"
INPUT_SUFFIXES: Final[tuple[str, ...]] = (".canvas", ".json")

__all__ = [
    "COMPILED_SUFFIX",
    "CONFIG_SCHEMA_VERSION",
    "CONTENT_FIELDS",
    "DEFAULT_CONFIG_FILE",
    "DEFAULT_FROM_END",
    "DEFAULT_TO_END",
    "END_ARROW",
    "END_NONE",
    "ENV_PREFIX",
    "INPUT_SUFFIXES",
    "NODE_TYPE_FILE",
    "NODE_TYPE_GROUP",
    "NODE_TYPE_LINK",
    "NODE_TYPE_TEXT",
    "PURE_SUFFIX",
]
