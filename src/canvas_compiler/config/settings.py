"""Compile settings: the flat record of named booleans that steers ordering."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final


class SettingsError(ValueError):
    """Raised when a settings mapping has unknown keys or non-boolean values."""


@dataclass(frozen=True, slots=True)
class CompileSettings:
    """Ordering and export switches.

    Defaults: color sorting on, flow sorting off, orphans ordered spatially,
    no metadata stripping, and edges dropped from pure exports of
    flow-sorted documents.
    """

    color_sort_nodes: bool = True
    color_sort_edges: bool = True
    flow_sort_nodes: bool = False
    semantic_sort_orphans: bool = False
    strip_metadata: bool = False
    strip_edges_when_flow_sorted: bool = True

    @classmethod
    def from_mapping(cls, payload: Mapping[str, object] | None) -> CompileSettings:
        """Build settings from camelCase or snake_case keys.

        ``None`` values are treated as unset and keep their defaults.
        """

        if payload is None:
            return cls()
        if not isinstance(payload, Mapping):
            raise SettingsError(f"settings must be a mapping, got {type(payload).__name__}")

        values: dict[str, bool] = {}
        for key in sorted(payload, key=str):
            if not isinstance(key, str):
                raise SettingsError(f"settings key must be a string, got {type(key).__name__}")
            field_name = _FIELD_ALIASES.get(key)
            if field_name is None:
                raise SettingsError(f"unknown setting {key!r}")
            value = payload[key]
            if value is None:
                continue
            if not isinstance(value, bool):
                raise SettingsError(
                    f"setting {key!r} must be a boolean, got {type(value).__name__}"
                )
            values[field_name] = value
        return cls(**values)

    def to_mapping(self, *, camel_case: bool = False) -> dict[str, bool]:
        payload = dataclasses.asdict(self)
        if not camel_case:
            return payload
        return {_CAMEL_NAMES[name]: value for name, value in payload.items()}

    def replace(self, **changes: bool) -> CompileSettings:
        return dataclasses.replace(self, **changes)

    @property
    def strips_edges(self) -> bool:
        """Whether the pure-data projection drops the edges collection."""
        return self.flow_sort_nodes or self.strip_edges_when_flow_sorted


_CAMEL_NAMES: Final[dict[str, str]] = {
    "color_sort_nodes": "colorSortNodes",
    "color_sort_edges": "colorSortEdges",
    "flow_sort_nodes": "flowSortNodes",
    "semantic_sort_orphans": "semanticSortOrphans",
    "strip_metadata": "stripMetadata",
    "strip_edges_when_flow_sorted": "stripEdgesWhenFlowSorted",
}

_FIELD_ALIASES: Final[dict[str, str]] = {
    **{name: name for name in _CAMEL_NAMES},
    **{camel: name for name, camel in _CAMEL_NAMES.items()},
    "flowSort": "flow_sort_nodes",
}

SETTING_NAMES: Final[tuple[str, ...]] = tuple(_CAMEL_NAMES)


def coerce_settings(settings: CompileSettings | Mapping[str, object] | None) -> CompileSettings:
    """Accept a ``CompileSettings`` instance, a settings mapping, or ``None``."""

    if isinstance(settings, CompileSettings):
        return settings
    return CompileSettings.from_mapping(settings)


__all__ = ["SETTING_NAMES", "CompileSettings", "SettingsError", "coerce_settings"]
