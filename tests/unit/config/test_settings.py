"""Unit tests for CompileSettings parsing and normalization."""

from __future__ import annotations

import pytest

from canvas_compiler.config.settings import (
    SETTING_NAMES,
    CompileSettings,
    SettingsError,
    coerce_settings,
)


@pytest.mark.unit
def test_defaults_match_documented_switches() -> None:
    settings = CompileSettings()

    assert settings.color_sort_nodes is True
    assert settings.color_sort_edges is True
    assert settings.flow_sort_nodes is False
    assert settings.semantic_sort_orphans is False
    assert settings.strip_metadata is False
    assert settings.strip_edges_when_flow_sorted is True


@pytest.mark.unit
def test_from_mapping_accepts_camel_and_snake_case() -> None:
    settings = CompileSettings.from_mapping(
        {"colorSortNodes": False, "semantic_sort_orphans": True, "stripMetadata": True}
    )

    assert settings == CompileSettings(
        color_sort_nodes=False, semantic_sort_orphans=True, strip_metadata=True
    )


@pytest.mark.unit
def test_flow_sort_alias_maps_to_flow_sort_nodes() -> None:
    assert CompileSettings.from_mapping({"flowSort": True}).flow_sort_nodes is True


@pytest.mark.unit
def test_none_payload_and_none_values_keep_defaults() -> None:
    assert CompileSettings.from_mapping(None) == CompileSettings()
    assert CompileSettings.from_mapping({"colorSortEdges": None}) == CompileSettings()


@pytest.mark.unit
def test_unknown_key_is_rejected() -> None:
    with pytest.raises(SettingsError, match="unknown setting 'sortByMood'"):
        CompileSettings.from_mapping({"sortByMood": True})


@pytest.mark.unit
@pytest.mark.parametrize("value", [1, "true", 0.0, []])
def test_non_boolean_value_is_rejected(value: object) -> None:
    with pytest.raises(SettingsError, match="must be a boolean"):
        CompileSettings.from_mapping({"flowSortNodes": value})


@pytest.mark.unit
def test_non_mapping_payload_is_rejected() -> None:
    with pytest.raises(SettingsError, match="must be a mapping"):
        CompileSettings.from_mapping(["flowSort"])  # type: ignore[arg-type]


@pytest.mark.unit
def test_to_mapping_round_trips_through_camel_case() -> None:
    settings = CompileSettings(flow_sort_nodes=True, strip_edges_when_flow_sorted=False)

    camel = settings.to_mapping(camel_case=True)

    assert camel["flowSortNodes"] is True
    assert camel["stripEdgesWhenFlowSorted"] is False
    assert CompileSettings.from_mapping(camel) == settings
    assert tuple(settings.to_mapping()) == SETTING_NAMES


@pytest.mark.unit
@pytest.mark.parametrize(
    ("flow_sort", "strip_when_flow", "expected"),
    [
        (False, False, False),
        (False, True, True),
        (True, False, True),
        (True, True, True),
    ],
)
def test_strips_edges(flow_sort: bool, strip_when_flow: bool, expected: bool) -> None:
    settings = CompileSettings(
        flow_sort_nodes=flow_sort, strip_edges_when_flow_sorted=strip_when_flow
    )
    assert settings.strips_edges is expected


@pytest.mark.unit
def test_coerce_settings_passes_instances_through() -> None:
    settings = CompileSettings(flow_sort_nodes=True)

    assert coerce_settings(settings) is settings
    assert coerce_settings({"flowSort": True}) == settings
    assert coerce_settings(None) == CompileSettings()
