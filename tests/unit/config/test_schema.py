"""Unit tests for config schema validation and compile-section translation."""

from __future__ import annotations

import tomllib
from pathlib import Path

import pytest

from canvas_compiler.config.schema import (
    ConfigSchemaVersion,
    ConfigValidationError,
    assert_valid_config,
    compile_settings_from_config,
    default_config,
    merge_config,
    migration_guidance,
    validate_config,
)
from canvas_compiler.config.settings import CompileSettings

REPO_ROOT = Path(__file__).resolve().parents[3]


@pytest.mark.unit
def test_default_config_validates_and_is_a_copy() -> None:
    config = default_config()
    result = validate_config(config)

    assert result.is_valid
    assert result.config == config

    config["compile"]["flow_sort_nodes"] = True
    assert default_config()["compile"]["flow_sort_nodes"] is False


@pytest.mark.unit
def test_repository_config_file_validates() -> None:
    with (REPO_ROOT / "canvas-compiler.toml").open("rb") as handle:
        payload = tomllib.load(handle)

    result = validate_config(payload)

    assert result.is_valid
    assert result.config is not None
    assert result.config["meta"]["schema_version"] == ConfigSchemaVersion


@pytest.mark.unit
def test_unknown_fields_are_reported_with_paths() -> None:
    config = merge_config(
        default_config(),
        {"compile": {"sort_by_mood": True}, "extras": {}},
    )

    result = validate_config(config)

    assert not result.is_valid
    paths = {(issue.path, issue.message) for issue in result.issues}
    assert ("compile.sort_by_mood", "unknown field") in paths
    assert ("extras", "unknown field") in paths


@pytest.mark.unit
def test_type_errors_are_collected_not_short_circuited() -> None:
    config = merge_config(
        default_config(),
        {
            "compile": {"flow_sort_nodes": "yes", "strip_metadata": 1},
            "observability": {"log_format": "xml"},
        },
    )

    result = validate_config(config)

    by_path = {issue.path: issue.message for issue in result.issues}
    assert by_path["compile.flow_sort_nodes"] == "expected boolean, got str"
    assert by_path["compile.strip_metadata"] == "expected boolean, got int"
    assert by_path["observability.log_format"].startswith("invalid value 'xml'")


@pytest.mark.unit
def test_missing_section_fields_are_required() -> None:
    config = default_config()
    del config["compile"]["color_sort_edges"]

    result = validate_config(config)

    assert [(issue.path, issue.message) for issue in result.issues] == [
        ("compile.color_sort_edges", "missing required field")
    ]


@pytest.mark.unit
def test_log_level_is_normalized_to_upper_case() -> None:
    config = merge_config(default_config(), {"observability": {"log_level": "debug"}})

    validated = assert_valid_config(config)

    assert validated["observability"]["log_level"] == "DEBUG"


@pytest.mark.unit
def test_schema_version_mismatch_carries_migration_guidance() -> None:
    config = merge_config(default_config(), {"meta": {"schema_version": 99}})

    with pytest.raises(ConfigValidationError) as excinfo:
        assert_valid_config(config)

    message = str(excinfo.value)
    assert message.startswith("invalid config:\n- meta.schema_version:")
    assert "upgrade the canvas-compiler runtime" in message
    assert migration_guidance(ConfigSchemaVersion) == "schema version is current"


@pytest.mark.unit
def test_non_object_root_is_rejected() -> None:
    result = validate_config(["compile"])

    assert not result.is_valid
    assert result.issues[0].path == "<root>"


@pytest.mark.unit
def test_merge_config_is_deep_and_non_destructive() -> None:
    base = default_config()
    merged = merge_config(base, {"compile": {"flow_sort_nodes": True}})

    assert merged["compile"]["flow_sort_nodes"] is True
    assert merged["compile"]["color_sort_nodes"] is True
    assert base["compile"]["flow_sort_nodes"] is False


@pytest.mark.unit
def test_compile_settings_from_config() -> None:
    config = merge_config(
        default_config(),
        {"compile": {"flow_sort_nodes": True, "semantic_sort_orphans": True}},
    )

    settings = compile_settings_from_config(assert_valid_config(config))

    assert settings == CompileSettings(flow_sort_nodes=True, semantic_sort_orphans=True)
    assert compile_settings_from_config({}) == CompileSettings()
