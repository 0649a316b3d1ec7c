"""In-process tests for the canvas-compile command router."""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from canvas_compiler.main import cli_entrypoint
from canvas_compiler.observability import shutdown_logging
from canvas_compiler.ui.cli import build_parser, run_cli

BOARD: dict[str, Any] = {
    "nodes": [
        {
            "id": "group",
            "type": "group",
            "label": "Box",
            "x": 0,
            "y": 0,
            "width": 400,
            "height": 400,
        },
        {
            "id": "inner",
            "type": "text",
            "text": "inside",
            "x": 10,
            "y": 10,
            "width": 50,
            "height": 50,
        },
        {"id": "loose", "type": "text", "text": "outside", "x": 900, "y": 900},
    ],
    "edges": [{"id": "e1", "fromNode": "loose", "toNode": "inner", "label": "points at"}],
}


@pytest.fixture(autouse=True)
def _isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.chdir(tmp_path)
    for name in (
        "CANVAS_COMPILE_FLOW_SORT_NODES",
        "CANVAS_COMPILE_STRIP_METADATA",
        "CANVAS_OBSERVABILITY_LOG_FORMAT",
        "CANVAS_OBSERVABILITY_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    yield
    shutdown_logging()


def _board(tmp_path: Path, document: object = BOARD, name: str = "board.canvas") -> Path:
    path = tmp_path / name
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


def _stdout_json(capsys: pytest.CaptureFixture[str]) -> dict[str, Any]:
    payload = json.loads(capsys.readouterr().out)
    assert isinstance(payload, dict)
    return payload


@pytest.mark.unit
def test_parser_requires_a_command(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        build_parser().parse_args([])
    assert excinfo.value.code == 2
    assert "canvas-compile" in capsys.readouterr().err


@pytest.mark.unit
def test_compile_flags_default_to_unset() -> None:
    args = build_parser().parse_args(["compile", "board.canvas"])

    assert args.flow_sort is None
    assert args.strip_metadata is None
    assert args.color_nodes is None

    negated = build_parser().parse_args(["compile", "board.canvas", "--no-color-nodes"])
    assert negated.color_nodes is False


@pytest.mark.unit
def test_compile_writes_default_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = _board(tmp_path)

    assert run_cli(["compile", str(source)]) == 0

    out = capsys.readouterr().out
    assert out.startswith(f"Compiled board.canvas -> {(tmp_path / 'board.json').resolve()}")
    assert "  Nodes: 3 in, 3 out" in out
    written = json.loads((tmp_path / "board.json").read_text(encoding="utf-8"))
    assert [node["id"] for node in written["nodes"]] == ["loose", "group", "inner"]


@pytest.mark.unit
def test_compile_json_report_includes_effective_settings(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    source = _board(tmp_path)
    out = tmp_path / "out" / "ordered.json"

    code = run_cli(["compile", str(source), "--out", str(out), "--flow-sort", "--json"])

    assert code == 0
    payload = _stdout_json(capsys)
    assert payload["command"] == "compile"
    assert payload["out_path"] == out.resolve().as_posix()
    assert payload["settings"]["flow_sort_nodes"] is True
    assert payload["settings"]["color_sort_nodes"] is True
    assert out.is_file()


@pytest.mark.unit
def test_config_file_values_apply_unless_a_flag_overrides(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    source = _board(tmp_path)
    (tmp_path / "canvas-compiler.toml").write_text(
        "[compile]\nflow_sort_nodes = true\ncolor_sort_nodes = false\n", encoding="utf-8"
    )

    assert run_cli(["compile", str(source), "--color-nodes", "--json"]) == 0

    settings = _stdout_json(capsys)["settings"]
    assert settings["flow_sort_nodes"] is True
    assert settings["color_sort_nodes"] is True


@pytest.mark.unit
def test_export_writes_pure_projection(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = _board(tmp_path)

    assert run_cli(["export", str(source), "--json"]) == 0

    payload = _stdout_json(capsys)
    assert payload["command"] == "export"
    assert payload["settings"]["strip_metadata"] is True
    written = json.loads((tmp_path / "board.pure.json").read_text(encoding="utf-8"))
    assert written["edges"] == []
    by_id = {node["id"]: node for node in written["nodes"]}
    assert by_id["loose"]["to"] == [{"node": "inner", "label": "points at"}]
    assert by_id["group"] == {"id": "group", "type": "group", "label": "Box"}


@pytest.mark.unit
def test_check_reports_structure(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = _board(tmp_path)

    assert run_cli(["check", str(source), "--json"]) == 0

    payload = _stdout_json(capsys)
    assert payload == {
        "command": "check",
        "in_path": source.resolve().as_posix(),
        "valid": True,
        "nodes": 3,
        "edges": 1,
        "groups": 1,
        "roots": 2,
    }
    assert not (tmp_path / "board.json").exists()


@pytest.mark.unit
def test_check_rejects_duplicate_ids(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = _board(tmp_path, {"nodes": [{"id": "a"}, {"id": "a"}]})

    assert run_cli(["check", str(source), "--json"]) == 1

    payload = _stdout_json(capsys)
    assert payload["valid"] is False
    assert payload["error"] == {
        "code": "DuplicateNodeId",
        "message": "duplicate node id: a",
        "node_id": "a",
    }


@pytest.mark.unit
def test_compile_validation_failure_exits_one(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    source = _board(tmp_path, {"nodes": [{"id": "a"}], "edges": [{"id": "e", "fromNode": "a"}]})

    assert run_cli(["compile", str(source)]) == 1

    assert "error: edge e missing toNode" in capsys.readouterr().err
    assert not (tmp_path / "board.json").exists()


@pytest.mark.unit
def test_missing_input_exits_two(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert run_cli(["compile", str(tmp_path / "absent.canvas")]) == 2
    assert "input file not found" in capsys.readouterr().err


@pytest.mark.unit
def test_invalid_json_exits_two(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = tmp_path / "broken.canvas"
    source.write_text("{", encoding="utf-8")

    assert run_cli(["export", str(source)]) == 2
    assert "invalid JSON in" in capsys.readouterr().err


@pytest.mark.unit
def test_bad_config_exits_two(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = _board(tmp_path)
    config = tmp_path / "bad.toml"
    config.write_text("[compile]\nflow_sort_nodes = 3\n", encoding="utf-8")

    assert run_cli(["compile", str(source), "--config", str(config)]) == 2
    assert "compile.flow_sort_nodes: expected boolean, got int" in capsys.readouterr().err


@pytest.mark.unit
def test_entrypoint_normalizes_usage_errors(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli_entrypoint(["frobnicate"]) == 2
    assert "invalid choice" in capsys.readouterr().err
