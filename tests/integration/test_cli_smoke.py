"""
canvas-compiler: CLI subprocess smoke contracts

File: tests/integration/test_cli_smoke.py

Purpose
- Enforce CLI behavior for `python -m canvas_compiler` compile/export/check.
- Verify exit codes, stdout payloads, stderr diagnostics, and written artifacts.
"""

from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import Any

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
SRC_PATH = PROJECT_ROOT / "src"

BOARD: dict[str, Any] = {
    "nodes": [
        {"id": "end", "type": "text", "text": "End", "x": 0, "y": 0},
        {"id": "start", "type": "text", "text": "Start", "x": 600, "y": 400},
        {"id": "middle", "type": "file", "file": "notes/middle.md", "x": -200, "y": 200},
    ],
    "edges": [
        {"id": "e-start-middle", "fromNode": "start", "toNode": "middle"},
        {"id": "e-middle-end", "fromNode": "middle", "toNode": "end", "label": "then"},
    ],
}


def _run_cli(cwd: Path, *args: str) -> subprocess.CompletedProcess[str]:
    env = {key: value for key, value in os.environ.items() if not key.startswith("CANVAS_")}
    existing_pythonpath = env.get("PYTHONPATH")
    src_pythonpath = str(SRC_PATH)
    env["PYTHONPATH"] = (
        src_pythonpath
        if not existing_pythonpath
        else f"{src_pythonpath}{os.pathsep}{existing_pythonpath}"
    )
    return subprocess.run(
        [sys.executable, "-m", "canvas_compiler", *args],
        cwd=cwd,
        text=True,
        capture_output=True,
        check=False,
        env=env,
    )


def _write(path: Path, document: object) -> Path:
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


@pytest.mark.integration
def test_compile_orders_spatially_then_by_flow(tmp_path: Path) -> None:
    source = _write(tmp_path / "board.canvas", BOARD)

    spatial = _run_cli(tmp_path, "compile", "board.canvas", "--out", "spatial.json")
    flow = _run_cli(tmp_path, "compile", "board.canvas", "--flow-sort", "--out", "flow.json")

    assert spatial.returncode == 0, spatial.stderr
    assert flow.returncode == 0, flow.stderr
    spatial_doc = json.loads((tmp_path / "spatial.json").read_text(encoding="utf-8"))
    flow_doc = json.loads((tmp_path / "flow.json").read_text(encoding="utf-8"))
    assert [node["id"] for node in spatial_doc["nodes"]] == ["end", "middle", "start"]
    assert [node["id"] for node in flow_doc["nodes"]] == ["start", "middle", "end"]
    assert [edge["id"] for edge in flow_doc["edges"]] == ["e-start-middle", "e-middle-end"]
    assert json.loads(source.read_text(encoding="utf-8")) == BOARD


@pytest.mark.integration
def test_export_json_report_and_pure_artifact(tmp_path: Path) -> None:
    _write(tmp_path / "board.canvas", BOARD)

    result = _run_cli(tmp_path, "export", "board.canvas", "--json")

    assert result.returncode == 0, result.stderr
    report = json.loads(result.stdout)
    assert report["command"] == "export"
    assert report["nodes_out"] == 3
    assert report["edges_out"] == 0
    pure = json.loads((tmp_path / "board.pure.json").read_text(encoding="utf-8"))
    by_id = {node["id"]: node for node in pure["nodes"]}
    assert by_id["middle"] == {
        "id": "middle",
        "type": "file",
        "file": "notes/middle.md",
        "to": [{"node": "end", "label": "then"}],
    }
    assert by_id["end"]["from"] == [{"node": "middle", "label": "then"}]


@pytest.mark.integration
def test_config_file_and_json_logging(tmp_path: Path) -> None:
    _write(tmp_path / "board.canvas", BOARD)
    (tmp_path / "canvas-compiler.toml").write_text(
        "[compile]\nflow_sort_nodes = true\n", encoding="utf-8"
    )
    result = _run_cli(
        tmp_path, "compile", "board.canvas", "--log-format", "json", "--verbose", "--json"
    )

    assert result.returncode == 0, result.stderr
    assert json.loads(result.stdout)["settings"]["flow_sort_nodes"] is True
    log_lines = [json.loads(line) for line in result.stderr.splitlines() if line.strip()]
    messages = {line["message"] for line in log_lines}
    assert {"canvas compiled", "canvas file written"} <= messages


@pytest.mark.integration
def test_validation_failure_exit_code_and_no_output(tmp_path: Path) -> None:
    _write(
        tmp_path / "broken.canvas",
        {"nodes": [{"id": "a"}], "edges": [{"id": "e", "fromNode": "a", "toNode": "ghost"}]},
    )

    compiled = _run_cli(tmp_path, "compile", "broken.canvas")
    checked = _run_cli(tmp_path, "check", "broken.canvas", "--json")

    assert compiled.returncode == 1
    assert "error: edge e references missing toNode: ghost" in compiled.stderr
    assert not (tmp_path / "broken.json").exists()
    assert checked.returncode == 1
    assert json.loads(checked.stdout)["error"]["code"] == "DanglingEdgeReference"


@pytest.mark.integration
def test_usage_and_file_errors_exit_two(tmp_path: Path) -> None:
    missing = _run_cli(tmp_path, "compile", "absent.canvas")
    usage = _run_cli(tmp_path, "compile")
    (tmp_path / "bad.canvas").write_text("not json", encoding="utf-8")
    bad_json = _run_cli(tmp_path, "check", "bad.canvas")

    assert missing.returncode == 2
    assert "input file not found" in missing.stderr
    assert usage.returncode == 2
    assert bad_json.returncode == 2
    assert "invalid JSON" in bad_json.stderr
