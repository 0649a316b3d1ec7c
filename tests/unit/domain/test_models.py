"""Unit tests for domain.models: boxes, content variants, edge direction."""

from __future__ import annotations

import pytest

from canvas_compiler.domain.models import (
    Box,
    CanvasEdge,
    CanvasNode,
    EdgeDirection,
    FileContent,
    GroupContent,
    LinkContent,
    OpaqueContent,
    TextContent,
    classify_direction,
    color_key,
    content_key,
    finite_number,
    parse_content,
)


@pytest.mark.unit
def test_box_defaults_missing_and_invalid_fields_to_zero() -> None:
    box = Box.from_raw({"x": "12", "y": float("nan"), "width": True, "height": 4})
    assert box == Box(x=0.0, y=0.0, width=0.0, height=4.0)
    assert box.area == 0.0


@pytest.mark.unit
def test_finite_number_accepts_ints_and_floats_only() -> None:
    assert finite_number(3) == 3.0
    assert finite_number(-2.5) == -2.5
    assert finite_number(float("inf")) == 0.0
    assert finite_number(None) == 0.0
    assert finite_number(False) == 0.0


@pytest.mark.unit
def test_box_enclosure_is_edge_inclusive() -> None:
    outer = Box(0, 0, 100, 100)
    assert outer.encloses(Box(0, 0, 100, 100))
    assert outer.encloses(Box(10, 10, 20, 20))
    assert not outer.encloses(Box(90, 90, 20, 20))
    assert not outer.encloses(Box(-1, 0, 10, 10))


@pytest.mark.unit
def test_box_position_is_row_major() -> None:
    assert Box(x=5, y=9).position == (9.0, 5.0)


@pytest.mark.unit
def test_color_key_lowercases_and_defaults_to_empty() -> None:
    assert color_key("#FF00AA") == "#ff00aa"
    assert color_key("3") == "3"
    assert color_key(None) == ""
    assert color_key(4) == ""


@pytest.mark.unit
def test_parse_content_selects_variant_by_type() -> None:
    assert parse_content({"type": "text", "text": "Hi"}) == TextContent(text="Hi")
    assert parse_content({"type": "file", "file": "a/b.md"}) == FileContent(file="a/b.md")
    assert parse_content({"type": "link", "url": "https://x"}) == LinkContent(url="https://x")
    assert parse_content({"type": "group", "label": "G"}) == GroupContent(label="G")
    assert parse_content({"type": "widget"}) == OpaqueContent(type_name="widget")
    assert parse_content({}) == OpaqueContent(type_name="")


@pytest.mark.unit
def test_content_key_per_variant() -> None:
    assert content_key(TextContent(text="  Hello World "), "n1") == "hello world"
    assert content_key(FileContent(file="Notes/Deep/Plan.MD"), "n1") == "plan.md"
    assert content_key(FileContent(file="folder/"), "n1") == "folder/"
    assert content_key(LinkContent(url="HTTPS://Example.com/A"), "n1") == "https://example.com/a"
    assert content_key(GroupContent(label="Inbox"), "n1") == "inbox"


@pytest.mark.unit
def test_content_key_falls_back_to_lowercased_id() -> None:
    assert content_key(TextContent(text=None), "Node-A") == "node-a"
    assert content_key(GroupContent(label=None), "G1") == "g1"
    assert content_key(OpaqueContent(type_name="x"), "ID") == "id"


@pytest.mark.unit
def test_canvas_node_keeps_raw_mapping_and_derives_keys() -> None:
    raw = {"id": "L", "type": "link", "url": "https://b", "x": 1, "y": 2, "color": "RED"}
    node = CanvasNode.from_raw(raw, node_id="L")

    assert node.raw is raw
    assert node.position == (2.0, 1.0)
    assert node.color == "red"
    assert node.type_priority == 1
    assert not node.is_group
    assert node.content_key == "https://b"

    group = CanvasNode.from_raw({"type": "group"}, node_id="G")
    assert group.is_group
    assert group.type_priority == 0


@pytest.mark.unit
@pytest.mark.parametrize(
    ("from_end", "to_end", "expected"),
    [
        (None, None, EdgeDirection.FORWARD),
        ("none", "arrow", EdgeDirection.FORWARD),
        ("arrow", "none", EdgeDirection.REVERSE),
        ("arrow", "arrow", EdgeDirection.BIDIRECTIONAL),
        ("none", "none", EdgeDirection.NONE),
        ("arrow", None, EdgeDirection.BIDIRECTIONAL),
        (None, "none", EdgeDirection.NONE),
    ],
)
def test_edge_direction_uses_default_endpoints(
    from_end: str | None, to_end: str | None, expected: EdgeDirection
) -> None:
    raw: dict[str, object] = {"id": "e", "fromNode": "a", "toNode": "b"}
    if from_end is not None:
        raw["fromEnd"] = from_end
    if to_end is not None:
        raw["toEnd"] = to_end
    edge = CanvasEdge.from_raw(raw, edge_id="e", from_node="a", to_node="b")
    assert edge.direction is expected


@pytest.mark.unit
def test_null_endpoint_marker_reads_as_absent() -> None:
    raw = {"id": "e", "fromNode": "a", "toNode": "b", "fromEnd": None, "toEnd": None}
    edge = CanvasEdge.from_raw(raw, edge_id="e", from_node="a", to_node="b")
    assert (edge.from_end, edge.to_end) == ("none", "arrow")
    assert classify_direction(edge.from_end, edge.to_end) is EdgeDirection.FORWARD
