from __future__ import annotations

from nodebook.cnl.context import ParseContext
from nodebook.cnl.mindmap import is_mindmap_heading, is_mindmap_item, parse_mindmap_block
from nodebook.cnl.operations import ORIGIN_MINDMAP, AddNode, AddRelation

LINES = [
    "# Vehicles <has subtype>",
    "- Car",
    "  - Electric Car",
    "  - Sports Car",
    "- Bike",
]


def test_heading_and_item_detection() -> None:
    assert is_mindmap_heading("# Vehicles <has subtype>")
    assert not is_mindmap_heading("# Vehicles [class]")
    assert is_mindmap_item("  - Car")
    assert not is_mindmap_item("Car")


def test_tree_from_indentation() -> None:
    ops = parse_mindmap_block(LINES)
    nodes = [op for op in ops if isinstance(op, AddNode)]
    rels = [op for op in ops if isinstance(op, AddRelation)]

    assert [n.id for n in nodes] == ["vehicles", "car", "electric_car", "sports_car", "bike"]
    assert nodes[0].payload.role == "individual"
    assert {n.payload.role for n in nodes[1:]} == {"class"}
    assert all(op.origin == ORIGIN_MINDMAP for op in ops)

    edges = [(r.payload.source, r.payload.target) for r in rels]
    assert edges == [
        ("vehicles", "car"),
        ("car", "electric_car"),
        ("car", "sports_car"),
        ("vehicles", "bike"),
    ]
    assert {r.payload.name for r in rels} == {"has subtype"}
    assert rels[0].id == "rel_vehicles_has_subtype_car"


def test_non_heading_block_yields_nothing() -> None:
    assert parse_mindmap_block(["- Car"]) == []
    assert parse_mindmap_block([]) == []


def test_mindmap_declares_nodes_in_context() -> None:
    ctx = ParseContext()
    parse_mindmap_block(LINES, ctx)
    assert {"vehicles", "car", "bike"} <= ctx.declared
