"""Tests for identifier remapping."""

import random

from mediaflow.graph.kinds import NodeKind
from mediaflow.graph.models import Edge, Node, Position
from mediaflow.graph.remap import generate_edge_id, generate_node_id, remap


def sample_graph():
    nodes = [
        Node(id="in", type=NodeKind.INPUT_VIDEO, position=Position(0, 0)),
        Node(id="conv", type=NodeKind.CONVERT_VIDEO, position=Position(100, 50)),
        Node(id="view", type=NodeKind.VIEW_VIDEO, position=Position(-20, 300)),
    ]
    edges = [
        Edge(id="e1", source="in", target="conv", source_handle="video-output", target_handle="video-input"),
        Edge(id="e2", source="conv", target="view"),
        Edge(id="e3", source="conv", target="outside"),
    ]
    return nodes, edges


def test_remap_produces_disjoint_ids():
    nodes, edges = sample_graph()
    result = remap(nodes, edges, offset=(50, 50))

    old_ids = {n.id for n in nodes}
    new_ids = {n.id for n in result.nodes}
    assert len(new_ids) == len(nodes)
    assert old_ids.isdisjoint(new_ids)
    assert set(result.id_table) == old_ids
    assert set(result.id_table.values()) == new_ids


def test_remap_ids_are_type_prefixed():
    nodes, edges = sample_graph()
    result = remap(nodes, edges)
    for old, new in zip(nodes, result.nodes):
        assert new.id.startswith(f"{old.type.value}-")


def test_remap_translates_positions():
    """Every position moves by exactly the offset, for arbitrary offsets."""
    nodes, edges = sample_graph()
    rng = random.Random(7)
    for _ in range(20):
        dx, dy = rng.uniform(-500, 500), rng.uniform(-500, 500)
        result = remap(nodes, edges, offset=(dx, dy))
        for old, new in zip(nodes, result.nodes):
            assert new.position.x == old.position.x + dx
            assert new.position.y == old.position.y + dy


def test_remap_keeps_only_internal_edges():
    """An edge pointing outside the batch is dropped structurally."""
    nodes, edges = sample_graph()
    result = remap(nodes, edges)

    assert len(result.edges) == 2
    new_ids = {n.id for n in result.nodes}
    for edge in result.edges:
        assert edge.source in new_ids
        assert edge.target in new_ids


def test_remap_rewrites_endpoints_through_table():
    nodes, edges = sample_graph()
    result = remap(nodes, edges)
    table = result.id_table

    first = result.edges[0]
    assert (first.source, first.target) == (table["in"], table["conv"])
    assert first.source_handle == "video-output"
    assert first.target_handle == "video-input"


def test_remap_marks_output_selected_and_leaves_input_alone():
    nodes, edges = sample_graph()
    nodes[0].data["filePath"] = "/a.mp4"
    result = remap(nodes, edges)

    assert all(n.selected for n in result.nodes)
    assert all(e.selected for e in result.edges)
    assert not any(n.selected for n in nodes)

    result.nodes[0].data["filePath"] = "/changed.mp4"
    assert nodes[0].data["filePath"] == "/a.mp4"


def test_remap_avoids_taken_ids():
    nodes, edges = sample_graph()
    result = remap(nodes, edges, taken={"already-there"})
    assert "already-there" not in {n.id for n in result.nodes}


def test_parallel_edges_get_distinct_ids():
    """Two edges between the same pair (different ports) stay distinct."""
    nodes = [Node(id="a", type=NodeKind.INPUT_VIDEO), Node(id="v", type=NodeKind.VMAF_ANALYSIS)]
    edges = [
        Edge(id="r", source="a", target="v", target_handle="reference-input"),
        Edge(id="t", source="a", target="v", target_handle="test-input"),
    ]
    result = remap(nodes, edges)
    assert len({e.id for e in result.edges}) == 2


def test_generate_ids_retry_on_collision():
    taken = set()
    for _ in range(200):
        node_id = generate_node_id("x", taken, timestamp=1)
        assert node_id not in taken
        taken.add(node_id)

    edge_taken = {"a-b-1"}
    assert generate_edge_id("a", "b", edge_taken, timestamp=1) == "a-b-1-1"
