"""Tests for the workflow catalog and its storage."""

import json

import pytest
from mediaflow.graph.kinds import NodeKind
from mediaflow.graph.models import Edge, Node
from mediaflow.storage.kv import JsonFileStorage, MemoryStorage
from mediaflow.workflow.catalog import (
    STORAGE_KEY,
    ReadOnlyWorkflowError,
    WorkflowCatalog,
    WorkflowNotFoundError,
)
from mediaflow.workflow.models import Category


class BrokenStorage:
    def load(self, key):
        raise OSError("disk gone")

    def save(self, key, blob):
        raise OSError("disk gone")


def graph():
    nodes = [
        Node(id="in", type=NodeKind.INPUT_VIDEO, data={"filePath": "/in.mp4"}),
        Node(id="conv", type=NodeKind.CONVERT_VIDEO, data={"outputPath": "/tmp/out.mp4", "metadata": {"duration": 1}}),
    ]
    edges = [Edge(id="e", source="in", target="conv")]
    return nodes, edges


def test_presets_are_built_in():
    catalog = WorkflowCatalog(MemoryStorage())
    ids = [w.id for w in catalog.presets()]
    assert ids == ["quick-convert", "quality-analysis", "frame-extraction"]
    assert all(w.category == Category.PRESET for w in catalog.presets())

    vmaf = catalog.get("quality-analysis")
    assert {e.target_handle for e in vmaf.edges} == {"reference-input", "test-input"}


def test_presets_cannot_be_removed():
    catalog = WorkflowCatalog(MemoryStorage())
    with pytest.raises(ReadOnlyWorkflowError):
        catalog.remove("quick-convert")
    assert "quick-convert" in catalog


def test_get_returns_copies():
    catalog = WorkflowCatalog(MemoryStorage())
    preset = catalog.get("quick-convert")
    preset.nodes[0].data["filePath"] = "/mutated.mp4"
    assert catalog.get("quick-convert").nodes[0].data["filePath"] == ""


def test_get_unknown_raises():
    with pytest.raises(WorkflowNotFoundError, match="nope"):
        WorkflowCatalog(MemoryStorage()).get("nope")


def test_missing_key_means_empty_collection():
    catalog = WorkflowCatalog(MemoryStorage())
    assert catalog.custom() == []
    assert catalog.load_error is None


def test_malformed_document_degrades_to_empty():
    storage = MemoryStorage({STORAGE_KEY: "[{broken"})
    catalog = WorkflowCatalog(storage)

    assert catalog.custom() == []
    assert "Error loading custom workflows" in catalog.load_error


def test_unavailable_storage_degrades_to_empty():
    catalog = WorkflowCatalog(BrokenStorage())
    assert catalog.custom() == []
    assert "disk gone" in catalog.load_error


def test_add_sanitises_and_persists_whole_collection():
    storage = MemoryStorage()
    catalog = WorkflowCatalog(storage)
    nodes, edges = graph()

    saved = catalog.add("My convert", nodes, edges)

    assert saved.id.startswith("custom-")
    assert saved.category == Category.CUSTOM
    assert saved.created_at is not None
    assert saved.description == "Custom workflow with 2 nodes"

    stored = json.loads(storage.load(STORAGE_KEY))
    assert [w["id"] for w in stored] == [saved.id]
    conv = stored[0]["nodes"][1]["data"]
    assert conv["outputPath"] == ""
    assert "metadata" not in conv
    # the live graph is untouched
    assert nodes[1].data["outputPath"] == "/tmp/out.mp4"


def test_add_assigns_distinct_ids():
    catalog = WorkflowCatalog(MemoryStorage())
    nodes, edges = graph()
    ids = {catalog.add(f"wf {i}", nodes, edges).id for i in range(5)}
    assert len(ids) == 5


def test_add_rejects_blank_name():
    nodes, edges = graph()
    with pytest.raises(ValueError, match="name"):
        WorkflowCatalog(MemoryStorage()).add("   ", nodes, edges)


def test_remove_rewrites_collection_even_when_empty():
    storage = MemoryStorage()
    catalog = WorkflowCatalog(storage)
    nodes, edges = graph()
    saved = catalog.add("tmp", nodes, edges)

    assert catalog.remove(saved.id) is True
    assert json.loads(storage.load(STORAGE_KEY)) == []


def test_remove_unknown_is_noop():
    storage = MemoryStorage()
    catalog = WorkflowCatalog(storage)
    assert catalog.remove("custom-0") is False
    assert storage.load(STORAGE_KEY) is None


def test_collection_survives_restart_on_disk(tmp_path):
    nodes, edges = graph()
    first = WorkflowCatalog(JsonFileStorage(tmp_path))
    saved = first.add("Persisted", nodes, edges)

    second = WorkflowCatalog(JsonFileStorage(tmp_path))
    reloaded = second.get(saved.id)

    assert reloaded.name == "Persisted"
    assert [n.id for n in reloaded.nodes] == ["in", "conv"]
    assert (tmp_path / "customWorkflows.json").exists()


def test_save_failure_is_reported():
    catalog = WorkflowCatalog(MemoryStorage())
    catalog.storage = BrokenStorage()
    nodes, edges = graph()

    saved = catalog.add("Unsaved", nodes, edges)

    assert "disk gone" in catalog.save_error
    assert saved.id in catalog


def test_json_file_storage_rejects_unsafe_keys(tmp_path):
    with pytest.raises(ValueError, match="Invalid storage key"):
        JsonFileStorage(tmp_path).save("../escape", "[]")


def test_undecodable_document_degrades_to_empty(tmp_path):
    (tmp_path / "customWorkflows.json").write_bytes(b"[\xff\xfe garbage")

    catalog = WorkflowCatalog(JsonFileStorage(tmp_path))

    assert catalog.custom() == []
    assert "Error loading custom workflows" in catalog.load_error
    assert [w.id for w in catalog.presets()] == ["quick-convert", "quality-analysis", "frame-extraction"]


def test_add_rejects_edge_to_missing_node():
    """A graph that could never be loaded back is not saved."""
    storage = MemoryStorage()
    catalog = WorkflowCatalog(storage)

    with pytest.raises(ValueError, match="unknown node: ghost"):
        catalog.add("broken", [Node(id="a", type=NodeKind.INPUT_VIDEO)], [Edge(id="e", source="a", target="ghost")])

    assert catalog.custom() == []
    assert storage.load(STORAGE_KEY) is None


def test_add_rejects_duplicate_node_ids():
    nodes = [Node(id="a", type=NodeKind.INPUT_VIDEO), Node(id="a", type=NodeKind.VIEW_VIDEO)]
    with pytest.raises(ValueError, match="Duplicate node id: a"):
        WorkflowCatalog(MemoryStorage()).add("twins", nodes, [])


def test_stored_dangling_edge_degrades_to_empty():
    record = {
        "id": "custom-1",
        "name": "Hand edited",
        "nodes": [{"id": "a", "type": "inputVideo", "position": {"x": 0, "y": 0}, "data": {}}],
        "edges": [{"id": "e", "source": "a", "target": "ghost"}],
    }
    catalog = WorkflowCatalog(MemoryStorage({STORAGE_KEY: json.dumps([record])}))

    assert catalog.custom() == []
    assert "ghost" in catalog.load_error
