"""
Graph <-> persistable document.

A saved workflow is a template, not a recording of one run: `to_document`
clears every transient field on the way out (the same reset applied to
pasted nodes) and `from_document` hands the stored graph back unchanged.
"""

import copy
import json
from typing import Any, Dict, Iterable, List, Tuple

import yaml

from ..graph.errors import GraphError
from ..graph.models import Edge, Node
from ..graph.sanitize import reset_runtime_state
from ..graph.store import check_integrity
from .models import Workflow
from .schema import validate_collection, validate_workflow

_WORKFLOW_KEYS = ("id", "name", "description", "category", "nodes", "edges", "createdAt")


def sanitize_node(node: Node) -> Node:
    clean = node.clone()
    clean.data = reset_runtime_state(clean.data)
    clean.selected = False
    return clean


def to_document(nodes: Iterable[Node], edges: Iterable[Edge]) -> Dict[str, List[Dict[str, Any]]]:
    """Deep-copied, sanitised document. Idempotent: sanitising twice changes nothing."""
    return {
        "nodes": [sanitize_node(n).to_dict(include_selection=False) for n in nodes],
        "edges": [e.to_dict(include_selection=False) for e in edges],
    }


def from_document(doc: Dict[str, Any]) -> Tuple[List[Node], List[Edge]]:
    nodes = [Node.from_dict(raw) for raw in doc.get("nodes", [])]
    edges = [Edge.from_dict(raw) for raw in doc.get("edges", [])]
    return nodes, edges


# -------------------------
# WORKFLOW RECORDS
# -------------------------

def workflow_to_record(workflow: Workflow) -> Dict[str, Any]:
    record: Dict[str, Any] = copy.deepcopy(workflow.extra)
    record.update({
        "id": workflow.id,
        "name": workflow.name,
        "description": workflow.description,
        "category": workflow.category.value,
        "nodes": [n.to_dict(include_selection=False) for n in workflow.nodes],
        "edges": [e.to_dict(include_selection=False) for e in workflow.edges],
    })
    if workflow.created_at is not None:
        record["createdAt"] = workflow.created_at
    return record


def workflow_from_record(raw: Dict[str, Any]) -> Workflow:
    """Validate and build a Workflow. Raises ValueError on a malformed record."""
    spec = validate_workflow(raw)
    try:
        nodes, edges = from_document(raw)
        check_integrity(nodes, edges)
    except (KeyError, TypeError, ValueError, GraphError) as e:
        raise ValueError(f"Workflow {spec.id!r} has an invalid graph: {e}")
    return Workflow(
        id=spec.id,
        name=spec.name,
        description=spec.description,
        category=spec.category,
        nodes=nodes,
        edges=edges,
        created_at=spec.createdAt,
        extra={k: copy.deepcopy(v) for k, v in raw.items() if k not in _WORKFLOW_KEYS},
    )


def dumps_workflows(workflows: Iterable[Workflow]) -> str:
    return json.dumps([workflow_to_record(w) for w in workflows], indent=2)


def loads_workflows(text: str) -> List[Workflow]:
    """Parse a stored JSON collection. Raises ValueError on anything malformed."""
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Stored workflows are not valid JSON: {e}")
    validate_collection(raw)
    return [workflow_from_record(item) for item in raw]


# -------------------------
# YAML
# -------------------------

def workflow_to_yaml(workflow: Workflow) -> str:
    return yaml.safe_dump(workflow_to_record(workflow), sort_keys=False)


def workflow_from_yaml(yaml_text: str) -> Workflow:
    data = yaml.safe_load(yaml_text)
    if not isinstance(data, dict):
        raise ValueError("Workflow YAML must be a mapping")
    return workflow_from_record(data)


def workflows_from_yaml(yaml_text: str) -> List[Workflow]:
    data = yaml.safe_load(yaml_text) or []
    if not isinstance(data, list):
        raise ValueError("Workflow YAML must be a list of workflows")
    return [workflow_from_record(item) for item in data]
