""" Graph edit commands and their dispatch onto a GraphStore. """
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple, Type

from .kinds import NodeKind
from .models import Position
from .store import GraphStore


@dataclass(frozen=True)
class AddNode:
    kind: NodeKind
    x: float = 0.0
    y: float = 0.0
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RemoveNode:
    node_id: str


@dataclass(frozen=True)
class MoveNode:
    node_id: str
    x: float
    y: float


@dataclass(frozen=True)
class Connect:
    source: str
    target: str
    source_handle: Optional[str] = None
    target_handle: Optional[str] = None


@dataclass(frozen=True)
class RemoveEdge:
    edge_id: str


@dataclass(frozen=True)
class UpdateNodeData:
    node_id: str
    partial: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Select:
    node_ids: Tuple[str, ...] = ()
    edge_ids: Tuple[str, ...] = ()
    additive: bool = False


_HANDLERS: Dict[Type, Callable[[GraphStore, Any], Any]] = {
    AddNode: lambda store, c: store.create_node(c.kind, Position(c.x, c.y), c.data),
    RemoveNode: lambda store, c: store.remove_node(c.node_id),
    MoveNode: lambda store, c: store.move_node(c.node_id, Position(c.x, c.y)),
    Connect: lambda store, c: store.connect(c.source, c.source_handle, c.target, c.target_handle),
    RemoveEdge: lambda store, c: store.remove_edge(c.edge_id),
    UpdateNodeData: lambda store, c: store.update_node_data(c.node_id, c.partial),
    Select: lambda store, c: store.select(c.node_ids, c.edge_ids, c.additive),
}


def apply_command(store: GraphStore, command) -> Any:
    """Apply `command` synchronously and return whatever the store call returns."""
    handler = _HANDLERS.get(type(command))
    if not handler:
        raise ValueError(f"Unsupported command: {type(command).__name__}")
    return handler(store, command)
