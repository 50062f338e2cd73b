""" Data models for the pipeline graph """

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .kinds import NodeKind

# keys owned by the model itself; anything else in a stored record lands in `extra`
_NODE_KEYS = ("id", "type", "position", "data", "selected")
_EDGE_KEYS = ("id", "source", "target", "sourceHandle", "targetHandle", "selected")


@dataclass
class Position:
    x: float = 0.0
    y: float = 0.0

    def offset(self, dx: float, dy: float) -> "Position":
        return Position(self.x + dx, self.y + dy)


@dataclass
class Node:
    id: str
    type: NodeKind
    position: Position = field(default_factory=Position)
    data: Dict[str, Any] = field(default_factory=dict)
    selected: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # accept the wire string for the kind
        if not isinstance(self.type, NodeKind):
            self.type = NodeKind(self.type)

    def clone(self) -> "Node":
        return copy.deepcopy(self)

    def to_dict(self, include_selection: bool = True) -> Dict[str, Any]:
        out: Dict[str, Any] = dict(copy.deepcopy(self.extra))
        out.update({
            "id": self.id,
            "type": self.type.value,
            "position": {"x": self.position.x, "y": self.position.y},
            "data": copy.deepcopy(self.data),
        })
        if include_selection:
            out["selected"] = self.selected
        return out

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Node":
        position = raw.get("position") or {}
        return cls(
            id=raw["id"],
            type=raw["type"],
            position=Position(float(position.get("x", 0.0)), float(position.get("y", 0.0))),
            data=copy.deepcopy(raw.get("data") or {}),
            selected=bool(raw.get("selected", False)),
            extra={k: copy.deepcopy(v) for k, v in raw.items() if k not in _NODE_KEYS},
        )


@dataclass
class Edge:
    id: str
    source: str
    target: str
    source_handle: Optional[str] = None
    target_handle: Optional[str] = None
    selected: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)

    def touches(self, node_id: str) -> bool:
        return self.source == node_id or self.target == node_id

    def clone(self) -> "Edge":
        return copy.deepcopy(self)

    def to_dict(self, include_selection: bool = True) -> Dict[str, Any]:
        out: Dict[str, Any] = dict(copy.deepcopy(self.extra))
        out.update({
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "sourceHandle": self.source_handle,
            "targetHandle": self.target_handle,
        })
        if include_selection:
            out["selected"] = self.selected
        return out

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Edge":
        return cls(
            id=raw["id"],
            source=raw["source"],
            target=raw["target"],
            source_handle=raw.get("sourceHandle"),
            target_handle=raw.get("targetHandle"),
            selected=bool(raw.get("selected", False)),
            extra={k: copy.deepcopy(v) for k, v in raw.items() if k not in _EDGE_KEYS},
        )
