""" Data models for saved workflows """

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..graph.models import Edge, Node


class Category(str, Enum):
    PRESET = "preset"
    CUSTOM = "custom"


@dataclass
class Workflow:
    id: str
    name: str
    description: str = ""
    category: Category = Category.CUSTOM
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    created_at: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)  # unknown stored fields, kept on rewrite

    def __post_init__(self):
        if not isinstance(self.category, Category):
            self.category = Category(self.category)

    @property
    def is_preset(self) -> bool:
        return self.category == Category.PRESET

    def clone(self) -> "Workflow":
        return copy.deepcopy(self)
