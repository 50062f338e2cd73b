""" Fresh identifiers for a batch of nodes and edges. """

import random
import string
import time
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .models import Edge, Node

_ALPHABET = string.ascii_lowercase + string.digits
_SUFFIX_LEN = 9


def _now_ms() -> int:
    return int(time.time() * 1000)


def generate_node_id(prefix: str, taken: Optional[Set[str]] = None, timestamp: Optional[int] = None) -> str:
    """
    Build "<prefix>-<epoch ms>-<random base36>", retrying on the (unlikely)
    event that the id is already taken.
    """
    ts = _now_ms() if timestamp is None else timestamp
    taken = taken or set()
    while True:
        suffix = "".join(random.choices(_ALPHABET, k=_SUFFIX_LEN))
        candidate = f"{prefix}-{ts}-{suffix}"
        if candidate not in taken:
            return candidate


def generate_edge_id(source: str, target: str, taken: Optional[Set[str]] = None, timestamp: Optional[int] = None) -> str:
    ts = _now_ms() if timestamp is None else timestamp
    taken = taken or set()
    candidate = f"{source}-{target}-{ts}"
    n = 1
    while candidate in taken:
        candidate = f"{source}-{target}-{ts}-{n}"
        n += 1
    return candidate


@dataclass
class RemapResult:
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    id_table: Dict[str, str] = field(default_factory=dict)


def remap(nodes: Iterable[Node], edges: Iterable[Edge],
          offset: Tuple[float, float] = (0.0, 0.0),
          taken: Iterable[str] = ()) -> RemapResult:
    """
    Copy `nodes` and `edges` under new ids.

    The old->new table is built over every node before any edge is looked at.
    Edges are rewritten through the table; an edge with an endpoint outside the
    table is dropped, so only edges internal to the batch survive. Positions are
    shifted by `offset` and every returned item is marked selected.
    `taken` lists ids already in use by the destination graph.
    """
    nodes = list(nodes)
    edges = list(edges)
    dx, dy = offset
    timestamp = _now_ms()

    used: Set[str] = set(taken)
    used.update(n.id for n in nodes)
    used.update(e.id for e in edges)

    id_table: Dict[str, str] = {}
    for node in nodes:
        new_id = generate_node_id(node.type.value, used, timestamp)
        used.add(new_id)
        id_table[node.id] = new_id

    new_nodes: List[Node] = []
    for node in nodes:
        clone = node.clone()
        clone.id = id_table[node.id]
        clone.position = node.position.offset(dx, dy)
        clone.selected = True
        new_nodes.append(clone)

    new_edges: List[Edge] = []
    for edge in edges:
        source = id_table.get(edge.source)
        target = id_table.get(edge.target)
        if source is None or target is None:
            continue
        clone = edge.clone()
        clone.id = generate_edge_id(source, target, used, timestamp)
        used.add(clone.id)
        clone.source = source
        clone.target = target
        clone.selected = True
        new_edges.append(clone)

    return RemapResult(nodes=new_nodes, edges=new_edges, id_table=id_table)
