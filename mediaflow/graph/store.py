""" In-memory graph of nodes and edges with selection. """

import logging
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from .errors import DuplicateIdError, UnknownNodeError
from .kinds import NodeKind, default_data, palette_prefix
from .models import Edge, Node, Position
from .remap import generate_edge_id, generate_node_id

logger = logging.getLogger(__name__)


def edges_touching(edges: Iterable[Edge], node_ids: Set[str]) -> List[Edge]:
    """The cascade rule: every edge with an endpoint in `node_ids`."""
    return [e for e in edges if e.source in node_ids or e.target in node_ids]


def check_integrity(nodes: List[Node], edges: List[Edge]) -> None:
    """
    Raise if `nodes`/`edges` could not form a graph on their own:
    duplicate ids or an edge endpoint that is not one of `nodes`.
    """
    seen: Set[str] = set()
    for node in nodes:
        if node.id in seen:
            raise DuplicateIdError(node.id)
        seen.add(node.id)

    edge_ids: Set[str] = set()
    for edge in edges:
        if edge.id in edge_ids:
            raise DuplicateIdError(edge.id, "edge")
        edge_ids.add(edge.id)
        for endpoint in (edge.source, edge.target):
            if endpoint not in seen:
                raise UnknownNodeError(endpoint)


class GraphStore:
    """
    Authoritative node/edge lists.

    Structural violations (duplicate ids, dangling edge endpoints) raise before
    anything is changed, so a failed call leaves the store as it was.
    """

    def __init__(self, nodes: Optional[Iterable[Node]] = None, edges: Optional[Iterable[Edge]] = None):
        self._nodes: List[Node] = []
        self._edges: List[Edge] = []
        if nodes or edges:
            self.replace(list(nodes or []), list(edges or []))

    # -------------------------
    # READ
    # -------------------------

    @property
    def nodes(self) -> List[Node]:
        return list(self._nodes)

    @property
    def edges(self) -> List[Edge]:
        return list(self._edges)

    def node_ids(self) -> Set[str]:
        return {n.id for n in self._nodes}

    def edge_ids(self) -> Set[str]:
        return {e.id for e in self._edges}

    def get_node(self, node_id: str) -> Optional[Node]:
        return next((n for n in self._nodes if n.id == node_id), None)

    def get_edge(self, edge_id: str) -> Optional[Edge]:
        return next((e for e in self._edges if e.id == edge_id), None)

    def selected_nodes(self) -> List[Node]:
        return [n for n in self._nodes if n.selected]

    def selected_edges(self) -> List[Edge]:
        return [e for e in self._edges if e.selected]

    def snapshot(self) -> Tuple[List[Node], List[Edge]]:
        return [n.clone() for n in self._nodes], [e.clone() for e in self._edges]

    def __len__(self) -> int:
        return len(self._nodes)

    # -------------------------
    # NODES
    # -------------------------

    def add_node(self, node: Node) -> Node:
        if node.id in self.node_ids():
            raise DuplicateIdError(node.id)
        self._nodes.append(node)
        logger.debug("[Graph] Added node %s (%s)", node.id, node.type.value)
        return node

    def create_node(self, kind: NodeKind, position: Optional[Position] = None,
                    data: Optional[Dict[str, Any]] = None) -> Node:
        """Place a new node of `kind` with its default configuration."""
        kind = NodeKind(kind)
        node_data = default_data(kind)
        if data:
            node_data.update(data)
        node = Node(
            id=generate_node_id(palette_prefix(kind), self.node_ids()),
            type=kind,
            position=position or Position(),
            data=node_data,
        )
        return self.add_node(node)

    def remove_node(self, node_id: str) -> bool:
        if self.get_node(node_id) is None:
            return False
        self.remove_many({node_id}, set())
        return True

    def update_node_data(self, node_id: str, partial: Dict[str, Any]) -> bool:
        """
        Shallow-merge `partial` into the node's data. A missing id is ignored:
        UI updates may race a deletion.
        """
        node = self.get_node(node_id)
        if node is None:
            logger.debug("[Graph] Ignoring update for missing node %s", node_id)
            return False
        node.data = {**node.data, **partial}
        return True

    def move_node(self, node_id: str, position: Position) -> bool:
        node = self.get_node(node_id)
        if node is None:
            return False
        node.position = position
        return True

    # -------------------------
    # EDGES
    # -------------------------

    def add_edge(self, edge: Edge) -> Edge:
        ids = self.node_ids()
        for endpoint in (edge.source, edge.target):
            if endpoint not in ids:
                raise UnknownNodeError(endpoint)
        if edge.id in self.edge_ids():
            raise DuplicateIdError(edge.id, "edge")
        self._edges.append(edge)
        return edge

    def connect(self, source: str, source_handle: Optional[str],
                target: str, target_handle: Optional[str]) -> Edge:
        """
        Create an edge under a fresh id. A target port takes one source, so an
        existing edge into the same (target, target_handle) is dropped first.
        Port type compatibility is checked by the caller.
        """
        ids = self.node_ids()
        for endpoint in (source, target):
            if endpoint not in ids:
                raise UnknownNodeError(endpoint)

        if target_handle is not None:
            occupied = [e for e in self._edges if e.target == target and e.target_handle == target_handle]
            for edge in occupied:
                logger.info("[Connection] Removing existing edge %s to make room for new connection", edge.id)
            occupied_ids = {e.id for e in occupied}
            self._edges = [e for e in self._edges if e.id not in occupied_ids]

        edge = Edge(
            id=generate_edge_id(source, target, self.edge_ids()),
            source=source,
            target=target,
            source_handle=source_handle,
            target_handle=target_handle,
        )
        self._edges.append(edge)
        logger.debug("[Connection] %s:%s -> %s:%s", source, source_handle, target, target_handle)
        return edge

    def remove_edge(self, edge_id: str) -> bool:
        if self.get_edge(edge_id) is None:
            return False
        self.remove_many(set(), {edge_id})
        return True

    # -------------------------
    # BATCH
    # -------------------------

    def remove_many(self, node_ids: Set[str], edge_ids: Set[str]) -> Tuple[int, int]:
        """
        Remove the given edges, every edge touching a removed node, then the nodes.
        Returns (nodes removed, edges removed).
        """
        doomed_edges = set(edge_ids)
        doomed_edges.update(e.id for e in edges_touching(self._edges, node_ids))
        before_nodes, before_edges = len(self._nodes), len(self._edges)
        self._edges = [e for e in self._edges if e.id not in doomed_edges]
        self._nodes = [n for n in self._nodes if n.id not in node_ids]
        return before_nodes - len(self._nodes), before_edges - len(self._edges)

    def merge(self, nodes: List[Node], edges: List[Edge]) -> None:
        """
        Append a batch (paste, duplicate). Existing items are deselected in the
        same step so that only the batch ends up selected.
        """
        check_integrity(self._nodes + nodes, self._edges + edges)
        self.clear_selection()
        self._nodes.extend(nodes)
        self._edges.extend(edges)

    def replace(self, nodes: List[Node], edges: List[Edge]) -> None:
        check_integrity(nodes, edges)
        self._nodes = list(nodes)
        self._edges = list(edges)

    def clear(self) -> None:
        self._nodes = []
        self._edges = []

    # -------------------------
    # SELECTION
    # -------------------------

    def select(self, node_ids: Iterable[str] = (), edge_ids: Iterable[str] = (), additive: bool = False) -> None:
        node_ids, edge_ids = set(node_ids), set(edge_ids)
        for node in self._nodes:
            if node.id in node_ids:
                node.selected = True
            elif not additive:
                node.selected = False
        for edge in self._edges:
            if edge.id in edge_ids:
                edge.selected = True
            elif not additive:
                edge.selected = False

    def clear_selection(self) -> None:
        for node in self._nodes:
            node.selected = False
        for edge in self._edges:
            edge.selected = False
