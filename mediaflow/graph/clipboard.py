""" Selection-scoped clipboard: copy, paste, duplicate, delete. """

import logging
import time
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from .models import Edge, Node
from .remap import remap
from .sanitize import reset_runtime_state
from .store import GraphStore, edges_touching

logger = logging.getLogger(__name__)

NOTHING_SELECTED = "nothing selected"
CLIPBOARD_EMPTY = "clipboard empty"

DEFAULT_PASTE_OFFSET = (50.0, 50.0)
DEFAULT_DUPLICATE_OFFSET = (100.0, 100.0)


@dataclass(frozen=True)
class ClipboardSnapshot:
    nodes: Tuple[Node, ...]
    edges: Tuple[Edge, ...]
    timestamp: float


@dataclass
class ClipboardResult:
    """ Outcome of a clipboard action. ok=False is a "nothing happened" signal, not an error. """
    ok: bool
    node_count: int = 0
    edge_count: int = 0
    new_node_ids: List[str] = field(default_factory=list)
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.ok


class Clipboard:
    """
    Holds at most one snapshot. Each editor owns its own instance.
    """

    def __init__(self, paste_offset: Tuple[float, float] = DEFAULT_PASTE_OFFSET,
                 duplicate_offset: Tuple[float, float] = DEFAULT_DUPLICATE_OFFSET):
        self.paste_offset = paste_offset
        self.duplicate_offset = duplicate_offset
        self._snapshot: Optional[ClipboardSnapshot] = None

    @property
    def snapshot(self) -> Optional[ClipboardSnapshot]:
        return self._snapshot

    def has_data(self) -> bool:
        return self._snapshot is not None

    def clear(self) -> None:
        self._snapshot = None
        logger.info("[Clipboard] Cleared")

    def copy(self, selected_nodes: Iterable[Node], selected_edges: Iterable[Edge],
             all_edges: Iterable[Edge]) -> ClipboardResult:
        """Capture the selected nodes and the edges running between them."""
        selected_nodes = list(selected_nodes)
        if not selected_nodes:
            logger.info("[Copy] No nodes selected")
            return ClipboardResult(ok=False, reason=NOTHING_SELECTED)

        selected_ids = {n.id for n in selected_nodes}
        all_edges = list(all_edges)
        internal = [e for e in all_edges if e.source in selected_ids and e.target in selected_ids]
        dropped = len(edges_touching(all_edges, selected_ids)) - len(internal)
        if dropped:
            logger.debug("[Copy] Dropping %d edges that leave the selection", dropped)

        self._snapshot = ClipboardSnapshot(
            nodes=tuple(n.clone() for n in selected_nodes),
            edges=tuple(e.clone() for e in internal),
            timestamp=time.time(),
        )
        logger.info("[Copy] Copied %d nodes and %d edges", len(selected_nodes), len(internal))
        return ClipboardResult(ok=True, node_count=len(selected_nodes), edge_count=len(internal))

    def paste(self, store: GraphStore, offset_x: Optional[float] = None,
              offset_y: Optional[float] = None) -> ClipboardResult:
        if self._snapshot is None:
            logger.info("[Paste] Nothing in clipboard")
            return ClipboardResult(ok=False, reason=CLIPBOARD_EMPTY)

        dx = self.paste_offset[0] if offset_x is None else offset_x
        dy = self.paste_offset[1] if offset_y is None else offset_y

        taken = store.node_ids() | store.edge_ids()
        result = remap(self._snapshot.nodes, self._snapshot.edges, offset=(dx, dy), taken=taken)
        for node in result.nodes:
            node.data = reset_runtime_state(node.data)

        store.merge(result.nodes, result.edges)
        logger.info("[Paste] Pasted %d nodes and %d edges", len(result.nodes), len(result.edges))
        return ClipboardResult(
            ok=True,
            node_count=len(result.nodes),
            edge_count=len(result.edges),
            new_node_ids=[n.id for n in result.nodes],
        )

    def duplicate(self, store: GraphStore) -> ClipboardResult:
        copied = self.copy(store.selected_nodes(), store.selected_edges(), store.edges)
        if not copied:
            return copied
        return self.paste(store, *self.duplicate_offset)

    def delete(self, store: GraphStore, selected_nodes: Optional[Iterable[Node]] = None,
               selected_edges: Optional[Iterable[Edge]] = None) -> ClipboardResult:
        """
        Remove the selected edges, every edge touching a selected node, then the
        selected nodes. Defaults to the store's current selection.
        """
        nodes = list(store.selected_nodes() if selected_nodes is None else selected_nodes)
        edges = list(store.selected_edges() if selected_edges is None else selected_edges)
        if not nodes and not edges:
            logger.info("[Delete] Nothing selected")
            return ClipboardResult(ok=False, reason=NOTHING_SELECTED)

        node_ids = {n.id for n in nodes}
        edge_ids = {e.id for e in edges}
        cascaded = edges_touching(store.edges, node_ids)
        boundary = [e for e in cascaded if not (e.source in node_ids and e.target in node_ids)]
        if boundary:
            logger.debug("[Delete] %d edges cross the selection boundary", len(boundary))
        edge_ids.update(e.id for e in cascaded)

        removed_nodes, removed_edges = store.remove_many(node_ids, edge_ids)
        logger.info("[Delete] Removed %d nodes and %d edges", removed_nodes, removed_edges)
        return ClipboardResult(ok=True, node_count=removed_nodes, edge_count=removed_edges)
