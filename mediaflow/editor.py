"""
Editor session: one graph, its clipboard, the workflow catalog and the
pipeline handoff, wired together the way the canvas drives them.
"""

import logging
import time
from typing import Any, Iterable, List, Optional

from .config import Settings
from .graph import commands
from .graph.clipboard import Clipboard, ClipboardResult
from .graph.kinds import NodeKind
from .graph.models import Edge
from .graph.propagation import propagate
from .graph.store import GraphStore
from .pipeline.handoff import PipelineExecutor, PipelineHandoff
from .pipeline.results import ExecutionResult
from .storage.kv import JsonFileStorage, KeyValueStorage
from .workflow.catalog import WorkflowCatalog
from .workflow.models import Workflow

logger = logging.getLogger(__name__)

# commands after which downstream data may be stale
_PROPAGATING = (commands.Connect, commands.UpdateNodeData, commands.RemoveEdge, commands.RemoveNode)


class Editor:
    def __init__(self, storage: KeyValueStorage, executor: Optional[PipelineExecutor] = None,
                 settings: Optional[Settings] = None, clipboard: Optional[Clipboard] = None,
                 catalog: Optional[WorkflowCatalog] = None, store: Optional[GraphStore] = None):
        self.settings = settings or Settings()
        self.store = store if store is not None else GraphStore()
        self.clipboard = clipboard if clipboard is not None else Clipboard(self.settings.paste_offset, self.settings.duplicate_offset)
        self.catalog = catalog if catalog is not None else WorkflowCatalog(storage)
        self.handoff = PipelineHandoff(executor) if executor is not None else None
        if self.catalog.load_error:
            logger.warning("[Editor] Starting with an empty custom collection: %s", self.catalog.load_error)

    @classmethod
    def from_settings(cls, settings: Settings, executor: Optional[PipelineExecutor] = None) -> "Editor":
        return cls(JsonFileStorage(settings.storage_dir), executor=executor, settings=settings)

    # -------------------------
    # GRAPH EDITS
    # -------------------------

    def apply(self, command) -> Any:
        before = {e.id: e for e in self.store.edges}
        result = commands.apply_command(self.store, command)
        if isinstance(command, _PROPAGATING):
            self._reset_disconnected(e for eid, e in before.items() if eid not in self.store.edge_ids())
            propagate(self.store)
        return result

    def _reset_disconnected(self, removed: Iterable[Edge]) -> None:
        """A spectrum analyzer that lost its input forgets the old audio."""
        for edge in removed:
            target = self.store.get_node(edge.target)
            if target is not None and target.type == NodeKind.SPECTRUM_ANALYZER:
                logger.info("[Edge Remove] Resetting spectrum analyzer: %s", target.id)
                self.store.update_node_data(target.id, {
                    "videoPath": None,
                    "audioPath": None,
                    "audioFile": "",
                    "resetKey": int(time.time() * 1000),
                })

    # -------------------------
    # CLIPBOARD
    # -------------------------

    def copy(self) -> ClipboardResult:
        return self.clipboard.copy(self.store.selected_nodes(), self.store.selected_edges(), self.store.edges)

    def paste(self, offset_x: Optional[float] = None, offset_y: Optional[float] = None) -> ClipboardResult:
        return self.clipboard.paste(self.store, offset_x, offset_y)

    def duplicate(self) -> ClipboardResult:
        return self.clipboard.duplicate(self.store)

    def delete_selection(self) -> ClipboardResult:
        before = {e.id: e for e in self.store.edges}
        result = self.clipboard.delete(self.store)
        if result:
            remaining = self.store.edge_ids()
            self._reset_disconnected(e for eid, e in before.items() if eid not in remaining)
        return result

    # -------------------------
    # WORKFLOWS
    # -------------------------

    def workflows(self) -> List[Workflow]:
        return self.catalog.list()

    def save_workflow(self, name: str, description: Optional[str] = None) -> Optional[Workflow]:
        """Save the canvas as a custom workflow. Returns None when the canvas is empty."""
        if len(self.store) == 0:
            logger.info("[Editor] Cannot save empty workflow")
            return None
        return self.catalog.add(name, self.store.nodes, self.store.edges, description)

    def load_workflow(self, workflow_id: str) -> Workflow:
        workflow = self.catalog.get(workflow_id)
        self.store.replace([n.clone() for n in workflow.nodes], [e.clone() for e in workflow.edges])
        propagate(self.store)
        logger.info("[Editor] Workflow loaded: %s (%d nodes, %d edges)",
                    workflow.name, len(workflow.nodes), len(workflow.edges))
        return workflow

    def delete_workflow(self, workflow_id: str) -> bool:
        return self.catalog.remove(workflow_id)

    # -------------------------
    # PIPELINE
    # -------------------------

    @property
    def is_running(self) -> bool:
        return self.handoff is not None and self.handoff.is_running

    async def execute(self) -> ExecutionResult:
        if self.handoff is None:
            return ExecutionResult.failure("No pipeline executor configured")
        return await self.handoff.run(self.store)
