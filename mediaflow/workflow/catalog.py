""" Built-in and user-saved workflows. """

import logging
import time
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from ..graph.errors import GraphError
from ..graph.models import Edge, Node
from ..graph.store import check_integrity
from ..storage.kv import KeyValueStorage
from .codec import dumps_workflows, from_document, loads_workflows, to_document
from .models import Category, Workflow
from .presets import load_presets

logger = logging.getLogger(__name__)

STORAGE_KEY = "customWorkflows"


class WorkflowError(Exception):
    pass


class WorkflowNotFoundError(WorkflowError):
    def __init__(self, workflow_id: str):
        super().__init__(f"Workflow not found: {workflow_id}")
        self.workflow_id = workflow_id


class ReadOnlyWorkflowError(WorkflowError):
    def __init__(self, workflow_id: str):
        super().__init__(f"Preset workflow cannot be modified: {workflow_id}")
        self.workflow_id = workflow_id


class WorkflowCatalog:
    """
    Presets are fixed at construction. The custom collection is read once from
    storage and written back whole on every change; last write wins.
    """

    def __init__(self, storage: KeyValueStorage, presets: Optional[Iterable[Workflow]] = None,
                 storage_key: str = STORAGE_KEY):
        self.storage = storage
        self.storage_key = storage_key
        self._presets: List[Workflow] = list(load_presets() if presets is None else presets)
        self.load_error: Optional[str] = None
        self.save_error: Optional[str] = None
        self._custom: List[Workflow] = self._load()

    def _load(self) -> List[Workflow]:
        try:
            text = self.storage.load(self.storage_key)
        except OSError as e:
            self.load_error = f"Storage unavailable: {e}"
            logger.warning("[Catalog] %s", self.load_error)
            return []
        except UnicodeDecodeError as e:
            self.load_error = f"Error loading custom workflows: {e}"
            logger.warning("[Catalog] %s", self.load_error)
            return []

        if text is None:
            return []
        try:
            workflows = loads_workflows(text)
        except ValueError as e:
            self.load_error = f"Error loading custom workflows: {e}"
            logger.warning("[Catalog] %s", self.load_error)
            return []

        # stored records are user workflows whatever they claim
        for workflow in workflows:
            workflow.category = Category.CUSTOM
        logger.info("[Catalog] Loaded %d custom workflows", len(workflows))
        return workflows

    def _persist(self) -> None:
        try:
            self.storage.save(self.storage_key, dumps_workflows(self._custom))
            self.save_error = None
        except OSError as e:
            self.save_error = f"Could not save custom workflows: {e}"
            logger.error("[Catalog] %s", self.save_error)

    def reload(self) -> None:
        self.load_error = None
        self._custom = self._load()

    # -------------------------
    # QUERIES
    # -------------------------

    def presets(self) -> List[Workflow]:
        return [w.clone() for w in self._presets]

    def custom(self) -> List[Workflow]:
        return [w.clone() for w in self._custom]

    def list(self) -> List[Workflow]:
        return self.presets() + self.custom()

    def get(self, workflow_id: str) -> Workflow:
        for workflow in self._presets + self._custom:
            if workflow.id == workflow_id:
                return workflow.clone()
        raise WorkflowNotFoundError(workflow_id)

    def __contains__(self, workflow_id: str) -> bool:
        return any(w.id == workflow_id for w in self._presets + self._custom)

    # -------------------------
    # MUTATIONS
    # -------------------------

    def _fresh_id(self) -> str:
        taken = {w.id for w in self._presets + self._custom}
        stamp = int(time.time() * 1000)
        while f"custom-{stamp}" in taken:
            stamp += 1
        return f"custom-{stamp}"

    def add(self, name: str, nodes: Iterable[Node], edges: Iterable[Edge],
            description: Optional[str] = None) -> Workflow:
        """Save the graph as a new custom workflow. Transient node state is stripped."""
        name = (name or "").strip()
        if not name:
            raise ValueError("Workflow name must not be empty")

        clean_nodes, clean_edges = from_document(to_document(nodes, edges))
        try:
            check_integrity(clean_nodes, clean_edges)
        except GraphError as e:
            raise ValueError(f"Workflow graph is invalid: {e}")

        workflow = Workflow(
            id=self._fresh_id(),
            name=name,
            description=description if description is not None else f"Custom workflow with {len(clean_nodes)} nodes",
            category=Category.CUSTOM,
            nodes=clean_nodes,
            edges=clean_edges,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        self._custom = self._custom + [workflow]
        self._persist()
        logger.info("[Catalog] Workflow saved: %s (%s)", workflow.name, workflow.id)
        return workflow.clone()

    def remove(self, workflow_id: str) -> bool:
        if any(w.id == workflow_id for w in self._presets):
            raise ReadOnlyWorkflowError(workflow_id)

        remaining = [w for w in self._custom if w.id != workflow_id]
        if len(remaining) == len(self._custom):
            return False
        self._custom = remaining
        self._persist()
        logger.info("[Catalog] Deleted workflow: %s", workflow_id)
        return True
