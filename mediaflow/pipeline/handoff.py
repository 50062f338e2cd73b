"""
Handoff of the current graph to the external media executor.

The store is never locked: the user may keep editing while a run is in
flight, so results are applied by node id once they arrive. Only one run may
be in flight per handoff.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple, Union

from ..graph.kinds import NodeKind
from ..graph.models import Edge, Node
from ..graph.store import GraphStore
from .results import ExecutionResult, apply_results

logger = logging.getLogger(__name__)

ALREADY_RUNNING = "A pipeline execution is already in progress."
NO_INPUT = "Please select at least one input file (video or audio) before executing the pipeline."


class PipelineExecutor(Protocol):
    async def execute(self, nodes: List[Dict[str, Any]],
                      connections: List[Dict[str, Any]]) -> Union[ExecutionResult, Mapping[str, Any]]:
        ...


def _non_blank(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def validate_pipeline(nodes: List[Node]) -> Tuple[bool, Optional[str]]:
    """The pipeline needs at least one usable input (video or audio)."""
    valid = [
        n for n in nodes
        if (n.type in (NodeKind.INPUT_VIDEO, NodeKind.INPUT_AUDIO) and _non_blank(n.data.get("filePath")))
        or (n.type == NodeKind.TRIM_AUDIO and _non_blank(n.data.get("audioPath")))
    ]
    if not valid:
        return False, NO_INPUT
    return True, None


def to_backend_payload(nodes: List[Node], edges: List[Edge]) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    payload_nodes = [{"id": n.id, "type": n.type.value, "data": dict(n.data)} for n in nodes]
    connections = [
        {
            "id": e.id,
            "from": e.source,
            "to": e.target,
            "fromHandle": e.source_handle or "video-output",
            "toHandle": e.target_handle or "video-input",
        }
        for e in edges
    ]
    return payload_nodes, connections


class PipelineHandoff:
    def __init__(self, executor: PipelineExecutor):
        self.executor = executor
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    async def run(self, store: GraphStore) -> ExecutionResult:
        if self._running:
            logger.warning("[Pipeline] Execution requested while another is in flight")
            return ExecutionResult.failure(ALREADY_RUNNING)

        ok, message = validate_pipeline(store.nodes)
        if not ok:
            return ExecutionResult.failure(message or "Pipeline validation failed")

        nodes, connections = to_backend_payload(store.nodes, store.edges)
        logger.info("[Pipeline] Starting execution: %d nodes, %d connections", len(nodes), len(connections))

        self._running = True
        try:
            raw = await self.executor.execute(nodes, connections)
        except Exception as e:
            logger.error("[Pipeline] Execution failed: %s", e)
            return ExecutionResult.failure(f"Execution failed: {e}")
        finally:
            self._running = False

        result = raw if isinstance(raw, ExecutionResult) else ExecutionResult.from_mapping(raw)
        if result.success:
            updated = apply_results(store, result)
            logger.info("[Pipeline] Execution succeeded, %d nodes updated", updated)
        else:
            logger.warning("[Pipeline] Execution reported failure: %s", result.message)
        return result
