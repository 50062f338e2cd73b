""" Execution results and their write-back into the graph. """

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from ..graph.kinds import NodeKind
from ..graph.store import GraphStore

logger = logging.getLogger(__name__)


@dataclass
class ExecutionResult:
    success: bool
    message: Optional[str] = None
    outputs: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    vmaf_results: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    audio_outputs: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "ExecutionResult":
        return cls(
            success=bool(raw.get("success", False)),
            message=raw.get("message"),
            outputs=dict(raw.get("outputs") or {}),
            vmaf_results=dict(raw.get("vmaf_results") or {}),
            audio_outputs=dict(raw.get("audio_outputs") or {}),
        )

    @classmethod
    def failure(cls, message: str) -> "ExecutionResult":
        return cls(success=False, message=message)


def apply_results(store: GraphStore, result: ExecutionResult) -> int:
    """
    Write execution results back by node id. Nodes deleted while the run was in
    flight are skipped. Returns the number of nodes updated.
    """
    updated = 0
    for node in store.nodes:
        partial: Optional[Dict[str, Any]] = None

        if node.type == NodeKind.VMAF_ANALYSIS:
            score = result.vmaf_results.get(node.id)
            if score is not None:
                partial = {"vmafScore": score, "isAnalyzing": False, "error": None}

        elif node.type == NodeKind.SPECTRUM_ANALYZER:
            audio = result.audio_outputs.get(node.id)
            if audio is not None:
                path = audio.get("path")
                partial = {"audioPath": path, "audioFile": path, "isProcessing": False, "error": None}

        elif node.type in (NodeKind.VIEW_VIDEO, NodeKind.INFO_VIDEO):
            video_path = _video_for_display(store, node.id, result)
            if video_path:
                partial = {"videoPath": video_path}

        if partial is not None and store.update_node_data(node.id, partial):
            logger.debug("[Pipeline] Result applied to %s", node.id)
            updated += 1
    return updated


def _video_for_display(store: GraphStore, node_id: str, result: ExecutionResult) -> Optional[str]:
    incoming = next((e for e in store.edges if e.target == node_id), None)
    if incoming is None:
        return None
    source = store.get_node(incoming.source)
    if source is None:
        return None

    produced = result.outputs.get(source.id)
    if produced and produced.get("path"):
        return produced["path"]
    # an input feeding a preview directly has nothing to process
    if source.type == NodeKind.INPUT_VIDEO:
        return source.data.get("filePath") or None
    return None
