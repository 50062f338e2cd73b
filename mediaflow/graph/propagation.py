"""
Design-time data flow along edges.

Media paths picked on input nodes are pushed downstream so previews and
analyzers can show something before the pipeline runs:

  - video: inputVideo.filePath becomes videoPath on video consumers,
    passing through trim and convert nodes
  - audio: inputAudio.filePath becomes audioPath/audioFile on audio consumers
  - vmaf: the reference-input / test-input handle picks the target field
  - data: trimVideo start/end/duration become trimParams on converters
"""

import logging
from typing import Dict, List, Optional

from .kinds import NodeKind, config_for
from .models import Edge, Node
from .store import GraphStore

logger = logging.getLogger(__name__)

VIDEO_CONSUMERS = {
    NodeKind.VIEW_VIDEO,
    NodeKind.INFO_VIDEO,
    NodeKind.GRID_VIEW,
    NodeKind.TRIM_VIDEO,
    NodeKind.CONVERT_VIDEO,
    NodeKind.SEQUENCE_EXTRACT,
    NodeKind.SPECTRUM_ANALYZER,
}

AUDIO_CONSUMERS = {
    NodeKind.SPECTRUM_ANALYZER,
    NodeKind.INFO_AUDIO,
    NodeKind.CONVERT_AUDIO,
    NodeKind.TRIM_AUDIO,
}

DATA_CONSUMERS = {NodeKind.CONVERT_VIDEO, NodeKind.SEQUENCE_EXTRACT}


def _file_path(node: Node) -> Optional[str]:
    path = node.data.get("filePath")
    if isinstance(path, str) and path.strip():
        return path
    return None


def _upstream(node: Node, handle: str, nodes: Dict[str, Node], edges: List[Edge]) -> Optional[Node]:
    edge = next((e for e in edges if e.target == node.id and e.target_handle == handle), None)
    if edge is None:
        return None
    return nodes.get(edge.source)


def video_path_from(source: Node, nodes: Dict[str, Node], edges: List[Edge],
                    _seen: Optional[set] = None) -> Optional[str]:
    seen = _seen or set()
    if source.id in seen:
        return None
    seen.add(source.id)

    if source.type == NodeKind.INPUT_VIDEO:
        return _file_path(source)

    if source.type == NodeKind.TRIM_VIDEO:
        upstream = _upstream(source, "video-input", nodes, edges)
        if upstream is not None and upstream.type == NodeKind.INPUT_VIDEO:
            return _file_path(upstream)

    if source.type == NodeKind.TRIM_AUDIO:
        upstream = _upstream(source, "audio-input", nodes, edges)
        if upstream is not None and upstream.type == NodeKind.INPUT_AUDIO:
            return _file_path(upstream)

    if source.type == NodeKind.CONVERT_VIDEO:
        upstream = _upstream(source, "video-input", nodes, edges)
        if upstream is not None:
            return video_path_from(upstream, nodes, edges, seen)

    return None


def audio_path_from(source: Node, nodes: Dict[str, Node], edges: List[Edge],
                    _seen: Optional[set] = None) -> Optional[str]:
    seen = _seen or set()
    if source.id in seen:
        return None
    seen.add(source.id)

    if source.type == NodeKind.INPUT_AUDIO:
        return _file_path(source)

    if source.type == NodeKind.CONVERT_AUDIO:
        upstream = _upstream(source, "audio-input", nodes, edges)
        if upstream is not None:
            return audio_path_from(upstream, nodes, edges, seen)

    return None


def trim_params_from(source: Node) -> Optional[Dict[str, float]]:
    if source.type != NodeKind.TRIM_VIDEO:
        return None
    return config_for(source.type, source.data).to_data()


def compute_updates(nodes: List[Node], edges: List[Edge]) -> Dict[str, Dict]:
    """Return {node_id: partial data} for every target that should change."""
    by_id = {n.id: n for n in nodes}
    updates: Dict[str, Dict] = {}

    for edge in edges:
        source = by_id.get(edge.source)
        target = by_id.get(edge.target)
        if source is None or target is None:
            continue
        pending = updates.setdefault(target.id, {})

        if target.type == NodeKind.VMAF_ANALYSIS:
            path = video_path_from(source, by_id, edges)
            if path:
                key = "referenceVideoPath" if edge.target_handle == "reference-input" else "testVideoPath"
                pending[key] = path
            continue

        if edge.source_handle in (None, "video-output"):
            path = video_path_from(source, by_id, edges)
            if path and target.type in VIDEO_CONSUMERS and path != target.data.get("videoPath"):
                pending["videoPath"] = path
        elif edge.source_handle == "audio-output":
            path = audio_path_from(source, by_id, edges)
            if path and target.type in AUDIO_CONSUMERS and path != target.data.get("audioPath"):
                pending.update(audioPath=path, audioFile=path)

        # inputAudio exposes its file through a video-output handle as well
        if source.type == NodeKind.INPUT_AUDIO and target.type in AUDIO_CONSUMERS:
            path = audio_path_from(source, by_id, edges)
            if path and path != target.data.get("audioPath"):
                pending.update(audioPath=path, audioFile=path)

        if edge.source_handle == "data-output" and target.type in DATA_CONSUMERS:
            params = trim_params_from(source)
            if params:
                pending["trimParams"] = params

    return {node_id: partial for node_id, partial in updates.items() if partial}


def propagate(store: GraphStore) -> int:
    """Apply propagated values to `store`. Returns the number of nodes touched."""
    updates = compute_updates(store.nodes, store.edges)
    for node_id, partial in updates.items():
        logger.debug("[Propagation] %s <- %s", node_id, partial)
        store.update_node_data(node_id, partial)
    return len(updates)
