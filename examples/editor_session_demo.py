""" Example: build a graph, copy/paste part of it, save it as a workflow and run it. """
import asyncio

from mediaflow.config import configure_logging, load_settings
from mediaflow.editor import Editor
from mediaflow.graph.commands import AddNode, Connect, Select, UpdateNodeData
from mediaflow.graph.kinds import NodeKind
from mediaflow.storage.kv import MemoryStorage


class PrintingExecutor:
    """Stands in for the media backend: reports every convert node as produced."""

    async def execute(self, nodes, connections):
        print(f"Executor received {len(nodes)} nodes, {len(connections)} connections")
        outputs = {
            n["id"]: {"path": f"/tmp/{n['id']}.{n['data'].get('format', 'mp4')}"}
            for n in nodes if n["type"] == NodeKind.CONVERT_VIDEO.value
        }
        return {"success": True, "message": "ok", "outputs": outputs}


def main():
    settings = load_settings()
    configure_logging(settings)
    editor = Editor(MemoryStorage(), executor=PrintingExecutor(), settings=settings)

    source = editor.apply(AddNode(NodeKind.INPUT_VIDEO, 100, 200))
    convert = editor.apply(AddNode(NodeKind.CONVERT_VIDEO, 400, 200))
    preview = editor.apply(AddNode(NodeKind.VIEW_VIDEO, 700, 200))
    editor.apply(Connect(source.id, convert.id, "video-output", "video-input"))
    editor.apply(Connect(convert.id, preview.id, "video-output", "video-input"))
    editor.apply(UpdateNodeData(source.id, {"filePath": "/media/sample.mp4"}))

    editor.apply(Select(node_ids=(convert.id, preview.id)))
    editor.copy()
    pasted = editor.paste()
    print(f"Pasted {pasted.node_count} nodes and {pasted.edge_count} edges")

    saved = editor.save_workflow("Sample convert")
    print(f"Saved workflow {saved.id} with {len(saved.nodes)} nodes")

    result = asyncio.run(editor.execute())
    print(f"Execution success={result.success}")
    print(f"Preview now shows: {editor.store.get_node(preview.id).data.get('videoPath')}")


if __name__ == '__main__':
    main()
