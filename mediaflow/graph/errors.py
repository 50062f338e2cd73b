""" Structural errors raised at the graph mutation boundary. """


class GraphError(Exception):
    """Base class for graph invariant violations."""


class DuplicateIdError(GraphError):
    def __init__(self, item_id: str, what: str = "node"):
        super().__init__(f"Duplicate {what} id: {item_id}")
        self.item_id = item_id
        self.what = what


class UnknownNodeError(GraphError):
    def __init__(self, node_id: str):
        super().__init__(f"Edge references unknown node: {node_id}")
        self.node_id = node_id
