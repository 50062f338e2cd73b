from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field, ValidationError


class PositionSpec(BaseModel):
    x: float = 0.0
    y: float = 0.0


class NodeSpec(BaseModel):
    id: str
    type: str
    position: PositionSpec = Field(default_factory=PositionSpec)
    data: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        extra = "allow"


class EdgeSpec(BaseModel):
    id: str
    source: str
    target: str
    sourceHandle: Optional[str] = None
    targetHandle: Optional[str] = None

    class Config:
        extra = "allow"


class WorkflowSpec(BaseModel):
    id: str
    name: str
    description: str = ""
    category: str = "custom"
    nodes: List[NodeSpec] = Field(default_factory=list)
    edges: List[EdgeSpec] = Field(default_factory=list)
    createdAt: Optional[str] = None

    class Config:
        extra = "allow"  # records written by newer versions may carry more fields


def _validate(model, raw: Any):
    # support for both pydantic v2 and v1
    if hasattr(model, "model_validate"):    # v2
        return model.model_validate(raw)
    return model.parse_obj(raw)              # v1


def validate_workflow(raw: Dict[str, Any]) -> WorkflowSpec:
    """Validate one stored workflow record against WorkflowSpec."""
    try:
        return _validate(WorkflowSpec, raw)
    except ValidationError as e:
        raise ValueError(f"Workflow validation error: {e}")


def validate_collection(raw: Any) -> List[WorkflowSpec]:
    """Validate a stored collection: a JSON array of workflow records."""
    if not isinstance(raw, list):
        raise ValueError(f"Workflow collection must be a list, got {type(raw).__name__}")
    return [validate_workflow(item) for item in raw]
