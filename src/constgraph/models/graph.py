"""Wire-level dependency graph models - constants and the edges between them."""

from dataclasses import dataclass, field
from typing import Any, Literal

ConstantType = Literal["string", "number", "boolean", "object", "array"]


class GraphValidationError(ValueError):
    """Raised when a graph payload is missing required fields."""


def _require_str(data: dict, key: str, kind: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise GraphValidationError(f"{kind} is missing required field '{key}': {data!r}")
    return value


@dataclass
class GraphNode:
    """
    A named constant found by the analysis backend.

    Example: MAX_RETRIES = 5 (number) in config/limits.go:12
    """

    name: str  # Identity key, edges reference it
    value: str = ""  # Literal as written in source
    type: str = ""  # string, number, boolean, object, array or anything else
    file_path: str = ""
    line_num: int = 0

    def to_dict(self) -> dict:
        """Convert to the backend's JSON shape."""
        return {
            "name": self.name,
            "value": self.value,
            "type": self.type,
            "filePath": self.file_path,
            "lineNum": self.line_num,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "GraphNode":
        """Create from the backend's JSON shape."""
        if not isinstance(data, dict):
            raise GraphValidationError(f"Node must be an object, got {type(data).__name__}")
        line_num = data.get("lineNum") or 0
        if not isinstance(line_num, int) or isinstance(line_num, bool):
            raise GraphValidationError(f"Node 'lineNum' must be an integer: {data!r}")
        return cls(
            name=_require_str(data, "name", "Node"),
            value=str(data.get("value") or ""),
            type=str(data.get("type") or ""),
            file_path=str(data.get("filePath") or ""),
            line_num=line_num,
        )


@dataclass
class GraphEdge:
    """A dependency: `source` refers to `target` in its definition."""

    source: str
    target: str

    def to_dict(self) -> dict:
        """Convert to the backend's JSON shape."""
        return {"source": self.source, "target": self.target}

    @classmethod
    def from_dict(cls, data: Any) -> "GraphEdge":
        """Create from the backend's JSON shape."""
        if not isinstance(data, dict):
            raise GraphValidationError(f"Edge must be an object, got {type(data).__name__}")
        return cls(
            source=_require_str(data, "source", "Edge"),
            target=_require_str(data, "target", "Edge"),
        )


@dataclass
class DependencyGraph:
    """Constants plus dependency edges, either whole-project or file-scoped."""

    nodes: list[GraphNode] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when the backend found no constants."""
        return not self.nodes

    def to_dict(self) -> dict:
        """Convert to the backend's JSON shape."""
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "DependencyGraph":
        """Create from the backend's JSON shape.

        The backend serialises empty collections as null, so missing or null
        `nodes`/`edges` are read as empty lists.
        """
        if not isinstance(data, dict):
            raise GraphValidationError(f"Graph must be an object, got {type(data).__name__}")

        raw_nodes = data.get("nodes") or []
        raw_edges = data.get("edges") or []
        if not isinstance(raw_nodes, list) or not isinstance(raw_edges, list):
            raise GraphValidationError("Graph 'nodes' and 'edges' must be arrays")

        return cls(
            nodes=[GraphNode.from_dict(n) for n in raw_nodes],
            edges=[GraphEdge.from_dict(e) for e in raw_edges],
        )
