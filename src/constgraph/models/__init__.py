"""constgraph data models."""

from constgraph.models.graph import (
    ConstantType,
    DependencyGraph,
    GraphEdge,
    GraphNode,
    GraphValidationError,
)
from constgraph.models.project import FileNode, FileTreeSelection, ProjectInfo, status_text

__all__ = [
    "ConstantType",
    "DependencyGraph",
    "GraphEdge",
    "GraphNode",
    "GraphValidationError",
    "FileNode",
    "FileTreeSelection",
    "ProjectInfo",
    "status_text",
]
