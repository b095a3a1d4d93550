"""Project metadata and the file tree shown next to the graph."""

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from constgraph.models.graph import GraphValidationError


@dataclass
class ProjectInfo:
    """The analysed project's location and display name."""

    project_path: str
    project_name: str

    @classmethod
    def from_dict(cls, data: Any) -> "ProjectInfo":
        """Create from the backend's JSON shape."""
        if not isinstance(data, dict):
            raise GraphValidationError(f"Project info must be an object, got {type(data).__name__}")
        return cls(
            project_path=str(data.get("projectPath") or ""),
            project_name=str(data.get("projectName") or ""),
        )


@dataclass
class FileNode:
    """A file or directory in the project tree."""

    name: str
    path: str
    is_dir: bool = False
    children: list["FileNode"] = field(default_factory=list)

    def walk(self) -> Iterator["FileNode"]:
        """Yield this node and all descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, path: str) -> "FileNode | None":
        """Find a node by its path."""
        for node in self.walk():
            if node.path == path:
                return node
        return None

    def files(self) -> list["FileNode"]:
        """All leaf (non-directory) nodes."""
        return [node for node in self.walk() if not node.is_dir]

    @classmethod
    def from_dict(cls, data: Any) -> "FileNode":
        """Create from the backend's recursive JSON shape."""
        if not isinstance(data, dict) or "path" not in data:
            raise GraphValidationError(f"File tree node is missing 'path': {data!r}")
        children = data.get("children") or []
        if not isinstance(children, list):
            raise GraphValidationError(f"File tree 'children' must be an array: {data!r}")
        return cls(
            name=str(data.get("name") or ""),
            path=str(data["path"]),
            is_dir=bool(data.get("isDir", False)),
            children=[cls.from_dict(child) for child in children],
        )


def status_text(node: FileNode | None) -> str:
    """Status bar line for the explorer's current selection."""
    if node is None:
        return "No file selected"
    kind = "Folder" if node.is_dir else "File"
    return f"{kind}: {node.name}"


class FileTreeSelection:
    """
    Selection state of the file explorer.

    Directories can be selected (for the status bar) but only leaves are
    reported to `on_file_selected`, which is how the graph view learns
    which file to scope its graph to.
    """

    def __init__(self, on_file_selected: Callable[[str], None]) -> None:
        self.on_file_selected = on_file_selected
        self.selected: FileNode | None = None

    def select(self, node: FileNode) -> None:
        """Select a node; notify the listener when it is a file."""
        self.selected = node
        if not node.is_dir:
            self.on_file_selected(node.path)

    @property
    def status(self) -> str:
        return status_text(self.selected)
