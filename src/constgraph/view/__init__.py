"""Graph view and per-load session lifecycle."""

from constgraph.view.graph_view import DisplayState, GraphView
from constgraph.view.session import GraphSession

__all__ = ["DisplayState", "GraphSession", "GraphView"]
