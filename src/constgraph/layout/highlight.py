"""Neighbour highlighting for the hovered (or focused) constant."""

from dataclasses import dataclass, field

from constgraph.layout.mapper import RenderEdge, RenderModel

DIMMED_OPACITY = 0.2


@dataclass(frozen=True)
class EdgeStyle:
    """Stroke attributes for one edge."""

    stroke: str
    opacity: float
    width: float


BASELINE_EDGE = EdgeStyle(stroke="#999", opacity=0.6, width=1.0)
EMPHASIZED_EDGE = EdgeStyle(stroke="#fff", opacity=1.0, width=2.0)
DIMMED_EDGE = EdgeStyle(stroke="#999", opacity=DIMMED_OPACITY, width=1.0)


def is_connected(edges: tuple[RenderEdge, ...], a: str, b: str) -> bool:
    """Whether an edge joins `a` and `b`, in either direction."""
    return any({e.source.id, e.target.id} == {a, b} for e in edges)


@dataclass(frozen=True)
class Highlight:
    """Emphasis for one focus node; `focus_id=None` is the baseline."""

    focus_id: str | None = None
    emphasized_nodes: frozenset[str] = field(default_factory=frozenset)
    emphasized_edges: frozenset[int] = field(default_factory=frozenset)

    @property
    def active(self) -> bool:
        return self.focus_id is not None

    def node_opacity(self, node_id: str) -> float:
        """Opacity for a node's circle and its label."""
        if not self.active or node_id in self.emphasized_nodes:
            return 1.0
        return DIMMED_OPACITY

    def edge_style(self, edge_index: int) -> EdgeStyle:
        if not self.active:
            return BASELINE_EDGE
        if edge_index in self.emphasized_edges:
            return EMPHASIZED_EDGE
        return DIMMED_EDGE


def resolve_highlight(model: RenderModel, focus_id: str | None) -> Highlight:
    """
    Compute which nodes and edges stay emphasised around `focus_id`.

    A single pass over the edges: every edge touching the focus is
    emphasised, and its other endpoint is a neighbour. Direction is ignored.
    """
    if focus_id is None:
        return Highlight()

    nodes = {focus_id}
    edges = set()
    for i, edge in enumerate(model.edges):
        if edge.touches(focus_id):
            edges.add(i)
            nodes.add(edge.source.id)
            nodes.add(edge.target.id)

    return Highlight(
        focus_id=focus_id,
        emphasized_nodes=frozenset(nodes),
        emphasized_edges=frozenset(edges),
    )
