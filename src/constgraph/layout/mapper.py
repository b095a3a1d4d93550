"""Graph data mapper: wire graph -> render model.

Display attributes (label, tooltip text, colour) are computed once per load
and never change; positions live in the simulation's own table, indexed the
same way as `RenderModel.nodes`.
"""

import logging
from dataclasses import dataclass

from constgraph.models import ConstantType, DependencyGraph

logger = logging.getLogger(__name__)

NODE_COLORS: dict[ConstantType, str] = {
    "string": "#4da6ff",  # blue
    "number": "#ff9900",  # orange
    "boolean": "#00cc00",  # green
    "object": "#cc00cc",  # purple
    "array": "#ff3333",  # red
}
UNKNOWN_COLOR = "#aaaaaa"  # gray


def node_color(constant_type: str) -> str:
    """Fill colour for a constant type."""
    return NODE_COLORS.get(constant_type, UNKNOWN_COLOR)


@dataclass(frozen=True)
class RenderNode:
    """Immutable display record for one constant."""

    id: str
    name: str
    value: str
    type: str
    file_path: str
    line_num: int
    color: str


@dataclass(frozen=True)
class RenderEdge:
    """An edge whose endpoints are both known nodes."""

    source: RenderNode
    target: RenderNode
    source_index: int
    target_index: int

    def touches(self, node_id: str) -> bool:
        return self.source.id == node_id or self.target.id == node_id


@dataclass(frozen=True)
class RenderModel:
    """Nodes and resolved edges for one graph load."""

    nodes: tuple[RenderNode, ...] = ()
    edges: tuple[RenderEdge, ...] = ()
    duplicates: tuple[str, ...] = ()  # Ids that appeared more than once
    dropped_edges: int = 0  # Edges with an unknown endpoint

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def index_of(self, node_id: str) -> int | None:
        for i, node in enumerate(self.nodes):
            if node.id == node_id:
                return i
        return None


def map_graph(graph: DependencyGraph | dict) -> RenderModel:
    """
    Convert a dependency graph into a render model.

    Node identity is the constant name, because that is what edges refer
    to. Repeated names collapse into one node whose attributes come from the
    last occurrence (its position in the output is that of the first).

    Raises:
        GraphValidationError: if a raw dict is missing required fields
    """
    if isinstance(graph, dict):
        graph = DependencyGraph.from_dict(graph)

    by_id: dict[str, RenderNode] = {}
    duplicates: list[str] = []
    for node in graph.nodes:
        if node.name in by_id and node.name not in duplicates:
            duplicates.append(node.name)
        by_id[node.name] = RenderNode(
            id=node.name,
            name=node.name,
            value=node.value,
            type=node.type,
            file_path=node.file_path,
            line_num=node.line_num,
            color=node_color(node.type),
        )

    if duplicates:
        logger.warning(
            f"{len(duplicates)} constant name(s) defined more than once, "
            f"keeping the last definition: {', '.join(duplicates[:5])}"
        )

    nodes = tuple(by_id.values())
    index = {node.id: i for i, node in enumerate(nodes)}

    edges: list[RenderEdge] = []
    dropped = 0
    for edge in graph.edges:
        s, t = index.get(edge.source), index.get(edge.target)
        if s is None or t is None:
            dropped += 1
            continue
        edges.append(RenderEdge(source=nodes[s], target=nodes[t], source_index=s, target_index=t))

    if dropped:
        logger.debug(f"Dropped {dropped} edge(s) referencing unknown constants")

    return RenderModel(
        nodes=nodes,
        edges=tuple(edges),
        duplicates=tuple(duplicates),
        dropped_edges=dropped,
    )
