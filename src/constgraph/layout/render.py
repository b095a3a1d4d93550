"""Render surface: positions + interaction state -> drawable primitives.

`render_frame` is a pure read; it never touches the simulation. The
resulting `Frame` can be serialised to a standalone SVG document.
"""

from dataclasses import dataclass
from html import escape

import numpy as np

from constgraph.layout.highlight import Highlight
from constgraph.layout.interaction import InteractionSnapshot, ViewTransform
from constgraph.layout.mapper import RenderModel

NODE_RADIUS = 10.0
HOVER_RADIUS = 15.0
LABEL_DX = 12.0
LABEL_COLOR = "#d4d4d4"
LABEL_FONT_SIZE = 12
BACKGROUND = "#1e1e1e"
ARROW_COLOR = "#999"
TOOLTIP_BACKGROUND = "#333"
TOOLTIP_LINE_HEIGHT = 16.0


@dataclass(frozen=True)
class EdgeGlyph:
    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str
    opacity: float
    width: float


@dataclass(frozen=True)
class NodeGlyph:
    node_id: str
    cx: float
    cy: float
    r: float
    fill: str
    opacity: float


@dataclass(frozen=True)
class LabelGlyph:
    x: float
    y: float
    text: str
    opacity: float


@dataclass(frozen=True)
class Tooltip:
    """Details of the hovered constant, anchored in viewport space."""

    x: float
    y: float
    lines: tuple[str, ...]


@dataclass(frozen=True)
class Frame:
    """Everything needed to draw one frame."""

    width: float
    height: float
    transform: ViewTransform
    edges: tuple[EdgeGlyph, ...]
    nodes: tuple[NodeGlyph, ...]
    labels: tuple[LabelGlyph, ...]
    tooltip: Tooltip | None = None
    message: str | None = None  # Placeholder shown instead of a graph

    def to_svg(self) -> str:
        """Serialise to an SVG document."""
        parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{self.width:g}" '
            f'height="{self.height:g}" viewBox="0 0 {self.width:g} {self.height:g}">',
            f'<rect width="100%" height="100%" fill="{BACKGROUND}"/>',
            "<defs>",
            '<marker id="arrow" viewBox="0 -5 10 10" refX="25" refY="0" '
            'markerWidth="6" markerHeight="6" orient="auto">',
            f'<path d="M0,-5L10,0L0,5" fill="{ARROW_COLOR}"/>',
            "</marker>",
            "</defs>",
            f'<g class="graph-container" transform="{self.transform.to_svg()}">',
            '<g class="links">',
        ]
        for e in self.edges:
            parts.append(
                f'<line x1="{e.x1:.2f}" y1="{e.y1:.2f}" x2="{e.x2:.2f}" y2="{e.y2:.2f}" '
                f'stroke="{e.stroke}" stroke-opacity="{e.opacity:g}" '
                f'stroke-width="{e.width:g}" marker-end="url(#arrow)"/>'
            )
        parts.append('</g><g class="nodes">')
        for n in self.nodes:
            parts.append(
                f'<circle data-id="{escape(n.node_id)}" cx="{n.cx:.2f}" cy="{n.cy:.2f}" '
                f'r="{n.r:g}" fill="{n.fill}" opacity="{n.opacity:g}"/>'
            )
        parts.append('</g><g class="node-labels">')
        for label in self.labels:
            parts.append(
                f'<text x="{label.x:.2f}" y="{label.y:.2f}" dx="{LABEL_DX:g}" dy=".35em" '
                f'fill="{LABEL_COLOR}" font-size="{LABEL_FONT_SIZE}" '
                f'opacity="{label.opacity:g}">{escape(label.text)}</text>'
            )
        parts.append("</g></g>")

        if self.message:
            parts.append(
                f'<text class="placeholder" x="{self.width / 2:g}" y="{self.height / 2:g}" '
                f'text-anchor="middle" fill="{LABEL_COLOR}" font-size="14">'
                f"{escape(self.message)}</text>"
            )

        if self.tooltip is not None:
            t = self.tooltip
            longest = max((len(line) for line in t.lines), default=0)
            box_w = 20 + longest * 7
            box_h = 12 + len(t.lines) * TOOLTIP_LINE_HEIGHT
            parts.append(f'<g class="tooltip" transform="translate({t.x:.2f},{t.y:.2f})">')
            parts.append(
                f'<rect width="{box_w:g}" height="{box_h:g}" rx="4" '
                f'fill="{TOOLTIP_BACKGROUND}" opacity="0.9"/>'
            )
            for i, line in enumerate(t.lines):
                y = 6 + (i + 1) * TOOLTIP_LINE_HEIGHT - 4
                parts.append(
                    f'<text x="10" y="{y:g}" fill="#fff" font-size="12">{escape(line)}</text>'
                )
            parts.append("</g>")

        parts.append("</svg>")
        return "\n".join(parts)


def tooltip_lines(model: RenderModel, node_id: str) -> tuple[str, ...]:
    index = model.index_of(node_id)
    if index is None:
        return ()
    node = model.nodes[index]
    return (
        f"{node.name} ({node.type or 'unknown'})",
        f"Value: {node.value}",
        f"File: {node.file_path}",
        f"Line: {node.line_num}",
    )


def render_frame(
    model: RenderModel,
    positions: np.ndarray,
    width: float,
    height: float,
    interaction: InteractionSnapshot | None = None,
    highlight: Highlight | None = None,
    message: str | None = None,
) -> Frame:
    """
    Build the drawable primitives for the current state.

    Args:
        model: Display data for the loaded graph
        positions: (n, 2) positions in model node order
        width, height: Viewport size in pixels
        interaction: Controller snapshot; None renders the resting view
        highlight: Overrides the snapshot's highlight when given
        message: Placeholder text drawn in the middle of the viewport
    """
    transform = interaction.view_transform if interaction else ViewTransform()
    hovered = interaction.hovered_node_id if interaction else None
    if highlight is None:
        highlight = interaction.highlight if interaction else Highlight()

    edges = []
    for i, edge in enumerate(model.edges):
        style = highlight.edge_style(i)
        (x1, y1), (x2, y2) = positions[edge.source_index], positions[edge.target_index]
        edges.append(EdgeGlyph(
            x1=float(x1), y1=float(y1), x2=float(x2), y2=float(y2),
            stroke=style.stroke, opacity=style.opacity, width=style.width,
        ))

    nodes = []
    labels = []
    for node, (x, y) in zip(model.nodes, positions):
        opacity = highlight.node_opacity(node.id)
        nodes.append(NodeGlyph(
            node_id=node.id,
            cx=float(x),
            cy=float(y),
            r=HOVER_RADIUS if node.id == hovered else NODE_RADIUS,
            fill=node.color,
            opacity=opacity,
        ))
        labels.append(LabelGlyph(x=float(x), y=float(y), text=node.name, opacity=opacity))

    tooltip = None
    if interaction and hovered is not None and interaction.tooltip_anchor is not None:
        lines = tooltip_lines(model, hovered)
        if lines:
            tx, ty = interaction.tooltip_anchor
            tooltip = Tooltip(x=tx, y=ty, lines=lines)

    return Frame(
        width=width,
        height=height,
        transform=transform,
        edges=tuple(edges),
        nodes=tuple(nodes),
        labels=tuple(labels),
        tooltip=tooltip,
        message=message,
    )
