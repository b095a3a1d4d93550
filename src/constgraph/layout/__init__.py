"""Interactive graph layout engine.

Provides:
- Graph data mapping (wire graph -> immutable render model)
- Force-directed layout simulation with pin/unpin/reheat intents
- Pointer interaction (hover, drag, click-to-focus, zoom/pan)
- Neighbour highlighting
- Frame rendering and SVG output
"""

from constgraph.layout.config import InteractionConfig, SimulationConfig
from constgraph.layout.frame_loop import FrameLoop
from constgraph.layout.highlight import EdgeStyle, Highlight, is_connected, resolve_highlight
from constgraph.layout.interaction import (
    InteractionController,
    InteractionSnapshot,
    PointerMode,
    ViewTransform,
)
from constgraph.layout.mapper import RenderEdge, RenderModel, RenderNode, map_graph, node_color
from constgraph.layout.render import Frame, render_frame
from constgraph.layout.simulation import ForceSimulation, PinNode, Reheat, UnpinNode

__all__ = [
    # Config
    "InteractionConfig",
    "SimulationConfig",
    # Mapping
    "RenderEdge",
    "RenderModel",
    "RenderNode",
    "map_graph",
    "node_color",
    # Simulation
    "ForceSimulation",
    "PinNode",
    "Reheat",
    "UnpinNode",
    # Interaction
    "InteractionController",
    "InteractionSnapshot",
    "PointerMode",
    "ViewTransform",
    # Highlight
    "EdgeStyle",
    "Highlight",
    "is_connected",
    "resolve_highlight",
    # Rendering
    "Frame",
    "FrameLoop",
    "render_frame",
]
