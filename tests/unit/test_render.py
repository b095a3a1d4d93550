"""Unit tests for frame rendering."""

import numpy as np

from constgraph.layout import ForceSimulation, InteractionController, map_graph, render_frame
from constgraph.layout.highlight import DIMMED_OPACITY
from constgraph.layout.render import HOVER_RADIUS, NODE_RADIUS, tooltip_lines


class TestRenderFrame:
    """Tests for render_frame."""

    def test_resting_frame(self, sample_model) -> None:
        positions = np.array([[0.0, 0.0], [100.0, 0.0], [0.0, 100.0], [100.0, 100.0]])
        frame = render_frame(sample_model, positions, 800, 600)

        assert len(frame.nodes) == 4
        assert len(frame.edges) == 2
        assert frame.tooltip is None
        assert frame.nodes[1].cx == 100.0
        assert frame.nodes[0].fill == "#4da6ff"
        assert all(n.r == NODE_RADIUS and n.opacity == 1.0 for n in frame.nodes)

        edge = frame.edges[0]
        assert (edge.x1, edge.y1, edge.x2, edge.y2) == (0.0, 0.0, 100.0, 0.0)
        assert (edge.stroke, edge.opacity, edge.width) == ("#999", 0.6, 1.0)

    def test_empty_model(self) -> None:
        frame = render_frame(map_graph({"nodes": []}), np.zeros((0, 2)), 800, 600)
        assert frame.nodes == ()
        assert "<svg" in frame.to_svg()

    def test_placeholder_message(self) -> None:
        frame = render_frame(
            map_graph({"nodes": []}), np.zeros((0, 2)), 800, 600, message="No <constants> here"
        )
        svg = frame.to_svg()
        assert frame.message == "No <constants> here"
        assert '<text class="placeholder" x="400" y="300"' in svg
        assert "No &lt;constants&gt; here" in svg

    def test_no_placeholder_by_default(self, settled_simulation) -> None:
        frame = render_frame(
            settled_simulation.model, settled_simulation.positions, 800, 600
        )
        assert 'class="placeholder"' not in frame.to_svg()

    def test_hover_frame(self, settled_simulation) -> None:
        """Test hover radius, dimming and the tooltip."""
        controller = InteractionController(settled_simulation)
        x, y = settled_simulation.position_of("A")
        controller.pointer_move(x, y)

        frame = render_frame(
            settled_simulation.model,
            settled_simulation.positions,
            800,
            600,
            controller.snapshot(),
        )
        by_id = {n.node_id: n for n in frame.nodes}

        assert by_id["A"].r == HOVER_RADIUS
        assert by_id["B"].r == NODE_RADIUS
        assert by_id["B"].opacity == 1.0
        assert by_id["C"].opacity == DIMMED_OPACITY
        assert frame.labels[2].opacity == DIMMED_OPACITY
        assert frame.edges[0].stroke == "#fff"
        assert frame.edges[1].opacity == DIMMED_OPACITY

        assert frame.tooltip is not None
        assert (frame.tooltip.x, frame.tooltip.y) == (x + 10, y - 28)
        assert frame.tooltip.lines[0] == "A (string)"


class TestTooltipLines:
    """Tests for tooltip content."""

    def test_lines(self, sample_model) -> None:
        assert tooltip_lines(sample_model, "C") == (
            "C (number)",
            "Value: 5",
            "File: config/limits.go",
            "Line: 7",
        )

    def test_unknown_type(self) -> None:
        model = map_graph({"nodes": [{"name": "X"}]})
        assert tooltip_lines(model, "X")[0] == "X (unknown)"

    def test_unknown_node(self, sample_model) -> None:
        assert tooltip_lines(sample_model, "Z") == ()


class TestSvg:
    """Tests for SVG serialisation."""

    def test_document_structure(self, settled_simulation) -> None:
        frame = render_frame(settled_simulation.model, settled_simulation.positions, 800, 600)
        svg = frame.to_svg()

        assert svg.startswith("<svg")
        assert svg.endswith("</svg>")
        assert 'id="arrow"' in svg
        assert 'refX="25"' in svg
        assert 'class="graph-container"' in svg
        assert svg.count("<circle") == 4
        assert svg.count("<line") == 2
        assert 'marker-end="url(#arrow)"' in svg

    def test_text_is_escaped(self) -> None:
        model = map_graph({"nodes": [{"name": "A<B>", "value": "\"x\" & y"}]})
        simulation = ForceSimulation(model)
        controller = InteractionController(simulation)
        x, y = simulation.position_of("A<B>")
        controller.pointer_move(x, y)

        svg = render_frame(model, simulation.positions, 800, 600, controller.snapshot()).to_svg()

        assert "A&lt;B&gt;" in svg
        assert "&amp; y" in svg
        assert "<B>" not in svg

    def test_transform(self, settled_simulation) -> None:
        controller = InteractionController(settled_simulation)
        controller.set_transform(10, 20, 2)
        frame = render_frame(
            settled_simulation.model,
            settled_simulation.positions,
            800,
            600,
            controller.snapshot(),
        )
        assert 'transform="translate(10.00,20.00) scale(2.0000)"' in frame.to_svg()
