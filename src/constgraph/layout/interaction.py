"""Pointer interaction: hover, drag-to-pin, click-to-focus, zoom and pan.

The controller reads the simulation's positions for hit-testing and
centring but never writes them. Dragging is expressed as intents passed
to `dispatch` (by default the simulation's own queue):

    pointer_down on node  -> PinNode(current position), Reheat(0.3, target=0.3)
    pointer_move dragging -> PinNode(pointer in graph space)
    pointer_up            -> UnpinNode, Reheat(target=0)

All coordinates given to the pointer methods are viewport pixels.
"""

import logging
import math
import time
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum

import numpy as np

from constgraph.layout.config import InteractionConfig
from constgraph.layout.highlight import Highlight, resolve_highlight
from constgraph.layout.simulation import ForceSimulation, Intent, PinNode, Reheat, UnpinNode

logger = logging.getLogger(__name__)


class PointerMode(str, Enum):
    """What the pointer is currently doing."""

    IDLE = "idle"
    HOVERING = "hovering"
    DRAGGING = "dragging"  # Pressed on a node
    PANNING = "panning"  # Pressed on the background


@dataclass(frozen=True)
class ViewTransform:
    """Graph space -> viewport: viewport = graph * scale + translate."""

    translate_x: float = 0.0
    translate_y: float = 0.0
    scale: float = 1.0

    def apply(self, x: float, y: float) -> tuple[float, float]:
        return x * self.scale + self.translate_x, y * self.scale + self.translate_y

    def invert(self, x: float, y: float) -> tuple[float, float]:
        return (x - self.translate_x) / self.scale, (y - self.translate_y) / self.scale

    def to_svg(self) -> str:
        return f"translate({self.translate_x:.2f},{self.translate_y:.2f}) scale({self.scale:.4f})"


def ease_cubic_in_out(t: float) -> float:
    t *= 2
    if t <= 1:
        return t * t * t / 2
    t -= 2
    return (t * t * t + 2) / 2


@dataclass(frozen=True)
class FocusTransition:
    """Eased interpolation between two view transforms."""

    start: ViewTransform
    end: ViewTransform
    started_at: float
    duration: float

    def at(self, now: float) -> tuple[ViewTransform, bool]:
        """Transform at `now` and whether the transition has finished."""
        if self.duration <= 0:
            return self.end, True
        t = min(max((now - self.started_at) / self.duration, 0.0), 1.0)
        e = ease_cubic_in_out(t)
        s, d = self.start, self.end
        return ViewTransform(
            translate_x=s.translate_x + (d.translate_x - s.translate_x) * e,
            translate_y=s.translate_y + (d.translate_y - s.translate_y) * e,
            scale=s.scale + (d.scale - s.scale) * e,
        ), t >= 1.0


@dataclass(frozen=True)
class InteractionSnapshot:
    """Everything the render surface needs from the controller."""

    mode: PointerMode
    hovered_node_id: str | None
    dragged_node_id: str | None
    focused_node_id: str | None
    view_transform: ViewTransform
    tooltip_anchor: tuple[float, float] | None
    highlight: Highlight


class InteractionController:
    """Pointer state machine for one rendered graph."""

    def __init__(
        self,
        simulation: ForceSimulation,
        config: InteractionConfig | None = None,
        dispatch: Callable[[Intent], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.simulation = simulation
        self.config = config or InteractionConfig()
        self._dispatch = dispatch or simulation.submit
        self._clock = clock
        self._viewport_center = simulation.config.center

        self.mode = PointerMode.IDLE
        self.hovered_node_id: str | None = None
        self.dragged_node_id: str | None = None
        self.focused_node_id: str | None = None
        self.view_transform = ViewTransform()
        self.tooltip_anchor: tuple[float, float] | None = None
        self.pointer_captured = False
        self.highlight = Highlight()
        self.version = 0

        self._transition: FocusTransition | None = None
        self._press_origin: tuple[float, float] | None = None
        self._pan_origin: ViewTransform | None = None
        self._moved = False
        self._disposed = False

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def transitioning(self) -> bool:
        return self._transition is not None

    def node_at(self, x: float, y: float) -> str | None:
        """Topmost node under a viewport point."""
        positions = self.simulation.positions
        if not len(positions):
            return None
        gx, gy = self.view_transform.invert(x, y)
        dist2 = (positions[:, 0] - gx) ** 2 + (positions[:, 1] - gy) ** 2

        radii = np.full(len(positions), self.config.node_radius)
        if self.hovered_node_id is not None:
            hovered = self.simulation.index_of(self.hovered_node_id)
            if hovered is not None:
                radii[hovered] = self.config.hover_radius

        hits = np.flatnonzero(dist2 <= radii * radii)
        if not len(hits):
            return None
        # Later nodes are drawn on top
        return self.simulation.model.nodes[int(hits[-1])].id

    def snapshot(self) -> InteractionSnapshot:
        return InteractionSnapshot(
            mode=self.mode,
            hovered_node_id=self.hovered_node_id,
            dragged_node_id=self.dragged_node_id,
            focused_node_id=self.focused_node_id,
            view_transform=self.view_transform,
            tooltip_anchor=self.tooltip_anchor,
            highlight=self.highlight,
        )

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------

    def pointer_move(self, x: float, y: float) -> None:
        if self._disposed:
            return

        if self.mode == PointerMode.DRAGGING:
            self._track_travel(x, y)
            gx, gy = self.view_transform.invert(x, y)
            self._dispatch(PinNode(self.dragged_node_id, gx, gy))
            self._touch()
            return

        if self.mode == PointerMode.PANNING:
            self._track_travel(x, y)
            ox, oy = self._press_origin
            origin = self._pan_origin
            self.view_transform = replace(
                origin,
                translate_x=origin.translate_x + x - ox,
                translate_y=origin.translate_y + y - oy,
            )
            self._touch()
            return

        self._update_hover(self.node_at(x, y), x, y)

    def pointer_down(self, x: float, y: float) -> None:
        if self._disposed:
            return
        self._press_origin = (x, y)
        self._moved = False
        self.pointer_captured = True

        node_id = self.node_at(x, y)
        if node_id is None:
            self._transition = None
            self._pan_origin = self.view_transform
            self.mode = PointerMode.PANNING
            return

        self.mode = PointerMode.DRAGGING
        self.dragged_node_id = node_id
        px, py = self.simulation.position_of(node_id)
        reheat = self.config.drag_reheat_alpha
        self._dispatch(PinNode(node_id, px, py))
        self._dispatch(Reheat(alpha=reheat, target=reheat))
        logger.debug(f"Drag started on {node_id!r}")
        self._touch()

    def pointer_up(self, x: float, y: float) -> None:
        if self._disposed:
            return
        self._track_travel(x, y)

        if self.mode == PointerMode.DRAGGING:
            node_id = self.dragged_node_id
            self._dispatch(UnpinNode(node_id))
            self._dispatch(Reheat(target=0.0))
            self.dragged_node_id = None
            if not self._moved:
                self._toggle_focus(node_id)

        self.mode = PointerMode.IDLE
        self.pointer_captured = False
        self._press_origin = None
        self._pan_origin = None
        self._update_hover(self.node_at(x, y), x, y)
        self._touch()

    def pointer_leave(self) -> None:
        """The pointer left the viewport."""
        if self._disposed or self.mode in (PointerMode.DRAGGING, PointerMode.PANNING):
            return
        self._update_hover(None, 0.0, 0.0)

    # ------------------------------------------------------------------
    # Viewport
    # ------------------------------------------------------------------

    def clamp_scale(self, scale: float) -> float:
        if math.isnan(scale):
            return self.view_transform.scale
        return min(max(scale, self.config.zoom_min), self.config.zoom_max)

    def set_transform(self, translate_x: float, translate_y: float, scale: float) -> None:
        if self._disposed:
            return
        self._transition = None
        self.view_transform = ViewTransform(translate_x, translate_y, self.clamp_scale(scale))
        self._touch()

    def zoom_to(self, scale: float, anchor: tuple[float, float] | None = None) -> None:
        """Zoom keeping the graph point under `anchor` (default: centre) fixed."""
        if self._disposed:
            return
        ax, ay = anchor or self._viewport_center
        gx, gy = self.view_transform.invert(ax, ay)
        k = self.clamp_scale(scale)
        self.set_transform(ax - gx * k, ay - gy * k, k)

    def wheel(self, x: float, y: float, delta: float) -> None:
        """Zoom around the pointer; positive `delta` zooms in by that many steps."""
        scale = self.view_transform.scale
        # Clamped in log space so huge deltas cannot overflow
        exponent = delta * math.log(self.config.zoom_step)
        lowest = math.log(self.config.zoom_min / scale)
        highest = math.log(self.config.zoom_max / scale)
        self.zoom_to(scale * math.exp(min(max(exponent, lowest), highest)), (x, y))

    def pan_by(self, dx: float, dy: float) -> None:
        t = self.view_transform
        self.set_transform(t.translate_x + dx, t.translate_y + dy, t.scale)

    def advance(self, now: float | None = None) -> bool:
        """Step a running focus transition; True if the view changed."""
        if self._disposed or self._transition is None:
            return False
        transform, done = self._transition.at(self._clock() if now is None else now)
        self.view_transform = transform
        if done:
            self._transition = None
        self._touch()
        return True

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def dispose(self) -> None:
        """Release pointer capture and drop all state; later events are ignored."""
        self._disposed = True
        self._transition = None
        self.pointer_captured = False
        self.mode = PointerMode.IDLE
        self.hovered_node_id = None
        self.dragged_node_id = None
        self.focused_node_id = None
        self.tooltip_anchor = None
        self.highlight = Highlight()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _touch(self) -> None:
        self.version += 1

    def _track_travel(self, x: float, y: float) -> None:
        if self._moved or self._press_origin is None:
            return
        ox, oy = self._press_origin
        if math.hypot(x - ox, y - oy) > self.config.drag_threshold:
            self._moved = True

    def _update_hover(self, node_id: str | None, x: float, y: float) -> None:
        previous = self.hovered_node_id
        self.hovered_node_id = node_id
        if node_id is None:
            self.mode = PointerMode.IDLE
            self.tooltip_anchor = None
        else:
            self.mode = PointerMode.HOVERING
            dx, dy = self.config.tooltip_offset
            self.tooltip_anchor = (x + dx, y + dy)
        if node_id != previous:
            self._refresh_highlight()
        self._touch()

    def _refresh_highlight(self) -> None:
        focus = self.hovered_node_id or self.focused_node_id
        if focus != self.highlight.focus_id:
            self.highlight = resolve_highlight(self.simulation.model, focus)

    def _toggle_focus(self, node_id: str) -> None:
        if self.focused_node_id == node_id:
            self.focused_node_id = None
            self._refresh_highlight()
            return

        self.focused_node_id = node_id
        self._refresh_highlight()
        x, y = self.simulation.position_of(node_id)
        k = self.view_transform.scale
        cx, cy = self._viewport_center
        target = ViewTransform(translate_x=cx - x * k, translate_y=cy - y * k, scale=k)
        self._transition = FocusTransition(
            start=self.view_transform,
            end=target,
            started_at=self._clock(),
            duration=self.config.focus_duration,
        )
        logger.debug(f"Focusing {node_id!r}")
