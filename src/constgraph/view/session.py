"""Lifecycle of one loaded graph: simulation, controller, frame loop."""

import logging
import time
from collections.abc import Callable

from constgraph.layout.config import InteractionConfig, SimulationConfig
from constgraph.layout.frame_loop import FrameLoop
from constgraph.layout.interaction import InteractionController
from constgraph.layout.mapper import RenderModel
from constgraph.layout.render import Frame, render_frame
from constgraph.layout.simulation import ForceSimulation, Intent

logger = logging.getLogger(__name__)


class GraphSession:
    """
    Everything bound to one graph load.

    Created when a new graph arrives and disposed when it is replaced or the
    view closes. Pointer events go through the session so the frame loop is
    woken whenever they change something.
    """

    def __init__(
        self,
        model: RenderModel,
        simulation_config: SimulationConfig | None = None,
        interaction_config: InteractionConfig | None = None,
        on_frame: Callable[[Frame], None] | None = None,
        frame_interval: float = 1 / 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.model = model
        self.simulation = ForceSimulation(model, simulation_config)
        self.controller = InteractionController(
            self.simulation, interaction_config, dispatch=self._dispatch, clock=clock
        )
        self.loop = FrameLoop(self.simulation, self.controller, self._render, frame_interval)
        self.frame: Frame | None = None
        self._on_frame = on_frame
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def _dispatch(self, intent: Intent) -> None:
        self.simulation.submit(intent)
        self.loop.wake()

    def _render(self) -> None:
        if self._disposed:
            return
        config = self.simulation.config
        self.frame = render_frame(
            self.model,
            self.simulation.positions,
            config.width,
            config.height,
            self.controller.snapshot(),
        )
        if self._on_frame is not None:
            self._on_frame(self.frame)

    def render(self) -> Frame | None:
        """Render the current state immediately (None once disposed)."""
        self._render()
        return self.frame

    def start(self) -> None:
        self.loop.start()

    # Pointer input ---------------------------------------------------

    def pointer_move(self, x: float, y: float) -> None:
        self.controller.pointer_move(x, y)
        self.loop.wake()

    def pointer_down(self, x: float, y: float) -> None:
        self.controller.pointer_down(x, y)
        self.loop.wake()

    def pointer_up(self, x: float, y: float) -> None:
        self.controller.pointer_up(x, y)
        self.loop.wake()

    def pointer_leave(self) -> None:
        self.controller.pointer_leave()
        self.loop.wake()

    def wheel(self, x: float, y: float, delta: float) -> None:
        self.controller.wheel(x, y, delta)
        self.loop.wake()

    def pan_by(self, dx: float, dy: float) -> None:
        self.controller.pan_by(dx, dy)
        self.loop.wake()

    def dispose(self) -> None:
        """Stop ticking and release pointer state, synchronously."""
        if self._disposed:
            return
        self._disposed = True
        self.loop.stop()
        self.controller.dispose()
        self.simulation.stop()
        logger.debug(f"Disposed session for {len(self.model.nodes)} nodes")
