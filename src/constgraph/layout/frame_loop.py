"""Cooperative per-frame driver for a simulation and its controller.

One asyncio task steps the simulation once per frame while there is work
to do (an unsettled layout, pending intents, a focus animation, or a
controller change to redraw) and then exits. `wake()` starts it again.
`stop()` takes effect immediately: the disposed flag is checked before
every step, so a cancelled task can never touch a torn-down surface.
"""

import asyncio
import logging
from collections.abc import Callable

from constgraph.layout.interaction import InteractionController
from constgraph.layout.simulation import ForceSimulation

logger = logging.getLogger(__name__)


class FrameLoop:
    """Steps `simulation`, advances `controller` and calls `on_frame` when anything changed."""

    def __init__(
        self,
        simulation: ForceSimulation,
        controller: InteractionController | None = None,
        on_frame: Callable[[], None] | None = None,
        frame_interval: float = 1 / 60,
    ) -> None:
        self.simulation = simulation
        self.controller = controller
        self.on_frame = on_frame
        self.frame_interval = frame_interval
        self.frames = 0

        self._task: asyncio.Task | None = None
        self._stopped = False
        self._seen_version = -1

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def stopped(self) -> bool:
        return self._stopped

    @property
    def has_work(self) -> bool:
        if self._stopped:
            return False
        if self.simulation.active:
            return True
        if self.controller is None:
            return False
        return self.controller.transitioning or self.controller.version != self._seen_version

    def step(self) -> bool:
        """Run one frame synchronously; returns whether anything was redrawn."""
        if self._stopped:
            return False

        changed = False
        if self.controller is not None and self.controller.advance():
            changed = True
        if self.simulation.active:
            self.simulation.tick()
            changed = True
        if self.controller is not None and self.controller.version != self._seen_version:
            self._seen_version = self.controller.version
            changed = True

        if changed and not self._stopped:
            self.frames += 1
            if self.on_frame is not None:
                self.on_frame()
        return changed

    async def _run(self) -> None:
        while self.has_work:
            self.step()
            await asyncio.sleep(self.frame_interval)
        logger.debug(f"Frame loop idle after {self.frames} frames")

    def start(self) -> None:
        """Begin ticking on the running event loop."""
        if self._stopped or self.running:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop: the owner drives frames through step()
            logger.debug("No running event loop, frames must be stepped manually")
            return
        self._task = loop.create_task(self._run())

    def wake(self) -> None:
        """Resume ticking after an idle period (reheat, hover change, ...)."""
        if not self.running and self.has_work:
            self.start()

    def stop(self) -> None:
        """Stop immediately and for good."""
        self._stopped = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
