"""Force-directed layout simulation.

The simulation owns the position table for one graph load. Nothing else
writes to it: pointer interaction is expressed as intents (pin, unpin,
reheat) that the simulation applies at the start of its next tick.

Cooling follows the usual alpha schedule: alpha moves toward
`alpha_target` by `alpha_decay` every tick, and once it drops below
`alpha_min` the layout is settled and ticking stops until a reheat.
"""

import logging
import math
from collections import deque
from dataclasses import dataclass

import numpy as np

from constgraph.layout.config import SimulationConfig
from constgraph.layout.forces import CenterForce, CollisionForce, LinkForce, ManyBodyForce
from constgraph.layout.mapper import RenderModel

logger = logging.getLogger(__name__)

JIGGLE_SCALE = 1e-6
INITIAL_RADIUS = 10.0
INITIAL_ANGLE = math.pi * (3 - math.sqrt(5))  # Golden angle


@dataclass(frozen=True)
class PinNode:
    """Hold a node at (x, y) until unpinned."""

    node_id: str
    x: float
    y: float


@dataclass(frozen=True)
class UnpinNode:
    """Release a pinned node back to the simulation."""

    node_id: str


@dataclass(frozen=True)
class Reheat:
    """Raise alpha to at least `alpha` and/or set the target it decays to."""

    alpha: float | None = None
    target: float | None = None


Intent = PinNode | UnpinNode | Reheat


def initial_positions(n: int, cx: float, cy: float) -> np.ndarray:
    """Phyllotaxis spiral around (cx, cy): deterministic and overlap-free."""
    i = np.arange(n, dtype=float)
    radius = INITIAL_RADIUS * np.sqrt(0.5 + i)
    angle = i * INITIAL_ANGLE
    return np.stack([cx + radius * np.cos(angle), cy + radius * np.sin(angle)], axis=1)


class ForceSimulation:
    """
    Iterative layout solver for one render model.

    Forces applied each tick, in order: link springs, many-body charge,
    centering, collision. Pinned nodes take part in every force acting on
    other nodes but their own position is always their pin.
    """

    def __init__(
        self,
        model: RenderModel,
        config: SimulationConfig | None = None,
        seed: int | None = None,
    ) -> None:
        self.model = model
        self.config = config or SimulationConfig()

        n = len(model.nodes)
        self._index = {node.id: i for i, node in enumerate(model.nodes)}
        self._rng = np.random.default_rng(self.config.seed if seed is None else seed)

        cx, cy = self.config.center
        self._positions = initial_positions(n, cx, cy)
        self._velocities = np.zeros((n, 2))
        self._pins = np.full((n, 2), np.nan)

        self._alpha = self.config.alpha_start
        self._alpha_target = 0.0
        self._intents: deque[Intent] = deque()
        self._stopped = False
        self.tick_count = 0

        self._link = LinkForce(model.edges, n, self.config.link_distance)
        self._charge = ManyBodyForce(self.config.charge_strength, self.config.charge_distance_min)
        self._center = CenterForce(cx, cy, self.config.center_strength)
        self._collide = CollisionForce(
            self.config.collision_radius,
            self.config.collision_strength,
            self.config.collision_iterations,
        )

        logger.debug(f"Simulation created: {n} nodes, {len(model.edges)} edges")

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def alpha(self) -> float:
        return self._alpha

    @property
    def alpha_target(self) -> float:
        return self._alpha_target

    @property
    def settled(self) -> bool:
        """True once cooled below alpha_min (or there is nothing to lay out)."""
        return not self._index or self._alpha < self.config.alpha_min

    @property
    def stopped(self) -> bool:
        return self._stopped

    @property
    def active(self) -> bool:
        """Whether the next tick would do anything."""
        return not self._stopped and (bool(self._intents) or not self.settled)

    @property
    def positions(self) -> np.ndarray:
        """Read-only (n, 2) view of current positions, in model node order."""
        view = self._positions.view()
        view.flags.writeable = False
        return view

    def index_of(self, node_id: str) -> int | None:
        return self._index.get(node_id)

    def position_of(self, node_id: str) -> tuple[float, float]:
        """Current position of a node. Raises KeyError for unknown ids."""
        x, y = self._positions[self._index[node_id]]
        return float(x), float(y)

    def is_pinned(self, node_id: str) -> bool:
        i = self._index.get(node_id)
        return i is not None and not np.isnan(self._pins[i, 0])

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------

    def submit(self, intent: Intent) -> None:
        """Queue an intent for the next tick."""
        if self._stopped:
            return
        self._intents.append(intent)

    def _apply_intents(self) -> None:
        while self._intents:
            intent = self._intents.popleft()

            if isinstance(intent, Reheat):
                if intent.alpha is not None:
                    self._alpha = max(self._alpha, intent.alpha)
                if intent.target is not None:
                    self._alpha_target = intent.target
                continue

            i = self._index.get(intent.node_id)
            if i is None:
                logger.debug(f"Ignoring {type(intent).__name__} for unknown node {intent.node_id!r}")
                continue

            if isinstance(intent, PinNode):
                self._pins[i] = (intent.x, intent.y)
                self._positions[i] = (intent.x, intent.y)
                self._velocities[i] = 0.0
            else:
                self._pins[i] = np.nan

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def _jiggle(self, count: int) -> np.ndarray:
        return (self._rng.random(count) - 0.5) * JIGGLE_SCALE

    def tick(self, iterations: int = 1) -> bool:
        """
        Apply pending intents, then advance the layout.

        Returns:
            True if positions were stepped, False if stopped or settled
        """
        if self._stopped:
            return False
        self._apply_intents()
        if self.settled:
            return False

        pos, vel = self._positions, self._velocities
        pinned = ~np.isnan(self._pins[:, 0])
        free = ~pinned
        decay = self.config.alpha_decay

        for _ in range(iterations):
            self._alpha += (self._alpha_target - self._alpha) * decay
            alpha = self._alpha

            self._link.apply(pos, vel, alpha, self._jiggle)
            self._charge.apply(pos, vel, alpha, self._jiggle)
            self._center.apply(pos, free)
            self._collide.apply(pos, vel, self._jiggle)

            vel *= 1 - self.config.velocity_decay
            pos[free] += vel[free]
            pos[pinned] = self._pins[pinned]
            vel[pinned] = 0.0
            self.tick_count += 1

        if self.settled:
            logger.debug(f"Layout settled after {self.tick_count} ticks")
        return True

    def run_until_settled(self, max_ticks: int = 400) -> int:
        """Tick synchronously until settled or `max_ticks`; returns ticks run."""
        ticks = 0
        while ticks < max_ticks and self.tick():
            ticks += 1
        return ticks

    def stop(self) -> None:
        """Halt permanently; pending and future intents are dropped."""
        self._stopped = True
        self._intents.clear()
