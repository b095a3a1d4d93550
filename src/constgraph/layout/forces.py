"""Forces for the layout simulation.

Each force nudges node velocities (or, for centering, positions) once per
tick. They follow the d3-force model: link springs with degree-based
strength and bias, many-body charge, rigid centering and velocity-based
collision resolution. Pairwise forces are computed exactly with numpy,
which is fast enough for graphs of a few hundred constants.

Positions and velocities are (n, 2) float arrays owned by the simulation.
"""

from collections.abc import Callable

import numpy as np

from constgraph.layout.mapper import RenderEdge

Jiggle = Callable[[int], np.ndarray]


def _separate_coincident(dx: np.ndarray, dy: np.ndarray, mask: np.ndarray, jiggle: Jiggle) -> None:
    """Replace zero offsets under `mask` with tiny random ones, in place."""
    zero = mask & (dx == 0) & (dy == 0)
    count = int(zero.sum())
    if count:
        dx[zero] = jiggle(count)
        dy[zero] = jiggle(count)


class LinkForce:
    """Spring between the endpoints of every edge.

    Each spring is at rest at `distance`. Its strength is the inverse of the
    smaller endpoint degree so hubs are not torn apart, and the correction
    is split between the endpoints in proportion to their degree.
    """

    def __init__(self, edges: tuple[RenderEdge, ...], n: int, distance: float) -> None:
        self.distance = distance
        self.source = np.array([e.source_index for e in edges], dtype=np.intp)
        self.target = np.array([e.target_index for e in edges], dtype=np.intp)

        degree = np.bincount(self.source, minlength=n) + np.bincount(self.target, minlength=n)
        if len(edges):
            ds, dt = degree[self.source], degree[self.target]
            self.strength = 1.0 / np.minimum(ds, dt)
            self.bias = ds / (ds + dt)
        else:
            self.strength = np.zeros(0)
            self.bias = np.zeros(0)

    def apply(self, pos: np.ndarray, vel: np.ndarray, alpha: float, jiggle: Jiggle) -> None:
        if not len(self.source):
            return
        s, t = self.source, self.target
        d = (pos[t] + vel[t]) - (pos[s] + vel[s])
        dx, dy = d[:, 0], d[:, 1]
        _separate_coincident(dx, dy, np.ones(len(s), dtype=bool), jiggle)

        length = np.hypot(dx, dy)
        k = (length - self.distance) / length * alpha * self.strength
        corr = np.stack([dx * k, dy * k], axis=1)

        np.add.at(vel, t, -corr * self.bias[:, None])
        np.add.at(vel, s, corr * (1 - self.bias)[:, None])


class ManyBodyForce:
    """Pairwise charge between every two nodes, inverse to squared distance."""

    def __init__(self, strength: float, distance_min: float = 1.0) -> None:
        self.strength = strength
        self.distance_min2 = distance_min * distance_min

    def apply(self, pos: np.ndarray, vel: np.ndarray, alpha: float, jiggle: Jiggle) -> None:
        n = len(pos)
        if n < 2:
            return
        # dx[i, j] points from node i to node j
        dx = pos[None, :, 0] - pos[:, None, 0]
        dy = pos[None, :, 1] - pos[:, None, 1]
        off_diagonal = ~np.eye(n, dtype=bool)
        _separate_coincident(dx, dy, off_diagonal, jiggle)

        l2 = dx * dx + dy * dy
        l2 = np.where(l2 < self.distance_min2, np.sqrt(self.distance_min2 * l2), l2)
        np.fill_diagonal(l2, 1.0)
        w = self.strength * alpha / l2
        np.fill_diagonal(w, 0.0)

        vel[:, 0] += (dx * w).sum(axis=1)
        vel[:, 1] += (dy * w).sum(axis=1)


class CenterForce:
    """Translates free nodes so the centroid moves toward the centre."""

    def __init__(self, x: float, y: float, strength: float = 1.0) -> None:
        self.x = x
        self.y = y
        self.strength = strength

    def apply(self, pos: np.ndarray, free: np.ndarray) -> None:
        if not len(pos) or not free.any():
            return
        cx, cy = pos.mean(axis=0)
        shift = np.array([(cx - self.x) * self.strength, (cy - self.y) * self.strength])
        pos[free] -= shift


class CollisionForce:
    """Keeps node circles of `radius` from overlapping.

    Uses positions predicted from the current velocities and moves each
    overlapping pair apart by the overlap, half to each node. Not scaled by
    alpha: overlap is resolved even once the layout has cooled.
    """

    def __init__(self, radius: float, strength: float = 1.0, iterations: int = 1) -> None:
        self.radius = radius
        self.strength = strength
        self.iterations = iterations

    def apply(self, pos: np.ndarray, vel: np.ndarray, jiggle: Jiggle) -> None:
        n = len(pos)
        if n < 2 or self.radius <= 0:
            return
        r = 2 * self.radius
        off_diagonal = ~np.eye(n, dtype=bool)

        for _ in range(self.iterations):
            predicted = pos + vel
            # dx[i, j] points from node j to node i
            dx = predicted[:, None, 0] - predicted[None, :, 0]
            dy = predicted[:, None, 1] - predicted[None, :, 1]
            _separate_coincident(dx, dy, off_diagonal, jiggle)

            length = np.hypot(dx, dy)
            overlap = off_diagonal & (length < r)
            if not overlap.any():
                continue
            safe = np.where(overlap, length, 1.0)
            k = np.where(overlap, (r - safe) / safe * self.strength * 0.5, 0.0)

            vel[:, 0] += (dx * k).sum(axis=1)
            vel[:, 1] += (dy * k).sum(axis=1)
