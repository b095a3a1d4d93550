"""Configuration for the layout engine."""

from dataclasses import dataclass

from constgraph.config import Settings


@dataclass
class SimulationConfig:
    """Physics constants for the force simulation."""

    width: float = 800.0
    height: float = 600.0

    link_distance: float = 100.0
    charge_strength: float = -300.0  # Negative = repulsion
    charge_distance_min: float = 1.0
    center_strength: float = 1.0
    collision_radius: float = 30.0
    collision_strength: float = 1.0
    collision_iterations: int = 1

    velocity_decay: float = 0.4  # Fraction of velocity lost per tick
    alpha_start: float = 1.0
    alpha_min: float = 0.001  # Below this the simulation is settled
    alpha_decay_ticks: int = 300  # Ticks from alpha_start to alpha_min
    drag_reheat_alpha: float = 0.3

    seed: int = 42

    @property
    def alpha_decay(self) -> float:
        return 1 - self.alpha_min ** (1 / self.alpha_decay_ticks)

    @property
    def center(self) -> tuple[float, float]:
        return self.width / 2, self.height / 2

    @classmethod
    def from_settings(cls, settings: Settings) -> "SimulationConfig":
        return cls(
            width=settings.viewport_width,
            height=settings.viewport_height,
            link_distance=settings.link_distance,
            charge_strength=settings.charge_strength,
            center_strength=settings.center_strength,
            collision_radius=settings.collision_radius,
            collision_iterations=settings.collision_iterations,
            velocity_decay=settings.velocity_decay,
            alpha_min=settings.alpha_min,
            drag_reheat_alpha=settings.drag_reheat_alpha,
            seed=settings.layout_seed,
        )


@dataclass
class InteractionConfig:
    """Pointer, zoom and animation constants."""

    zoom_min: float = 0.1
    zoom_max: float = 4.0
    zoom_step: float = 1.1  # Scale factor per wheel notch
    drag_threshold: float = 3.0  # Viewport px
    focus_duration: float = 0.75  # Seconds
    node_radius: float = 10.0
    hover_radius: float = 15.0
    tooltip_offset: tuple[float, float] = (10.0, -28.0)
    drag_reheat_alpha: float = 0.3

    @classmethod
    def from_settings(cls, settings: Settings) -> "InteractionConfig":
        return cls(
            zoom_min=settings.zoom_min,
            zoom_max=settings.zoom_max,
            zoom_step=settings.zoom_step,
            drag_threshold=settings.drag_threshold,
            focus_duration=settings.focus_transition_ms / 1000,
            drag_reheat_alpha=settings.drag_reheat_alpha,
        )
