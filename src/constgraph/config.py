"""Configuration management using Pydantic Settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Analysis backend (constant/dependency extraction service)
    analysis_base_url: str = "http://localhost:8080/api"
    analysis_timeout: float = Field(
        default=30.0,
        description="Seconds to wait for a single backend response"
    )

    # Viewport
    viewport_width: float = 800.0
    viewport_height: float = 600.0

    # Force simulation
    link_distance: float = Field(
        default=100.0,
        description="Rest length of the spring between two dependent constants"
    )
    charge_strength: float = Field(
        default=-300.0,
        description="Many-body charge; negative values repel"
    )
    center_strength: float = 1.0
    collision_radius: float = Field(
        default=30.0,
        description="Minimum separation radius around every node"
    )
    collision_iterations: int = 1
    velocity_decay: float = 0.4
    alpha_min: float = 0.001
    drag_reheat_alpha: float = Field(
        default=0.3,
        description="Alpha a drag gesture reheats the simulation to"
    )
    layout_seed: int = 42
    max_settle_ticks: int = Field(
        default=400,
        description="Upper bound on synchronous ticks for server-side layouts"
    )

    # Interaction
    zoom_min: float = 0.1
    zoom_max: float = 4.0
    zoom_step: float = 1.1
    drag_threshold: float = Field(
        default=3.0,
        description="Pointer travel (px) after which a press is a drag, not a click"
    )
    focus_transition_ms: float = 750.0
    frame_rate: float = Field(
        default=60.0,
        gt=0,
        description="Frames per second the interactive view ticks at"
    )

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False


def get_test_settings() -> Settings:
    """Get test environment settings."""
    return Settings(
        analysis_base_url="http://analysis.test/api",
        analysis_timeout=5.0,
        max_settle_ticks=350,
    )


# Global settings instance
settings = Settings()
