"""
Defaults for the interactive K-means viewer.

All coordinates are in the normalized unit square, so sizes below are
fractions of the canvas rather than pixels.
"""
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

__all__ = [
    "VisualizerConfig",
    "DEFAULT_PALETTE",
    "BACKGROUND_COLOR",
]

# red, green, blue, cyan, magenta, yellow; white is the fallback
DEFAULT_PALETTE: Tuple[str, ...] = (
    "#ff0000",
    "#00ff00",
    "#0000ff",
    "#00ffff",
    "#ff00ff",
    "#ffff00",
    "#ffffff",
)

BACKGROUND_COLOR = (25 / 255, 27 / 255, 29 / 255)


@dataclass(frozen=True)
class VisualizerConfig:
    point_count: int = 8000
    cluster_count: int = 3
    batch_step: int = 128          # points added/removed by +/-
    click_count: int = 16          # points seeded per left click
    click_half_width: float = 0.02
    erase_radius: float = 0.03
    figsize: Tuple[float, float] = (9.0, 9.0)
    dpi: int = 100
    point_size: float = 8.0
    centroid_size: float = 200.0
    palette: Tuple[str, ...] = field(default=DEFAULT_PALETTE)
    random_state: Optional[int] = None

    def __post_init__(self):
        for name in ("point_count", "cluster_count", "batch_step", "click_count"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")
        if self.click_half_width < 0:
            raise ValueError("click_half_width must be >= 0")
        if self.erase_radius < 0:
            raise ValueError("erase_radius must be >= 0")
        if not self.palette:
            raise ValueError("palette must contain at least one color")

    def with_overrides(self, **overrides) -> "VisualizerConfig":
        """Copy with the non-None overrides applied (validated again)."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)
