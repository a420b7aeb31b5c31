from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional

import numpy as np
from matplotlib.colors import hsv_to_rgb

from chaosviz.core import constants
from chaosviz.core.errors import InvalidConfigurationError
from chaosviz.core.vector import Vector3


@dataclass(frozen=True)
class Color:
    """8-bit RGB color."""

    r: int
    g: int
    b: int

    @classmethod
    def from_unit_rgb(cls, rgb) -> "Color":
        r, g, b = (int(float(c) * 255 + 0.5) for c in rgb)
        return cls(r, g, b)

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        text = value.lstrip("#")
        if len(text) != 6:
            raise InvalidConfigurationError(f"Color must be '#rrggbb', got {value!r}")
        return cls(int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16))

    def to_rgb(self) -> tuple[float, float, float]:
        """Floats in [0, 1], the form matplotlib accepts."""
        return self.r / 255, self.g / 255, self.b / 255

    def to_hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


BLACK = Color(0, 0, 0)
WHITE = Color(255, 255, 255)
ACCENT = Color.from_hex("#4fc3f7")
ACCENT2 = Color.from_hex("#ffb74d")

ColorForPoint = Callable[[Vector3, int, int], Color]


def hue_for_index(index: int, count: int) -> float:
    """index / count wrapped into [0, 1)."""
    if count <= 0:
        return 0.0
    return (index / count) % 1.0


def hsb_color_for_point(point: Vector3, index: int, count: int) -> Color:
    """Full saturation/brightness color whose hue walks along the trajectory."""
    hue = hue_for_index(index, count)
    return Color.from_unit_rgb(hsv_to_rgb((hue, 1.0, 1.0)))


@dataclass(frozen=True)
class DrawConfig:
    """
    Rendering hints for one attractor model.

    step_per_ms converts wall-clock milliseconds into model time; max_points
    bounds the trajectory history. Nothing here draws.
    """

    step_per_ms: float = constants.DEFAULT_STEP_PER_MS
    max_points: int = constants.DEFAULT_MAX_POINTS
    draw_scale: float = constants.DEFAULT_DRAW_SCALE
    stroke_weight: float = constants.DEFAULT_STROKE_WEIGHT
    background_color: Color = BLACK
    foreground_color: Color = WHITE
    accent_color: Color = ACCENT
    accent2_color: Color = ACCENT2
    fill_color: Optional[Color] = None
    color_for_point: ColorForPoint = field(default=hsb_color_for_point, compare=False)

    def __post_init__(self) -> None:
        if not self.step_per_ms > 0:
            raise InvalidConfigurationError(f"step_per_ms must be > 0, got {self.step_per_ms}")
        if isinstance(self.max_points, bool) or int(self.max_points) != self.max_points or self.max_points < 1:
            raise InvalidConfigurationError(f"max_points must be an integer >= 1, got {self.max_points}")
        if self.draw_scale <= 0:
            raise InvalidConfigurationError(f"draw_scale must be > 0, got {self.draw_scale}")
        if self.stroke_weight < 0:
            raise InvalidConfigurationError(f"stroke_weight must be >= 0, got {self.stroke_weight}")

    def colors_for(self, points: List[Vector3]) -> List[Color]:
        count = len(points)
        return [self.color_for_point(p, i, count) for i, p in enumerate(points)]

    def rgb_array(self, points: np.ndarray) -> np.ndarray:
        """(n, 3) unit-RGB array for an (n, 3) point array, ready for matplotlib."""
        count = len(points)
        if count == 0:
            return np.empty((0, 3), dtype=np.float64)
        if self.color_for_point is hsb_color_for_point:
            hues = (np.arange(count, dtype=np.float64) / count) % 1.0
            hsv = np.stack([hues, np.ones(count), np.ones(count)], axis=1)
            return hsv_to_rgb(hsv)
        colors = [self.color_for_point(Vector3.of(row), i, count) for i, row in enumerate(points)]
        return np.array([c.to_rgb() for c in colors], dtype=np.float64)


def hsb_draw_config(**overrides) -> DrawConfig:
    """Standard configuration shared by the builtin models."""
    return DrawConfig(**overrides)
