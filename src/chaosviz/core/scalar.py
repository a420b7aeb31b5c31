from __future__ import annotations

import math


def constrain(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def lerp(start: float, stop: float, amt: float) -> float:
    return start + (stop - start) * amt


def is_int(value: float) -> bool:
    return math.isfinite(value) and float(value).is_integer()
