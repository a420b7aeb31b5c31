from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional

import numpy as np

from chaosviz.core import constants
from chaosviz.core.errors import InvalidConfigurationError
from chaosviz.core.vector import Vector3


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box; all zeros and empty until a point is observed."""

    x_min: float = 0.0
    x_max: float = 0.0
    y_min: float = 0.0
    y_max: float = 0.0
    z_min: float = 0.0
    z_max: float = 0.0
    empty: bool = True

    @classmethod
    def around(cls, p: Vector3) -> "BoundingBox":
        return cls(p.x, p.x, p.y, p.y, p.z, p.z, empty=False)

    def expand(self, p: Vector3) -> "BoundingBox":
        if self.empty:
            return BoundingBox.around(p)
        return BoundingBox(
            min(self.x_min, p.x),
            max(self.x_max, p.x),
            min(self.y_min, p.y),
            max(self.y_max, p.y),
            min(self.z_min, p.z),
            max(self.z_max, p.z),
            empty=False,
        )

    @property
    def min(self) -> Vector3:
        return Vector3(self.x_min, self.y_min, self.z_min)

    @property
    def max(self) -> Vector3:
        return Vector3(self.x_max, self.y_max, self.z_max)

    @property
    def center(self) -> Vector3:
        return self.min.lerp(self.max, 0.5)

    @property
    def size(self) -> Vector3:
        return self.max - self.min

    def contains(self, p: Vector3) -> bool:
        if self.empty:
            return False
        return (
            self.x_min <= p.x <= self.x_max
            and self.y_min <= p.y <= self.y_max
            and self.z_min <= p.z <= self.z_max
        )

    def as_dict(self) -> dict:
        return {
            "x_min": self.x_min,
            "x_max": self.x_max,
            "y_min": self.y_min,
            "y_max": self.y_max,
            "z_min": self.z_min,
            "z_max": self.z_max,
        }


class TrajectoryBuffer:
    """
    Fixed-capacity sliding window of points over a preallocated ring.

    Pushing past capacity evicts the oldest point. The bounding box only ever
    grows: it covers every point pushed since the last reset, including
    evicted ones, so the framing stays stable as old extremes leave.
    """

    def __init__(self, max_points: int = constants.DEFAULT_MAX_POINTS):
        if isinstance(max_points, bool) or int(max_points) != max_points or max_points < 1:
            raise InvalidConfigurationError(f"max_points must be an integer >= 1, got {max_points}")
        self._capacity = int(max_points)
        self._data = np.zeros((self._capacity, 3), dtype=np.float64)
        self._points: List[Optional[Vector3]] = [None] * self._capacity
        self._head = 0  # index of the oldest point
        self._count = 0
        self._box = BoundingBox()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return self._count

    def push(self, point: Vector3) -> None:
        if self._count < self._capacity:
            slot = (self._head + self._count) % self._capacity
            self._count += 1
        else:
            slot = self._head
            self._head = (self._head + 1) % self._capacity
        self._points[slot] = point
        self._data[slot] = (point.x, point.y, point.z)
        self._box = self._box.expand(point)

    def _slots(self) -> Iterator[int]:
        for i in range(self._count):
            yield (self._head + i) % self._capacity

    def __iter__(self) -> Iterator[Vector3]:
        for slot in self._slots():
            yield self._points[slot]

    def points(self) -> List[Vector3]:
        """Points oldest first."""
        return list(self)

    def last(self) -> Optional[Vector3]:
        if self._count == 0:
            return None
        return self._points[(self._head + self._count - 1) % self._capacity]

    def as_array(self) -> np.ndarray:
        """Ordered (n, 3) copy of the window."""
        end = self._head + self._count
        if end <= self._capacity:
            return self._data[self._head:end].copy()
        return np.concatenate([self._data[self._head:], self._data[: end - self._capacity]])

    def bounding_box(self) -> BoundingBox:
        return self._box

    def reset(self) -> None:
        self._points = [None] * self._capacity
        self._head = 0
        self._count = 0
        self._box = BoundingBox()
