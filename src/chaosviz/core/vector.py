from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

import numpy as np

from chaosviz.core.errors import InvalidConfigurationError
from chaosviz.core.scalar import lerp as _lerp


@dataclass(frozen=True)
class Vector3:
    """
    Immutable 3-component float vector.

    Every operation returns a new vector; there are no in-place variants.
    2D helpers (rotate_2d, heading_2d, from_angle) act on x/y and keep z.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def of(cls, values: Sequence[float]) -> "Vector3":
        """Build from a 2- or 3-item sequence (z defaults to 0)."""
        if len(values) == 2:
            return cls(float(values[0]), float(values[1]), 0.0)
        if len(values) == 3:
            return cls(float(values[0]), float(values[1]), float(values[2]))
        raise InvalidConfigurationError(f"Vector needs 2 or 3 components, got {len(values)}")

    @classmethod
    def from_angle(cls, angle: float) -> "Vector3":
        """Unit vector in the xy plane pointing at angle (radians)."""
        return cls(math.cos(angle), math.sin(angle), 0.0)

    @classmethod
    def random_2d(cls, rng: Optional[np.random.Generator] = None) -> "Vector3":
        rng = rng or np.random.default_rng()
        return cls.from_angle(float(rng.uniform(0.0, 2.0 * math.pi)))

    @classmethod
    def random_3d(cls, rng: Optional[np.random.Generator] = None) -> "Vector3":
        """Unit vector uniformly distributed on the sphere."""
        rng = rng or np.random.default_rng()
        angle = float(rng.uniform(0.0, 2.0 * math.pi))
        vz = float(rng.uniform(-1.0, 1.0))
        r = math.sqrt(1.0 - vz * vz)
        return cls(r * math.cos(angle), r * math.sin(angle), vz)

    # -------------------------
    # Arithmetic
    # -------------------------

    def add(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def sub(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def scale(self, factor: float) -> "Vector3":
        return Vector3(self.x * factor, self.y * factor, self.z * factor)

    def div(self, divisor: float) -> "Vector3":
        return Vector3(self.x / divisor, self.y / divisor, self.z / divisor)

    def dot(self, other: "Vector3") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: "Vector3") -> "Vector3":
        return Vector3(
            self.y * other.z - other.y * self.z,
            self.z * other.x - other.z * self.x,
            self.x * other.y - other.x * self.y,
        )

    __add__ = add
    __sub__ = sub
    __truediv__ = div

    def __mul__(self, factor: float) -> "Vector3":
        return self.scale(factor)

    __rmul__ = __mul__

    def __neg__(self) -> "Vector3":
        return Vector3(-self.x, -self.y, -self.z)

    # -------------------------
    # Magnitude and direction
    # -------------------------

    def magnitude_squared(self) -> float:
        return self.x * self.x + self.y * self.y + self.z * self.z

    def magnitude(self) -> float:
        return math.sqrt(self.magnitude_squared())

    def is_zero(self) -> bool:
        return self.x == 0 and self.y == 0 and self.z == 0

    def normalize(self) -> "Vector3":
        """Unit vector in the same direction; zero and unit vectors come back as-is."""
        mag_sq = self.magnitude_squared()
        if mag_sq == 0 or mag_sq == 1:
            return self
        return self.div(math.sqrt(mag_sq))

    def with_magnitude(self, length: float) -> "Vector3":
        return self.normalize().scale(length)

    def limit(self, max_magnitude: float) -> "Vector3":
        """Scale down to max_magnitude if longer, otherwise unchanged."""
        if self.magnitude_squared() > max_magnitude * max_magnitude:
            return self.with_magnitude(max_magnitude)
        return self

    def heading_2d(self) -> float:
        return math.atan2(self.y, self.x)

    def rotate_2d(self, theta: float) -> "Vector3":
        """Rotate around the z axis by theta radians."""
        cos_t = math.cos(theta)
        sin_t = math.sin(theta)
        return Vector3(self.x * cos_t - self.y * sin_t, self.x * sin_t + self.y * cos_t, self.z)

    def lerp(self, to: "Vector3", amt: float) -> "Vector3":
        return Vector3(_lerp(self.x, to.x, amt), _lerp(self.y, to.y, amt), _lerp(self.z, to.z, amt))

    def distance_squared(self, other: "Vector3") -> float:
        return self.sub(other).magnitude_squared()

    def distance(self, other: "Vector3") -> float:
        return math.sqrt(self.distance_squared(other))

    def angle_between(self, other: "Vector3") -> float:
        return angle_between(self, other)

    # -------------------------
    # Conversion
    # -------------------------

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def as_tuple(self) -> tuple[float, float, float]:
        return self.x, self.y, self.z

    def as_array(self) -> np.ndarray:
        return np.array(self.as_tuple(), dtype=np.float64)

    def __str__(self) -> str:
        return f"[ {self.x}, {self.y}, {self.z} ]"


ZERO = Vector3()
PLUS_I = Vector3(1.0, 0.0, 0.0)
PLUS_J = Vector3(0.0, 1.0, 0.0)
PLUS_K = Vector3(0.0, 0.0, 1.0)


def distance(a: Vector3, b: Vector3) -> float:
    return a.distance(b)


def angle_between(a: Vector3, b: Vector3) -> float:
    """
    Angle in radians between two vectors.

    Zero vectors give 0. The cosine is clamped explicitly since rounding can
    push it just outside [-1, 1].
    """
    if a.is_zero() or b.is_zero():
        return 0.0
    amt = a.dot(b) / math.sqrt(a.magnitude_squared() * b.magnitude_squared())
    if amt >= 1:
        return 0.0
    if amt <= -1:
        return math.pi
    return math.acos(amt)
