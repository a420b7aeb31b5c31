from __future__ import annotations

import math
from typing import Mapping

from chaosviz.core.errors import ModelDomainError
from chaosviz.core.vector import Vector3

from .base import AttractorKind, AttractorModel, create_attractor, register_attractor


def lorentz(v: Vector3, p: Mapping[str, float]) -> tuple[float, float, float]:
    a, b, c = p["a"], p["b"], p["c"]
    dx = a * (v.y - v.x)
    dy = v.x * (b - v.z) - v.y
    dz = v.x * v.y - c * v.z
    return dx, dy, dz


def modified_lorentz(v: Vector3, p: Mapping[str, float]) -> tuple[float, float, float]:
    """
    Modified Lorentz flow.

    Undefined on the z axis (x = y = 0) where the planar magnitude vanishes;
    raises ModelDomainError there instead of producing inf/nan.
    """
    a, b, c = p["a"], p["b"], p["c"]
    x, y, z = v.x, v.y, v.z
    x2_min_y2 = x * x - y * y
    x2_plus_y2 = x * x + y * y
    mag2d = math.sqrt(x2_plus_y2)
    if mag2d == 0:
        raise ModelDomainError(f"modified Lorentz derivative undefined at x=y=0 (z={z})")

    dx = (-(1 + a) * x + a - c + z * y) / 3 + ((1 - a) * x2_min_y2 + 2 * (a + c - z) * x * y) / (3 * mag2d)
    dy = ((c - a - z) * x - (a + 1) * y) / 3 + (2 * (a - 1) * x * y + (a + c - z) * x2_min_y2) / (3 * mag2d)
    dz = (3 * x * x - y * y) * (y / 2) - b * z
    return dx, dy, dz


def rossler(v: Vector3, p: Mapping[str, float]) -> tuple[float, float, float]:
    a, b, c = p["a"], p["b"], p["c"]
    dx = -(v.y + v.z)
    dy = v.x + a * v.y
    dz = b + v.z * (v.x - c)
    return dx, dy, dz


def chua(v: Vector3, p: Mapping[str, float]) -> tuple[float, float, float]:
    # c is carried for completeness; this form of the circuit does not use it
    a, b, d = p["a"], p["b"], p["d"]
    h = -b * math.sin(math.pi * v.x / (2 * a) + d)
    dx = p["alpha"] * (v.y - h)
    dy = v.x - v.y + v.z
    dz = -p["beta"] * v.y
    return dx, dy, dz


def lu_chen(v: Vector3, p: Mapping[str, float]) -> tuple[float, float, float]:
    a, b, c, u = p["a"], p["b"], p["c"], p["u"]
    dx = a * (v.y - v.x)
    dy = v.x * (1 - v.z) + c * v.y + u
    dz = v.x * v.y - b * v.z
    return dx, dy, dz


# Registry
register_attractor(
    AttractorKind.LORENTZ,
    title="Lorentz Attractor",
    start=(0.01, 0.0, 0.0),
    params={"a": 10.0, "b": 28.0, "c": 8.0 / 3.0},
    derivative=lorentz,
    shortcut="L",
)
register_attractor(
    AttractorKind.MODIFIED_LORENTZ,
    title="Modified Lorentz Attractor",
    start=(-8.0, 4.0, 10.0),
    params={"a": 10.0, "b": 8.0 / 3.0, "c": 137.0 / 5.0},
    derivative=modified_lorentz,
    shortcut="M",
)
register_attractor(
    AttractorKind.ROSSLER,
    title="Rossler Attractor",
    start=(1.0, 2.0, 3.0),
    params={"a": 0.2, "b": 0.2, "c": 5.7},
    derivative=rossler,
    shortcut="R",
)
register_attractor(
    AttractorKind.CHUA,
    title="Chua Attractor",
    start=(1.0, 1.0, 0.0),
    params={"a": 1.3, "b": 0.11, "c": 7.0, "d": 0.0, "alpha": 10.82, "beta": 14.286},
    derivative=chua,
    shortcut="C",
)
register_attractor(
    AttractorKind.LU_CHEN,
    title="Lu Chen Attractor",
    start=(0.1, 0.3, -0.6),
    params={"a": 36.0, "b": 3.0, "c": 20.0, "u": -15.15},
    derivative=lu_chen,
    shortcut="H",
)


def lorentz_attractor(**kwargs) -> AttractorModel:
    return create_attractor(AttractorKind.LORENTZ, **kwargs)


def modified_lorentz_attractor(**kwargs) -> AttractorModel:
    return create_attractor(AttractorKind.MODIFIED_LORENTZ, **kwargs)


def rossler_attractor(**kwargs) -> AttractorModel:
    return create_attractor(AttractorKind.ROSSLER, **kwargs)


def chua_attractor(**kwargs) -> AttractorModel:
    return create_attractor(AttractorKind.CHUA, **kwargs)


def lu_chen_attractor(**kwargs) -> AttractorModel:
    return create_attractor(AttractorKind.LU_CHEN, **kwargs)
