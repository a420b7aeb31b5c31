from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from chaosviz.core.draw.config import DrawConfig, hsb_draw_config
from chaosviz.core.errors import InvalidConfigurationError
from chaosviz.core.vector import Vector3

Derivative = Callable[[Vector3, Mapping[str, float]], tuple[float, float, float]]


class AttractorKind(str, Enum):
    """Builtin chaotic systems."""

    LORENTZ = "lorentz"
    MODIFIED_LORENTZ = "modified_lorentz"
    ROSSLER = "rossler"
    CHUA = "chua"
    LU_CHEN = "lu_chen"


@dataclass(frozen=True)
class AttractorSpec:
    """Registry entry: derivative plus the defaults a model is built from."""

    kind: str
    title: str
    start: Vector3
    params: Mapping[str, float]
    derivative: Derivative
    shortcut: Optional[str] = None


@dataclass(frozen=True, eq=False)
class AttractorModel:
    """
    One chaotic system with fixed parameters.

    Models are values tagged by kind; behavior comes from the registry entry.
    next_point performs a single explicit Euler step.
    """

    kind: str
    title: str
    start: Vector3
    params: Mapping[str, float]
    draw_config: DrawConfig = field(default_factory=hsb_draw_config)

    @property
    def spec(self) -> AttractorSpec:
        return get_attractor_spec(self.kind)

    def derivative(self, v: Vector3) -> Vector3:
        dx, dy, dz = self.spec.derivative(v, self.params)
        return Vector3(dx, dy, dz)

    def next_point(self, previous: Vector3, dt: float) -> Vector3:
        if dt == 0:
            return previous
        dx, dy, dz = self.spec.derivative(previous, self.params)
        return Vector3(previous.x + dx * dt, previous.y + dy * dt, previous.z + dz * dt)


ATTRACTOR_REGISTRY: Dict[str, AttractorSpec] = {}


def _kind_key(kind: str | AttractorKind) -> str:
    return kind.value if isinstance(kind, AttractorKind) else str(kind)


def register_attractor(
    kind: str | AttractorKind,
    *,
    title: str,
    start: Sequence[float] | Vector3,
    params: Mapping[str, float],
    derivative: Derivative,
    shortcut: Optional[str] = None,
) -> AttractorSpec:
    key = _kind_key(kind)
    start_vec = start if isinstance(start, Vector3) else Vector3.of(start)
    spec = AttractorSpec(
        kind=key,
        title=title,
        start=start_vec,
        params=MappingProxyType({k: float(v) for k, v in params.items()}),
        derivative=derivative,
        shortcut=shortcut.upper() if shortcut else None,
    )
    ATTRACTOR_REGISTRY[key] = spec
    return spec


def get_attractor_spec(kind: str | AttractorKind) -> AttractorSpec:
    key = _kind_key(kind)
    if key not in ATTRACTOR_REGISTRY:
        raise ValueError(f"Unknown attractor '{key}'. Available: {list_attractors()}")
    return ATTRACTOR_REGISTRY[key]


def list_attractors() -> List[str]:
    return sorted(ATTRACTOR_REGISTRY.keys())


def attractor_for_shortcut(key: str) -> Optional[str]:
    """Model kind bound to a keyboard shortcut, if any."""
    wanted = key.upper()
    for spec in ATTRACTOR_REGISTRY.values():
        if spec.shortcut == wanted:
            return spec.kind
    return None


def create_attractor(
    kind: str | AttractorKind,
    *,
    title: Optional[str] = None,
    start: Sequence[float] | Vector3 | None = None,
    params: Optional[Mapping[str, float]] = None,
    draw_config: Optional[DrawConfig] = None,
) -> AttractorModel:
    """
    Build a model from its registry defaults.

    params may override any subset of the default constants; unknown names
    are rejected.
    """
    spec = get_attractor_spec(kind)
    merged = dict(spec.params)
    if params:
        unknown = sorted(set(params) - set(spec.params))
        if unknown:
            raise InvalidConfigurationError(
                f"Unknown parameter(s) {unknown} for '{spec.kind}'. Expected: {sorted(spec.params)}"
            )
        merged.update({k: float(v) for k, v in params.items()})

    if start is None:
        start_vec = spec.start
    elif isinstance(start, Vector3):
        start_vec = start
    else:
        if len(start) != 3:
            raise InvalidConfigurationError(f"start must have 3 components, got {len(start)}")
        start_vec = Vector3.of(start)

    return AttractorModel(
        kind=spec.kind,
        title=title or spec.title,
        start=start_vec,
        params=MappingProxyType(merged),
        draw_config=draw_config or hsb_draw_config(),
    )
