from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from chaosviz.core import constants
from chaosviz.core.chaos.base import list_attractors
from chaosviz.core.chaos import systems  # noqa: F401 (registers attractors)


class ConfigError(Exception):
    """Raised when the run config is invalid."""


@dataclass(frozen=True)
class SimulationConfig:
    model: str
    ticks: int
    frame_ms: float
    speed: float
    params: Dict[str, float]
    start: Optional[Tuple[float, float, float]]
    title: Optional[str]
    max_points: Optional[int]
    step_per_ms: Optional[float]


def _require(mapping: Dict[str, Any], key: str, expected_type: Tuple[type, ...]):
    if key not in mapping:
        raise ConfigError(f"Missing required key '{key}'")
    val = mapping[key]
    if not isinstance(val, expected_type):
        raise ConfigError(f"Key '{key}' must be of type {expected_type}, got {type(val)}")
    return val


def _optional(mapping: Dict[str, Any], key: str, expected_type: Tuple[type, ...]):
    if mapping.get(key) is None:
        return None
    return _require(mapping, key, expected_type)


def parse_config(path: Path) -> SimulationConfig:
    try:
        data = yaml.safe_load(path.read_text())
    except Exception as exc:  # noqa: BLE001
        raise ConfigError(f"Failed to read YAML: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("Top-level YAML must be a mapping.")

    sim = _require(data, "simulation", (dict,))

    model = str(sim.get("model", constants.DEFAULT_MODEL))
    if model not in list_attractors():
        raise ConfigError(f"Unknown model '{model}'. Available: {list_attractors()}")

    try:
        ticks = int(sim.get("ticks", constants.DEFAULT_TICKS))
        frame_ms = float(sim.get("frame_ms", constants.DEFAULT_FRAME_MS))
        speed = float(sim.get("speed", constants.SPEED_FACTOR_DEFAULT))
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"simulation.ticks/frame_ms/speed must be numbers: {exc}") from exc
    if ticks < 1:
        raise ConfigError("simulation.ticks must be >= 1")
    if frame_ms < 0:
        raise ConfigError("simulation.frame_ms must be >= 0")

    params_raw = _optional(sim, "params", (dict,)) or {}
    try:
        params = {str(k): float(v) for k, v in params_raw.items()}
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"simulation.params values must be numbers: {exc}") from exc

    start = None
    start_raw = _optional(sim, "start", (list, tuple))
    if start_raw is not None:
        if len(start_raw) != 3:
            raise ConfigError("simulation.start must have exactly three entries (x,y,z)")
        try:
            start = (float(start_raw[0]), float(start_raw[1]), float(start_raw[2]))
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"simulation.start entries must be numbers: {exc}") from exc

    title = _optional(sim, "title", (str,))
    max_points = _optional(sim, "max_points", (int,))
    if max_points is not None and max_points < 1:
        raise ConfigError("simulation.max_points must be >= 1")
    step_per_ms = _optional(sim, "step_per_ms", (int, float))
    if step_per_ms is not None and step_per_ms <= 0:
        raise ConfigError("simulation.step_per_ms must be > 0")

    return SimulationConfig(
        model=model,
        ticks=ticks,
        frame_ms=frame_ms,
        speed=speed,
        params=params,
        start=start,
        title=title,
        max_points=max_points,
        step_per_ms=float(step_per_ms) if step_per_ms is not None else None,
    )
