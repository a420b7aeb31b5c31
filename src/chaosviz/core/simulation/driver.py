from __future__ import annotations

import math
import time
from enum import Enum
from typing import Callable, List, Optional

from chaosviz.core import constants
from chaosviz.core.chaos.base import AttractorModel, create_attractor
from chaosviz.core.chaos import systems  # noqa: F401 (registers attractors)
from chaosviz.core.draw.config import DrawConfig
from chaosviz.core.scalar import constrain
from chaosviz.core.trajectory.buffer import BoundingBox, TrajectoryBuffer
from chaosviz.core.vector import Vector3
from chaosviz.utils.logging import get_logger, set_model_context

logger = get_logger(__name__)

SpeedListener = Callable[[float], None]
ModelListener = Callable[[Optional[AttractorModel], AttractorModel], None]


class DriverState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


def now_ms() -> float:
    return time.perf_counter() * 1000.0


def _clamp_speed(value: float) -> Optional[float]:
    """Clamp a speed factor into range; None for NaN."""
    value = float(value)
    if math.isnan(value):
        return None
    return constrain(value, constants.SPEED_FACTOR_MIN, constants.SPEED_FACTOR_MAX)


class SimulationDriver:
    """
    Advances the active attractor by one point per tick.

    Idle (no tick recorded yet) emits the model's start point. Running
    integrates from the last point with dt = step_per_ms * elapsed_ms * speed.
    Not thread-safe; confine to one thread or guard externally.
    """

    def __init__(
        self,
        model: Optional[AttractorModel] = None,
        speed_factor: float = constants.SPEED_FACTOR_DEFAULT,
        on_speed_factor_changed: Optional[SpeedListener] = None,
        on_model_changed: Optional[ModelListener] = None,
    ):
        self._model = model or create_attractor(constants.DEFAULT_MODEL)
        self._buffer = TrajectoryBuffer(self._model.draw_config.max_points)
        self._last_tick_ms: Optional[float] = None
        self._speed_factor = _clamp_speed(speed_factor)
        if self._speed_factor is None:
            self._speed_factor = constants.SPEED_FACTOR_DEFAULT
        self._speed_listeners: List[SpeedListener] = []
        self._model_listeners: List[ModelListener] = []
        if on_speed_factor_changed is not None:
            self._speed_listeners.append(on_speed_factor_changed)
        if on_model_changed is not None:
            self._model_listeners.append(on_model_changed)

    # -------------------------
    # State
    # -------------------------

    @property
    def active_model(self) -> AttractorModel:
        return self._model

    @property
    def speed_factor(self) -> float:
        return self._speed_factor

    @property
    def last_tick_time(self) -> Optional[float]:
        return self._last_tick_ms

    @property
    def state(self) -> DriverState:
        return DriverState.IDLE if self._last_tick_ms is None else DriverState.RUNNING

    @property
    def buffer(self) -> TrajectoryBuffer:
        return self._buffer

    def points(self) -> List[Vector3]:
        return self._buffer.points()

    def bounding_box(self) -> BoundingBox:
        return self._buffer.bounding_box()

    def draw_config(self) -> DrawConfig:
        return self._model.draw_config

    # -------------------------
    # Ticking
    # -------------------------

    def tick(self, now: Optional[float] = None) -> Vector3:
        """
        Produce, store and return the next point; now is in milliseconds.

        A non-finite now counts as zero elapsed time and is not recorded.
        """
        if now is None:
            now = now_ms()
        finite = math.isfinite(now)
        if not finite:
            logger.debug("Ignoring non-finite tick time %s", now)
        last = self._buffer.last()
        if self._last_tick_ms is None or last is None:
            point = self._model.start
            self._buffer.reset()
            self._buffer.push(point)
        else:
            elapsed_ms = max(now - self._last_tick_ms, 0.0) if finite else 0.0
            dt = self._model.draw_config.step_per_ms * elapsed_ms * self._speed_factor
            point = self._model.next_point(last, dt)
            self._buffer.push(point)
        if finite:
            self._last_tick_ms = now
        return point

    def reset(self) -> None:
        """Restart the active model from its start point."""
        logger.debug("Resetting %s", self._model.title)
        self._restart()

    def _restart(self) -> None:
        capacity = self._model.draw_config.max_points
        if self._buffer.capacity != capacity:
            self._buffer = TrajectoryBuffer(capacity)
        else:
            self._buffer.reset()
        self._buffer.push(self._model.start)
        self._last_tick_ms = None

    # -------------------------
    # Controls
    # -------------------------

    def set_active_model(self, model: AttractorModel) -> bool:
        """Swap the model; returns False when it is already active."""
        if model is self._model:
            return False
        previous = self._model
        self._model = model
        self._restart()
        set_model_context(model.kind)
        logger.debug("Active model %s -> %s", previous.title, model.title)
        for listener in self._model_listeners:
            listener(previous, model)
        return True

    def set_speed_factor(self, value: float) -> bool:
        """Clamp into [SPEED_FACTOR_MIN, SPEED_FACTOR_MAX]; returns False if unchanged or NaN."""
        clamped = _clamp_speed(value)
        if clamped is None:
            logger.debug("Ignoring NaN speed factor")
            return False
        if clamped != value:
            logger.debug("Speed factor %s clamped to %s", value, clamped)
        if clamped == self._speed_factor:
            return False
        self._speed_factor = clamped
        for listener in self._speed_listeners:
            listener(clamped)
        return True

    def change_speed_factor_by_unit(self, increase: bool) -> bool:
        step = constants.SPEED_FACTOR_UNIT if increase else -constants.SPEED_FACTOR_UNIT
        return self.set_speed_factor(self._speed_factor + step)

    def add_speed_listener(self, listener: SpeedListener) -> None:
        self._speed_listeners.append(listener)

    def add_model_listener(self, listener: ModelListener) -> None:
        self._model_listeners.append(listener)
