from __future__ import annotations

from typing import Mapping, Optional, Sequence

from chaosviz.core import constants
from chaosviz.core.chaos.base import AttractorModel, create_attractor
from chaosviz.core.chaos import systems  # noqa: F401 (registers attractors)
from chaosviz.core.draw.config import DrawConfig, hsb_draw_config
from chaosviz.core.simulation.driver import SimulationDriver
from chaosviz.utils.logging import get_logger, set_model_context

logger = get_logger(__name__)


def build_model(
    kind: str,
    params: Optional[Mapping[str, float]] = None,
    start: Optional[Sequence[float]] = None,
    title: Optional[str] = None,
    max_points: Optional[int] = None,
    step_per_ms: Optional[float] = None,
) -> AttractorModel:
    overrides = {}
    if max_points is not None:
        overrides["max_points"] = max_points
    if step_per_ms is not None:
        overrides["step_per_ms"] = step_per_ms
    draw_config: DrawConfig = hsb_draw_config(**overrides)
    logger.debug("Building model kind=%s params=%s start=%s draw=%s", kind, params, start, overrides)
    return create_attractor(kind, title=title, start=start, params=params, draw_config=draw_config)


def run_simulation(
    model: AttractorModel,
    ticks: int,
    frame_ms: float = constants.DEFAULT_FRAME_MS,
    speed: float = constants.SPEED_FACTOR_DEFAULT,
    start_ms: float = 0.0,
) -> SimulationDriver:
    """
    Drive a model for a number of ticks on a synthetic clock.

    Tick i happens at start_ms + i * frame_ms, as a renderer running at a
    fixed frame rate would call it.
    """
    if ticks < 0:
        raise ValueError("ticks must be >= 0")
    if frame_ms < 0:
        raise ValueError("frame_ms must be >= 0")
    set_model_context(model.kind)
    driver = SimulationDriver(model, speed_factor=speed)
    logger.debug(
        "Simulating %s ticks=%d frame_ms=%s speed=%s", model.title, ticks, frame_ms, driver.speed_factor
    )
    for i in range(ticks):
        driver.tick(start_ms + i * frame_ms)
    last = driver.buffer.last()
    if last is not None:
        logger.debug("Final point x=%.6f y=%.6f z=%.6f", last.x, last.y, last.z)
    return driver
