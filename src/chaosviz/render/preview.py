from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
from mpl_toolkits.mplot3d.art3d import Line3DCollection

from chaosviz.core.simulation.driver import SimulationDriver
from chaosviz.utils.logging import get_logger

logger = get_logger(__name__)


def _padded_limits(low: float, high: float) -> tuple[float, float]:
    if high - low == 0:
        return low - 1.0, high + 1.0
    pad = (high - low) * 0.05
    return low - pad, high + pad


def render_trajectory(driver: SimulationDriver, out_path: Path, dpi: int = 150) -> Path:
    """
    Paint the driver's current window to a PNG.

    Reads only what a live renderer would: points, bounding box and the
    active model's draw configuration.
    """
    cfg = driver.draw_config()
    points = driver.buffer.as_array()
    box = driver.bounding_box()
    colors = cfg.rgb_array(points)

    fig = plt.figure(figsize=(8, 8), facecolor=cfg.background_color.to_rgb())
    ax = fig.add_subplot(projection="3d")
    ax.set_facecolor(cfg.background_color.to_rgb())
    ax.set_axis_off()

    if len(points) > 1:
        segments = np.stack([points[:-1], points[1:]], axis=1)
        lines = Line3DCollection(segments, colors=colors[:-1], linewidths=cfg.stroke_weight * 2)
        ax.add_collection3d(lines)
    elif len(points) == 1:
        ax.scatter(points[:, 0], points[:, 1], points[:, 2], c=colors, s=4)

    if not box.empty:
        ax.set_xlim(*_padded_limits(box.x_min, box.x_max))
        ax.set_ylim(*_padded_limits(box.y_min, box.y_max))
        ax.set_zlim(*_padded_limits(box.z_min, box.z_max))

    ax.set_title(driver.active_model.title, color=cfg.accent_color.to_rgb())

    out_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(out_path, dpi=dpi, bbox_inches="tight", facecolor=fig.get_facecolor())
    plt.close(fig)
    logger.debug("Rendered %d points to %s", len(points), out_path)
    return out_path
