from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

import typer

from chaosviz.core.chaos.base import AttractorModel
from chaosviz.core.draw.config import DrawConfig
from chaosviz.core.scalar import is_int
from chaosviz.core.trajectory.buffer import BoundingBox
from chaosviz.core.vector import Vector3


def _timestamp_utc() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _abs_path(path: Path | None) -> str:
    if path is None:
        return "n/a"
    try:
        return str(path.resolve())
    except Exception:  # noqa: BLE001
        return str(path)


def _fmt_point(p: Vector3) -> str:
    return f"({p.x:.6f},{p.y:.6f},{p.z:.6f})"


def format_speed_factor(speed_factor: float) -> str:
    if is_int(speed_factor):
        return f"Speed: {int(speed_factor)}x"
    return f"Speed: {speed_factor:.1f}x"


def print_run_header(
    command: str,
    *,
    model: AttractorModel,
    ticks: int | None = None,
    frame_ms: float | None = None,
    speed: float | None = None,
) -> None:
    typer.echo(f"[run] command={command} ts_utc={_timestamp_utc()}")
    typer.echo(f"[model] kind={model.kind} title={model.title!r}")
    if ticks is not None or frame_ms is not None:
        ticks_text = ticks if ticks is not None else "n/a"
        frame_text = f"{frame_ms:.4f}" if frame_ms is not None else "n/a"
        typer.echo(f"[clock] ticks={ticks_text} frame_ms={frame_text}")
    if speed is not None:
        typer.echo(f"[status] {format_speed_factor(speed)}")


def print_model_details(model: AttractorModel) -> None:
    params = " ".join(f"{k}={v:g}" for k, v in model.params.items())
    typer.echo(f"[model] kind={model.kind} title={model.title!r} shortcut={model.spec.shortcut or 'n/a'}")
    typer.echo(f"[model] params {params}")
    typer.echo(f"[model] start={_fmt_point(model.start)}")
    print_draw_config(model.draw_config)


def print_draw_config(cfg: DrawConfig) -> None:
    fill = cfg.fill_color.to_hex() if cfg.fill_color else "none"
    typer.echo(
        f"[draw] step_per_ms={cfg.step_per_ms} max_points={cfg.max_points} "
        f"scale={cfg.draw_scale} stroke_weight={cfg.stroke_weight}"
    )
    typer.echo(
        f"[draw] bg={cfg.background_color.to_hex()} fg={cfg.foreground_color.to_hex()} "
        f"accent={cfg.accent_color.to_hex()} accent2={cfg.accent2_color.to_hex()} fill={fill}"
    )


def print_point(label: str, p: Vector3) -> None:
    typer.echo(f"[point] {label}={_fmt_point(p)}")


def print_bounding_box(box: BoundingBox) -> None:
    if box.empty:
        typer.echo("[bbox] empty")
        return
    typer.echo(
        f"[bbox] x={box.x_min:.6f}..{box.x_max:.6f} "
        f"y={box.y_min:.6f}..{box.y_max:.6f} "
        f"z={box.z_min:.6f}..{box.z_max:.6f}"
    )


def print_io_write(path: Path) -> None:
    typer.echo(f"[io] Writing output: {_abs_path(path)}")


def print_model_lines(lines: Iterable[str]) -> None:
    for line in lines:
        typer.echo(f"[models] {line}")


def print_done(summary: str) -> None:
    typer.echo(f"[done] {summary}")
