from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Optional

import typer

from chaosviz.cli import ui
from chaosviz.core import constants
from chaosviz.core.chaos.base import get_attractor_spec, list_attractors
from chaosviz.core.chaos import systems  # noqa: F401 (registers attractors)
from chaosviz.core.errors import ChaosVizError
from chaosviz.core.simulation.driver import SimulationDriver
from chaosviz.core.vector import Vector3
from chaosviz.io.config import ConfigError, SimulationConfig, parse_config
from chaosviz.orchestrator.pipeline import build_model, run_simulation
from chaosviz.utils.logging import get_logger, resolve_log_level, set_command_context, setup_logging

app = typer.Typer(help=f"{constants.APP_NAME} attractor engine CLI")

logger = get_logger(__name__)


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at INFO level"),
    debug: bool = typer.Option(False, "--debug", help="Log at DEBUG level"),
):
    setup_logging(resolve_log_level(verbose, debug))
    if ctx.invoked_subcommand:
        set_command_context(ctx.invoked_subcommand)


def _resolve_config(
    config: Path | None,
    model: str | None,
    ticks: int | None,
    frame_ms: float | None,
    speed: float | None,
) -> SimulationConfig:
    """Config file values, overridden by any flag given on the command line."""
    if config is not None:
        try:
            cfg = parse_config(config)
        except ConfigError as exc:
            typer.secho(f"Config error: {exc}", fg=typer.colors.RED)
            raise typer.Exit(code=1)
    else:
        cfg = SimulationConfig(
            model=constants.DEFAULT_MODEL,
            ticks=constants.DEFAULT_TICKS,
            frame_ms=constants.DEFAULT_FRAME_MS,
            speed=constants.SPEED_FACTOR_DEFAULT,
            params={},
            start=None,
            title=None,
            max_points=None,
            step_per_ms=None,
        )

    if model is not None and model not in list_attractors():
        typer.secho(f"Unknown model '{model}'. Available: {list_attractors()}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    if ticks is not None and ticks < 1:
        typer.secho("ticks must be >= 1", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    if frame_ms is not None and frame_ms < 0:
        typer.secho("frame-ms must be >= 0", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    return SimulationConfig(
        model=model if model is not None else cfg.model,
        ticks=ticks if ticks is not None else cfg.ticks,
        frame_ms=frame_ms if frame_ms is not None else cfg.frame_ms,
        speed=speed if speed is not None else cfg.speed,
        params=cfg.params if model is None or model == cfg.model else {},
        start=cfg.start if model is None or model == cfg.model else None,
        title=cfg.title if model is None or model == cfg.model else None,
        max_points=cfg.max_points,
        step_per_ms=cfg.step_per_ms,
    )


def _simulate(cfg: SimulationConfig) -> SimulationDriver:
    try:
        model = build_model(
            cfg.model,
            params=cfg.params,
            start=cfg.start,
            title=cfg.title,
            max_points=cfg.max_points,
            step_per_ms=cfg.step_per_ms,
        )
        return run_simulation(model, cfg.ticks, frame_ms=cfg.frame_ms, speed=cfg.speed)
    except (ChaosVizError, ValueError) as exc:
        typer.secho(f"Simulation failed: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc


@app.command()
def models():
    """List the registered attractor models."""
    lines = []
    for kind in list_attractors():
        spec = get_attractor_spec(kind)
        lines.append(f"{kind} [{spec.shortcut or '-'}] {spec.title}")
    ui.print_model_lines(lines)


@app.command()
def show(model: str = typer.Option(constants.DEFAULT_MODEL, "--model", "-m", help="Model key")):
    """Show a model's constants, start point and draw configuration."""
    if model not in list_attractors():
        typer.secho(f"Unknown model '{model}'. Available: {list_attractors()}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    ui.print_model_details(build_model(model))


@app.command()
def simulate(
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Model key"),
    ticks: Optional[int] = typer.Option(None, "--ticks", "-n", help="Number of ticks"),
    frame_ms: Optional[float] = typer.Option(None, "--frame-ms", "-f", help="Milliseconds between ticks"),
    speed: Optional[float] = typer.Option(None, "--speed", "-s", help="Speed factor (clamped to 0.1..10)"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", exists=True, readable=True, help="YAML run config"),
    json_summary: bool = typer.Option(False, "--json", help="Print summary JSON to stdout"),
):
    """Run a model headless on a synthetic frame clock."""
    cfg = _resolve_config(config, model, ticks, frame_ms, speed)
    driver = _simulate(cfg)
    last = driver.buffer.last()
    box = driver.bounding_box()

    if json_summary:
        summary = {
            "model": driver.active_model.kind,
            "title": driver.active_model.title,
            "ticks": cfg.ticks,
            "frame_ms": cfg.frame_ms,
            "speed": driver.speed_factor,
            "points": len(driver.buffer),
            "last": list(last.as_tuple()) if last else None,
            "bbox": None if box.empty else box.as_dict(),
        }
        typer.echo(json.dumps(summary))
        return

    ui.print_run_header(
        "simulate", model=driver.active_model, ticks=cfg.ticks, frame_ms=cfg.frame_ms, speed=driver.speed_factor
    )
    if last is not None:
        ui.print_point("last", last)
    ui.print_bounding_box(box)
    ui.print_done(f"points={len(driver.buffer)} capacity={driver.buffer.capacity}")


@app.command()
def plot(
    out: Path = typer.Option(..., "--out", "-o", help="PNG output path"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Model key"),
    ticks: Optional[int] = typer.Option(None, "--ticks", "-n", help="Number of ticks"),
    frame_ms: Optional[float] = typer.Option(None, "--frame-ms", "-f", help="Milliseconds between ticks"),
    speed: Optional[float] = typer.Option(None, "--speed", "-s", help="Speed factor (clamped to 0.1..10)"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", exists=True, readable=True, help="YAML run config"),
):
    """Simulate, then render the trajectory window to a PNG preview."""
    from chaosviz.render.preview import render_trajectory

    cfg = _resolve_config(config, model, ticks, frame_ms, speed)
    driver = _simulate(cfg)
    ui.print_run_header(
        "plot", model=driver.active_model, ticks=cfg.ticks, frame_ms=cfg.frame_ms, speed=driver.speed_factor
    )
    ui.print_io_write(out)
    try:
        render_trajectory(driver, out)
    except Exception as exc:  # noqa: BLE001
        typer.secho(f"Failed to write outputs: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    ui.print_done(f"points={len(driver.buffer)} png={out}")


@app.command()
def selftest():
    """
    Run the built-in Lorentz golden scenario (no filesystem writes).
    """
    driver = SimulationDriver(build_model("lorentz"))
    first = driver.tick(0.0)
    second = driver.tick(1000.0)

    # start + f(start) * 0.4, with f(0.01, 0, 0) = (-0.1, 0.28, 0)
    expected = (Vector3(0.01, 0.0, 0.0), Vector3(-0.03, 0.112, 0.0))
    ok = first == expected[0] and all(
        math.isclose(got, want, abs_tol=1e-9) for got, want in zip(second, expected[1])
    )

    if ok:
        typer.secho("Selftest passed (Golden Vector).", fg=typer.colors.GREEN)
    else:
        logger.error("Selftest mismatch first=%s second=%s", first, second)
        typer.secho("Selftest FAILED.", fg=typer.colors.RED)
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
