from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Optional, Sequence

from .config import AppConfig, load_config, setup_logging
from .errors import KartlineError
from .io import load_points, save_track_record, write_points_csv
from .pipeline import format_distance, format_lap_time, generate_racing_line
from .tasks import BackgroundOptimizer

logger = logging.getLogger("kartline.cli")

CONFIG_ENV = "KARTLINE_CONFIG"


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="kartline", description="Generate a karting racing line from a centerline")
    ap.add_argument("--points", required=True, help="Centerline points (.csv x,y rows or .json)")
    ap.add_argument("--iterations", type=int, default=None, help="Optimizer iterations")
    ap.add_argument("--seed", type=int, default=None, help="Random seed for reproducible runs")
    ap.add_argument("--grip", type=float, default=None, help="Grip coefficient (clamped to 0.6..1.5)")
    ap.add_argument("--track-width", type=float, default=None, help="Track width in meters")
    ap.add_argument("--config", default=None, help=f"YAML config (defaults to ${CONFIG_ENV})")
    ap.add_argument("--output", default=None, help="Write the racing line (.csv points or .json track record)")
    ap.add_argument("--background", action="store_true", help="Run the optimizer on a worker thread")
    ap.add_argument("--imperial", action="store_true", help="Print distances in feet")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap


def resolve_config(args: argparse.Namespace) -> AppConfig:
    path = args.config or os.environ.get(CONFIG_ENV)
    cfg = load_config(path) if path else AppConfig()
    if args.grip is not None:
        cfg.physics = cfg.physics.with_grip(args.grip)
    if args.iterations is not None:
        cfg.iterations = args.iterations
    if args.seed is not None:
        cfg.seed = args.seed
    if args.track_width is not None:
        cfg.track_width = args.track_width
    return cfg


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        cfg = resolve_config(args)
        points = load_points(args.points)
        if args.background:
            with BackgroundOptimizer() as optimizer:
                result = generate_racing_line(
                    points, cfg.physics,
                    iterations=cfg.iterations,
                    seed=cfg.seed,
                    track_width=cfg.track_width,
                    params=cfg.optimizer,
                    optimizer=optimizer,
                )
        else:
            result = generate_racing_line(
                points, cfg.physics,
                iterations=cfg.iterations,
                seed=cfg.seed,
                track_width=cfg.track_width,
                params=cfg.optimizer,
            )
    except (FileNotFoundError, ValueError, KartlineError) as e:
        logger.error("%s", e)
        return 1

    units = "imperial" if args.imperial else "metric"
    print(f"Lap time:     {format_lap_time(result.lap_time)}")
    print(f"Track length: {format_distance(result.track.length, units)}")
    print(f"Line points:  {len(result.line)}")
    if result.validation.valid:
        print("Validation:   OK")
    else:
        print("Validation:   FAILED")
        for err in result.validation.errors:
            print(f"  - {err}")

    if args.output:
        out = Path(args.output)
        if out.suffix.lower() == ".csv":
            write_points_csv(str(out), result.line)
        else:
            save_track_record(str(out), points, result.line, lapTime=result.to_dict()["lapTime"])
        print(f"Wrote: {out.resolve()}")
    return 0
