from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import numpy as np

from .errors import InsufficientPointsError
from .geometry import PointLike, as_points, to_dicts
from .raceline.annealing import DEFAULT_ITERATIONS, AnnealParams, OptimizeResult
from .raceline.fitness import ValidationReport, calculate_lap_time, validate_racing_line
from .raceline.heuristic import initial_heuristic_line
from .tasks import BackgroundOptimizer, OptimizeRequest, run_optimization
from .track import DEFAULT_TRACK_WIDTH, MIN_CENTERLINE_POINTS, TrackData, process_track
from .vehicle import PhysicsConfig
from .vmax import speed_kmh

logger = logging.getLogger(__name__)

PHASE_ANALYZING = "analyzing"
PHASE_INITIAL = "initial"
PHASE_OPTIMIZING = "optimizing"
PHASE_SMOOTHING = "smoothing"
PHASE_VALIDATING = "validating"
PHASE_DONE = "done"


@dataclass
class RacingLineResult:
    line: np.ndarray
    lap_time: float
    validation: ValidationReport
    track: TrackData
    initial_line: np.ndarray
    optimization: OptimizeResult

    def to_dict(self) -> dict:
        return {
            "racingLine": to_dicts(self.line),
            "lapTime": self.lap_time if math.isfinite(self.lap_time) else None,
            "lapTimeText": format_lap_time(self.lap_time),
            "trackLength": self.track.length,
            "minCornerSpeedKmh": slowest_corner_kmh(self.track),
            "validation": self.validation.to_dict(),
            "score": self.optimization.best_score,
            "initialScore": self.optimization.initial_score,
        }


def generate_racing_line(
    centerline: Sequence[PointLike],
    config: Optional[PhysicsConfig] = None,
    *,
    iterations: int = DEFAULT_ITERATIONS,
    seed: Optional[int] = None,
    track_width: float = DEFAULT_TRACK_WIDTH,
    boundaries: Optional[Sequence[Sequence[PointLike]]] = None,
    limits: Optional[Sequence[PointLike]] = None,
    reference: Optional[Sequence[PointLike]] = None,
    params: Optional[AnnealParams] = None,
    optimizer: Optional[BackgroundOptimizer] = None,
    on_phase: Optional[Callable[[str], None]] = None,
) -> RacingLineResult:
    """Centerline in, optimized and smoothed racing line out.

    The physics config is captured once; later edits by the caller do not
    reach the running optimization. Passing ``optimizer`` runs the search on
    its worker thread with a synchronous fallback.

    Raises:
        InsufficientPointsError: fewer than three centerline points.
    """
    def phase(label: str) -> None:
        logger.debug("phase: %s", label)
        if on_phase is not None:
            on_phase(label)

    pts = as_points(centerline)
    if len(pts) < MIN_CENTERLINE_POINTS:
        raise InsufficientPointsError(
            f"Draw at least {MIN_CENTERLINE_POINTS} points to generate a racing line (got {len(pts)})"
        )
    config = config or PhysicsConfig()

    phase(PHASE_ANALYZING)
    track = process_track(
        pts, config,
        boundaries=boundaries,
        limits=limits,
        reference=reference,
        track_width=track_width,
    )

    logger.info("Track analysed: %.1f m, %d segments, slowest corner %.1f km/h",
                track.length, len(track.segments), slowest_corner_kmh(track))

    phase(PHASE_INITIAL)
    initial = initial_heuristic_line(track.centerline, track.half_width)

    phase(PHASE_OPTIMIZING)
    request = OptimizeRequest(
        initial_line=initial,
        track=track,
        iterations=iterations,
        config=config,
        params=params or AnnealParams(),
        seed=seed,
    )
    result = run_optimization(request, optimizer)

    # spline resampling already ran as the last step of optimize_line
    phase(PHASE_SMOOTHING)
    line = result.line

    phase(PHASE_VALIDATING)
    validation = validate_racing_line(line, track)
    if not validation.valid:
        logger.warning("Racing line validation warnings: %s", validation.errors)

    lap_time = calculate_lap_time(line, track, config)
    phase(PHASE_DONE)
    logger.info("Racing line generated: %d points, lap time %s", len(line), format_lap_time(lap_time))

    return RacingLineResult(
        line=line,
        lap_time=lap_time,
        validation=validation,
        track=track,
        initial_line=initial,
        optimization=result,
    )


def slowest_corner_kmh(track: TrackData) -> Optional[float]:
    """Lowest grip-limited segment speed on the centerline, in km/h."""
    if not track.segments:
        return None
    return speed_kmh(min(seg.max_speed for seg in track.segments))


def format_lap_time(seconds: float) -> str:
    if seconds is None or not math.isfinite(seconds):
        return "--"
    return f"{seconds:.2f}s"


def format_distance(meters: float, units: str = "metric") -> str:
    if units == "metric":
        return f"{meters:.1f} m"
    return f"{meters * 3.28084:.1f} ft"
