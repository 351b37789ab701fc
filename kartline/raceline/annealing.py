from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np

from ..errors import InsufficientPointsError, OptimizationCancelled
from ..geometry import PointLike, as_points
from ..smoothing import smooth_line
from ..track import TrackData
from ..vehicle import PhysicsConfig
from .fitness import INVALID_SCORE, score_line
from .operators import (
    metropolis_accept,
    perturb_point,
    points_per_step,
    select_indices,
    smooth_neighbourhood,
    temperature_schedule,
)

logger = logging.getLogger(__name__)

DEFAULT_ITERATIONS = 30


@dataclass
class AnnealParams:
    t0: float = 1.0
    t_end: float = 1e-4
    min_iterations: int = 40
    max_points_per_step: int = 4
    # step = local segment length * (base_step + temperature_step * t)
    base_step: float = 0.1
    temperature_step: float = 4.0
    max_step_factor: float = 2.0
    # density of the final spline resampling
    smoothing_passes: int = 2


@dataclass
class OptimizeResult:
    line: np.ndarray
    """Best candidate after the final spline resampling."""

    raw_line: np.ndarray
    """Best candidate at the input cardinality, before resampling."""

    best_score: float
    initial_score: float
    iterations: int
    accepted: int = 0
    improved: int = 0
    duration_s: float = 0.0
    history: list = field(default_factory=list)
    current_score: float = INVALID_SCORE
    """Score of the last accepted line, which may be worse than ``best_score``."""


def optimize_line(
    initial_line: Sequence[PointLike],
    track: Optional[TrackData] = None,
    iterations: int = DEFAULT_ITERATIONS,
    *,
    config: Optional[PhysicsConfig] = None,
    params: Optional[AnnealParams] = None,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
    cancel=None,
) -> OptimizeResult:
    """Constrained simulated annealing over the interior points of a line.

    Each step perturbs a copy of the current line at a few interior points,
    relaxes their neighbourhood, scores it and applies the Metropolis test.
    The best line ever scored is kept separately and returned after one
    spline resampling pass. Endpoints never move.

    Args:
        initial_line: starting line (e.g. from the heuristic generator).
        track: bounds and reference line used for scoring.
        iterations: requested steps; at least ``params.min_iterations`` run.
        config: physics snapshot for the whole run.
        seed: seed for a fresh ``numpy`` Generator when ``rng`` is not given.
        cancel: object with ``is_set()``; checked once per step.

    Raises:
        InsufficientPointsError: fewer than two points.
        OptimizationCancelled: ``cancel`` fired mid-run.
    """
    params = params or AnnealParams()
    config = config or PhysicsConfig()
    rng = rng if rng is not None else np.random.default_rng(seed)

    current = as_points(initial_line)
    if len(current) < 2:
        raise InsufficientPointsError(f"Racing line needs at least 2 points, got {len(current)}")

    n_iter = max(params.min_iterations, int(iterations))
    temps = temperature_schedule(n_iter, params.t0, params.t_end)
    in_bounds = track.in_bounds if track is not None else None

    current_score = score_line(current, track, config)
    initial_score = current_score
    best = current.copy()
    best_score = current_score
    accepted = 0
    improved = 0
    history = []

    logger.info("Annealing %d points for %d iterations (initial score=%.4f)",
                len(current), n_iter, initial_score)
    t_start = time.perf_counter()

    n_interior = len(current) - 2
    for k in range(n_iter):
        if cancel is not None and cancel.is_set():
            raise OptimizationCancelled(f"Optimization cancelled at iteration {k}")
        if n_interior <= 0:
            break
        t = float(temps[k])

        candidate = current.copy()
        count = points_per_step(t, n_interior, params.max_points_per_step)
        moved = [
            int(i) for i in select_indices(len(candidate), count, rng)
            if perturb_point(
                candidate, int(i), t, rng,
                in_bounds=in_bounds,
                base_step=params.base_step,
                temperature_step=params.temperature_step,
                max_step_factor=params.max_step_factor,
            )
        ]
        if not moved:
            history.append(best_score)
            continue
        smooth_neighbourhood(candidate, moved)

        cand_score = score_line(candidate, track, config)
        if metropolis_accept(cand_score - current_score, t, rng):
            current = candidate
            current_score = cand_score
            accepted += 1
        if cand_score < best_score:
            best = candidate.copy()
            best_score = cand_score
            improved += 1
        history.append(best_score)

        if k % 10 == 0:
            logger.debug("iter=%d t=%.5f current=%.4f best=%.4f", k, t, current_score, best_score)

    duration = time.perf_counter() - t_start
    if best_score >= INVALID_SCORE:
        logger.warning("No valid racing line found after %d iterations", n_iter)
    logger.info("Annealing done: best=%.4f initial=%.4f accepted=%d improved=%d duration=%.2fs",
                best_score, initial_score, accepted, improved, duration)

    return OptimizeResult(
        line=smooth_line(best, params.smoothing_passes),
        raw_line=best,
        best_score=best_score,
        initial_score=initial_score,
        iterations=n_iter,
        accepted=accepted,
        improved=improved,
        duration_s=duration,
        history=history,
        current_score=current_score,
    )
