import math
from typing import Callable, Iterable, Optional

import numpy as np


def temperature_schedule(iterations: int, t0: float = 1.0, t_end: float = 1e-4) -> np.ndarray:
    """Geometric cooling t(k) = t0 * (t_end / t0) ** (k / (iterations - 1))."""
    if iterations <= 1:
        return np.array([t0], dtype=float)
    k = np.arange(iterations, dtype=float)
    return t0 * (t_end / t0) ** (k / (iterations - 1))


def points_per_step(temperature: float, n_interior: int, max_points: int = 4) -> int:
    """1 point when cold, up to ``max_points`` when hot."""
    count = 1 + int(round((max_points - 1) * min(max(temperature, 0.0), 1.0)))
    return max(1, min(count, max_points, n_interior))


def select_indices(n_points: int, count: int, rng: np.random.Generator) -> np.ndarray:
    """Distinct interior indices (endpoints are never chosen)."""
    interior = n_points - 2
    if interior <= 0:
        return np.zeros(0, dtype=int)
    chosen = rng.choice(interior, size=min(count, interior), replace=False)
    return np.sort(chosen + 1)


def local_segment_length(line: np.ndarray, idx: int) -> float:
    d_prev = float(np.hypot(*(line[idx] - line[idx - 1])))
    d_next = float(np.hypot(*(line[idx + 1] - line[idx])))
    return 0.5 * (d_prev + d_next)


def perturb_point(
    line: np.ndarray,
    idx: int,
    temperature: float,
    rng: np.random.Generator,
    in_bounds: Optional[Callable[[np.ndarray], bool]] = None,
    base_step: float = 0.1,
    temperature_step: float = 4.0,
    max_step_factor: float = 2.0,
) -> bool:
    """Move ``line[idx]`` in place along its tangent and normal.

    The step scales with the local segment length and the temperature. The
    move is skipped (returns False) when it lands out of bounds or travels
    farther than ``max_step_factor`` local segment lengths.
    """
    seg = local_segment_length(line, idx)
    if seg <= 0:
        return False
    tangent = line[idx + 1] - line[idx - 1]
    norm = float(np.hypot(*tangent))
    if norm == 0:
        return False
    tangent = tangent / norm
    normal = np.array([-tangent[1], tangent[0]])

    magnitude = seg * (base_step + temperature_step * temperature)
    u, w = rng.uniform(-1.0, 1.0, size=2)
    step = tangent * (u * magnitude) + normal * (w * magnitude)
    if float(np.hypot(*step)) > max_step_factor * seg:
        return False
    candidate = line[idx] + step
    if in_bounds is not None and not in_bounds(candidate):
        return False
    line[idx] = candidate
    return True


def smooth_neighbourhood(line: np.ndarray, indices: Iterable[int]) -> np.ndarray:
    """1-2-1 weighted average around the given indices, endpoints untouched."""
    n = len(line)
    targets = sorted({j for i in indices for j in (i - 1, i, i + 1) if 0 < j < n - 1})
    if not targets:
        return line
    src = line.copy()
    for j in targets:
        line[j] = 0.25 * src[j - 1] + 0.5 * src[j] + 0.25 * src[j + 1]
    return line


def metropolis_accept(delta: float, temperature: float, rng: np.random.Generator) -> bool:
    """Always take improvements, take a worse move with prob exp(-delta / t)."""
    if delta < 0:
        return True
    return rng.random() < math.exp(-delta / max(temperature, 1e-9))
