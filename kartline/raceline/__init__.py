from .annealing import DEFAULT_ITERATIONS, AnnealParams, OptimizeResult, optimize_line
from .fitness import (
    INVALID_SCORE,
    ValidationReport,
    calculate_lap_time,
    deviation_penalty,
    score_breakdown,
    score_line,
    smoothness_penalty,
    validate_racing_line,
)
from .heuristic import APEX_RADIUS_THRESHOLD, find_apexes, initial_heuristic_line

__all__ = [
    "DEFAULT_ITERATIONS",
    "AnnealParams",
    "OptimizeResult",
    "optimize_line",
    "INVALID_SCORE",
    "ValidationReport",
    "calculate_lap_time",
    "deviation_penalty",
    "score_breakdown",
    "score_line",
    "smoothness_penalty",
    "validate_racing_line",
    "APEX_RADIUS_THRESHOLD",
    "find_apexes",
    "initial_heuristic_line",
]
