
# Expose common APIs at package level
from .curvature import curvature, curvature_vectorized, radius_of_curvature
from .errors import ConfigError, InsufficientPointsError, KartlineError, OptimizationCancelled
from .geometry import distance, interpolate, point_in_polygon, segments_intersect, track_self_intersects
from .pipeline import RacingLineResult, format_distance, format_lap_time, generate_racing_line
from .raceline import (
    calculate_lap_time,
    find_apexes,
    initial_heuristic_line,
    optimize_line,
    score_line,
    validate_racing_line,
)
from .smoothing import smooth_line
from .track import TrackData, process_track
from .vehicle import PhysicsConfig

__version__ = "0.1.0"

__all__ = [
    "curvature",
    "curvature_vectorized",
    "radius_of_curvature",
    "ConfigError",
    "InsufficientPointsError",
    "KartlineError",
    "OptimizationCancelled",
    "distance",
    "interpolate",
    "point_in_polygon",
    "segments_intersect",
    "track_self_intersects",
    "RacingLineResult",
    "format_distance",
    "format_lap_time",
    "generate_racing_line",
    "calculate_lap_time",
    "find_apexes",
    "initial_heuristic_line",
    "optimize_line",
    "score_line",
    "validate_racing_line",
    "smooth_line",
    "TrackData",
    "process_track",
    "PhysicsConfig",
]
