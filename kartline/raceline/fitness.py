from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np

from ..curvature import curvature_vectorized
from ..geometry import PointLike, as_points, track_self_intersects
from ..track import TrackData
from ..vehicle import PhysicsConfig
from ..vmax import apply_speed_profile, build_segments, estimate_lap_time

INVALID_SCORE = 1e9
SMOOTHNESS_WEIGHT = 0.15
DEVIATION_WEIGHT = 0.001
# radii below this are treated as this tight when squaring curvature
MIN_RADIUS = 1e-3
# a lap needs at least one (prev, cur, next) triple
MIN_LAP_POINTS = 3


def calculate_lap_time(line: Sequence[PointLike], track: Optional[TrackData] = None,
                       config: Optional[PhysicsConfig] = None) -> float:
    """Lap time along ``line`` under the speed profile; inf when undefined."""
    pts = as_points(line)
    if len(pts) < MIN_LAP_POINTS:
        return math.inf
    config = config or PhysicsConfig()
    segments = apply_speed_profile(build_segments(pts, config), config)
    if any(seg.speed <= 0 and seg.length > 0 for seg in segments):
        return math.inf
    return estimate_lap_time(segments)


def smoothness_penalty(line: Sequence[PointLike]) -> float:
    """Sum of squared curvature over interior points."""
    pts = as_points(line)
    if len(pts) < 3:
        return 0.0
    kappa = np.minimum(curvature_vectorized(pts), 1.0 / MIN_RADIUS)
    return float(np.sum(kappa * kappa))


def deviation_penalty(line: Sequence[PointLike], track: Optional[TrackData]) -> float:
    """Mean squared distance from each line point to the reference line."""
    if track is None:
        return 0.0
    tree = track.reference_tree()
    pts = as_points(line)
    if tree is None or len(pts) == 0:
        return 0.0
    dist, _ = tree.query(pts)
    return float(np.mean(dist * dist))


def score_breakdown(line: Sequence[PointLike], track: Optional[TrackData] = None,
                    config: Optional[PhysicsConfig] = None) -> Dict[str, float]:
    pts = as_points(line)
    if len(pts) < 2 or track_self_intersects(pts):
        return {"score": INVALID_SCORE, "valid": False}
    if track is not None and track.out_of_bounds_indices(pts):
        return {"score": INVALID_SCORE, "valid": False}

    lap_time = calculate_lap_time(pts, track, config)
    if not math.isfinite(lap_time):
        return {"score": INVALID_SCORE, "valid": False}
    smooth = smoothness_penalty(pts)
    deviation = deviation_penalty(pts, track)
    return {
        "score": lap_time + SMOOTHNESS_WEIGHT * smooth + DEVIATION_WEIGHT * deviation,
        "valid": True,
        "lap_time": lap_time,
        "smoothness": smooth,
        "deviation": deviation,
    }


def score_line(line: Sequence[PointLike], track: Optional[TrackData] = None,
               config: Optional[PhysicsConfig] = None) -> float:
    """Lower is better; INVALID_SCORE for crossing or out-of-bounds lines."""
    return score_breakdown(line, track, config)["score"]


@dataclass
class ValidationReport:
    valid: bool
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"valid": self.valid, "errors": list(self.errors)}


def validate_racing_line(line: Sequence[PointLike], track: Optional[TrackData] = None) -> ValidationReport:
    """Same hard checks as :func:`score_line`, reported one by one."""
    pts = as_points(line)
    if len(pts) < 2:
        return ValidationReport(valid=False, errors=["Racing line too short"])

    errors: List[str] = []
    if track is not None:
        for i in track.out_of_bounds_indices(pts):
            errors.append(f"Point {i} outside track bounds")
    if track_self_intersects(pts):
        errors.append("Racing line self-intersects")
    return ValidationReport(valid=not errors, errors=errors)
