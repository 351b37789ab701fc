from __future__ import annotations

import math
from typing import List, Sequence

import numpy as np

from ..curvature import radius_of_curvature
from ..geometry import PointLike, as_points
from ..track import DEFAULT_TRACK_WIDTH

APEX_RADIUS_THRESHOLD = 50.0


def initial_heuristic_line(centerline: Sequence[PointLike], half_width: float = DEFAULT_TRACK_WIDTH / 2.0) -> np.ndarray:
    """Outside-apex-outside starting line.

    Every point is pushed toward the outside of its local turn by
    ``sin(|turn| / 2) * half_width`` along the normal of the central
    tangent. Straights and the two endpoints get no offset. The result has
    the same number of points and may leave the track; the optimizer pulls
    it back.
    """
    pts = as_points(centerline)
    n = len(pts)
    if n < 3:
        return pts

    line = pts.copy()
    for i in range(n):
        p1 = pts[max(0, i - 1)]
        p2 = pts[i]
        p3 = pts[min(n - 1, i + 1)]

        d_in = p2 - p1
        d_out = p3 - p2
        cross = d_in[0] * d_out[1] - d_in[1] * d_out[0]
        if cross == 0:
            continue
        # signed deflection: > 0 turning left
        turn = math.atan2(cross, d_in[0] * d_out[0] + d_in[1] * d_out[1])
        offset = math.sin(abs(turn) / 2.0) * half_width

        tangent = p3 - p1
        length = math.hypot(tangent[0], tangent[1])
        if length == 0:
            continue
        left = np.array([-tangent[1], tangent[0]]) / length
        side = -1.0 if cross > 0 else 1.0  # outside of the corner
        line[i] = p2 + left * offset * side

    return line


def find_apexes(line: Sequence[PointLike], threshold: float = APEX_RADIUS_THRESHOLD) -> List[int]:
    """Interior indices where the local radius is tighter than ``threshold``."""
    pts = as_points(line)
    return [
        i for i in range(1, len(pts) - 1)
        if radius_of_curvature(pts[i - 1], pts[i], pts[i + 1]) < threshold
    ]
