from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from .curvature import radius_of_curvature
from .geometry import PointLike, as_points, segment_lengths
from .vehicle import PhysicsConfig
from .vmax import max_corner_speed


@dataclass
class LinePosition:
    x: float
    y: float
    index: int
    """Index of the segment start point."""
    t: float
    """Fraction along that segment."""
    radius: float = math.inf


def line_cumulative_distance(line: Sequence[PointLike]) -> np.ndarray:
    return np.concatenate([[0.0], np.cumsum(segment_lengths(line))])


def position_at_distance(line: Sequence[PointLike], dist: float) -> LinePosition:
    """Point reached after travelling ``dist`` along the line, clamped to its ends."""
    pts = as_points(line)
    if len(pts) < 2:
        return LinePosition(0.0, 0.0, 0, 0.0)
    cum = line_cumulative_distance(pts)
    if dist <= 0:
        return LinePosition(float(pts[0, 0]), float(pts[0, 1]), 0, 0.0)
    if dist >= cum[-1]:
        return LinePosition(float(pts[-1, 0]), float(pts[-1, 1]), len(pts) - 1, 0.0)

    i = int(np.searchsorted(cum, dist, side="left"))
    i = max(i, 1)
    a, b = pts[i - 1], pts[i]
    seg_len = cum[i] - cum[i - 1] or 1e-6
    t = (dist - cum[i - 1]) / seg_len
    x, y = a + (b - a) * t
    radius = radius_of_curvature(pts[max(0, i - 2)], a, b)
    return LinePosition(float(x), float(y), i - 1, float(t), radius)


class LineSimulator:
    """Steps a car along a racing line at the grip-limited speed."""

    def __init__(self, line: Sequence[PointLike], config: Optional[PhysicsConfig] = None) -> None:
        self.line = as_points(line)
        self.config = config or PhysicsConfig()
        self.total_length = float(line_cumulative_distance(self.line)[-1]) if len(self.line) > 1 else 0.0
        self.distance = 0.0

    def current(self) -> LinePosition:
        return position_at_distance(self.line, self.distance)

    def current_speed(self) -> float:
        return max_corner_speed(self.current().radius, self.config)

    def advance(self, dt: float, speed_multiplier: float = 1.0) -> LinePosition:
        if self.total_length <= 0:
            return self.current()
        self.distance += self.current_speed() * dt * speed_multiplier
        # loop back to the start
        if self.distance > self.total_length:
            self.distance %= self.total_length
        return self.current()
