from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from ..curvature import radius_of_curvature
from ..geometry import PointLike, as_points
from ..vehicle import PhysicsConfig


@dataclass
class Segment:
    """One piece of path between two consecutive points.

    ``radius`` is taken from the (previous, current, next) triple around the
    segment start; ``max_speed`` is the grip limit for that radius and
    ``speed`` the value assigned by :func:`compute_speed_profile`.
    """

    start: tuple
    end: tuple
    length: float
    radius: float
    max_speed: float
    speed: float = 0.0

    @property
    def curvature(self) -> float:
        return 0.0 if math.isinf(self.radius) else 1.0 / self.radius


def max_corner_speed(radius: float, config: PhysicsConfig) -> float:
    """Grip-limited speed v = sqrt(mu * g * r), capped at the top speed."""
    if radius <= 0 or math.isinf(radius):
        return config.max_speed
    v = math.sqrt(config.grip * config.gravity * radius)
    return min(config.max_speed, v)


def build_segments(points: Sequence[PointLike], config: PhysicsConfig) -> List[Segment]:
    """Split a polyline into segments with radius and grip-limited speed."""
    pts = as_points(points)
    n = len(pts)
    segments: List[Segment] = []
    for i in range(n - 1):
        prev = pts[max(i - 1, 0)]
        cur = pts[i]
        nxt = pts[i + 1]
        length = math.dist(cur, nxt)
        radius = radius_of_curvature(prev, cur, nxt)
        v_max = max_corner_speed(radius, config)
        segments.append(Segment(
            start=(float(cur[0]), float(cur[1])),
            end=(float(nxt[0]), float(nxt[1])),
            length=length,
            radius=radius,
            max_speed=v_max,
            speed=v_max,
        ))
    return segments


def compute_speed_profile(segments: Sequence[Segment], config: PhysicsConfig) -> np.ndarray:
    """Per-segment speeds respecting acceleration, grip and braking limits.

    Forward pass from rest (acceleration limited), then a backward pass so
    every segment can still brake to the next one. The order matters: the
    backward pass must see forward-capped speeds.
    """
    n = len(segments)
    v = np.zeros(n, dtype=float)
    if n == 0:
        return v

    a_acc = config.max_acceleration
    a_brk = config.max_braking

    # Forward pass (acceleration-limited)
    prev = 0.0
    for i, seg in enumerate(segments):
        v_acc = math.sqrt(prev * prev + 2.0 * a_acc * seg.length)
        v[i] = min(seg.max_speed, v_acc)
        prev = v[i]

    # Backward pass (braking-limited)
    for i in range(n - 2, -1, -1):
        v_next = v[i + 1]
        v_brake = math.sqrt(v_next * v_next + 2.0 * a_brk * segments[i].length)
        v[i] = min(v[i], v_brake)

    return v


def apply_speed_profile(segments: Sequence[Segment], config: PhysicsConfig) -> List[Segment]:
    speeds = compute_speed_profile(segments, config)
    for seg, speed in zip(segments, speeds):
        seg.speed = float(speed)
    return list(segments)


def estimate_lap_time(segments: Sequence[Segment]) -> float:
    """Sum of length / speed; zero-speed segments add nothing."""
    total = 0.0
    for seg in segments:
        if seg.speed > 0:
            total += seg.length / seg.speed
    return total


def braking_distance(v1: float, v2: float, config: PhysicsConfig) -> float:
    """Distance to change speed from v1 to v2 at the braking limit (floored at 0)."""
    return max(0.0, (v2 * v2 - v1 * v1) / (2.0 * config.max_braking))


def acceleration_distance(v1: float, v2: float, config: PhysicsConfig) -> float:
    return max(0.0, (v2 * v2 - v1 * v1) / (2.0 * config.max_acceleration))


def lateral_g_force(speed: float, radius: float, config: Optional[PhysicsConfig] = None) -> float:
    if radius <= 0 or math.isinf(radius):
        return 0.0
    g = config.gravity if config is not None else PhysicsConfig().gravity
    return (speed * speed / radius) / g


def can_maintain_speed(speed: float, radius: float, config: PhysicsConfig) -> bool:
    if radius <= 0 or math.isinf(radius):
        return True
    return speed <= max_corner_speed(radius, config)


def speed_kmh(speed_mps: float) -> float:
    return speed_mps * 3.6
