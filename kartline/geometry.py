from __future__ import annotations

import math
from typing import Dict, Iterable, List, Sequence, Tuple, Union

import numpy as np


Point = Tuple[float, float]
PointLike = Union[Tuple[float, float], List[float], Dict[str, float], np.ndarray]


def to_xy(p: PointLike) -> Point:
    if isinstance(p, dict):
        return float(p["x"]), float(p["y"])
    return float(p[0]), float(p[1])


def as_points(points: Iterable[PointLike]) -> np.ndarray:
    """Return an independent (N, 2) float array for any point sequence.

    Accepts tuples, lists, ``{"x": .., "y": ..}`` dicts or an existing
    array. The result never aliases the input.
    """
    if isinstance(points, np.ndarray):
        pts = np.array(points, dtype=float, copy=True)
    else:
        pts = np.array([to_xy(p) for p in points], dtype=float)
    if pts.size == 0:
        return np.zeros((0, 2), dtype=float)
    return pts.reshape(-1, 2)


def to_dicts(points: np.ndarray) -> List[Dict[str, float]]:
    return [{"x": float(p[0]), "y": float(p[1])} for p in np.asarray(points, dtype=float)]


def distance(p1, p2) -> float:
    """Euclidean distance between two points."""
    return math.dist(to_xy(p1), to_xy(p2))


def angle(p1, p2, p3) -> float:
    """Interior angle at p2 formed by p1-p2-p3, in radians."""
    (x1, y1), (x2, y2), (x3, y3) = to_xy(p1), to_xy(p2), to_xy(p3)
    v1x, v1y = x1 - x2, y1 - y2
    v2x, v2y = x3 - x2, y3 - y2
    mag1 = math.hypot(v1x, v1y)
    mag2 = math.hypot(v2x, v2y)
    if mag1 == 0 or mag2 == 0:
        return 0.0
    cos_a = (v1x * v2x + v1y * v2y) / (mag1 * mag2)
    return math.acos(max(-1.0, min(1.0, cos_a)))


def heading(p1, p2) -> float:
    """Heading from p1 to p2 in radians (-pi..pi)."""
    (x1, y1), (x2, y2) = to_xy(p1), to_xy(p2)
    return math.atan2(y2 - y1, x2 - x1)


def lerp(p1, p2, t: float) -> Point:
    (x1, y1), (x2, y2) = to_xy(p1), to_xy(p2)
    return x1 + (x2 - x1) * t, y1 + (y2 - y1) * t


def perpendicular_offset(point, direction, offset: float) -> Point:
    """Shift ``point`` along the left normal of ``direction`` by ``offset``."""
    x, y = to_xy(point)
    dx, dy = to_xy(direction)
    length = math.hypot(dx, dy)
    if length == 0:
        return x, y
    return x - dy / length * offset, y + dx / length * offset


def interpolate(points: Sequence[PointLike], resolution: int = 10) -> np.ndarray:
    """Catmull-Rom resampling through every input point.

    Each consecutive pair (p1, p2) is sampled ``resolution`` times using p0
    and p3 as control points, clamped to the ends of the sequence. The first
    and last input points are always included (the first one twice).
    """
    pts = as_points(points)
    n = len(pts)
    if n < 2:
        return pts
    resolution = max(1, int(resolution))

    t = np.arange(resolution, dtype=float) / resolution
    t2 = t * t
    t3 = t2 * t
    # Catmull-Rom basis, shape (resolution, 4)
    basis = np.stack([
        -0.5 * t3 + t2 - 0.5 * t,
        1.5 * t3 - 2.5 * t2 + 1.0,
        -1.5 * t3 + 2.0 * t2 + 0.5 * t,
        0.5 * t3 - 0.5 * t2,
    ], axis=1)

    idx = np.arange(n - 1)
    p0 = pts[np.maximum(idx - 1, 0)]
    p1 = pts[idx]
    p2 = pts[idx + 1]
    p3 = pts[np.minimum(idx + 2, n - 1)]
    control = np.stack([p0, p1, p2, p3], axis=1)  # (n-1, 4, 2)
    samples = np.einsum("rk,skd->srd", basis, control).reshape(-1, 2)

    return np.vstack([pts[:1], samples, pts[-1:]])


def point_in_polygon(point, polygon) -> bool:
    """Ray-crossing test (even-odd rule)."""
    px, py = to_xy(point)
    poly = as_points(polygon)
    if len(poly) < 3:
        return False
    xi, yi = poly[:, 0], poly[:, 1]
    xj, yj = np.roll(xi, 1), np.roll(yi, 1)
    straddles = (yi > py) != (yj > py)
    with np.errstate(divide="ignore", invalid="ignore"):
        x_cross = (xj - xi) * (py - yi) / (yj - yi) + xi
    crossings = straddles & (px < x_cross)
    return bool(np.count_nonzero(crossings) % 2)


def _ccw(ax, ay, bx, by, cx, cy):
    return (cy - ay) * (bx - ax) > (by - ay) * (cx - ax)


def segments_intersect(p1, p2, p3, p4) -> bool:
    """Orientation test for segments p1-p2 and p3-p4."""
    (x1, y1), (x2, y2), (x3, y3), (x4, y4) = to_xy(p1), to_xy(p2), to_xy(p3), to_xy(p4)
    return (_ccw(x1, y1, x3, y3, x4, y4) != _ccw(x2, y2, x3, y3, x4, y4)
            and _ccw(x1, y1, x2, y2, x3, y3) != _ccw(x1, y1, x2, y2, x4, y4))


def track_self_intersects(points: Sequence[PointLike]) -> bool:
    """True if any two non-adjacent segments of the polyline cross.

    Segment i is only compared with segments j >= i + 2, so neighbours that
    share an endpoint never count.
    """
    pts = as_points(points)
    n_seg = len(pts) - 1
    if n_seg < 3:
        return False
    a = pts[:-1]
    b = pts[1:]
    for i in range(n_seg - 2):
        c = a[i + 2:]
        d = b[i + 2:]
        ax, ay = a[i]
        bx, by = b[i]
        cx, cy, dx, dy = c[:, 0], c[:, 1], d[:, 0], d[:, 1]
        hit = ((_ccw(ax, ay, cx, cy, dx, dy) != _ccw(bx, by, cx, cy, dx, dy))
               & (_ccw(ax, ay, bx, by, cx, cy) != _ccw(ax, ay, bx, by, dx, dy)))
        if np.any(hit):
            return True
    return False


def segment_lengths(points: Sequence[PointLike]) -> np.ndarray:
    pts = as_points(points)
    if len(pts) < 2:
        return np.zeros(0)
    return np.hypot(*np.diff(pts, axis=0).T)


def track_length(points: Sequence[PointLike]) -> float:
    """Sum of consecutive distances."""
    return float(np.sum(segment_lengths(points)))


def compute_tangents_and_normals(points: Sequence[PointLike]) -> Tuple[np.ndarray, np.ndarray]:
    """Unit tangents (central differences) and left-pointing unit normals."""
    pts = as_points(points)
    if len(pts) < 2:
        raise ValueError("Need at least 2 points")
    tangents = np.zeros_like(pts)
    tangents[1:-1] = pts[2:] - pts[:-2]
    tangents[0] = pts[1] - pts[0]
    tangents[-1] = pts[-1] - pts[-2]
    norms = np.linalg.norm(tangents, axis=1)
    norms[norms == 0.0] = 1.0
    tangents = tangents / norms[:, None]
    normals = np.stack([-tangents[:, 1], tangents[:, 0]], axis=1)
    return tangents, normals
