from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
from scipy.spatial import cKDTree

from .errors import InsufficientPointsError
from .geometry import PointLike, as_points, point_in_polygon, to_dicts, track_length, track_self_intersects
from .vehicle import PhysicsConfig
from .vmax import Segment, build_segments

logger = logging.getLogger(__name__)

DEFAULT_TRACK_WIDTH = 6.0
MIN_CENTERLINE_POINTS = 3
REFERENCE_SAMPLES_PER_SEGMENT = 16


def densify(points: Sequence[PointLike], samples_per_segment: int = REFERENCE_SAMPLES_PER_SEGMENT) -> np.ndarray:
    """Linearly subdivide every segment so nearest-vertex ~ nearest-point."""
    pts = as_points(points)
    if len(pts) < 2:
        return pts
    t = np.arange(samples_per_segment, dtype=float)[None, :, None] / samples_per_segment
    a = pts[:-1, None, :]
    b = pts[1:, None, :]
    return np.vstack([(a + (b - a) * t).reshape(-1, 2), pts[-1:]])


@dataclass
class TrackData:
    """Geometry derived from a drawn centerline.

    ``boundaries`` are forbidden polygons: a point inside any of them is out
    of bounds. ``limits`` is an optional allowed region: a point outside it
    is out of bounds. ``reference`` is the line used for deviation
    penalties.
    """

    centerline: np.ndarray = field(default_factory=lambda: np.zeros((0, 2)))
    length: float = 0.0
    segments: List[Segment] = field(default_factory=list)
    boundaries: List[np.ndarray] = field(default_factory=list)
    limits: Optional[np.ndarray] = None
    reference: Optional[np.ndarray] = None
    track_width: float = DEFAULT_TRACK_WIDTH

    _reference_tree: Optional[cKDTree] = field(default=None, init=False, repr=False, compare=False)

    @property
    def half_width(self) -> float:
        return self.track_width / 2.0

    def reference_tree(self) -> Optional[cKDTree]:
        """KD-tree over the densified reference line, built on first use."""
        if self.reference is None or len(self.reference) == 0:
            return None
        if self._reference_tree is None:
            self._reference_tree = cKDTree(densify(self.reference))
        return self._reference_tree

    def in_bounds(self, point: PointLike) -> bool:
        if self.limits is not None and not point_in_polygon(point, self.limits):
            return False
        for boundary in self.boundaries:
            if point_in_polygon(point, boundary):
                return False
        return True

    def out_of_bounds_indices(self, points: Sequence[PointLike]) -> List[int]:
        pts = as_points(points)
        if self.limits is None and not self.boundaries:
            return []
        return [i for i, p in enumerate(pts) if not self.in_bounds(p)]

    def copy(self) -> "TrackData":
        """Independent copy; segments keep the speed limits of the config they were built with."""
        clone = TrackData.from_dict(self.to_dict())
        clone.segments = deepcopy(self.segments)
        return clone

    def to_dict(self) -> Dict[str, Any]:
        return {
            "centerline": to_dicts(self.centerline),
            "length": self.length,
            "boundaries": [to_dicts(b) for b in self.boundaries],
            "limits": to_dicts(self.limits) if self.limits is not None else None,
            "reference": to_dicts(self.reference) if self.reference is not None else None,
            "track_width": self.track_width,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], config: Optional[PhysicsConfig] = None) -> "TrackData":
        centerline = as_points(data.get("centerline") or [])
        limits = data.get("limits")
        reference = data.get("reference")
        return cls(
            centerline=centerline,
            length=float(data.get("length") or track_length(centerline)),
            segments=build_segments(centerline, config or PhysicsConfig()),
            boundaries=[as_points(b) for b in (data.get("boundaries") or [])],
            limits=as_points(limits) if limits is not None else None,
            reference=as_points(reference) if reference is not None else None,
            track_width=float(data.get("track_width", DEFAULT_TRACK_WIDTH)),
        )


def process_track(
    centerline: Sequence[PointLike],
    config: Optional[PhysicsConfig] = None,
    *,
    boundaries: Optional[Sequence[Sequence[PointLike]]] = None,
    limits: Optional[Sequence[PointLike]] = None,
    reference: Optional[Sequence[PointLike]] = None,
    track_width: float = DEFAULT_TRACK_WIDTH,
) -> TrackData:
    """Measure the centerline and attach grip-limited segment speeds.

    Raises:
        InsufficientPointsError: fewer than three centerline points.
    """
    pts = as_points(centerline)
    if len(pts) < MIN_CENTERLINE_POINTS:
        raise InsufficientPointsError(
            f"Centerline needs at least {MIN_CENTERLINE_POINTS} points, got {len(pts)}"
        )
    if track_width <= 0:
        raise ValueError("track_width must be positive")
    if track_self_intersects(pts):
        logger.warning("Track centerline self-intersects (%d points)", len(pts))

    config = config or PhysicsConfig()
    return TrackData(
        centerline=pts,
        length=track_length(pts),
        segments=build_segments(pts, config),
        boundaries=[as_points(b) for b in (boundaries or [])],
        limits=as_points(limits) if limits is not None else None,
        reference=as_points(reference) if reference is not None else None,
        track_width=float(track_width),
    )
