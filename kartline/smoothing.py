import numpy as np

from .geometry import as_points, interpolate

SAMPLES_PER_PASS = 2
DUPLICATE_EPS = 1e-6


def smooth_line(line, iterations=2):
    """Resample a line into a Catmull-Rom curve.

    ``iterations`` sets the sample density (``SAMPLES_PER_PASS`` samples per
    input segment per iteration), it does not repeat a relaxation. The line
    is open, endpoints stay where they are, and samples closer than
    ``DUPLICATE_EPS`` to their predecessor are dropped.
    """
    pts = as_points(line)
    if len(pts) < 3:
        return pts
    resolution = SAMPLES_PER_PASS * max(1, int(iterations))
    return drop_near_duplicates(interpolate(pts, resolution))


def drop_near_duplicates(points, eps=DUPLICATE_EPS):
    pts = as_points(points)
    if len(pts) < 2:
        return pts
    keep = [0]
    for i in range(1, len(pts)):
        if np.hypot(*(pts[i] - pts[keep[-1]])) >= eps:
            keep.append(i)
    return pts[keep]
