import math

import numpy as np


# ---------------- CURVATURE CALCULATION ---------------- #

def curvature(p1, p2, p3):
    """Circumradius method for a single point (1/R = 4*A / (a*b*c))."""
    (x1, y1), (x2, y2), (x3, y3) = p1, p2, p3
    # colinear triples are exactly straight, Heron can leave rounding residue
    if (x2 - x1) * (y3 - y1) - (y2 - y1) * (x3 - x1) == 0:
        return 0.0
    a = math.dist(p1, p2)
    b = math.dist(p2, p3)
    c = math.dist(p1, p3)
    if a == 0 or b == 0 or c == 0:
        return 0.0
    s = (a + b + c) / 2
    area_squared = s * (s - a) * (s - b) * (s - c)
    if area_squared <= 0:
        return 0.0
    A = math.sqrt(area_squared)
    return (4 * A) / (a * b * c)


def radius_of_curvature(p1, p2, p3):
    """Radius of the circle through three points; inf for a straight."""
    k = curvature(p1, p2, p3)
    return math.inf if k == 0 else 1.0 / k


def curvature_vectorized(points):
    """Vectorized curvature calculation. Endpoints get 0."""
    if len(points) < 3:
        return np.zeros(len(points))
    points = np.asarray(points, dtype=float)
    x, y = points[:, 0], points[:, 1]
    a = np.sqrt((x[1:-1] - x[:-2]) ** 2 + (y[1:-1] - y[:-2]) ** 2)
    b = np.sqrt((x[2:] - x[1:-1]) ** 2 + (y[2:] - y[1:-1]) ** 2)
    c = np.sqrt((x[2:] - x[:-2]) ** 2 + (y[2:] - y[:-2]) ** 2)
    s = (a + b + c) / 2
    area_squared = s * (s - a) * (s - b) * (s - c)
    area_squared[area_squared <= 0] = 0
    A = np.sqrt(area_squared)
    curvatures = np.zeros(len(points))
    with np.errstate(divide="ignore", invalid="ignore"):
        curvatures[1:-1] = (4 * A) / (a * b * c)
    cross = (x[1:-1] - x[:-2]) * (y[2:] - y[:-2]) - (y[1:-1] - y[:-2]) * (x[2:] - x[:-2])
    curvatures[1:-1][cross == 0] = 0
    curvatures[np.isnan(curvatures)] = 0
    curvatures[np.isinf(curvatures)] = 0
    return curvatures
