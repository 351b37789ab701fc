import math

import numpy as np
import pytest

from kartline.curvature import curvature, curvature_vectorized, radius_of_curvature


def test_curvature_of_circle_points():
    r = 10.0
    pts = [(r * math.cos(t), r * math.sin(t)) for t in (0.0, 0.3, 0.6)]
    assert curvature(*pts) == pytest.approx(1.0 / r, rel=1e-6)
    assert radius_of_curvature(*pts) == pytest.approx(r, rel=1e-6)


def test_colinear_is_exactly_straight():
    assert curvature((0, 0), (1, 1), (2, 2)) == 0.0
    assert radius_of_curvature((0, 0), (1, 1), (2, 2)) == math.inf


def test_duplicate_points_give_zero():
    assert curvature((1, 1), (1, 1), (2, 3)) == 0.0
    assert radius_of_curvature((1, 1), (1, 1), (1, 1)) == math.inf


def test_right_angle_corner():
    # circle through (0,0),(10,0),(10,10) has radius 5*sqrt(2)
    assert radius_of_curvature((0, 0), (10, 0), (10, 10)) == pytest.approx(5 * math.sqrt(2))


def test_vectorized_matches_scalar(oval_centerline):
    kappa = curvature_vectorized(oval_centerline)
    assert kappa[0] == 0.0 and kappa[-1] == 0.0
    for i in range(1, len(oval_centerline) - 1):
        expected = curvature(oval_centerline[i - 1], oval_centerline[i], oval_centerline[i + 1])
        assert kappa[i] == pytest.approx(expected, rel=1e-6)


def test_vectorized_straight_and_short(straight_line):
    assert np.all(curvature_vectorized(straight_line) == 0.0)
    assert len(curvature_vectorized([(0, 0), (1, 1)])) == 2
