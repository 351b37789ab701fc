import math

import numpy as np
import pytest

from kartline.geometry import (
    angle,
    as_points,
    compute_tangents_and_normals,
    distance,
    heading,
    interpolate,
    lerp,
    perpendicular_offset,
    point_in_polygon,
    segments_intersect,
    to_dicts,
    track_length,
    track_self_intersects,
)


def test_distance_accepts_tuples_and_dicts():
    assert distance((0, 0), (3, 4)) == 5.0
    assert distance({"x": 0, "y": 0}, {"x": 3, "y": 4}) == 5.0


def test_as_points_never_aliases():
    src = np.array([[0.0, 0.0], [1.0, 1.0]])
    pts = as_points(src)
    pts[0, 0] = 99.0
    assert src[0, 0] == 0.0
    assert as_points([]).shape == (0, 2)
    assert to_dicts(as_points([(1, 2)])) == [{"x": 1.0, "y": 2.0}]


def test_angle_heading_lerp():
    assert angle((1, 0), (0, 0), (0, 1)) == pytest.approx(math.pi / 2)
    assert angle((0, 0), (0, 0), (1, 1)) == 0.0
    assert heading((0, 0), (0, 5)) == pytest.approx(math.pi / 2)
    assert lerp((0, 0), (10, 20), 0.25) == (2.5, 5.0)


def test_perpendicular_offset_is_left_normal():
    x, y = perpendicular_offset((0, 0), (1, 0), 2.0)
    assert (x, y) == pytest.approx((0.0, 2.0))
    # zero direction leaves the point alone
    assert perpendicular_offset((3, 4), (0, 0), 5.0) == (3.0, 4.0)


def test_interpolate_passes_through_control_points():
    pts = [(0, 0), (10, 5), (20, 0), (30, 5)]
    res = 5
    out = interpolate(pts, resolution=res)
    assert out.shape == (1 + (len(pts) - 1) * res + 1, 2)
    assert np.allclose(out[0], pts[0])
    assert np.allclose(out[-1], pts[-1])
    # sample k*res of each span is the span start
    for i, p in enumerate(pts[:-1]):
        assert np.allclose(out[1 + i * res], p)


def test_interpolate_short_input_returned_as_is():
    assert interpolate([(1, 1)]).shape == (1, 2)


def test_point_in_polygon_square():
    square = [(0, 0), (10, 0), (10, 10), (0, 10)]
    assert point_in_polygon((5, 5), square)
    assert not point_in_polygon((15, 5), square)
    assert not point_in_polygon((5, -1), square)
    assert not point_in_polygon((1, 1), [(0, 0), (1, 1)])


def test_segments_intersect():
    assert segments_intersect((0, 0), (10, 10), (0, 10), (10, 0))
    assert not segments_intersect((0, 0), (10, 0), (0, 5), (10, 5))


def test_track_self_intersects_crossing_quad():
    assert track_self_intersects([(0, 0), (10, 10), (10, 0), (0, 10)])


def test_track_self_intersects_simple_paths(square_path, straight_line):
    assert not track_self_intersects(square_path)
    assert not track_self_intersects(straight_line)
    assert not track_self_intersects([(0, 0), (1, 0), (2, 0)])


def test_track_length(square_path):
    assert track_length(square_path) == pytest.approx(300.0)
    assert track_length([(0, 0)]) == 0.0


def test_tangents_and_normals(straight_line):
    tangents, normals = compute_tangents_and_normals(straight_line)
    assert np.allclose(tangents, [1.0, 0.0])
    assert np.allclose(normals, [0.0, 1.0])
    with pytest.raises(ValueError):
        compute_tangents_and_normals([(0, 0)])
