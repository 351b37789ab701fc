import math

import pytest

from kartline.raceline.fitness import (
    INVALID_SCORE,
    calculate_lap_time,
    deviation_penalty,
    score_breakdown,
    score_line,
    smoothness_penalty,
    validate_racing_line,
)
from kartline.track import TrackData
from kartline.vehicle import PhysicsConfig

RECT = [(0.0, 0.0), (100.0, 0.0), (100.0, 100.0), (0.0, 100.0)]
CROSSING = [(0, 0), (10, 10), (10, 0), (0, 10)]


@pytest.fixture
def fenced():
    return TrackData(limits=RECT)


def test_two_point_line_has_no_lap_time():
    assert calculate_lap_time([(0, 0), (10, 0)]) == math.inf
    assert calculate_lap_time([(0, 0)]) == math.inf


def test_lap_time_finite_and_grip_sensitive():
    corner = [(0, 0), (20, 0), (30, 5), (35, 15), (35, 35)]
    slow = calculate_lap_time(corner, config=PhysicsConfig(grip=0.6))
    fast = calculate_lap_time(corner, config=PhysicsConfig(grip=1.5))
    assert math.isfinite(slow) and math.isfinite(fast)
    assert fast < slow


def test_score_invalid_outside_rectangle(fenced):
    line = [(10, 50), (50, 50), (150, 50)]
    assert score_line(line, fenced) == INVALID_SCORE


def test_score_invalid_inside_forbidden_polygon():
    track = TrackData(boundaries=[[(40, 40), (60, 40), (60, 60), (40, 60)]])
    assert score_line([(0, 50), (50, 50), (100, 50)], track) == INVALID_SCORE
    assert score_line([(0, 10), (50, 10), (100, 10)], track) < INVALID_SCORE


def test_score_invalid_self_crossing_quad():
    assert score_line(CROSSING) == INVALID_SCORE
    assert score_line([(0, 0)]) == INVALID_SCORE


def test_score_is_lap_time_on_plain_straight(fenced):
    line = [(5.0 + 9.0 * k, 50.0) for k in range(11)]
    parts = score_breakdown(line, fenced)
    assert parts["valid"]
    assert parts["smoothness"] == 0.0
    assert parts["deviation"] == 0.0
    assert parts["score"] == pytest.approx(parts["lap_time"])


def test_smoothness_penalty():
    assert smoothness_penalty([(0, 0), (1, 0), (2, 0)]) == 0.0
    assert smoothness_penalty([(0, 0), (10, 0), (10, 10)]) == pytest.approx(1.0 / 50.0)
    # near-degenerate corners stay finite
    assert math.isfinite(smoothness_penalty([(0, 0), (1e-7, 0), (1e-7, 1e-7)]))


def test_deviation_penalty_against_reference():
    track = TrackData(reference=[(0, 0), (100, 0)])
    assert deviation_penalty([(0, 1), (50, 1), (100, 1)], track) == pytest.approx(1.0)
    assert deviation_penalty([(0, 1)], None) == 0.0
    assert deviation_penalty([(0, 1)], TrackData()) == 0.0


def test_validate_messages(fenced):
    report = validate_racing_line([(0, 0)])
    assert not report.valid
    assert report.errors == ["Racing line too short"]

    report = validate_racing_line([(10, 10), (150, 10), (50, 50)], fenced)
    assert "Point 1 outside track bounds" in report.errors

    report = validate_racing_line(CROSSING)
    assert report.errors == ["Racing line self-intersects"]
    assert report.to_dict() == {"valid": False, "errors": ["Racing line self-intersects"]}

    assert validate_racing_line([(10, 10), (50, 50), (90, 10)], fenced).valid
