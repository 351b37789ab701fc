import math

import pytest

from kartline.simulator import LineSimulator, line_cumulative_distance, position_at_distance
from kartline.vehicle import PhysicsConfig


def test_cumulative_distance(straight_line):
    cum = line_cumulative_distance(straight_line)
    assert cum[0] == 0.0
    assert cum[-1] == pytest.approx(100.0)


def test_position_at_distance(straight_line):
    pos = position_at_distance(straight_line, 25.0)
    assert (pos.x, pos.y) == pytest.approx((25.0, 0.0))
    assert pos.index == 2
    assert pos.t == pytest.approx(0.5)
    assert math.isinf(pos.radius)


def test_position_clamped_to_ends(straight_line):
    start = position_at_distance(straight_line, -5.0)
    end = position_at_distance(straight_line, 500.0)
    assert (start.x, start.y) == (0.0, 0.0)
    assert (end.x, end.y) == (100.0, 0.0)
    assert end.index == len(straight_line) - 1


def test_position_in_corner_has_radius():
    pos = position_at_distance([(0, 0), (10, 0), (10, 10)], 15.0)
    assert pos.radius == pytest.approx(5 * math.sqrt(2))


def test_simulator_loops(straight_line):
    config = PhysicsConfig()
    sim = LineSimulator(straight_line, config)
    assert sim.total_length == pytest.approx(100.0)
    sim.advance(1.0)
    assert sim.distance == pytest.approx(config.max_speed)
    sim.advance(10.0)
    assert 0.0 <= sim.distance <= sim.total_length


def test_simulator_on_degenerate_line():
    sim = LineSimulator([(1.0, 1.0)])
    pos = sim.advance(1.0)
    assert sim.distance == 0.0
    assert pos.index == 0
