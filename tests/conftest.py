import math

import numpy as np
import pytest


@pytest.fixture
def straight_line():
    # 100 m straight, 10 m spacing
    return [(float(x), 0.0) for x in range(0, 101, 10)]


@pytest.fixture
def square_path():
    return [(0.0, 0.0), (100.0, 0.0), (100.0, 100.0), (0.0, 100.0)]


@pytest.fixture
def oval_centerline():
    # open 300 degree arc of an ellipse, 25 points
    theta = np.linspace(0.0, 5.0 * math.pi / 3.0, 25)
    return [(60.0 * math.cos(t), 40.0 * math.sin(t)) for t in theta]
