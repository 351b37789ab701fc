from concurrent.futures import CancelledError

import numpy as np
import pytest

from kartline.errors import OptimizationCancelled
from kartline.raceline.heuristic import initial_heuristic_line
from kartline.tasks import (
    ACTION_OPTIMIZE,
    BackgroundOptimizer,
    OptimizeRequest,
    build_message,
    execute,
    handle_message,
    run_optimization,
)
from kartline.track import process_track
from kartline.vehicle import PhysicsConfig


@pytest.fixture
def request_(oval_centerline):
    track = process_track(oval_centerline)
    return OptimizeRequest(
        initial_line=initial_heuristic_line(track.centerline, track.half_width),
        track=track,
        iterations=40,
        config=PhysicsConfig(grip=1.2),
        seed=5,
    )


class BrokenOptimizer(BackgroundOptimizer):
    def submit(self, request):
        raise RuntimeError("worker crashed")


def test_snapshot_is_independent(request_):
    snap = request_.snapshot()
    request_.initial_line[1] += 100.0
    request_.track.centerline[1] += 100.0
    assert not np.allclose(snap.initial_line[1], request_.initial_line[1])
    assert not np.allclose(snap.track.centerline[1], request_.track.centerline[1])


def test_handle_message_success(request_):
    reply = handle_message(build_message(request_))
    assert reply["success"] is True
    assert len(reply["optimized"]) > len(request_.initial_line)
    assert set(reply["optimized"][0]) == {"x", "y"}
    expected = execute(request_.snapshot())
    assert reply["score"] == pytest.approx(expected.best_score)


def test_handle_message_failure_and_unknown():
    reply = handle_message({"action": ACTION_OPTIMIZE, "trackData": {}})
    assert reply["success"] is False
    assert reply["error"]
    assert handle_message({"action": "noop"}) is None
    assert handle_message({}) is None


def test_background_matches_sync(request_):
    with BackgroundOptimizer() as optimizer:
        background = optimizer.submit(request_).result(timeout=120)
    inline = execute(request_.snapshot())
    assert np.array_equal(background.line, inline.line)
    assert background.best_score == inline.best_score


def test_new_submission_supersedes(request_):
    long_request = request_.snapshot()
    long_request.iterations = 200000
    with BackgroundOptimizer() as optimizer:
        first = optimizer.submit(long_request)
        second = optimizer.submit(request_)
        result = second.result(timeout=120)
        assert first.cancelled()
        with pytest.raises((OptimizationCancelled, CancelledError)):
            first.result(timeout=120)
    assert result.best_score <= result.initial_score


def test_fallback_runs_inline(request_):
    expected = execute(request_.snapshot())
    result = run_optimization(request_, BrokenOptimizer())
    assert np.array_equal(result.line, expected.line)


def test_shut_down_optimizer_runs_inline(request_):
    optimizer = BackgroundOptimizer()
    optimizer.shutdown()
    assert not optimizer.available
    with pytest.raises(RuntimeError):
        optimizer.submit(request_)
    result = run_optimization(request_, optimizer)
    assert np.array_equal(result.line, execute(request_.snapshot()).line)


def test_snapshot_keeps_segment_speed_limits(oval_centerline):
    config = PhysicsConfig(grip=0.6)
    track = process_track(oval_centerline, config)
    request = OptimizeRequest(
        initial_line=initial_heuristic_line(track.centerline, track.half_width),
        track=track,
        config=config,
    )
    snap = request.snapshot()
    original = [seg.max_speed for seg in track.segments]
    copied = [seg.max_speed for seg in snap.track.segments]
    assert np.allclose(original, copied)
    assert snap.track.segments[1] is not track.segments[1]


class SlowOptimizer(BackgroundOptimizer):
    """Runs a much longer copy in the background and keeps the task handle."""

    def __init__(self):
        super().__init__()
        self.tasks = []

    def submit(self, request):
        slow = request.snapshot()
        slow.iterations = 200000
        task = super().submit(slow)
        self.tasks.append(task)
        return task


def test_timed_out_worker_is_cancelled_before_fallback(request_):
    expected = execute(request_.snapshot())
    with SlowOptimizer() as optimizer:
        result = run_optimization(request_, optimizer, timeout=0.01)
        task = optimizer.tasks[0]
        assert task.cancelled()
        with pytest.raises((OptimizationCancelled, CancelledError)):
            task.result(timeout=120)
    assert np.array_equal(result.line, expected.line)
