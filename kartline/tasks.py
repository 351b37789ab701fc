"""Background execution of the optimizer.

The optimizer itself is one function (:func:`kartline.raceline.optimize_line`).
This module only decides *where* it runs: on a single worker thread with a
cancel token, or inline on the caller's thread when the worker path is not
available or fails. Inputs are deep-copied snapshots in both cases, so the
two paths give identical results for the same seed.
"""

from __future__ import annotations

import copy
import logging
import threading
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import numpy as np

from .errors import OptimizationCancelled
from .geometry import as_points, to_dicts
from .raceline.annealing import DEFAULT_ITERATIONS, AnnealParams, OptimizeResult, optimize_line
from .track import TrackData
from .vehicle import PhysicsConfig

logger = logging.getLogger(__name__)

ACTION_OPTIMIZE = "optimize"


class CancelToken:
    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    def is_set(self) -> bool:
        return self._event.is_set()


@dataclass
class OptimizeRequest:
    initial_line: np.ndarray
    track: TrackData
    iterations: int = DEFAULT_ITERATIONS
    config: PhysicsConfig = field(default_factory=PhysicsConfig)
    params: AnnealParams = field(default_factory=AnnealParams)
    seed: Optional[int] = None

    def snapshot(self) -> "OptimizeRequest":
        """Independent copy; nothing is shared with the caller afterwards."""
        return OptimizeRequest(
            initial_line=as_points(self.initial_line),
            track=self.track.copy(),
            iterations=int(self.iterations),
            config=self.config,
            params=copy.deepcopy(self.params),
            seed=self.seed,
        )


def execute(request: OptimizeRequest, cancel: Optional[CancelToken] = None) -> OptimizeResult:
    return optimize_line(
        request.initial_line,
        request.track,
        request.iterations,
        config=request.config,
        params=request.params,
        seed=request.seed,
        cancel=cancel,
    )


def handle_message(message: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Worker-side protocol.

    ``{"action": "optimize", "initialLine": [...], "trackData": {...},
    "iterations": n}`` answers ``{"success": True, "optimized": [...]}`` or
    ``{"success": False, "error": "..."}``. Unknown actions get no answer.
    """
    if not message or message.get("action") != ACTION_OPTIMIZE:
        return None
    try:
        config = PhysicsConfig(**message["physics"]) if message.get("physics") else PhysicsConfig()
        request = OptimizeRequest(
            initial_line=as_points(message["initialLine"]),
            track=TrackData.from_dict(message.get("trackData") or {}, config),
            iterations=int(message.get("iterations", DEFAULT_ITERATIONS)),
            config=config,
            seed=message.get("seed"),
        )
        result = execute(request)
    except Exception as exc:
        logger.warning("Worker optimize failed: %s", exc)
        return {"success": False, "error": str(exc)}
    return {"success": True, "optimized": to_dicts(result.line), "score": result.best_score}


def build_message(request: OptimizeRequest) -> Dict[str, Any]:
    return {
        "action": ACTION_OPTIMIZE,
        "initialLine": to_dicts(request.initial_line),
        "trackData": request.track.to_dict(),
        "iterations": request.iterations,
        "physics": {k: v for k, v in request.config.to_dict().items() if k != "gravity"},
        "seed": request.seed,
    }


class OptimizationTask:
    def __init__(self, future: Future, token: CancelToken) -> None:
        self.future = future
        self.token = token

    def cancel(self) -> None:
        self.token.cancel()
        self.future.cancel()

    def cancelled(self) -> bool:
        return self.token.is_set()

    def done(self) -> bool:
        return self.future.done()

    def result(self, timeout: Optional[float] = None) -> OptimizeResult:
        return self.future.result(timeout=timeout)


class BackgroundOptimizer:
    """Single worker thread; a new submission supersedes the running one."""

    def __init__(self) -> None:
        self._executor: Optional[ThreadPoolExecutor] = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="kartline-optimize")
        self._current: Optional[OptimizationTask] = None
        self._lock = threading.Lock()

    @property
    def available(self) -> bool:
        return self._executor is not None

    def submit(self, request: OptimizeRequest) -> OptimizationTask:
        if self._executor is None:
            raise RuntimeError("Background optimizer is shut down")
        snapshot = request.snapshot()
        token = CancelToken()
        with self._lock:
            if self._current is not None and not self._current.done():
                logger.info("Superseding in-flight optimization")
                self._current.cancel()
            task = OptimizationTask(self._executor.submit(execute, snapshot, token), token)
            self._current = task
        return task

    def shutdown(self) -> None:
        with self._lock:
            if self._current is not None:
                self._current.cancel()
            if self._executor is not None:
                self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> "BackgroundOptimizer":
        return self

    def __exit__(self, *exc) -> None:
        self.shutdown()


def run_optimization(request: OptimizeRequest, optimizer: Optional[BackgroundOptimizer] = None,
                     timeout: Optional[float] = None) -> OptimizeResult:
    """Run in the background when possible, otherwise inline.

    Cancellation is propagated; any other worker failure falls back to the
    same computation on the calling thread. A worker task that timed out or
    failed is cancelled first so only one copy keeps running.
    """
    if optimizer is not None and optimizer.available:
        task: Optional[OptimizationTask] = None
        try:
            task = optimizer.submit(request)
            return task.result(timeout=timeout)
        except OptimizationCancelled:
            raise
        except CancelledError as exc:
            raise OptimizationCancelled("Optimization superseded before it started") from exc
        except Exception as exc:
            if task is not None:
                task.cancel()
            logger.warning("Background optimize failed, running synchronously: %r", exc)
    return execute(request.snapshot())
