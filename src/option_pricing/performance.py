"""Execution-time bookkeeping for the pricing service."""

from __future__ import annotations

from collections import defaultdict
import math
import threading

__all__ = ["PerformanceTracker"]

_KINDS = ("single", "range")


class PerformanceTracker:
    """Thread-safe counters of calculation counts and wall-clock times.

    Range sweeps feed the min/max/average statistics; single calculations
    are only counted. Per-model totals include both.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._reset_locked()

    def _reset_locked(self) -> None:
        self._range_count = 0
        self._single_count = 0
        self._range_total_ms = 0.0
        self._range_min_ms = math.inf
        self._range_max_ms = 0.0
        self._model_ms: dict[str, float] = defaultdict(float)

    def record(self, model_type: str, elapsed_ms: float, kind: str = "range") -> None:
        if kind not in _KINDS:
            raise ValueError(f"kind must be one of {_KINDS}, got {kind!r}")
        with self._lock:
            self._model_ms[model_type] += elapsed_ms
            if kind == "single":
                self._single_count += 1
                return
            self._range_count += 1
            self._range_total_ms += elapsed_ms
            self._range_min_ms = min(self._range_min_ms, elapsed_ms)
            self._range_max_ms = max(self._range_max_ms, elapsed_ms)

    def snapshot(self) -> dict[str, object]:
        """Current statistics keyed by their wire names."""
        with self._lock:
            count = self._range_count
            return {
                "totalRangeCalculations": count,
                "averageExecutionTimeMs": self._range_total_ms / count if count else 0.0,
                "minExecutionTimeMs": self._range_min_ms if count else 0.0,
                "maxExecutionTimeMs": self._range_max_ms,
                "modelPerformance": dict(self._model_ms),
                "totalSingleCalculations": self._single_count,
            }

    def reset(self) -> None:
        with self._lock:
            self._reset_locked()
