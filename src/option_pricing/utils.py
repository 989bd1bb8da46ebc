"""Helper functions shared by the pricing models and the service layer."""

from __future__ import annotations

from contextlib import contextmanager
from collections.abc import Iterator
import math
import time

from .exceptions import CalculationError

__all__ = [
    "log_timing",
    "elapsed_ms",
    "ensure_finite",
    "year_fraction",
    "put_call_parity_rhs",
]


@contextmanager
def log_timing(logger, label: str, enabled: bool) -> Iterator[None]:
    """Log timing for a code block when enabled is True."""
    if not enabled:
        yield
        return
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        logger.debug("Timing %s: %.6fs", label, elapsed)


def elapsed_ms(start: float) -> float:
    """Milliseconds elapsed since a ``time.perf_counter()`` reading."""
    return (time.perf_counter() - start) * 1000.0


def ensure_finite(value: float, label: str, *, model: str | None = None) -> float:
    """Return ``value`` as float, raising CalculationError if it is NaN or infinite."""
    value = float(value)
    if not math.isfinite(value):
        raise CalculationError(f"{label} is not finite ({value})", model=model)
    return value


def year_fraction(days: float, day_count_convention: float) -> float:
    """Convert a day count into years under a days-per-year convention."""
    if day_count_convention <= 0:
        raise ValueError(f"day_count_convention must be positive, got {day_count_convention}")
    return days / day_count_convention


def put_call_parity_rhs(
    *,
    spot: float,
    strike: float,
    time_to_expiry: float,
    interest_rate: float,
) -> float:
    """Right-hand side of put-call parity: C - P = S - K e^{-rT}."""
    return spot - strike * math.exp(-interest_rate * time_to_expiry)
