"""Custom exception hierarchy for the option_pricing library.

All library-specific exceptions inherit from :class:`PricingEngineError`,
enabling callers to catch *any* library error with a single ``except`` clause::

    try:
        result = service.calculate(request)
    except PricingEngineError as exc:
        log.error("Pricing error: %s", exc)
"""

from __future__ import annotations


class PricingEngineError(Exception):
    """Base exception for all library errors."""


# ── Input validation ────────────────────────────────────────────────


class InvalidInputError(PricingEngineError):
    """Invalid input values (missing fields, out-of-range values, unknown range keys, etc.)."""


class ConfigurationError(PricingEngineError):
    """Wrong types passed to a public API (e.g. raw str instead of enum)."""


# ── Numerical issues ────────────────────────────────────────────────


class CalculationError(PricingEngineError):
    """Numerical failure inside a pricing model.

    The originating model identifier is kept on ``model`` for diagnosis.
    """

    def __init__(self, message: str, *, model: str | None = None) -> None:
        self.model = model
        if model is not None:
            message = f"[{model}] {message}"
        super().__init__(message)


class ArbitrageViolationError(CalculationError):
    """Model parameters imply an arbitrage (e.g. risk-neutral probability outside (0, 1))."""


class ConvergenceError(CalculationError):
    """An iterative solver failed to converge within the allowed tolerance / iterations."""
