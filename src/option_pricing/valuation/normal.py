"""Standard normal density and cumulative distribution.

Shared by the closed-form models. ``norm_cdf`` defaults to the exact scipy
implementation; the Abramowitz-Stegun 7.1.26 polynomial is kept for
reproducing legacy figures.
"""

from __future__ import annotations

import numpy as np
from scipy.special import ndtr

from ..enums import NormalCdfMethod

__all__ = ["norm_pdf", "norm_cdf", "norm_cdf_abramowitz_stegun"]

_INV_SQRT_2PI = 1.0 / np.sqrt(2.0 * np.pi)

# Abramowitz & Stegun 7.1.26 coefficients
_AS_P = 0.3275911
_AS_A1 = 0.254829592
_AS_A2 = -0.284496736
_AS_A3 = 1.421413741
_AS_A4 = -1.453152027
_AS_A5 = 1.061405429


def norm_pdf(x: float | np.ndarray) -> float | np.ndarray:
    """Standard normal probability density phi(x)."""
    return _INV_SQRT_2PI * np.exp(-0.5 * np.square(x))


def norm_cdf_abramowitz_stegun(x: float | np.ndarray) -> float | np.ndarray:
    """Polynomial approximation of Phi(x), max abs error 1.5e-7.

    The approximation is applied to |x| and reflected, so
    Phi(x) + Phi(-x) == 1 holds exactly.
    """
    x = np.asarray(x, dtype=float)
    z = np.abs(x) / np.sqrt(2.0)
    t = 1.0 / (1.0 + _AS_P * z)
    poly = ((((_AS_A5 * t + _AS_A4) * t + _AS_A3) * t + _AS_A2) * t + _AS_A1) * t
    erf_abs = 1.0 - poly * np.exp(-z * z)
    result = 0.5 * (1.0 + np.sign(x) * erf_abs)
    # sign(0) == 0 gives exactly 0.5
    return float(result) if result.ndim == 0 else result


def norm_cdf(
    x: float | np.ndarray, method: NormalCdfMethod = NormalCdfMethod.EXACT
) -> float | np.ndarray:
    """Standard normal cumulative distribution Phi(x)."""
    if method is NormalCdfMethod.ABRAMOWITZ_STEGUN:
        return norm_cdf_abramowitz_stegun(x)
    result = ndtr(x)
    return float(result) if np.ndim(result) == 0 else result
