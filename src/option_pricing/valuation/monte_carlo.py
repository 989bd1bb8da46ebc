"""Monte Carlo option valuation under geometric Brownian motion."""

from __future__ import annotations

from typing import NamedTuple
import logging
import math

import numpy as np

from ..enums import ModelType
from ..exceptions import CalculationError, ConfigurationError
from ..inputs import MarketInputs
from ..utils import log_timing
from .base import PricingModel
from .greeks import Greeks, central_difference_greeks
from .params import GreekBumpParams, MonteCarloParams, OptionConfig

logger = logging.getLogger(__name__)

# Stream identifiers mixed into the seed so the price and the Greeks draw
# from different, reproducible streams.
_PRICE_STREAM = 0
_GREEKS_STREAM = 1


class MonteCarloEstimate(NamedTuple):
    """Discounted mean payoff with its sample standard error."""

    price: float
    std_error: float
    num_paths: int


def _vanilla_payoff(is_call: bool, strike: float, spot: np.ndarray) -> np.ndarray:
    """Vectorized vanilla payoff: max(S-K,0) for calls, max(K-S,0) for puts."""
    if is_call:
        return np.maximum(spot - strike, 0.0)
    return np.maximum(strike - spot, 0.0)


def _warn_if_high_std_error(
    *,
    estimate: MonteCarloEstimate,
    params: MonteCarloParams,
    label: str,
) -> None:
    """Emit a warning log if MC standard error is high relative to the price."""
    if params.std_error_warn_ratio is None:
        return
    scale = max(abs(estimate.price), 1.0e-12)
    ratio = estimate.std_error / scale
    logger.debug(
        "MC %s std_error=%.6g ratio=%.6g paths=%d",
        label,
        estimate.std_error,
        ratio,
        estimate.num_paths,
    )
    if ratio > params.std_error_warn_ratio:
        logger.warning(
            "MC %s standard error high: std_error=%.6g ratio=%.6g (>%.3g) paths=%d",
            label,
            estimate.std_error,
            ratio,
            params.std_error_warn_ratio,
            estimate.num_paths,
        )


class MonteCarloModel(PricingModel):
    """Single-step terminal-price simulation.

    For each of ``num_paths`` standard normal draws z:

        S_T = S exp((r - sigma^2 / 2) T + sigma sqrt(T) z)

    and the price is the mean of e^(-rT) max(+/-(S_T - K), 0). There is no
    path dependency, so American exercise is valued as European.

    Greeks are central finite differences in which every bumped price is a
    fresh simulation (no common random numbers). Results vary run to run
    unless ``random_seed`` is set.
    """

    model_type = ModelType.MONTE_CARLO

    def __init__(
        self,
        params: MonteCarloParams | None = None,
        bump_params: GreekBumpParams | None = None,
    ) -> None:
        super().__init__(bump_params)
        if params is None:
            params = MonteCarloParams()
        if not isinstance(params, MonteCarloParams):
            raise ConfigurationError(f"{type(self).__name__} requires params=MonteCarloParams")
        self.params = params

    def _generator(self, stream: int) -> np.random.Generator:
        if self.params.random_seed is None:
            return np.random.default_rng()
        return np.random.default_rng([self.params.random_seed, stream])

    def simulate(
        self,
        inputs: MarketInputs,
        config: OptionConfig,
        rng: np.random.Generator | None = None,
    ) -> MonteCarloEstimate:
        """Run one full simulation and return the estimate with its standard error."""
        ttm = inputs.time_to_expiry
        vol = inputs.volatility
        if ttm <= 0 or vol <= 0:
            raise CalculationError(
                f"Monte Carlo requires time_to_expiry > 0 and volatility > 0, "
                f"got {ttm} and {vol}",
                model=self.name,
            )
        if rng is None:
            rng = self._generator(_PRICE_STREAM)

        num_paths = int(self.params.num_paths)
        rate = inputs.interest_rate
        with log_timing(logger, f"MC {config.describe()} simulate", self.params.log_timings):
            z = rng.standard_normal(num_paths)
            drift = (rate - 0.5 * vol * vol) * ttm
            terminal = inputs.underlying_price * np.exp(drift + vol * math.sqrt(ttm) * z)
            discounted = math.exp(-rate * ttm) * _vanilla_payoff(
                config.is_call, inputs.strike, terminal
            )
        estimate = MonteCarloEstimate(
            price=float(np.mean(discounted)),
            std_error=float(np.std(discounted, ddof=1) / math.sqrt(num_paths)),
            num_paths=num_paths,
        )
        _warn_if_high_std_error(estimate=estimate, params=self.params, label=config.describe())
        return estimate

    def price(self, inputs: MarketInputs, config: OptionConfig) -> float:
        if not config.is_european:
            logger.debug("MC values American exercise with the terminal payoff only")
        return self.simulate(inputs, config).price

    def greeks(self, inputs: MarketInputs, config: OptionConfig) -> Greeks:
        # one generator for all bumps: each evaluation consumes fresh draws
        rng = self._generator(_GREEKS_STREAM)
        return central_difference_greeks(
            lambda bumped: self.simulate(bumped, config, rng).price,
            inputs,
            self.bump_params,
        )

    def describe(self, config: OptionConfig | None = None) -> str:
        if config is None:
            return (
                f"Monte Carlo Option Model: GBM terminal simulation with "
                f"{self.params.num_paths} simulations"
            )
        return (
            f"Monte Carlo Option Model: {config.describe()} options "
            f"with {self.params.num_paths} simulations"
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(num_paths={self.params.num_paths})"
