"""American option valuation via the Barone-Adesi-Whaley (1987) approximation.

Without dividends early exercise of a call is never optimal, so American
calls reuse the European Black-Scholes price and closed-form Greeks.

American puts add an early-exercise premium to the European put:

    P(S) = P_eur(S) + A1 (S / S**)^q1    if S > S**
    P(S) = K - S                         if S <= S**

with

    M    = 2 r / sigma^2
    K(T) = 1 - e^(-rT)
    q1   = (-(M - 1) - sqrt((M - 1)^2 + 4 M / K(T))) / 2
    A1   = -(S** / q1) (1 - N(-d1(S**)))

where the critical price S** solves

    K - S** = P_eur(S**) - (1 - N(-d1(S**))) S** / q1

by Newton iteration, falling back to bisection whenever a step leaves
(0, K). The early-exercise boundary has no closed-form sensitivity, so put
Greeks are central finite differences on the American price. They cost
roughly five times as much as call Greeks.
"""

from __future__ import annotations

import logging
import math

from ..enums import ModelType
from ..exceptions import CalculationError, ConfigurationError, ConvergenceError
from ..inputs import MarketInputs
from .base import PricingModel
from .bsm import EuropeanBlackScholesModel
from .greeks import Greeks, central_difference_greeks
from .normal import norm_pdf
from .params import AmericanParams, BlackScholesParams, GreekBumpParams, OptionConfig

logger = logging.getLogger(__name__)


def _put_exponent(rate: float, vol: float, ttm: float) -> float:
    """Negative root q1 of the Barone-Adesi-Whaley characteristic equation."""
    m = 2.0 * rate / (vol * vol)
    k_t = 1.0 - math.exp(-rate * ttm)
    return (-(m - 1.0) - math.sqrt((m - 1.0) ** 2 + 4.0 * m / k_t)) / 2.0


class AmericanBlackScholesModel(PricingModel):
    """Barone-Adesi-Whaley American valuation for a non-dividend underlying."""

    model_type = ModelType.AMERICAN_BLACK_SCHOLES

    def __init__(
        self,
        params: AmericanParams | None = None,
        bs_params: BlackScholesParams | None = None,
        bump_params: GreekBumpParams | None = None,
    ) -> None:
        super().__init__(bump_params)
        if params is None:
            params = AmericanParams()
        if not isinstance(params, AmericanParams):
            raise ConfigurationError(f"{type(self).__name__} requires params=AmericanParams")
        self.params = params
        self._european = EuropeanBlackScholesModel(bs_params, bump_params)

    def price(self, inputs: MarketInputs, config: OptionConfig) -> float:
        if config.is_call:
            return self._european.price(inputs, config)
        return self._american_put_price(inputs)

    def greeks(self, inputs: MarketInputs, config: OptionConfig) -> Greeks:
        if config.is_call:
            return self._european.greeks(inputs, config)
        if inputs.time_to_expiry <= 0:
            raise CalculationError(
                "American put Greeks are undefined at time_to_expiry <= 0",
                model=self.name,
            )
        return central_difference_greeks(
            self._american_put_price, inputs, self.bump_params
        )

    def critical_price(self, inputs: MarketInputs) -> float:
        """Early-exercise boundary S** for the put: exercise when S <= S**."""
        strike = inputs.strike
        vol = inputs.volatility
        ttm = inputs.time_to_expiry
        rate = inputs.interest_rate
        if rate <= 0 or ttm <= 0:
            raise CalculationError(
                "Early-exercise boundary requires interest_rate > 0 and time_to_expiry > 0",
                model=self.name,
            )

        vol_sq = vol * vol
        m = 2.0 * rate / vol_sq
        q1 = _put_exponent(rate, vol, ttm)

        # seed from the perpetual (T -> inf) boundary
        q1_inf = (-(m - 1.0) - math.sqrt((m - 1.0) ** 2 + 4.0 * m)) / 2.0
        s_inf = strike / (1.0 - 1.0 / q1_inf)
        h1 = (rate * ttm - 2.0 * vol * math.sqrt(ttm)) * strike / (strike - s_inf)
        s_i = s_inf + (strike - s_inf) * math.exp(min(h1, 0.0))

        vol_sqrt_t = vol * math.sqrt(ttm)
        put_config = OptionConfig(option_type="put")
        # lhs - rhs is positive near zero and negative at the strike
        lower, upper = 0.0, strike
        if not lower < s_i < upper:
            s_i = 0.5 * strike
        for iteration in range(self.params.max_iterations):
            d1 = (math.log(s_i / strike) + (rate + 0.5 * vol_sq) * ttm) / vol_sqrt_t
            cdf_minus_d1 = float(self._european.cdf(-d1))
            european_put = self._european.price(inputs.replace(underlying_price=s_i), put_config)
            rhs = european_put - (1.0 - cdf_minus_d1) * s_i / q1
            lhs = strike - s_i
            if abs(lhs - rhs) / strike <= self.params.tolerance:
                logger.debug("BAW critical price %.8f after %d iterations", s_i, iteration)
                return s_i
            if lhs > rhs:
                lower = s_i
            else:
                upper = s_i
            slope = -cdf_minus_d1 * (1.0 - 1.0 / q1) - (
                1.0 + float(norm_pdf(-d1)) / vol_sqrt_t
            ) / q1
            candidate = (strike - rhs + slope * s_i) / (1.0 + slope)
            if not (math.isfinite(candidate) and lower < candidate < upper):
                # Newton step left the bracket: bisect instead
                candidate = 0.5 * (lower + upper)
            s_i = candidate

        raise ConvergenceError(
            f"Critical price did not converge in {self.params.max_iterations} iterations",
            model=self.name,
        )

    def _american_put_price(self, inputs: MarketInputs) -> float:
        spot = inputs.underlying_price
        strike = inputs.strike
        if inputs.time_to_expiry <= 0:
            return max(strike - spot, 0.0)

        put_config = OptionConfig(option_type="put")
        european_put = self._european.price(inputs, put_config)

        rate = inputs.interest_rate
        if rate <= 0:
            # no early-exercise premium without a positive carry on the strike
            return european_put

        s_star = self.critical_price(inputs)
        if spot <= s_star:
            return strike - spot

        vol = inputs.volatility
        ttm = inputs.time_to_expiry
        q1 = _put_exponent(rate, vol, ttm)
        d1_star = (math.log(s_star / strike) + (rate + 0.5 * vol * vol) * ttm) / (
            vol * math.sqrt(ttm)
        )
        a1 = -(s_star / q1) * (1.0 - float(self._european.cdf(-d1_star)))
        return european_put + a1 * (spot / s_star) ** q1

    def describe(self, config: OptionConfig | None = None) -> str:
        if config is None:
            return "American Black-Scholes Model: Barone-Adesi-Whaley early exercise approximation"
        return (
            f"American Black-Scholes Model: {config.describe()} options "
            "with early exercise capability"
        )
