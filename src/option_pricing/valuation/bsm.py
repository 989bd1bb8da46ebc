"""Black-Scholes European option valuation (non-dividend underlying)."""

from __future__ import annotations

from typing import NamedTuple
import math

from ..enums import ModelType
from ..exceptions import CalculationError, ConfigurationError
from ..inputs import MarketInputs
from .base import PricingModel
from .greeks import Greeks
from .normal import norm_cdf, norm_pdf
from .params import BlackScholesParams, GreekBumpParams, OptionConfig


class _BSInputs(NamedTuple):
    """Pre-computed inputs shared across all Black-Scholes Greek calculations."""

    spot: float
    strike: float
    volatility: float
    time_to_expiry: float
    rate: float
    discount_factor: float
    d1: float
    d2: float


class EuropeanBlackScholesModel(PricingModel):
    """Closed-form Black-Scholes valuation with analytical Greeks.

    Preconditions: ``time_to_expiry > 0`` and ``volatility > 0``. Both appear
    in the denominator of d1; a violation raises CalculationError rather than
    returning a limiting value.
    """

    model_type = ModelType.EUROPEAN_BLACK_SCHOLES

    def __init__(
        self,
        params: BlackScholesParams | None = None,
        bump_params: GreekBumpParams | None = None,
    ) -> None:
        super().__init__(bump_params)
        if params is None:
            params = BlackScholesParams()
        if not isinstance(params, BlackScholesParams):
            raise ConfigurationError(
                f"{type(self).__name__} requires params=BlackScholesParams"
            )
        self.params = params

    def cdf(self, x: float) -> float:
        return float(norm_cdf(x, self.params.normal_cdf))

    def _bs_inputs(self, inputs: MarketInputs) -> _BSInputs:
        """Compute d1, d2 and the discount factor in one place."""
        spot = inputs.underlying_price
        strike = inputs.strike
        vol = inputs.volatility
        ttm = inputs.time_to_expiry
        rate = inputs.interest_rate

        if ttm <= 0:
            raise CalculationError(
                f"time_to_expiry must be positive for Black-Scholes, got {ttm}",
                model=self.name,
            )
        if vol <= 0:
            raise CalculationError(
                f"volatility must be positive for Black-Scholes, got {vol}",
                model=self.name,
            )
        if spot <= 0 or strike <= 0:
            raise CalculationError(
                f"underlying_price and strike must be positive, got {spot} and {strike}",
                model=self.name,
            )

        vol_sqrt_t = vol * math.sqrt(ttm)
        d1 = (math.log(spot / strike) + (rate + 0.5 * vol**2) * ttm) / vol_sqrt_t
        d2 = d1 - vol_sqrt_t
        return _BSInputs(
            spot=spot,
            strike=strike,
            volatility=vol,
            time_to_expiry=ttm,
            rate=rate,
            discount_factor=math.exp(-rate * ttm),
            d1=d1,
            d2=d2,
        )

    def _price_from(self, inp: _BSInputs, is_call: bool) -> float:
        if is_call:
            return inp.spot * self.cdf(inp.d1) - inp.strike * inp.discount_factor * self.cdf(
                inp.d2
            )
        return inp.strike * inp.discount_factor * self.cdf(-inp.d2) - inp.spot * self.cdf(
            -inp.d1
        )

    def price(self, inputs: MarketInputs, config: OptionConfig) -> float:
        """Black-Scholes price.

        call = S N(d1) - K e^(-rT) N(d2)
        put  = K e^(-rT) N(-d2) - S N(-d1)
        """
        return self._price_from(self._bs_inputs(inputs), config.is_call)

    def greeks(self, inputs: MarketInputs, config: OptionConfig) -> Greeks:
        """Analytical Greeks.

        delta = N(d1) (call) or N(d1) - 1 (put)
        gamma = n(d1) / (S sigma sqrt(T))
        vega  = S n(d1) sqrt(T) / 100
        rho   = +/- K T e^(-rT) N(+/-d2) / 100
        theta = [-S n(d1) sigma / (2 sqrt(T)) -/+ r K e^(-rT) N(+/-d2)] / day_count

        Vega and rho are per 1% point change; theta is per day.
        """
        inp = self._bs_inputs(inputs)
        n_prime_d1 = float(norm_pdf(inp.d1))
        sqrt_t = math.sqrt(inp.time_to_expiry)
        k_disc = inp.strike * inp.discount_factor

        if config.is_call:
            delta = self.cdf(inp.d1)
            rho = k_disc * inp.time_to_expiry * self.cdf(inp.d2) * 0.01
            carry = -inp.rate * k_disc * self.cdf(inp.d2)
        else:
            delta = self.cdf(inp.d1) - 1.0
            rho = -k_disc * inp.time_to_expiry * self.cdf(-inp.d2) * 0.01
            carry = inp.rate * k_disc * self.cdf(-inp.d2)

        gamma = n_prime_d1 / (inp.spot * inp.volatility * sqrt_t)
        vega = inp.spot * n_prime_d1 * sqrt_t * 0.01
        decay = -(inp.spot * n_prime_d1 * inp.volatility) / (2 * sqrt_t)
        theta = (decay + carry) / inputs.day_count_convention

        return Greeks(delta=delta, gamma=gamma, vega=vega, theta=theta, rho=rho)

    def describe(self, config: OptionConfig | None = None) -> str:
        if config is None:
            return "European Black-Scholes Model: closed-form price and Greeks"
        return f"European Black-Scholes Model: {config.describe()} options"
