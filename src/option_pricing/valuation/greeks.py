"""Bump-and-revalue Greeks shared by the numerical models.

Every Greek is a central finite difference on full re-valuations of the
model's own price function. Units follow the closed-form Black-Scholes
conventions so results from different models are comparable:

- delta, gamma: per unit of underlying price
- vega, rho: per 1 percentage point change in volatility / rate
- theta: per day (-dV/dT divided by the day-count convention)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import NamedTuple

from ..inputs import MarketInputs
from .params import GreekBumpParams

__all__ = ["Greeks", "central_difference_greeks"]

PriceFn = Callable[[MarketInputs], float]


class Greeks(NamedTuple):
    delta: float
    gamma: float
    vega: float
    theta: float
    rho: float


def _positive_bump(value: float, bump: GreekBumpParams) -> float:
    # keep value - h strictly positive for inputs that must stay > 0
    return min(bump.bump_for(value), 0.5 * value)


def delta_gamma(price_fn: PriceFn, inputs: MarketInputs, bump: GreekBumpParams) -> tuple[float, float]:
    spot = inputs.underlying_price
    h = _positive_bump(spot, bump)
    up = inputs.replace(underlying_price=spot + h)
    down = inputs.replace(underlying_price=spot - h)

    value_right = price_fn(up)
    value_left = price_fn(down)
    value_center = price_fn(inputs)

    delta = (value_right - value_left) / (2 * h)
    gamma = (value_right - 2 * value_center + value_left) / (h**2)
    return delta, gamma


def vega(price_fn: PriceFn, inputs: MarketInputs, bump: GreekBumpParams) -> float:
    vol = inputs.volatility
    h = _positive_bump(vol, bump)
    value_up = price_fn(inputs.replace(volatility=vol + h))
    value_down = price_fn(inputs.replace(volatility=vol - h))
    return (value_up - value_down) / (2 * h) * 0.01


def rho(price_fn: PriceFn, inputs: MarketInputs, bump: GreekBumpParams) -> float:
    rate = inputs.interest_rate
    h = bump.bump_for(rate)
    value_up = price_fn(inputs.replace(interest_rate=rate + h))
    value_down = price_fn(inputs.replace(interest_rate=rate - h))
    return (value_up - value_down) / (2 * h) * 0.01


def theta(price_fn: PriceFn, inputs: MarketInputs, bump: GreekBumpParams) -> float:
    ttm = inputs.time_to_expiry
    h = _positive_bump(ttm, bump)
    value_longer = price_fn(inputs.replace(time_to_expiry=ttm + h))
    value_shorter = price_fn(inputs.replace(time_to_expiry=ttm - h))
    # value lost as expiry approaches, per day
    return -(value_longer - value_shorter) / (2 * h) / inputs.day_count_convention


def central_difference_greeks(
    price_fn: PriceFn,
    inputs: MarketInputs,
    bump: GreekBumpParams | None = None,
) -> Greeks:
    """Compute all five Greeks by central differences on ``price_fn``.

    Costs nine price evaluations: the centre and two spot bumps shared by
    delta and gamma, then two each for vega, rho and theta.
    """
    if bump is None:
        bump = GreekBumpParams()
    d, g = delta_gamma(price_fn, inputs, bump)
    return Greeks(
        delta=d,
        gamma=g,
        vega=vega(price_fn, inputs, bump),
        theta=theta(price_fn, inputs, bump),
        rho=rho(price_fn, inputs, bump),
    )
