"""Valuation of European and American options using the binomial option pricing model of
Cox-Ross-Rubinstein
"""

from __future__ import annotations

import logging
import math

import numpy as np

from ..enums import ModelType
from ..exceptions import ArbitrageViolationError, CalculationError, ConfigurationError
from ..inputs import MarketInputs
from ..utils import log_timing
from .base import PricingModel
from .params import BinomialParams, GreekBumpParams, OptionConfig

logger = logging.getLogger(__name__)


class BinomialTreeModel(PricingModel):
    """CRR lattice with European or American exercise.

    All five Greeks are central finite differences on fully re-priced
    lattices, so each Greek costs two or three tree evaluations.
    """

    model_type = ModelType.BINOMIAL

    def __init__(
        self,
        params: BinomialParams | None = None,
        bump_params: GreekBumpParams | None = None,
    ) -> None:
        super().__init__(bump_params)
        if params is None:
            params = BinomialParams()
        if not isinstance(params, BinomialParams):
            raise ConfigurationError(f"{type(self).__name__} requires params=BinomialParams")
        self.params = params

    def _setup_binomial_parameters(
        self, inputs: MarketInputs, num_steps: int
    ) -> tuple[float, float, float, float]:
        """Return (up, down, p, per-step discount factor) for the lattice.

        Parameters
        ==========
        inputs: MarketInputs
            market inputs of the valuation
        num_steps: int
            number of steps in the binomial tree
        """
        ttm = inputs.time_to_expiry
        vol = inputs.volatility
        if ttm <= 0 or vol <= 0:
            raise CalculationError(
                f"Binomial tree requires time_to_expiry > 0 and volatility > 0, "
                f"got {ttm} and {vol}",
                model=self.name,
            )
        delta_t = ttm / num_steps
        u = math.exp(vol * math.sqrt(delta_t))
        d = 1.0 / u
        growth = math.exp(inputs.interest_rate * delta_t)
        if not (d < growth < u):
            raise ArbitrageViolationError(
                "Arbitrage condition violated: d < exp(r*dt) < u "
                f"(d={d:.6g}, growth={growth:.6g}, u={u:.6g}); try more steps",
                model=self.name,
            )
        p = (growth - d) / (u - d)
        return u, d, p, math.exp(-inputs.interest_rate * delta_t)

    def _get_intrinsic_values(
        self, spot: np.ndarray, strike: float, config: OptionConfig
    ) -> np.ndarray:
        if config.is_call:
            return np.maximum(spot - strike, 0.0)
        return np.maximum(strike - spot, 0.0)

    def tree_price(self, inputs: MarketInputs, config: OptionConfig) -> float:
        """Root value of the lattice after backward induction.

        Node ``i`` at step ``t`` holds S * u^(t-i) * d^i, so row 0 is the
        all-up path.
        """
        num_steps = int(self.params.num_steps)
        u, d, p, discount = self._setup_binomial_parameters(inputs, num_steps)
        spot = inputs.underlying_price
        strike = inputs.strike
        american = not config.is_european

        i_idx = np.arange(num_steps + 1)
        terminal_spot = spot * u ** (num_steps - i_idx) * d**i_idx
        values = self._get_intrinsic_values(terminal_spot, strike, config)

        # Backward induction (continuation = disc * (p * up + (1 - p) * down))
        for t in range(num_steps - 1, -1, -1):
            values = discount * (p * values[: t + 1] + (1.0 - p) * values[1 : t + 2])
            if american:
                j = i_idx[: t + 1]
                node_spot = spot * u ** (t - j) * d**j
                values = np.maximum(values, self._get_intrinsic_values(node_spot, strike, config))

        return float(values[0])

    def price(self, inputs: MarketInputs, config: OptionConfig) -> float:
        logger.debug(
            "Binomial %s num_steps=%d", config.describe(), self.params.num_steps
        )
        with log_timing(logger, f"Binomial {config.describe()} price", self.params.log_timings):
            return self.tree_price(inputs, config)

    def describe(self, config: OptionConfig | None = None) -> str:
        if config is None:
            return f"Binomial Tree Option Model: CRR lattice with {self.params.num_steps} steps"
        return (
            f"Binomial Tree Option Model: {config.describe()} options "
            f"with {self.params.num_steps} steps"
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(num_steps={self.params.num_steps})"
