"""Shared contract for all pricing models."""

from __future__ import annotations

from abc import ABC, abstractmethod
from concurrent.futures import Executor
import logging

import numpy as np

from ..enums import InputField, ModelType
from ..exceptions import CalculationError, ConfigurationError, PricingEngineError
from ..inputs import MarketInputs
from ..utils import ensure_finite
from .greeks import Greeks, central_difference_greeks
from .params import GreekBumpParams, OptionConfig
from .results import ResultSet, ValuationResult

logger = logging.getLogger(__name__)


class PricingModel(ABC):
    """Base class for the interchangeable pricing models.

    A model instance holds only immutable parameters. Call/put and exercise
    style travel with each call in an :class:`OptionConfig`, so one instance
    can serve concurrent range tasks.

    Methods
    =======
    price:
        Option price only.
    greeks:
        Delta, gamma, vega, theta and rho. Defaults to central finite
        differences on ``price``; closed-form models override it.
    calculate:
        Price and Greeks as a :class:`ValuationResult`.
    calculate_range:
        Sweep one input over a grid and merge the results into a ResultSet.
    describe:
        Human-readable model details.
    """

    model_type: ModelType

    def __init__(self, bump_params: GreekBumpParams | None = None) -> None:
        if bump_params is None:
            bump_params = GreekBumpParams()
        if not isinstance(bump_params, GreekBumpParams):
            raise ConfigurationError("bump_params must be GreekBumpParams")
        self.bump_params = bump_params

    @property
    def name(self) -> str:
        return self.model_type.value

    @abstractmethod
    def price(self, inputs: MarketInputs, config: OptionConfig) -> float:
        """Return the option price for ``inputs``."""

    def greeks(self, inputs: MarketInputs, config: OptionConfig) -> Greeks:
        return central_difference_greeks(
            lambda bumped: self.price(bumped, config), inputs, self.bump_params
        )

    @abstractmethod
    def describe(self, config: OptionConfig | None = None) -> str:
        """Return a human-readable description of the model."""

    def calculate(
        self,
        inputs: MarketInputs,
        config: OptionConfig,
        *,
        log_calculation: bool = False,
    ) -> ValuationResult:
        """Price the option and compute its five Greeks.

        Raises
        ======
        CalculationError
            if any computed quantity is not finite or the arithmetic fails
            (e.g. zero volatility or zero time to expiry in a closed form).
        """
        if not isinstance(config, OptionConfig):
            raise ConfigurationError(
                f"config must be OptionConfig, got {type(config).__name__}"
            )
        if log_calculation:
            logger.info(
                "Calculating %s (%s) volatility=%s interest_rate=%s strike=%s "
                "underlying_price=%s time_to_expiry=%s",
                self.name,
                config.describe(),
                inputs.volatility,
                inputs.interest_rate,
                inputs.strike,
                inputs.underlying_price,
                inputs.time_to_expiry,
            )

        try:
            with np.errstate(divide="raise", invalid="raise"):
                price = self.price(inputs, config)
                greeks = self.greeks(inputs, config)
        except PricingEngineError:
            raise
        except (ArithmeticError, ValueError) as exc:
            raise CalculationError(f"{type(exc).__name__}: {exc}", model=self.name) from exc

        return ValuationResult(
            price=ensure_finite(price, "price", model=self.name),
            delta=ensure_finite(greeks.delta, "delta", model=self.name),
            gamma=ensure_finite(greeks.gamma, "gamma", model=self.name),
            vega=ensure_finite(greeks.vega, "vega", model=self.name),
            theta=ensure_finite(greeks.theta, "theta", model=self.name),
            rho=ensure_finite(greeks.rho, "rho", model=self.name),
        )

    def calculate_range(
        self,
        result_set: ResultSet,
        inputs: MarketInputs,
        config: OptionConfig,
        range_key: InputField | str,
        start_value: float,
        end_value: float,
        increment: float,
        *,
        executor: Executor | None = None,
        log_calculations: bool = False,
    ) -> None:
        """Sweep ``range_key`` over [start_value, end_value] and merge into ``result_set``.

        Without an ``executor`` a private worker pool is created for this call.
        """
        from .range_calculation import RangeCalculator, create_executor

        if executor is not None:
            RangeCalculator(executor).run(
                self,
                inputs,
                config,
                range_key,
                start_value,
                end_value,
                increment,
                result_set=result_set,
                log_calculations=log_calculations,
            )
            return

        with create_executor() as private_executor:
            RangeCalculator(private_executor).run(
                self,
                inputs,
                config,
                range_key,
                start_value,
                end_value,
                increment,
                result_set=result_set,
                log_calculations=log_calculations,
            )

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
