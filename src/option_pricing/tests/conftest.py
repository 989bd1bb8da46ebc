"""Shared pytest fixtures for option_pricing tests."""

import pytest

from option_pricing.enums import ExerciseType, OptionType
from option_pricing.inputs import MarketInputs
from option_pricing.service import PricingRequest
from option_pricing.valuation import OptionConfig, create_executor

from option_pricing.tests.helpers import DAY_COUNT, RATE, SPOT, STRIKE, TTM, VOL


@pytest.fixture()
def atm_inputs() -> MarketInputs:
    return MarketInputs(
        strike=STRIKE,
        volatility=VOL,
        underlying_price=SPOT,
        time_to_expiry=TTM,
        interest_rate=RATE,
        day_count_convention=DAY_COUNT,
    )


# ---------------------------------------------------------------------------
# Option configs
# ---------------------------------------------------------------------------


@pytest.fixture()
def euro_call() -> OptionConfig:
    return OptionConfig(option_type=OptionType.CALL, exercise_type=ExerciseType.EUROPEAN)


@pytest.fixture()
def euro_put() -> OptionConfig:
    return OptionConfig(option_type=OptionType.PUT, exercise_type=ExerciseType.EUROPEAN)


@pytest.fixture()
def american_call() -> OptionConfig:
    return OptionConfig(option_type=OptionType.CALL, exercise_type=ExerciseType.AMERICAN)


@pytest.fixture()
def american_put() -> OptionConfig:
    return OptionConfig(option_type=OptionType.PUT, exercise_type=ExerciseType.AMERICAN)


# ---------------------------------------------------------------------------
# Requests / worker pool
# ---------------------------------------------------------------------------


@pytest.fixture()
def atm_request() -> PricingRequest:
    """ATM European call with percent volatility and rate, one year to expiry."""
    return PricingRequest(
        strike=STRIKE,
        volatility=VOL * 100,
        underlying_price=SPOT,
        days_to_expiry=DAY_COUNT,
        interest_rate=RATE * 100,
        is_call=True,
        is_european=True,
        day_count_convention=DAY_COUNT,
    )


@pytest.fixture()
def executor():
    pool = create_executor(max_workers=8)
    yield pool
    pool.shutdown(wait=True)
