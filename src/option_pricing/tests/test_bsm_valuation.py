"""Tests for closed-form Black-Scholes valuation."""

import math

import numpy as np
import pytest

from option_pricing.enums import NormalCdfMethod
from option_pricing.exceptions import CalculationError, ConfigurationError
from option_pricing.utils import put_call_parity_rhs
from option_pricing.valuation import BlackScholesParams, EuropeanBlackScholesModel

from option_pricing.tests.helpers import BS_CALL, BS_PUT


class TestEuropeanBlackScholes:
    """Closed-form price and analytical Greeks."""

    def setup_method(self):
        self.model = EuropeanBlackScholesModel()

    def test_atm_call_reference_value(self, atm_inputs, euro_call):
        assert np.isclose(self.model.price(atm_inputs, euro_call), BS_CALL, atol=1e-10)

    def test_atm_put_reference_value(self, atm_inputs, euro_put):
        assert np.isclose(self.model.price(atm_inputs, euro_put), BS_PUT, atol=1e-10)

    @pytest.mark.parametrize("spot", [70.0, 90.0, 100.0, 115.0, 140.0])
    @pytest.mark.parametrize("rate", [0.0, 0.03, 0.08])
    def test_put_call_parity(self, atm_inputs, euro_call, euro_put, spot, rate):
        inputs = atm_inputs.replace(underlying_price=spot, interest_rate=rate)
        call = self.model.calculate(inputs, euro_call).price
        put = self.model.calculate(inputs, euro_put).price
        rhs = put_call_parity_rhs(
            spot=spot, strike=inputs.strike, time_to_expiry=inputs.time_to_expiry, interest_rate=rate
        )
        assert abs((call - put) - rhs) < 1e-6

    def test_analytical_greeks_atm_call(self, atm_inputs, euro_call):
        result = self.model.calculate(atm_inputs, euro_call)
        d1 = 0.35
        d2 = 0.15
        n_d1 = math.exp(-0.5 * d1**2) / math.sqrt(2 * math.pi)
        assert np.isclose(result.delta, 0.636830651175619, atol=1e-9)
        assert np.isclose(result.gamma, n_d1 / (100.0 * 0.2), atol=1e-12)
        assert np.isclose(result.vega, 100.0 * n_d1 * 0.01, atol=1e-12)
        rho = 100.0 * math.exp(-0.05) * 0.5596176923702425 * 0.01
        assert np.isclose(result.rho, rho, atol=1e-9)
        assert result.theta < 0
        assert result.range_variable == 0.0
        assert d2 == pytest.approx(d1 - 0.2)

    def test_put_delta_is_call_delta_minus_one(self, atm_inputs, euro_call, euro_put):
        call = self.model.calculate(atm_inputs, euro_call)
        put = self.model.calculate(atm_inputs, euro_put)
        assert np.isclose(put.delta, call.delta - 1.0)
        assert np.isclose(put.gamma, call.gamma)
        assert np.isclose(put.vega, call.vega)
        assert put.rho < 0 < call.rho

    def test_theta_is_per_day(self, atm_inputs, euro_call):
        per_250 = self.model.calculate(atm_inputs, euro_call).theta
        per_365 = self.model.calculate(
            atm_inputs.replace(day_count_convention=365.0), euro_call
        ).theta
        assert np.isclose(per_250 * 250.0, per_365 * 365.0)

    def test_calculate_is_idempotent(self, atm_inputs, euro_put):
        first = self.model.calculate(atm_inputs, euro_put)
        second = self.model.calculate(atm_inputs, euro_put)
        assert first == second

    def test_call_price_increases_with_volatility(self, atm_inputs, euro_call):
        prices = [
            self.model.price(atm_inputs.replace(volatility=v), euro_call)
            for v in (0.1, 0.2, 0.3, 0.4)
        ]
        assert all(a < b for a, b in zip(prices, prices[1:]))

    def test_zero_time_to_expiry_raises(self, atm_inputs, euro_call):
        with pytest.raises(CalculationError, match="time_to_expiry"):
            self.model.calculate(atm_inputs.replace(time_to_expiry=0.0), euro_call)

    def test_zero_volatility_raises_with_model_id(self, atm_inputs, euro_call):
        with pytest.raises(CalculationError) as excinfo:
            self.model.calculate(atm_inputs.replace(volatility=0.0), euro_call)
        assert excinfo.value.model == "european"

    def test_config_must_be_option_config(self, atm_inputs):
        with pytest.raises(ConfigurationError):
            self.model.calculate(atm_inputs, "call")

    def test_abramowitz_stegun_cdf_close_to_exact(self, atm_inputs, euro_call):
        legacy = EuropeanBlackScholesModel(
            BlackScholesParams(normal_cdf=NormalCdfMethod.ABRAMOWITZ_STEGUN)
        )
        assert np.isclose(legacy.price(atm_inputs, euro_call), BS_CALL, atol=1e-4)

    def test_describe(self, euro_call):
        assert self.model.describe(euro_call) == "European Black-Scholes Model: European Call options"
