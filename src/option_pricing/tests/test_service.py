"""Tests for request parsing, model selection and the pricing service."""

import logging

import numpy as np
import pytest

from option_pricing.config import EngineSettings
from option_pricing.enums import ModelType
from option_pricing.exceptions import CalculationError, InvalidInputError
from option_pricing.performance import PerformanceTracker
from option_pricing.service import PricingRequest, PricingService, RangeRequest
from option_pricing.valuation import (
    AmericanBlackScholesModel,
    BinomialTreeModel,
    EuropeanBlackScholesModel,
    ModelRegistry,
    MonteCarloModel,
)

from option_pricing.tests.helpers import BS_CALL, FixedModelRegistry, SpotEchoModel


class TestModelRegistry:
    def setup_method(self):
        self.registry = ModelRegistry()

    @pytest.mark.parametrize(
        "identifier, expected",
        [
            ("european", EuropeanBlackScholesModel),
            ("Black_Scholes", EuropeanBlackScholesModel),
            ("  AMERICAN ", AmericanBlackScholesModel),
            ("american_black_scholes", AmericanBlackScholesModel),
            ("binomial", BinomialTreeModel),
            ("Binomial_Tree", BinomialTreeModel),
            ("monte_carlo", MonteCarloModel),
            ("MONTE_CARLO_SIMULATION", MonteCarloModel),
            (None, EuropeanBlackScholesModel),
            ("", EuropeanBlackScholesModel),
            (ModelType.BINOMIAL, BinomialTreeModel),
        ],
    )
    def test_resolves_identifiers(self, identifier, expected):
        assert isinstance(self.registry.get(identifier), expected)

    def test_same_instance_is_shared(self):
        assert self.registry.get("binomial") is self.registry.get("binomial_tree")
        assert len(self.registry) == 4

    def test_unknown_identifier_falls_back_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="option_pricing.valuation.registry"):
            model = self.registry.get("heston")
        assert isinstance(model, EuropeanBlackScholesModel)
        assert "heston" in caplog.text

    def test_absent_identifier_does_not_warn(self, caplog):
        with caplog.at_level(logging.WARNING, logger="option_pricing.valuation.registry"):
            self.registry.get(None)
        assert caplog.records == []


class TestPricingRequest:
    def test_time_to_expiry_in_years(self, atm_request):
        assert atm_request.time_to_expiry_in_years == pytest.approx(1.0)

    @pytest.mark.parametrize(
        "field, value",
        [
            ("strike", 0.0),
            ("volatility", -1.0),
            ("underlying_price", 0.0),
            ("day_count_convention", 0.0),
            ("days_to_expiry", -1.0),
            ("interest_rate", float("nan")),
            ("is_call", None),
        ],
    )
    def test_validate_rejects(self, atm_request, field, value):
        from dataclasses import replace

        with pytest.raises(InvalidInputError, match=field):
            replace(atm_request, **{field: value}).validate()

    def test_non_string_model_type_rejected(self, atm_request):
        from dataclasses import replace

        with pytest.raises(InvalidInputError, match="model_type"):
            replace(atm_request, model_type=1).validate()

    def test_model_key(self, atm_request):
        from dataclasses import replace

        assert atm_request.model_key == "default"
        assert replace(atm_request, model_type=" Binomial ").model_key == "binomial"
        assert replace(atm_request, model_type=ModelType.MONTE_CARLO).model_key == "monte_carlo"

    def test_zero_days_to_expiry_is_valid(self, atm_request):
        from dataclasses import replace

        replace(atm_request, days_to_expiry=0.0).validate()

    def test_from_dict_accepts_wire_names(self):
        request = PricingRequest.from_dict(
            {
                "strike": 100,
                "volatility": 20,
                "underlyingPrice": 105,
                "daysToExpiry": 125,
                "interestRate": 5,
                "isCall": False,
                "isEuropean": True,
                "modelType": "binomial",
            }
        )
        assert request.underlying_price == 105.0
        assert request.is_call is False
        assert request.day_count_convention == 250.0
        assert request.time_to_expiry_in_years == pytest.approx(0.5)
        assert request.model_type == "binomial"

    def test_from_dict_missing_field(self):
        with pytest.raises(InvalidInputError, match="underlying_price"):
            PricingRequest.from_dict(
                {
                    "strike": 100,
                    "volatility": 20,
                    "daysToExpiry": 125,
                    "interestRate": 5,
                    "isCall": True,
                    "isEuropean": True,
                }
            )


class TestRangeRequest:
    @pytest.mark.parametrize(
        "range_key, start, end, increment",
        [
            ("", 90, 110, 5),
            ("dividendYield", 90, 110, 5),
            ("underlyingPrice", 110, 90, 5),
            ("underlyingPrice", 90, 110, 0),
        ],
    )
    def test_validate_rejects(self, atm_request, range_key, start, end, increment):
        request = RangeRequest(atm_request, range_key, start, end, increment)
        with pytest.raises(InvalidInputError):
            request.validate()

    def test_from_dict(self):
        request = RangeRequest.from_dict(
            {
                "strike": 100,
                "volatility": 20,
                "underlyingPrice": 100,
                "daysToExpiry": 250,
                "interestRate": 5,
                "isCall": True,
                "isEuropean": True,
                "rangeKey": "underlyingPrice",
                "startValue": 90,
                "endValue": 110,
                "increment": 5,
            }
        )
        request.validate()
        assert request.range_key == "underlyingPrice"
        assert request.base_request.strike == 100.0


class TestPricingService:
    def setup_method(self):
        self.tracker = PerformanceTracker()
        self.service = PricingService(tracker=self.tracker, settings=EngineSettings(max_workers=4))

    def teardown_method(self):
        self.service.shutdown()

    def test_percent_inputs_converted_once(self, atm_request):
        inputs = self.service.build_inputs(atm_request)
        assert inputs.volatility == pytest.approx(0.2)
        assert inputs.interest_rate == pytest.approx(0.05)
        assert inputs.time_to_expiry == pytest.approx(1.0)
        assert np.isclose(self.service.calculate(atm_request).price, BS_CALL, atol=1e-9)

    def test_unknown_model_falls_back_to_european(self, atm_request, caplog):
        from dataclasses import replace

        request = replace(atm_request, model_type="heston")
        with caplog.at_level(logging.WARNING):
            result = self.service.calculate(request)
        assert np.isclose(result.price, BS_CALL, atol=1e-9)
        assert "Unrecognised model type" in caplog.text

    def test_single_calculation_recorded(self, atm_request):
        self.service.calculate(atm_request)
        snapshot = self.tracker.snapshot()
        assert snapshot["totalSingleCalculations"] == 1
        assert snapshot["totalRangeCalculations"] == 0
        assert "default" in snapshot["modelPerformance"]

    def test_non_string_model_type_is_not_priced(self, atm_request):
        from dataclasses import replace

        with pytest.raises(InvalidInputError, match="model_type"):
            self.service.calculate(replace(atm_request, model_type=1))
        assert self.tracker.snapshot()["totalSingleCalculations"] == 0

    def test_model_type_enum_is_recorded_by_value(self, atm_request):
        from dataclasses import replace

        self.service.calculate(replace(atm_request, model_type=ModelType.BINOMIAL))
        assert "binomial" in self.tracker.snapshot()["modelPerformance"]

    def test_invalid_request_raises_before_pricing(self, atm_request):
        from dataclasses import replace

        with pytest.raises(InvalidInputError):
            self.service.calculate(replace(atm_request, strike=-1.0))
        assert self.tracker.snapshot()["totalSingleCalculations"] == 0

    def test_expired_option_raises_calculation_error(self, atm_request):
        from dataclasses import replace

        with pytest.raises(CalculationError):
            self.service.calculate(replace(atm_request, days_to_expiry=0.0))

    def test_range_over_spot(self, atm_request):
        from dataclasses import replace

        request = RangeRequest(
            replace(atm_request, model_type="Binomial"), "underlyingPrice", 90, 110, 5
        )
        result_set = self.service.calculate_range(request)
        assert result_set.range_variables() == [90.0, 95.0, 100.0, 105.0, 110.0]
        snapshot = self.tracker.snapshot()
        assert snapshot["totalRangeCalculations"] == 1
        assert "binomial" in snapshot["modelPerformance"]
        assert snapshot["minExecutionTimeMs"] <= snapshot["maxExecutionTimeMs"]

    def test_range_over_volatility_in_percent(self, atm_request):
        result_set = self.service.calculate_range(
            RangeRequest(atm_request, "volatility", 10, 30, 10)
        )
        assert result_set.range_variables() == [10.0, 20.0, 30.0]
        assert np.isclose(result_set[1].price, BS_CALL, atol=1e-9)

    def test_range_over_days_to_expiry(self, atm_request):
        result_set = self.service.calculate_range(
            RangeRequest(atm_request, "daysToExpiry", 125, 250, 125)
        )
        assert result_set.range_variables() == [125.0, 250.0]
        assert np.isclose(result_set[1].price, BS_CALL, atol=1e-9)
        assert result_set[0].price < result_set[1].price

    def test_non_library_errors_are_wrapped(self, atm_request):
        class BrokenModel(SpotEchoModel):
            def price(self, inputs, config):
                raise RuntimeError("boom")

        service = PricingService(
            registry=FixedModelRegistry(BrokenModel()), executor=self.service.executor
        )
        with pytest.raises(CalculationError, match="boom") as excinfo:
            service.calculate(atm_request)
        assert excinfo.value.model == "european"

    def test_model_details(self):
        assert self.service.model_details("binomial", is_call=False, is_european=False) == (
            "Binomial Tree Option Model: American Put options with 1000 steps"
        )

    def test_parse_request_uses_default_day_count(self):
        service = PricingService(
            executor=self.service.executor, settings=EngineSettings(default_day_count=365.0)
        )
        request = service.parse_request(
            {
                "strike": 100,
                "volatility": 20,
                "underlyingPrice": 100,
                "daysToExpiry": 365,
                "interestRate": 5,
                "isCall": True,
                "isEuropean": True,
            }
        )
        assert request.day_count_convention == 365.0
        assert request.time_to_expiry_in_years == pytest.approx(1.0)


def test_from_settings_builds_shared_components(atm_request):
    service = PricingService.from_settings(EngineSettings(max_workers=2, log_range_calculations=True))
    try:
        result_set = service.calculate_range(RangeRequest(atm_request, "strike", 90, 110, 10))
        assert result_set.total_count == 3
        assert service.executor._max_workers == 2
        assert isinstance(service.registry, ModelRegistry)
    finally:
        service.shutdown()
