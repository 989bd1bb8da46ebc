import threading
import time

from option_pricing.enums import ModelType
from option_pricing.exceptions import CalculationError
from option_pricing.valuation.base import PricingModel
from option_pricing.valuation.greeks import Greeks

# ATM market used across the tests
SPOT = 100.0
STRIKE = 100.0
RATE = 0.05
VOL = 0.20
TTM = 1.0
DAY_COUNT = 250.0

# Black-Scholes reference values for the ATM option above
BS_CALL = 10.450583572185565
BS_PUT = 5.573526022256971


class SpotEchoModel(PricingModel):
    """Test model whose price is the underlying price.

    ``delay`` maps the underlying price to a sleep in seconds, so tests can
    force tasks to complete out of grid order. ``fail_at`` makes the
    valuation at that underlying price raise CalculationError.
    """

    model_type = ModelType.EUROPEAN_BLACK_SCHOLES

    def __init__(self, delay=None, fail_at=None):
        super().__init__()
        self.delay = delay
        self.fail_at = fail_at
        self.completed = []
        self._lock = threading.Lock()

    def price(self, inputs, config):
        spot = inputs.underlying_price
        if self.delay is not None:
            time.sleep(self.delay(spot))
        if self.fail_at is not None and spot == self.fail_at:
            raise CalculationError(f"forced failure at {spot}", model=self.name)
        with self._lock:
            self.completed.append(spot)
        return spot

    def greeks(self, inputs, config):
        return Greeks(delta=1.0, gamma=0.0, vega=0.0, theta=0.0, rho=0.0)

    def describe(self, config=None):
        return "Spot echo test model"


class FixedModelRegistry:
    """Registry stand-in that returns one model for every identifier."""

    def __init__(self, model):
        self.model = model

    def get(self, identifier=None):
        return self.model
