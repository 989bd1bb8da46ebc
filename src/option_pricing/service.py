"""Request-level entry point: validation, model selection and timing.

Requests carry volatility and interest rate in percent (20.0 == 20%).
:meth:`PricingService.build_inputs` converts both to decimals exactly once,
so every model sees decimal inputs. A range sweep over volatility or
interest rate is also given in percent and converted per grid point; the
``range_variable`` of each result keeps the percent value.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from concurrent.futures import Executor
from dataclasses import dataclass
import logging
import math
import time

from .config import EngineSettings
from .enums import InputField, ModelType
from .exceptions import CalculationError, InvalidInputError, PricingEngineError
from .inputs import DEFAULT_DAY_COUNT, MarketInputs
from .performance import PerformanceTracker
from .utils import elapsed_ms, year_fraction
from .valuation.params import OptionConfig
from .valuation.range_calculation import RangeCalculator, create_executor
from .valuation.registry import ModelRegistry
from .valuation.results import ResultSet, ValuationResult

logger = logging.getLogger(__name__)

__all__ = ["PricingRequest", "RangeRequest", "PricingService"]

DEFAULT_MODEL_KEY = "default"

_PERCENT_FIELDS = frozenset({InputField.VOLATILITY, InputField.INTEREST_RATE})

# Range keys that name a request field rather than a market input field.
_DAYS_TO_EXPIRY_KEY = "daystoexpiry"


def _normalise_key(name: str) -> str:
    return name.strip().replace("_", "").lower()


def _lookup(data: Mapping[str, object], name: str, default: object = None) -> object:
    """Fetch ``name`` from ``data`` accepting camelCase or snake_case keys."""
    wanted = _normalise_key(name)
    for key, value in data.items():
        if isinstance(key, str) and _normalise_key(key) == wanted:
            return value
    return default


def _require(data: Mapping[str, object], name: str) -> object:
    value = _lookup(data, name)
    if value is None:
        raise InvalidInputError(f"Required request field missing: {name}")
    return value


def _as_float(name: str, value: object) -> float:
    if isinstance(value, bool):
        raise InvalidInputError(f"{name} must be numeric, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"{name} must be numeric, got {value!r}") from exc


def _as_bool(name: str, value: object) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise InvalidInputError(f"{name} must be a boolean, got {value!r}")


@dataclass(frozen=True, slots=True)
class PricingRequest:
    """A single valuation request.

    Attributes
    ==========
    strike:
        Strike price (> 0).
    volatility:
        Annualised volatility in percent (> 0).
    underlying_price:
        Spot price (> 0).
    days_to_expiry:
        Days until expiry (>= 0).
    interest_rate:
        Continuously-compounded risk-free rate in percent.
    is_call, is_european:
        Option type and exercise style.
    day_count_convention:
        Days per year (> 0). Default: 250.
    model_type:
        Model identifier; None selects European Black-Scholes.
    """

    strike: float
    volatility: float
    underlying_price: float
    days_to_expiry: float
    interest_rate: float
    is_call: bool = True
    is_european: bool = True
    day_count_convention: float = DEFAULT_DAY_COUNT
    model_type: str | ModelType | None = None

    def validate(self) -> None:
        """Raise InvalidInputError for a malformed or out-of-range field."""
        for name in (
            "strike",
            "volatility",
            "underlying_price",
            "day_count_convention",
        ):
            value = getattr(self, name)
            if value is None or not math.isfinite(value) or value <= 0:
                raise InvalidInputError(f"{name} must be positive, got {value!r}")
        if (
            self.days_to_expiry is None
            or not math.isfinite(self.days_to_expiry)
            or self.days_to_expiry < 0
        ):
            raise InvalidInputError(
                f"days_to_expiry must be non-negative, got {self.days_to_expiry!r}"
            )
        if self.interest_rate is None or not math.isfinite(self.interest_rate):
            raise InvalidInputError(f"interest_rate must be finite, got {self.interest_rate!r}")
        if not isinstance(self.is_call, bool):
            raise InvalidInputError(f"is_call must be a boolean, got {self.is_call!r}")
        if not isinstance(self.is_european, bool):
            raise InvalidInputError(f"is_european must be a boolean, got {self.is_european!r}")
        if self.model_type is not None and not isinstance(self.model_type, (str, ModelType)):
            raise InvalidInputError(
                f"model_type must be a string identifier, got {self.model_type!r}"
            )

    @property
    def time_to_expiry_in_years(self) -> float:
        return year_fraction(self.days_to_expiry, self.day_count_convention)

    @property
    def option_config(self) -> OptionConfig:
        return OptionConfig.from_flags(self.is_call, self.is_european)

    @property
    def model_key(self) -> str:
        """Identifier under which execution times are recorded."""
        if isinstance(self.model_type, ModelType):
            return self.model_type.value
        if self.model_type is None or not str(self.model_type).strip():
            return DEFAULT_MODEL_KEY
        return str(self.model_type).strip().lower()

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, object],
        *,
        default_day_count: float = DEFAULT_DAY_COUNT,
    ) -> "PricingRequest":
        """Build a request from wire field names (``underlyingPrice``, ``isCall``, ...)."""
        day_count = _lookup(data, "day_count_convention")
        model_type = _lookup(data, "model_type")
        return cls(
            strike=_as_float("strike", _require(data, "strike")),
            volatility=_as_float("volatility", _require(data, "volatility")),
            underlying_price=_as_float("underlying_price", _require(data, "underlying_price")),
            days_to_expiry=_as_float("days_to_expiry", _require(data, "days_to_expiry")),
            interest_rate=_as_float("interest_rate", _require(data, "interest_rate")),
            is_call=_as_bool("is_call", _require(data, "is_call")),
            is_european=_as_bool("is_european", _require(data, "is_european")),
            day_count_convention=(
                default_day_count
                if day_count is None
                else _as_float("day_count_convention", day_count)
            ),
            model_type=None if model_type is None else str(model_type),
        )


@dataclass(frozen=True, slots=True)
class RangeRequest:
    """A pricing request swept over one input.

    ``range_key`` names a market input field (``underlyingPrice``,
    ``volatility``, ...) or ``daysToExpiry``. Values for volatility and
    interest rate are in percent, like the base request.
    """

    base_request: PricingRequest
    range_key: str
    start_value: float
    end_value: float
    increment: float

    def validate(self) -> None:
        self.base_request.validate()
        if not isinstance(self.range_key, str) or not self.range_key.strip():
            raise InvalidInputError("range_key must be a non-empty string")
        if _normalise_key(self.range_key) != _DAYS_TO_EXPIRY_KEY:
            InputField.parse(self.range_key)
        for name in ("start_value", "end_value", "increment"):
            value = getattr(self, name)
            if value is None or not math.isfinite(value):
                raise InvalidInputError(f"{name} must be a finite number, got {value!r}")
        if not self.start_value < self.end_value:
            raise InvalidInputError(
                f"start_value must be less than end_value, "
                f"got {self.start_value} >= {self.end_value}"
            )
        if self.increment <= 0:
            raise InvalidInputError(f"increment must be positive, got {self.increment}")

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, object],
        *,
        default_day_count: float = DEFAULT_DAY_COUNT,
    ) -> "RangeRequest":
        """Build a range request; the base request fields sit at the top level."""
        range_key = _require(data, "range_key")
        return cls(
            base_request=PricingRequest.from_dict(data, default_day_count=default_day_count),
            range_key=str(range_key),
            start_value=_as_float("start_value", _require(data, "start_value")),
            end_value=_as_float("end_value", _require(data, "end_value")),
            increment=_as_float("increment", _require(data, "increment")),
        )


class PricingService:
    """Routes validated requests to a model and records execution time.

    The registry, executor and tracker are process-wide and shared by all
    requests; nothing else is kept between calls.
    """

    def __init__(
        self,
        registry: ModelRegistry | None = None,
        executor: Executor | None = None,
        tracker: PerformanceTracker | None = None,
        settings: EngineSettings | None = None,
    ) -> None:
        if settings is None:
            settings = EngineSettings()
        self.settings = settings
        self.registry = registry if registry is not None else ModelRegistry()
        self.executor = executor if executor is not None else create_executor(settings.max_workers)
        self.tracker = tracker if tracker is not None else PerformanceTracker()

    @classmethod
    def from_settings(cls, settings: EngineSettings | None = None) -> "PricingService":
        """Build the service with its registry, worker pool and tracker."""
        if settings is None:
            settings = EngineSettings.from_env()
        return cls(
            registry=ModelRegistry(),
            executor=create_executor(settings.max_workers),
            tracker=PerformanceTracker(),
            settings=settings,
        )

    def parse_request(self, data: Mapping[str, object]) -> PricingRequest:
        return PricingRequest.from_dict(data, default_day_count=self.settings.default_day_count)

    def parse_range_request(self, data: Mapping[str, object]) -> RangeRequest:
        return RangeRequest.from_dict(data, default_day_count=self.settings.default_day_count)

    @staticmethod
    def build_inputs(request: PricingRequest) -> MarketInputs:
        """Market inputs for a validated request, with percent fields as decimals."""
        return MarketInputs(
            strike=request.strike,
            volatility=request.volatility / 100.0,
            underlying_price=request.underlying_price,
            time_to_expiry=request.time_to_expiry_in_years,
            interest_rate=request.interest_rate / 100.0,
            day_count_convention=request.day_count_convention,
        )

    def model_details(
        self,
        model_type: str | None = None,
        *,
        is_call: bool = True,
        is_european: bool = True,
    ) -> str:
        model = self.registry.get(model_type)
        return model.describe(OptionConfig.from_flags(is_call, is_european))

    def calculate(self, request: PricingRequest) -> ValuationResult:
        """Price one option and return its price and Greeks."""
        request.validate()
        model = self.registry.get(request.model_type)
        inputs = self.build_inputs(request)
        config = request.option_config

        start = time.perf_counter()
        try:
            result = model.calculate(
                inputs, config, log_calculation=self.settings.log_single_calculation
            )
        except Exception as exc:
            logger.error(
                "Calculation failed for %s after %.3f ms: %s",
                model.name,
                elapsed_ms(start),
                exc,
            )
            if isinstance(exc, PricingEngineError):
                raise
            raise CalculationError(f"{type(exc).__name__}: {exc}", model=model.name) from exc

        took = elapsed_ms(start)
        self.tracker.record(request.model_key, took, kind="single")
        logger.info("Calculated %s (%s) in %.3f ms", model.name, config.describe(), took)
        return result

    def _range_target(
        self, request: RangeRequest
    ) -> tuple[InputField, Callable[[float], float] | None]:
        """Market input field swept by ``request`` and the grid-value conversion."""
        if _normalise_key(request.range_key) == _DAYS_TO_EXPIRY_KEY:
            day_count = request.base_request.day_count_convention
            return InputField.TIME_TO_EXPIRY, lambda days: year_fraction(days, day_count)
        range_field = InputField.parse(request.range_key)
        if range_field in _PERCENT_FIELDS:
            return range_field, lambda percent: percent / 100.0
        return range_field, None

    def calculate_range(self, request: RangeRequest) -> ResultSet:
        """Sweep one input and return the results in grid order."""
        request.validate()
        base = request.base_request
        model = self.registry.get(base.model_type)
        inputs = self.build_inputs(base)
        config = base.option_config
        range_field, transform = self._range_target(request)

        start = time.perf_counter()
        try:
            result_set = RangeCalculator(self.executor).run(
                model,
                inputs,
                config,
                range_field,
                request.start_value,
                request.end_value,
                request.increment,
                log_calculations=self.settings.log_range_calculations,
                value_transform=transform,
            )
        except Exception as exc:
            logger.error(
                "Range calculation failed for %s over %s after %.3f ms: %s",
                model.name,
                range_field.value,
                elapsed_ms(start),
                exc,
            )
            if isinstance(exc, PricingEngineError):
                raise
            raise CalculationError(f"{type(exc).__name__}: {exc}", model=model.name) from exc

        took = elapsed_ms(start)
        self.tracker.record(base.model_key, took, kind="range")
        logger.info(
            "Range calculation %s over %s: %d results in %.3f ms",
            model.name,
            range_field.value,
            result_set.total_count,
            took,
        )
        return result_set

    def shutdown(self, wait: bool = True) -> None:
        """Release the worker pool."""
        self.executor.shutdown(wait=wait)
