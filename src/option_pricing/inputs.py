"""Market input set consumed by every pricing model."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace as dc_replace
import math

from .enums import InputField
from .exceptions import ConfigurationError, InvalidInputError

__all__ = ["MarketInputs", "DEFAULT_DAY_COUNT"]

DEFAULT_DAY_COUNT = 250.0

_REQUIRED_FIELDS = (
    InputField.STRIKE,
    InputField.VOLATILITY,
    InputField.UNDERLYING_PRICE,
    InputField.TIME_TO_EXPIRY,
    InputField.INTEREST_RATE,
)


@dataclass(frozen=True, slots=True)
class MarketInputs:
    """Numeric inputs for a single valuation.

    Attributes
    ==========
    strike:
        Strike price.
    volatility:
        Annualised volatility as a decimal (0.2 == 20%).
    underlying_price:
        Current price of the underlying.
    time_to_expiry:
        Time to expiry in years.
    interest_rate:
        Continuously-compounded risk-free rate as a decimal.
    day_count_convention:
        Days per year used to express theta per day. Default: 250.

    Models trust these values; field presence and ranges are checked by the
    caller before an instance reaches a model.
    """

    strike: float
    volatility: float
    underlying_price: float
    time_to_expiry: float
    interest_rate: float
    day_count_convention: float = DEFAULT_DAY_COUNT

    def __post_init__(self) -> None:
        for field in InputField:
            raw = getattr(self, field.value)
            try:
                value = float(raw)
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(f"{field.value} must be numeric, got {raw!r}") from exc
            if math.isnan(value):
                raise InvalidInputError(f"{field.value} must not be NaN")
            object.__setattr__(self, field.value, value)

    @classmethod
    def from_mapping(cls, values: Mapping[InputField | str, float]) -> "MarketInputs":
        """Build inputs from a mapping keyed by InputField or field name.

        Every field except ``day_count_convention`` is required.
        """
        parsed: dict[InputField, float] = {}
        for key, value in values.items():
            parsed[InputField.parse(key)] = value
        for field in _REQUIRED_FIELDS:
            if field not in parsed or parsed[field] is None:
                raise InvalidInputError(f"Required input field missing: {field.value}")
        day_count = parsed.get(InputField.DAY_COUNT_CONVENTION)
        if day_count is None:
            day_count = DEFAULT_DAY_COUNT
        return cls(
            strike=parsed[InputField.STRIKE],
            volatility=parsed[InputField.VOLATILITY],
            underlying_price=parsed[InputField.UNDERLYING_PRICE],
            time_to_expiry=parsed[InputField.TIME_TO_EXPIRY],
            interest_rate=parsed[InputField.INTEREST_RATE],
            day_count_convention=day_count,
        )

    def get(self, field: InputField | str) -> float:
        return getattr(self, InputField.parse(field).value)

    def as_dict(self) -> dict[InputField, float]:
        return {field: getattr(self, field.value) for field in InputField}

    def with_value(self, field: InputField | str, value: float) -> "MarketInputs":
        """Clone with exactly one field overwritten."""
        return dc_replace(self, **{InputField.parse(field).value: value})

    def replace(self, **kwargs: float) -> "MarketInputs":
        """Create a new MarketInputs instance with modified fields.

        Used for bump-and-revalue calculations without mutating the original.
        """
        return dc_replace(self, **kwargs)
