"""Enums for option valuation."""

from enum import Enum

from .exceptions import InvalidInputError

__all__ = [
    "OptionType",
    "ExerciseType",
    "ModelType",
    "InputField",
    "NormalCdfMethod",
]


class OptionType(Enum):
    CALL = "call"
    PUT = "put"


class ExerciseType(Enum):
    EUROPEAN = "european"
    AMERICAN = "american"


class ModelType(Enum):
    EUROPEAN_BLACK_SCHOLES = "european"
    AMERICAN_BLACK_SCHOLES = "american"
    BINOMIAL = "binomial"
    MONTE_CARLO = "monte_carlo"


class NormalCdfMethod(Enum):
    EXACT = "exact"
    ABRAMOWITZ_STEGUN = "abramowitz_stegun"


class InputField(Enum):
    """Named scalar fields of a market input set."""

    STRIKE = "strike"
    VOLATILITY = "volatility"
    UNDERLYING_PRICE = "underlying_price"
    TIME_TO_EXPIRY = "time_to_expiry"
    INTEREST_RATE = "interest_rate"
    DAY_COUNT_CONVENTION = "day_count_convention"

    @classmethod
    def parse(cls, name: "InputField | str") -> "InputField":
        """Resolve a field from an enum member or a snake/camel/upper-case name.

        ``"underlyingPrice"``, ``"UNDERLYING_PRICE"`` and ``"underlying_price"``
        all resolve to :attr:`InputField.UNDERLYING_PRICE`.
        """
        if isinstance(name, cls):
            return name
        if not isinstance(name, str) or not name.strip():
            raise InvalidInputError(f"Input field name must be a non-empty string, got {name!r}")
        key = name.strip().replace("_", "").lower()
        for field in cls:
            if field.value.replace("_", "") == key:
                return field
        raise InvalidInputError(f"Unknown input field: {name!r}")
