"""Option pricing engine: interchangeable models, Greeks and range sweeps."""

from .config import EngineSettings
from .enums import ExerciseType, InputField, ModelType, NormalCdfMethod, OptionType
from .exceptions import (
    ArbitrageViolationError,
    CalculationError,
    ConfigurationError,
    ConvergenceError,
    InvalidInputError,
    PricingEngineError,
)
from .inputs import MarketInputs
from .performance import PerformanceTracker
from .service import PricingRequest, PricingService, RangeRequest
from .valuation import (
    AmericanBlackScholesModel,
    BinomialTreeModel,
    EuropeanBlackScholesModel,
    ModelRegistry,
    MonteCarloModel,
    OptionConfig,
    ResultSet,
    ValuationResult,
)


__all__ = [
    "EngineSettings",
    "ExerciseType",
    "InputField",
    "ModelType",
    "NormalCdfMethod",
    "OptionType",
    "PricingEngineError",
    "InvalidInputError",
    "ConfigurationError",
    "CalculationError",
    "ArbitrageViolationError",
    "ConvergenceError",
    "MarketInputs",
    "PerformanceTracker",
    "PricingRequest",
    "RangeRequest",
    "PricingService",
    "EuropeanBlackScholesModel",
    "AmericanBlackScholesModel",
    "BinomialTreeModel",
    "MonteCarloModel",
    "ModelRegistry",
    "OptionConfig",
    "ResultSet",
    "ValuationResult",
]
