"""Option pricing models and the range calculation engine.

Public API
----------
Models:
    EuropeanBlackScholesModel: closed-form price and Greeks
    AmericanBlackScholesModel: Barone-Adesi-Whaley early exercise
    BinomialTreeModel: Cox-Ross-Rubinstein lattice
    MonteCarloModel: terminal-price simulation

Parameter classes:
    OptionConfig: call/put and exercise style passed with every valuation
    BlackScholesParams, AmericanParams, BinomialParams, MonteCarloParams
    GreekBumpParams: finite-difference bump sizes

Range sweeps:
    RangeCalculator, create_executor, grid_points
"""

from .base import PricingModel
from .bsm import EuropeanBlackScholesModel
from .american import AmericanBlackScholesModel
from .binomial import BinomialTreeModel
from .monte_carlo import MonteCarloEstimate, MonteCarloModel
from .greeks import Greeks, central_difference_greeks
from .normal import norm_cdf, norm_cdf_abramowitz_stegun, norm_pdf
from .params import (
    AmericanParams,
    BinomialParams,
    BlackScholesParams,
    GreekBumpParams,
    MonteCarloParams,
    OptionConfig,
    ValuationParams,
)
from .range_calculation import RangeCalculator, create_executor, grid_points
from .registry import ModelRegistry
from .results import ResultSet, ValuationResult

__all__ = [
    # Models
    "PricingModel",
    "EuropeanBlackScholesModel",
    "AmericanBlackScholesModel",
    "BinomialTreeModel",
    "MonteCarloModel",
    "MonteCarloEstimate",
    "ModelRegistry",
    # Greeks and numerics
    "Greeks",
    "central_difference_greeks",
    "norm_cdf",
    "norm_cdf_abramowitz_stegun",
    "norm_pdf",
    # Parameter classes
    "OptionConfig",
    "BlackScholesParams",
    "AmericanParams",
    "BinomialParams",
    "MonteCarloParams",
    "GreekBumpParams",
    "ValuationParams",
    # Results and range sweeps
    "ValuationResult",
    "ResultSet",
    "RangeCalculator",
    "create_executor",
    "grid_points",
]
