"""Model identifier resolution."""

from __future__ import annotations

from collections.abc import Mapping
import logging

from ..enums import ModelType
from .american import AmericanBlackScholesModel
from .base import PricingModel
from .binomial import BinomialTreeModel
from .bsm import EuropeanBlackScholesModel
from .monte_carlo import MonteCarloModel
from .params import (
    AmericanParams,
    BinomialParams,
    BlackScholesParams,
    GreekBumpParams,
    MonteCarloParams,
)

logger = logging.getLogger(__name__)

__all__ = ["ModelRegistry", "MODEL_ALIASES", "DEFAULT_MODEL_TYPE"]

DEFAULT_MODEL_TYPE = ModelType.EUROPEAN_BLACK_SCHOLES

# Case-insensitive, whitespace-trimmed identifiers accepted on requests.
MODEL_ALIASES: Mapping[str, ModelType] = {
    "european": ModelType.EUROPEAN_BLACK_SCHOLES,
    "european_black_scholes": ModelType.EUROPEAN_BLACK_SCHOLES,
    "black_scholes": ModelType.EUROPEAN_BLACK_SCHOLES,
    "american": ModelType.AMERICAN_BLACK_SCHOLES,
    "american_black_scholes": ModelType.AMERICAN_BLACK_SCHOLES,
    "binomial": ModelType.BINOMIAL,
    "binomial_tree": ModelType.BINOMIAL,
    "monte_carlo": ModelType.MONTE_CARLO,
    "monte_carlo_simulation": ModelType.MONTE_CARLO,
}


class ModelRegistry:
    """Identifier -> model instance table, built once at construction.

    Models hold only immutable parameters, so the same instance is shared by
    every request and every range task.
    """

    def __init__(
        self,
        *,
        bs_params: BlackScholesParams | None = None,
        american_params: AmericanParams | None = None,
        binomial_params: BinomialParams | None = None,
        monte_carlo_params: MonteCarloParams | None = None,
        bump_params: GreekBumpParams | None = None,
    ) -> None:
        self._models: dict[ModelType, PricingModel] = {
            ModelType.EUROPEAN_BLACK_SCHOLES: EuropeanBlackScholesModel(bs_params, bump_params),
            ModelType.AMERICAN_BLACK_SCHOLES: AmericanBlackScholesModel(
                american_params, bs_params, bump_params
            ),
            ModelType.BINOMIAL: BinomialTreeModel(binomial_params, bump_params),
            ModelType.MONTE_CARLO: MonteCarloModel(monte_carlo_params, bump_params),
        }

    @staticmethod
    def resolve_type(identifier: ModelType | str | None) -> ModelType:
        """Map a request's model identifier to a ModelType.

        Absent or blank identifiers select the default silently; unrecognised
        ones select it with a warning.
        """
        if isinstance(identifier, ModelType):
            return identifier
        if identifier is None or not str(identifier).strip():
            return DEFAULT_MODEL_TYPE
        key = str(identifier).strip().lower()
        model_type = MODEL_ALIASES.get(key)
        if model_type is None:
            logger.warning(
                "Unrecognised model type %r, falling back to %s",
                identifier,
                DEFAULT_MODEL_TYPE.value,
            )
            return DEFAULT_MODEL_TYPE
        return model_type

    def get(self, identifier: ModelType | str | None = None) -> PricingModel:
        return self._models[self.resolve_type(identifier)]

    def __contains__(self, model_type: object) -> bool:
        return model_type in self._models

    def __iter__(self):
        return iter(self._models.values())

    def __len__(self) -> int:
        return len(self._models)
