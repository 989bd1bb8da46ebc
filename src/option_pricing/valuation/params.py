"""Parameter classes for method-specific valuation configuration.

Each pricing model (Binomial, Monte Carlo, etc.) has its own parameter class
that explicitly documents the configuration options available for that model.
All of them are immutable so a model instance can be shared across threads.
"""

from dataclasses import dataclass

from ..enums import ExerciseType, NormalCdfMethod, OptionType
from ..exceptions import ConfigurationError


@dataclass(frozen=True, slots=True)
class OptionConfig:
    """Call/put and exercise style for one valuation.

    Passed explicitly to every ``calculate`` call instead of being stored on
    the model instance.
    """

    option_type: OptionType = OptionType.CALL
    exercise_type: ExerciseType = ExerciseType.EUROPEAN

    def __post_init__(self):
        if isinstance(self.option_type, str):
            object.__setattr__(self, "option_type", OptionType(self.option_type))
        if isinstance(self.exercise_type, str):
            object.__setattr__(self, "exercise_type", ExerciseType(self.exercise_type))
        if not isinstance(self.option_type, OptionType):
            raise ConfigurationError(
                f"option_type must be OptionType enum, got {type(self.option_type).__name__}"
            )
        if not isinstance(self.exercise_type, ExerciseType):
            raise ConfigurationError(
                f"exercise_type must be ExerciseType enum, got {type(self.exercise_type).__name__}"
            )

    @classmethod
    def from_flags(cls, is_call: bool, is_european: bool) -> "OptionConfig":
        return cls(
            option_type=OptionType.CALL if is_call else OptionType.PUT,
            exercise_type=ExerciseType.EUROPEAN if is_european else ExerciseType.AMERICAN,
        )

    @property
    def is_call(self) -> bool:
        return self.option_type is OptionType.CALL

    @property
    def is_european(self) -> bool:
        return self.exercise_type is ExerciseType.EUROPEAN

    def describe(self) -> str:
        style = "European" if self.is_european else "American"
        kind = "Call" if self.is_call else "Put"
        return f"{style} {kind}"


@dataclass(frozen=True, slots=True)
class GreekBumpParams:
    """Bump sizes for central finite-difference Greeks.

    Attributes
    ==========
    relative_bump:
        Bump as a fraction of the input's value. Default: 0.01 (1%).
    min_bump:
        Absolute floor on the bump, used when the input is zero or tiny
        (e.g. a zero interest rate). Default: 1e-4.
    """

    relative_bump: float = 0.01
    min_bump: float = 1e-4

    def __post_init__(self):
        if not (0.0 < self.relative_bump < 0.5):
            raise ValueError(f"relative_bump must be in (0, 0.5), got {self.relative_bump}")
        if self.min_bump <= 0:
            raise ValueError(f"min_bump must be positive, got {self.min_bump}")

    def bump_for(self, value: float) -> float:
        return max(abs(value) * self.relative_bump, self.min_bump)


@dataclass(frozen=True, slots=True)
class BlackScholesParams:
    """Parameters for closed-form Black-Scholes valuation.

    Attributes
    ==========
    normal_cdf:
        Normal CDF implementation. EXACT uses scipy; ABRAMOWITZ_STEGUN
        reproduces the legacy polynomial approximation (abs error < 1.5e-7).
    """

    normal_cdf: NormalCdfMethod | str = NormalCdfMethod.EXACT

    def __post_init__(self):
        if isinstance(self.normal_cdf, str):
            object.__setattr__(self, "normal_cdf", NormalCdfMethod(self.normal_cdf))
        if not isinstance(self.normal_cdf, NormalCdfMethod):
            raise ValueError(f"normal_cdf must be a NormalCdfMethod, got {self.normal_cdf}")


@dataclass(frozen=True, slots=True)
class AmericanParams:
    """Parameters for Barone-Adesi-Whaley American valuation.

    Attributes
    ==========
    max_iterations:
        Maximum Newton iterations when solving for the critical
        early-exercise price. Default: 1000.
    tolerance:
        Relative tolerance (as a fraction of strike) on the critical
        price condition. Default: 1e-8.
    """

    max_iterations: int = 1000
    tolerance: float = 1e-8

    def __post_init__(self):
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if self.tolerance <= 0:
            raise ValueError(f"tolerance must be positive, got {self.tolerance}")


@dataclass(frozen=True, slots=True)
class BinomialParams:
    """Parameters for binomial tree option valuation.

    Attributes
    ==========
    num_steps:
        Number of time steps in the binomial tree.
        More steps increase accuracy but also computation time.
        Default: 1000.
    log_timings:
        Log the wall-clock time of each lattice evaluation at debug level.
    """

    num_steps: int = 1000
    log_timings: bool = False

    def __post_init__(self):
        if self.num_steps < 1:
            raise ValueError(f"num_steps must be >= 1, got {self.num_steps}")


@dataclass(frozen=True, slots=True)
class MonteCarloParams:
    """Parameters for Monte Carlo option valuation.

    Attributes
    ==========
    num_paths:
        Number of simulated terminal prices per evaluation. Default: 100,000.
    random_seed:
        Random seed for reproducibility. If None, uses fresh OS entropy.
    std_error_warn_ratio:
        Log a warning when std_error / price exceeds this ratio.
        None disables the check.
    log_timings:
        Log the wall-clock time of each simulation at debug level.
    """

    num_paths: int = 100_000
    random_seed: int | None = None
    std_error_warn_ratio: float | None = None
    log_timings: bool = False

    def __post_init__(self):
        if self.num_paths < 2:
            raise ValueError(f"num_paths must be >= 2, got {self.num_paths}")
        if self.std_error_warn_ratio is not None and self.std_error_warn_ratio <= 0:
            raise ValueError(
                f"std_error_warn_ratio must be positive, got {self.std_error_warn_ratio}"
            )


# Type alias for any valuation parameters
ValuationParams = BlackScholesParams | AmericanParams | BinomialParams | MonteCarloParams
