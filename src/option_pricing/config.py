"""Process-wide engine settings."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import os

from .exceptions import ConfigurationError
from .inputs import DEFAULT_DAY_COUNT

__all__ = ["EngineSettings"]

_ENV_PREFIX = "OPTION_PRICING_"
_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean flag, got {raw!r}")


@dataclass(frozen=True, slots=True)
class EngineSettings:
    """Settings read once at startup.

    Attributes
    ==========
    max_workers:
        Size of the shared range-calculation pool. None uses the
        ThreadPoolExecutor default.
    log_single_calculation:
        Log the inputs of every single valuation at info level.
    log_range_calculations:
        Log the inputs of every grid-point valuation at info level.
    default_day_count:
        Day-count convention applied when a request does not carry one.
    """

    max_workers: int | None = None
    log_single_calculation: bool = False
    log_range_calculations: bool = False
    default_day_count: float = DEFAULT_DAY_COUNT

    def __post_init__(self):
        if self.max_workers is not None and self.max_workers < 1:
            raise ConfigurationError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.default_day_count <= 0:
            raise ConfigurationError(
                f"default_day_count must be positive, got {self.default_day_count}"
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "EngineSettings":
        """Build settings from OPTION_PRICING_* environment variables.

        Unset variables keep their defaults.
        """
        if environ is None:
            environ = os.environ
        kwargs: dict[str, object] = {}

        raw = environ.get(f"{_ENV_PREFIX}MAX_WORKERS")
        if raw is not None and raw.strip():
            try:
                kwargs["max_workers"] = int(raw)
            except ValueError as exc:
                raise ConfigurationError(
                    f"{_ENV_PREFIX}MAX_WORKERS must be an integer, got {raw!r}"
                ) from exc

        for suffix, attr in (
            ("LOG_SINGLE", "log_single_calculation"),
            ("LOG_RANGE", "log_range_calculations"),
        ):
            raw = environ.get(f"{_ENV_PREFIX}{suffix}")
            if raw is not None:
                kwargs[attr] = _parse_bool(f"{_ENV_PREFIX}{suffix}", raw)

        raw = environ.get(f"{_ENV_PREFIX}DAY_COUNT")
        if raw is not None and raw.strip():
            try:
                kwargs["default_day_count"] = float(raw)
            except ValueError as exc:
                raise ConfigurationError(
                    f"{_ENV_PREFIX}DAY_COUNT must be numeric, got {raw!r}"
                ) from exc

        return cls(**kwargs)
