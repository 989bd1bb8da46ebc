"""Concurrent sweep of one market input over a grid of values.

Each grid point is an independent valuation submitted to a shared worker
pool. Futures are awaited in submission order and written into a pre-sized
buffer, so the merged ResultSet is in grid order regardless of which task
finishes first.
"""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import TYPE_CHECKING
import logging
import math

from ..enums import InputField
from ..exceptions import InvalidInputError
from ..inputs import MarketInputs
from .params import OptionConfig
from .results import ResultSet, ValuationResult

if TYPE_CHECKING:
    from .base import PricingModel

logger = logging.getLogger(__name__)

__all__ = ["grid_points", "RangeCalculator", "create_executor"]

THREAD_NAME_PREFIX = "range-calc"


def create_executor(max_workers: int | None = None) -> ThreadPoolExecutor:
    """Worker pool for range sweeps.

    ``max_workers=None`` uses the ThreadPoolExecutor default,
    min(32, cpu_count + 4).
    """
    if max_workers is not None and max_workers < 1:
        raise InvalidInputError(f"max_workers must be >= 1, got {max_workers}")
    return ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=THREAD_NAME_PREFIX)


def _validate_bounds(start_value: float, end_value: float, increment: float) -> None:
    for label, value in (
        ("start_value", start_value),
        ("end_value", end_value),
        ("increment", increment),
    ):
        if value is None or not math.isfinite(float(value)):
            raise InvalidInputError(f"{label} must be a finite number, got {value!r}")
    if not start_value < end_value:
        raise InvalidInputError(
            f"start_value must be less than end_value, got {start_value} >= {end_value}"
        )
    if increment <= 0:
        raise InvalidInputError(f"increment must be positive, got {increment}")


def grid_points(start_value: float, end_value: float, increment: float) -> list[float]:
    """Grid values start + i * increment for i in [0, ceil((end - start) / increment)].

    Points beyond ``end_value`` are dropped. A tolerance of 1e-12 * increment
    keeps an end point that floating-point rounding would otherwise push just
    past ``end_value``.

    >>> grid_points(90, 110, 5)
    [90.0, 95.0, 100.0, 105.0, 110.0]
    >>> grid_points(0, 10, 3)
    [0.0, 3.0, 6.0, 9.0]
    """
    _validate_bounds(start_value, end_value, increment)
    start = float(start_value)
    end = float(end_value)
    step = float(increment)
    tolerance = 1e-12 * abs(step)

    count = math.ceil((end - start) / step) + 1
    points = []
    for i in range(count):
        value = start + i * step
        if value > end + tolerance:
            continue
        points.append(value)
    return points


class RangeCalculator:
    """Fan a base valuation out over a grid and merge the results in grid order.

    The calculator keeps no state besides the executor, so one instance can
    serve concurrent sweeps.
    """

    def __init__(self, executor: Executor) -> None:
        self.executor = executor

    def run(
        self,
        model: "PricingModel",
        inputs: MarketInputs,
        config: OptionConfig,
        range_key: InputField | str,
        start_value: float,
        end_value: float,
        increment: float,
        result_set: ResultSet | None = None,
        log_calculations: bool = False,
        value_transform: Callable[[float], float] | None = None,
    ) -> ResultSet:
        """Value every grid point and merge the results into ``result_set``.

        Parameters
        ==========
        range_key:
            Market input field to sweep.
        value_transform:
            Optional callable mapping a grid value to the value written into
            the inputs (e.g. percent to decimal). ``range_variable`` on each
            result keeps the untransformed grid value.

        Raises
        ======
        InvalidInputError
            for an unknown range key or invalid bounds.
        PricingEngineError
            the first failure in grid order; the remaining tasks are
            cancelled where possible and nothing is merged.
        """
        field = InputField.parse(range_key)
        points = grid_points(start_value, end_value, increment)
        if result_set is None:
            result_set = ResultSet()

        logger.debug(
            "Range sweep %s over %s: %d points [%s, %s] step %s",
            model.name,
            field.value,
            len(points),
            start_value,
            end_value,
            increment,
        )

        futures: list[Future] = []
        for value in points:
            target = value if value_transform is None else value_transform(value)
            futures.append(
                self.executor.submit(
                    model.calculate,
                    inputs.with_value(field, target),
                    config,
                    log_calculation=log_calculations,
                )
            )

        buffer: list[ValuationResult | None] = [None] * len(points)
        for index, future in enumerate(futures):
            try:
                result = future.result()
            except Exception:
                for pending in futures[index + 1 :]:
                    pending.cancel()
                logger.debug(
                    "Range sweep %s aborted at grid index %d (%s=%s)",
                    model.name,
                    index,
                    field.value,
                    points[index],
                )
                raise
            buffer[index] = result.with_range_variable(points[index])

        for result in buffer:
            result_set.merge(result)
        return result_set
