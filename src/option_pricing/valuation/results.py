"""Valuation result types."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace as dc_replace

import pandas as pd

__all__ = ["ValuationResult", "ResultSet"]

_GREEK_FIELDS = ("price", "delta", "gamma", "vega", "theta", "rho")


@dataclass(frozen=True, slots=True)
class ValuationResult:
    """Price and Greeks of a single valuation.

    ``range_variable`` is the swept value that produced this result
    (0 for a single calculation). Vega and rho are per 1 percentage point,
    theta is per day under the input's day-count convention.
    """

    price: float
    delta: float
    gamma: float
    vega: float
    theta: float
    rho: float
    range_variable: float = 0.0

    def with_range_variable(self, value: float) -> "ValuationResult":
        return dc_replace(self, range_variable=float(value))

    def as_dict(self) -> dict[str, float]:
        """Serialise using the wire field names."""
        out = {name: getattr(self, name) for name in _GREEK_FIELDS}
        out["rangeVariable"] = self.range_variable
        return out


class ResultSet:
    """Ordered collection of valuation results.

    Insertion order is significant: for a range sweep it equals grid order.
    Results are never reordered or deduplicated.
    """

    __slots__ = ("_results", "_total_count")

    def __init__(self, results: Iterable[ValuationResult] | None = None) -> None:
        self._results: list[ValuationResult] = []
        self._total_count = 0
        if results is not None:
            for result in results:
                self.merge(result)

    def merge(self, result: ValuationResult) -> None:
        self._results.append(result)
        self._total_count += 1

    def extend(self, other: "ResultSet") -> None:
        for result in other:
            self.merge(result)

    @property
    def results(self) -> tuple[ValuationResult, ...]:
        return tuple(self._results)

    @property
    def total_count(self) -> int:
        return self._total_count

    def is_empty(self) -> bool:
        return not self._results

    def clear(self) -> None:
        self._results.clear()
        self._total_count = 0

    def range_variables(self) -> list[float]:
        return [r.range_variable for r in self._results]

    def to_frame(self) -> pd.DataFrame:
        """Return results as a DataFrame, one row per result in grid order."""
        columns = ["range_variable", *_GREEK_FIELDS]
        rows = [[getattr(r, c) for c in columns] for r in self._results]
        return pd.DataFrame(rows, columns=columns)

    def as_dict(self) -> dict[str, object]:
        return {
            "results": [r.as_dict() for r in self._results],
            "totalCount": self._total_count,
        }

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[ValuationResult]:
        return iter(self._results)

    def __getitem__(self, index: int) -> ValuationResult:
        return self._results[index]

    def __repr__(self) -> str:
        return f"ResultSet(total_count={self._total_count})"
