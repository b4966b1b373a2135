"""Mutable state threaded through the STL loop."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from smoothkit.utils.types import FloatArray

__all__ = ["DecompositionState"]


@dataclass
class DecompositionState:
    """Components and loop bookkeeping of one STL decomposition.

    Every array has the length of the input series. ``seasonal`` and
    ``trend`` are defined everywhere; ``remainder`` is ``NaN`` where the
    input is missing.

    Attributes:
        values: Input series with ``NaN`` for missing observations.
        seasonal: Current seasonal component.
        trend: Current trend component.
        remainder: ``values - trend - seasonal``.
        weights: Robustness weights, initially ones.
        outer_iteration: Number of completed outer passes.
        seasonal_converged: Whether the last seasonal ratio was below threshold.
        trend_converged: Whether the last trend ratio was below threshold.
        previous_detrended: Detrended series of the previous inner pass.
        previous_trend: Trend of the previous inner pass.
        seasonal_ratios: Seasonal convergence ratio of every inner pass.
        trend_ratios: Trend convergence ratio of every inner pass.
    """

    values: FloatArray
    seasonal: FloatArray
    trend: FloatArray
    remainder: FloatArray
    weights: FloatArray
    outer_iteration: int = 0
    seasonal_converged: bool = False
    trend_converged: bool = False
    previous_detrended: FloatArray | None = None
    previous_trend: FloatArray | None = None
    seasonal_ratios: list[float] = field(default_factory=list)
    trend_ratios: list[float] = field(default_factory=list)

    @classmethod
    def initial(cls, values: FloatArray) -> "DecompositionState":
        """Builds the starting state: zero components and unit weights."""
        n = values.size
        return cls(
            values=values,
            seasonal=np.zeros(n, dtype=float),
            trend=np.zeros(n, dtype=float),
            remainder=np.full(n, np.nan),
            weights=np.ones(n, dtype=float),
            previous_detrended=np.zeros(n, dtype=float),
            previous_trend=np.zeros(n, dtype=float),
        )

    @property
    def converged(self) -> bool:
        """True when both the seasonal and the trend iterates converged."""
        return self.seasonal_converged and self.trend_converged

    def as_matrix(self) -> FloatArray:
        """Returns an ``(N, 3)`` array with seasonal, trend and remainder columns."""
        return np.column_stack([self.seasonal, self.trend, self.remainder])
