"""Numerical utilities."""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike

from smoothkit.exceptions import InvalidInputError

__all__ = [
    "next_odd",
    "sturges_bins",
    "mean_abs_deviation",
    "nan_median_abs",
    "convergence_ratio",
]


def next_odd(x: float) -> int:
    """Returns the smallest odd integer greater than or equal to ``x``.

    Args:
        x: Real number.

    Returns:
        ``ceil(x)`` if it is odd, otherwise ``ceil(x) + 1``.
    """
    cx = int(math.ceil(x))
    return cx + 1 if cx % 2 == 0 else cx


def sturges_bins(n: int) -> int:
    """Computes the number of bins given by Sturges' rule, ``round(1 + 3.322 log(n))``.

    Uses the natural logarithm, so it grows slightly faster than the
    textbook ``log2`` form for large ``n``.

    Args:
        n: Number of observations (>= 1).

    Returns:
        Number of bins.

    Raises:
        InvalidInputError: If ``n < 1``.
    """
    if n < 1:
        raise InvalidInputError(f"n must be at least 1 but is {n}.")
    return int(round(1.0 + 3.322 * math.log(n)))


def mean_abs_deviation(x: ArrayLike) -> float:
    """Computes the mean absolute deviation of ``x`` about its mean.

    Missing values (``NaN``) are skipped.

    Args:
        x: 1D array-like values.

    Returns:
        ``mean(|x - mean(x)|)`` over present values, or ``0.0`` if none are
        present.
    """
    arr = np.asarray(x, dtype=float)
    arr = arr[~np.isnan(arr)]
    if arr.size == 0:
        return 0.0
    return float(np.mean(np.abs(arr - np.mean(arr))))


def nan_median_abs(x: ArrayLike) -> float:
    """Returns the median of ``|x|`` over present values (``NaN`` skipped)."""
    arr = np.abs(np.asarray(x, dtype=float))
    arr = arr[~np.isnan(arr)]
    if arr.size == 0:
        raise InvalidInputError("cannot compute a median without present values.")
    return float(np.median(arr))


def convergence_ratio(current: ArrayLike, previous: ArrayLike) -> float:
    """Computes the STL convergence ratio between two successive iterates.

    The ratio is ``max|current - previous| / (max(previous) - min(previous))``
    where the numerator runs over entries present in both series and the
    range over the present entries of ``previous``. When ``previous`` has zero
    range the ratio is ``0.0`` if nothing changed and ``inf`` otherwise, so
    a flat start never counts as converged unless the iterate is unchanged.

    Args:
        current: Current iterate.
        previous: Previous iterate, same length.

    Returns:
        The non-negative ratio, possibly ``inf``.
    """
    cur = np.asarray(current, dtype=float)
    prev = np.asarray(previous, dtype=float)
    both = ~np.isnan(cur) & ~np.isnan(prev)
    if not both.any():
        return math.inf

    max_change = float(np.max(np.abs(cur[both] - prev[both])))
    prev_present = prev[~np.isnan(prev)]
    spread = float(np.max(prev_present) - np.min(prev_present))
    if spread == 0.0:
        return 0.0 if max_change == 0.0 else math.inf
    return max_change / spread
