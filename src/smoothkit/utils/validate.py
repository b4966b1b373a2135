"""Validation utilities for smoothkit."""

from __future__ import annotations

from numbers import Integral, Real
from typing import Any

import numpy as np
from numpy.typing import ArrayLike

from smoothkit.exceptions import InvalidInputError
from smoothkit.utils.types import BoolArray, FloatArray

__all__ = [
    "as_series",
    "present_mask",
    "validate_support",
    "validate_support_values",
    "validate_weights",
    "validate_int",
    "validate_positive",
]


def as_series(values: ArrayLike, *, name: str = "values") -> FloatArray:
    """Converts observations into a 1D float array with ``NaN`` for missing entries.

    ``None`` and ``NaN`` both mark a missing observation. Infinite values are
    rejected because no smoothing operation can use them.

    Args:
        values: 1D array-like of observations, possibly containing ``None``.
        name: Name used in error messages.

    Returns:
        A new 1D ``float64`` array.

    Raises:
        InvalidInputError: If the input is not 1D, is empty, or contains
            infinite values.
    """
    try:
        arr = np.array(values, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"{name} must be numeric; {e}") from e

    if arr.ndim != 1:
        raise InvalidInputError(f"{name} must be 1D, got shape {arr.shape}.")
    if arr.size == 0:
        raise InvalidInputError(f"{name} must not be empty.")
    if np.isinf(arr).any():
        raise InvalidInputError(f"{name} must not contain infinite values.")
    return arr


def present_mask(values: FloatArray) -> BoolArray:
    """Returns ``True`` where an observation is present (not ``NaN``)."""
    return ~np.isnan(values)


def validate_support(x: ArrayLike, *, name: str = "xv") -> FloatArray:
    """Validates the support (independent variable) of a series.

    Requirements:
      - ``x`` is 1D, non-empty and finite.
      - ``x`` is strictly increasing.

    Args:
        x: 1D array-like support.
        name: Name used in error messages.

    Returns:
        The support as a ``float64`` array.

    Raises:
        InvalidInputError: If ``x`` does not meet the requirements above.
    """
    x_arr = as_series(x, name=name)
    if np.isnan(x_arr).any():
        raise InvalidInputError(f"{name} must not contain missing values.")
    if not np.all(np.diff(x_arr) > 0):
        raise InvalidInputError(f"{name} must be strictly increasing.")
    return x_arr


def validate_support_values(
    x: ArrayLike,
    y: ArrayLike,
) -> tuple[FloatArray, FloatArray]:
    """Validates a support/values pair.

    Missing values are allowed in ``y`` only, and at least one of them must be
    present.

    Args:
        x: Strictly increasing support.
        y: Observation values with ``len(y) == len(x)``.

    Returns:
        Tuple of ``(x_array, y_array)``.

    Raises:
        InvalidInputError: If the inputs have different lengths, ``x`` is
            invalid, or every value is missing.
    """
    x_arr = validate_support(x, name="xv")
    y_arr = as_series(y, name="yv")

    if x_arr.shape[0] != y_arr.shape[0]:
        raise InvalidInputError(
            f"xv and yv must have the same length; got {x_arr.shape[0]} and {y_arr.shape[0]}."
        )
    if not present_mask(y_arr).any():
        raise InvalidInputError("yv must contain at least one non-missing value.")
    return x_arr, y_arr


def validate_weights(
    weights: ArrayLike | None,
    n: int,
    *,
    name: str = "rho",
) -> FloatArray:
    """Validates a reliability or robustness weight vector.

    Args:
        weights: Non-negative finite weights, or ``None`` for all ones.
        n: Expected length.
        name: Name used in error messages.

    Returns:
        The weights as a ``float64`` array of length ``n``.

    Raises:
        InvalidInputError: On wrong length, negative, or non-finite weights.
    """
    if weights is None:
        return np.ones(n, dtype=float)

    w = np.asarray(weights, dtype=float)
    if w.ndim != 1 or w.shape[0] != n:
        raise InvalidInputError(f"{name} must be 1D with length {n}; got shape {w.shape}.")
    if not np.all(np.isfinite(w)):
        raise InvalidInputError(f"{name} must be finite.")
    if np.any(w < 0):
        raise InvalidInputError(f"{name} must be non-negative.")
    return w


def validate_int(value: Any, name: str, *, minimum: int | None = None) -> int:
    """Checks that ``value`` is an integer, optionally bounded from below.

    Args:
        value: Value to check. ``bool`` is not accepted.
        name: Name used in error messages.
        minimum: Optional inclusive lower bound.

    Returns:
        ``value`` as a Python ``int``.

    Raises:
        InvalidInputError: If ``value`` is not an integer or is below ``minimum``.
    """
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise InvalidInputError(f"{name} must be an integer; got {value!r}.")
    v = int(value)
    if minimum is not None and v < minimum:
        raise InvalidInputError(f"{name} must be at least {minimum} but is {v}.")
    return v


def validate_positive(value: Any, name: str) -> float:
    """Checks that ``value`` is a finite real number strictly greater than zero."""
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInputError(f"{name} must be a real number; got {value!r}.")
    v = float(value)
    if not np.isfinite(v) or v <= 0.0:
        raise InvalidInputError(f"{name} must be finite and positive but is {v}.")
    return v
