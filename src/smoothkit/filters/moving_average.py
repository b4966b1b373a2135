"""Simple moving average."""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike

from smoothkit.exceptions import InvalidInputError
from smoothkit.utils.types import FloatArray
from smoothkit.utils.validate import validate_int

__all__ = ["sma"]


def sma(x: ArrayLike, n: int, center: bool = False) -> FloatArray:
    """Smooths a vector with an ``n``-term simple moving average.

    Args:
        x: 1D data.
        n: Window size, ``1 <= n <= len(x)``.
        center: If True, the result has the length of ``x`` with ``NaN``
            in the ``n // 2`` leading and ``n - n // 2 - 1`` trailing
            positions the window cannot cover.

    Returns:
        Array of length ``len(x) - n + 1``, or ``len(x)`` when centred.

    Raises:
        InvalidInputError: If ``x`` is not 1D or ``n`` is out of range.

    Example:
        >>> from smoothkit import sma
        >>> sma([1, 2, 3, 4, 5], 3)
        array([2., 3., 4.])
        >>> sma([1, 2, 3, 4, 5], 3, center=True)
        array([nan,  2.,  3.,  4., nan])
    """
    arr = np.asarray(x, dtype=float)
    if arr.ndim != 1:
        raise InvalidInputError(f"x must be 1D, got shape {arr.shape}.")
    n = validate_int(n, "n", minimum=1)
    if n > arr.size:
        raise InvalidInputError(f"n must not exceed len(x)={arr.size} but is {n}.")

    if n == 1:
        res = arr.copy()
    else:
        res = np.convolve(arr, np.ones(n), mode="valid") / n

    if center:
        lead = np.full(n // 2, np.nan)
        trail = np.full(n - n // 2 - 1, np.nan)
        res = np.concatenate([lead, res, trail])
    return res
