"""Henderson moving average trend filter.

Henderson moving averages reproduce polynomials up to degree 3 and are the
standard trend filters of X-11 style seasonal adjustment (13 terms for
monthly data, 7 for quarterly data). Interior points use the symmetric
weights; the ``(n - 1) / 2`` points at each end use the surrogate asymmetric
weights of

    M. Doherty, "The Surrogate Henderson Filters in X-11",
    Aust. N. Z. J. Stat. 43(4), 2001, pp. 385-392.

Symmetric weights follow "A Guide to Interpreting Time Series",
Australian Bureau of Statistics, 2003, p. 41.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike

from smoothkit.exceptions import InvalidInputError
from smoothkit.utils.types import FloatArray
from smoothkit.utils.validate import validate_int

__all__ = ["hma", "hma_symmetric_weights", "hma_asymmetric_weights"]


def _check_odd_span(n: int) -> int:
    n = validate_int(n, "n", minimum=5)
    if n % 2 == 0:
        raise InvalidInputError(f"n must be odd but is {n}.")
    return n


def hma_symmetric_weights(n: int) -> FloatArray:
    """Computes the ``n`` symmetric Henderson weights.

    Args:
        n: Odd number of terms (>= 5).

    Returns:
        Weights of length ``n`` summing to one.

    Raises:
        InvalidInputError: If ``n`` is even or smaller than 5.
    """
    n = _check_odd_span(n)
    m = (n - 1) // 2
    m1 = (m + 1) ** 2
    m2 = (m + 2) ** 2
    m3 = (m + 3) ** 2
    denom = (m + 2) * (m2 - 1) * (4 * m2 - 1) * (4 * m2 - 9) * (4 * m2 - 25)
    d = 315.0 / (8.0 * float(denom))

    v2 = np.arange(m + 1, dtype=float) ** 2
    half = d * (m1 - v2) * (m2 - v2) * (m3 - v2) * (3.0 * m2 - 11.0 * v2 - 16.0)
    return np.concatenate([half[:0:-1], half])


def hma_asymmetric_weights(m: int, w: FloatArray, b2s2: float) -> FloatArray:
    """Computes the surrogate asymmetric end weights from symmetric weights.

    Args:
        m: Number of available observations, ``(len(w) - 1) / 2 < m < len(w)``.
        w: Symmetric Henderson weights.
        b2s2: Squared ratio term ``4 / (pi * (I/C)**2)``.

    Returns:
        ``m`` weights applied to the observations nearest the series end, in
        order from the innermost observation outwards.
    """
    n = w.size
    tail = w[m:]
    sum_residual = float(tail.sum()) / m
    positions = np.arange(m + 1, n + 1, dtype=float)
    sum_end = float(np.sum((positions - (m + 1) / 2.0) * tail))
    denominator = 1.0 + (m * (m - 1.0) * (m + 1.0) / 12.0) * b2s2

    r = np.arange(1, m + 1, dtype=float)
    numerator = (r - (m + 1) / 2.0) * b2s2
    return w[:m] + sum_residual + numerator / denominator * sum_end


def hma(x: ArrayLike, n: int) -> FloatArray:
    """Applies an ``n``-term Henderson moving average to ``x``.

    Args:
        x: 1D data with ``len(x) >= n``.
        n: Odd number of terms (>= 5), typically 13 or 7.

    Returns:
        Smoothed values, same length as ``x``.

    Raises:
        InvalidInputError: If ``n`` is even or below 5, or ``x`` is too short.

    Example:
        >>> import numpy as np
        >>> from smoothkit import hma
        >>> hma(np.sin(np.arange(1, 101)), 13)[:2]  # doctest: +SKIP
        array([0.56362126, 0.6...])
    """
    n = _check_odd_span(n)
    arr = np.asarray(x, dtype=float)
    if arr.ndim != 1:
        raise InvalidInputError(f"x must be 1D, got shape {arr.shape}.")
    lx = arr.size
    if lx < n:
        raise InvalidInputError(f"len(x) must be at least n={n} but is {lx}.")

    w = hma_symmetric_weights(n)
    m = (n - 1) // 2

    if n < 13:
        ic = 1.0
    elif n < 15:
        ic = 3.5
    else:
        ic = 4.5
    b2s2 = 4.0 / math.pi / ic**2

    out = np.empty(lx, dtype=float)
    for i in range(lx):
        if i < m:
            u = hma_asymmetric_weights(m + i + 1, w, b2s2)[::-1]
            out[i] = np.dot(arr[: i + m + 1], u)
        elif i + m >= lx:
            u = hma_asymmetric_weights(m + lx - i, w, b2s2)
            out[i] = np.dot(arr[i - m:], u)
        else:
            out[i] = np.dot(arr[i - m: i + m + 1], w)
    return out
