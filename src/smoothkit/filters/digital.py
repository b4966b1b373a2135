"""Linear time-invariant digital filter."""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike
from scipy.signal import lfilter

from smoothkit.exceptions import InvalidInputError
from smoothkit.utils.types import FloatArray

__all__ = ["digital_filter"]


def digital_filter(
    b: ArrayLike,
    a: ArrayLike,
    x: ArrayLike,
    si: ArrayLike | None = None,
) -> FloatArray:
    r"""Filters ``x`` with a rational transfer function.

    The output follows the difference equation

    .. math::

        y_n = \sum_{k=0}^{M} d_k x_{n-k} - \sum_{k=1}^{N} c_k y_{n-k},
        \qquad c = a / a_0,\ d = b / a_0

    with the semantics of Octave's ``filter(b, a, x, si)``: ``si`` is the
    initial state of the filter delays and defaults to zeros.

    Args:
        b: Numerator coefficients.
        a: Denominator coefficients, ``a[0] != 0``.
        x: 1D data.
        si: Initial state of length ``max(len(a), len(b)) - 1``.

    Returns:
        Filtered data, same length as ``x``.

    Raises:
        InvalidInputError: If ``a[0]`` is zero, a coefficient vector is empty,
            or ``si`` has the wrong length.

    Example:
        >>> from smoothkit import digital_filter
        >>> digital_filter([1/3, 1/3, 1/3], [1.0], [1, 2, 3, 4, 5])
        array([0.33333333, 1.        , 2.        , 3.        , 4.        ])
    """
    b_arr = np.atleast_1d(np.asarray(b, dtype=float))
    a_arr = np.atleast_1d(np.asarray(a, dtype=float))
    x_arr = np.asarray(x, dtype=float)

    if b_arr.ndim != 1 or a_arr.ndim != 1 or b_arr.size == 0 or a_arr.size == 0:
        raise InvalidInputError("a and b must be non-empty 1D coefficient vectors.")
    if a_arr[0] == 0.0:
        raise InvalidInputError("a[0] must not be zero.")
    if x_arr.ndim != 1:
        raise InvalidInputError(f"x must be 1D, got shape {x_arr.shape}.")

    n_state = max(a_arr.size, b_arr.size) - 1
    if si is None:
        zi = np.zeros(n_state, dtype=float)
    else:
        zi = np.atleast_1d(np.asarray(si, dtype=float))
        if zi.shape != (n_state,):
            raise InvalidInputError(
                f"si must have length max(len(a), len(b)) - 1 = {n_state}; got {zi.size}."
            )

    if n_state == 0:
        return lfilter(b_arr, a_arr, x_arr)
    y, _ = lfilter(b_arr, a_arr, x_arr, zi=zi)
    return y
