"""Univariate locally weighted regression (loess).

The implementation follows the loess description in

    R. B. Cleveland, W. S. Cleveland, J. E. McRae and I. Terpenning,
    "STL: A Seasonal-Trend Decomposition Procedure Based on Loess",
    Journal of Official Statistics 6(1), 1990, pp. 3-73.

Local fits are computed on a table of knots only and joined by an
interpolating spline, which keeps repeated smoothing of long series cheap.
Positions passed as ``exact`` are fitted exactly.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike

from smoothkit.logger import smoothkit_logger
from smoothkit.regression.fit import local_fit
from smoothkit.regression.knots import exact_knots, grid_knots
from smoothkit.regression.model import RegressionModel
from smoothkit.regression.order import resolve_degree
from smoothkit.utils.validate import (
    as_series,
    present_mask,
    validate_int,
    validate_support_values,
    validate_weights,
)

__all__ = ["loess"]


def loess(
    xv: ArrayLike,
    yv: ArrayLike | None = None,
    *,
    degree: int = 0,
    q: int | None = None,
    rho: ArrayLike | None = None,
    exact: ArrayLike | None = None,
    extra: ArrayLike | None = None,
) -> RegressionModel:
    """Smooths observations with locally weighted polynomial regression.

    Missing values (``None`` or ``NaN``) in ``yv`` are dropped together with
    their support and weights before fitting. A caller supplied ``q`` is
    scaled by the fraction of values kept so the bandwidth covers the same
    share of the data.

    Args:
        xv: Strictly increasing support. If ``yv`` is omitted, ``xv`` holds
            the observation values and the support is ``1, 2, ..., n``.
        yv: Observation values, possibly with missing entries.
        degree: Degree of the local fits: 1, 2, or 0 to estimate it from the
            data with :func:`smoothkit.regression.order.khat`.
        q: Bandwidth as a number of nearest neighbours (>= 1). Larger values
            smooth more; as ``q`` grows the fit tends to a global polynomial
            of degree ``degree``. Defaults to ``3/4`` of the present values.
        rho: Reliability weights of the observations, e.g. ``1/k_i`` if
            ``yv[i]`` has variance ``sigma**2 * k_i``. Defaults to ones.
        exact: Positions at which the regression is solved exactly. When
            given, these are the only knots of the model.
        extra: Additional knot positions merged into the generated grid when
            ``exact`` is not given.

    Returns:
        A :class:`RegressionModel` giving the exact fit at every knot and a
        spline approximation elsewhere, including outside the data range.

    Raises:
        InvalidInputError: If the support is not strictly increasing, lengths
            differ, ``degree`` is not 0, 1 or 2, ``q < 1``, the weights are
            invalid, every value is missing, or ``exact`` holds too few
            positions.

    Example:
        >>> import numpy as np
        >>> from smoothkit import loess
        >>> rng = np.random.default_rng(0)
        >>> x = np.sort(rng.uniform(0.0, 2.0 * np.pi, 1000))
        >>> model = loess(x, np.sin(x) + rng.normal(size=1000))
        >>> model(np.pi)  # doctest: +SKIP
        0.02
    """
    if yv is None:
        yv = as_series(xv, name="yv")
        xv = np.arange(1.0, yv.size + 1.0)

    x_arr, y_arr = validate_support_values(xv, yv)
    n_total = x_arr.size
    rho_arr = validate_weights(rho, n_total)

    present = present_mask(y_arr)
    x_p, y_p, rho_p = x_arr[present], y_arr[present], rho_arr[present]
    n = x_p.size

    if q is None:
        q = max(1, 3 * n // 4)
    else:
        q = validate_int(q, "q", minimum=1)
        if n < n_total:
            q = max(1, int(round(q * n / n_total)))

    d = resolve_degree(degree, y_p)

    if n == 1:
        return RegressionModel(x_p, y_p, 0)
    if n == 2:
        return RegressionModel(x_p, y_p, 1)

    if exact is not None and np.size(exact) > 0:
        knots = exact_knots(exact, int(d))
    else:
        knots = grid_knots(x_p, q, extra)

    smoothkit_logger.debug(
        "loess: n=%d (of %d), q=%d, degree=%d, knots=%d", n, n_total, q, int(d), knots.size
    )

    fitted = np.array([local_fit(k, x_p, y_p, q, int(d), rho_p) for k in knots])
    return RegressionModel(knots, fitted, int(d))
