"""Continuous model built from a table of loess knots.

The knot table ``{x_i -> y_i}`` is turned into a callable by an
interpolating spline of the same degree as the local fits. SciPy's
``InterpolatedUnivariateSpline`` (FITPACK) passes through every knot and
extrapolates beyond the first and last knot with the boundary polynomial
pieces.
"""

from __future__ import annotations

from typing import Callable

import numpy as np
from numpy.typing import ArrayLike
from scipy.interpolate import InterpolatedUnivariateSpline

from smoothkit.exceptions import InvalidInputError
from smoothkit.utils.types import FloatArray

__all__ = ["RegressionModel", "build_interpolant"]


def build_interpolant(
    knots: FloatArray,
    values: FloatArray,
    degree: int,
) -> Callable[[FloatArray], FloatArray]:
    """Builds a function interpolating ``values`` at ``knots``.

    One knot gives a constant and two knots give the line through them.
    Otherwise the result is an interpolating spline of order ``degree``
    evaluated with extrapolation outside the knot range.

    Args:
        knots: Strictly increasing knot positions.
        values: Values at the knots.
        degree: Spline degree (1 or 2), used when there are three or more knots.

    Returns:
        A vectorised callable mapping positions to interpolated values.

    Raises:
        InvalidInputError: If the knots and values do not match or there are
            too few knots for ``degree``.
    """
    knots = np.asarray(knots, dtype=float)
    values = np.asarray(values, dtype=float)
    if knots.ndim != 1 or knots.shape != values.shape:
        raise InvalidInputError("knots and values must be 1D arrays of equal length.")

    n = knots.size
    if n == 0:
        raise InvalidInputError("at least one knot is required.")
    if n == 1:
        c = float(values[0])
        return lambda x: np.full(np.shape(x), c, dtype=float)
    if n == 2:
        slope = (values[1] - values[0]) / (knots[1] - knots[0])
        x0, y0 = float(knots[0]), float(values[0])
        return lambda x: y0 + slope * (np.asarray(x, dtype=float) - x0)
    if n <= degree:
        raise InvalidInputError(
            f"a degree-{degree} spline needs more than {degree} knots; got {n}."
        )

    spline = InterpolatedUnivariateSpline(knots, values, k=degree, ext=0)
    return lambda x: spline(np.asarray(x, dtype=float))


class RegressionModel:
    """Result of a loess smoothing, callable at any real position.

    Evaluating the model at a knot returns the exact local regression value
    computed there. Between knots and outside the knot range the value comes
    from the interpolating spline.

    Attributes:
        knots: Knot positions, strictly increasing.
        values: Local regression values at ``knots``.
        degree: Degree of the local fits and of the interpolation.

    Example:
        >>> import numpy as np
        >>> from smoothkit import loess
        >>> x = np.linspace(0.0, 2.0 * np.pi, 200)
        >>> model = loess(x, np.sin(x), degree=2, q=30)
        >>> model(np.pi)  # doctest: +SKIP
        1.2e-05
    """

    def __init__(self, knots: ArrayLike, values: ArrayLike, degree: int) -> None:
        """Initializes the model from a knot table.

        Args:
            knots: Strictly increasing knot positions.
            values: Fitted values at the knots.
            degree: Interpolation degree.
        """
        self.knots = np.array(knots, dtype=float)
        self.values = np.array(values, dtype=float)
        self.degree = int(degree)
        self.knots.setflags(write=False)
        self.values.setflags(write=False)
        self._interpolant = build_interpolant(self.knots, self.values, self.degree)

    def __call__(self, x: ArrayLike) -> float | FloatArray:
        """Evaluates the model.

        Args:
            x: Scalar or array of positions.

        Returns:
            A float for scalar input, otherwise an array with the shape of ``x``.
        """
        x_arr = np.asarray(x, dtype=float)
        out = np.asarray(self._interpolant(x_arr.ravel()), dtype=float).reshape(x_arr.shape)
        if out.ndim == 0:
            return float(out)
        return out

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(n_knots={self.knots.size}, degree={self.degree}, "
            f"range=[{self.knots[0]:g}, {self.knots[-1]:g}])"
        )
