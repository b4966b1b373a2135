"""Weighted local polynomial fits at a single query position."""

from __future__ import annotations

import numpy as np

from smoothkit.regression.kernel import nearest_neighbors, neighborhood_weights
from smoothkit.utils.types import FloatArray

__all__ = ["design_matrix", "weighted_polyfit", "local_fit"]


def design_matrix(
        x0: float,
        sample_points: np.ndarray,
        degree: int) -> np.ndarray:
    """Builds a Vandermonde design matrix centred on ``x0``.

    Columns are ``1, (x - x0), (x - x0)**2, ...`` so the fitted value at
    ``x0`` is the first coefficient.

    Args:
        x0:
            The centre of the local fit.
        sample_points:
            An array of sample points (shape (n_samples,)).
        degree:
            The degree of the polynomial to fit.

    Returns:
        A Vandermonde matrix (shape (n_samples, degree + 1)).
    """
    return np.vander(sample_points - x0, N=degree + 1, increasing=True)


def weighted_polyfit(
    x0: float,
    xs: FloatArray,
    ys: FloatArray,
    weights: FloatArray,
    degree: int,
) -> FloatArray:
    """Returns centred polynomial coefficients of a weighted least squares fit.

    Both the design rows and the responses are multiplied by ``weights``
    before solving, i.e. the fit minimises ``sum((w_i * (y_i - p(x_i)))**2)``.

    Args:
        x0:
            Centre of the expansion.
        xs:
            Sample positions (shape (n_samples,)).
        ys:
            Sample values (shape (n_samples,)).
        weights:
            Non-negative weights (shape (n_samples,)).
        degree:
            Degree of the polynomial.

    Returns:
        coeffs : (degree+1,) in powers of ``(x - x0)``.
    """
    mat = design_matrix(x0, xs, degree) * weights[:, None]
    coeffs, *_ = np.linalg.lstsq(mat, ys * weights, rcond=None)
    return coeffs


def local_fit(
    x: float,
    xv: FloatArray,
    yv: FloatArray,
    q: int,
    degree: int,
    rho: FloatArray | None = None,
) -> float:
    """Evaluates the loess fit of ``(xv, yv)`` at ``x``.

    Only points with positive weight enter the fit. If fewer than
    ``degree + 1`` of them remain, the local degree is lowered so the system
    stays determined. If the kernel and ``rho`` together leave no positive
    weight, the ``q`` nearest points are weighted by ``rho`` alone and, if
    that is zero too, uniformly.

    Args:
        x: Query position.
        xv: Support points without missing values.
        yv: Values at ``xv``.
        q: Bandwidth in number of neighbours.
        degree: Local polynomial degree (1 or 2).
        rho: Optional reliability weights.

    Returns:
        The fitted value at ``x``.
    """
    w = neighborhood_weights(xv, x, q, rho)
    if not np.any(w > 0.0):
        idx = nearest_neighbors(xv, x, q)
        w = np.zeros_like(w)
        w[idx] = 1.0 if rho is None else rho[idx]
        if not np.any(w > 0.0):
            w[idx] = 1.0

    used = w > 0.0
    local_degree = min(degree, int(used.sum()) - 1)
    coeffs = weighted_polyfit(x, xv[used], yv[used], w[used], local_degree)
    return float(coeffs[0])
