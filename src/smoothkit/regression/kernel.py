"""Neighbourhood selection and tricube weights for local regression."""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike

from smoothkit.utils.types import FloatArray, IntArray

__all__ = ["nearest_neighbors", "tricube", "neighborhood_weights"]


def nearest_neighbors(xv: FloatArray, x: float, q: int) -> IntArray:
    """Returns the indices of the ``min(q, n)`` support points closest to ``x``.

    Ties in distance keep the original order of ``xv``.

    Args:
        xv: Support points, shape ``(n,)``.
        x: Query position.
        q: Number of neighbours requested (>= 1).

    Returns:
        Indices into ``xv`` sorted by increasing distance.
    """
    dist = np.abs(xv - x)
    return np.argsort(dist, kind="stable")[: min(q, xv.size)]


def tricube(u: ArrayLike) -> FloatArray:
    """Tricube kernel ``(1 - u**3)**3`` on ``[0, 1)`` and zero elsewhere."""
    u = np.abs(np.asarray(u, dtype=float))
    return np.where(u < 1.0, (1.0 - u**3) ** 3, 0.0)


def neighborhood_weights(
    xv: FloatArray,
    x: float,
    q: int,
    rho: FloatArray | None = None,
) -> FloatArray:
    """Computes the local regression weights of every support point for a query.

    The ``q`` nearest points are weighted by the tricube of their distance
    scaled by ``qdist``, the distance of the farthest selected point times
    ``max(1, q / n)``. Asking for more neighbours than there are points
    therefore widens the window instead of failing. Points outside the
    neighbourhood get zero weight. When ``qdist`` is zero every selected
    point is at the query position and gets weight one.

    Args:
        xv: Support points, shape ``(n,)``.
        x: Query position.
        q: Bandwidth, as a number of neighbours (>= 1).
        rho: Optional reliability weights multiplied into the result.

    Returns:
        Weights with shape ``(n,)``.
    """
    n = xv.size
    idx = nearest_neighbors(xv, x, q)
    dist = np.abs(xv[idx] - x)
    qdist = float(dist[-1]) * max(1.0, q / n)

    w = np.zeros(n, dtype=float)
    if qdist > 0.0:
        w[idx] = tricube(dist / qdist)
    else:
        w[idx] = 1.0

    if rho is not None:
        w = w * rho
    return w
