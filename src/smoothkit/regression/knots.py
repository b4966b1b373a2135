"""Selection of the positions at which loess is actually solved.

Solving the local regression at every query point is expensive, so
:func:`smoothkit.loess` solves it on a table of knots and interpolates
between them. The knot table is either supplied by the caller (``exact``)
or generated here.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike

from smoothkit.exceptions import InvalidInputError
from smoothkit.utils.numerics import sturges_bins
from smoothkit.utils.types import FloatArray

__all__ = ["exact_knots", "grid_knots"]

#: Minimum number of grid intervals across the data range.
MIN_INTERVALS = 10
#: Number of evenly spaced data positions always added to the grid.
N_DATA_KNOTS = 10
#: Offsets of the guard knots outside each end, in units of the grid gap.
GUARD_OFFSETS = (1.0, 0.1)
#: Knots closer than this fraction of the gap to their predecessor are dropped.
MERGE_TOL = 1e-6


def exact_knots(exact: ArrayLike, degree: int) -> FloatArray:
    """Validates caller supplied knot positions.

    Args:
        exact: Positions where the exact local fit is wanted.
        degree: Interpolation degree of the model.

    Returns:
        The sorted, deduplicated positions.

    Raises:
        InvalidInputError: If positions are not finite or there are not more
            of them than ``degree``.
    """
    knots = np.unique(np.asarray(exact, dtype=float).ravel())
    if not np.all(np.isfinite(knots)):
        raise InvalidInputError("exact positions must be finite.")
    if knots.size <= degree:
        raise InvalidInputError(
            f"exact needs more than {degree} distinct positions for a degree-{degree} "
            f"model; got {knots.size}."
        )
    return knots


def grid_knots(
    xv: FloatArray,
    q: int,
    extra: ArrayLike | None = None,
) -> FloatArray:
    """Builds an approximately uniform knot grid over the support.

    The number of grid intervals is
    ``max(sturges(n), MIN_INTERVALS, ceil(2n / q))``, capped at ``n - 1`` but
    never below 2, so narrow bandwidths get proportionally more knots. The
    grid is merged with ``N_DATA_KNOTS`` evenly spaced data positions, the
    ``extra`` positions, and two guard knots beyond each end that anchor the
    extrapolation.

    Args:
        xv: Strictly increasing support with at least two points.
        q: Bandwidth in number of neighbours.
        extra: Optional additional positions.

    Returns:
        Sorted knot positions.
    """
    n = xv.size
    lo, hi = float(xv[0]), float(xv[-1])

    n_intervals = max(sturges_bins(n), MIN_INTERVALS, math.ceil(2 * n / q))
    n_intervals = max(2, min(n_intervals, n - 1))
    gap = (hi - lo) / n_intervals

    data_idx = np.unique(np.round(np.linspace(0, n - 1, N_DATA_KNOTS)).astype(int))
    guards_lo = [lo - f * gap for f in GUARD_OFFSETS]
    guards_hi = [hi + f * gap for f in reversed(GUARD_OFFSETS)]

    parts = [
        np.asarray(guards_lo),
        np.linspace(lo, hi, n_intervals + 1),
        xv[data_idx],
        np.asarray(guards_hi),
    ]
    if extra is not None:
        extra_arr = np.asarray(extra, dtype=float).ravel()
        if not np.all(np.isfinite(extra_arr)):
            raise InvalidInputError("extra positions must be finite.")
        parts.append(extra_arr)

    knots = np.sort(np.concatenate(parts))
    keep = np.concatenate([[True], np.diff(knots) > MERGE_TOL * gap])
    return knots[keep]
