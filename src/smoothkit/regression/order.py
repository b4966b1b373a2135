"""Polynomial degree selection for loess."""

from __future__ import annotations

from enum import IntEnum

import numpy as np

from smoothkit.exceptions import InvalidInputError
from smoothkit.utils.numerics import mean_abs_deviation
from smoothkit.utils.types import FloatArray

__all__ = ["Degree", "khat", "resolve_degree"]

_FLAT_TOL = 1e-10


class Degree(IntEnum):
    """Degree of the local polynomial; ``AUTO`` asks :func:`khat` to choose."""

    AUTO = 0
    LINEAR = 1
    QUADRATIC = 2


def khat(y: FloatArray) -> int:
    """Estimates a polynomial order for ``y`` from its successive differences.

    The sequence is differenced repeatedly (at most four times) while the
    mean absolute deviation of the differences keeps shrinking. Differencing
    stops as soon as the differences are flat (deviation below ``1e-10``),
    stop decreasing, or run out. This is a best-effort heuristic and not an
    optimal order selection.

    Args:
        y: Present values, in support order.

    Returns:
        Number of productive differencing steps plus one. A series whose
        first differences are already flat returns 1.
    """
    dy = np.diff(np.asarray(y, dtype=float))
    if dy.size == 0:
        return 1
    ady = mean_abs_deviation(dy)
    if ady < _FLAT_TOL:
        return 1

    mi = 1
    for _ in range(3):
        dy = np.diff(dy)
        if dy.size == 0:
            break
        nady = mean_abs_deviation(dy)
        if nady < _FLAT_TOL or nady >= ady:
            break
        mi += 1
        ady = nady
    return mi + 1


def resolve_degree(degree: int, y: FloatArray) -> Degree:
    """Resolves a requested degree into a concrete linear or quadratic fit.

    Args:
        degree: 0 (auto), 1 or 2.
        y: Present values used by the auto selection.

    Returns:
        ``Degree.LINEAR`` or ``Degree.QUADRATIC``.

    Raises:
        InvalidInputError: If ``degree`` is not 0, 1 or 2.
    """
    try:
        requested = Degree(degree)
    except ValueError:
        raise InvalidInputError(
            f"degree must be 0 (auto), 1 or 2 but is {degree!r}."
        ) from None

    if requested is Degree.AUTO:
        return Degree(min(max(khat(y), 1), 2))
    return requested
