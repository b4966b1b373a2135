"""Smoothing stages of one STL inner pass and of the outer loop.

Each stage is a plain function of arrays so it can be exercised on its own;
:mod:`smoothkit.decomposition.seasonal_trend` wires them together through a
:class:`~smoothkit.decomposition.state.DecompositionState`.
"""

from __future__ import annotations

import numpy as np

from smoothkit.filters.moving_average import sma
from smoothkit.regression.local_regression import loess
from smoothkit.utils import concurrency
from smoothkit.utils.numerics import nan_median_abs
from smoothkit.utils.types import FloatArray

__all__ = [
    "centered_support",
    "cycle_subseries",
    "low_pass",
    "trend_smoothing",
    "robustness_weights",
    "post_smoothing",
]


def centered_support(n: int) -> FloatArray:
    """Returns the support ``1..n`` shifted by ``n // 2`` to keep positions small."""
    return np.arange(1.0, n + 1.0) - n // 2


def _smooth_subseries(
    x: FloatArray,
    y: FloatArray,
    rho: FloatArray,
    x_eval: FloatArray,
    ns: int,
) -> FloatArray:
    """Fits one cycle-subseries with a linear loess and evaluates it at ``x_eval``."""
    return loess(x, y, degree=1, q=ns, rho=rho)(x_eval)


def cycle_subseries(
    detrended: FloatArray,
    weights: FloatArray,
    period: int,
    ns: int,
    n_workers: int = 1,
) -> FloatArray:
    """Smooths every cycle-subseries and extends it by one cycle on each side.

    The observations at phase ``j`` (indices ``j, j + period, ...``) are
    smoothed independently with a linear loess of bandwidth ``ns`` and the
    robustness weights of those observations. Each fit is evaluated at its
    own positions plus one period before the first and one after the last,
    which yields a series of length ``N + 2 * period``.

    Args:
        detrended: Series minus the current trend, ``NaN`` where missing.
        weights: Robustness weights, same length.
        period: Number of observations per cycle.
        ns: Seasonal bandwidth.
        n_workers: Threads used to fit the subseries.

    Returns:
        The extended cycle series.
    """
    n = detrended.size
    cycle = np.empty(n + 2 * period, dtype=float)

    tasks = []
    for phase in range(period):
        idx = np.arange(phase, n, period)
        x_eval = np.arange(phase, n + 2 * period, period, dtype=float) - period
        tasks.append((idx.astype(float), detrended[idx], weights[idx], x_eval, ns))

    results = concurrency.parallel_execute(_smooth_subseries, tasks, n_workers=n_workers)
    for phase, smoothed in enumerate(results):
        cycle[phase::period] = smoothed
    return cycle


def low_pass(
    cycle: FloatArray,
    weights: FloatArray,
    period: int,
    nl: int,
) -> FloatArray:
    """Low-pass filters the extended cycle series.

    Two moving averages of length ``period`` and one of length 3 bring the
    series back to ``N`` values, which are then smoothed by a linear loess
    of bandwidth ``nl``.

    Args:
        cycle: Extended cycle series of length ``N + 2 * period``.
        weights: Robustness weights of length ``N``.
        period: Number of observations per cycle.
        nl: Low-pass bandwidth.

    Returns:
        The low-frequency series, length ``N``.
    """
    averaged = sma(sma(sma(cycle, period), period), 3)
    x = centered_support(averaged.size)
    return loess(x, averaged, degree=1, q=nl, rho=weights)(x)


def trend_smoothing(
    deseasonalized: FloatArray,
    weights: FloatArray,
    nt: int,
) -> FloatArray:
    """Smooths the deseasonalized series with a linear loess of bandwidth ``nt``.

    Missing observations are skipped by the fit but the returned trend is
    defined at every position.
    """
    x = centered_support(deseasonalized.size)
    return loess(x, deseasonalized, degree=1, q=nt, rho=weights)(x)


def robustness_weights(remainder: FloatArray) -> FloatArray:
    """Computes bisquare robustness weights from the remainder.

    With ``h = 6 * median(|R|)`` and ``u = |R_i| / h``, the weight is
    ``(1 - u**2)**2`` for ``u < 1`` and 0 otherwise. Missing remainders get
    weight 0. If ``h`` is zero, exact fits keep weight 1 and every other
    point gets 0.

    Args:
        remainder: Remainder component, ``NaN`` where the input is missing.

    Returns:
        Weights in ``[0, 1]``, same length as ``remainder``.
    """
    abs_r = np.abs(remainder)
    present = ~np.isnan(abs_r)
    h = 6.0 * nan_median_abs(remainder)

    w = np.zeros(remainder.size, dtype=float)
    if h > 0.0:
        u = abs_r[present] / h
        w[present] = np.where(u < 1.0, (1.0 - u**2) ** 2, 0.0)
    else:
        w[present] = np.where(abs_r[present] == 0.0, 1.0, 0.0)
    return w


def post_smoothing(seasonal: FloatArray, post_q: int) -> FloatArray:
    """Smooths the seasonal component with a quadratic loess solved at every position."""
    x = centered_support(seasonal.size)
    return loess(x, seasonal, degree=2, q=post_q, exact=x)(x)
