"""Seasonal-trend decomposition based on loess (STL).

    "STL has a simple design that consists of a sequence of applications of
    the loess smoother; the simplicity allows analysis of the properties of
    the procedure and allows fast computation, even for very long time series
    and large amounts of trend and seasonal smoothing."

    R. B. Cleveland, W. S. Cleveland, J. E. McRae and I. Terpenning,
    "STL: A Seasonal-Trend Decomposition Procedure Based on Loess",
    Journal of Official Statistics 6(1), 1990, pp. 3-73.

An inner pass updates the seasonal and trend components; an outer pass
recomputes the remainder and, for the first ``no`` passes after the first,
the robustness weights. In robust mode the outer loop continues until both
components converge or ``max_outer`` passes have run.
"""

from __future__ import annotations

import logging
import warnings
from typing import Any

import numpy as np
from numpy.typing import ArrayLike

from smoothkit.decomposition.stages import (
    cycle_subseries,
    low_pass,
    post_smoothing,
    robustness_weights,
    trend_smoothing,
)
from smoothkit.decomposition.state import DecompositionState
from smoothkit.decomposition.stl_config import STLConfig
from smoothkit.exceptions import InvalidInputError, NonConvergenceWarning
from smoothkit.logger import smoothkit_logger
from smoothkit.utils.numerics import convergence_ratio
from smoothkit.utils.types import FloatArray
from smoothkit.utils.validate import as_series, present_mask

__all__ = ["decompose", "stl"]


def _validate_series(values: ArrayLike, period: int) -> FloatArray:
    """Checks that every cycle-subseries can be smoothed."""
    y = as_series(values)
    if y.size < 2 * period:
        raise InvalidInputError(
            f"the series needs at least two full periods ({2 * period} values); got {y.size}."
        )
    present = present_mask(y)
    for phase in range(period):
        if not present[phase::period].any():
            raise InvalidInputError(
                f"every value at phase {phase} of the period is missing."
            )
    return y


def inner_pass(state: DecompositionState, config: STLConfig, level: int = logging.DEBUG) -> None:
    """Runs one inner pass, updating the seasonal and trend components of ``state``."""
    y = state.values
    period = config.period

    detrended = y - state.trend
    s_ratio = convergence_ratio(detrended, state.previous_detrended)
    state.seasonal_converged = s_ratio < config.threshold
    state.previous_detrended = detrended
    state.seasonal_ratios.append(s_ratio)

    cycle = cycle_subseries(detrended, state.weights, period, config.ns, config.n_workers)
    low = low_pass(cycle, state.weights, period, config.nl)
    # subtracting the low-pass keeps low-frequency power out of the seasonal
    state.seasonal = cycle[period:-period] - low

    trend = trend_smoothing(y - state.seasonal, state.weights, config.nt)
    t_ratio = convergence_ratio(trend, state.previous_trend)
    state.trend_converged = t_ratio < config.threshold
    state.previous_trend = trend
    state.trend = trend
    state.trend_ratios.append(t_ratio)

    smoothkit_logger.log(
        level,
        "outer %d, inner %d: seasonal convergence %.6g, trend convergence %.6g",
        state.outer_iteration,
        len(state.trend_ratios),
        s_ratio,
        t_ratio,
    )


def decompose(
    values: ArrayLike,
    period: int | None = None,
    *,
    config: STLConfig | None = None,
    **kwargs: Any,
) -> DecompositionState:
    """Decomposes a series into seasonal, trend and remainder components.

    Args:
        values: Equally spaced observations; ``None`` or ``NaN`` mark
            missing values.
        period: Number of observations per seasonal cycle. May be omitted
            when ``config`` is given.
        config: Complete configuration. Mutually exclusive with ``kwargs``.
        **kwargs: Keyword arguments forwarded to :class:`STLConfig`.

    Returns:
        The final :class:`DecompositionState`, including the convergence
        flags and the ratio history of every inner pass.

    Raises:
        InvalidInputError: On invalid parameters, a series shorter than two
            periods, or a phase with no observations.

    Warns:
        NonConvergenceWarning: If the seasonal or trend iterates did not
            converge before the loop ended.
    """
    if config is None:
        if period is None:
            raise InvalidInputError("period is required when no config is given.")
        config = STLConfig(period, **kwargs)
    else:
        if kwargs:
            raise InvalidInputError(
                f"pass either config or keyword arguments, not both; got {sorted(kwargs)}."
            )
        if period is not None and period != config.period:
            raise InvalidInputError(
                f"period={period} does not match config.period={config.period}."
            )

    y = _validate_series(values, config.period)
    state = DecompositionState.initial(y)
    level = logging.INFO if config.verbose else logging.DEBUG

    while config.robust or state.outer_iteration <= config.no:
        if state.outer_iteration >= config.max_outer:
            smoothkit_logger.warning(
                "Stopping STL after max_outer=%d outer passes without convergence.",
                config.max_outer,
            )
            break

        for _ in range(config.ni):
            inner_pass(state, config, level)
            if state.converged:
                break

        state.remainder = y - state.trend - state.seasonal

        if state.converged:
            smoothkit_logger.info(
                "Convergence achieved (< %g); stopping computation.", config.threshold
            )
            break

        if 0 < state.outer_iteration <= config.no:
            state.weights = robustness_weights(state.remainder)
        state.outer_iteration += 1

    if config.post_smooth:
        state.seasonal = post_smoothing(state.seasonal, config.post_q)
        state.remainder = y - state.trend - state.seasonal

    if not state.seasonal_converged:
        warnings.warn(
            f"Seasonal convergence not achieved (>= {config.threshold}); "
            "consider a robust estimation.",
            NonConvergenceWarning,
            stacklevel=2,
        )
    if not state.trend_converged:
        warnings.warn(
            f"Trend convergence not achieved (>= {config.threshold}); "
            "consider a robust estimation.",
            NonConvergenceWarning,
            stacklevel=2,
        )
    return state


def stl(
    values: ArrayLike,
    period: int,
    *,
    robust: bool = True,
    nl: int | None = None,
    ns: int = 7,
    nt: int | None = None,
    ni: int | None = None,
    no: int = 0,
    post_smooth: bool = True,
    post_q: int | None = None,
    threshold: float = 0.01,
    verbose: bool = False,
    max_outer: int = 100,
    n_workers: int = 1,
) -> FloatArray:
    """Decomposes a time series into seasonal, trend and remainder components.

    See :class:`STLConfig` for the meaning and defaults of every parameter.
    ``ns`` in particular should be chosen from knowledge of the series; it
    must be odd and at least 7.

    Args:
        values: Equally spaced observations; ``None`` or ``NaN`` mark
            missing values.
        period: Number of observations per seasonal cycle (>= 2).
        robust: Iterate until convergence instead of ``no + 1`` outer passes.
        nl: Low-pass bandwidth.
        ns: Seasonal bandwidth.
        nt: Trend bandwidth.
        ni: Inner passes per outer pass.
        no: Outer passes that update the robustness weights.
        post_smooth: Smooth the final seasonal component.
        post_q: Post-smoothing bandwidth.
        threshold: Convergence threshold.
        verbose: Log per-iteration convergence at ``INFO``.
        max_outer: Hard cap on outer passes.
        n_workers: Threads for the cycle-subseries fits.

    Returns:
        An ``(N, 3)`` array whose columns are the seasonal, trend and
        remainder components. The remainder is ``NaN`` where the input is
        missing.

    Raises:
        InvalidInputError: On invalid parameters or series.

    Example:
        >>> import numpy as np
        >>> from smoothkit import stl
        >>> t = np.arange(120)
        >>> y = np.sin(2 * np.pi * t / 12) + 0.01 * t
        >>> stl(y, 12).shape
        (120, 3)
    """
    config = STLConfig(
        period,
        robust=robust,
        nl=nl,
        ns=ns,
        nt=nt,
        ni=ni,
        no=no,
        post_smooth=post_smooth,
        post_q=post_q,
        threshold=threshold,
        verbose=verbose,
        max_outer=max_outer,
        n_workers=n_workers,
    )
    return decompose(values, config=config).as_matrix()
