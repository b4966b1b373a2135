"""Tests for smoothkit.decomposition.seasonal_trend."""

import logging
import warnings

import numpy as np
import pytest
from numpy.testing import assert_allclose

from smoothkit import (
    DecompositionState,
    InvalidInputError,
    NonConvergenceWarning,
    STLConfig,
    decompose,
    stl,
)


def _quiet_stl(*args, **kwargs):
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", NonConvergenceWarning)
        return stl(*args, **kwargs)


def _quiet_decompose(*args, **kwargs):
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", NonConvergenceWarning)
        return decompose(*args, **kwargs)


def test_stl_rejects_small_ns():
    """Tests that a seasonal bandwidth below 7 is refused."""
    with pytest.raises(InvalidInputError, match="ns"):
        stl(np.random.default_rng(0).uniform(size=100), 10, ns=5)


def test_stl_shape_and_finite():
    """Tests that stl returns an (N, 3) array of finite components."""
    y = np.random.default_rng(0).uniform(size=100)
    out = _quiet_stl(y, 10)
    assert out.shape == (100, 3)
    assert np.all(np.isfinite(out))


def test_stl_components_reconstruct_series(seasonal_series):
    """Tests that seasonal + trend + remainder equals the input."""
    _, _, _, y = seasonal_series
    out = _quiet_stl(y, 12)
    assert_allclose(out.sum(axis=1), y, atol=1e-10)


def test_stl_recovers_seasonal_and_trend(seasonal_series):
    """Tests that a sinusoid plus a linear trend is separated."""
    _, seasonal, trend, y = seasonal_series
    out = _quiet_stl(y, 12)
    s, t = out[:, 0], out[:, 1]

    assert np.corrcoef(s, seasonal)[0, 1] > 0.95
    assert np.corrcoef(t, trend)[0, 1] > 0.99
    assert abs(s.mean()) < 0.1

    lags = np.arange(1, 19)
    acf = [np.corrcoef(s[:-k], s[k:])[0, 1] for k in lags]
    assert lags[int(np.argmax(acf))] == 12


def test_stl_missing_values(seasonal_series):
    """Tests that missing inputs leave NaN only in the remainder."""
    _, _, _, y = seasonal_series
    y = y.astype(object)
    missing = [3, 50, 51, 200]
    for i in missing:
        y[i] = None
    out = _quiet_stl(list(y), 12)
    assert np.all(np.isfinite(out[:, :2]))
    assert np.all(np.isnan(out[missing, 2]))
    assert np.isfinite(np.delete(out[:, 2], missing)).all()


def test_decompose_converges_on_clean_series(seasonal_series):
    """Tests that robust mode stops on convergence without warnings."""
    _, _, _, y = seasonal_series
    with warnings.catch_warnings():
        warnings.simplefilter("error", NonConvergenceWarning)
        state = decompose(y, 12)
    assert isinstance(state, DecompositionState)
    assert state.converged
    assert state.outer_iteration < 100
    assert state.trend_ratios[-1] < 0.01 and state.seasonal_ratios[-1] < 0.01


def test_decompose_ratios_mostly_decrease(seasonal_series):
    """Tests that the trend convergence ratio decreases most of the time."""
    _, _, _, y = seasonal_series
    ratios = np.array(decompose(y, 12).trend_ratios)
    assert ratios.size >= 2
    assert np.isinf(ratios[0])
    assert np.mean(np.diff(ratios) <= 0.0) >= 0.5


def test_non_robust_runs_no_plus_one_passes(seasonal_series):
    """Tests that the non-robust loop stops after at most no + 1 outer passes."""
    _, _, _, y = seasonal_series
    state = _quiet_decompose(y, 12, robust=False, no=2)
    assert state.outer_iteration <= 3
    assert len(state.trend_ratios) <= 3 * 2


def test_non_convergence_warns(seasonal_series):
    """Tests that a single pass warns about both components."""
    _, _, _, y = seasonal_series
    with pytest.warns(NonConvergenceWarning) as record:
        decompose(y, 12, robust=False, ni=1, no=0)
    messages = " ".join(str(w.message) for w in record)
    assert "Seasonal" in messages and "Trend" in messages


def test_max_outer_caps_robust_loop(seasonal_series, caplog):
    """Tests that robust mode stops after max_outer passes and logs a warning."""
    _, _, _, y = seasonal_series
    caplog.set_level(logging.WARNING, logger="smoothkit")
    state = _quiet_decompose(y, 12, threshold=1e-15, max_outer=3)
    assert state.outer_iteration == 3
    assert len(state.trend_ratios) == 3
    assert any("max_outer=3" in r.getMessage() for r in caplog.records)


def test_robustness_downweights_outlier(seasonal_series):
    """Tests that robustness iterations give a large outlier zero weight."""
    _, _, _, y = seasonal_series
    y = y.copy()
    y[100] += 50.0
    state = _quiet_decompose(y, 12, no=5)
    assert state.weights[100] == 0.0
    assert state.remainder[100] > 40.0
    assert np.median(state.weights) > 0.5


def test_verbose_logs_iterations_at_info(seasonal_series, caplog):
    """Tests that verbose mode reports convergence ratios at INFO."""
    _, _, _, y = seasonal_series
    caplog.set_level(logging.INFO, logger="smoothkit")
    _quiet_stl(y, 12, verbose=True)
    messages = [r.getMessage() for r in caplog.records if r.levelno == logging.INFO]
    assert any("seasonal convergence" in m for m in messages)


def test_post_smoothing_toggle(seasonal_series):
    """Tests that disabling post-smoothing changes only the seasonal and remainder."""
    _, _, _, y = seasonal_series
    raw = _quiet_stl(y, 12, post_smooth=False)
    smoothed = _quiet_stl(y, 12, post_q=5)
    assert_allclose(raw[:, 1], smoothed[:, 1])
    assert not np.allclose(raw[:, 0], smoothed[:, 0])
    assert_allclose(smoothed.sum(axis=1), y, atol=1e-10)


def test_decompose_accepts_config(seasonal_series):
    """Tests that decompose with a config equals stl with keywords."""
    _, _, _, y = seasonal_series
    cfg = STLConfig(12, ns=9)
    state = _quiet_decompose(y, config=cfg)
    assert_allclose(state.as_matrix(), _quiet_stl(y, 12, ns=9))


@pytest.mark.parametrize(
    "call, match",
    [
        (lambda y: decompose(y), "period is required"),
        (lambda y: decompose(y, config=STLConfig(12), ns=9), "not both"),
        (lambda y: decompose(y, 6, config=STLConfig(12)), "does not match"),
        (lambda y: stl(y[:20], 12), "two full periods"),
    ],
)
def test_decompose_invalid_calls(seasonal_series, call, match):
    """Tests argument conflicts and too short series."""
    _, _, _, y = seasonal_series
    with pytest.raises(InvalidInputError, match=match):
        call(y)


def test_stl_rejects_empty_phase():
    """Tests that a phase without any observation is refused."""
    y = np.arange(48.0)
    y[2::12] = np.nan
    with pytest.raises(InvalidInputError, match="phase 2"):
        stl(y, 12)


@pytest.mark.parallel
def test_stl_parallel_matches_serial(seasonal_series, extra_threads_ok):
    """Tests that threaded subseries fits give the same decomposition."""
    if not extra_threads_ok:
        pytest.skip("cannot spawn extra threads")
    _, _, _, y = seasonal_series
    assert_allclose(_quiet_stl(y, 12, n_workers=3), _quiet_stl(y, 12, n_workers=1))
