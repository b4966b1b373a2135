"""Tests for smoothkit.regression.local_regression.loess."""

import logging

import numpy as np
import pytest
from numpy.testing import assert_allclose

from smoothkit import InvalidInputError, RegressionModel, loess
from smoothkit.regression.fit import local_fit


def test_loess_returns_callable_model():
    """Tests that loess returns a model evaluable at arbitrary positions."""
    rng = np.random.default_rng(0)
    xv = np.sort(rng.uniform(size=10))
    yv = rng.uniform(size=10)
    model = loess(xv, yv)
    assert isinstance(model, RegressionModel)
    out = model(rng.uniform(size=20))
    assert out.shape == (20,)
    assert np.all(np.isfinite(out))


def test_loess_rejects_degree_three():
    """Tests that only degrees 0, 1 and 2 are accepted."""
    x = np.sort(np.sin(np.arange(1.0, 6.0)))
    with pytest.raises(InvalidInputError, match="degree"):
        loess(x, np.sin(np.arange(1.0, 6.0)), degree=3)


def test_loess_exact_positions_match_local_fit():
    """Tests that the model equals the local regression at every exact position."""
    rng = np.random.default_rng(7)
    x = np.sort(rng.uniform(0.0, 10.0, 50))
    y = np.sin(x) + rng.normal(scale=0.2, size=50)
    exact = np.array([2.5, 5.0, 7.5])
    model = loess(x, y, degree=2, q=15, exact=exact)
    assert_allclose(model.knots, exact)
    for e in exact:
        assert_allclose(model(e), local_fit(e, x, y, 15, 2, np.ones(50)), atol=1e-9)


def test_loess_reproduces_linear_data():
    """Tests that a linear loess is exact on a line, including extrapolation."""
    x = np.arange(50.0)
    model = loess(x, 3.0 * x - 2.0, degree=1, q=10)
    assert_allclose(model(x), 3.0 * x - 2.0, atol=1e-8)
    assert_allclose(model(60.0), 178.0, atol=1e-8)


def test_loess_reproduces_quadratic_data():
    """Tests that a quadratic loess is exact on a parabola."""
    x = np.linspace(0.0, 1.0, 40)
    model = loess(x, x**2, degree=2, q=12)
    grid = np.linspace(0.0, 1.0, 101)
    assert_allclose(model(grid), grid**2, atol=1e-8)


def test_loess_auto_degree():
    """Tests that degree 0 selects linear for lines and quadratic for curves."""
    x = np.arange(30.0)
    assert loess(x, 2.0 * x).degree == 1
    assert loess(x, x**2).degree == 2


def test_loess_values_only_uses_unit_support():
    """Tests that a single argument is smoothed against 1..n."""
    model = loess([1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
    assert_allclose(model(3.0), 3.0, atol=1e-10)
    assert_allclose(model(10.0), 10.0, atol=1e-8)


def test_loess_two_points_is_a_line():
    """Tests that two observations give the line through them."""
    model = loess([1.0, 3.0], [2.0, 6.0], degree=1)
    assert model.degree == 1
    assert_allclose(model(np.array([-1.0, 10.0])), [-2.0, 20.0])


def test_loess_one_point_is_constant():
    """Tests that a single present observation gives a constant."""
    assert loess([5.0], [3.0])(100.0) == 3.0
    model = loess([1.0, 2.0, 3.0], [np.nan, 4.0, None])
    assert_allclose(model(np.array([-5.0, 2.0, 8.0])), [4.0, 4.0, 4.0])


def test_loess_missing_values():
    """Tests that missing values are dropped and the model stays finite."""
    rng = np.random.default_rng(11)
    x = np.arange(1.0, 200.0, 2.0)
    y = rng.uniform(size=100)
    y[rng.choice(100, size=20, replace=False)] = np.nan
    out = loess(x, y)(np.arange(1.0, 40.0, 2.0))
    assert out.shape == (20,)
    assert np.all(np.isfinite(out))


def test_loess_bandwidth_rescaled_for_missing_values():
    """Tests that q shrinks with the fraction of present values."""
    rng = np.random.default_rng(5)
    x = np.arange(100.0)
    y = np.cos(x / 10.0) + rng.normal(scale=0.1, size=100)
    y_missing = y.copy()
    y_missing[::5] = np.nan
    present = ~np.isnan(y_missing)

    pts = np.linspace(0.0, 99.0, 37)
    assert_allclose(
        loess(x, y_missing, degree=1, q=40)(pts),
        loess(x[present], y[present], degree=1, q=32)(pts),
    )


def test_loess_reliability_weights_remove_outlier():
    """Tests that a zero reliability weight removes an outlier's influence."""
    x = np.arange(50.0)
    y = 0.5 * x + 2.0
    y[25] = 1e3
    rho = np.ones(50)
    rho[25] = 0.0
    assert_allclose(loess(x, y, degree=1, q=10, rho=rho)(25.0), 14.5, atol=1e-8)


def test_loess_allows_q_larger_than_n():
    """Tests that a bandwidth wider than the data still fits."""
    x = np.arange(10.0)
    out = loess(x, np.sqrt(x), degree=1, q=50)(x)
    assert np.all(np.isfinite(out))


def test_loess_extra_positions_become_knots():
    """Tests that extra positions are added to the generated knots."""
    x = np.arange(40.0)
    model = loess(x, np.sin(x / 5.0), degree=2, q=10, extra=[17.25])
    assert np.any(np.isclose(model.knots, 17.25))


def test_loess_logs_knot_table(caplog):
    """Tests that loess reports its fit size at debug level."""
    caplog.set_level(logging.DEBUG, logger="smoothkit")
    loess(np.arange(20.0), np.arange(20.0) ** 2, degree=2, q=5)
    assert any("loess: n=20" in r.getMessage() for r in caplog.records)


@pytest.mark.parametrize(
    "kwargs, match",
    [
        ({"xv": [0.0, 2.0, 1.0], "yv": [1.0, 2.0, 3.0]}, "strictly increasing"),
        ({"xv": [0.0, 1.0, 2.0], "yv": [1.0, 2.0]}, "same length"),
        ({"xv": [0.0, 1.0, 2.0], "yv": [1.0, 2.0, 3.0], "q": 0}, "at least 1"),
        ({"xv": [0.0, 1.0, 2.0], "yv": [None, None, None]}, "non-missing"),
        ({"xv": [0.0, 1.0, 2.0], "yv": [1.0, 2.0, 3.0], "rho": [1.0, -1.0, 1.0]}, "non-negative"),
        (
            {"xv": np.arange(10.0), "yv": np.arange(10.0), "degree": 2, "exact": [1.0, 2.0]},
            "more than 2",
        ),
    ],
)
def test_loess_invalid_input(kwargs, match):
    """Tests that invalid arguments raise InvalidInputError."""
    with pytest.raises(InvalidInputError, match=match):
        loess(**kwargs)
