"""Univariate loess smoothing."""

from smoothkit.regression.local_regression import loess
from smoothkit.regression.model import RegressionModel, build_interpolant
from smoothkit.regression.order import Degree, khat

__all__ = ["loess", "RegressionModel", "build_interpolant", "Degree", "khat"]
