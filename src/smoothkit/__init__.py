"""Provides loess smoothing, STL decomposition and moving average filters."""

from importlib.metadata import PackageNotFoundError, version

from smoothkit.decomposition.seasonal_trend import decompose, stl
from smoothkit.decomposition.state import DecompositionState
from smoothkit.decomposition.stl_config import STLConfig
from smoothkit.exceptions import InvalidInputError, NonConvergenceWarning
from smoothkit.filters.digital import digital_filter
from smoothkit.filters.henderson import hma
from smoothkit.filters.moving_average import sma
from smoothkit.regression.local_regression import loess
from smoothkit.regression.model import RegressionModel
from smoothkit.utils.numerics import next_odd

try:
    __version__ = version("smoothkit")
except PackageNotFoundError:
    pass

__all__ = [
    "DecompositionState",
    "InvalidInputError",
    "NonConvergenceWarning",
    "RegressionModel",
    "STLConfig",
    "decompose",
    "digital_filter",
    "hma",
    "loess",
    "next_odd",
    "sma",
    "stl",
]
