"""Utility functions for the smoothkit package."""

from .numerics import (
    convergence_ratio,
    mean_abs_deviation,
    next_odd,
    sturges_bins,
)
from .validate import as_series, present_mask

__all__ = [
    "as_series",
    "present_mask",
    "convergence_ratio",
    "mean_abs_deviation",
    "next_odd",
    "sturges_bins",
]
