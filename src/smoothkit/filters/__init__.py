"""Moving average and recursive filters."""

from smoothkit.filters.digital import digital_filter
from smoothkit.filters.henderson import hma, hma_asymmetric_weights, hma_symmetric_weights
from smoothkit.filters.moving_average import sma

__all__ = [
    "digital_filter",
    "hma",
    "hma_asymmetric_weights",
    "hma_symmetric_weights",
    "sma",
]
