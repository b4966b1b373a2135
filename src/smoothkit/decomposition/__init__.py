"""Seasonal-trend decomposition based on loess."""

from smoothkit.decomposition.seasonal_trend import decompose, stl
from smoothkit.decomposition.state import DecompositionState
from smoothkit.decomposition.stl_config import STLConfig

__all__ = ["decompose", "stl", "DecompositionState", "STLConfig"]
