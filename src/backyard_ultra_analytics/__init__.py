"""Backyard Ultra Race Analytics Package.

Tools for exploring backyard ultra results across race editions: lap time
series with trend, EMA and dispersion overlays, trail/road section bands,
and placement vs. fatigue analysis.
"""

__version__ = "0.1.0"

# Make key modules easily accessible
from . import data_processing
from . import analysis
from . import visualization

__all__ = [
    "data_processing",
    "analysis",
    "visualization",
]
