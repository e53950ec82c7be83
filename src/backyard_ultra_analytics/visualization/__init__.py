"""Visualization components for the results dashboard."""

from .charts import *
from .dashboards import *

__all__ = [
    "create_lap_time_chart",
    "create_cohort_chart",
    "build_results_dashboard",
]
