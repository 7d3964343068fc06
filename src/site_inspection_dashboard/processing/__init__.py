"""Filtering, classification, aggregation and drill-down of inspection records."""

from .filters import apply_filters, apply_status_filter
from .aggregator import StatsAggregator, aggregate
from .drilldown import DrillDown, DrillDownProjector, available_selectors, project

__all__ = [
    "apply_filters",
    "apply_status_filter",
    "StatsAggregator",
    "aggregate",
    "DrillDown",
    "DrillDownProjector",
    "available_selectors",
    "project",
]
