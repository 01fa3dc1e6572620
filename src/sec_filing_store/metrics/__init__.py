"""Metrics module — crawl statistics over the document store.

    - compute_*: Pure aggregation functions over a record snapshot
    - MetricsAggregator: Facade that reads the store and aggregates

Usage:
    from sec_filing_store.metrics import MetricsAggregator

    aggregator = MetricsAggregator(store)
    yearly = aggregator.yearly_metrics()
"""

from sec_filing_store.metrics.compute import (
    collect_processing_errors,
    compute_crawl_metrics,
    compute_overall_metrics,
    compute_yearly_metrics,
)
from sec_filing_store.metrics.aggregator import MetricsAggregator

__all__ = [
    "MetricsAggregator",
    "collect_processing_errors",
    "compute_crawl_metrics",
    "compute_overall_metrics",
    "compute_yearly_metrics",
]
