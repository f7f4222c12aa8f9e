"""Collectors module for gathering resource metrics."""

from .local_collector import LocalCollector, MetricSourceError

__all__ = [
    "LocalCollector",
    "MetricSourceError",
]
