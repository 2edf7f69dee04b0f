"""
Common utilities for the range retrieval benchmark.
"""

from .inspector import inspect_location, require_uniform_size
from .reporter import MetricsReporter
from .scheduler import FetchSummary, RangeFetchScheduler

__all__ = [
    'inspect_location',
    'require_uniform_size',
    'MetricsReporter',
    'FetchSummary',
    'RangeFetchScheduler',
]
