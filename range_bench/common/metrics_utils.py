"""
Shared utilities for benchmark metrics calculations: throughput and latency.
"""

import logging
from typing import Sequence

import pandas as pd

from range_bench.configuration import BYTES_PER_MB, MICROSECONDS_PER_SECOND

logger = logging.getLogger(__name__)


def calculate_throughput_mibps(total_bytes: int, elapsed_us: int) -> float:
    """
    Calculate throughput in mebibytes per second (MiB/s) from bytes and elapsed microseconds.

    Args:
        total_bytes: Total bytes transferred
        elapsed_us: Elapsed wall-clock time in microseconds

    Returns:
        Throughput in MiB/s, or 0.0 when no time elapsed
    """
    if elapsed_us <= 0:
        return 0.0
    return total_bytes / BYTES_PER_MB / (elapsed_us / MICROSECONDS_PER_SECOND)


def calculate_latency_stats(latencies_ms: Sequence[float]) -> dict:
    """
    Calculate latency statistics (mean and percentiles) of individual range gets.

    Args:
        latencies_ms: Latency of each range get in milliseconds

    Returns:
        Dictionary with avg, p50, p95, p99 latency statistics
    """
    if len(latencies_ms) == 0:
        return {
            'avg': 0.0,
            'p50': 0.0,
            'p95': 0.0,
            'p99': 0.0
        }

    latencies = pd.Series(latencies_ms, dtype=float)

    return {
        'avg': float(latencies.mean()),
        'p50': float(latencies.quantile(0.5)),
        'p95': float(latencies.quantile(0.95)),
        'p99': float(latencies.quantile(0.99))
    }
