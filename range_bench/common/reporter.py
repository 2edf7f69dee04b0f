"""
Timing and reporting of a scheduler run.
"""

import logging
import sys
import time
from typing import Any, Dict, TextIO

from range_bench.algorithms.layout import LayoutPlan
from range_bench.common.metrics_utils import calculate_latency_stats, calculate_throughput_mibps
from range_bench.common.record import BenchmarkResult
from range_bench.common.scheduler import RangeFetchScheduler
from range_bench.configuration import NANOSECONDS_PER_MICROSECOND

logger = logging.getLogger(__name__)


class MetricsReporter:
    """Times a scheduler run and writes one JSON result line per successful run."""

    def __init__(self, stream: TextIO = None):
        self.stream = stream

    async def run(
        self, scheduler: RangeFetchScheduler, plan: LayoutPlan, fields: Dict[str, Any]
    ) -> BenchmarkResult:
        """Execute ``plan`` and emit its result.

        Args:
            scheduler: Scheduler to execute the plan with
            plan: Layout plan to fetch
            fields: Pattern-specific fields leading the emitted record

        Returns:
            The emitted result. Failures propagate and nothing is emitted.
        """
        start_ns = time.perf_counter_ns()
        summary = await scheduler.execute(plan)
        elapsed_us = (time.perf_counter_ns() - start_ns) // NANOSECONDS_PER_MICROSECOND

        if summary.total_bytes != plan.total_bytes:
            logger.warning(
                f"Fetched {summary.total_bytes} bytes but the plan covers {plan.total_bytes} bytes"
            )

        result = BenchmarkResult(
            fields=fields,
            parallel_downloads=scheduler.max_concurrency,
            elapsed_us=elapsed_us,
            total_bytes=summary.total_bytes,
            mbps=calculate_throughput_mibps(summary.total_bytes, elapsed_us),
            fetch_count=summary.fetch_count,
            latency_stats=calculate_latency_stats(summary.latencies_ms),
        )

        logger.info(
            f"Fetched {summary.total_bytes} bytes in {elapsed_us / 1000:.1f} ms "
            f"({result.mbps:.2f} MiB/s, p50 latency {result.latency_stats['p50']:.1f} ms)"
        )
        self.emit(result)
        return result

    def emit(self, result: BenchmarkResult):
        stream = self.stream or sys.stdout
        stream.write(result.to_json() + "\n")
        stream.flush()
