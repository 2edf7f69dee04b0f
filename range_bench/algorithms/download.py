"""
Parallel block download benchmark.
"""

import logging

from range_bench.algorithms.layout import default_block_size, plan_blocks
from range_bench.common.inspector import inspect_location, require_uniform_size
from range_bench.common.record import BenchmarkResult
from range_bench.common.reporter import MetricsReporter
from range_bench.common.scheduler import RangeFetchScheduler
from range_bench.configuration import DEFAULT_PARALLEL_DOWNLOADS

logger = logging.getLogger(__name__)


class ParallelDownload:
    """Benchmarks downloading whole objects as parallel block range gets.

    Each object is split into blocks of ``block_size`` bytes (by default
    ``parallel_downloads`` equal blocks) and at most ``parallel_downloads``
    blocks are in flight at once across all objects.
    """

    def __init__(
        self,
        storage_system,
        location: str,
        parallel_downloads: int = None,
        block_size: int = None,
        reporter: MetricsReporter = None,
    ):
        self.storage_system = storage_system
        self.location = location
        if parallel_downloads is None:
            parallel_downloads = DEFAULT_PARALLEL_DOWNLOADS
        self.parallel_downloads = parallel_downloads
        self.block_size = block_size
        self.reporter = reporter or MetricsReporter()

        logger.info(
            f"Initialized parallel download: {self.parallel_downloads} parallel downloads, "
            f"block size {block_size or 'auto'}"
        )

    async def execute(self) -> BenchmarkResult:
        objects = await inspect_location(self.storage_system, self.location)
        object_size = require_uniform_size(objects)

        block_size = self.block_size
        if block_size is None:
            block_size = default_block_size(object_size, self.parallel_downloads)
        plan = plan_blocks(objects, block_size=block_size)
        logger.info(
            f"Downloading {plan.num_objects} objects of {object_size} bytes "
            f"as {plan.unit_count} blocks of {block_size} bytes each"
        )

        scheduler = RangeFetchScheduler(self.storage_system, self.parallel_downloads)
        fields = {
            "num_objects": plan.num_objects,
            "num_blocks": plan.unit_count,
            "block_size": block_size,
        }
        return await self.reporter.run(scheduler, plan, fields)
