"""
Simulated columnar format read benchmark.

An existing blob is treated as a columnar file: a fixed set of page sizes
(one per column) forms a row-group, and row-groups repeat back to back
through the object. For example ``page_sizes=[1024, 4096, 16384]`` reads
pages of those sizes, one of each per row-group. Each row-group is read
as one unit with all of its column pages requested at once.
"""

import logging
from typing import List

from range_bench.algorithms.layout import plan_columnar
from range_bench.common.inspector import inspect_location, require_uniform_size
from range_bench.common.record import BenchmarkResult
from range_bench.common.reporter import MetricsReporter
from range_bench.common.scheduler import RangeFetchScheduler
from range_bench.configuration import DEFAULT_PAGE_SIZES, DEFAULT_PARALLEL_DOWNLOADS
from range_bench.errors import InvalidLayoutError

logger = logging.getLogger(__name__)


def parse_page_sizes(value: str) -> List[int]:
    """Parse a comma-separated list of positive page sizes."""
    try:
        page_sizes = [int(part) for part in value.split(",")]
    except ValueError:
        raise InvalidLayoutError(f"Page sizes must be comma-separated integers, got {value!r}")
    if any(page_size <= 0 for page_size in page_sizes):
        raise InvalidLayoutError(f"Page sizes must be positive, got {value!r}")
    return page_sizes


class ColumnarRead:
    """Benchmarks reading row-groups of column pages with bounded parallelism."""

    def __init__(
        self,
        storage_system,
        location: str,
        parallel_downloads: int = None,
        page_sizes: List[int] = None,
        reporter: MetricsReporter = None,
    ):
        self.storage_system = storage_system
        self.location = location
        if parallel_downloads is None:
            parallel_downloads = DEFAULT_PARALLEL_DOWNLOADS
        if page_sizes is None:
            page_sizes = parse_page_sizes(DEFAULT_PAGE_SIZES)
        self.parallel_downloads = parallel_downloads
        self.page_sizes = list(page_sizes)
        self.reporter = reporter or MetricsReporter()

        logger.info(
            f"Initialized columnar read: {len(self.page_sizes)} columns with page sizes "
            f"{self.page_sizes}, {self.parallel_downloads} row-groups in flight"
        )

    async def execute(self) -> BenchmarkResult:
        objects = await inspect_location(self.storage_system, self.location)
        object_size = require_uniform_size(objects)

        plan = plan_columnar(objects, self.page_sizes)
        logger.info(
            f"Reading {plan.unit_count} row-groups of {sum(self.page_sizes)} bytes "
            f"from each of {plan.num_objects} objects of {object_size} bytes"
        )

        scheduler = RangeFetchScheduler(self.storage_system, self.parallel_downloads)
        fields = {
            "num_objects": plan.num_objects,
            "num_groups": plan.unit_count,
            "page_sizes": self.page_sizes,
        }
        return await self.reporter.run(scheduler, plan, fields)
