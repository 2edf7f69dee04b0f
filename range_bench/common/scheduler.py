"""
Bounded-concurrency range fetch scheduler.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import List, Set

from range_bench.algorithms.layout import FetchTask, FetchUnit, LayoutPlan
from range_bench.configuration import PROGRESS_INTERVAL
from range_bench.errors import FetchFailure
from range_bench.systems.base import ObjectStorageSystem

logger = logging.getLogger(__name__)


@dataclass
class FetchSummary:
    """Aggregate of a successful scheduler run."""

    total_bytes: int = 0
    fetch_count: int = 0
    latencies_ms: List[float] = field(default_factory=list)


class RangeFetchScheduler:
    """Executes a layout plan with at most ``max_concurrency`` fetch units in flight.

    Units are admitted in plan order through a sliding window: a new unit
    starts as soon as any outstanding one finishes. All tasks of a unit
    are issued together and run concurrently with each other.

    The first failed range get stops admission, cancels outstanding
    units and is raised as ``FetchFailure``. There are no retries.
    """

    def __init__(self, storage_system: ObjectStorageSystem, max_concurrency: int):
        if max_concurrency <= 0:
            raise ValueError(f"max_concurrency must be positive, got {max_concurrency}")
        self.storage_system = storage_system
        self.max_concurrency = max_concurrency

    async def execute(self, plan: LayoutPlan) -> FetchSummary:
        summary = FetchSummary()
        in_flight: Set[asyncio.Task] = set()
        units_completed = 0
        self._next_progress = PROGRESS_INTERVAL

        logger.info(
            f"Fetching {len(plan.units)} units ({len(plan.tasks)} range gets, "
            f"{plan.total_bytes} bytes) with {self.max_concurrency} in flight"
        )

        try:
            for unit in plan.units:
                if len(in_flight) >= self.max_concurrency:
                    done, in_flight = await asyncio.wait(
                        in_flight, return_when=asyncio.FIRST_COMPLETED
                    )
                    units_completed += self._collect(done, summary)
                    self._log_progress(units_completed, len(plan.units))

                in_flight.add(asyncio.create_task(self._fetch_unit(unit)))

            while in_flight:
                done, in_flight = await asyncio.wait(
                    in_flight, return_when=asyncio.FIRST_COMPLETED
                )
                units_completed += self._collect(done, summary)
                self._log_progress(units_completed, len(plan.units))
        finally:
            if in_flight:
                logger.warning(f"Cancelling {len(in_flight)} outstanding fetch units")
                for task in in_flight:
                    task.cancel()
                await asyncio.gather(*in_flight, return_exceptions=True)

        return summary

    @staticmethod
    def _collect(done: Set[asyncio.Task], summary: FetchSummary) -> int:
        """Add finished units to ``summary``; raises the first failure found."""
        results = []
        failure = None
        for task in done:
            if task.exception() is not None:
                failure = failure or task.exception()
                continue
            results.append(task.result())
        if failure is not None:
            raise failure

        for unit_results in results:
            for num_bytes, latency_ms in unit_results:
                summary.total_bytes += num_bytes
                summary.fetch_count += 1
                summary.latencies_ms.append(latency_ms)
        return len(results)

    def _log_progress(self, units_completed: int, total_units: int):
        # Several units can finish per wait, so compare against a threshold
        if units_completed >= self._next_progress or units_completed == total_units:
            logger.debug(f"Progress: {units_completed}/{total_units} units completed")
            while self._next_progress <= units_completed:
                self._next_progress += PROGRESS_INTERVAL

    async def _fetch_unit(self, unit: FetchUnit) -> List[tuple]:
        if len(unit.tasks) == 1:
            return [await self._fetch(unit.tasks[0])]

        fetches = [asyncio.ensure_future(self._fetch(task)) for task in unit.tasks]
        try:
            return await asyncio.gather(*fetches)
        except BaseException:
            for fetch in fetches:
                fetch.cancel()
            await asyncio.gather(*fetches, return_exceptions=True)
            raise

    async def _fetch(self, task: FetchTask) -> tuple:
        """Fetch one range and return (bytes read, latency in ms)."""
        location = task.object.location
        start_time = time.perf_counter()
        try:
            data = await self.storage_system.get_range(location, task.range.start, task.range.end)
        except Exception as e:
            raise FetchFailure(location, task.range.start, task.range.end, e) from e
        latency_ms = (time.perf_counter() - start_time) * 1000
        return len(data), latency_ms
