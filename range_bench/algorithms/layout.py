"""
Layout planning for the block and columnar access patterns.

Both planners are pure: they turn object metadata and pattern parameters
into an ordered ``LayoutPlan`` of fetch units without touching storage.
A fetch unit occupies one slot of the scheduler's concurrency window; it
holds a single block for the block pattern, or every column page of one
row-group for the columnar pattern.

Units are interleaved across objects (all objects for unit index 0, then
all objects for unit index 1, ...) so that work fans out across objects
early when the concurrency limit is smaller than the plan.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from range_bench.errors import InvalidLayoutError
from range_bench.systems.base import ObjectMeta

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ByteRange:
    """Half-open byte range ``[start, end)``."""

    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class FetchTask:
    object: ObjectMeta
    range: ByteRange


@dataclass(frozen=True)
class FetchUnit:
    """Fetch tasks that are admitted together and share one concurrency slot."""

    tasks: Tuple[FetchTask, ...]

    @property
    def num_bytes(self) -> int:
        return sum(len(task.range) for task in self.tasks)


@dataclass(frozen=True)
class LayoutPlan:
    units: Tuple[FetchUnit, ...]
    total_bytes: int
    unit_count: int  # blocks or groups per object
    num_objects: int

    @property
    def tasks(self) -> List[FetchTask]:
        return [task for unit in self.units for task in unit.tasks]


def _ceil_div(numerator: int, denominator: int) -> int:
    return -(-numerator // denominator)


def default_block_size(object_size: int, concurrency: int) -> int:
    """Block size that splits an object into ``concurrency`` blocks."""
    if concurrency <= 0:
        raise InvalidLayoutError(f"Concurrency must be positive, got {concurrency}")
    return _ceil_div(object_size, concurrency)


def block_ranges(object_size: int, block_size: int) -> List[ByteRange]:
    """Split ``[0, object_size)`` into contiguous blocks; the last one is truncated."""
    if object_size <= 0:
        raise InvalidLayoutError(f"Cannot split an empty object (size {object_size}) into blocks")
    if block_size <= 0:
        raise InvalidLayoutError(f"Block size must be positive, got {block_size}")

    num_blocks = _ceil_div(object_size, block_size)
    return [
        ByteRange(block_i * block_size, min((block_i + 1) * block_size, object_size))
        for block_i in range(num_blocks)
    ]


def plan_blocks(
    objects: Sequence[ObjectMeta],
    block_size: Optional[int] = None,
    concurrency: Optional[int] = None,
) -> LayoutPlan:
    """Plan the block pattern over same-sized ``objects``.

    Args:
        objects: Objects under test, all of the same size
        block_size: Size of each block; defaults to splitting each object into ``concurrency`` blocks
        concurrency: Target block count, used only when ``block_size`` is None

    Returns:
        Plan with one single-task unit per (block, object)
    """
    if not objects:
        raise InvalidLayoutError("No objects to plan")
    object_size = objects[0].size
    if block_size is None:
        if concurrency is None:
            raise InvalidLayoutError("Either block_size or concurrency is required")
        block_size = default_block_size(object_size, concurrency)

    ranges = block_ranges(object_size, block_size)
    units = tuple(
        FetchUnit((FetchTask(obj, byte_range),))
        for byte_range in ranges
        for obj in objects
    )

    logger.debug(
        f"Planned {len(ranges)} blocks of {block_size} bytes across {len(objects)} objects"
    )
    return LayoutPlan(
        units=units,
        total_bytes=len(objects) * object_size,
        unit_count=len(ranges),
        num_objects=len(objects),
    )


def compute_page_offsets(
    object_size: int, page_sizes: Sequence[int]
) -> Tuple[int, List[List[int]]]:
    """Lay out repeating row-groups of column pages over an object.

    A row-group stores one page per column, back to back in column order,
    and row-groups repeat until the next one would not fit.

    Args:
        object_size: Size of the object in bytes
        page_sizes: Page size of each column, in column order

    Returns:
        Tuple of (number of groups, per-column list of page start offsets by group)
    """
    if not page_sizes:
        raise InvalidLayoutError("At least one page size is required")
    if any(page_size <= 0 for page_size in page_sizes):
        raise InvalidLayoutError(f"Page sizes must be positive, got {list(page_sizes)}")

    group_size = sum(page_sizes)
    num_groups = object_size // group_size
    assert num_groups * group_size <= object_size, "object is too small"

    page_offsets: List[List[int]] = [[] for _ in page_sizes]
    offset = 0
    for _group_i in range(num_groups):
        for column_i, page_size in enumerate(page_sizes):
            page_offsets[column_i].append(offset)
            offset += page_size

    return num_groups, page_offsets


def plan_columnar(objects: Sequence[ObjectMeta], page_sizes: Sequence[int]) -> LayoutPlan:
    """Plan the columnar pattern over same-sized ``objects``.

    Bytes after the last complete row-group are not fetched.

    Returns:
        Plan with one unit per (row-group, object), each holding one task per column
    """
    if not objects:
        raise InvalidLayoutError("No objects to plan")
    object_size = objects[0].size
    num_groups, page_offsets = compute_page_offsets(object_size, page_sizes)
    group_size = sum(page_sizes)

    if num_groups == 0:
        raise InvalidLayoutError(
            f"Object size {object_size} is smaller than one row-group ({group_size} bytes)"
        )

    units = []
    for group_i in range(num_groups):
        for obj in objects:
            units.append(FetchUnit(tuple(
                FetchTask(obj, ByteRange(offsets[group_i], offsets[group_i] + page_size))
                for offsets, page_size in zip(page_offsets, page_sizes)
            )))

    remainder = object_size - num_groups * group_size
    if remainder:
        logger.info(f"Skipping {remainder} trailing bytes per object after the last row-group")

    return LayoutPlan(
        units=tuple(units),
        total_bytes=len(objects) * num_groups * group_size,
        unit_count=num_groups,
        num_objects=len(objects),
    )
