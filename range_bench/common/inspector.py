"""
Resolution of a storage location into the objects under test.
"""

import logging
from typing import List

from range_bench.errors import NotFoundError, ResolutionError, SizeMismatchError
from range_bench.systems.base import ObjectMeta, ObjectStorageSystem

logger = logging.getLogger(__name__)


async def inspect_location(storage_system: ObjectStorageSystem, location: str) -> List[ObjectMeta]:
    """Return all objects addressed by ``location`` with their sizes.

    If the location is an object itself, only that object is returned.
    Otherwise it is treated as a prefix and every object under it is
    returned in listing order.

    Raises:
        ResolutionError: If nothing lives at or under the location, or the backend fails
    """
    try:
        metadata = await storage_system.head(location)
        logger.info(f"Found object {metadata.location} ({metadata.size} bytes)")
        return [metadata]
    except NotFoundError:
        logger.debug(f"{location!r} is not an object, listing it as a prefix")
    except Exception as e:
        raise ResolutionError(location, e) from e

    try:
        objects = await storage_system.list(location)
    except Exception as e:
        raise ResolutionError(location, e) from e

    if not objects:
        raise ResolutionError(location)

    logger.info(f"Found {len(objects)} objects under prefix {location!r}")
    return objects


def require_uniform_size(objects: List[ObjectMeta]) -> int:
    """Return the size shared by all ``objects``.

    Raises:
        ResolutionError: If ``objects`` is empty
        SizeMismatchError: If the objects differ in size
    """
    if not objects:
        raise ResolutionError("<empty>")

    sizes = {obj.location: obj.size for obj in objects}
    if len(set(sizes.values())) != 1:
        raise SizeMismatchError(sizes)
    return objects[0].size
