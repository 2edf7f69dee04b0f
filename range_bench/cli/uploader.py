"""
Upload random test objects to object storage.
"""

import logging
import os
import random
import string
import time
from typing import Iterator, List

from range_bench.configuration import (
    BYTES_PER_MB,
    OBJECT_NAME_TEMPLATE,
    RANDOM_PREFIX_LENGTH,
    UPLOAD_CHUNK_SIZE,
)
from range_bench.errors import InvalidLayoutError
from range_bench.systems.base import ObjectStorageSystem, join_location

logger = logging.getLogger(__name__)


class Uploader:
    """Uploader for random test objects.

    Data is generated and written in chunks of ``chunk_size`` bytes so
    objects larger than memory can be uploaded.
    """

    def __init__(self, storage_system: ObjectStorageSystem, chunk_size: int = None):
        self.storage_system = storage_system
        self.chunk_size = chunk_size or UPLOAD_CHUNK_SIZE

    def generate_test_data(self, size: int) -> Iterator[bytes]:
        """Yield random chunks totalling ``size`` bytes."""
        written = 0
        while written < size:
            to_write = min(size - written, self.chunk_size)
            yield os.urandom(to_write)
            written += to_write

    async def upload_test_data(self, location: str, size: int):
        """Upload one random object of ``size`` bytes, overwriting existing data."""
        logger.info(f"Uploading {location} ({size} bytes)")
        start_time = time.time()

        await self.storage_system.put_streaming(location, self.generate_test_data(size))

        upload_time = time.time() - start_time
        if upload_time > 0:
            logger.info(
                f"Uploaded {location} in {upload_time:.2f} seconds "
                f"({size / BYTES_PER_MB / upload_time:.2f} MiB/s)"
            )

    async def upload_multiple(
        self, location: str, num_objects: int, size: int, random_prefixes: bool = False
    ) -> List[str]:
        """Upload ``num_objects`` objects sharing ``size`` bytes equally.

        Objects are named ``<location>/[<prefix>/]object_<i>.bin``; with
        ``random_prefixes`` every object gets its own random prefix.

        Returns:
            Locations of the uploaded objects
        """
        if num_objects <= 0:
            raise InvalidLayoutError(f"num_objects must be positive, got {num_objects}")
        if size % num_objects != 0:
            raise InvalidLayoutError(
                f"size ({size}) must be divisible by num_objects ({num_objects})"
            )
        size_per_object = size // num_objects

        locations = []
        for i in range(num_objects):
            parts = [location]
            if random_prefixes:
                parts.append(random_prefix())
            parts.append(OBJECT_NAME_TEMPLATE.format(i))
            object_location = join_location(*parts)

            await self.upload_test_data(object_location, size_per_object)
            locations.append(object_location)

        logger.info(f"Uploaded {num_objects} objects of {size_per_object} bytes under {location}")
        return locations


def random_prefix(length: int = RANDOM_PREFIX_LENGTH) -> str:
    return "".join(random.choices(string.ascii_letters + string.digits, k=length))
