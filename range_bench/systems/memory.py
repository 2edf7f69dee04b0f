"""
In-process object storage system (``memory://`` URIs).
"""

import asyncio
import logging
from typing import Dict, Iterable, List

from range_bench.errors import NotFoundError
from range_bench.systems.base import ObjectMeta, ObjectStorageSystem, prefix_matches

logger = logging.getLogger(__name__)


class InMemorySystem(ObjectStorageSystem):
    """Object storage held in a dict; objects are listed in insertion order."""

    def __init__(self):
        self.objects: Dict[str, bytes] = {}

    async def head(self, location: str) -> ObjectMeta:
        location = location.strip("/")
        if location not in self.objects:
            raise NotFoundError(location)
        return ObjectMeta(location=location, size=len(self.objects[location]))

    async def list(self, prefix: str) -> List[ObjectMeta]:
        return [
            ObjectMeta(location=location, size=len(data))
            for location, data in self.objects.items()
            if prefix_matches(location, prefix)
        ]

    async def get_range(self, location: str, start: int, end: int) -> bytes:
        location = location.strip("/")
        if location not in self.objects:
            raise NotFoundError(location)
        # Yield so concurrent fetches interleave like real I/O
        await asyncio.sleep(0)
        return self.objects[location][start:end]

    async def put_streaming(self, location: str, chunks: Iterable[bytes]) -> None:
        self.objects[location.strip("/")] = b"".join(chunks)
