"""
Async base classes for object storage systems.
"""

import abc
import logging
from dataclasses import dataclass
from typing import Iterable, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObjectMeta:
    """Location and size of one stored object."""

    location: str
    size: int


def join_location(*parts: str) -> str:
    """Join location segments with '/', dropping empty segments."""
    segments = []
    for part in parts:
        segments.extend(s for s in part.split("/") if s)
    return "/".join(segments)


def prefix_matches(location: str, prefix: str) -> bool:
    """Return True if ``location`` lies under ``prefix`` on a path-segment boundary."""
    prefix = prefix.strip("/")
    if not prefix:
        return True
    return location.startswith(prefix + "/")


class ObjectStorageSystem(abc.ABC):
    """Async base class for object storage systems.

    Storage systems are used as async context managers around a benchmark
    run. Range gets must be safe to issue concurrently on one instance.
    """

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        return None

    @abc.abstractmethod
    async def head(self, location: str) -> ObjectMeta:
        """Return metadata for ``location``.

        Raises:
            NotFoundError: If no object exists at ``location``
        """

    @abc.abstractmethod
    async def list(self, prefix: str) -> List[ObjectMeta]:
        """Return metadata for every object under ``prefix``."""

    @abc.abstractmethod
    async def get_range(self, location: str, start: int, end: int) -> bytes:
        """Return bytes ``[start, end)`` of the object at ``location``."""

    @abc.abstractmethod
    async def put_streaming(self, location: str, chunks: Iterable[bytes]) -> None:
        """Write an object from an iterable of chunks, replacing any existing one."""
