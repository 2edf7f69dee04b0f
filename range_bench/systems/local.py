"""
Local filesystem object storage system (``file://`` URIs).
"""

import asyncio
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional

from range_bench.configuration import LOCAL_IO_THREADS
from range_bench.errors import NotFoundError
from range_bench.systems.base import ObjectMeta, ObjectStorageSystem

logger = logging.getLogger(__name__)


class LocalFileSystem(ObjectStorageSystem):
    """Object storage backed by a directory tree.

    Locations are paths relative to ``root``. Blocking file I/O runs on a
    dedicated thread pool so range gets overlap like network requests.
    """

    def __init__(self, root: str = "/", max_workers: int = None):
        self.root = root
        self.max_workers = max_workers or LOCAL_IO_THREADS
        self._executor: Optional[ThreadPoolExecutor] = None

        logger.debug(f"Initialized local storage at {root} ({self.max_workers} I/O threads)")

    async def __aenter__(self):
        self._ensure_executor()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def _ensure_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers, thread_name_prefix="local-io"
            )
        return self._executor

    def _path(self, location: str) -> str:
        return os.path.join(self.root, location.lstrip("/"))

    async def _run(self, func, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._ensure_executor(), func, *args)

    async def head(self, location: str) -> ObjectMeta:
        path = self._path(location)
        if not os.path.isfile(path):
            raise NotFoundError(location)
        return ObjectMeta(location=location, size=os.path.getsize(path))

    async def list(self, prefix: str) -> List[ObjectMeta]:
        return await self._run(self._list_sync, prefix)

    def _list_sync(self, prefix: str) -> List[ObjectMeta]:
        base = self._path(prefix)
        objects = []
        if not os.path.isdir(base):
            return objects
        for dirpath, dirnames, filenames in os.walk(base):
            dirnames.sort()
            for filename in sorted(filenames):
                path = os.path.join(dirpath, filename)
                location = os.path.relpath(path, self.root).replace(os.sep, "/")
                objects.append(ObjectMeta(location=location, size=os.path.getsize(path)))
        return objects

    async def get_range(self, location: str, start: int, end: int) -> bytes:
        return await self._run(self._read_range, self._path(location), start, end)

    @staticmethod
    def _read_range(path: str, start: int, end: int) -> bytes:
        with open(path, "rb") as f:
            f.seek(start)
            return f.read(end - start)

    async def put_streaming(self, location: str, chunks: Iterable[bytes]) -> None:
        path = self._path(location)
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "wb") as f:
            for chunk in chunks:
                await self._run(f.write, chunk)
        logger.debug(f"Wrote {path}")
