"""
Tests for resolving locations into objects under test.
"""

import unittest
from typing import Dict, Optional, get_type_hints

from range_bench.common.inspector import inspect_location, require_uniform_size
from range_bench.errors import ResolutionError, SizeMismatchError
from range_bench.systems.base import ObjectMeta
from range_bench.systems.memory import InMemorySystem


class FailingStorage(InMemorySystem):
    """Storage whose metadata lookups fail with a backend error."""

    def __init__(self, fail_head=True, fail_list=False):
        super().__init__()
        self.fail_head = fail_head
        self.fail_list = fail_list

    async def head(self, location):
        if self.fail_head:
            raise PermissionError("access denied")
        return await super().head(location)

    async def list(self, prefix):
        if self.fail_list:
            raise ConnectionError("listing failed")
        return await super().list(prefix)


class TestInspectLocation(unittest.IsolatedAsyncioTestCase):
    """Test inspect_location."""

    async def asyncSetUp(self):
        self.storage = InMemorySystem()
        self.storage.objects["bench/b.bin"] = b"x" * 10
        self.storage.objects["bench/a.bin"] = b"y" * 10
        self.storage.objects["bench/nested/c.bin"] = b"z" * 10
        self.storage.objects["benchmark/other.bin"] = b"w" * 3

    async def test_single_object(self):
        objects = await inspect_location(self.storage, "bench/a.bin")

        self.assertEqual(objects, [ObjectMeta("bench/a.bin", 10)])

    async def test_prefix_lists_in_backend_order(self):
        objects = await inspect_location(self.storage, "bench")

        self.assertEqual(
            [obj.location for obj in objects],
            ["bench/b.bin", "bench/a.bin", "bench/nested/c.bin"],
        )

    async def test_missing_location(self):
        with self.assertRaises(ResolutionError):
            await inspect_location(self.storage, "missing")

    async def test_backend_error_on_head(self):
        with self.assertRaises(ResolutionError) as ctx:
            await inspect_location(FailingStorage(), "bench/a.bin")
        self.assertIsInstance(ctx.exception.cause, PermissionError)

    async def test_backend_error_on_list(self):
        storage = FailingStorage(fail_head=False, fail_list=True)
        with self.assertRaises(ResolutionError) as ctx:
            await inspect_location(storage, "bench")
        self.assertIsInstance(ctx.exception.cause, ConnectionError)


class TestRequireUniformSize(unittest.TestCase):
    """Test the uniform-size check."""

    def test_uniform(self):
        objects = [ObjectMeta("a", 100), ObjectMeta("b", 100)]
        self.assertEqual(require_uniform_size(objects), 100)

    def test_mismatch(self):
        objects = [ObjectMeta("a", 100), ObjectMeta("b", 101)]
        with self.assertRaises(SizeMismatchError) as ctx:
            require_uniform_size(objects)
        self.assertEqual(ctx.exception.sizes, {"a": 100, "b": 101})

    def test_empty(self):
        with self.assertRaises(ResolutionError):
            require_uniform_size([])

    def test_error_signatures_resolve(self):
        self.assertEqual(
            get_type_hints(ResolutionError.__init__)["cause"], Optional[Exception]
        )
        self.assertEqual(get_type_hints(SizeMismatchError.__init__)["sizes"], Dict[str, int])
        self.assertEqual(str(ResolutionError("bench")), "Could not resolve location 'bench'")


if __name__ == '__main__':
    unittest.main()
