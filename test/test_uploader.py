"""
Tests for the test-data uploader.
"""

import unittest

from range_bench.cli.uploader import Uploader, random_prefix
from range_bench.errors import InvalidLayoutError
from range_bench.systems.memory import InMemorySystem


class TestUploader(unittest.IsolatedAsyncioTestCase):
    """Test cases for Uploader class."""

    def setUp(self):
        self.storage = InMemorySystem()
        self.uploader = Uploader(self.storage, chunk_size=1000)

    def test_generate_test_data_size(self):
        chunks = list(self.uploader.generate_test_data(2500))

        self.assertEqual([len(chunk) for chunk in chunks], [1000, 1000, 500])
        self.assertTrue(all(isinstance(chunk, bytes) for chunk in chunks))

    def test_generate_test_data_is_random(self):
        first, second = self.uploader.generate_test_data(2000)
        self.assertNotEqual(first, second)

    def test_generate_no_data(self):
        self.assertEqual(list(self.uploader.generate_test_data(0)), [])

    async def test_upload_test_data(self):
        await self.uploader.upload_test_data("bench/test.bin", 4321)

        self.assertEqual(len(self.storage.objects["bench/test.bin"]), 4321)

    async def test_upload_test_data_overwrites(self):
        self.storage.objects["test.bin"] = b"old"

        await self.uploader.upload_test_data("test.bin", 10)

        self.assertEqual(len(self.storage.objects["test.bin"]), 10)

    async def test_upload_multiple(self):
        locations = await self.uploader.upload_multiple("bench", 3, 2700)

        self.assertEqual(
            locations, ["bench/object_0.bin", "bench/object_1.bin", "bench/object_2.bin"]
        )
        for location in locations:
            self.assertEqual(len(self.storage.objects[location]), 900)

    async def test_upload_multiple_random_prefixes(self):
        locations = await self.uploader.upload_multiple("bench", 2, 200, random_prefixes=True)

        for i, location in enumerate(locations):
            root, prefix, name = location.split("/")
            self.assertEqual(root, "bench")
            self.assertEqual(len(prefix), 8)
            self.assertTrue(prefix.isalnum())
            self.assertEqual(name, f"object_{i}.bin")

    async def test_upload_multiple_requires_divisible_size(self):
        with self.assertRaises(InvalidLayoutError):
            await self.uploader.upload_multiple("bench", 3, 1000)
        with self.assertRaises(InvalidLayoutError):
            await self.uploader.upload_multiple("bench", 0, 1000)

        self.assertEqual(self.storage.objects, {})

    def test_random_prefix(self):
        self.assertEqual(len(random_prefix()), 8)
        self.assertEqual(len(random_prefix(4)), 4)


if __name__ == '__main__':
    unittest.main()
