"""
End-to-end tests of the command line interface against local files.
"""

import contextlib
import io
import json
import os
import tempfile
import unittest

from range_bench.cli.main import RangeBenchCLI


class TestCLI(unittest.TestCase):
    """Run CLI commands against a temporary directory."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.cli = RangeBenchCLI()

    def tearDown(self):
        self.tmpdir.cleanup()

    def uri(self, *parts):
        return "file://" + os.path.join(self.tmpdir.name, *parts)

    def run_cli(self, *args):
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            exit_code = self.cli.run(list(args))
        return exit_code, stdout.getvalue()

    def test_upload_then_download(self):
        exit_code, output = self.run_cli(self.uri("test.bin"), "upload-data", "--size", "1000")
        self.assertEqual(exit_code, 0)
        self.assertEqual(output, "")
        self.assertEqual(os.path.getsize(os.path.join(self.tmpdir.name, "test.bin")), 1000)

        exit_code, output = self.run_cli(self.uri("test.bin"), "download", "--parallel-downloads", "4")

        self.assertEqual(exit_code, 0)
        record = json.loads(output)
        self.assertEqual(record["num_objects"], 1)
        self.assertEqual(record["num_blocks"], 4)
        self.assertEqual(record["block_size"], 250)
        self.assertEqual(record["parallel_downloads"], 4)
        self.assertEqual(record["total_bytes"], 1000)
        self.assertIn("elapsed_us", record)
        self.assertIn("mbps", record)

    def test_columnar(self):
        self.run_cli(self.uri("test.bin"), "upload-data", "-s", "1000")

        exit_code, output = self.run_cli(self.uri("test.bin"), "columnar", "--page-sizes=10,20,30")

        self.assertEqual(exit_code, 0)
        record = json.loads(output)
        self.assertEqual(record["num_groups"], 16)
        self.assertEqual(record["page_sizes"], [10, 20, 30])
        self.assertEqual(record["parallel_downloads"], 10)
        self.assertEqual(record["total_bytes"], 960)

    def test_upload_multiple_then_download_prefix(self):
        exit_code, _ = self.run_cli(
            self.uri("objects"), "upload-multiple", "-n", "3", "-s", "2700", "--random-prefixes"
        )
        self.assertEqual(exit_code, 0)

        exit_code, output = self.run_cli(self.uri("objects"), "download", "-b", "300", "-p", "2")

        self.assertEqual(exit_code, 0)
        record = json.loads(output)
        self.assertEqual(record["num_objects"], 3)
        self.assertEqual(record["num_blocks"], 3)
        self.assertEqual(record["total_bytes"], 2700)
        self.assertEqual(record["fetch_count"], 9)

    def test_upload_multiple_indivisible_size(self):
        exit_code, output = self.run_cli(self.uri("objects"), "upload-multiple", "-n", "3", "-s", "1000")

        self.assertEqual(exit_code, 1)
        self.assertFalse(os.path.exists(os.path.join(self.tmpdir.name, "objects")))

    def test_missing_location_fails_without_record(self):
        exit_code, output = self.run_cli(self.uri("missing"), "download")

        self.assertEqual(exit_code, 1)
        self.assertEqual(output, "")

    def test_object_too_small_for_row_group(self):
        self.run_cli(self.uri("test.bin"), "upload-data", "-s", "100")

        exit_code, output = self.run_cli(self.uri("test.bin"), "columnar")

        self.assertEqual(exit_code, 1)
        self.assertEqual(output, "")

    def test_no_command(self):
        with contextlib.redirect_stderr(io.StringIO()):
            exit_code, output = self.run_cli(self.uri("test.bin"))

        self.assertEqual(exit_code, 1)

    def test_invalid_arguments(self):
        for args in (
            ["columnar", "--page-sizes", "10,x"],
            ["columnar", "--page-sizes", "10,-5"],
            ["download", "--parallel-downloads", "0"],
            ["download", "--block-size", "abc"],
        ):
            with self.assertRaises(SystemExit) as ctx, contextlib.redirect_stderr(io.StringIO()):
                self.run_cli(self.uri("test.bin"), *args)
            self.assertEqual(ctx.exception.code, 2)

    def test_unsupported_scheme(self):
        exit_code, output = self.run_cli("gs://bucket/key", "download")

        self.assertEqual(exit_code, 1)
        self.assertEqual(output, "")


if __name__ == '__main__':
    unittest.main()
