"""
Command line interface for the range retrieval benchmark.
"""

import argparse
import logging
import sys

import uvloop

from range_bench.algorithms.columnar import ColumnarRead, parse_page_sizes
from range_bench.algorithms.download import ParallelDownload
from range_bench.cli.uploader import Uploader
from range_bench.common.storage_factory import create_storage_system
from range_bench.configuration import (
    DEFAULT_MULTI_UPLOAD_SIZE,
    DEFAULT_NUM_OBJECTS,
    DEFAULT_PAGE_SIZES,
    DEFAULT_PARALLEL_DOWNLOADS,
    DEFAULT_UPLOAD_SIZE,
)
from range_bench.errors import InvalidLayoutError, RangeBenchError

logger = logging.getLogger(__name__)


def positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def page_sizes_arg(value: str):
    try:
        return parse_page_sizes(value)
    except InvalidLayoutError as e:
        raise argparse.ArgumentTypeError(str(e))


class RangeBenchCLI:
    """CLI for uploading test objects and benchmarking parallel range reads."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self):
        """Create the main argument parser."""
        parser = argparse.ArgumentParser(
            prog='range-bench',
            description='Benchmark parallel byte-range reads from object storage',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Upload a 1 GiB test object
  range-bench file://$(pwd)/test.bin upload-data --size 1073741824

  # Download it as 20 parallel blocks
  range-bench file://$(pwd)/test.bin download --parallel-downloads 20

  # Read it as a simulated columnar file with three columns
  range-bench file://$(pwd)/test.bin columnar --page-sizes=4096,65536,1048576

  # Download every object under a prefix
  range-bench s3://my-bucket/objects download --block-size 8388608
            """
        )
        parser.add_argument('object_uri',
                            help='Object or prefix URI (file://, memory://, s3:// or r2://)')
        parser.add_argument('-v', '--verbose', action='store_true',
                            help='Enable debug logging')

        subparsers = parser.add_subparsers(dest='command', help='Available commands')

        upload_parser = subparsers.add_parser(
            'upload-data', help='Upload a random test object, overwriting existing data')
        upload_parser.add_argument('-s', '--size', type=positive_int, default=DEFAULT_UPLOAD_SIZE,
                                   help=f'Object size in bytes (default: {DEFAULT_UPLOAD_SIZE})')

        multi_parser = subparsers.add_parser(
            'upload-multiple', help='Upload several random test objects under a prefix')
        multi_parser.add_argument('-n', '--num-objects', type=positive_int, default=DEFAULT_NUM_OBJECTS,
                                  help=f'Number of objects to upload (default: {DEFAULT_NUM_OBJECTS})')
        multi_parser.add_argument('-s', '--size', type=positive_int, default=DEFAULT_MULTI_UPLOAD_SIZE,
                                  help=f'Total bytes across all objects (default: {DEFAULT_MULTI_UPLOAD_SIZE})')
        multi_parser.add_argument('-r', '--random-prefixes', action='store_true',
                                  help='Put each object under its own random prefix')

        download_parser = subparsers.add_parser(
            'download', help='Time downloading objects as parallel blocks')
        download_parser.add_argument('-p', '--parallel-downloads', type=positive_int,
                                     default=DEFAULT_PARALLEL_DOWNLOADS,
                                     help=f'Maximum blocks in flight (default: {DEFAULT_PARALLEL_DOWNLOADS})')
        download_parser.add_argument('-b', '--block-size', type=positive_int, default=None,
                                     help='Block size in bytes (default: object size / parallel downloads)')

        columnar_parser = subparsers.add_parser(
            'columnar', help='Time reading a simulated columnar file')
        columnar_parser.add_argument('-p', '--parallel-downloads', type=positive_int,
                                     default=DEFAULT_PARALLEL_DOWNLOADS,
                                     help=f'Maximum row-groups in flight (default: {DEFAULT_PARALLEL_DOWNLOADS})')
        columnar_parser.add_argument('--page-sizes', type=page_sizes_arg,
                                     default=parse_page_sizes(DEFAULT_PAGE_SIZES),
                                     help=f'Comma-separated page size of each column (default: {DEFAULT_PAGE_SIZES})')

        return parser

    async def run_upload_data(self, args):
        storage_system, location = create_storage_system(args.object_uri)
        async with storage_system:
            await Uploader(storage_system).upload_test_data(location, args.size)

    async def run_upload_multiple(self, args):
        storage_system, location = create_storage_system(args.object_uri)
        async with storage_system:
            await Uploader(storage_system).upload_multiple(
                location, args.num_objects, args.size, args.random_prefixes
            )

    async def run_download(self, args):
        storage_system, location = create_storage_system(
            args.object_uri, max_concurrency=args.parallel_downloads
        )
        async with storage_system:
            benchmark = ParallelDownload(
                storage_system, location, args.parallel_downloads, args.block_size
            )
            await benchmark.execute()

    async def run_columnar(self, args):
        storage_system, location = create_storage_system(
            args.object_uri, max_concurrency=args.parallel_downloads * len(args.page_sizes)
        )
        async with storage_system:
            benchmark = ColumnarRead(
                storage_system, location, args.parallel_downloads, args.page_sizes
            )
            await benchmark.execute()

    def run(self, args=None):
        """Run the CLI with the given arguments and return the exit code."""
        if args is None:
            args = sys.argv[1:]

        parsed_args = self.parser.parse_args(args)

        if not logging.root.handlers:
            logging.basicConfig(
                level=logging.DEBUG if parsed_args.verbose else logging.INFO,
                format='%(asctime)s - %(levelname)s - %(message)s',
            )

        commands = {
            'upload-data': self.run_upload_data,
            'upload-multiple': self.run_upload_multiple,
            'download': self.run_download,
            'columnar': self.run_columnar,
        }

        if not parsed_args.command:
            logger.error("No command specified")
            self.parser.print_help(sys.stderr)
            return 1

        try:
            uvloop.run(commands[parsed_args.command](parsed_args))
            return 0
        except KeyboardInterrupt:
            logger.info("Operation interrupted by user")
            return 1
        except RangeBenchError as e:
            logger.error(f"{parsed_args.command} failed: {e}")
            return 1
        except Exception as e:
            logger.error(f"Unexpected error in {parsed_args.command}: {e}", exc_info=True)
            return 1


def main():
    """Main entry point."""
    cli = RangeBenchCLI()
    sys.exit(cli.run())


if __name__ == '__main__':
    main()
