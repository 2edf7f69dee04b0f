"""
Factory module for creating storage system instances from object URIs.
"""

import logging
from typing import Tuple
from urllib.parse import unquote, urlparse

# Suppress boto3/botocore logging BEFORE importing any boto3-related modules
logging.getLogger('botocore').setLevel(logging.CRITICAL)
logging.getLogger('boto3').setLevel(logging.CRITICAL)
logging.getLogger('aioboto3').setLevel(logging.CRITICAL)
logging.getLogger('aiobotocore').setLevel(logging.CRITICAL)
logging.getLogger('urllib3').setLevel(logging.CRITICAL)

from range_bench.systems.base import ObjectStorageSystem
from range_bench.systems.local import LocalFileSystem
from range_bench.systems.memory import InMemorySystem
from range_bench.systems.s3 import AWSSystem, R2System
from range_bench.configuration import (
    AWS_ACCESS_KEY_ID,
    AWS_SECRET_ACCESS_KEY,
    AWS_REGION,
    R2_ACCESS_KEY_ID,
    R2_SECRET_ACCESS_KEY,
)

logger = logging.getLogger(__name__)

UNSUPPORTED_SCHEMES = ("gs", "gcs", "az", "azure", "abfs", "abfss", "http", "https")


def create_storage_system(
    object_uri: str, max_concurrency: int = None
) -> Tuple[ObjectStorageSystem, str]:
    """Create the storage system addressed by ``object_uri``.

    Args:
        object_uri: URI such as ``file:///tmp/test.bin`` or ``s3://bucket/prefix``
        max_concurrency: Expected number of concurrent requests (for connection pool sizing)

    Returns:
        Tuple of (storage system, location within that system)

    Raises:
        ValueError: If the URI scheme is not supported
    """
    parsed = urlparse(object_uri)
    scheme = parsed.scheme.lower()
    path = unquote(parsed.path)

    if scheme == "file":
        if parsed.netloc not in ("", "localhost"):
            raise ValueError(f"file:// URIs must be absolute paths, got host {parsed.netloc!r}")
        return LocalFileSystem("/"), path.lstrip("/")

    elif scheme == "memory":
        return InMemorySystem(), (parsed.netloc + path).strip("/")

    elif scheme == "s3":
        credentials = {
            "access_key_id": AWS_ACCESS_KEY_ID,
            "secret_access_key": AWS_SECRET_ACCESS_KEY,
            "region_name": AWS_REGION,
        }
        return (
            AWSSystem(_bucket(parsed), credentials, max_concurrency=max_concurrency),
            path.strip("/"),
        )

    elif scheme == "r2":
        credentials = {
            "access_key_id": R2_ACCESS_KEY_ID,
            "secret_access_key": R2_SECRET_ACCESS_KEY,
            "region_name": "auto",
        }
        return (
            R2System(_bucket(parsed), credentials, max_concurrency=max_concurrency),
            path.strip("/"),
        )

    elif scheme in UNSUPPORTED_SCHEMES:
        raise ValueError(f"Storage scheme {scheme!r} is not supported yet")

    else:
        raise ValueError(
            f"Unsupported object URI: {object_uri!r}. Must start with file://, memory://, s3:// or r2://"
        )


def _bucket(parsed) -> str:
    if not parsed.netloc:
        raise ValueError(f"Missing bucket name in {parsed.geturl()!r}")
    return parsed.netloc
