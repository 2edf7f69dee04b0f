"""
Async S3-compatible object storage systems (AWS S3 and Cloudflare R2).
"""

import asyncio
import logging
from typing import Iterable, List, Optional

import aioboto3
from botocore.config import Config
from botocore.exceptions import ClientError

from range_bench.configuration import (
    AWS_REGION,
    CONNECT_TIMEOUT_SECONDS,
    MAX_POOL_CONNECTIONS,
    MIN_MULTIPART_PART_SIZE,
    POOL_CONNECTIONS_HEADROOM,
    R2_ENDPOINT,
    READ_TIMEOUT_SECONDS,
    REQUEST_TIMEOUT_SECONDS,
    S3_ENDPOINT,
)
from range_bench.errors import NotFoundError
from range_bench.systems.base import ObjectMeta, ObjectStorageSystem

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = ("404", "NoSuchKey", "NotFound")
THROTTLING_STATUS_CODES = (429, 503)


class S3System(ObjectStorageSystem):
    """Async S3 object storage system with a pooled aioboto3 client."""

    def __init__(
        self,
        endpoint: Optional[str],
        bucket_name: str,
        credentials: dict,
        max_concurrency: int = None,
    ):
        self.endpoint = endpoint or None
        self.bucket_name = bucket_name
        self.credentials = credentials
        self.max_concurrency = max_concurrency

        self._config = self._create_config()

        self.session = aioboto3.Session(
            aws_access_key_id=credentials.get("access_key_id") or None,
            aws_secret_access_key=credentials.get("secret_access_key") or None,
            region_name=credentials.get("region_name", "auto"),
        )

        self.client = None

        logger.info(
            f"Initialized async storage for bucket {bucket_name} at {self.endpoint or 'default endpoint'} "
            f"(max_pool_connections={self._config.max_pool_connections})"
        )

    def _create_config(self) -> Config:
        """Create boto config with a connection pool sized to the requested concurrency."""
        if self.max_concurrency:
            pool_size = min(self.max_concurrency + POOL_CONNECTIONS_HEADROOM, MAX_POOL_CONNECTIONS)
        else:
            pool_size = POOL_CONNECTIONS_HEADROOM

        return Config(
            max_pool_connections=pool_size,
            connect_timeout=CONNECT_TIMEOUT_SECONDS,
            read_timeout=READ_TIMEOUT_SECONDS,
            # Failed range gets are terminal for a run, so no client-side retries
            retries={
                "max_attempts": 1,
                "mode": "standard",
            },
            s3={
                "payload_signing_enabled": False,
            },
            tcp_keepalive=True,
        )

    async def __aenter__(self):
        """Async context manager entry."""
        self.client = await self.session.client(
            "s3",
            endpoint_url=self.endpoint,
            config=self._config,
        ).__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self.client:
            await self.client.__aexit__(exc_type, exc_val, exc_tb)
            self.client = None

    def _require_client(self):
        if not self.client:
            raise RuntimeError("Storage client not initialized. Use async context manager.")
        return self.client

    async def head(self, location: str) -> ObjectMeta:
        client = self._require_client()
        if not location:
            # The bucket root is never an object key
            raise NotFoundError(location)
        try:
            response = await client.head_object(Bucket=self.bucket_name, Key=location)
        except ClientError as e:
            error_code = str(e.response.get("Error", {}).get("Code", ""))
            if error_code in NOT_FOUND_CODES:
                raise NotFoundError(location) from e
            raise
        return ObjectMeta(location=location, size=response["ContentLength"])

    async def list(self, prefix: str) -> List[ObjectMeta]:
        client = self._require_client()
        prefix = prefix.strip("/")
        if prefix:
            prefix += "/"

        objects = []
        paginator = client.get_paginator("list_objects_v2")
        async for page in paginator.paginate(Bucket=self.bucket_name, Prefix=prefix):
            for entry in page.get("Contents", []):
                objects.append(ObjectMeta(location=entry["Key"], size=entry["Size"]))
        return objects

    async def get_range(self, location: str, start: int, end: int) -> bytes:
        """Download bytes ``[start, end)`` of an object with request-level timeouts."""
        client = self._require_client()
        range_header = f"bytes={start}-{end - 1}"

        try:
            response = await asyncio.wait_for(
                client.get_object(Bucket=self.bucket_name, Key=location, Range=range_header),
                timeout=REQUEST_TIMEOUT_SECONDS,
            )
            async with response["Body"] as body:
                data = await asyncio.wait_for(body.read(), timeout=REQUEST_TIMEOUT_SECONDS)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            status_code = e.response.get("ResponseMetadata", {}).get("HTTPStatusCode", 0)

            if status_code in THROTTLING_STATUS_CODES:
                logger.error(
                    f"Throttling detected: {error_code} (HTTP {status_code}) "
                    f"for {location} range {range_header}"
                )
            else:
                logger.error(
                    f"S3 error {error_code} (HTTP {status_code}) for {location} range {range_header}"
                )
            raise

        if len(data) != end - start:
            logger.warning(
                f"Incomplete read: expected {end - start} bytes, got {len(data)} bytes"
            )
        return data

    async def put_streaming(self, location: str, chunks: Iterable[bytes]) -> None:
        """Upload an object with a sequential multipart upload."""
        client = self._require_client()

        response = await client.create_multipart_upload(Bucket=self.bucket_name, Key=location)
        upload_id = response["UploadId"]
        parts = []
        buffer = bytearray()

        async def upload_part(data: bytes):
            part_number = len(parts) + 1
            part = await client.upload_part(
                Bucket=self.bucket_name,
                Key=location,
                PartNumber=part_number,
                UploadId=upload_id,
                Body=bytes(data),
            )
            parts.append({"ETag": part["ETag"], "PartNumber": part_number})

        try:
            for chunk in chunks:
                buffer.extend(chunk)
                if len(buffer) >= MIN_MULTIPART_PART_SIZE:
                    await upload_part(buffer)
                    buffer = bytearray()
            if buffer or not parts:
                await upload_part(buffer)

            await client.complete_multipart_upload(
                Bucket=self.bucket_name,
                Key=location,
                UploadId=upload_id,
                MultipartUpload={"Parts": parts},
            )
        except Exception:
            logger.error(f"Multipart upload of {location} failed, aborting upload {upload_id}")
            try:
                await client.abort_multipart_upload(
                    Bucket=self.bucket_name, Key=location, UploadId=upload_id
                )
            except ClientError as abort_error:
                logger.warning(f"Failed to abort multipart upload {upload_id}: {abort_error}")
            raise

        logger.info(f"Uploaded {location} in {len(parts)} parts")


class AWSSystem(S3System):
    """AWS S3 object storage system."""

    def __init__(self, bucket_name: str, credentials: dict = None, max_concurrency: int = None):
        super().__init__(
            endpoint=S3_ENDPOINT,
            bucket_name=bucket_name,
            credentials=credentials or {"region_name": AWS_REGION},
            max_concurrency=max_concurrency,
        )


class R2System(S3System):
    """Cloudflare R2 object storage system."""

    def __init__(self, bucket_name: str, credentials: dict = None, max_concurrency: int = None):
        if not R2_ENDPOINT:
            raise ValueError("R2_ENDPOINT must be set to use r2:// URIs")
        super().__init__(
            endpoint=R2_ENDPOINT,
            bucket_name=bucket_name,
            credentials=credentials or {"region_name": "auto"},
            max_concurrency=max_concurrency,
        )
