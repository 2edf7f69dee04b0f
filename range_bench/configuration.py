"""
Configuration constants for the range retrieval benchmark.

This module contains all configuration parameters including:
- Cloud credentials and endpoints
- CLI defaults for the download, columnar and upload commands
- Storage client tuning (timeouts, connection pool)
- Size and time conversion factors
"""

import os

# =============================================================================
# CLOUD STORAGE CONFIGURATION
# =============================================================================

# AWS S3 credentials and configuration
S3_ENDPOINT: str = os.getenv("S3_ENDPOINT", "")
AWS_ACCESS_KEY_ID: str = os.getenv("AWS_ACCESS_KEY_ID", "")
AWS_SECRET_ACCESS_KEY: str = os.getenv("AWS_SECRET_ACCESS_KEY", "")
AWS_REGION: str = os.getenv("AWS_REGION", "eu-north-1")

# Cloudflare R2 credentials and configuration
R2_ENDPOINT: str = os.getenv("R2_ENDPOINT", "")
R2_ACCESS_KEY_ID: str = os.getenv("R2_ACCESS_KEY_ID", "")
R2_SECRET_ACCESS_KEY: str = os.getenv("R2_SECRET_ACCESS_KEY", "")

# =============================================================================
# FILE SIZE CONSTANTS
# =============================================================================

BYTES_PER_KB: int = 1024
BYTES_PER_MB: int = 1024 * 1024
BYTES_PER_GB: int = 1024 * 1024 * 1024
MICROSECONDS_PER_SECOND: int = 1_000_000
NANOSECONDS_PER_MICROSECOND: int = 1_000

# =============================================================================
# BENCHMARK DEFAULTS
# =============================================================================

DEFAULT_PARALLEL_DOWNLOADS: int = 10
DEFAULT_PAGE_SIZES: str = "65536,65536,65536"
PROGRESS_INTERVAL: int = 100  # Log progress every N fetch units

# =============================================================================
# UPLOAD DEFAULTS
# =============================================================================

DEFAULT_UPLOAD_SIZE: int = 100 * BYTES_PER_MB
DEFAULT_NUM_OBJECTS: int = 10
DEFAULT_MULTI_UPLOAD_SIZE: int = 10 * BYTES_PER_GB
UPLOAD_CHUNK_SIZE: int = 10 * BYTES_PER_MB  # Random data is generated and written in chunks of this size
RANDOM_PREFIX_LENGTH: int = 8
OBJECT_NAME_TEMPLATE: str = "object_{}.bin"

# =============================================================================
# STORAGE CLIENT TUNING
# =============================================================================

REQUEST_TIMEOUT_SECONDS: int = 120
CONNECT_TIMEOUT_SECONDS: int = 5
READ_TIMEOUT_SECONDS: int = 60
MAX_POOL_CONNECTIONS: int = 2000
POOL_CONNECTIONS_HEADROOM: int = 100
MIN_MULTIPART_PART_SIZE: int = 5 * BYTES_PER_MB  # S3 rejects smaller non-final parts
LOCAL_IO_THREADS: int = 32
