"""
Durable sink — S3 / MinIO object storage via boto3.

The SFTP client streams a file into a writer returned by write();
the writer buffers to a spooled temp file and uploads on commit().
"""

from __future__ import annotations

import asyncio
import tempfile
from typing import Any, Protocol

import boto3

from stock_collector.core.logging import get_logger

logger = get_logger(__name__)

# Files up to this size stay in memory before spilling to disk
SPOOL_MAX_BYTES = 8 * 1024 * 1024


class SinkWriter(Protocol):
    def write(self, data: bytes) -> int: ...

    async def commit(self) -> None: ...

    def close(self) -> None: ...


class DurableSink(Protocol):
    def write(self, destination_path: str, bucket: str) -> SinkWriter: ...


class S3ObjectWriter:
    """Buffered writer that becomes one S3 object on commit()."""

    def __init__(self, client: Any, bucket: str, key: str) -> None:
        self._client = client
        self.bucket = bucket
        self.key = key
        self._buffer = tempfile.SpooledTemporaryFile(max_size=SPOOL_MAX_BYTES)

    def write(self, data: bytes) -> int:
        return self._buffer.write(data)

    async def commit(self) -> None:
        self._buffer.seek(0)
        await asyncio.to_thread(self._client.upload_fileobj, self._buffer, self.bucket, self.key)
        logger.info("Object written", bucket=self.bucket, key=self.key)

    def close(self) -> None:
        self._buffer.close()


class S3Sink:
    """DurableSink backed by an S3-compatible endpoint."""

    def __init__(
        self,
        endpoint_url: str,
        access_key: str,
        secret_key: str,
        region: str | None = None,
        client: Any = None,
    ) -> None:
        self._client = client or boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
        )

    def write(self, destination_path: str, bucket: str) -> S3ObjectWriter:
        return S3ObjectWriter(self._client, bucket, destination_path)
