"""Object storage port and its S3 adapter.

The pipeline talks to storage only through :class:`ObjectStore`. The S3
adapter wraps one boto3 client that is constructed by the caller and
handed in, so its lifetime is owned by whoever built the pipeline.

Usage
-----
>>> import boto3
>>> store = S3ObjectStore(boto3.client("s3"))
>>> # asyncio.run(store.bucket_exists("sites-b8ce466"))

"""

from __future__ import annotations

import asyncio
import typing as typ

from botocore.exceptions import ClientError

from sitedrop.logging import (
    get_logger,
    log_debug,
    log_exception,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = get_logger(__name__)

PUBLIC_READ = "public-read"
_DEFAULT_REGION = "us-east-1"
_DELETE_BATCH = 1000


@typ.runtime_checkable
class ObjectStore(typ.Protocol):
    """Operations the pipeline needs from an object-storage service."""

    async def bucket_exists(self, bucket: str) -> bool:
        """Return whether ``bucket`` can be probed successfully."""
        ...

    async def create_bucket(self, bucket: str) -> None:
        """Create ``bucket`` with public-read access."""
        ...

    async def delete_bucket(self, bucket: str) -> None:
        """Delete ``bucket`` and anything stored in it."""
        ...

    async def put_object(
        self,
        bucket: str,
        key: str,
        path: Path,
        *,
        content_type: str,
    ) -> None:
        """Upload the file at ``path`` as ``key`` with public-read access."""
        ...


class S3ObjectStore:
    """``ObjectStore`` backed by an S3-compatible service via boto3.

    Parameters
    ----------
    client
        A boto3 S3 client. Calls are dispatched to worker threads.

    """

    def __init__(self, client: typ.Any) -> None:  # noqa: ANN401 - boto3 clients are dynamically typed
        """Hold the boto3 client used for every call."""
        self._client = client

    async def bucket_exists(self, bucket: str) -> bool:
        """Probe ``bucket`` with ``HeadBucket``.

        Any error response from the service counts as "absent"; transport
        failures propagate.
        """
        try:
            await asyncio.to_thread(self._client.head_bucket, Bucket=bucket)
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code", "unknown")
            log_debug(logger, "HeadBucket %s failed with %s", bucket, code)
            return False
        return True

    def _create(self, bucket: str) -> None:
        params: dict[str, typ.Any] = {
            "Bucket": bucket,
            "ACL": PUBLIC_READ,
            "ObjectOwnership": "ObjectWriter",
        }
        region = self._client.meta.region_name
        if region and region != _DEFAULT_REGION:
            params["CreateBucketConfiguration"] = {"LocationConstraint": region}
        self._client.create_bucket(**params)
        try:
            # New buckets block public ACLs by default.
            self._client.delete_public_access_block(Bucket=bucket)
        except Exception:
            self._discard_new_bucket(bucket)
            raise

    def _discard_new_bucket(self, bucket: str) -> None:
        try:
            self._client.delete_bucket(Bucket=bucket)
        except ClientError as exc:
            log_exception(logger, f"Could not remove half-created bucket {bucket}", exc)
        else:
            log_warning(logger, "Removed half-created bucket %s", bucket)

    async def create_bucket(self, bucket: str) -> None:
        """Create ``bucket`` so that public-read ACLs take effect.

        If the bucket is created but cannot be opened to public ACLs, it
        is deleted again before the error propagates, so a failed call
        never leaves a bucket behind.
        """
        await asyncio.to_thread(self._create, bucket)
        log_info(logger, "Created bucket %s", bucket)

    def _empty_and_delete(self, bucket: str) -> None:
        paginator = self._client.get_paginator("list_objects_v2")
        keys: list[dict[str, str]] = []
        for page in paginator.paginate(Bucket=bucket):
            keys.extend({"Key": item["Key"]} for item in page.get("Contents", []))
        for start in range(0, len(keys), _DELETE_BATCH):
            self._client.delete_objects(
                Bucket=bucket,
                Delete={"Objects": keys[start : start + _DELETE_BATCH], "Quiet": True},
            )
        self._client.delete_bucket(Bucket=bucket)

    async def delete_bucket(self, bucket: str) -> None:
        """Remove every object in ``bucket`` and then the bucket itself."""
        await asyncio.to_thread(self._empty_and_delete, bucket)
        log_info(logger, "Deleted bucket %s", bucket)

    def _put(self, bucket: str, key: str, path: Path, content_type: str) -> None:
        with path.open("rb") as body:
            self._client.put_object(
                Bucket=bucket,
                Key=key,
                Body=body,
                ACL=PUBLIC_READ,
                ContentType=content_type,
            )

    async def put_object(
        self,
        bucket: str,
        key: str,
        path: Path,
        *,
        content_type: str,
    ) -> None:
        """Upload ``path`` to ``bucket/key`` with public-read access."""
        await asyncio.to_thread(self._put, bucket, key, path, content_type)


__all__ = ["PUBLIC_READ", "ObjectStore", "S3ObjectStore"]
