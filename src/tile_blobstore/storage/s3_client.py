"""S3-compatible storage client (AWS S3, SeaweedFS, MinIO)."""

import logging
from collections.abc import Iterable, Iterator

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .base import ObjectMetadata, ObjectStorageClient, ObjectSummary, StorageObject
from .exceptions import (
    StorageConnectionError,
    StorageError,
    StorageNotFoundError,
    StoragePermissionError,
)

log = logging.getLogger(__name__)

# S3 caps both ListObjectsV2 pages and DeleteObjects requests at 1000 keys.
MAX_KEYS_PER_REQUEST = 1000

_ERROR_CODE_MAP = {
    "NoSuchKey": StorageNotFoundError,
    "NotFound": StorageNotFoundError,
    "404": StorageNotFoundError,
    "AccessDenied": StoragePermissionError,
    "403": StoragePermissionError,
    "InvalidAccessKeyId": StoragePermissionError,
    "SignatureDoesNotMatch": StoragePermissionError,
}


class S3StorageClient(ObjectStorageClient):
    """S3-compatible object storage client."""

    def __init__(
        self,
        bucket_name: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        aws_access_key_id: str | None = None,
        aws_secret_access_key: str | None = None,
        aws_session_token: str | None = None,
        use_https: bool = True,
        max_connections: int = 50,
        proxies: dict[str, str] | None = None,
    ):
        self._bucket = bucket_name
        self._region = region
        self._endpoint_url = endpoint_url

        config_kwargs: dict = {
            "region_name": region,
            "signature_version": "s3v4",
            "retries": {"max_attempts": 3, "mode": "standard"},
            "max_pool_connections": max_connections,
        }
        if proxies:
            config_kwargs["proxies"] = proxies

        kwargs: dict = {
            "config": Config(**config_kwargs),
            "use_ssl": use_https,
        }
        if aws_access_key_id and aws_secret_access_key:
            kwargs["aws_access_key_id"] = aws_access_key_id
            kwargs["aws_secret_access_key"] = aws_secret_access_key
        if aws_session_token:
            kwargs["aws_session_token"] = aws_session_token
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url

        log.debug("Initializing S3 client for bucket %s", bucket_name)
        self._client = boto3.client("s3", **kwargs)

    @property
    def bucket(self) -> str:
        return self._bucket

    def get_object(self, key: str) -> StorageObject | None:
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=key)
            return StorageObject(
                content=response["Body"].read(),
                content_type=response.get("ContentType", "application/octet-stream"),
                last_modified=response.get("LastModified"),
            )
        except (ClientError, BotoCoreError) as e:
            error = self._translate_error(e, key, f"Error fetching {key}")
            if isinstance(error, StorageNotFoundError):
                return None
            raise error from e

    def head_object(self, key: str) -> ObjectMetadata | None:
        try:
            response = self._client.head_object(Bucket=self._bucket, Key=key)
            return ObjectMetadata(
                key=key,
                size=response.get("ContentLength", 0),
                last_modified=response.get("LastModified"),
                content_type=response.get("ContentType", "application/octet-stream"),
            )
        except (ClientError, BotoCoreError) as e:
            error = self._translate_error(e, key, f"Error checking existence of {key}")
            if isinstance(error, StorageNotFoundError):
                return None
            raise error from e

    def put_object(self, key: str, content: bytes, content_type: str) -> None:
        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=content,
                ContentLength=len(content),
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            raise self._translate_error(e, key, f"Error storing {key}") from e

    def delete_object(self, key: str) -> None:
        try:
            self._client.delete_object(Bucket=self._bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise self._translate_error(e, key, f"Error deleting {key}") from e

    def delete_objects(self, keys: Iterable[str], quiet: bool = True) -> list[str]:
        objects = [{"Key": key} for key in keys]
        if not objects:
            return []
        if len(objects) > MAX_KEYS_PER_REQUEST:
            raise ValueError(
                f"Cannot delete {len(objects)} keys in one request; "
                f"the limit is {MAX_KEYS_PER_REQUEST}"
            )
        try:
            response = self._client.delete_objects(
                Bucket=self._bucket,
                Delete={"Objects": objects, "Quiet": quiet},
            )
        except (ClientError, BotoCoreError) as e:
            raise self._translate_error(e, message=f"Error deleting {len(objects)} objects") from e
        return [error["Key"] for error in response.get("Errors", [])]

    def list_objects(self, prefix: str) -> Iterator[ObjectSummary]:
        try:
            paginator = self._client.get_paginator("list_objects_v2")
            pages = paginator.paginate(
                Bucket=self._bucket,
                Prefix=prefix,
                PaginationConfig={"PageSize": MAX_KEYS_PER_REQUEST},
            )
            for page in pages:
                for obj in page.get("Contents", []):
                    yield ObjectSummary(key=obj["Key"], size=obj.get("Size", 0))
        except (ClientError, BotoCoreError) as e:
            raise self._translate_error(e, prefix, f"Error listing objects under {prefix}") from e

    def check_access(self) -> None:
        try:
            self._client.head_bucket(Bucket=self._bucket)
        except (ClientError, BotoCoreError) as e:
            raise self._translate_error(e, message=f"Error accessing bucket {self._bucket}") from e
        log.info("S3 bucket accessible: %s", self._bucket)

    def close(self) -> None:
        self._client.close()

    def _translate_error(
        self,
        error: Exception,
        key: str | None = None,
        message: str | None = None,
    ) -> StorageError:
        message = message or "S3 request failed"
        if isinstance(error, BotoCoreError):
            return StorageConnectionError(f"{message}: {error}", key=key, cause=error)
        code = error.response.get("Error", {}).get("Code", "")
        exc_cls = _ERROR_CODE_MAP.get(code, StorageError)
        return exc_cls(f"{message}: {code or 'unknown error'}", key=key, cause=error)
