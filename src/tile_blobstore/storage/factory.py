"""Factory for creating object storage clients based on configuration."""

import logging
from typing import TYPE_CHECKING

from .base import ObjectStorageClient

if TYPE_CHECKING:
    from ..config import BlobStoreConfig

log = logging.getLogger(__name__)


def create_storage_client(config: "BlobStoreConfig") -> ObjectStorageClient:
    """Create an ObjectStorageClient for the configured bucket.

    Args:
        config: Blob store configuration. ``storage_type`` selects the backend.

    Returns:
        Configured ObjectStorageClient instance.

    Raises:
        ValueError: If storage_type is unsupported.
    """
    backend = config.storage_type.lower()

    if backend == "s3":
        return _create_s3_client(config)

    raise ValueError(f"Unsupported storage type: {backend!r}. Supported: s3")


def _create_s3_client(config: "BlobStoreConfig") -> ObjectStorageClient:
    from .s3_client import S3StorageClient

    return S3StorageClient(
        bucket_name=config.bucket,
        region=config.region,
        endpoint_url=config.endpoint_url,
        aws_access_key_id=config.access_key,
        aws_secret_access_key=config.secret_key,
        aws_session_token=config.session_token,
        use_https=config.use_https,
        max_connections=config.max_connections,
        proxies=config.proxies(),
    )
