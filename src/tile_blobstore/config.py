"""
Configuration for the S3 tile blob store.

This module defines the construction-time settings of a store:
- Bucket identity and key prefix
- Endpoint, region and credentials
- Connection pool and proxy settings
"""

import os
from typing import Dict, Optional
from urllib.parse import quote

from pydantic import BaseModel, Field, field_validator, model_validator


class BlobStoreConfig(BaseModel):
    """
    Settings for one logical tile store inside a bucket.

    Example YAML configuration:
    ```yaml
    tile_blobstore:
      bucket: tiles
      prefix: gwc/production
      region: eu-west-1
      max_connections: 50
    ```
    """

    bucket: str = Field(
        description="Bucket holding the tiles"
    )
    prefix: str = Field(
        default="",
        description="Root prefix for every key of this store"
    )
    storage_type: str = Field(
        default="s3",
        description="Object storage backend: s3"
    )
    region: str = Field(
        default="us-east-1",
        description="Bucket region"
    )
    endpoint_url: Optional[str] = Field(
        default=None,
        description="Custom endpoint for S3-compatible services (MinIO, SeaweedFS)"
    )
    access_key: Optional[str] = Field(
        default=None,
        description="Access key id (uses the default credential chain if not set)"
    )
    secret_key: Optional[str] = Field(
        default=None,
        description="Secret access key"
    )
    session_token: Optional[str] = Field(
        default=None,
        description="Session token for temporary credentials"
    )
    use_https: bool = Field(
        default=True,
        description="Talk to the endpoint over HTTPS"
    )
    max_connections: int = Field(
        default=50,
        description="Size of the shared connection pool"
    )
    proxy_host: Optional[str] = Field(
        default=None,
        description="HTTP proxy host"
    )
    proxy_port: Optional[int] = Field(
        default=None,
        description="HTTP proxy port"
    )
    proxy_username: Optional[str] = Field(
        default=None,
        description="HTTP proxy user"
    )
    proxy_password: Optional[str] = Field(
        default=None,
        description="HTTP proxy password"
    )
    check_bucket_access: bool = Field(
        default=True,
        description="Verify bucket access when the store is created"
    )

    @field_validator("bucket")
    @classmethod
    def validate_bucket(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("bucket cannot be empty")
        return v.strip()

    @field_validator("prefix")
    @classmethod
    def normalize_prefix(cls, v: str) -> str:
        return v.strip("/")

    @field_validator("max_connections")
    @classmethod
    def validate_max_connections(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("max_connections must be positive")
        return v

    @model_validator(mode="after")
    def validate_credentials(self) -> "BlobStoreConfig":
        if bool(self.access_key) != bool(self.secret_key):
            raise ValueError("access_key and secret_key must be provided together")
        return self

    def proxies(self) -> Optional[Dict[str, str]]:
        """Return the botocore proxies mapping, or None without a proxy."""
        if not self.proxy_host:
            return None
        auth = ""
        if self.proxy_username:
            auth = quote(self.proxy_username, safe="")
            if self.proxy_password:
                auth += ":" + quote(self.proxy_password, safe="")
            auth += "@"
        port = f":{self.proxy_port}" if self.proxy_port else ""
        url = f"http://{auth}{self.proxy_host}{port}"
        return {"http": url, "https": url}

    @classmethod
    def from_dict(cls, config_dict: dict) -> "BlobStoreConfig":
        """Create configuration from dictionary."""
        return cls(**config_dict)

    @classmethod
    def from_yaml_file(cls, path: str) -> "BlobStoreConfig":
        """Load configuration from YAML file."""
        import yaml
        with open(path, "r") as f:
            config_dict = yaml.safe_load(f) or {}
        return cls.from_dict(config_dict.get("tile_blobstore", {}))

    @classmethod
    def from_env(cls, **overrides) -> "BlobStoreConfig":
        """Create configuration from environment variables.

        Uses the same variable names as the other object storage clients.
        Keyword arguments take precedence over the environment.
        """
        values: dict = {
            "storage_type": os.getenv("OBJECT_STORAGE_TYPE", "s3"),
            "bucket": os.getenv("OBJECT_STORAGE_BUCKET_NAME") or os.getenv("S3_BUCKET_NAME") or "",
            "prefix": os.getenv("S3_PREFIX", ""),
            "region": os.getenv("S3_REGION", "us-east-1"),
            "endpoint_url": os.getenv("S3_ENDPOINT_URL"),
            "access_key": os.getenv("AWS_ACCESS_KEY_ID"),
            "secret_key": os.getenv("AWS_SECRET_ACCESS_KEY"),
            "session_token": os.getenv("AWS_SESSION_TOKEN"),
        }
        max_connections = os.getenv("S3_MAX_CONNECTIONS")
        if max_connections:
            values["max_connections"] = int(max_connections)
        values.update(overrides)
        return cls.from_dict(values)
