"""
Image storage for product pictures: an S3-compatible bucket when one is
configured, local disk otherwise (and whenever the bucket upload fails).
"""

import logging
import os
import secrets
import string
import time
from dataclasses import dataclass
from typing import Optional, Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.config import Settings
from app.errors import BackendError

log = logging.getLogger("catalog.images")

_BASE36 = string.digits + string.ascii_lowercase


def unique_image_name(original: Optional[str]) -> str:
    """`<millis>-<6 random base36 chars><ext>`, keeping the upload's extension."""
    ext = os.path.splitext(original or "")[1] or ".jpg"
    suffix = "".join(secrets.choice(_BASE36) for _ in range(6))
    return f"{int(time.time() * 1000)}-{suffix}{ext}"


class ImageStorage(Protocol):
    def save(self, data: bytes, name: str, content_type: Optional[str] = None) -> str:
        ...


@dataclass
class LocalImageStorage:
    images_dir: str
    url_prefix: str = "/images"

    def save(self, data: bytes, name: str, content_type: Optional[str] = None) -> str:
        os.makedirs(self.images_dir, exist_ok=True)
        with open(os.path.join(self.images_dir, name), "wb") as f:
            f.write(data)
        return f"{self.url_prefix}/{name}"


@dataclass
class S3ImageStorage:
    bucket: str
    region: str
    endpoint: str
    access_key_id: str
    secret_access_key: str
    public_url: Optional[str] = None
    prefix: str = "products"

    def __post_init__(self):
        config = Config(s3={"addressing_style": "path"}, signature_version="s3v4")
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint or None,
            region_name=self.region or None,
            aws_access_key_id=self.access_key_id or None,
            aws_secret_access_key=self.secret_access_key or None,
            config=config,
        )

    def url_for(self, key: str) -> str:
        if self.public_url:
            return f"{self.public_url.rstrip('/')}/{key}"
        if self.endpoint:
            return f"{self.endpoint.rstrip('/')}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.amazonaws.com/{key}"

    def save(self, data: bytes, name: str, content_type: Optional[str] = None) -> str:
        key = f"{self.prefix}/{name}"
        self._client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=data,
            ContentType=content_type or "application/octet-stream",
        )
        return self.url_for(key)


class ImageStore:
    """Uploads go to the bucket first; on any storage error they land on local disk."""

    def __init__(self, local: LocalImageStorage, remote: Optional[ImageStorage] = None):
        self.local = local
        self.remote = remote

    def save(self, data: bytes, filename: Optional[str], content_type: Optional[str] = None) -> str:
        name = unique_image_name(filename)
        if self.remote is not None:
            try:
                return self.remote.save(data, name, content_type)
            except (BotoCoreError, ClientError) as e:
                log.warning("bucket upload of %s failed, storing locally: %s", name, e)
        try:
            return self.local.save(data, name, content_type)
        except OSError as e:
            raise BackendError(f"could not store image {name}: {e}")


def build_image_store(settings: Settings) -> ImageStore:
    local = LocalImageStorage(settings.images_dir)
    remote = None
    if settings.STORAGE_BUCKET:
        remote = S3ImageStorage(
            bucket=settings.STORAGE_BUCKET,
            region=settings.STORAGE_REGION or "",
            endpoint=settings.STORAGE_ENDPOINT or "",
            access_key_id=settings.STORAGE_ACCESS_KEY_ID or "",
            secret_access_key=settings.STORAGE_SECRET_ACCESS_KEY or "",
            public_url=settings.STORAGE_PUBLIC_URL,
        )
    return ImageStore(local, remote)
