"""Image storage — uploads admin images and hands back their public URLs.

Two backends: the local filesystem (served by the app under ``/media``) and
an S3-compatible bucket with public read access.
"""

from __future__ import annotations

import asyncio
import pathlib
import time
from abc import ABC, abstractmethod
from typing import Optional

import structlog
from fastapi import UploadFile

from src.config import settings

logger = structlog.get_logger()

PROJECTS_FOLDER = "projects"
CLIENTS_FOLDER = "clients"


class StorageError(Exception):
    """Raised when an object could not be stored."""


class ImageStorage(ABC):
    """Object storage with public URLs."""

    @abstractmethod
    async def upload(self, path: str, data: bytes, content_type: str) -> None:
        """Store ``data`` under ``path``. Raises StorageError on failure."""
        ...

    @abstractmethod
    def get_public_url(self, path: str) -> str:
        """Return the unauthenticated URL of the object at ``path``."""
        ...

    def serves_url(self, url: str) -> bool:
        """True when ``url`` points at an object in this storage."""
        prefix = self.get_public_url("")
        return url.startswith(prefix) and len(url) > len(prefix)


class LocalImageStorage(ImageStorage):
    """Writes objects below a directory served as static files."""

    def __init__(self, root: str | pathlib.Path, base_url: str):
        self.root = pathlib.Path(root)
        self.base_url = base_url.rstrip("/")

    async def upload(self, path: str, data: bytes, content_type: str) -> None:
        target = self.root / path
        try:
            await asyncio.to_thread(self._write, target, data)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e

    @staticmethod
    def _write(target: pathlib.Path, data: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        # Never replace an existing object; FileExistsError is an OSError
        with open(target, "xb") as f:
            f.write(data)

    def get_public_url(self, path: str) -> str:
        return f"{self.base_url}/{path}"


class S3ImageStorage(ImageStorage):
    """Stores objects in an S3-compatible bucket (AWS, Supabase, MinIO...)."""

    def __init__(
        self,
        bucket: str,
        public_base_url: str,
        endpoint_url: Optional[str] = None,
        region: str = "us-east-1",
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
    ):
        import boto3
        from botocore.config import Config

        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")
        self.s3 = boto3.client(
            "s3",
            endpoint_url=endpoint_url or None,
            aws_access_key_id=access_key_id or None,
            aws_secret_access_key=secret_access_key or None,
            region_name=region,
            config=Config(signature_version="s3v4", region_name=region),
        )

    async def upload(self, path: str, data: bytes, content_type: str) -> None:
        from botocore.exceptions import BotoCoreError, ClientError

        # boto3 is synchronous, run in thread pool. IfNoneMatch makes the
        # bucket refuse to replace an existing key.
        try:
            await asyncio.to_thread(
                self.s3.put_object,
                Bucket=self.bucket,
                Key=path,
                Body=data,
                ContentType=content_type,
                IfNoneMatch="*",
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Failed to upload {path}: {e}") from e

    def get_public_url(self, path: str) -> str:
        return f"{self.public_base_url}/{path}"


def build_object_path(folder: str, filename: str, now_ms: Optional[int] = None) -> str:
    """Name an upload after the current time, keeping the original extension.

    >>> build_object_path("projects", "photo.JPG", now_ms=1700000000000)
    'projects/1700000000000.JPG'
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    name = pathlib.PurePath(filename or "").name
    ext = name.rsplit(".", 1)[1] if "." in name.strip(".") else ""
    object_name = f"{now_ms}.{ext}" if ext else str(now_ms)
    return f"{folder}/{object_name}"


async def upload_image(storage: ImageStorage, folder: str, image: UploadFile) -> str:
    """Upload an image from a form and return its public URL.

    Raises:
        StorageError: the file is not an image or the upload failed
    """
    content_type = image.content_type or ""
    if not content_type.startswith("image/"):
        raise StorageError(f"Not an image: {content_type or 'unknown type'}")

    data = await image.read()
    path = build_object_path(folder, image.filename or "")
    await storage.upload(path, data, content_type)

    url = storage.get_public_url(path)
    logger.info("image_uploaded", path=path, size=len(data), url=url)
    return url


_storage: Optional[ImageStorage] = None


def get_storage_backend() -> ImageStorage:
    """Get or create the configured storage backend (lazy init)."""
    global _storage
    if _storage is None:
        if settings.storage_backend == "s3":
            public_base = settings.storage_public_base_url or (
                f"{settings.s3_endpoint_url.rstrip('/')}/{settings.storage_bucket}"
            )
            _storage = S3ImageStorage(
                bucket=settings.storage_bucket,
                public_base_url=public_base,
                endpoint_url=settings.s3_endpoint_url,
                region=settings.s3_region,
                access_key_id=settings.s3_access_key_id,
                secret_access_key=settings.s3_secret_access_key,
            )
        else:
            _storage = LocalImageStorage(
                root=settings.media_root,
                base_url=f"{settings.public_base_url.rstrip('/')}/media",
            )
    return _storage


async def get_storage() -> ImageStorage:
    """FastAPI dependency for the storage backend."""
    return get_storage_backend()
