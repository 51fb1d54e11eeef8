# storefront/services/storage.py
# Blob storage: local disk under UPLOAD_DIR, or an S3 bucket with pre-signed upload grants.
import logging
import uuid
from abc import ABC, abstractmethod
from pathlib import Path, PurePath

from storefront.core.errors import BadRequestError, ConfigurationError

logger = logging.getLogger(__name__)

PRESIGNED_URL_EXPIRES = 15 * 60


def generate_name(original_name: str) -> str:
    """Fresh unique file name; only the extension of the original survives."""
    return f"{uuid.uuid4()}{PurePath(original_name or '').suffix}"


class BlobStore(ABC):
    @abstractmethod
    def store(self, data: bytes, original_name: str, mime_type: str) -> str:
        """Saves the bytes and returns the URL they can be fetched from."""

    def create_upload_grant(self, file_name: str, mime_type: str) -> dict:
        """Returns {"upload_url", "file_url"} for a direct client upload."""
        raise ConfigurationError("Pre-signed upload URLs are only available in S3 storage mode")


class LocalStorage(BlobStore):
    """Writes into upload_dir and returns root-relative paths served under url_prefix."""

    def __init__(self, upload_dir: str, url_prefix: str = "/uploads"):
        self.upload_dir = Path(upload_dir)
        self.url_prefix = url_prefix.rstrip("/")

    def store(self, data: bytes, original_name: str, mime_type: str) -> str:
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        file_name = generate_name(original_name)
        (self.upload_dir / file_name).write_bytes(data)
        logger.info(f"[Storage] Saved {len(data)} bytes to {file_name}")
        return f"{self.url_prefix}/{file_name}"


class S3Storage(BlobStore):
    def __init__(self, clients, bucket: str, region: str, prefix: str = "uploads"):
        if not bucket:
            raise ConfigurationError("S3_BUCKET must be set when STORAGE_TYPE=s3")
        self.clients = clients
        self.bucket = bucket
        self.region = region
        self.prefix = prefix

    def _new_key(self, original_name: str) -> str:
        return f"{self.prefix}/{generate_name(original_name)}"

    def public_url(self, key: str) -> str:
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def store(self, data: bytes, original_name: str, mime_type: str) -> str:
        key = self._new_key(original_name)
        self.clients.s3.put_object(Bucket=self.bucket, Key=key, Body=data, ContentType=mime_type)
        logger.info(f"[Storage] Uploaded s3://{self.bucket}/{key}")
        return self.public_url(key)

    def create_upload_grant(self, file_name: str, mime_type: str) -> dict:
        key = self._new_key(file_name)
        upload_url = self.clients.s3.generate_presigned_url(
            "put_object",
            Params={"Bucket": self.bucket, "Key": key, "ContentType": mime_type},
            ExpiresIn=PRESIGNED_URL_EXPIRES,
        )
        return {"upload_url": upload_url, "file_url": self.public_url(key)}


def create_storage(settings, clients) -> BlobStore:
    if settings.STORAGE_TYPE == "local":
        storage = LocalStorage(settings.UPLOAD_DIR, settings.UPLOAD_URL_PREFIX)
    elif settings.STORAGE_TYPE == "s3":
        storage = S3Storage(clients, settings.S3_BUCKET, settings.S3_REGION)
    else:
        raise ConfigurationError(f"Unsupported STORAGE_TYPE: {settings.STORAGE_TYPE!r}")
    logger.info(f"[Storage] Using {settings.STORAGE_TYPE} storage")
    return storage


ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")
MAX_UPLOAD_BYTES = 5 * 1024 * 1024


def save_upload(ctx, data: bytes, original_name: str, mime_type: str) -> str:
    """Checks type and size, then hands the bytes to the configured blob store."""
    if mime_type not in ALLOWED_IMAGE_TYPES:
        raise BadRequestError("Only image files can be uploaded (JPEG, PNG, GIF, WebP)")
    if len(data) > MAX_UPLOAD_BYTES:
        raise BadRequestError("File size must be 5MB or less")
    return ctx.storage.store(data, original_name, mime_type)


def request_upload_grant(ctx, file_name: str | None, mime_type: str | None) -> dict:
    if not file_name or not mime_type:
        raise BadRequestError("File name and file type are required")
    return ctx.storage.create_upload_grant(file_name, mime_type)
