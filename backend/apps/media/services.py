"""
Blob storage for CPL media.

Files live under a bucket prefix ("images", "audios") at
"<owner_id>/<timestamp>-<random><ext>". S3 is used when USE_S3_STORAGE is
set, otherwise Django's default_storage (local filesystem).
"""

import time
import uuid
from io import BytesIO
from pathlib import Path

from django.conf import settings
from django.core.files.base import File
from django.core.files.storage import default_storage

from apps.core.exceptions import UploadError
from apps.core.logging import get_logger

logger = get_logger(__name__)

IMAGES_BUCKET = "images"
AUDIOS_BUCKET = "audios"


def generate_path(owner_id: str, filename: str) -> str:
    """Generate a unique object path for an owner's upload."""
    ext = Path(filename or "").suffix.lower()
    return f"{owner_id}/{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}{ext}"


class StorageService:
    """
    Abstraction over local filesystem and S3 storage.

    upload() returns the public URL of the stored object and raises
    UploadError on any backend failure.
    """

    def __init__(self) -> None:
        self.use_s3 = getattr(settings, "USE_S3_STORAGE", False)
        if self.use_s3:
            import boto3

            self.region = getattr(settings, "AWS_S3_REGION_NAME", "us-east-1")
            self.s3_client = boto3.client(
                "s3",
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                region_name=self.region,
            )
            self.bucket_name = settings.AWS_STORAGE_BUCKET_NAME

    def upload(self, bucket: str, path: str, content: bytes, content_type: str) -> str:
        """
        Store a file and return its public URL.

        Raises:
            UploadError: If the backend rejected the write
        """
        key = f"{bucket}/{path}"
        if self.use_s3:
            self._upload_s3(key, content, content_type)
        else:
            key = self._upload_local(key, content)

        logger.info("media_uploaded", key=key, size_bytes=len(content), content_type=content_type)
        return self.get_public_url(key)

    def _upload_s3(self, key: str, content: bytes, content_type: str) -> None:
        from botocore.exceptions import BotoCoreError, ClientError

        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=content,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            logger.warning("media_upload_failed", key=key, backend="s3", error=str(e))
            raise UploadError(f"Could not upload {key}") from e

    def _upload_local(self, key: str, content: bytes) -> str:
        try:
            return default_storage.save(key, File(BytesIO(content), name=Path(key).name))
        except OSError as e:
            logger.warning("media_upload_failed", key=key, backend="local", error=str(e))
            raise UploadError(f"Could not upload {key}") from e

    def get_public_url(self, key: str) -> str:
        """Public URL for a stored key."""
        base_url = getattr(settings, "MEDIA_PUBLIC_BASE_URL", "")
        if base_url:
            return f"{base_url.rstrip('/')}/{key}"
        if self.use_s3:
            return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{key}"
        return default_storage.url(key)


def get_storage_service() -> StorageService:
    """Get a configured storage service."""
    return StorageService()
