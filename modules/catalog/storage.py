"""
File storage over Supabase Storage buckets.

Uploads are capped at ``MAX_UPLOAD_BYTES`` and stored under a generated,
unique path; callers get back the object's public URL.
"""

import logging
import secrets
import time
from pathlib import PurePosixPath
from typing import Optional

from supabase import Client, StorageException

from shared.config import Settings

from .exceptions import StorageError, UploadTooLargeError
from .models import StorageObject, StoredFile

logger = logging.getLogger(__name__)

AVATARS_BUCKET = "avatars"
ADS_IMAGES_BUCKET = "ads-images"
SHOP_IMAGES_BUCKET = "shop-images"

LIST_LIMIT = 100
CACHE_CONTROL = "3600"


def trainer_bucket(trainer_id: str) -> str:
    """Private bucket of one trainer."""
    return f"trainer-{trainer_id}"


def unique_path(filename: str, prefix: Optional[str] = None) -> str:
    """
    Generate a collision-resistant object path that keeps the file extension.

    Example:
        unique_path("photo.PNG", prefix="abc") -> "abc-1700000000000-9f1c2e7a0b3d.png"
    """
    suffix = PurePosixPath(filename).suffix.lower()
    stem = f"{int(time.time() * 1000)}-{secrets.token_hex(6)}"
    if prefix:
        stem = f"{prefix}-{stem}"
    return f"{stem}{suffix}"


class StorageService:
    def __init__(self, client: Client, settings: Settings):
        self._client = client
        self._settings = settings

    @property
    def max_upload_bytes(self) -> int:
        return self._settings.max_upload_bytes

    def public_url(self, bucket: str, path: str) -> str:
        return self._client.storage.from_(bucket).get_public_url(path)

    def upload(
        self,
        bucket: str,
        filename: str,
        content: bytes,
        content_type: Optional[str] = None,
        prefix: Optional[str] = None,
    ) -> StoredFile:
        """
        Upload a file and return its public URL.

        Raises:
            UploadTooLargeError: If the file exceeds the configured size limit
            StorageError: If the storage backend rejects the upload
        """
        if len(content) > self.max_upload_bytes:
            raise UploadTooLargeError(len(content), self.max_upload_bytes)

        path = unique_path(filename, prefix)
        options = {"cache-control": CACHE_CONTROL, "upsert": "false"}
        if content_type:
            options["content-type"] = content_type

        try:
            self._client.storage.from_(bucket).upload(path, content, options)
        except StorageException as e:
            logger.error("Error uploading %s to %s: %s", filename, bucket, e)
            raise StorageError(bucket, "upload file", str(e)) from e

        logger.info("Uploaded %s to %s/%s", filename, bucket, path)
        return StoredFile(bucket=bucket, path=path, public_url=self.public_url(bucket, path))

    def list(self, bucket: str, folder: str = "") -> list[StorageObject]:
        """Up to 100 objects of a bucket folder, with their public URLs."""
        try:
            entries = self._client.storage.from_(bucket).list(folder, {"limit": LIST_LIMIT})
        except StorageException as e:
            logger.error("Error listing bucket %s: %s", bucket, e)
            raise StorageError(bucket, "list files", str(e)) from e

        objects = []
        for entry in entries or []:
            path = f"{folder}/{entry['name']}" if folder else entry["name"]
            objects.append(
                StorageObject.model_validate({**entry, "public_url": self.public_url(bucket, path)})
            )
        return objects
