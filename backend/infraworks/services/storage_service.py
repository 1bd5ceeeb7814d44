"""
Blob store adapter.

WHAT: Puts and deletes image blobs in S3-compatible object storage.

WHY: Project galleries and achievement images are stored as public URLs.
The rest of the code only sees put(bytes) -> url and delete(url); bucket
layout and key naming stay here.

HOW: boto3 S3 client. Keys are "<folder>/<uuid>_<sanitized filename>".
The public URL is settings.public_media_base_url + "/" + key, so delete()
can recover the key from a URL it issued.
"""

import logging
import uuid
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from infraworks.core.config import settings
from infraworks.core.exceptions import ImageUploadError, StorageError

logger = logging.getLogger(__name__)


def sanitize_filename(filename: str) -> str:
    """
    Sanitize a client-supplied filename for use in an object key.

    WHY: Prevents path traversal and keeps keys readable.
    """
    filename = filename.replace("/", "_").replace("\\", "_").replace("\x00", "")
    filename = filename.replace(" ", "_")

    if len(filename) > 200:
        name, ext = filename.rsplit(".", 1) if "." in filename else (filename, "")
        filename = f"{name[:190]}.{ext}" if ext else name[:200]

    return filename or "upload"


class StorageService:
    """
    S3-backed blob store.

    Args:
        client: Pre-built S3 client (tests inject a mock); built from
            settings when omitted
        bucket_name: Target bucket (defaults to settings.S3_BUCKET_NAME)
        public_base_url: Prefix of issued URLs
    """

    def __init__(
        self,
        client: Optional[Any] = None,
        bucket_name: Optional[str] = None,
        public_base_url: Optional[str] = None,
    ):
        self.s3_client = client or boto3.client(
            "s3",
            endpoint_url=settings.S3_ENDPOINT,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
            region_name=settings.AWS_REGION,
        )
        self.bucket_name = bucket_name or settings.S3_BUCKET_NAME
        self.public_base_url = (public_base_url or settings.public_media_base_url).rstrip("/")

    def url_for(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"

    def key_for(self, url: str) -> Optional[str]:
        """Object key of a URL issued by this store, None for foreign URLs."""
        prefix = f"{self.public_base_url}/"
        if not url.startswith(prefix):
            return None
        return url[len(prefix):]

    def put(self, data: bytes, path_hint: str, content_type: str = "application/octet-stream") -> str:
        """
        Store a blob and return its public URL.

        Args:
            data: Blob content
            path_hint: "<folder>/<filename>", e.g. "projects/abc123/front.jpg"
            content_type: MIME type stored with the object

        Returns:
            Public URL of the stored object

        Raises:
            ImageUploadError: Empty or oversized blob
            StorageError: The store rejected or could not be reached
        """
        if not data:
            raise ImageUploadError(message="Uploaded file is empty")
        if len(data) > settings.MAX_IMAGE_BYTES:
            raise ImageUploadError(
                message="Uploaded file is too large",
                file_size=len(data),
                max_size=settings.MAX_IMAGE_BYTES,
            )

        folder, _, filename = path_hint.strip("/").rpartition("/")
        key = f"{folder}/" if folder else ""
        key += f"{uuid.uuid4().hex[:12]}_{sanitize_filename(filename)}"

        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("Blob upload failed for %s: %s", key, e)
            raise StorageError(message="Failed to upload file to storage", error=str(e))

        logger.info("Stored blob %s (%d bytes)", key, len(data))
        return self.url_for(key)

    def delete(self, url: str) -> None:
        """
        Delete the blob behind a URL previously returned by put().

        Raises:
            StorageError: Foreign URL, or the store call failed
        """
        key = self.key_for(url)
        if key is None:
            raise StorageError(message="URL does not belong to this store", url=url)

        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise StorageError(message="Failed to delete file from storage", error=str(e))
