"""
Unit tests for the blob store adapter.

HOW: The boto3 client is a MagicMock, so no network or bucket is needed.
"""

import pytest
from botocore.exceptions import ClientError

from infraworks.core.config import settings
from infraworks.core.exceptions import ImageUploadError, StorageError
from infraworks.services.storage_service import sanitize_filename
from tests.factories import TEST_MEDIA_BASE_URL


class TestSanitizeFilename:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("front view.jpg", "front_view.jpg"),
            ("../../etc/passwd", ".._.._etc_passwd"),
            ("a\\b.png", "a_b.png"),
            ("", "upload"),
        ],
    )
    def test_sanitize(self, raw, expected):
        assert sanitize_filename(raw) == expected

    def test_long_name_keeps_extension(self):
        result = sanitize_filename("x" * 300 + ".jpeg")

        assert len(result) <= 200
        assert result.endswith(".jpeg")


class TestPut:
    def test_put_returns_public_url(self, storage, s3_client):
        url = storage.put(b"img", "projects/p1/photo.jpg", "image/jpeg")

        kwargs = s3_client.put_object.call_args.kwargs
        assert kwargs["Bucket"] == "test-bucket"
        assert kwargs["Key"].startswith("projects/p1/")
        assert kwargs["Key"].endswith("_photo.jpg")
        assert kwargs["ContentType"] == "image/jpeg"
        assert url == f"{TEST_MEDIA_BASE_URL}/{kwargs['Key']}"

    def test_keys_are_unique(self, storage):
        assert storage.put(b"a", "x/a.jpg") != storage.put(b"a", "x/a.jpg")

    def test_empty_rejected(self, storage, s3_client):
        with pytest.raises(ImageUploadError):
            storage.put(b"", "x/a.jpg")

        s3_client.put_object.assert_not_called()

    def test_oversized_rejected(self, storage, monkeypatch):
        monkeypatch.setattr(settings, "MAX_IMAGE_BYTES", 4)

        with pytest.raises(ImageUploadError):
            storage.put(b"12345", "x/a.jpg")

    def test_client_error_wrapped(self, storage, s3_client):
        s3_client.put_object.side_effect = ClientError(
            {"Error": {"Code": "NoSuchBucket", "Message": "gone"}}, "PutObject"
        )

        with pytest.raises(StorageError):
            storage.put(b"a", "x/a.jpg")


class TestDelete:
    def test_delete_issued_url(self, storage, s3_client):
        storage.delete(f"{TEST_MEDIA_BASE_URL}/projects/p1/abc_photo.jpg")

        s3_client.delete_object.assert_called_once_with(
            Bucket="test-bucket", Key="projects/p1/abc_photo.jpg"
        )

    def test_foreign_url_rejected(self, storage, s3_client):
        with pytest.raises(StorageError):
            storage.delete("https://elsewhere.example/photo.jpg")

        s3_client.delete_object.assert_not_called()

    def test_client_error_wrapped(self, storage, s3_client):
        s3_client.delete_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "no"}}, "DeleteObject"
        )

        with pytest.raises(StorageError):
            storage.delete(f"{TEST_MEDIA_BASE_URL}/a.jpg")
