"""
Unit tests for AchievementService.
"""

import pytest
from unittest.mock import AsyncMock
from botocore.exceptions import ClientError

from infraworks.core.exceptions import InsufficientPermissionsError, ResourceNotFoundError
from infraworks.services.achievement_service import AchievementService
from tests.factories import TEST_MEDIA_BASE_URL, AchievementFactory


@pytest.fixture
def service(db_session, storage) -> AchievementService:
    return AchievementService(db_session, storage=storage)


class TestAchievements:
    @pytest.mark.asyncio
    async def test_create_stamps_author(self, service, manager):
        achievement = await service.create_achievement(
            manager, {"title": "Best Builder 2024", "date": "March 2024"}
        )

        assert achievement.created_by == manager.uid
        assert achievement.image_url == ""
        assert [a.id for a in await service.list_achievements()] == [achievement.id]

    @pytest.mark.asyncio
    async def test_viewer_cannot_create(self, service, viewer):
        with pytest.raises(InsufficientPermissionsError):
            await service.create_achievement(viewer, {"title": "x"})

        assert await service.list_achievements() == []

    @pytest.mark.asyncio
    async def test_update(self, service, manager):
        achievement = await AchievementFactory.create(service.session)

        updated = await service.update_achievement(manager, achievement.id, {"title": "Renamed"})

        assert updated.title == "Renamed"
        assert updated.updated_by == manager.uid

    @pytest.mark.asyncio
    async def test_update_unknown(self, service, manager):
        with pytest.raises(ResourceNotFoundError):
            await service.update_achievement(manager, "missing", {"title": "x"})

    @pytest.mark.asyncio
    async def test_set_image_replaces_previous(self, service, manager, s3_client):
        old_url = f"{TEST_MEDIA_BASE_URL}/achievements/a/old.jpg"
        achievement = await AchievementFactory.create(service.session, image_url=old_url)

        updated = await service.set_image(
            manager, achievement.id, b"png", "award.png", "image/png"
        )

        assert updated.image_url.startswith(f"{TEST_MEDIA_BASE_URL}/achievements/{achievement.id}/")
        s3_client.delete_object.assert_called_once_with(
            Bucket="test-bucket", Key="achievements/a/old.jpg"
        )

    @pytest.mark.asyncio
    async def test_failed_write_keeps_previous_image(self, service, manager, s3_client):
        old_url = f"{TEST_MEDIA_BASE_URL}/achievements/a/old.jpg"
        achievement = await AchievementFactory.create(service.session, image_url=old_url)
        service.achievement_dao.update = AsyncMock(side_effect=RuntimeError("write failed"))

        with pytest.raises(RuntimeError):
            await service.set_image(manager, achievement.id, b"png", "award.png", "image/png")

        s3_client.delete_object.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_survives_blob_failure(self, service, manager, s3_client):
        s3_client.delete_object.side_effect = ClientError(
            {"Error": {"Code": "500", "Message": "x"}}, "DeleteObject"
        )
        achievement = await AchievementFactory.create(
            service.session, image_url=f"{TEST_MEDIA_BASE_URL}/a.jpg"
        )

        await service.delete_achievement(manager, achievement.id)

        assert await service.list_achievements() == []

    @pytest.mark.asyncio
    async def test_delete_unknown(self, service, manager):
        with pytest.raises(ResourceNotFoundError):
            await service.delete_achievement(manager, "missing")
