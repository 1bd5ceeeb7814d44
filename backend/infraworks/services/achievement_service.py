"""
Achievement Service.

WHAT: Awards and milestones for the public About page.

WHY: Read publicly, maintained by managers. An optional image goes through
the blob store and its URL is stored in imageUrl.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from infraworks.core.access import Caller, requires_role
from infraworks.core.exceptions import ResourceNotFoundError, StorageError
from infraworks.dao.achievement import AchievementDAO
from infraworks.dao.base import SERVER_TIMESTAMP
from infraworks.models.achievement import Achievement
from infraworks.models.user import UserRole
from infraworks.services.storage_service import StorageService

logger = logging.getLogger(__name__)


class AchievementService:
    """
    Service for achievement operations.

    Args:
        session: Async database session
        storage: Blob store; built from settings on first use when omitted
    """

    def __init__(self, session: AsyncSession, storage: Optional[StorageService] = None):
        self.session = session
        self.achievement_dao = AchievementDAO(session)
        self._storage = storage

    @property
    def storage(self) -> StorageService:
        if self._storage is None:
            self._storage = StorageService()
        return self._storage

    async def list_achievements(self) -> List[Achievement]:
        """List achievements newest first. Public."""
        return await self.achievement_dao.list_achievements()

    @requires_role(UserRole.MANAGER)
    async def create_achievement(self, caller: Caller, fields: Dict[str, Any]) -> Achievement:
        """Create an achievement."""
        achievement = await self.achievement_dao.create(
            **fields,
            created_at=SERVER_TIMESTAMP,
            updated_at=SERVER_TIMESTAMP,
            created_by=caller.uid,
            updated_by=caller.uid,
        )
        logger.info("Achievement %s created by %s", achievement.id, caller.uid)
        return achievement

    @requires_role(UserRole.MANAGER)
    async def update_achievement(
        self,
        caller: Caller,
        achievement_id: str,
        fields: Dict[str, Any],
    ) -> Achievement:
        """
        Apply a partial update.

        Raises:
            ResourceNotFoundError: Unknown achievement id
        """
        # Every column is non-nullable; a null means "leave unchanged"
        fields = {k: v for k, v in fields.items() if v is not None}
        achievement = await self.achievement_dao.update(
            achievement_id,
            **fields,
            updated_at=SERVER_TIMESTAMP,
            updated_by=caller.uid,
        )
        if achievement is None:
            raise ResourceNotFoundError(
                message="Achievement not found", achievement_id=achievement_id
            )
        return achievement

    @requires_role(UserRole.MANAGER)
    async def set_image(
        self,
        caller: Caller,
        achievement_id: str,
        data: bytes,
        filename: str,
        content_type: str,
    ) -> Achievement:
        """
        Upload an image and make it the achievement's imageUrl.

        WHAT: The previously stored image, if any, is deleted best-effort,
        only after the new URL has been written to the row.

        The delete runs before the request transaction commits and cannot be
        rolled back. If the commit fails, imageUrl reverts to the previous URL
        whose blob is already gone.

        Raises:
            ResourceNotFoundError: Unknown achievement id
        """
        achievement = await self.achievement_dao.get_by_id(achievement_id)
        if achievement is None:
            raise ResourceNotFoundError(
                message="Achievement not found", achievement_id=achievement_id
            )

        previous = achievement.image_url
        url = self.storage.put(data, f"achievements/{achievement_id}/{filename}", content_type)
        achievement = await self.achievement_dao.update(
            achievement_id,
            image_url=url,
            updated_at=SERVER_TIMESTAMP,
            updated_by=caller.uid,
        )

        if previous:
            try:
                self.storage.delete(previous)
            except StorageError as e:
                logger.warning("Could not delete old image %s: %s", previous, e.message)
        return achievement

    @requires_role(UserRole.MANAGER)
    async def delete_achievement(self, caller: Caller, achievement_id: str) -> None:
        """
        Delete an achievement and, best-effort, its image.

        Raises:
            ResourceNotFoundError: Unknown achievement id
        """
        achievement = await self.achievement_dao.get_by_id(achievement_id)
        if achievement is None:
            raise ResourceNotFoundError(
                message="Achievement not found", achievement_id=achievement_id
            )

        if achievement.image_url:
            try:
                self.storage.delete(achievement.image_url)
            except StorageError as e:
                logger.warning(
                    "Could not delete image of achievement %s: %s", achievement_id, e.message
                )

        await self.achievement_dao.delete(achievement_id)
        logger.info("Achievement %s deleted by %s", achievement_id, caller.uid)
