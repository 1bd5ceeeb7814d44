"""
Achievement Data Access Object.
"""

from typing import List
from sqlalchemy.ext.asyncio import AsyncSession

from infraworks.dao.base import BaseDAO
from infraworks.models.achievement import Achievement


class AchievementDAO(BaseDAO[Achievement]):
    """Data Access Object for Achievement model."""

    def __init__(self, session: AsyncSession):
        super().__init__(Achievement, session)

    async def list_achievements(self) -> List[Achievement]:
        """List achievements, newest first (About page order)."""
        return await self.list(order_by="created_at", descending=True)
