"""
User profile Data Access Object.

WHY: UserProfileDAO provides database operations for profiles, following
the DAO pattern for separation of concerns and testability.
"""

from typing import List, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from infraworks.dao.base import BaseDAO
from infraworks.models.user import UserProfile, UserRole


class UserProfileDAO(BaseDAO[UserProfile]):
    """
    Data Access Object for UserProfile model.

    WHY: Profiles are keyed by the identity provider's principal id, so the
    primary key lookup doubles as "resolve the caller's profile".
    """

    def __init__(self, session: AsyncSession):
        """Initialize UserProfileDAO with session."""
        super().__init__(UserProfile, session)

    async def get_by_email(self, email: str) -> Optional[UserProfile]:
        """
        Retrieve a profile by email address (case-insensitive).

        Args:
            email: Email address

        Returns:
            UserProfile if found, None otherwise
        """
        result = await self.session.execute(
            select(UserProfile).where(func.lower(UserProfile.email) == email.lower())
        )
        return result.scalars().first()

    async def list_profiles(self) -> List[UserProfile]:
        """List all profiles, newest first."""
        return await self.list(order_by="created_at", descending=True)

    async def admin_exists(self) -> bool:
        """
        Check whether any admin profile exists.

        WHY: First-admin bootstrap is only allowed while there is none.
        """
        return await self.exists(role=UserRole.ADMIN.value)
