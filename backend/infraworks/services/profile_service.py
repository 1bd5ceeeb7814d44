"""
Profile service.

WHAT: Resolves, provisions and administers user profiles.

WHY: The identity provider only vouches for a principal id. Whether that
principal may do anything in the back-office depends on the stored profile
and its role. This service is the only writer of profiles:
1. resolve_profile: per-request caller lookup
2. ensure_profile: auto-provisioning on first sign-in
3. create_profile / update_role / list_profiles: admin user management
4. bootstrap_admin: one-time first-admin setup

HOW: UserProfileDAO for storage; admin operations are gated with
requires_role(UserRole.ADMIN).
"""

import logging
from typing import List, Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from infraworks.core.access import Caller, requires_role
from infraworks.core.config import settings
from infraworks.core.exceptions import (
    AdminSetupDisabledError,
    BusinessRuleViolation,
    ResourceAlreadyExistsError,
    ResourceNotFoundError,
    ValidationError,
)
from infraworks.dao.base import SERVER_TIMESTAMP
from infraworks.dao.user import UserProfileDAO
from infraworks.models.user import UserProfile, UserRole

logger = logging.getLogger(__name__)


def parse_role(role: Union[UserRole, str]) -> UserRole:
    """
    Coerce a role name to UserRole.

    Raises:
        ValidationError: Unknown role name
    """
    if isinstance(role, UserRole):
        return role
    try:
        return UserRole(role)
    except ValueError:
        raise ValidationError(
            message=f"Unknown role '{role}'",
            allowed=[r.value for r in UserRole],
        )


class ProfileService:
    """
    Service for user profile operations.

    Args:
        session: Async database session
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.profile_dao = UserProfileDAO(session)

    async def resolve_profile(self, uid: str) -> Optional[UserProfile]:
        """
        Look up the stored profile of a principal.

        Returns:
            UserProfile, or None if the principal has no profile
        """
        return await self.profile_dao.get_by_id(uid)

    async def ensure_profile(
        self,
        uid: str,
        email: str = "",
        display_name: str = "",
    ) -> UserProfile:
        """
        Return the principal's profile, creating one on first sign-in.

        WHAT: New profiles get settings.DEFAULT_PROFILE_ROLE. An existing
        profile is returned unchanged (its role is never touched here).

        Args:
            uid: Principal id from the verified token
            email: Email claim, if the provider sent one
            display_name: Name claim, if the provider sent one

        Returns:
            Existing or newly created profile
        """
        profile = await self.profile_dao.get_by_id(uid)
        if profile is not None:
            return profile

        role = parse_role(settings.DEFAULT_PROFILE_ROLE)
        try:
            async with self.session.begin_nested():
                profile = await self.profile_dao.create(
                    uid=uid,
                    email=email or "",
                    display_name=display_name or (email.split("@")[0] if email else ""),
                    role=role.value,
                    created_at=SERVER_TIMESTAMP,
                    updated_at=SERVER_TIMESTAMP,
                )
        except IntegrityError:
            # A concurrent first sign-in inserted the same uid
            profile = await self.profile_dao.get_by_id(uid)
            if profile is None:
                raise
            logger.info("Profile %s was provisioned concurrently", uid)
            return profile

        logger.info("Provisioned profile %s with role %s", uid, role.value)
        return profile

    @requires_role(UserRole.ADMIN)
    async def list_profiles(self, caller: Caller) -> List[UserProfile]:
        """List every profile, newest first (admin)."""
        return await self.profile_dao.list_profiles()

    @requires_role(UserRole.ADMIN)
    async def create_profile(
        self,
        caller: Caller,
        uid: str,
        email: str,
        display_name: str = "",
        role: Union[UserRole, str] = UserRole.VIEWER,
    ) -> UserProfile:
        """
        Pre-provision a profile for a principal (admin).

        WHY: Lets an admin grant manager or admin rights before the person
        signs in for the first time.

        Raises:
            ResourceAlreadyExistsError: The principal already has a profile
            ValidationError: Unknown role
        """
        role = parse_role(role)
        if await self.profile_dao.get_by_id(uid) is not None:
            raise ResourceAlreadyExistsError(message="Profile already exists", uid=uid)

        profile = await self.profile_dao.create(
            uid=uid,
            email=email,
            display_name=display_name,
            role=role.value,
            created_at=SERVER_TIMESTAMP,
            updated_at=SERVER_TIMESTAMP,
        )
        logger.info("Admin %s created profile %s (%s)", caller.uid, uid, role.value)
        return profile

    @requires_role(UserRole.ADMIN)
    async def update_role(
        self,
        caller: Caller,
        uid: str,
        role: Union[UserRole, str],
    ) -> UserProfile:
        """
        Change a profile's role (admin).

        Raises:
            ResourceNotFoundError: No profile for uid
            ValidationError: Unknown role
        """
        role = parse_role(role)
        profile = await self.profile_dao.update(
            uid,
            role=role.value,
            updated_at=SERVER_TIMESTAMP,
        )
        if profile is None:
            raise ResourceNotFoundError(message="Profile not found", uid=uid)

        logger.info("Admin %s set role of %s to %s", caller.uid, uid, role.value)
        return profile

    async def bootstrap_admin(
        self,
        uid: str,
        email: str = "",
        display_name: str = "",
    ) -> UserProfile:
        """
        Make the calling principal the first admin.

        WHAT: Creates or upgrades the principal's profile to admin.

        WHY: A fresh installation has no admin who could grant roles. The
        setup path is off unless ENABLE_ADMIN_SETUP is set, and refuses to
        run once any admin exists.

        Raises:
            AdminSetupDisabledError: ENABLE_ADMIN_SETUP is false
            BusinessRuleViolation: An admin already exists
        """
        if not settings.ENABLE_ADMIN_SETUP:
            raise AdminSetupDisabledError()
        if await self.profile_dao.admin_exists():
            raise BusinessRuleViolation(message="An admin already exists")

        profile = await self.profile_dao.get_by_id(uid)
        if profile is None:
            profile = await self.profile_dao.create(
                uid=uid,
                email=email or "",
                display_name=display_name or "",
                role=UserRole.ADMIN.value,
                created_at=SERVER_TIMESTAMP,
                updated_at=SERVER_TIMESTAMP,
            )
        else:
            profile = await self.profile_dao.update(
                uid,
                role=UserRole.ADMIN.value,
                updated_at=SERVER_TIMESTAMP,
            )

        logger.warning("Bootstrapped first admin %s", uid)
        return profile
