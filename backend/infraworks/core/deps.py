"""
FastAPI dependencies for caller resolution.

WHY: Routes never look at tokens or profiles directly. These dependencies
turn the Authorization header into a Caller (principal id + stored profile)
that routes hand to the service layer, where the access gate decides.
"""

import logging
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from infraworks.core.access import Caller
from infraworks.core.auth import verify_token
from infraworks.core.exceptions import AuthenticationError
from infraworks.db.session import get_db
from infraworks.services.profile_service import ProfileService
from infraworks.services.storage_service import StorageService

logger = logging.getLogger(__name__)

# WHY: auto_error=False so a missing header becomes our own 401 envelope
# instead of FastAPI's default 403.
security = HTTPBearer(auto_error=False)


async def get_token_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """
    Verify the bearer token and return its claims.

    WHY: Used on its own by the session endpoint, where the principal may
    not have a profile yet.

    Raises:
        AuthenticationError: If the header is missing
        TokenExpiredError / TokenInvalidError: If the token does not verify
    """
    if credentials is None:
        raise AuthenticationError(message="Missing bearer token")
    return verify_token(credentials.credentials)


async def get_current_caller(
    claims: dict = Depends(get_token_claims),
    db: AsyncSession = Depends(get_db),
) -> Caller:
    """
    Resolve the authenticated caller and its profile.

    WHY: A principal the identity provider accepts but that has no stored
    profile is unauthenticated for business purposes.

    Usage:
        @router.get("/protected")
        async def protected_route(caller: Caller = Depends(get_current_caller)):
            ...

    Raises:
        AuthenticationError: If the principal has no profile
    """
    uid = claims["sub"]
    profile = await ProfileService(db).resolve_profile(uid)
    if profile is None:
        logger.info("Principal %s has no profile", uid)
        raise AuthenticationError(
            message="User profile not found. Please contact an administrator.",
            user_id=uid,
        )
    return Caller(uid=uid, profile=profile)


_storage: Optional[StorageService] = None


def get_storage() -> StorageService:
    """
    Shared blob store client.

    WHY: boto3 clients are thread-safe and costly to build, so one instance
    serves every request. Tests override this dependency with a mock.
    """
    global _storage
    if _storage is None:
        _storage = StorageService()
    return _storage
