"""
Authentication API endpoints.

WHAT: The back-office side of sign-in.

WHY: Passwords, resets and OAuth all happen at the identity provider. After
signing in there, the client calls POST /auth/session with the provider's
token so the principal gets a profile, then GET /auth/me to learn its role.

HOW: The session and setup routes only need a verified token, because the
principal may not have a profile yet. /auth/me needs a profile.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infraworks.core.access import Caller
from infraworks.core.deps import get_current_caller, get_token_claims
from infraworks.db.session import get_db
from infraworks.schemas.user import ProfileResponse, SessionRequest
from infraworks.services.profile_service import ProfileService


router = APIRouter(prefix="/auth", tags=["authentication"])


def _identity(claims: dict, data: Optional[SessionRequest]) -> dict:
    """Email and display name from the body, falling back to token claims."""
    email = (data.email if data else None) or claims.get("email") or ""
    display_name = (data.display_name if data else None) or claims.get("name") or ""
    return {"email": str(email), "display_name": display_name}


@router.get(
    "/me",
    response_model=ProfileResponse,
    summary="Get current profile",
)
async def get_me(caller: Caller = Depends(get_current_caller)) -> ProfileResponse:
    """
    Return the caller's stored profile.

    Raises:
        AuthenticationError (401): Missing/invalid token or no profile
    """
    return caller.profile


@router.post(
    "/session",
    response_model=ProfileResponse,
    summary="Start session",
    description="Resolve the caller's profile, creating it on first sign-in",
)
async def start_session(
    data: Optional[SessionRequest] = Body(default=None),
    claims: dict = Depends(get_token_claims),
    db: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    """
    Start a back-office session.

    WHAT: Returns the existing profile, or provisions one with the default
    role on first sign-in.
    """
    return await ProfileService(db).ensure_profile(claims["sub"], **_identity(claims, data))


@router.post(
    "/setup",
    response_model=ProfileResponse,
    summary="Bootstrap first admin",
    description="Make the caller the first admin (only while ENABLE_ADMIN_SETUP is on)",
)
async def setup_admin(
    data: Optional[SessionRequest] = Body(default=None),
    claims: dict = Depends(get_token_claims),
    db: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    """
    Bootstrap the first admin.

    Raises:
        AdminSetupDisabledError (422): Setup is switched off
        BusinessRuleViolation (422): An admin already exists
    """
    return await ProfileService(db).bootstrap_admin(claims["sub"], **_identity(claims, data))
