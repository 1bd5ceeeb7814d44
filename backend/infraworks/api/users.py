"""
User management API endpoints.

WHAT: Admin-only profile listing, pre-provisioning and role changes.

WHY: Roles decide what each back-office user may change. Only admins
assign them. Profiles are never deleted; demote to viewer instead.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from infraworks.core.access import Caller
from infraworks.core.deps import get_current_caller
from infraworks.db.session import get_db
from infraworks.schemas.user import ProfileCreate, ProfileResponse, RoleUpdate
from infraworks.services.profile_service import ProfileService


router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=List[ProfileResponse], summary="List profiles")
async def list_profiles(
    caller: Caller = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db),
) -> List[ProfileResponse]:
    return await ProfileService(db).list_profiles(caller)


@router.post(
    "",
    response_model=ProfileResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Pre-provision profile",
)
async def create_profile(
    data: ProfileCreate,
    caller: Caller = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    """
    Create a profile for a principal that has not signed in yet.

    Raises:
        ResourceAlreadyExistsError (409): Profile already exists
    """
    return await ProfileService(db).create_profile(
        caller,
        uid=data.uid,
        email=str(data.email),
        display_name=data.display_name,
        role=data.role,
    )


@router.patch("/{uid}/role", response_model=ProfileResponse, summary="Change role")
async def update_role(
    uid: str,
    data: RoleUpdate,
    caller: Caller = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    """
    Change a profile's role.

    Raises:
        ResourceNotFoundError (404): No profile for uid
    """
    return await ProfileService(db).update_role(caller, uid, data.role)
