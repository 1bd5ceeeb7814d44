"""
Achievement API endpoints.

WHAT: Public listing and manager-maintained CRUD for awards and milestones.
"""

from typing import List

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from infraworks.core.access import Caller
from infraworks.core.deps import get_current_caller, get_storage
from infraworks.db.session import get_db
from infraworks.schemas.achievement import (
    AchievementCreate,
    AchievementResponse,
    AchievementUpdate,
)
from infraworks.services.achievement_service import AchievementService
from infraworks.services.storage_service import StorageService


router = APIRouter(prefix="/achievements", tags=["achievements"])


def get_achievement_service(
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage),
) -> AchievementService:
    return AchievementService(db, storage=storage)


@router.get("", response_model=List[AchievementResponse], summary="List achievements")
async def list_achievements(
    service: AchievementService = Depends(get_achievement_service),
) -> List[AchievementResponse]:
    return await service.list_achievements()


@router.post(
    "",
    response_model=AchievementResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create achievement",
)
async def create_achievement(
    data: AchievementCreate,
    caller: Caller = Depends(get_current_caller),
    service: AchievementService = Depends(get_achievement_service),
) -> AchievementResponse:
    return await service.create_achievement(caller, data.model_dump())


@router.patch(
    "/{achievement_id}",
    response_model=AchievementResponse,
    summary="Update achievement",
)
async def update_achievement(
    achievement_id: str,
    data: AchievementUpdate,
    caller: Caller = Depends(get_current_caller),
    service: AchievementService = Depends(get_achievement_service),
) -> AchievementResponse:
    return await service.update_achievement(
        caller, achievement_id, data.model_dump(exclude_unset=True)
    )


@router.post(
    "/{achievement_id}/image",
    response_model=AchievementResponse,
    summary="Upload achievement image",
)
async def upload_achievement_image(
    achievement_id: str,
    file: UploadFile = File(...),
    caller: Caller = Depends(get_current_caller),
    service: AchievementService = Depends(get_achievement_service),
) -> AchievementResponse:
    data = await file.read()
    return await service.set_image(
        caller,
        achievement_id,
        data,
        file.filename or "image",
        file.content_type or "application/octet-stream",
    )


@router.delete(
    "/{achievement_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete achievement",
)
async def delete_achievement(
    achievement_id: str,
    caller: Caller = Depends(get_current_caller),
    service: AchievementService = Depends(get_achievement_service),
) -> None:
    await service.delete_achievement(caller, achievement_id)
