"""
Project management API endpoints.

WHAT: RESTful API for projects, their image gallery, tasks and task notes.

WHY: Projects are the central business entity:
1. Listed and shown on the public site (no token needed)
2. Created and edited by managers from the back-office
3. Broken into tasks that any signed-in user can read and comment on

HOW: FastAPI router over ProjectService. Routes resolve the Caller and pass
it in; the role checks live on the service methods, so a rejected call
never reaches the database.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from infraworks.core.access import Caller
from infraworks.core.deps import get_current_caller, get_storage
from infraworks.core.exceptions import ResourceNotFoundError
from infraworks.db.session import get_db
from infraworks.models.project import ProjectStatus
from infraworks.schemas.project import (
    NoteCreate,
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
    TaskCreate,
    TaskResponse,
    TaskUpdate,
)
from infraworks.services.project_service import ProjectService
from infraworks.services.storage_service import StorageService


router = APIRouter(prefix="/projects", tags=["projects"])


def get_project_service(
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage),
) -> ProjectService:
    return ProjectService(db, storage=storage)


# ============================================================================
# Projects
# ============================================================================


@router.get(
    "",
    response_model=List[ProjectResponse],
    summary="List projects",
    description="Public project list, newest first, optionally filtered",
)
async def list_projects(
    status_filter: Optional[ProjectStatus] = Query(default=None, alias="status"),
    category: Optional[str] = Query(default=None),
    service: ProjectService = Depends(get_project_service),
) -> List[ProjectResponse]:
    """
    List projects.

    Public: backs the marketing projects page and the admin table.
    """
    return await service.list_projects(status=status_filter, category=category)


@router.get(
    "/{project_id}",
    response_model=ProjectResponse,
    summary="Get project",
)
async def get_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    """
    Get a project by id. Public.

    Raises:
        ResourceNotFoundError (404): Unknown project id
    """
    project = await service.get_project(project_id)
    if project is None:
        raise ResourceNotFoundError(message="Project not found", project_id=project_id)
    return project


@router.post(
    "",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
    description="Create a project (manager or admin)",
)
async def create_project(
    data: ProjectCreate,
    caller: Caller = Depends(get_current_caller),
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    """
    Create a project.

    Raises:
        InsufficientPermissionsError (403): Caller below manager
        ValidationError (400): Invalid body (e.g. progress outside 0..100)
    """
    return await service.create_project(caller, data.model_dump())


@router.patch(
    "/{project_id}",
    response_model=ProjectResponse,
    summary="Update project",
)
async def update_project(
    project_id: str,
    data: ProjectUpdate,
    caller: Caller = Depends(get_current_caller),
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    """
    Partially update a project. Only fields present in the body change.

    Raises:
        ResourceNotFoundError (404): Unknown project id
        InsufficientPermissionsError (403): Caller below manager
    """
    return await service.update_project(caller, project_id, data.model_dump(exclude_unset=True))


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete project",
    description="Delete a project with its tasks and gallery images (manager or admin)",
)
async def delete_project(
    project_id: str,
    caller: Caller = Depends(get_current_caller),
    service: ProjectService = Depends(get_project_service),
) -> None:
    await service.delete_project(caller, project_id)


@router.post(
    "/{project_id}/images",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload project image",
)
async def upload_project_image(
    project_id: str,
    file: UploadFile = File(...),
    caller: Caller = Depends(get_current_caller),
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    """
    Upload an image and append it to the project gallery.

    Raises:
        ResourceNotFoundError (404): Unknown project id
        ImageUploadError (400): Empty or oversized file
        StorageError (503): Blob store unavailable
    """
    data = await file.read()
    return await service.add_project_image(
        caller,
        project_id,
        data,
        file.filename or "image",
        file.content_type or "application/octet-stream",
    )


# ============================================================================
# Tasks
# ============================================================================


@router.get(
    "/{project_id}/tasks",
    response_model=List[TaskResponse],
    summary="List project tasks",
)
async def list_tasks(
    project_id: str,
    caller: Caller = Depends(get_current_caller),
    service: ProjectService = Depends(get_project_service),
) -> List[TaskResponse]:
    return await service.get_project_tasks(caller, project_id)


@router.post(
    "/{project_id}/tasks",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create task",
)
async def create_task(
    project_id: str,
    data: TaskCreate,
    caller: Caller = Depends(get_current_caller),
    service: ProjectService = Depends(get_project_service),
) -> TaskResponse:
    return await service.create_task(caller, project_id, data.model_dump())


@router.patch(
    "/{project_id}/tasks/{task_id}",
    response_model=TaskResponse,
    summary="Update task",
)
async def update_task(
    project_id: str,
    task_id: str,
    data: TaskUpdate,
    caller: Caller = Depends(get_current_caller),
    service: ProjectService = Depends(get_project_service),
) -> TaskResponse:
    """
    Partially update a task.

    WHY: Moving a task to completed stamps completedAt once; moving it back
    keeps the original stamp.
    """
    return await service.update_task(
        caller, project_id, task_id, data.model_dump(exclude_unset=True)
    )


@router.delete(
    "/{project_id}/tasks/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete task",
)
async def delete_task(
    project_id: str,
    task_id: str,
    caller: Caller = Depends(get_current_caller),
    service: ProjectService = Depends(get_project_service),
) -> None:
    await service.delete_task(caller, project_id, task_id)


@router.post(
    "/{project_id}/tasks/{task_id}/notes",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add task note",
    description="Append a note to a task (any signed-in user)",
)
async def add_task_note(
    project_id: str,
    task_id: str,
    data: NoteCreate,
    caller: Caller = Depends(get_current_caller),
    service: ProjectService = Depends(get_project_service),
) -> TaskResponse:
    return await service.add_task_note(caller, project_id, task_id, data.content)
