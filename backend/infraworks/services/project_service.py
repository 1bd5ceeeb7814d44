"""
Project Service.

WHAT: Business logic for projects, their tasks and task notes.

WHY: The service layer owns the invariants the stored documents rely on:
1. percentage always mirrors progress (legacy field kept for old readers)
2. completedAt is stamped on the first completion and never cleared
3. deleting a project deletes its gallery blobs and every task it owns
4. gated operations are rejected before any repository write

HOW: Orchestrates ProjectDAO, TaskDAO and the blob store. Every mutation
takes the Caller explicitly and is gated with requires_role. Timestamps are
written as SERVER_TIMESTAMP so the repository clock stamps them.
"""

import logging
import re
from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from infraworks.core.access import Caller, requires_role
from infraworks.core.exceptions import ResourceNotFoundError, StorageError
from infraworks.dao.base import SERVER_TIMESTAMP
from infraworks.dao.project import ProjectDAO, TaskDAO
from infraworks.models.project import (
    Project,
    ProjectStatus,
    ProjectTask,
    TaskPriority,
    TaskStatus,
)
from infraworks.models.user import UserRole
from infraworks.services.storage_service import StorageService

logger = logging.getLogger(__name__)

_LEADING_NUMBER = re.compile(r"^\s*(\d[\d,]*)")


def square_feet_from_area(area: Optional[str]) -> int:
    """
    Derive a numeric square footage from a display area string.

    "1200 sq ft" -> 1200, "2,400 sqft" -> 2400, "TBD" -> 0.
    """
    if not area:
        return 0
    match = _LEADING_NUMBER.match(area)
    if match is None:
        return 0
    return int(match.group(1).replace(",", ""))


def _plain(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Replace enum members with their stored string values."""
    return {k: (v.value if isinstance(v, Enum) else v) for k, v in fields.items()}


class ProjectService:
    """
    Service for project and task operations.

    Args:
        session: Async database session
        storage: Blob store; built from settings on first use when omitted
    """

    def __init__(self, session: AsyncSession, storage: Optional[StorageService] = None):
        self.session = session
        self.project_dao = ProjectDAO(session)
        self.task_dao = TaskDAO(session)
        self._storage = storage

    @property
    def storage(self) -> StorageService:
        if self._storage is None:
            self._storage = StorageService()
        return self._storage

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    async def get_project(self, project_id: str) -> Optional[Project]:
        """
        Get a project by id. Public.

        Returns:
            Project, or None if the id does not resolve
        """
        return await self.project_dao.get_by_id(project_id)

    async def list_projects(
        self,
        status: Optional[str] = None,
        category: Optional[str] = None,
    ) -> List[Project]:
        """
        List projects newest first, optionally filtered. Public.
        """
        if isinstance(status, Enum):
            status = status.value
        return await self.project_dao.list_projects(status=status, category=category)

    @requires_role(UserRole.MANAGER)
    async def create_project(self, caller: Caller, fields: Dict[str, Any]) -> Project:
        """
        Create a project.

        WHAT: Normalizes the stored document:
        - progress defaults to 0 and percentage is set equal to it
        - images defaults to an empty list
        - name defaults to title
        - squareFeet is derived from area when not supplied
        - createdAt/updatedAt/createdBy/updatedBy are stamped

        Args:
            caller: Acting principal (manager or above)
            fields: Project fields (snake_case attribute names)

        Returns:
            Created project
        """
        data = _plain(fields)
        data.pop("percentage", None)

        progress = data.get("progress")
        data["progress"] = progress if progress is not None else 0
        data["percentage"] = data["progress"]
        data["images"] = list(data.get("images") or [])
        data.setdefault("status", ProjectStatus.UPCOMING.value)
        if not data.get("name"):
            data["name"] = data.get("title")
        if data.get("square_feet") is None:
            data["square_feet"] = square_feet_from_area(data.get("area"))

        project = await self.project_dao.create(
            **data,
            created_at=SERVER_TIMESTAMP,
            updated_at=SERVER_TIMESTAMP,
            created_by=caller.uid,
            updated_by=caller.uid,
        )
        logger.info("Project %s created by %s", project.id, caller.uid)
        return project

    @requires_role(UserRole.MANAGER)
    async def update_project(
        self,
        caller: Caller,
        project_id: str,
        fields: Dict[str, Any],
    ) -> Project:
        """
        Apply a partial update to a project.

        WHAT: When progress is present, percentage is written with the same
        value in the same write. percentage is never settable on its own.
        Changing area without squareFeet re-derives squareFeet.

        Raises:
            ResourceNotFoundError: Unknown project id
        """
        data = _plain(fields)
        data.pop("percentage", None)

        if data.get("progress") is not None:
            data["percentage"] = data["progress"]
        if "area" in data and data.get("square_feet") is None:
            data["square_feet"] = square_feet_from_area(data["area"])
        # Only name is nullable; elsewhere an explicit null means "leave unchanged"
        data = {k: v for k, v in data.items() if v is not None or k == "name"}

        project = await self.project_dao.update(
            project_id,
            **data,
            updated_at=SERVER_TIMESTAMP,
            updated_by=caller.uid,
        )
        if project is None:
            raise ResourceNotFoundError(message="Project not found", project_id=project_id)

        logger.info("Project %s updated by %s", project_id, caller.uid)
        return project

    @requires_role(UserRole.MANAGER)
    async def delete_project(self, caller: Caller, project_id: str) -> None:
        """
        Delete a project, its gallery blobs and all of its tasks.

        HOW:
        1. Load the project (NotFound if missing)
        2. Delete every image blob; failures are logged and skipped
        3. Delete every task owned by the project
        4. Delete the project itself

        Steps 3 and 4 run in the request transaction, so a failure there
        rolls both back. Blob deletes cannot be rolled back; a failure
        after step 2 can leave the gallery pointing at missing blobs.

        Raises:
            ResourceNotFoundError: Unknown project id
        """
        project = await self.project_dao.get_by_id(project_id)
        if project is None:
            raise ResourceNotFoundError(message="Project not found", project_id=project_id)

        for url in project.images or []:
            try:
                self.storage.delete(url)
            except StorageError as e:
                logger.warning(
                    "Could not delete image %s of project %s: %s",
                    url,
                    project_id,
                    e.message,
                )

        tasks = await self.task_dao.list_for_project(project_id)
        for task in tasks:
            await self.task_dao.delete_child(project_id, task.id)

        await self.project_dao.delete(project_id)
        logger.info(
            "Project %s deleted by %s (%d tasks)", project_id, caller.uid, len(tasks)
        )

    @requires_role(UserRole.MANAGER)
    async def add_project_image(
        self,
        caller: Caller,
        project_id: str,
        data: bytes,
        filename: str,
        content_type: str,
    ) -> Project:
        """
        Upload an image and append its URL to the project gallery.

        Raises:
            ResourceNotFoundError: Unknown project id
            ImageUploadError: Empty or oversized file
            StorageError: Blob store failure
        """
        if await self.project_dao.get_by_id(project_id) is None:
            raise ResourceNotFoundError(message="Project not found", project_id=project_id)

        url = self.storage.put(data, f"projects/{project_id}/{filename}", content_type)

        project = await self.project_dao.append_image(
            project_id,
            url,
            updated_at=SERVER_TIMESTAMP,
            updated_by=caller.uid,
        )
        if project is None:
            # Deleted between the check and the append
            try:
                self.storage.delete(url)
            except StorageError as e:
                logger.warning("Could not delete orphaned image %s: %s", url, e.message)
            raise ResourceNotFoundError(message="Project not found", project_id=project_id)
        return project

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    async def _require_project(self, project_id: str) -> None:
        if not await self.project_dao.exists(id=project_id):
            raise ResourceNotFoundError(message="Project not found", project_id=project_id)

    @requires_role(UserRole.VIEWER)
    async def get_project_tasks(self, caller: Caller, project_id: str) -> List[ProjectTask]:
        """
        List a project's tasks newest first.

        Returns:
            Tasks, empty for a project with none (or no longer existing)
        """
        return await self.task_dao.list_for_project(project_id)

    @requires_role(UserRole.MANAGER)
    async def create_task(
        self,
        caller: Caller,
        project_id: str,
        fields: Dict[str, Any],
    ) -> ProjectTask:
        """
        Create a task under a project.

        WHAT: status defaults to pending, priority to medium, notes to an
        empty list. A task created already completed gets completedAt.

        Raises:
            ResourceNotFoundError: Unknown project id
        """
        await self._require_project(project_id)

        data = _plain(fields)
        data.setdefault("status", TaskStatus.PENDING.value)
        data.setdefault("priority", TaskPriority.MEDIUM.value)
        data["notes"] = list(data.get("notes") or [])
        if data["status"] == TaskStatus.COMPLETED.value and not data.get("completed_at"):
            data["completed_at"] = SERVER_TIMESTAMP

        task = await self.task_dao.create_child(
            project_id,
            **data,
            created_at=SERVER_TIMESTAMP,
            updated_at=SERVER_TIMESTAMP,
            created_by=caller.uid,
        )
        logger.info("Task %s created under project %s by %s", task.id, project_id, caller.uid)
        return task

    @requires_role(UserRole.MANAGER)
    async def update_task(
        self,
        caller: Caller,
        project_id: str,
        task_id: str,
        fields: Dict[str, Any],
    ) -> ProjectTask:
        """
        Apply a partial update to a task.

        WHAT: Setting status to completed stamps completedAt when the task
        has none yet and the update does not carry its own completedAt. An
        existing completedAt is never overwritten or cleared, so moving a
        task back to pending keeps it.

        Raises:
            ResourceNotFoundError: Unknown task, or task not under project_id
        """
        task = await self.task_dao.get_child(project_id, task_id)
        if task is None:
            raise ResourceNotFoundError(
                message="Task not found", project_id=project_id, task_id=task_id
            )

        data = {
            k: v for k, v in _plain(fields).items() if v is not None or k == "assigned_to"
        }
        data.pop("notes", None)
        if task.completed_at is not None or data.get("completed_at") is None:
            data.pop("completed_at", None)

        if (
            data.get("status") == TaskStatus.COMPLETED.value
            and task.completed_at is None
            and "completed_at" not in data
        ):
            data["completed_at"] = SERVER_TIMESTAMP

        task = await self.task_dao.update_child(
            project_id,
            task_id,
            **data,
            updated_at=SERVER_TIMESTAMP,
        )
        logger.info("Task %s updated by %s", task_id, caller.uid)
        return task

    @requires_role(UserRole.MANAGER)
    async def delete_task(self, caller: Caller, project_id: str, task_id: str) -> None:
        """
        Delete a task.

        Raises:
            ResourceNotFoundError: Unknown task, or task not under project_id
        """
        deleted = await self.task_dao.delete_child(project_id, task_id)
        if not deleted:
            raise ResourceNotFoundError(
                message="Task not found", project_id=project_id, task_id=task_id
            )
        logger.info("Task %s deleted by %s", task_id, caller.uid)

    @requires_role(UserRole.VIEWER)
    async def add_task_note(
        self,
        caller: Caller,
        project_id: str,
        task_id: str,
        content: str,
    ) -> ProjectTask:
        """
        Append a note to a task.

        WHAT: Notes are {content, createdAt, createdBy}, kept in call order.
        The append is a single locked read-modify-write, so one call either
        adds its note or changes nothing.

        Raises:
            ResourceNotFoundError: Unknown task, or task not under project_id
        """
        task = await self.task_dao.append_note(
            project_id,
            task_id,
            {
                "content": content,
                "createdAt": SERVER_TIMESTAMP,
                "createdBy": caller.uid,
            },
        )
        if task is None:
            raise ResourceNotFoundError(
                message="Task not found", project_id=project_id, task_id=task_id
            )
        return task
