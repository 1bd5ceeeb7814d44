"""
Project and task Data Access Objects.

WHAT: Database operations for the Project and ProjectTask models.

WHY: The DAO pattern:
1. Separates data access from business logic
2. Provides a consistent API for project operations
3. Keeps task queries scoped to their owning project
4. Makes testing easier with mockable interfaces

HOW: ProjectDAO extends BaseDAO with the public listing query; TaskDAO
extends ChildDAO so every task operation is addressed by (projectId, id).
"""

from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from infraworks.dao.base import BaseDAO, ChildDAO, resolve_server_timestamps
from infraworks.models.project import Project, ProjectTask


class ProjectDAO(BaseDAO[Project]):
    """
    Data Access Object for Project model.

    WHAT: Provides CRUD and query operations for projects.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize ProjectDAO.

        Args:
            session: Async database session
        """
        super().__init__(Project, session)

    async def list_projects(
        self,
        status: Optional[str] = None,
        category: Optional[str] = None,
    ) -> List[Project]:
        """
        List projects, newest first.

        WHAT: Optional equality filters on status and category.

        WHY: Backs both the public projects page (filter chips) and the
        admin project table.

        Args:
            status: Project status value to filter by
            category: Category label to filter by

        Returns:
            Projects ordered by createdAt descending
        """
        return await self.list(
            order_by="created_at",
            descending=True,
            status=status,
            category=category,
        )

    async def append_image(self, project_id: str, url: str, **fields: Any) -> Optional[Project]:
        """
        Append an image URL to a project's gallery.

        WHY: The row is locked while the list is rewritten so two uploads to
        the same project cannot drop each other's URL on PostgreSQL.

        Args:
            project_id: Project ID
            url: Public URL of the stored image
            **fields: Extra fields written in the same update (updatedBy, ...)

        Returns:
            Updated project or None if not found
        """
        project = await self.get_for_update(project_id)
        if project is None:
            return None

        project.images = [*(project.images or []), url]
        for field, value in resolve_server_timestamps(fields).items():
            setattr(project, field, value)

        await self.session.flush()
        await self.session.refresh(project)
        return project


class TaskDAO(ChildDAO[ProjectTask]):
    """
    Data Access Object for ProjectTask model.

    WHAT: Task operations scoped to the owning project.
    """

    parent_field = "project_id"

    def __init__(self, session: AsyncSession):
        """
        Initialize TaskDAO.

        Args:
            session: Async database session
        """
        super().__init__(ProjectTask, session)

    async def list_for_project(self, project_id: str) -> List[ProjectTask]:
        """
        List a project's tasks, newest first.

        Args:
            project_id: Owning project ID

        Returns:
            Tasks ordered by createdAt descending
        """
        return await self.list_children(project_id, order_by="created_at", descending=True)

    async def append_note(
        self,
        project_id: str,
        task_id: str,
        note: Dict[str, Any],
    ) -> Optional[ProjectTask]:
        """
        Append a note to a task's notes list.

        WHAT: Reads the task under a row lock, appends the note, writes the
        whole list back in the same transaction.

        WHY: The note list is a single JSON value. Without the lock two
        concurrent appends would each write back a list missing the other's
        note. SQLite has no row locks; there, last write wins.

        Args:
            project_id: Owning project ID
            task_id: Task ID
            note: Note fields; createdAt may be SERVER_TIMESTAMP

        Returns:
            Updated task or None if not found under project_id
        """
        task = await self.get_child_for_update(project_id, task_id)
        if task is None:
            return None

        stamped = resolve_server_timestamps(note)
        created_at = stamped.get("createdAt")
        if created_at is not None and not isinstance(created_at, str):
            # JSON column: keep note timestamps as ISO-8601 strings
            stamped["createdAt"] = created_at.isoformat()

        # updatedAt is refreshed by the column onupdate hook
        task.notes = [*(task.notes or []), stamped]

        await self.session.flush()
        await self.session.refresh(task)
        return task
