"""
Dashboard Service.

WHAT: Computes the admin dashboard metrics.

WHY: One call gives the dashboard everything it shows: project counts by
status and category, task counts by status, the five newest projects and
the completion rate.

HOW: Full scan. List every project, then list each project's tasks. A
failure listing one project's tasks is logged and counted as zero tasks so
the dashboard still renders. Cost is O(projects x tasks per project), which
is fine at the size of a single company's portfolio.
"""

import logging
from typing import Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from infraworks.core.access import Caller, requires_role
from infraworks.dao.project import ProjectDAO, TaskDAO
from infraworks.models.project import Project, ProjectStatus, TaskStatus
from infraworks.models.user import UserRole
from infraworks.schemas.dashboard import DashboardMetrics
from infraworks.schemas.project import ProjectResponse

logger = logging.getLogger(__name__)

RECENT_PROJECTS_LIMIT = 5


def _created_ts(project: Project) -> float:
    return project.created_at.timestamp() if project.created_at is not None else 0.0


class DashboardService:
    """
    Service for dashboard aggregation.

    Args:
        session: Async database session
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.project_dao = ProjectDAO(session)
        self.task_dao = TaskDAO(session)

    @requires_role(UserRole.VIEWER)
    async def compute_metrics(self, caller: Caller) -> DashboardMetrics:
        """
        Aggregate dashboard metrics.

        Invariants:
        - sum(projects_by_status) == total_projects
        - sum(tasks_by_status) <= total_tasks (tasks with an unknown status
          are counted in the total only)
        - completion_rate is 0 for an empty portfolio

        Returns:
            DashboardMetrics
        """
        projects = await self.project_dao.list()

        projects_by_status: Dict[str, int] = {s.value: 0 for s in ProjectStatus}
        projects_by_category: Dict[str, int] = {}
        for project in projects:
            projects_by_status[project.status] = projects_by_status.get(project.status, 0) + 1
            projects_by_category[project.category] = (
                projects_by_category.get(project.category, 0) + 1
            )

        total_tasks = 0
        tasks_by_status: Dict[str, int] = {s.value: 0 for s in TaskStatus}
        for project in projects:
            # Savepoint per project: a failed read must not abort the outer
            # transaction for the projects scanned after it
            try:
                async with self.session.begin_nested():
                    tasks = await self.task_dao.list_for_project(project.id)
            except Exception as e:
                logger.warning("Error getting tasks for project %s: %s", project.id, e)
                continue

            total_tasks += len(tasks)
            for task in tasks:
                if task.status in tasks_by_status:
                    tasks_by_status[task.status] += 1

        recent: List[Project] = sorted(projects, key=_created_ts, reverse=True)[
            :RECENT_PROJECTS_LIMIT
        ]

        total_projects = len(projects)
        completion_rate = (
            round(projects_by_status[ProjectStatus.COMPLETED.value] / total_projects * 100, 2)
            if total_projects
            else 0
        )

        return DashboardMetrics(
            total_projects=total_projects,
            projects_by_status=projects_by_status,
            projects_by_category=projects_by_category,
            total_tasks=total_tasks,
            tasks_by_status=tasks_by_status,
            recent_projects=[ProjectResponse.model_validate(p) for p in recent],
            completion_rate=completion_rate,
        )
