"""
Unit tests for DashboardService.

WHY: The dashboard is a full scan with a few counting rules that are easy
to get subtly wrong: every status key present, unknown task statuses only
in the total, and a failing task listing counted as zero tasks.
"""

import pytest
from datetime import datetime, timezone

from sqlalchemy import text

from infraworks.core.exceptions import InsufficientPermissionsError
from infraworks.core.access import Caller
from infraworks.services.dashboard_service import DashboardService
from tests.factories import ProjectFactory, TaskFactory


def _at(day: int) -> datetime:
    return datetime(2024, 5, day, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def service(db_session) -> DashboardService:
    return DashboardService(db_session)


class TestComputeMetrics:
    @pytest.mark.asyncio
    async def test_empty_portfolio(self, service, viewer):
        metrics = await service.compute_metrics(viewer)

        assert metrics.total_projects == 0
        assert metrics.total_tasks == 0
        assert metrics.completion_rate == 0
        assert metrics.projects_by_status == {
            "upcoming": 0,
            "ongoing": 0,
            "completed": 0,
            "on-hold": 0,
        }
        assert metrics.tasks_by_status == {"pending": 0, "in-progress": 0, "completed": 0}
        assert metrics.projects_by_category == {}
        assert metrics.recent_projects == []

    @pytest.mark.asyncio
    async def test_counts_and_completion_rate(self, service, viewer):
        ongoing = await ProjectFactory.create(
            service.session, status="ongoing", category="Residential"
        )
        done_a = await ProjectFactory.create(
            service.session, status="completed", category="Residential"
        )
        await ProjectFactory.create(service.session, status="completed", category="Commercial")
        await TaskFactory.create(service.session, ongoing, status="pending")
        await TaskFactory.create(service.session, ongoing, status="in-progress")
        await TaskFactory.create(service.session, done_a, status="completed")

        metrics = await service.compute_metrics(viewer)

        assert metrics.total_projects == 3
        assert metrics.projects_by_status["completed"] == 2
        assert metrics.projects_by_status["ongoing"] == 1
        assert metrics.projects_by_status["upcoming"] == 0
        assert metrics.projects_by_category == {"Residential": 2, "Commercial": 1}
        assert metrics.completion_rate == 66.67
        assert metrics.total_tasks == 3
        assert metrics.tasks_by_status == {"pending": 1, "in-progress": 1, "completed": 1}

    @pytest.mark.asyncio
    async def test_status_sum_matches_total_with_legacy_status(self, service, viewer):
        await ProjectFactory.create(service.session, status="ongoing")
        await ProjectFactory.create(service.session, status="archived")

        metrics = await service.compute_metrics(viewer)

        assert sum(metrics.projects_by_status.values()) == metrics.total_projects == 2
        assert metrics.projects_by_status["archived"] == 1

    @pytest.mark.asyncio
    async def test_unknown_task_status_only_in_total(self, service, viewer):
        project = await ProjectFactory.create(service.session)
        await TaskFactory.create(service.session, project, status="pending")
        await TaskFactory.create(service.session, project, status="blocked")

        metrics = await service.compute_metrics(viewer)

        assert metrics.total_tasks == 2
        assert sum(metrics.tasks_by_status.values()) == 1
        assert "blocked" not in metrics.tasks_by_status

    @pytest.mark.asyncio
    async def test_recent_projects_newest_five(self, service, viewer):
        for day in (3, 1, 7, 5, 2, 6, 4):
            await ProjectFactory.create(service.session, title=f"day-{day}", created_at=_at(day))

        metrics = await service.compute_metrics(viewer)

        assert [p.title for p in metrics.recent_projects] == [
            "day-7",
            "day-6",
            "day-5",
            "day-4",
            "day-3",
        ]

    @pytest.mark.asyncio
    async def test_failed_task_listing_counts_as_zero(self, service, viewer, caplog):
        healthy = await ProjectFactory.create(service.session, title="Healthy")
        broken = await ProjectFactory.create(service.session, title="Broken")
        await TaskFactory.create(service.session, healthy, status="completed")
        await TaskFactory.create(service.session, broken, status="pending")

        real_list = service.task_dao.list_for_project

        async def flaky(project_id):
            if project_id == broken.id:
                raise RuntimeError("read failed")
            return await real_list(project_id)

        service.task_dao.list_for_project = flaky

        metrics = await service.compute_metrics(viewer)

        assert metrics.total_projects == 2
        assert metrics.total_tasks == 1
        assert metrics.tasks_by_status["completed"] == 1
        assert metrics.tasks_by_status["pending"] == 0
        assert "Error getting tasks for project" in caplog.text

    @pytest.mark.asyncio
    async def test_database_error_is_contained_to_one_project(self, service, viewer):
        broken = await ProjectFactory.create(service.session, title="Broken")
        others = [
            await ProjectFactory.create(service.session, title=f"Other {i}") for i in range(3)
        ]
        for project in others:
            await TaskFactory.create(service.session, project, status="pending")

        real_list = service.task_dao.list_for_project

        async def failing_query(project_id):
            if project_id == broken.id:
                await service.session.execute(
                    text("UPDATE projects SET title = 'clobbered' WHERE id = :id"),
                    {"id": broken.id},
                )
                await service.session.execute(text("SELECT * FROM missing_table"))
            return await real_list(project_id)

        service.task_dao.list_for_project = failing_query

        metrics = await service.compute_metrics(viewer)

        assert metrics.total_tasks == 3
        assert metrics.tasks_by_status["pending"] == 3
        title = await service.session.scalar(
            text("SELECT title FROM projects WHERE id = :id"), {"id": broken.id}
        )
        assert title == "Broken"

    @pytest.mark.asyncio
    async def test_requires_profile(self, service):
        with pytest.raises(InsufficientPermissionsError):
            await service.compute_metrics(Caller(uid="no-profile"))
