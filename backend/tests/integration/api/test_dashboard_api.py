"""
Integration tests for the dashboard endpoint.
"""

import pytest
from httpx import AsyncClient

from tests.factories import ProjectFactory, TaskFactory


@pytest.mark.asyncio
class TestDashboardApi:
    async def test_requires_token(self, client: AsyncClient):
        response = await client.get("/api/dashboard/metrics")

        assert response.status_code == 401

    async def test_metrics(self, client: AsyncClient, db_session, viewer, auth_headers):
        ongoing = await ProjectFactory.create(db_session, status="ongoing", category="Residential")
        await ProjectFactory.create(db_session, status="completed", category="Residential")
        await ProjectFactory.create(db_session, status="completed", category="Commercial")
        await TaskFactory.create(db_session, ongoing, status="in-progress")

        response = await client.get("/api/dashboard/metrics", headers=auth_headers(viewer.uid))

        assert response.status_code == 200
        body = response.json()
        assert body["totalProjects"] == 3
        assert body["projectsByStatus"]["completed"] == 2
        assert body["projectsByCategory"] == {"Residential": 2, "Commercial": 1}
        assert body["totalTasks"] == 1
        assert body["tasksByStatus"]["in-progress"] == 1
        assert body["completionRate"] == 66.67
        assert len(body["recentProjects"]) == 3
