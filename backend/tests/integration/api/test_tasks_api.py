"""
Integration tests for task and task note endpoints.
"""

import pytest
from httpx import AsyncClient

from tests.factories import ProjectFactory, TaskFactory


@pytest.mark.asyncio
class TestTasksApi:
    async def test_list_requires_signed_in_caller(self, client: AsyncClient, db_session):
        project = await ProjectFactory.create(db_session)

        response = await client.get(f"/api/projects/{project.id}/tasks")

        assert response.status_code == 401

    async def test_viewer_can_list(self, client: AsyncClient, db_session, viewer, auth_headers):
        project = await ProjectFactory.create(db_session)
        await TaskFactory.create(db_session, project, title="Foundation")

        response = await client.get(
            f"/api/projects/{project.id}/tasks", headers=auth_headers(viewer.uid)
        )

        assert response.status_code == 200
        assert [t["title"] for t in response.json()] == ["Foundation"]
        assert response.json()[0]["projectId"] == project.id

    async def test_create_defaults(self, client: AsyncClient, db_session, manager, auth_headers):
        project = await ProjectFactory.create(db_session)

        response = await client.post(
            f"/api/projects/{project.id}/tasks",
            json={"title": "Survey"},
            headers=auth_headers(manager.uid),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "pending"
        assert body["priority"] == "medium"
        assert body["notes"] == []
        assert body["completedAt"] is None

    async def test_create_under_unknown_project(self, client: AsyncClient, manager, auth_headers):
        response = await client.post(
            "/api/projects/missing/tasks",
            json={"title": "Survey"},
            headers=auth_headers(manager.uid),
        )

        assert response.status_code == 404

    async def test_viewer_cannot_create(self, client: AsyncClient, db_session, viewer, auth_headers):
        project = await ProjectFactory.create(db_session)

        response = await client.post(
            f"/api/projects/{project.id}/tasks",
            json={"title": "Survey"},
            headers=auth_headers(viewer.uid),
        )

        assert response.status_code == 403

    async def test_complete_then_reopen_keeps_stamp(
        self, client: AsyncClient, db_session, manager, auth_headers
    ):
        project = await ProjectFactory.create(db_session)
        task = await TaskFactory.create(db_session, project)
        url = f"/api/projects/{project.id}/tasks/{task.id}"
        headers = auth_headers(manager.uid)

        completed = (await client.patch(url, json={"status": "completed"}, headers=headers)).json()
        reopened = (await client.patch(url, json={"status": "pending"}, headers=headers)).json()

        assert completed["completedAt"] is not None
        assert reopened["status"] == "pending"
        assert reopened["completedAt"] == completed["completedAt"]

    async def test_task_under_wrong_project_is_404(
        self, client: AsyncClient, db_session, manager, auth_headers
    ):
        project = await ProjectFactory.create(db_session)
        other = await ProjectFactory.create(db_session)
        task = await TaskFactory.create(db_session, project)

        response = await client.patch(
            f"/api/projects/{other.id}/tasks/{task.id}",
            json={"title": "x"},
            headers=auth_headers(manager.uid),
        )

        assert response.status_code == 404

    async def test_delete(self, client: AsyncClient, db_session, manager, auth_headers):
        project = await ProjectFactory.create(db_session)
        task = await TaskFactory.create(db_session, project)

        response = await client.delete(
            f"/api/projects/{project.id}/tasks/{task.id}", headers=auth_headers(manager.uid)
        )

        assert response.status_code == 204

    async def test_notes_appended_in_order(
        self, client: AsyncClient, db_session, viewer, manager, auth_headers
    ):
        project = await ProjectFactory.create(db_session)
        task = await TaskFactory.create(db_session, project)
        url = f"/api/projects/{project.id}/tasks/{task.id}/notes"

        first = await client.post(url, json={"content": "Rebar delivered"}, headers=auth_headers(viewer.uid))
        second = await client.post(url, json={"content": "Slab poured"}, headers=auth_headers(manager.uid))

        assert first.status_code == 201
        assert second.status_code == 201
        notes = second.json()["notes"]
        assert [n["content"] for n in notes] == ["Rebar delivered", "Slab poured"]
        assert [n["createdBy"] for n in notes] == [viewer.uid, manager.uid]
        assert notes[0]["createdAt"] is not None

    async def test_empty_note_rejected(
        self, client: AsyncClient, db_session, viewer, auth_headers
    ):
        project = await ProjectFactory.create(db_session)
        task = await TaskFactory.create(db_session, project)

        response = await client.post(
            f"/api/projects/{project.id}/tasks/{task.id}/notes",
            json={"content": ""},
            headers=auth_headers(viewer.uid),
        )

        assert response.status_code == 400
