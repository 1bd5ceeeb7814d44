"""
Integration tests for the project endpoints.

WHY: Verifies the HTTP contract end to end: public reads, role gates,
camelCase JSON, the error envelope and status codes.
"""

import pytest
from datetime import datetime, timezone
from httpx import AsyncClient

from tests.factories import TEST_MEDIA_BASE_URL, ProjectFactory, TaskFactory


@pytest.mark.asyncio
class TestPublicReads:
    async def test_anonymous_list(self, client: AsyncClient, db_session):
        await ProjectFactory.create(
            db_session, title="Old", created_at=datetime(2024, 1, 1, tzinfo=timezone.utc)
        )
        await ProjectFactory.create(
            db_session, title="New", created_at=datetime(2024, 6, 1, tzinfo=timezone.utc)
        )

        response = await client.get("/api/projects")

        assert response.status_code == 200
        assert [p["title"] for p in response.json()] == ["New", "Old"]

    async def test_camel_case_fields(self, client: AsyncClient, db_session):
        await ProjectFactory.create(db_session, area="1200 sq ft", square_feet=1200)

        project = (await client.get("/api/projects")).json()[0]

        assert project["squareFeet"] == 1200
        assert "createdAt" in project
        assert "square_feet" not in project

    async def test_filter_by_status_and_category(self, client: AsyncClient, db_session):
        await ProjectFactory.create(db_session, title="A", status="ongoing", category="Residential")
        await ProjectFactory.create(db_session, title="B", status="completed", category="Residential")
        await ProjectFactory.create(db_session, title="C", status="ongoing", category="Commercial")

        response = await client.get(
            "/api/projects", params={"status": "ongoing", "category": "Residential"}
        )

        assert [p["title"] for p in response.json()] == ["A"]

    async def test_unknown_status_filter_rejected(self, client: AsyncClient):
        response = await client.get("/api/projects", params={"status": "archived"})

        assert response.status_code == 400

    async def test_get_one(self, client: AsyncClient, db_session):
        project = await ProjectFactory.create(db_session, title="Skyline")

        response = await client.get(f"/api/projects/{project.id}")

        assert response.status_code == 200
        assert response.json()["id"] == project.id

    async def test_get_unknown_is_404(self, client: AsyncClient):
        response = await client.get("/api/projects/missing")

        assert response.status_code == 404
        assert response.json()["error"] == "ResourceNotFoundError"


@pytest.mark.asyncio
class TestMutations:
    async def test_create_as_manager(self, client: AsyncClient, manager, auth_headers):
        response = await client.post(
            "/api/projects",
            json={"title": "Skyline", "area": "2,400 sq ft", "category": "Residential"},
            headers=auth_headers(manager.uid),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["progress"] == 0
        assert body["percentage"] == 0
        assert body["images"] == []
        assert body["squareFeet"] == 2400
        assert body["name"] == "Skyline"
        assert body["createdBy"] == manager.uid

    async def test_create_requires_token(self, client: AsyncClient):
        response = await client.post("/api/projects", json={"title": "x"})

        assert response.status_code == 401

    async def test_create_as_viewer_forbidden(self, client: AsyncClient, viewer, auth_headers):
        response = await client.post(
            "/api/projects", json={"title": "x"}, headers=auth_headers(viewer.uid)
        )

        assert response.status_code == 403
        assert (await client.get("/api/projects")).json() == []

    async def test_progress_out_of_range(self, client: AsyncClient, manager, auth_headers):
        response = await client.post(
            "/api/projects",
            json={"title": "x", "progress": 150},
            headers=auth_headers(manager.uid),
        )

        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"

    async def test_patch_progress_syncs_percentage(
        self, client: AsyncClient, db_session, manager, auth_headers
    ):
        project = await ProjectFactory.create(db_session, progress=10, location="Pune")

        response = await client.patch(
            f"/api/projects/{project.id}",
            json={"progress": 60},
            headers=auth_headers(manager.uid),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["progress"] == 60
        assert body["percentage"] == 60
        assert body["location"] == "Pune"

    async def test_patch_unknown(self, client: AsyncClient, manager, auth_headers):
        response = await client.patch(
            "/api/projects/missing", json={"title": "x"}, headers=auth_headers(manager.uid)
        )

        assert response.status_code == 404

    async def test_viewer_delete_forbidden(
        self, client: AsyncClient, db_session, viewer, auth_headers
    ):
        project = await ProjectFactory.create(db_session)

        response = await client.delete(
            f"/api/projects/{project.id}", headers=auth_headers(viewer.uid)
        )

        assert response.status_code == 403
        assert (await client.get(f"/api/projects/{project.id}")).status_code == 200

    async def test_delete_cascades(
        self, client: AsyncClient, db_session, manager, auth_headers, s3_client
    ):
        project = await ProjectFactory.create(
            db_session, images=[f"{TEST_MEDIA_BASE_URL}/projects/x/a.jpg"]
        )
        await TaskFactory.create(db_session, project)

        response = await client.delete(
            f"/api/projects/{project.id}", headers=auth_headers(manager.uid)
        )

        assert response.status_code == 204
        assert (await client.get(f"/api/projects/{project.id}")).status_code == 404
        tasks = await client.get(
            f"/api/projects/{project.id}/tasks", headers=auth_headers(manager.uid)
        )
        assert tasks.json() == []
        s3_client.delete_object.assert_called_once()


@pytest.mark.asyncio
class TestImageUpload:
    async def test_upload_appends_url(
        self, client: AsyncClient, db_session, manager, auth_headers
    ):
        project = await ProjectFactory.create(db_session)

        response = await client.post(
            f"/api/projects/{project.id}/images",
            files={"file": ("site.jpg", b"\xff\xd8\xff", "image/jpeg")},
            headers=auth_headers(manager.uid),
        )

        assert response.status_code == 201
        images = response.json()["images"]
        assert len(images) == 1
        assert images[0].startswith(f"{TEST_MEDIA_BASE_URL}/projects/{project.id}/")

    async def test_empty_file_rejected(
        self, client: AsyncClient, db_session, manager, auth_headers
    ):
        project = await ProjectFactory.create(db_session)

        response = await client.post(
            f"/api/projects/{project.id}/images",
            files={"file": ("empty.jpg", b"", "image/jpeg")},
            headers=auth_headers(manager.uid),
        )

        assert response.status_code == 400
        assert response.json()["error"] == "ImageUploadError"
