"""
Unit tests for TaskDAO.

WHAT: Tests for parent-scoped task operations and note appends.

WHY: A task addressed through the wrong project must look missing, and
note appends must keep every note in call order.

HOW: Uses pytest-asyncio with in-memory SQLite database for isolation.
"""

import pytest
from datetime import datetime, timezone

from infraworks.dao.base import SERVER_TIMESTAMP
from infraworks.dao.project import TaskDAO
from infraworks.models.project import TaskPriority, TaskStatus
from tests.factories import ProjectFactory, TaskFactory


class TestTaskScoping:
    """Every task operation is addressed by (projectId, taskId)."""

    @pytest.mark.asyncio
    async def test_create_child_defaults(self, db_session):
        project = await ProjectFactory.create(db_session)

        task = await TaskDAO(db_session).create_child(project.id, title="Pour slab")

        assert task.project_id == project.id
        assert task.status == TaskStatus.PENDING.value
        assert task.priority == TaskPriority.MEDIUM.value
        assert task.notes == []
        assert task.completed_at is None

    @pytest.mark.asyncio
    async def test_wrong_parent_is_missing(self, db_session):
        dao = TaskDAO(db_session)
        project = await ProjectFactory.create(db_session, title="A")
        other = await ProjectFactory.create(db_session, title="B")
        task = await TaskFactory.create(db_session, project)

        assert await dao.get_child(other.id, task.id) is None
        assert await dao.update_child(other.id, task.id, title="x") is None
        assert await dao.delete_child(other.id, task.id) is False
        assert (await dao.get_child(project.id, task.id)).title == "Test Task"

    @pytest.mark.asyncio
    async def test_list_for_project_newest_first(self, db_session):
        project = await ProjectFactory.create(db_session)
        other = await ProjectFactory.create(db_session)
        for day, title in ((1, "first"), (3, "third"), (2, "second")):
            await TaskFactory.create(
                db_session,
                project,
                title=title,
                created_at=datetime(2024, 2, day, tzinfo=timezone.utc),
            )
        await TaskFactory.create(db_session, other, title="elsewhere")

        tasks = await TaskDAO(db_session).list_for_project(project.id)

        assert [t.title for t in tasks] == ["third", "second", "first"]

    @pytest.mark.asyncio
    async def test_list_for_unknown_project_is_empty(self, db_session):
        assert await TaskDAO(db_session).list_for_project("missing") == []


class TestAppendNote:
    @pytest.mark.asyncio
    async def test_notes_kept_in_call_order(self, db_session):
        dao = TaskDAO(db_session)
        project = await ProjectFactory.create(db_session)
        task = await TaskFactory.create(db_session, project)

        await dao.append_note(
            project.id, task.id, {"content": "one", "createdAt": SERVER_TIMESTAMP, "createdBy": "u1"}
        )
        updated = await dao.append_note(
            project.id, task.id, {"content": "two", "createdAt": SERVER_TIMESTAMP, "createdBy": "u2"}
        )

        assert [n["content"] for n in updated.notes] == ["one", "two"]
        assert [n["createdBy"] for n in updated.notes] == ["u1", "u2"]

    @pytest.mark.asyncio
    async def test_note_timestamp_stored_as_iso_string(self, db_session):
        project = await ProjectFactory.create(db_session)
        task = await TaskFactory.create(db_session, project)

        updated = await TaskDAO(db_session).append_note(
            project.id, task.id, {"content": "x", "createdAt": SERVER_TIMESTAMP}
        )

        created_at = updated.notes[0]["createdAt"]
        assert isinstance(created_at, str)
        assert datetime.fromisoformat(created_at).tzinfo is not None

    @pytest.mark.asyncio
    async def test_unknown_task(self, db_session):
        project = await ProjectFactory.create(db_session)

        assert await TaskDAO(db_session).append_note(project.id, "missing", {"content": "x"}) is None
