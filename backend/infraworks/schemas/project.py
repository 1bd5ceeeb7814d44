"""
Pydantic schemas for project and task endpoints.

WHAT: Request/response schemas for projects, tasks and task notes.

WHY: Schemas are where required fields and ranges are validated:
1. title is required on create
2. progress is clamped to 0..100 here, not in the service
3. status/priority must be one of the known values on input

Responses type status and priority as plain strings so legacy documents
with other values still serialize.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import ConfigDict, Field

from infraworks.models.project import ProjectStatus, TaskPriority, TaskStatus
from infraworks.schemas.common import CamelModel


class ProjectCreate(CamelModel):
    """
    Project creation request schema.

    Omitted progress defaults to 0; squareFeet is derived from area when
    omitted.
    """

    title: str = Field(..., min_length=1, max_length=255)
    name: Optional[str] = Field(default=None, max_length=255)
    description: str = Field(default="", max_length=10000)
    location: str = Field(default="", max_length=255)
    category: str = Field(default="", max_length=100)
    status: ProjectStatus = ProjectStatus.UPCOMING
    area: str = Field(default="", max_length=100)
    square_feet: Optional[int] = Field(default=None, ge=0)
    timeline: str = Field(default="", max_length=100)
    images: List[str] = Field(default_factory=list)
    progress: Optional[int] = Field(default=None, ge=0, le=100)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Skyline Residency",
                "location": "Pune",
                "category": "Residential",
                "status": "ongoing",
                "area": "24000 sq ft",
                "timeline": "18 months",
                "progress": 40,
            }
        }
    )


class ProjectUpdate(CamelModel):
    """
    Project update request schema.

    WHY: Partial update; only fields present in the body are written.
    percentage is not accepted, it follows progress.
    """

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=10000)
    location: Optional[str] = Field(default=None, max_length=255)
    category: Optional[str] = Field(default=None, max_length=100)
    status: Optional[ProjectStatus] = None
    area: Optional[str] = Field(default=None, max_length=100)
    square_feet: Optional[int] = Field(default=None, ge=0)
    timeline: Optional[str] = Field(default=None, max_length=100)
    images: Optional[List[str]] = None
    progress: Optional[int] = Field(default=None, ge=0, le=100)


class ProjectResponse(CamelModel):
    """Project as returned by the API."""

    id: str
    title: str
    name: Optional[str] = None
    description: str = ""
    location: str = ""
    category: str = ""
    status: str
    area: str = ""
    square_feet: int = 0
    timeline: str = ""
    images: List[str] = Field(default_factory=list)
    progress: int = 0
    percentage: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None


class TaskNote(CamelModel):
    content: str
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None


class NoteCreate(CamelModel):
    """Task note request schema."""

    content: str = Field(..., min_length=1, max_length=5000)


class TaskCreate(CamelModel):
    """Task creation request schema."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="", max_length=5000)
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    assigned_to: Optional[str] = Field(default=None, max_length=128)


class TaskUpdate(CamelModel):
    """
    Task update request schema.

    An explicit completedAt is kept only when the task has none yet.
    """

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=5000)
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    assigned_to: Optional[str] = Field(default=None, max_length=128)
    completed_at: Optional[datetime] = None


class TaskResponse(CamelModel):
    """Task as returned by the API."""

    id: str
    project_id: str
    title: str
    description: str = ""
    status: str
    priority: str
    assigned_to: Optional[str] = None
    notes: List[TaskNote] = Field(default_factory=list)
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: Optional[str] = None
