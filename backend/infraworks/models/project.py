"""
Project and task models.

WHAT: SQLAlchemy models for construction projects and the tasks that belong
to them.

WHY: Projects are the central back-office entity:
1. Shown on the public site (list, detail, image gallery)
2. Tracked by managers (status, progress, tasks)
3. Aggregated on the admin dashboard

HOW: Tasks live in their own table keyed by projectId, the relational
equivalent of a per-project task subcollection. Statuses are stored as
plain strings so legacy documents with unexpected values still load; the
enums below are the values the API accepts.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.orm import Mapped

from infraworks.models.base import Base, TimestampMixin, PrimaryKeyMixin


class ProjectStatus(str, Enum):
    """
    Project status.

    The four states are peers: any status may be set from any other.
    """

    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    ON_HOLD = "on-hold"


class TaskStatus(str, Enum):
    """Task status. Freely settable; only completedAt stamping is one-way."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    """Task priority level."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Project(Base, PrimaryKeyMixin, TimestampMixin):
    """
    Construction project.

    Attributes:
        id: Opaque document id
        title: Project title shown on the site
        name: Legacy display name (mirrors title when not supplied)
        description: Long description
        location: Site location
        category: Free-form category label (Residential, Commercial, ...)
        status: One of ProjectStatus values
        area: Display area string ("2400 sq ft")
        square_feet: Numeric area, derived from area when numeric
        timeline: Display timeline string
        images: Ordered list of image URLs
        progress: Completion percentage 0..100
        percentage: Legacy duplicate of progress, always kept equal to it
        created_by / updated_by: Principal ids of the last writers
    """

    __tablename__ = "projects"

    title: Mapped[str] = Column(String(255), nullable=False)
    name: Mapped[Optional[str]] = Column(String(255), nullable=True)
    description: Mapped[str] = Column(Text, nullable=False, default="")
    location: Mapped[str] = Column(String(255), nullable=False, default="")
    category: Mapped[str] = Column(String(100), nullable=False, default="", index=True)
    status: Mapped[str] = Column(
        String(32),
        nullable=False,
        default=ProjectStatus.UPCOMING.value,
        index=True,
    )
    area: Mapped[str] = Column(String(100), nullable=False, default="")
    square_feet: Mapped[int] = Column("squareFeet", Integer, nullable=False, default=0)
    timeline: Mapped[str] = Column(String(100), nullable=False, default="")
    images: Mapped[list] = Column(JSON, nullable=False, default=list)
    progress: Mapped[int] = Column(Integer, nullable=False, default=0)
    percentage: Mapped[int] = Column(Integer, nullable=False, default=0)
    created_by: Mapped[Optional[str]] = Column("createdBy", String(128), nullable=True)
    updated_by: Mapped[Optional[str]] = Column("updatedBy", String(128), nullable=True)

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<Project(id={self.id}, title={self.title}, status={self.status})>"


class ProjectTask(Base, PrimaryKeyMixin, TimestampMixin):
    """
    Task owned by exactly one project.

    Attributes:
        project_id: Back-reference to the owning project
        status: One of TaskStatus values
        priority: One of TaskPriority values
        assigned_to: Optional principal id
        notes: Ordered list of {content, createdAt, createdBy}
        completed_at: Set on the first write that completes the task, never cleared
        created_by: Principal id of the creator
    """

    __tablename__ = "project_tasks"

    project_id: Mapped[str] = Column(
        "projectId",
        String(32),
        ForeignKey("projects.id"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = Column(String(255), nullable=False)
    description: Mapped[str] = Column(Text, nullable=False, default="")
    status: Mapped[str] = Column(String(32), nullable=False, default=TaskStatus.PENDING.value)
    priority: Mapped[str] = Column(String(16), nullable=False, default=TaskPriority.MEDIUM.value)
    assigned_to: Mapped[Optional[str]] = Column("assignedTo", String(128), nullable=True)
    notes: Mapped[list] = Column(JSON, nullable=False, default=list)
    completed_at: Mapped[Optional[datetime]] = Column(
        "completedAt", DateTime(timezone=True), nullable=True
    )
    created_by: Mapped[Optional[str]] = Column("createdBy", String(128), nullable=True)

    def __repr__(self) -> str:
        return f"<ProjectTask(id={self.id}, project_id={self.project_id}, status={self.status})>"
