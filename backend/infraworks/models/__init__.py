"""
Database models package.

WHY: Centralizing model imports ensures Alembic can discover all models
for migration generation and makes it easier to import models elsewhere.
"""

from infraworks.models.base import (
    Base,
    TimestampMixin,
    CreatedAtMixin,
    PrimaryKeyMixin,
    utc_now,
)
from infraworks.models.user import UserProfile, UserRole, ROLE_LEVELS
from infraworks.models.project import (
    Project,
    ProjectTask,
    ProjectStatus,
    TaskStatus,
    TaskPriority,
)
from infraworks.models.lead import ContactLead, QuotationRequest
from infraworks.models.achievement import Achievement

__all__ = [
    "Base",
    "TimestampMixin",
    "CreatedAtMixin",
    "PrimaryKeyMixin",
    "utc_now",
    "UserProfile",
    "UserRole",
    "ROLE_LEVELS",
    "Project",
    "ProjectTask",
    "ProjectStatus",
    "TaskStatus",
    "TaskPriority",
    "ContactLead",
    "QuotationRequest",
    "Achievement",
]
