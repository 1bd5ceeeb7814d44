"""
Data Access Object (DAO) package.

WHY: DAOs provide a clean separation between database operations and business logic,
making the codebase more testable and maintainable.
"""

from infraworks.dao.base import BaseDAO, ChildDAO, SERVER_TIMESTAMP
from infraworks.dao.user import UserProfileDAO
from infraworks.dao.project import ProjectDAO, TaskDAO
from infraworks.dao.lead import ContactLeadDAO, QuotationRequestDAO
from infraworks.dao.achievement import AchievementDAO

__all__ = [
    "BaseDAO",
    "ChildDAO",
    "SERVER_TIMESTAMP",
    "UserProfileDAO",
    "ProjectDAO",
    "TaskDAO",
    "ContactLeadDAO",
    "QuotationRequestDAO",
    "AchievementDAO",
]
