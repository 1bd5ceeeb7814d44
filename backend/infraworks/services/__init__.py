"""
Business logic services package.

WHY: Services contain business logic separated from API routes and data access,
following the three-layer architecture (API → Service → DAO).
"""

from infraworks.services.achievement_service import AchievementService
from infraworks.services.dashboard_service import DashboardService
from infraworks.services.lead_service import LeadService
from infraworks.services.profile_service import ProfileService
from infraworks.services.project_service import ProjectService
from infraworks.services.quotation import estimate_cost
from infraworks.services.storage_service import StorageService

__all__ = [
    "AchievementService",
    "DashboardService",
    "LeadService",
    "ProfileService",
    "ProjectService",
    "StorageService",
    "estimate_cost",
]
