"""
Dashboard metrics schema.
"""

from typing import Dict, List

from pydantic import Field

from infraworks.schemas.common import CamelModel
from infraworks.schemas.project import ProjectResponse


class DashboardMetrics(CamelModel):
    """
    Aggregated back-office metrics.

    projects_by_status always carries all four statuses and tasks_by_status
    all three, zero when empty. projects_by_category only has categories
    that occur.
    """

    total_projects: int = 0
    projects_by_status: Dict[str, int] = Field(default_factory=dict)
    projects_by_category: Dict[str, int] = Field(default_factory=dict)
    total_tasks: int = 0
    tasks_by_status: Dict[str, int] = Field(default_factory=dict)
    recent_projects: List[ProjectResponse] = Field(default_factory=list)
    completion_rate: float = 0
