"""
Dashboard API endpoint.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infraworks.core.access import Caller
from infraworks.core.deps import get_current_caller
from infraworks.db.session import get_db
from infraworks.schemas.dashboard import DashboardMetrics
from infraworks.services.dashboard_service import DashboardService


router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get(
    "/metrics",
    response_model=DashboardMetrics,
    summary="Dashboard metrics",
    description="Project and task counts, recent projects and completion rate",
)
async def get_metrics(
    caller: Caller = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db),
) -> DashboardMetrics:
    return await DashboardService(db).compute_metrics(caller)
