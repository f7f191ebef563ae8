"""Analytics router - dashboard and reporting endpoints"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import AnalyticsPeriod, AnalyticsReport, DashboardStats
from .service import AnalyticsService

router = APIRouter(tags=["Analytics"])


def get_analytics_service(db: Session = Depends(get_db)) -> AnalyticsService:
    """Dependency injection for AnalyticsService"""
    return AnalyticsService(db)


@router.get("/dashboard", response_model=DashboardStats)
async def get_dashboard(
    current_user: User = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Headline numbers, recent jobs and the next slots on air"""
    return service.dashboard(current_user)


@router.get("/analytics", response_model=AnalyticsReport)
async def get_analytics(
    period: AnalyticsPeriod = Query("month"),
    current_user: User = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
):
    return service.analytics(current_user, period)
