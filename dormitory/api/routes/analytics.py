"""Dashboard analytics API routes."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from dormitory.schemas.analytics import DashboardResponse
from dormitory.services import get_db
from dormitory.services.analytics_service import AnalyticsService

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    month: str | None = Query(None, description="YYYY-MM (default: current month)"),
    db: Session = Depends(get_db),
) -> DashboardResponse:
    """Occupancy, revenue and pending payment counts for a month."""
    summary = AnalyticsService(db).dashboard_summary(month)
    return DashboardResponse.model_validate(summary._asdict())
