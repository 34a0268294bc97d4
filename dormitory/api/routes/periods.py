"""Billing period API routes."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from dormitory.api.dependencies import get_actor
from dormitory.models.billing_period import BillingPeriod
from dormitory.schemas.periods import (
    AttendanceSummaryResponse,
    PeriodCreate,
    PeriodResponse,
    SetCurrentPayload,
)
from dormitory.services import get_db
from dormitory.services.attendance_service import AttendanceService
from dormitory.services.period_service import BillingPeriodService, PeriodRange

router = APIRouter(prefix="/periods", tags=["periods"])


def period_response(period: BillingPeriod | PeriodRange) -> PeriodResponse:
    """Serialize a stored period, or a derived default range."""
    if isinstance(period, BillingPeriod):
        return PeriodResponse.model_validate(period)
    return PeriodResponse(
        start_date=period.start_date,
        end_date=period.end_date,
        length_days=period.length_days,
        is_default=True,
    )


@router.get("", response_model=list[PeriodResponse])
async def list_periods(
    limit: int = Query(24, ge=1, le=200),
    db: Session = Depends(get_db),
) -> list[PeriodResponse]:
    return [period_response(p) for p in BillingPeriodService(db).list_periods(limit=limit)]


@router.post("", response_model=PeriodResponse, status_code=status.HTTP_201_CREATED)
async def create_period(
    payload: PeriodCreate,
    actor: str | None = Depends(get_actor),
    db: Session = Depends(get_db),
) -> PeriodResponse:
    """
    Create a billing period.

    Returns:
        201: Created period
        409: A period with the same name exists
        422: start_date after end_date
    """
    period = BillingPeriodService(db).create_period(
        start_date=payload.start_date,
        end_date=payload.end_date,
        name=payload.name,
        make_current=payload.make_current,
        actor=actor,
    )
    return period_response(period)


@router.get("/current", response_model=PeriodResponse)
async def get_current_period(db: Session = Depends(get_db)) -> PeriodResponse:
    """Current period, or the cut-over default when none is stored."""
    return period_response(BillingPeriodService(db).get_current_or_default())


@router.put("/current", response_model=PeriodResponse)
async def set_current_period(
    payload: SetCurrentPayload,
    actor: str | None = Depends(get_actor),
    db: Session = Depends(get_db),
) -> PeriodResponse:
    return period_response(BillingPeriodService(db).set_current(payload.period_id, actor=actor))


@router.get("/{period_id}/attendance-summary", response_model=list[AttendanceSummaryResponse])
async def attendance_summary(
    period_id: int,
    db: Session = Depends(get_db),
) -> list[AttendanceSummaryResponse]:
    """Days stayed per active occupant within the period, most days first."""
    period = BillingPeriodService(db).get_by_id(period_id)
    summaries = AttendanceService(db).period_summary(period)
    return [AttendanceSummaryResponse.model_validate(s._asdict()) for s in summaries]
