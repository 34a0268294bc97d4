"""Attendance ledger API routes."""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from dormitory.api.dependencies import period_from_query
from dormitory.schemas.attendance import (
    AttendanceCalendarResponse,
    AttendanceDayResponse,
    AttendanceResponse,
    AttendanceUpsert,
    MonthlyAttendanceResponse,
)
from dormitory.services import get_db
from dormitory.services.attendance_service import AttendanceService
from dormitory.services.period_service import month_label

router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.get("/history", response_model=list[MonthlyAttendanceResponse])
async def monthly_history(
    month: str | None = Query(None, description="YYYY-MM (default: current month)"),
    occupant_id: int | None = Query(None),
    db: Session = Depends(get_db),
) -> list[MonthlyAttendanceResponse]:
    """Calendar-month attendance with notes and estimated rent share."""
    history = AttendanceService(db).monthly_history(
        month or month_label(date.today()), occupant_id=occupant_id
    )
    return [MonthlyAttendanceResponse.model_validate(h._asdict()) for h in history]


@router.put("/{occupant_id}/{attendance_date}", response_model=AttendanceResponse)
async def upsert_attendance(
    occupant_id: int,
    attendance_date: date,
    payload: AttendanceUpsert,
    db: Session = Depends(get_db),
) -> AttendanceResponse:
    """
    Create or overwrite one day's record.

    Repeating the same request leaves one record with the same values.
    """
    record = AttendanceService(db).upsert_attendance(
        occupant_id, attendance_date, payload.is_present, payload.note
    )
    return AttendanceResponse.model_validate(record)


@router.post("/{occupant_id}/{attendance_date}/toggle", response_model=AttendanceResponse)
async def toggle_attendance(
    occupant_id: int,
    attendance_date: date,
    db: Session = Depends(get_db),
) -> AttendanceResponse:
    record = AttendanceService(db).toggle_attendance(occupant_id, attendance_date)
    return AttendanceResponse.model_validate(record)


@router.get("/{occupant_id}", response_model=list[AttendanceResponse])
async def list_attendance(
    occupant_id: int,
    period=Depends(period_from_query),
    db: Session = Depends(get_db),
) -> list[AttendanceResponse]:
    records = AttendanceService(db).list_attendance(
        occupant_id, period.start_date, period.end_date
    )
    return [AttendanceResponse.model_validate(r) for r in records]


@router.get("/{occupant_id}/calendar", response_model=AttendanceCalendarResponse)
async def attendance_calendar(
    occupant_id: int,
    period=Depends(period_from_query),
    db: Session = Depends(get_db),
) -> AttendanceCalendarResponse:
    """One entry per day of the period; missing days are absent."""
    days = AttendanceService(db).calendar(occupant_id, period)
    return AttendanceCalendarResponse(
        occupant_id=occupant_id,
        start_date=period.start_date,
        end_date=period.end_date,
        days_stayed=sum(1 for day in days if day.is_present),
        days=[
            AttendanceDayResponse(attendance_date=day.date, is_present=day.is_present, note=day.note)
            for day in days
        ],
    )
