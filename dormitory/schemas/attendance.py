"""Pydantic schemas for the attendance ledger."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class AttendanceUpsert(BaseModel):
    """Request payload for PUT /attendance/{occupant_id}/{attendance_date}."""

    is_present: bool
    note: str | None = None


class AttendanceResponse(BaseModel):
    id: int
    occupant_id: int
    attendance_date: date
    is_present: bool
    note: str | None = None
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AttendanceDayResponse(BaseModel):
    attendance_date: date
    is_present: bool
    note: str | None = None


class AttendanceCalendarResponse(BaseModel):
    occupant_id: int
    start_date: date
    end_date: date
    days_stayed: int
    days: list[AttendanceDayResponse]


class MonthlyAttendanceResponse(BaseModel):
    occupant_id: int
    occupant_name: str
    room: str
    month: str
    days_stayed: int
    total_days: int
    attendance_rate: int
    notes: list[str]
    monthly_rent: Decimal
    estimated_rent_share: Decimal

    model_config = ConfigDict(from_attributes=True)
