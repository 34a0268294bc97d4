"""Pydantic schemas for billing periods."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class PeriodCreate(BaseModel):
    """Request payload for POST /periods."""

    start_date: date
    end_date: date
    name: str | None = Field(None, description="Identifier (default: 'start..end')")
    make_current: bool = False


class SetCurrentPayload(BaseModel):
    period_id: int


class PeriodResponse(BaseModel):
    """A billing period; ``id`` is None for the derived default period."""

    id: int | None = None
    name: str | None = None
    start_date: date
    end_date: date
    is_current: bool = False
    length_days: int
    is_default: bool = False

    model_config = ConfigDict(from_attributes=True)


class AttendanceSummaryResponse(BaseModel):
    occupant_id: int
    occupant_name: str
    days_stayed: int
    total_days: int
    attendance_rate: int

    model_config = ConfigDict(from_attributes=True)
