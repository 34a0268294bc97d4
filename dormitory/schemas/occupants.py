"""Pydantic schemas for occupants and their statements."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from dormitory.models.payment import PaymentKind
from dormitory.services.reconciliation import ObligationStatus


class OccupantCreate(BaseModel):
    """Request payload for POST /occupants."""

    name: str = Field(..., min_length=1, description="Occupant's full name")
    room: str = Field(..., min_length=1, description="Assigned room")
    email: str | None = Field(None, description="Contact email")
    monthly_rent: Decimal | None = Field(None, description="Monthly rent (default from settings)")
    is_active: bool = True
    check_in_date: date | None = None


class OccupantUpdate(BaseModel):
    """Request payload for PATCH /occupants/{id}; only sent fields change."""

    name: str | None = None
    room: str | None = None
    email: str | None = None
    monthly_rent: Decimal | None = None
    is_active: bool | None = None
    check_in_date: date | None = None
    check_out_date: date | None = None


class DeactivatePayload(BaseModel):
    check_out_date: date | None = None


class OccupantResponse(BaseModel):
    id: int
    name: str
    email: str | None = None
    room: str
    monthly_rent: Decimal
    is_active: bool
    check_in_date: date | None = None
    check_out_date: date | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ObligationLineResponse(BaseModel):
    kind: PaymentKind
    description: str
    amount: Decimal
    due_date: date
    status: ObligationStatus
    bill_share_id: int | None = None
    month: str | None = None

    model_config = ConfigDict(from_attributes=True)


class StatementResponse(BaseModel):
    """Occupant obligations with statuses derived from the payment ledger."""

    occupant_id: int
    lines: list[ObligationLineResponse]
    total_paid: Decimal
    total_pending: Decimal
    total_overdue: Decimal

    model_config = ConfigDict(from_attributes=True)
