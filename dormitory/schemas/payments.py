"""Pydantic schemas for payments."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from dormitory.models.payment import PaymentKind, PaymentStatus


class PaymentCreate(BaseModel):
    """Request payload for POST /payments."""

    occupant_id: int
    kind: PaymentKind = PaymentKind.RENT
    month: str | None = Field(None, description="Rent month, YYYY-MM")
    bill_share_id: int | None = Field(None, description="Settled electricity bill share")
    amount: Decimal
    payment_date: date = Field(default_factory=date.today)
    payment_method: str = Field(..., min_length=1)
    notes: str | None = None
    status: PaymentStatus = PaymentStatus.PAID


class PaymentUpdate(BaseModel):
    """Request payload for PATCH /payments/{id}; only sent fields change."""

    amount: Decimal | None = None
    payment_date: date | None = None
    payment_method: str | None = None
    notes: str | None = None
    status: PaymentStatus | None = None
    month: str | None = None
    bill_share_id: int | None = None


class PaymentResponse(BaseModel):
    id: int
    occupant_id: int
    kind: PaymentKind
    month: str | None = None
    bill_share_id: int | None = None
    amount: Decimal
    payment_date: date
    payment_method: str
    notes: str | None = None
    status: PaymentStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
