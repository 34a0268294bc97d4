"""Pydantic schemas for bill previews, saved bills and share statuses."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from dormitory.services.reconciliation import ObligationStatus


class OccupantDaysInput(BaseModel):
    occupant_id: int
    days_stayed: int


class BillInput(BaseModel):
    """Request payload for POST /bills and POST /bills/preview.

    The period is taken from ``period_id``, else from explicit
    ``start_date``/``end_date``, else from the current billing period.
    Days stayed are derived from attendance unless ``occupants`` is given.
    """

    period_id: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    previous_reading: Decimal = Field(..., description="Previous meter reading (kWh)")
    current_reading: Decimal = Field(..., description="Current meter reading (kWh)")
    rate_per_unit: Decimal | None = Field(None, description="Rate per kWh (default from settings)")
    occupants: list[OccupantDaysInput] | None = None


class ShareResponse(BaseModel):
    occupant_id: int
    days_stayed: int
    amount: Decimal


class BillPreviewResponse(BaseModel):
    start_date: date
    end_date: date
    consumption: Decimal
    rate_per_unit: Decimal
    total_cost: Decimal
    total_days: int
    shares: list[ShareResponse]
    rounding_drift: Decimal


class BillShareResponse(BaseModel):
    id: int
    bill_id: int
    occupant_id: int
    days_stayed: int
    share_amount: Decimal

    model_config = ConfigDict(from_attributes=True)


class BillResponse(BaseModel):
    id: int
    billing_period_id: int | None = None
    start_date: date
    end_date: date
    previous_reading: Decimal
    current_reading: Decimal
    rate_per_unit: Decimal
    total_consumption: Decimal
    total_amount: Decimal
    created_at: datetime
    shares: list[BillShareResponse] = []

    model_config = ConfigDict(from_attributes=True)


class ShareStatusResponse(BaseModel):
    bill_share_id: int
    occupant_id: int
    share_amount: Decimal
    due_date: date
    status: ObligationStatus
