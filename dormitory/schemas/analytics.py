"""Pydantic schemas for dashboard analytics."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class DashboardResponse(BaseModel):
    month: str
    total_occupants: int
    active_occupants: int
    occupancy_rate: int
    monthly_revenue: Decimal
    pending_payments: int
    latest_effective_rate: Decimal | None = None

    model_config = ConfigDict(from_attributes=True)
