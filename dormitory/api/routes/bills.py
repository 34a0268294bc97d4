"""Electricity bill API routes."""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from dormitory.api.dependencies import get_actor, resolve_period
from dormitory.config import settings
from dormitory.errors import BillingValidationError
from dormitory.schemas.bills import (
    BillInput,
    BillPreviewResponse,
    BillResponse,
    ShareResponse,
    ShareStatusResponse,
)
from dormitory.services import get_db
from dormitory.services.billing_engine import BillCalculation, to_currency
from dormitory.services.bills_service import BillsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bills", tags=["bills"])


def _explicit_days(payload: BillInput) -> dict[int, int] | None:
    if payload.occupants is None:
        return None
    days: dict[int, int] = {}
    for entry in payload.occupants:
        if entry.occupant_id in days:
            raise BillingValidationError(
                f"occupant {entry.occupant_id} listed more than once", field="occupants"
            )
        days[entry.occupant_id] = entry.days_stayed
    return days


def _preview_response(calculation: BillCalculation, period) -> BillPreviewResponse:
    return BillPreviewResponse(
        start_date=period.start_date,
        end_date=period.end_date,
        consumption=calculation.consumption,
        rate_per_unit=calculation.rate_per_unit,
        total_cost=calculation.rounded_total,
        total_days=calculation.total_days,
        shares=[
            ShareResponse(
                occupant_id=share.occupant_id,
                days_stayed=share.days_stayed,
                amount=to_currency(share.amount),
            )
            for share in calculation.shares
        ],
        rounding_drift=calculation.rounding_drift,
    )


@router.post("/preview", response_model=BillPreviewResponse)
async def preview_bill(
    payload: BillInput,
    db: Session = Depends(get_db),
) -> BillPreviewResponse:
    """
    Compute a bill without saving it.

    Returns:
        200: Consumption, total and per-occupant shares
        404: Unknown period or occupant
        422: Invalid readings, rate or days stayed
    """
    period = resolve_period(db, payload.period_id, payload.start_date, payload.end_date)
    calculation = BillsService(db).preview_bill(
        period,
        payload.previous_reading,
        payload.current_reading,
        payload.rate_per_unit if payload.rate_per_unit is not None else settings.default_rate_per_unit,
        days_stayed=_explicit_days(payload),
    )
    return _preview_response(calculation, period)


@router.get("", response_model=list[BillResponse])
async def list_bills(
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
) -> list[BillResponse]:
    return [BillResponse.model_validate(b) for b in BillsService(db).list_bills(limit=limit)]


@router.post("", response_model=BillResponse, status_code=status.HTTP_201_CREATED)
async def create_bill(
    payload: BillInput,
    actor: str | None = Depends(get_actor),
    db: Session = Depends(get_db),
) -> BillResponse:
    """
    Compute and save a bill with one share per occupant.

    Nothing is written when the input is rejected.
    """
    period = resolve_period(db, payload.period_id, payload.start_date, payload.end_date)
    bill = BillsService(db).save_bill(
        period,
        payload.previous_reading,
        payload.current_reading,
        payload.rate_per_unit if payload.rate_per_unit is not None else settings.default_rate_per_unit,
        days_stayed=_explicit_days(payload),
        actor=actor,
    )
    return BillResponse.model_validate(bill)


@router.get("/{bill_id}", response_model=BillResponse)
async def get_bill(bill_id: int, db: Session = Depends(get_db)) -> BillResponse:
    return BillResponse.model_validate(BillsService(db).get_bill(bill_id))


@router.get("/{bill_id}/status", response_model=list[ShareStatusResponse])
async def bill_status(bill_id: int, db: Session = Depends(get_db)) -> list[ShareStatusResponse]:
    """Payment status of each share, derived from the payment ledger."""
    return [
        ShareStatusResponse(
            bill_share_id=item.share.id,
            occupant_id=item.share.occupant_id,
            share_amount=item.share.share_amount,
            due_date=item.due_date,
            status=item.status,
        )
        for item in BillsService(db).share_statuses(bill_id)
    ]
