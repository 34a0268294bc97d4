"""Occupant management API routes."""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from dormitory.api.dependencies import get_actor, period_from_query
from dormitory.schemas.occupants import (
    DeactivatePayload,
    ObligationLineResponse,
    OccupantCreate,
    OccupantResponse,
    OccupantUpdate,
    StatementResponse,
)
from dormitory.services import get_db
from dormitory.services.occupant_service import OccupantService
from dormitory.services.payment_service import PaymentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/occupants", tags=["occupants"])


@router.get("", response_model=list[OccupantResponse])
async def list_occupants(
    active_only: bool = Query(False),
    db: Session = Depends(get_db),
) -> list[OccupantResponse]:
    """List occupants ordered by room."""
    occupants = OccupantService(db).list_occupants(active_only=active_only)
    return [OccupantResponse.model_validate(o) for o in occupants]


@router.post("", response_model=OccupantResponse, status_code=status.HTTP_201_CREATED)
async def create_occupant(
    payload: OccupantCreate,
    db: Session = Depends(get_db),
) -> OccupantResponse:
    """
    Register a new occupant.

    Returns:
        201: Created occupant
        422: Blank name/room or negative rent
    """
    occupant = OccupantService(db).create_occupant(
        name=payload.name,
        room=payload.room,
        monthly_rent=payload.monthly_rent,
        email=payload.email,
        check_in_date=payload.check_in_date,
        is_active=payload.is_active,
    )
    return OccupantResponse.model_validate(occupant)


@router.get("/{occupant_id}", response_model=OccupantResponse)
async def get_occupant(occupant_id: int, db: Session = Depends(get_db)) -> OccupantResponse:
    return OccupantResponse.model_validate(OccupantService(db).get_occupant(occupant_id))


@router.patch("/{occupant_id}", response_model=OccupantResponse)
async def update_occupant(
    occupant_id: int,
    payload: OccupantUpdate,
    db: Session = Depends(get_db),
) -> OccupantResponse:
    """Update the fields present in the payload."""
    updates = payload.model_dump(exclude_unset=True)
    occupant = OccupantService(db).update_occupant(occupant_id, **updates)
    return OccupantResponse.model_validate(occupant)


@router.post("/{occupant_id}/deactivate", response_model=OccupantResponse)
async def deactivate_occupant(
    occupant_id: int,
    payload: DeactivatePayload | None = None,
    actor: str | None = Depends(get_actor),
    db: Session = Depends(get_db),
) -> OccupantResponse:
    """Mark an occupant as moved out (default check-out date: today)."""
    check_out_date = payload.check_out_date if payload else None
    occupant = OccupantService(db).deactivate_occupant(
        occupant_id, check_out_date=check_out_date, actor=actor
    )
    return OccupantResponse.model_validate(occupant)


@router.get("/{occupant_id}/statement", response_model=StatementResponse)
async def get_statement(
    occupant_id: int,
    period=Depends(period_from_query),
    db: Session = Depends(get_db),
) -> StatementResponse:
    """
    Bill shares and rent for an occupant with statuses derived from payments.

    Returns:
        200: Statement with per-line status and totals
        404: Unknown occupant or period
    """
    statement = PaymentService(db).get_statement(occupant_id, period)
    logger.debug(f"Statement for occupant {occupant_id}: {len(statement.lines)} lines")
    return StatementResponse(
        occupant_id=statement.occupant_id,
        lines=[ObligationLineResponse.model_validate(line) for line in statement.lines],
        total_paid=statement.total_paid,
        total_pending=statement.total_pending,
        total_overdue=statement.total_overdue,
    )
