"""Payment ledger API routes."""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from dormitory.api.dependencies import get_actor
from dormitory.schemas.payments import PaymentCreate, PaymentResponse, PaymentUpdate
from dormitory.services import get_db
from dormitory.services.payment_service import PaymentService

router = APIRouter(prefix="/payments", tags=["payments"])


@router.get("", response_model=list[PaymentResponse])
async def list_payments(
    occupant_id: int | None = Query(None),
    db: Session = Depends(get_db),
) -> list[PaymentResponse]:
    payments = PaymentService(db).list_payments(occupant_id=occupant_id)
    return [PaymentResponse.model_validate(p) for p in payments]


@router.post("", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def record_payment(
    payload: PaymentCreate,
    actor: str | None = Depends(get_actor),
    db: Session = Depends(get_db),
) -> PaymentResponse:
    """
    Record a rent or electricity payment.

    Returns:
        201: Created payment
        404: Unknown occupant or bill share
        422: Negative amount, missing method or wrong rent/share linkage
    """
    payment = PaymentService(db).record_payment(actor=actor, **payload.model_dump())
    return PaymentResponse.model_validate(payment)


@router.patch("/{payment_id}", response_model=PaymentResponse)
async def update_payment(
    payment_id: int,
    payload: PaymentUpdate,
    actor: str | None = Depends(get_actor),
    db: Session = Depends(get_db),
) -> PaymentResponse:
    updates = payload.model_dump(exclude_unset=True)
    payment = PaymentService(db).update_payment(payment_id, actor=actor, **updates)
    return PaymentResponse.model_validate(payment)


@router.post("/{payment_id}/mark-paid", response_model=PaymentResponse)
async def mark_paid(
    payment_id: int,
    actor: str | None = Depends(get_actor),
    db: Session = Depends(get_db),
) -> PaymentResponse:
    return PaymentResponse.model_validate(PaymentService(db).mark_as_paid(payment_id, actor=actor))


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_payment(
    payment_id: int,
    actor: str | None = Depends(get_actor),
    db: Session = Depends(get_db),
) -> Response:
    """Delete a payment; what it settled reverts to pending or overdue."""
    PaymentService(db).delete_payment(payment_id, actor=actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
