"""Payment status reconciliation for bill shares and rent obligations.

Status is never stored as the source of truth. It is derived from
(obligation, payments, today) every time it is asked for:

- paid:    a PAID payment settles the obligation
- pending: no settling payment and today ≤ due date
- overdue: no settling payment and today > due date

A bill share is settled by a payment that references it directly. Rent is
settled by a rent payment for the same (occupant, month).
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from typing import Iterable

from dormitory.config import settings
from dormitory.models.payment import Payment, PaymentKind, PaymentStatus


class ObligationStatus(str, Enum):
    """Derived status of an amount owed."""

    PAID = "paid"
    PENDING = "pending"
    OVERDUE = "overdue"


@dataclass(frozen=True)
class RentObligation:
    """Monthly rent owed by one occupant, snapshotting the rent in effect."""

    occupant_id: int
    month: str
    amount: Decimal
    due_date: date


@dataclass(frozen=True)
class ObligationLine:
    """One row of an occupant's statement."""

    kind: PaymentKind
    description: str
    amount: Decimal
    due_date: date
    status: ObligationStatus
    bill_share_id: int | None = None
    month: str | None = None


def due_date_for(period_end: date, grace_days: int | None = None) -> date:
    """Due date derived from a billing period's end date."""
    days = settings.payment_due_days if grace_days is None else grace_days
    return period_end + timedelta(days=days)


def _status_from(settled: bool, due_date: date, today: date) -> ObligationStatus:
    if settled:
        return ObligationStatus.PAID
    if today <= due_date:
        return ObligationStatus.PENDING
    return ObligationStatus.OVERDUE


def _is_settling(payment: Payment) -> bool:
    return payment.status == PaymentStatus.PAID


def classify_bill_share(
    bill_share_id: int,
    due_date: date,
    payments: Iterable[Payment],
    today: date,
) -> ObligationStatus:
    """Status of one bill share given the payment ledger snapshot."""
    settled = any(
        p.bill_share_id == bill_share_id and _is_settling(p)
        for p in payments
    )
    return _status_from(settled, due_date, today)


def classify_rent(
    obligation: RentObligation,
    payments: Iterable[Payment],
    today: date,
) -> ObligationStatus:
    """Status of a rent obligation keyed by (occupant, month)."""
    settled = any(
        p.occupant_id == obligation.occupant_id
        and p.kind == PaymentKind.RENT
        and p.month == obligation.month
        and _is_settling(p)
        for p in payments
    )
    return _status_from(settled, obligation.due_date, today)


__all__ = [
    "ObligationStatus",
    "RentObligation",
    "ObligationLine",
    "due_date_for",
    "classify_bill_share",
    "classify_rent",
]
