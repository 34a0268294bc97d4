"""Payment service for recording rent and electricity payments.

Provides methods for:
- Recording, updating, marking paid and deleting payments
- Listing payments per occupant
- Building an occupant statement whose statuses are derived from the ledger
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from dormitory.errors import NotFoundError, ValidationError
from dormitory.models.bill import BillShare
from dormitory.models.occupant import Occupant
from dormitory.models.payment import Payment, PaymentKind, PaymentStatus
from dormitory.services.attendance_service import DateRange
from dormitory.services.audit_service import AuditService
from dormitory.services.period_service import MONTH_PATTERN, month_label
from dormitory.services.reconciliation import (
    ObligationLine,
    ObligationStatus,
    RentObligation,
    classify_bill_share,
    classify_rent,
    due_date_for,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {
    "amount",
    "payment_date",
    "payment_method",
    "notes",
    "status",
    "month",
    "bill_share_id",
}

# Columns that cannot be cleared by an update
REQUIRED_FIELDS = {"amount", "payment_date", "payment_method", "status"}


@dataclass
class Statement:
    """Obligations of one occupant with derived statuses and totals."""

    occupant_id: int
    lines: list[ObligationLine] = field(default_factory=list)

    def _total(self, status: ObligationStatus) -> Decimal:
        return sum((line.amount for line in self.lines if line.status == status), Decimal(0))

    @property
    def total_paid(self) -> Decimal:
        return self._total(ObligationStatus.PAID)

    @property
    def total_pending(self) -> Decimal:
        return self._total(ObligationStatus.PENDING)

    @property
    def total_overdue(self) -> Decimal:
        return self._total(ObligationStatus.OVERDUE)


class PaymentService:
    """Core payment ledger operations."""

    def __init__(self, db: Session):
        """Initialize payment service.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def _require_occupant(self, occupant_id: int) -> Occupant:
        occupant = self.db.get(Occupant, occupant_id)
        if occupant is None:
            raise NotFoundError("Occupant", occupant_id)
        return occupant

    def _validate_link(
        self,
        occupant_id: int,
        kind: PaymentKind,
        month: str | None,
        bill_share_id: int | None,
    ) -> None:
        if kind == PaymentKind.RENT:
            if not month or not MONTH_PATTERN.match(month):
                raise ValidationError("rent payments need a month in YYYY-MM format", field="month")
            if bill_share_id is not None:
                raise ValidationError(
                    "rent payments cannot reference a bill share", field="bill_share_id"
                )
            return

        if bill_share_id is None:
            raise ValidationError(
                "electricity payments must reference a bill share", field="bill_share_id"
            )
        share = self.db.get(BillShare, bill_share_id)
        if share is None:
            raise NotFoundError("Bill share", bill_share_id)
        if share.occupant_id != occupant_id:
            raise ValidationError(
                f"bill share {bill_share_id} belongs to another occupant",
                field="bill_share_id",
            )

    def record_payment(
        self,
        occupant_id: int,
        amount: Decimal,
        payment_date: date,
        payment_method: str,
        kind: PaymentKind = PaymentKind.RENT,
        month: str | None = None,
        bill_share_id: int | None = None,
        notes: str | None = None,
        status: PaymentStatus = PaymentStatus.PAID,
        actor: str | None = None,
    ) -> Payment:
        """Record a payment.

        Args:
            occupant_id: Occupant who paid
            amount: Amount received (≥ 0)
            payment_date: Date of payment
            payment_method: e.g. "cash", "gcash", "bank transfer"
            kind: RENT (keyed by month) or ELECTRICITY (keyed by bill share)
            month: Rent month (YYYY-MM), required for rent
            bill_share_id: Settled share, required for electricity
            notes: Optional notes
            status: Recorded status (only PAID settles an obligation)
            actor: Administrator performing the action

        Returns:
            Created Payment

        Raises:
            NotFoundError: If occupant or bill share does not exist
            ValidationError: On invalid amount, method or linkage
        """
        self._require_occupant(occupant_id)
        kind = PaymentKind(kind)
        status = PaymentStatus(status)
        if Decimal(amount) < 0:
            raise ValidationError("amount cannot be negative", field="amount")
        if not payment_method or not payment_method.strip():
            raise ValidationError("payment method is required", field="payment_method")
        self._validate_link(occupant_id, kind, month, bill_share_id)

        payment = Payment(
            occupant_id=occupant_id,
            kind=kind,
            month=month,
            bill_share_id=bill_share_id,
            amount=Decimal(amount),
            payment_date=payment_date,
            payment_method=payment_method.strip(),
            notes=notes,
            status=status,
        )
        self.db.add(payment)
        self.db.flush()
        AuditService.log(
            self.db,
            entity_type="payment",
            entity_id=payment.id,
            action="create",
            actor=actor,
            changes={"amount": str(payment.amount), "kind": kind.value, "status": status.value},
        )
        self.db.commit()
        self.db.refresh(payment)
        logger.info(
            f"Recorded {kind.value} payment {payment.id}: occupant={occupant_id} "
            f"amount={payment.amount} status={status.value}"
        )
        return payment

    def get_payment(self, payment_id: int) -> Payment:
        payment = self.db.get(Payment, payment_id)
        if payment is None:
            raise NotFoundError("Payment", payment_id)
        return payment

    def list_payments(self, occupant_id: int | None = None) -> list[Payment]:
        """Payments newest first, optionally for one occupant."""
        query = self.db.query(Payment)
        if occupant_id is not None:
            query = query.filter(Payment.occupant_id == occupant_id)
        return query.order_by(Payment.payment_date.desc(), Payment.id.desc()).all()

    def update_payment(self, payment_id: int, actor: str | None = None, **updates) -> Payment:
        """Update payment fields, re-validating the rent/share linkage.

        Raises:
            NotFoundError: If the payment does not exist
            ValidationError: On unknown fields or invalid values
        """
        payment = self.get_payment(payment_id)

        unknown = set(updates) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"cannot update fields: {', '.join(sorted(unknown))}")
        for name in sorted(REQUIRED_FIELDS & set(updates)):
            if updates[name] is None:
                raise ValidationError(f"{name} cannot be null", field=name)
        if "amount" in updates and Decimal(updates["amount"]) < 0:
            raise ValidationError("amount cannot be negative", field="amount")
        if "payment_method" in updates:
            if not updates["payment_method"].strip():
                raise ValidationError("payment method is required", field="payment_method")
            updates["payment_method"] = updates["payment_method"].strip()
        if "status" in updates:
            updates["status"] = PaymentStatus(updates["status"])

        self._validate_link(
            payment.occupant_id,
            payment.kind,
            updates.get("month", payment.month),
            updates.get("bill_share_id", payment.bill_share_id),
        )

        for name, value in updates.items():
            setattr(payment, name, value)

        AuditService.log(
            self.db,
            entity_type="payment",
            entity_id=payment.id,
            action="update",
            actor=actor,
            changes={k: str(v.value if hasattr(v, "value") else v) for k, v in updates.items()},
        )
        self.db.commit()
        self.db.refresh(payment)
        logger.info(f"Updated payment {payment_id}: {sorted(updates)}")
        return payment

    def mark_as_paid(self, payment_id: int, actor: str | None = None) -> Payment:
        return self.update_payment(payment_id, actor=actor, status=PaymentStatus.PAID)

    def delete_payment(self, payment_id: int, actor: str | None = None) -> None:
        """Delete a payment; anything it settled reverts to pending/overdue."""
        payment = self.get_payment(payment_id)
        AuditService.log(
            self.db,
            entity_type="payment",
            entity_id=payment.id,
            action="delete",
            actor=actor,
            changes={"amount": str(payment.amount), "bill_share_id": payment.bill_share_id},
        )
        self.db.delete(payment)
        self.db.commit()
        logger.info(f"Deleted payment {payment_id}")

    def rent_obligation(self, occupant: Occupant, period: DateRange) -> RentObligation:
        """Rent owed for the month a billing period starts in."""
        return RentObligation(
            occupant_id=occupant.id,
            month=month_label(period.start_date),
            amount=Decimal(occupant.monthly_rent),
            due_date=due_date_for(period.end_date),
        )

    def get_statement(
        self,
        occupant_id: int,
        period: DateRange,
        today: date | None = None,
    ) -> Statement:
        """All bill shares of an occupant plus rent for ``period``, with status.

        Raises:
            NotFoundError: If the occupant does not exist
        """
        occupant = self._require_occupant(occupant_id)
        today = today or date.today()
        payments = self.list_payments(occupant_id)
        statement = Statement(occupant_id=occupant_id)

        shares = (
            self.db.query(BillShare)
            .filter(BillShare.occupant_id == occupant_id)
            .order_by(BillShare.id)
            .all()
        )
        for share in shares:
            due = due_date_for(share.bill.end_date)
            statement.lines.append(
                ObligationLine(
                    kind=PaymentKind.ELECTRICITY,
                    description=(
                        f"Electricity {share.bill.start_date.isoformat()}"
                        f"..{share.bill.end_date.isoformat()} ({share.days_stayed} days)"
                    ),
                    amount=Decimal(share.share_amount),
                    due_date=due,
                    status=classify_bill_share(share.id, due, payments, today),
                    bill_share_id=share.id,
                )
            )

        rent = self.rent_obligation(occupant, period)
        statement.lines.append(
            ObligationLine(
                kind=PaymentKind.RENT,
                description=f"Rent {rent.month}",
                amount=rent.amount,
                due_date=rent.due_date,
                status=classify_rent(rent, payments, today),
                month=rent.month,
            )
        )
        return statement


__all__ = ["PaymentService", "Statement"]
