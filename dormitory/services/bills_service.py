"""Service for computing, saving and reading shared electricity bills."""

import logging
from datetime import date
from decimal import Decimal
from typing import NamedTuple

from sqlalchemy.orm import Session, selectinload

from dormitory.errors import NotFoundError
from dormitory.models.bill import Bill, BillShare
from dormitory.models.occupant import Occupant
from dormitory.models.payment import Payment
from dormitory.services.attendance_service import AttendanceService, DateRange
from dormitory.services.audit_service import AuditService
from dormitory.services.billing_engine import (
    BillCalculation,
    OccupantDays,
    calculate_bill,
    to_currency,
)
from dormitory.services.reconciliation import ObligationStatus, classify_bill_share, due_date_for

logger = logging.getLogger(__name__)


class ShareStatus(NamedTuple):
    """A saved bill share with its derived payment status."""

    share: BillShare
    due_date: date
    status: ObligationStatus


class BillsService:
    """Service for bill database operations.

    Computation is delegated to the pure billing engine; this class only
    gathers inputs (occupants, attendance) and persists the result when
    asked to.
    """

    def __init__(self, db_session: Session):
        """Initialize with database session."""
        self.db = db_session

    def _require_occupants(self, occupant_ids: list[int]) -> None:
        found = {
            row.id
            for row in self.db.query(Occupant.id).filter(Occupant.id.in_(occupant_ids)).all()
        }
        for occupant_id in occupant_ids:
            if occupant_id not in found:
                raise NotFoundError("Occupant", occupant_id)

    def gather_days_stayed(self, period: DateRange) -> list[OccupantDays]:
        """Days stayed per active occupant derived from the attendance ledger.

        Occupants with no present days are left out unless nobody stayed at
        all, in which case everyone is returned and the engine rejects the
        zero total.
        """
        occupant_ids = [
            row.id
            for row in self.db.query(Occupant.id)
            .filter(Occupant.is_active.is_(True))
            .order_by(Occupant.room, Occupant.id)
            .all()
        ]
        counts = AttendanceService(self.db).days_stayed_for_occupants(occupant_ids, period)
        entries = [OccupantDays(oid, counts[oid]) for oid in occupant_ids]
        return [e for e in entries if e.days_stayed > 0] or entries

    def preview_bill(
        self,
        period: DateRange,
        previous_reading: Decimal,
        current_reading: Decimal,
        rate_per_unit: Decimal,
        days_stayed: dict[int, int] | None = None,
    ) -> BillCalculation:
        """Compute a bill without writing anything.

        Args:
            period: Billing period (its length caps days stayed)
            previous_reading: Previous meter value
            current_reading: Current meter value
            rate_per_unit: Price per kWh
            days_stayed: Explicit occupant_id → days; when omitted days are
                derived from attendance for all active occupants

        Raises:
            BillingValidationError: If the engine rejects the inputs
            NotFoundError: If an explicit occupant does not exist
        """
        if days_stayed is not None:
            occupants = [OccupantDays(oid, days) for oid, days in days_stayed.items()]
            if occupants:
                self._require_occupants([o.occupant_id for o in occupants])
        else:
            occupants = self.gather_days_stayed(period)

        max_days = (period.end_date - period.start_date).days + 1
        return calculate_bill(
            previous_reading,
            current_reading,
            rate_per_unit,
            occupants,
            max_days=max_days,
        )

    def save_calculation(
        self,
        calculation: BillCalculation,
        period: DateRange,
        actor: str | None = None,
    ) -> Bill:
        """Persist a computed bill and one share per occupant atomically.

        Returns:
            The created Bill with its shares loaded
        """
        self._require_occupants([s.occupant_id for s in calculation.shares])
        try:
            bill = self._add_bill(calculation, period)
            self._add_bill_shares(bill, calculation)
            AuditService.log(
                self.db,
                entity_type="bill",
                entity_id=bill.id,
                action="create",
                actor=actor,
                changes={
                    "total_consumption": str(bill.total_consumption),
                    "total_amount": str(bill.total_amount),
                    "share_count": len(calculation.shares),
                },
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(bill)
        logger.info(
            "Saved bill %d for %s..%s: %s kWh, total %s, %d shares",
            bill.id,
            bill.start_date,
            bill.end_date,
            bill.total_consumption,
            bill.total_amount,
            len(bill.shares),
        )
        return bill

    def save_bill(
        self,
        period: DateRange,
        previous_reading: Decimal,
        current_reading: Decimal,
        rate_per_unit: Decimal,
        days_stayed: dict[int, int] | None = None,
        actor: str | None = None,
    ) -> Bill:
        """Compute then persist; a rejected input creates nothing."""
        calculation = self.preview_bill(
            period,
            previous_reading,
            current_reading,
            rate_per_unit,
            days_stayed=days_stayed,
        )
        return self.save_calculation(calculation, period, actor=actor)

    def _add_bill(self, calculation: BillCalculation, period: DateRange) -> Bill:
        bill = Bill(
            billing_period_id=getattr(period, "id", None),
            start_date=period.start_date,
            end_date=period.end_date,
            previous_reading=calculation.previous_reading,
            current_reading=calculation.current_reading,
            rate_per_unit=calculation.rate_per_unit,
            total_consumption=calculation.consumption,
            total_amount=calculation.rounded_total,
        )
        self.db.add(bill)
        self.db.flush()
        return bill

    def _add_bill_shares(self, bill: Bill, calculation: BillCalculation) -> list[BillShare]:
        shares = [
            BillShare(
                bill=bill,
                occupant_id=share.occupant_id,
                days_stayed=share.days_stayed,
                share_amount=to_currency(share.amount),
            )
            for share in calculation.shares
        ]
        self.db.add_all(shares)
        self.db.flush()
        return shares

    def get_bill(self, bill_id: int) -> Bill:
        """Get bill with shares.

        Raises:
            NotFoundError: If no such bill exists
        """
        bill = (
            self.db.query(Bill)
            .options(selectinload(Bill.shares))
            .filter(Bill.id == bill_id)
            .first()
        )
        if bill is None:
            raise NotFoundError("Bill", bill_id)
        return bill

    def get_share(self, share_id: int) -> BillShare:
        share = self.db.get(BillShare, share_id)
        if share is None:
            raise NotFoundError("Bill share", share_id)
        return share

    def list_bills(self, limit: int = 50) -> list[Bill]:
        """Bills newest first."""
        return (
            self.db.query(Bill)
            .options(selectinload(Bill.shares))
            .order_by(Bill.end_date.desc(), Bill.id.desc())
            .limit(limit)
            .all()
        )

    def shares_for_occupant(self, occupant_id: int) -> list[BillShare]:
        return (
            self.db.query(BillShare)
            .join(Bill)
            .filter(BillShare.occupant_id == occupant_id)
            .order_by(Bill.end_date.desc(), BillShare.id.desc())
            .all()
        )

    def share_statuses(self, bill_id: int, today: date | None = None) -> list[ShareStatus]:
        """Derived payment status of every share of a bill."""
        bill = self.get_bill(bill_id)
        today = today or date.today()
        due_date = due_date_for(bill.end_date)
        share_ids = [s.id for s in bill.shares]
        payments = (
            self.db.query(Payment).filter(Payment.bill_share_id.in_(share_ids)).all()
            if share_ids
            else []
        )
        return [
            ShareStatus(
                share=share,
                due_date=due_date,
                status=classify_bill_share(share.id, due_date, payments, today),
            )
            for share in bill.shares
        ]


__all__ = ["BillsService", "ShareStatus"]
