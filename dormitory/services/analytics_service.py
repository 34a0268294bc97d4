"""Dashboard analytics over occupants, payments and bills."""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import NamedTuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from dormitory.models.bill import Bill
from dormitory.models.occupant import Occupant
from dormitory.models.payment import Payment, PaymentStatus
from dormitory.services.period_service import month_bounds, month_label


class DashboardSummary(NamedTuple):
    """Headline numbers for the admin dashboard."""

    month: str
    total_occupants: int
    active_occupants: int
    occupancy_rate: int
    monthly_revenue: Decimal
    pending_payments: int
    latest_effective_rate: Decimal | None


class AnalyticsService:
    """Read-only aggregates for the admin dashboard."""

    def __init__(self, db_session: Session):
        self.db = db_session

    def dashboard_summary(self, month: str | None = None) -> DashboardSummary:
        """Compute dashboard numbers for a month (default: current month).

        Revenue counts PAID payments whose rent month matches, or whose
        payment date falls in the month when no rent month is recorded.
        """
        month = month or month_label(date.today())
        bounds = month_bounds(month)

        total = self.db.execute(select(func.count(Occupant.id))).scalar() or 0
        active = (
            self.db.execute(
                select(func.count(Occupant.id)).where(Occupant.is_active.is_(True))
            ).scalar()
            or 0
        )
        occupancy_rate = (
            int((Decimal(active * 100) / total).quantize(Decimal(1), rounding=ROUND_HALF_UP))
            if total
            else 0
        )

        paid = (
            self.db.query(Payment)
            .filter(Payment.status == PaymentStatus.PAID)
            .filter(
                (Payment.month == month)
                | (
                    Payment.month.is_(None)
                    & (Payment.payment_date >= bounds.start_date)
                    & (Payment.payment_date <= bounds.end_date)
                )
            )
            .all()
        )
        revenue = sum((Decimal(p.amount) for p in paid), Decimal(0))

        pending = (
            self.db.execute(
                select(func.count(Payment.id)).where(Payment.status == PaymentStatus.PENDING)
            ).scalar()
            or 0
        )

        latest = self.db.query(Bill).order_by(Bill.end_date.desc(), Bill.id.desc()).first()
        effective_rate = None
        if latest is not None and Decimal(latest.total_consumption) > 0:
            effective_rate = (
                Decimal(latest.total_amount) / Decimal(latest.total_consumption)
            ).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

        return DashboardSummary(
            month=month,
            total_occupants=total,
            active_occupants=active,
            occupancy_rate=occupancy_rate,
            monthly_revenue=revenue,
            pending_payments=pending,
            latest_effective_rate=effective_rate,
        )


__all__ = ["AnalyticsService", "DashboardSummary"]
