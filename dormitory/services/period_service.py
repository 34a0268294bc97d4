"""Billing period management service for database operations."""

import calendar
import logging
import re
from datetime import date, timedelta
from typing import NamedTuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dormitory.config import settings
from dormitory.errors import ConflictError, NotFoundError, ValidationError
from dormitory.models.billing_period import BillingPeriod
from dormitory.services.audit_service import AuditService

logger = logging.getLogger(__name__)

MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


class PeriodRange(NamedTuple):
    """Inclusive date range used when no stored period applies."""

    start_date: date
    end_date: date

    @property
    def length_days(self) -> int:
        return (self.end_date - self.start_date).days + 1


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def default_period_for(today: date, cutover_day: int | None = None) -> PeriodRange:
    """Derive the billing period containing ``today``.

    Periods start on the cut-over day of one month and end the day before the
    cut-over day of the next (22nd to 21st by default).

    Args:
        today: Reference date
        cutover_day: Day of month a period starts on (default: settings)

    Returns:
        PeriodRange containing today
    """
    day = cutover_day or settings.billing_cutover_day
    if today.day >= day:
        start = date(today.year, today.month, day)
    else:
        year, month = _shift_month(today.year, today.month, -1)
        start = date(year, month, day)
    next_year, next_month = _shift_month(start.year, start.month, 1)
    end = date(next_year, next_month, day) - timedelta(days=1)
    return PeriodRange(start, end)


def month_label(value: date) -> str:
    """Format a date as its ``YYYY-MM`` month label."""
    return value.strftime("%Y-%m")


def month_bounds(month: str) -> PeriodRange:
    """First and last day of a ``YYYY-MM`` month.

    Raises:
        ValidationError: If month is not in YYYY-MM format
    """
    if not MONTH_PATTERN.match(month or ""):
        raise ValidationError(f"month must be in YYYY-MM format, got {month!r}", field="month")
    year, month_num = (int(part) for part in month.split("-"))
    last_day = calendar.monthrange(year, month_num)[1]
    return PeriodRange(date(year, month_num, 1), date(year, month_num, last_day))


def validate_range(start_date: date, end_date: date) -> None:
    if start_date > end_date:
        raise ValidationError(
            f"start_date must not be after end_date ({start_date} > {end_date})",
            field="start_date",
        )


class BillingPeriodService:
    """Service for billing period database operations.

    The "current" period is stored as a flag for administrators to switch,
    but callers always pass the period object explicitly into calculations.
    """

    def __init__(self, db_session: Session):
        """Initialize with database session."""
        self.db = db_session

    def create_period(
        self,
        start_date: date,
        end_date: date,
        name: str | None = None,
        make_current: bool = False,
        actor: str | None = None,
    ) -> BillingPeriod:
        """Create a new billing period.

        Args:
            start_date: First day (inclusive)
            end_date: Last day (inclusive)
            name: Period identifier (default: "start..end")
            make_current: Also mark the new period as current
            actor: Administrator performing the action

        Returns:
            Created BillingPeriod

        Raises:
            ValidationError: If start_date > end_date
            ConflictError: If a period with the same name exists
        """
        validate_range(start_date, end_date)
        name = name or f"{start_date.isoformat()}..{end_date.isoformat()}"

        if self.db.query(BillingPeriod).filter_by(name=name).first():
            raise ConflictError(f"Billing period '{name}' already exists")

        if make_current:
            self._clear_current()

        period = BillingPeriod(
            name=name,
            start_date=start_date,
            end_date=end_date,
            is_current=make_current,
        )
        self.db.add(period)
        try:
            self.db.flush()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(f"Billing period '{name}' already exists") from e

        AuditService.log(
            self.db,
            entity_type="period",
            entity_id=period.id,
            action="create",
            actor=actor,
            changes={
                "start_date": start_date.isoformat(),
                "end_date": end_date.isoformat(),
                "is_current": make_current,
            },
        )
        self.db.commit()
        self.db.refresh(period)
        logger.info(f"Created billing period: {name} (ID={period.id})")
        return period

    def get_by_id(self, period_id: int) -> BillingPeriod:
        """Get billing period by ID.

        Raises:
            NotFoundError: If no such period exists
        """
        period = self.db.get(BillingPeriod, period_id)
        if period is None:
            raise NotFoundError("Billing period", period_id)
        return period

    def list_periods(self, limit: int = 24) -> list[BillingPeriod]:
        """List periods ordered by start_date desc."""
        return (
            self.db.query(BillingPeriod)
            .order_by(BillingPeriod.start_date.desc())
            .limit(limit)
            .all()
        )

    def get_current(self) -> BillingPeriod | None:
        """Stored current period, if any."""
        return self.db.query(BillingPeriod).filter(BillingPeriod.is_current.is_(True)).first()

    def get_current_or_default(self, today: date | None = None) -> BillingPeriod | PeriodRange:
        """Stored current period, falling back to the derived cut-over period."""
        period = self.get_current()
        if period is not None:
            return period
        return default_period_for(today or date.today())

    def set_current(self, period_id: int, actor: str | None = None) -> BillingPeriod:
        """Make one period current, clearing the flag on any other.

        Raises:
            NotFoundError: If no such period exists
        """
        period = self.get_by_id(period_id)
        previous = self.get_current()
        self._clear_current()
        period.is_current = True

        AuditService.log(
            self.db,
            entity_type="period",
            entity_id=period.id,
            action="set_current",
            actor=actor,
            changes={"previous_current_id": previous.id if previous else None},
        )
        self.db.commit()
        self.db.refresh(period)
        logger.info(f"Billing period {period.id} is now current")
        return period

    def _clear_current(self) -> None:
        for existing in self.db.query(BillingPeriod).filter(BillingPeriod.is_current.is_(True)):
            existing.is_current = False
        self.db.flush()


__all__ = [
    "BillingPeriodService",
    "PeriodRange",
    "default_period_for",
    "month_label",
    "month_bounds",
    "validate_range",
]
