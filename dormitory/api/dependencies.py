"""Shared FastAPI dependencies."""

from datetime import date

from fastapi import Depends, Header, Query
from sqlalchemy.orm import Session

from dormitory.errors import ValidationError
from dormitory.models.billing_period import BillingPeriod
from dormitory.services import get_db
from dormitory.services.period_service import BillingPeriodService, PeriodRange, validate_range


def get_actor(x_actor: str | None = Header(None, alias="X-Actor")) -> str | None:
    """Administrator name recorded in the audit log, if supplied."""
    return x_actor.strip() if x_actor and x_actor.strip() else None


def resolve_period(
    db: Session,
    period_id: int | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> BillingPeriod | PeriodRange:
    """Pick a period by id, else explicit dates, else the current one."""
    if period_id is not None:
        return BillingPeriodService(db).get_by_id(period_id)
    if start_date is not None or end_date is not None:
        if start_date is None or end_date is None:
            missing = "end_date" if end_date is None else "start_date"
            raise ValidationError("start_date and end_date must be given together", field=missing)
        validate_range(start_date, end_date)
        return PeriodRange(start_date, end_date)
    return BillingPeriodService(db).get_current_or_default()


def period_from_query(
    period_id: int | None = Query(None),
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    db: Session = Depends(get_db),
) -> BillingPeriod | PeriodRange:
    return resolve_period(db, period_id, start_date, end_date)
