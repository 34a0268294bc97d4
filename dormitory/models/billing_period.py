"""Billing period ORM model for grouping attendance and bills into cycles."""

from datetime import date

from sqlalchemy import Boolean, Date, String
from sqlalchemy.orm import Mapped, mapped_column

from dormitory.models import Base, BaseModel


class BillingPeriod(Base, BaseModel):
    """Model representing a billing period.

    A contiguous, inclusive date range anchored to a recurring cut-over day
    rather than the calendar month. At most one row carries ``is_current``.
    """

    __tablename__ = "billing_periods"

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        index=True,
        comment="Period identifier (e.g., '2025-08-22..2025-09-21')",
    )
    start_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="First day of the period (inclusive)",
    )
    end_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="Last day of the period (inclusive)",
    )
    is_current: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        index=True,
    )

    @property
    def length_days(self) -> int:
        """Number of calendar days in the period, both ends included."""
        return (self.end_date - self.start_date).days + 1

    def __repr__(self) -> str:
        return (
            f"<BillingPeriod(id={self.id}, name={self.name}, start_date={self.start_date}, "
            f"end_date={self.end_date}, is_current={self.is_current})>"
        )


__all__ = ["BillingPeriod"]
