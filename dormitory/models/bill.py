"""Bill and BillShare ORM models for shared electricity bills."""

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Index, Integer, Numeric, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dormitory.models import Base, BaseModel


class Bill(Base, BaseModel):
    """One electricity bill for a billing period.

    Stores the meter-reading pair and rate it was computed from, plus the
    derived consumption and total. Bills are immutable once created.
    """

    __tablename__ = "bills"

    billing_period_id: Mapped[int | None] = mapped_column(
        ForeignKey("billing_periods.id"),
        nullable=True,
        index=True,
        comment="Billing period the bill was computed for",
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)

    previous_reading: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        comment="Previous meter reading (kWh)",
    )
    current_reading: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        comment="Current meter reading (kWh)",
    )
    rate_per_unit: Mapped[Decimal] = mapped_column(
        Numeric(10, 4),
        nullable=False,
        comment="Rate per kWh",
    )
    total_consumption: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        comment="current_reading - previous_reading",
    )
    total_amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        comment="total_consumption * rate_per_unit, rounded half-up",
    )

    # Relationships
    billing_period: Mapped["BillingPeriod | None"] = relationship(  # noqa: F821
        "BillingPeriod",
        foreign_keys=[billing_period_id],
    )
    shares: Mapped[list["BillShare"]] = relationship(
        "BillShare",
        back_populates="bill",
        cascade="all, delete-orphan",
        order_by="BillShare.id",
    )

    def __repr__(self) -> str:
        return (
            f"<Bill(id={self.id}, start_date={self.start_date}, end_date={self.end_date}, "
            f"total_consumption={self.total_consumption}, total_amount={self.total_amount})>"
        )


class BillShare(Base, BaseModel):
    """One occupant's prorated portion of a Bill."""

    __tablename__ = "bill_shares"

    bill_id: Mapped[int] = mapped_column(
        ForeignKey("bills.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    occupant_id: Mapped[int] = mapped_column(
        ForeignKey("occupants.id"),
        nullable=False,
        index=True,
    )
    days_stayed: Mapped[int] = mapped_column(Integer, nullable=False)
    share_amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        comment="Prorated amount rounded to the smallest currency unit",
    )

    # Relationships
    bill: Mapped["Bill"] = relationship("Bill", back_populates="shares")
    occupant: Mapped["Occupant"] = relationship(  # noqa: F821
        "Occupant",
        back_populates="bill_shares",
    )
    payments: Mapped[list["Payment"]] = relationship(  # noqa: F821
        "Payment",
        back_populates="bill_share",
    )

    __table_args__ = (
        UniqueConstraint("bill_id", "occupant_id", name="uq_bill_share_bill_occupant"),
        Index("idx_bill_share_occupant", "occupant_id", "bill_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<BillShare(id={self.id}, bill_id={self.bill_id}, occupant_id={self.occupant_id}, "
            f"days_stayed={self.days_stayed}, share_amount={self.share_amount})>"
        )


__all__ = ["Bill", "BillShare"]
