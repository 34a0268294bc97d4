"""Payment ORM model for rent and electricity payments."""

from datetime import date
from decimal import Decimal
from enum import Enum

from sqlalchemy import Date, ForeignKey, Index, Numeric, String, Text
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dormitory.models import Base, BaseModel


class PaymentKind(str, Enum):
    """What obligation a payment settles."""

    RENT = "rent"
    """Monthly rent, keyed by (occupant, month)"""

    ELECTRICITY = "electricity"
    """Electricity bill share, keyed by bill_share_id"""


class PaymentStatus(str, Enum):
    """Recorded status of a payment entry."""

    PAID = "paid"
    PENDING = "pending"
    OVERDUE = "overdue"


class Payment(Base, BaseModel):
    """Model representing money received (or promised) from an occupant.

    Only entries with status PAID settle an obligation; the derived status
    of rent and bill shares is always recomputed from these rows.
    """

    __tablename__ = "payments"

    occupant_id: Mapped[int] = mapped_column(
        ForeignKey("occupants.id"),
        nullable=False,
        index=True,
        comment="Occupant who made the payment",
    )
    kind: Mapped[PaymentKind] = mapped_column(
        SQLEnum(PaymentKind),
        nullable=False,
        default=PaymentKind.RENT,
    )
    month: Mapped[str | None] = mapped_column(
        String(7),
        nullable=True,
        index=True,
        comment="Rent month in YYYY-MM format",
    )
    bill_share_id: Mapped[int | None] = mapped_column(
        ForeignKey("bill_shares.id"),
        nullable=True,
        index=True,
        comment="Electricity bill share settled by this payment",
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    payment_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    payment_method: Mapped[str] = mapped_column(String(50), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[PaymentStatus] = mapped_column(
        SQLEnum(PaymentStatus),
        nullable=False,
        default=PaymentStatus.PAID,
    )

    # Relationships
    occupant: Mapped["Occupant"] = relationship(  # noqa: F821
        "Occupant",
        back_populates="payments",
    )
    bill_share: Mapped["BillShare | None"] = relationship(  # noqa: F821
        "BillShare",
        back_populates="payments",
    )

    __table_args__ = (
        Index("idx_payment_occupant_month", "occupant_id", "month"),
        Index("idx_payment_occupant_date", "occupant_id", "payment_date"),
    )

    def __repr__(self) -> str:
        return (
            f"<Payment(id={self.id}, occupant_id={self.occupant_id}, kind={self.kind}, "
            f"amount={self.amount}, status={self.status})>"
        )


__all__ = ["Payment", "PaymentKind", "PaymentStatus"]
