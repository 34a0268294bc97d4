"""Occupant ORM model for dormitory tenants ("dormers")."""

from datetime import date
from decimal import Decimal

from sqlalchemy import Boolean, Date, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dormitory.models import Base, BaseModel


class Occupant(Base, BaseModel):
    """Model representing a dormitory occupant.

    Occupants are never hard-deleted: moving out clears ``is_active`` and
    stamps ``check_out_date`` so that historical bill shares, payments and
    attendance keep a valid reference.
    """

    __tablename__ = "occupants"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    room: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        index=True,
        comment="Assigned room number/label",
    )
    monthly_rent: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        comment="Current monthly rent baseline",
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        index=True,
    )
    check_in_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    check_out_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Relationships
    attendance: Mapped[list["AttendanceRecord"]] = relationship(  # noqa: F821
        "AttendanceRecord",
        back_populates="occupant",
    )
    bill_shares: Mapped[list["BillShare"]] = relationship(  # noqa: F821
        "BillShare",
        back_populates="occupant",
    )
    payments: Mapped[list["Payment"]] = relationship(  # noqa: F821
        "Payment",
        back_populates="occupant",
    )

    def __repr__(self) -> str:
        return (
            f"<Occupant(id={self.id}, name={self.name}, room={self.room}, "
            f"is_active={self.is_active})>"
        )


__all__ = ["Occupant"]
