"""Attendance ORM model: one row per occupant per calendar day."""

from datetime import date

from sqlalchemy import Boolean, Date, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dormitory.models import Base, BaseModel


class AttendanceRecord(Base, BaseModel):
    """Presence mark for one occupant on one date.

    The ledger is sparse: a day without a record counts as absent.
    Records are upserted per (occupant_id, attendance_date).
    """

    __tablename__ = "attendance_records"

    occupant_id: Mapped[int] = mapped_column(
        ForeignKey("occupants.id"),
        nullable=False,
        index=True,
    )
    attendance_date: Mapped[date] = mapped_column(Date, nullable=False)
    is_present: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    note: Mapped[str | None] = mapped_column(String(500), nullable=True)

    occupant: Mapped["Occupant"] = relationship(  # noqa: F821
        "Occupant",
        back_populates="attendance",
    )

    __table_args__ = (
        UniqueConstraint("occupant_id", "attendance_date", name="uq_attendance_occupant_date"),
        Index("idx_attendance_occupant_date", "occupant_id", "attendance_date"),
    )

    def __repr__(self) -> str:
        return (
            f"<AttendanceRecord(id={self.id}, occupant_id={self.occupant_id}, "
            f"attendance_date={self.attendance_date}, is_present={self.is_present})>"
        )


__all__ = ["AttendanceRecord"]
