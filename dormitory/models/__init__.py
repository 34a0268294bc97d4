"""SQLAlchemy base model with common fields and model exports."""

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

# Base class for all models
Base = declarative_base()


class BaseModel:
    """Base model with common timestamp fields."""

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )


# Import models to register them with Base (after Base is defined)
# This must be after Base declaration to avoid circular imports
from dormitory.models.attendance import AttendanceRecord  # noqa: E402
from dormitory.models.audit_log import AuditLog  # noqa: E402
from dormitory.models.bill import Bill, BillShare  # noqa: E402
from dormitory.models.billing_period import BillingPeriod  # noqa: E402
from dormitory.models.occupant import Occupant  # noqa: E402
from dormitory.models.payment import Payment, PaymentKind, PaymentStatus  # noqa: E402

__all__ = [
    "Base",
    "BaseModel",
    "Occupant",
    "BillingPeriod",
    "Bill",
    "BillShare",
    "AttendanceRecord",
    "Payment",
    "PaymentKind",
    "PaymentStatus",
    "AuditLog",
]
