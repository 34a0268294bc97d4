"""Occupant directory service."""

import logging
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from dormitory.config import settings
from dormitory.errors import NotFoundError, ValidationError
from dormitory.models.occupant import Occupant
from dormitory.services.audit_service import AuditService

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {
    "name",
    "email",
    "room",
    "monthly_rent",
    "is_active",
    "check_in_date",
    "check_out_date",
}

REQUIRED_FIELDS = {"name", "room", "monthly_rent", "is_active"}


class OccupantService:
    """CRUD for occupants. Move-out is a deactivation, never a delete."""

    def __init__(self, db_session: Session):
        self.db = db_session

    def create_occupant(
        self,
        name: str,
        room: str,
        monthly_rent: Decimal | None = None,
        email: str | None = None,
        check_in_date: date | None = None,
        is_active: bool = True,
    ) -> Occupant:
        """Create an occupant.

        Raises:
            ValidationError: If name/room are blank or rent is negative
        """
        if not name or not name.strip():
            raise ValidationError("name is required", field="name")
        if not room or not room.strip():
            raise ValidationError("room is required", field="room")
        rent = settings.default_monthly_rent if monthly_rent is None else Decimal(monthly_rent)
        if rent < 0:
            raise ValidationError("monthly rent cannot be negative", field="monthly_rent")

        occupant = Occupant(
            name=name.strip(),
            room=room.strip(),
            email=email,
            monthly_rent=rent,
            is_active=is_active,
            check_in_date=check_in_date,
        )
        self.db.add(occupant)
        self.db.commit()
        self.db.refresh(occupant)
        logger.info(f"Created occupant {occupant.id} ({occupant.name}, room {occupant.room})")
        return occupant

    def get_occupant(self, occupant_id: int) -> Occupant:
        """Get occupant by ID.

        Raises:
            NotFoundError: If no such occupant exists
        """
        occupant = self.db.get(Occupant, occupant_id)
        if occupant is None:
            raise NotFoundError("Occupant", occupant_id)
        return occupant

    def list_occupants(self, active_only: bool = False) -> list[Occupant]:
        """List occupants ordered by room, then name."""
        query = self.db.query(Occupant)
        if active_only:
            query = query.filter(Occupant.is_active.is_(True))
        return query.order_by(Occupant.room, Occupant.name).all()

    def update_occupant(self, occupant_id: int, **updates) -> Occupant:
        """Update occupant fields.

        Raises:
            NotFoundError: If no such occupant exists
            ValidationError: On unknown fields or invalid values
        """
        occupant = self.get_occupant(occupant_id)

        unknown = set(updates) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"cannot update fields: {', '.join(sorted(unknown))}")
        for field in sorted(REQUIRED_FIELDS & set(updates)):
            if updates[field] is None:
                raise ValidationError(f"{field} cannot be null", field=field)
        if "monthly_rent" in updates and Decimal(updates["monthly_rent"]) < 0:
            raise ValidationError("monthly rent cannot be negative", field="monthly_rent")
        for field in ("name", "room"):
            if field in updates and not (updates[field] or "").strip():
                raise ValidationError(f"{field} is required", field=field)

        for field, value in updates.items():
            setattr(occupant, field, value)

        self.db.commit()
        self.db.refresh(occupant)
        logger.info(f"Updated occupant {occupant_id}: {sorted(updates)}")
        return occupant

    def deactivate_occupant(
        self,
        occupant_id: int,
        check_out_date: date | None = None,
        actor: str | None = None,
    ) -> Occupant:
        """Mark an occupant as moved out.

        Raises:
            NotFoundError: If no such occupant exists
        """
        occupant = self.get_occupant(occupant_id)
        occupant.is_active = False
        occupant.check_out_date = check_out_date or date.today()

        AuditService.log(
            self.db,
            entity_type="occupant",
            entity_id=occupant.id,
            action="deactivate",
            actor=actor,
            changes={"check_out_date": occupant.check_out_date.isoformat()},
        )
        self.db.commit()
        self.db.refresh(occupant)
        logger.info(f"Deactivated occupant {occupant_id}")
        return occupant


__all__ = ["OccupantService"]
