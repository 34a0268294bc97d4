"""Audit service for logging entity lifecycle events."""

from sqlalchemy.orm import Session

from dormitory.models.audit_log import AuditLog


class AuditService:
    """Service for audit log operations.

    Entries are added to the caller's session and committed together with
    the change they describe.
    """

    @staticmethod
    def log(
        db: Session,
        entity_type: str,
        entity_id: int,
        action: str,
        actor: str | None = None,
        changes: dict | None = None,
    ) -> AuditLog:
        """Stage an audit entry in the current transaction.

        Args:
            db: Session holding the change being audited
            entity_type: "bill", "payment", "period" or "occupant"
            entity_id: Primary key of the entity
            action: "create", "update", "delete", "deactivate" or "set_current"
            actor: Administrator name from the X-Actor header, if any
            changes: JSON-serializable snapshot of the relevant fields

        Returns:
            The pending AuditLog row (not yet committed)
        """
        audit = AuditLog(
            entity_type=entity_type,
            entity_id=entity_id,
            action=action,
            actor=actor,
            changes=changes,
        )
        db.add(audit)
        return audit

    @staticmethod
    def list_for_entity(db: Session, entity_type: str, entity_id: int) -> list[AuditLog]:
        """Audit entries for one entity, oldest first."""
        return (
            db.query(AuditLog)
            .filter(AuditLog.entity_type == entity_type, AuditLog.entity_id == entity_id)
            .order_by(AuditLog.id)
            .all()
        )


__all__ = ["AuditService"]
