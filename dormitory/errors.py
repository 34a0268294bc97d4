"""Application error taxonomy.

Validation errors are user-correctable and name the offending field.
Not-found errors signal a stale reference. Store failures are propagated
unretried so the caller can decide whether a retry is safe.
"""

from typing import Any, Dict


class AppError(Exception):
    """Base application error."""

    def __init__(self, message: str, code: str, http_status: int = 400):
        """Initialize error."""
        self.message = message
        self.code = code
        self.http_status = http_status
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message}


class ValidationError(AppError):
    """Input rejected before any computation or write."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, "validation_error", 422)
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["field"] = self.field
        return data


class BillingValidationError(ValidationError):
    """Meter readings, rate or days stayed cannot be prorated."""


class NotFoundError(AppError):
    """Referenced occupant, bill, share, period or payment does not exist."""

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity} {entity_id} not found", "not_found", 404)
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(AppError):
    """Write would violate a uniqueness rule."""

    def __init__(self, message: str):
        super().__init__(message, "conflict", 409)


class StoreUnavailableError(AppError):
    """Database could not be reached."""

    def __init__(self, message: str = "Storage is temporarily unavailable, please retry"):
        super().__init__(message, "store_unavailable", 503)


__all__ = [
    "AppError",
    "ValidationError",
    "BillingValidationError",
    "NotFoundError",
    "ConflictError",
    "StoreUnavailableError",
]
