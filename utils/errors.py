"""
Typed failures raised by the ledger DAOs.

Every error carries a machine-readable ``code`` and the HTTP status the API
layer answers with, so handlers never have to parse messages.
"""
from typing import Any, Optional


class LedgerError(Exception):
    code = "ledger_error"
    http_status = 500

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        payload = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class NotFound(LedgerError):
    code = "not_found"
    http_status = 404

    def __init__(self, entity: str, entity_id: Optional[Any] = None):
        super().__init__(f"{entity} not found", entity=entity, id=entity_id)
        self.entity = entity
        self.entity_id = entity_id


class InsufficientStock(LedgerError):
    code = "insufficient_stock"
    http_status = 400

    def __init__(self, entity: str, entity_id: Any, available, requested):
        super().__init__(
            f"Insufficient {entity} stock",
            entity=entity,
            id=entity_id,
            available=float(available),
            requested=float(requested),
        )
        self.available = available
        self.requested = requested


class Forbidden(LedgerError):
    code = "forbidden"
    http_status = 403


class Conflict(LedgerError):
    code = "conflict"
    http_status = 409


class ValidationError(LedgerError, ValueError):
    code = "validation_error"
    http_status = 400


class StorageError(LedgerError):
    code = "storage_error"
    http_status = 500


class ImmutableRecord(LedgerError):
    code = "immutable_record"
    http_status = 409
