from __future__ import annotations


class AppError(Exception):
    """Base error for domain/application exceptions."""


class ValidationError(AppError):
    """Raised when a record crossing the store boundary breaks its schema."""

    def __init__(self, entity: str, field: str, constraint: str) -> None:
        self.entity = entity
        self.field = field
        self.constraint = constraint
        super().__init__(f"{entity}.{field}: {constraint}")


class MissingReferenceError(AppError):
    """Raised when a foreign key does not resolve (e.g. investment -> product)."""

    def __init__(self, record_id: str | None, field: str, missing_id: str) -> None:
        self.record_id = record_id
        self.field = field
        self.missing_id = missing_id
        super().__init__(f"{field}={missing_id!r} referenced by {record_id!r} does not exist")


class StoreError(AppError):
    """Raised when the record store reports a failure."""

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"{operation} failed: {detail}")


class RecordNotFound(StoreError):
    """Raised when a mutation targets a record id the store does not hold."""

    def __init__(self, operation: str, record_id: str) -> None:
        self.record_id = record_id
        super().__init__(operation, f"record {record_id!r} not found")


class AuthorizationError(AppError):
    """Raised when the actor's role forbids the requested operation."""
