"""Typed errors raised by the service layer.

Every class carries a ``code`` class attribute so the HTTP layer can map
errors by type instead of parsing messages. Single-entity lookups in the
services return ``None`` for absence; ``NotFound`` is raised by routers only.
"""


class WMSError(Exception):
    """Base class for warehouse-management errors."""

    code: str = "WMS_ERROR"
    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFound(WMSError):
    code: str = "NOT_FOUND"
    status_code: int = 404

    def __init__(self, entity: str, key):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class ConstraintViolation(WMSError):
    """A unique key or foreign key rejected the write."""

    code: str = "CONSTRAINT_VIOLATION"
    status_code: int = 409


class ValidationFailure(WMSError):
    """Input was rejected before anything was written."""

    code: str = "VALIDATION_FAILURE"
    status_code: int = 422


class StorageFailure(WMSError):
    """The store was unreachable or rejected the write for another reason."""

    code: str = "STORAGE_FAILURE"
    status_code: int = 503


class AuthenticationFailure(WMSError):
    code: str = "AUTHENTICATION_FAILURE"
    status_code: int = 401


__all__ = [
    "AuthenticationFailure",
    "ConstraintViolation",
    "NotFound",
    "StorageFailure",
    "ValidationFailure",
    "WMSError",
]
