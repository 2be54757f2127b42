"""
Custom domain exceptions for consistent error handling.

These exceptions carry an HTTP status code so a web layer can map them
directly to responses.
"""
from fastapi import HTTPException, status


class DomainError(HTTPException):
    """Base class for all domain-specific errors."""
    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST, details: dict | None = None):
        super().__init__(status_code=status_code, detail=message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class NotFoundError(DomainError):
    """Resource not found (404)."""
    def __init__(self, resource_type: str, identifier: str, details: dict | None = None):
        message = f"{resource_type} not found: {identifier}"
        super().__init__(message, status_code=status.HTTP_404_NOT_FOUND, details=details)


class ValidationError(DomainError):
    """Validation error (400). Raised before any write is attempted."""
    def __init__(self, message: str, field: str | None = None, details: dict | None = None):
        self.field = field
        if field:
            message = f"Validation error on {field}: {message}"
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST, details=details)

    @property
    def errors(self) -> list[dict]:
        """Every violated rule as {field, rule, message}."""
        return self.details.get("errors", [])

    @classmethod
    def from_violations(cls, violations: list[dict], resource_type: str | None = None) -> "ValidationError":
        first = violations[0]
        details = {"errors": violations}
        if resource_type:
            details["resource"] = resource_type
        return cls(first["message"], field=first["field"], details=details)


class StoreError(DomainError):
    """Backing store unavailable or rejected the operation (503)."""
    def __init__(self, message: str, operation: str | None = None, details: dict | None = None):
        details = dict(details or {})
        if operation:
            details["operation"] = operation
        super().__init__(message, status_code=status.HTTP_503_SERVICE_UNAVAILABLE, details=details)

    @property
    def operation(self) -> str | None:
        return self.details.get("operation")
