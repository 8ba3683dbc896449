"""
Domain exceptions for the listings platform.

Every failure the access-control core reports is one of these. The HTTP
layer maps ``status_code`` and ``to_dict()`` straight into the response.
"""

from typing import Any


class ListingsException(Exception):
    """
    Base exception for all listings application errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable error code for API responses
        details: Additional error context
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(ListingsException):
    """Raised when input validation fails."""

    status_code = 422

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(ListingsException):
    """Raised when credentials are missing or wrong."""

    status_code = 401

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, "AUTHENTICATION_ERROR")


class AccessDeniedError(ListingsException):
    """
    Common base for authorization denials.

    ``state`` carries the terminal gateway state reached while denying
    (``audited_failure`` once the FAILED record was attempted).
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        resource: str | None = None,
        action: str | None = None,
    ):
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, error_code, details)
        self.state: str | None = None


class UnauthorizedError(AccessDeniedError):
    """Principal is inactive or its role lacks the base capability."""

    status_code = 401

    def __init__(
        self,
        message: str = "Invalid or inactive user",
        resource: str | None = None,
        action: str | None = None,
    ):
        super().__init__(message, "UNAUTHORIZED", resource, action)


class ForbiddenError(AccessDeniedError):
    """Principal is eligible but fails the permission flag or ownership check."""

    status_code = 403

    def __init__(
        self,
        message: str = "Insufficient permissions",
        resource: str | None = None,
        action: str | None = None,
    ):
        super().__init__(message, "FORBIDDEN", resource, action)


class ResourceNotFoundException(ListingsException):
    """Raised when a requested resource is not found."""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class MutationFailedError(ListingsException):
    """Authorized mutation could not be persisted."""

    status_code = 500

    def __init__(self, resource_type: str, action: str, reason: str):
        super().__init__(
            f"Failed to {action} {resource_type}: {reason}",
            "MUTATION_FAILED",
            {"resource_type": resource_type, "action": action, "reason": reason},
        )
        self.state: str | None = None


class ConflictError(MutationFailedError):
    """Resource changed between load and conditional write."""

    status_code = 409

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        expected_version: int,
        action: str = "update",
    ):
        super().__init__(
            resource_type,
            action,
            f"{resource_type} {resource_id} was modified concurrently",
        )
        self.error_code = "CONFLICT"
        self.details.update(
            {"resource_id": resource_id, "expected_version": expected_version}
        )


class PersistenceError(ListingsException):
    """Raised by stores when the backing database rejects an operation."""


class AuditWriteFailure(ListingsException):
    """
    Audit append failed.

    Never propagated to end callers; the recorder logs it and moves on.
    """

    def __init__(self, reason: str):
        super().__init__(f"Failed to write activity record: {reason}", "AUDIT_WRITE_FAILURE")
