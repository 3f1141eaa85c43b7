"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHENTICATED = "UNAUTHENTICATED"
    INVALID_TOKEN = "INVALID_TOKEN"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"

    # Not found errors (404)
    NOT_FOUND = "NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Invitation errors (400)
    INVITATION_NOT_FOUND = "INVITATION_NOT_FOUND"
    INVITATION_EXPIRED = "INVITATION_EXPIRED"
    INVITATION_ALREADY_USED = "INVITATION_ALREADY_USED"

    # Conflict errors (409)
    CONFLICT = "CONFLICT"
    DUPLICATE_INVITATION = "DUPLICATE_INVITATION"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHENTICATED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class AuthorizationError(AppException):
    """Authenticated, but not allowed.

    Also raised when a protected trip does not exist, so callers cannot
    tell the two cases apart.
    """

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(
            error_code=ErrorCode.FORBIDDEN,
            message=message,
            status_code=403,
        )


class ValidationError(AppException):
    """Malformed identifier or payload."""

    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details=details,
        )


class NotFoundError(AppException):
    """Administrative lookup miss (never used for trip access checks)."""

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.NOT_FOUND,
            message=f"{entity} not found: {entity_id}",
            status_code=404,
            details={"id": entity_id},
        )


class AccessGrantExistsError(AppException):
    """A grant for this user and trip already exists."""

    def __init__(self, user_id: str, resource_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.CONFLICT,
            message="User already has access to this trip. Update their role instead.",
            status_code=409,
            details={"user_id": user_id, "resource_id": resource_id},
        )


class DuplicateInvitationError(AppException):
    """A pending invitation already exists for this email."""

    def __init__(self, email: str) -> None:
        super().__init__(
            error_code=ErrorCode.DUPLICATE_INVITATION,
            message="An active invitation already exists for this email",
            status_code=409,
            details={"email": email},
        )


class InvitationNotFoundError(AppException):
    """No invitation matches the presented code."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.INVITATION_NOT_FOUND,
            message="Invitation not found",
            status_code=400,
        )


class InvitationExpiredError(AppException):
    """Invitation has expired."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.INVITATION_EXPIRED,
            message="This invitation has expired",
            status_code=400,
        )


class InvitationAlreadyUsedError(AppException):
    """Invitation was already redeemed or revoked."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.INVITATION_ALREADY_USED,
            message="This invitation has already been used",
            status_code=400,
        )
