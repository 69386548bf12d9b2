"""Custom exception classes for the Employee Document Portal.

Every failure a caller can observe is a ``PortalError`` subclass carrying a
stable ``kind`` and the HTTP status it maps to. Messages are safe to show to
untrusted callers; internal details are logged server side only.
"""

from fastapi import status


class PortalError(Exception):
    """Base exception for all Employee Document Portal errors."""

    kind = "PortalError"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        """Initialize the exception.

        Args:
            message: Human-readable message. Falls back to the class default.
        """
        self.message = message or self.default_message
        super().__init__(self.message)


# --- Access Guard ---


class TokenMissingError(PortalError):
    """Raised when a protected operation is invoked without a bearer token."""

    kind = "TokenMissing"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Access token missing"


class TokenInvalidError(PortalError):
    """Raised when a token fails signature, claim or expiry verification."""

    kind = "TokenInvalid"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid or expired token"


class InsufficientPermissionError(PortalError):
    """Raised when a valid identity lacks the role a call site requires."""

    kind = "InsufficientPermission"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Insufficient permissions"


class UnauthenticatedError(PortalError):
    """Raised when an owner id does not resolve to a registered user."""

    kind = "Unauthenticated"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unknown user"


# --- Accounts ---


class InvalidCredentialsError(PortalError):
    kind = "InvalidCredentials"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid email or password"


class AccountInactiveError(PortalError):
    kind = "AccountInactive"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Account is inactive"


class EmailAlreadyRegisteredError(PortalError):
    kind = "EmailAlreadyRegistered"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Email already in use"


class ValidationFailedError(PortalError):
    """Raised when request data is well-formed but violates a business rule."""

    kind = "ValidationFailed"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


# --- Files ---


class NotFoundError(PortalError):
    """Raised when a resource does not exist or is not visible to the caller.

    Callers cannot tell "missing" from "not yours" apart.
    """

    kind = "NotFound"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "File not found"


class ForbiddenError(PortalError):
    """Raised when the resource exists but the caller may not access it."""

    kind = "Forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class NoFilesProvidedError(PortalError):
    kind = "NoFilesProvided"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "No files provided"


class MissingCategoryError(PortalError):
    kind = "MissingCategory"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Category is required"


class InvalidCategoryError(PortalError):
    kind = "InvalidCategory"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Unknown file category"


class BackingBytesMissingError(PortalError):
    """Raised when a file record exists but its stored bytes do not.

    The message is deliberately generic; the storage reference is logged.
    """

    kind = "BackingBytesMissing"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "File download failed"


class StoreUnavailableError(PortalError):
    """Raised for any underlying persistence failure."""

    kind = "StoreUnavailable"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Storage is temporarily unavailable"


# --- Reports ---


class InvalidReportWindowError(PortalError):
    kind = "InvalidReportWindow"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "month must be formatted as YYYY-MM"
