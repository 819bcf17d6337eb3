"""Custom exceptions for the AHSAS portal functions.

Every error carries the HTTP status it maps to and a message that is safe to
return to the caller. Store and identity-service details are logged where the
error is raised, never placed in the message unless the caller caused them.
"""

from fastapi import status


class PortalError(Exception):
    """Base class for errors surfaced to callers as ``{"error": message}``."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidInputError(PortalError):
    """Raised when a request body is missing required fields."""

    status_code = status.HTTP_400_BAD_REQUEST


class UnauthenticatedError(PortalError):
    """Raised when the bearer token is absent or does not resolve."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(PortalError):
    """Raised when the caller is not an admin or the setup key is wrong."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(PortalError):
    """Raised when a profile or identity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class LookupFailedError(PortalError):
    """Raised when reading from the store fails."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class CreateFailedError(PortalError):
    """Raised when the identity service rejects a new account."""

    status_code = status.HTTP_400_BAD_REQUEST


class UpdateFailedError(PortalError):
    """Raised when an identity or profile update fails."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
