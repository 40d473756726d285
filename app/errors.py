"""
Typed failure outcomes raised by the service and dependency layers.

Nothing below the router layer renders an HTTP response itself: services
raise one of these exceptions and the handlers registered in
``app.main`` translate them into ``{"error": <message>}`` bodies with the
matching status code.
"""
from fastapi import status


class APIError(Exception):
    """Base class for every failure that maps to a client-visible status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationFailed(APIError):
    """Malformed or missing input that schema validation did not catch."""

    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(APIError):
    """Uniqueness or referential conflict (duplicate user, category in use)."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationRequired(APIError):
    """No credential, or a credential not in ``Bearer <token>`` form."""

    status_code = status.HTTP_401_UNAUTHORIZED


class InvalidCredentials(APIError):
    """Login with an unknown email or a wrong password."""

    status_code = status.HTTP_401_UNAUTHORIZED


class InvalidToken(APIError):
    """A bearer token that fails signature, format, or expiry checks."""

    status_code = status.HTTP_403_FORBIDDEN


class OwnershipError(APIError):
    """The caller is authenticated but does not own the target row."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(APIError):
    status_code = status.HTTP_404_NOT_FOUND
