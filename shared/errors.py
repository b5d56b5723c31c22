"""
Domain exceptions shared by every service.

Services raise these instead of HTTPException so the same rules hold whether
an operation is driven by a router or called directly. The status code lives
on the class; ``shared.error_handlers`` turns them into JSON responses.
"""
from fastapi import status


class GymError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"
    headers: dict | None = None

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationError(GymError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Access denied. No token provided"
    headers = {"WWW-Authenticate": "Bearer"}


class InvalidTokenError(AuthenticationError):
    default_message = "Invalid token"


class ForbiddenError(GymError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Unauthorized"


class NotFoundError(GymError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(GymError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Already exists"


class MembershipValidationError(GymError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Invalid membership fields"


class InvalidTransitionError(GymError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Payment is already settled"


class ConcurrencyError(GymError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Record was modified concurrently, retry the request"


class GatewayError(GymError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Payment gateway unavailable"


class GatewayVerificationError(GymError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Payment could not be verified"


__all__ = [
    "GymError",
    "AuthenticationError",
    "InvalidTokenError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "MembershipValidationError",
    "InvalidTransitionError",
    "ConcurrencyError",
    "GatewayError",
    "GatewayVerificationError",
]
