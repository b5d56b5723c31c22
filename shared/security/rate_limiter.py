import os

from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request

from shared.errors import InvalidTokenError

from .jwt_handler import verify_access_token

RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
LOGIN_RATE_LIMIT = os.getenv("LOGIN_RATE_LIMIT", "10/minute")
PAYMENT_RATE_LIMIT = os.getenv("PAYMENT_RATE_LIMIT", "20/minute")


def user_id_or_ip(request: Request) -> str:
    """
    Key function for SlowAPI.
    Extracts the account ID directly from the Authorization header if available.
    Falls back to the client's IP address if unauthenticated.
    """
    auth_header = request.headers.get("Authorization")

    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header.split(" ")[1]
        try:
            payload = verify_access_token(token)
        except InvalidTokenError:
            payload = {}
        if "sub" in payload:
            return f"user:{payload['sub']}"

    return f"ip:{get_remote_address(request)}"


limiter = Limiter(key_func=user_id_or_ip, enabled=RATE_LIMIT_ENABLED)
