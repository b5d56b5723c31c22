from .jwt_handler import create_access_token, verify_access_token
from .dependencies import (
    ROLE_ADMIN,
    ROLE_MEMBER,
    Principal,
    ensure_self_or_admin,
    get_authenticated_user,
    get_current_user,
    require_admin,
)
from .passwords import generate_temporary_password, hash_password, verify_password
from .rate_limiter import limiter, user_id_or_ip, LOGIN_RATE_LIMIT, PAYMENT_RATE_LIMIT

__all__ = [
    "create_access_token",
    "verify_access_token",
    "ROLE_ADMIN",
    "ROLE_MEMBER",
    "Principal",
    "ensure_self_or_admin",
    "get_authenticated_user",
    "get_current_user",
    "require_admin",
    "generate_temporary_password",
    "hash_password",
    "verify_password",
    "limiter",
    "user_id_or_ip",
    "LOGIN_RATE_LIMIT",
    "PAYMENT_RATE_LIMIT",
]
