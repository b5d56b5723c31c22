from dataclasses import dataclass

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from shared.errors import AuthenticationError, ForbiddenError, InvalidTokenError

from .jwt_handler import PASSWORD_RESET_CLAIM, verify_access_token

ROLE_ADMIN = "admin"
ROLE_MEMBER = "member"

# Defines the expected header format (Bearer <token>)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)


@dataclass(frozen=True)
class Principal:
    """Verified identity carried by a bearer token."""

    account_id: str
    role: str
    password_reset: bool = False

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


async def get_authenticated_user(request: Request, token: str = Depends(oauth2_scheme)) -> Principal:
    """
    Validate the JWT and return the caller's identity and role.

    Accounts that still have to replace a temporary password pass here; only
    the auth routes should depend on this directly.
    """
    if not token:
        raise AuthenticationError()

    payload = verify_access_token(token)
    account_id = payload.get("sub")
    role = payload.get("role")
    if account_id is None or role not in (ROLE_ADMIN, ROLE_MEMBER):
        raise InvalidTokenError()

    # Store in request state for downstream use (like rate limiting)
    request.state.user_id = account_id
    return Principal(
        account_id=str(account_id),
        role=role,
        password_reset=bool(payload.get(PASSWORD_RESET_CLAIM, False)),
    )


async def get_current_user(principal: Principal = Depends(get_authenticated_user)) -> Principal:
    """Dependency for every route outside /auth: the temporary password must be gone."""
    if principal.password_reset:
        raise ForbiddenError("Password change required")
    return principal


async def require_admin(principal: Principal = Depends(get_current_user)) -> Principal:
    """Dependency for admin-gated operations."""
    if not principal.is_admin:
        raise ForbiddenError("Unauthorized. Admin access required")
    return principal


def ensure_self_or_admin(principal: Principal, account_id: str) -> None:
    """Cross-account reads are allowed for admins only."""
    if not principal.is_admin and principal.account_id != account_id:
        raise ForbiddenError()
