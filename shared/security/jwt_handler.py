"""
Bearer tokens for gym accounts.

A token is an HS256 JWT with the account id in ``sub``, the account role and
an ``exp`` in UTC. Accounts still holding a temporary credential also get
``pwd_reset``, which keeps them out of everything but the auth routes.
"""
import os
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from shared.errors import InvalidTokenError

SECRET_KEY = os.getenv("JWT_SECRET_KEY")
if not SECRET_KEY:
    raise ValueError("FATAL ERROR: JWT_SECRET_KEY is not set in the environment!")

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

PASSWORD_RESET_CLAIM = "pwd_reset"


def create_access_token(
    account_id: str,
    role: str,
    password_reset: bool = False,
    expires_delta: timedelta | None = None,
) -> str:
    """Issue a token for ``account_id`` acting as ``role``."""
    if expires_delta is None:
        expires_delta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {
        "sub": account_id,
        "role": role,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    if password_reset:
        claims[PASSWORD_RESET_CLAIM] = True
    return jwt.encode(claims, SECRET_KEY, algorithm=ALGORITHM)


def verify_access_token(token: str) -> dict:
    """Decode ``token`` or raise ``InvalidTokenError`` saying whether it expired or is bad."""
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError as exc:
        raise InvalidTokenError("Token has expired") from exc
    except JWTError as exc:
        raise InvalidTokenError() from exc
