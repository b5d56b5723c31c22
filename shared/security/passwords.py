import secrets

from passlib.context import CryptContext

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

TEMPORARY_PASSWORD_BYTES = 12


def hash_password(password: str) -> str:
    return _pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return _pwd_context.verify(plain, hashed)


def generate_temporary_password() -> str:
    """Random one-time credential handed to a newly provisioned member."""
    return secrets.token_urlsafe(TEMPORARY_PASSWORD_BYTES)
