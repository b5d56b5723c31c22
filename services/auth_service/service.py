"""
Login, profile and credential management for every account type.
"""
import os

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from shared.errors import AuthenticationError, ForbiddenError, NotFoundError
from shared.security import (
    Principal,
    create_access_token,
    hash_password,
    verify_password,
)

from .models import Account, Admin
from .repository import AccountRepository
from .schemas import ChangePasswordRequest, LoginRequest, TokenResponse

logger = structlog.get_logger(__name__)

BOOTSTRAP_ADMIN_EMAIL = os.getenv("BOOTSTRAP_ADMIN_EMAIL")
BOOTSTRAP_ADMIN_PASSWORD = os.getenv("BOOTSTRAP_ADMIN_PASSWORD")
BOOTSTRAP_ADMIN_NAME = os.getenv("BOOTSTRAP_ADMIN_NAME", "Gym Owner")


class AuthService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def login(self, data: LoginRequest) -> TokenResponse:
        account = await AccountRepository.get_by_email(self.db, data.email)
        if not account or not verify_password(data.password, account.hashed_password):
            logger.info("login_failed", email=data.email)
            raise AuthenticationError("Incorrect email or password")
        if account.status == "inactive":
            raise ForbiddenError("Account is disabled")

        token = create_access_token(
            account.id, account.role, password_reset=account.must_reset_password
        )
        logger.info("login_succeeded", account_id=account.id, role=account.role)
        return TokenResponse(
            access_token=token,
            must_reset_password=account.must_reset_password,
        )

    async def get_account(self, principal: Principal) -> Account:
        account = await AccountRepository.get_by_id(self.db, principal.account_id)
        if not account:
            raise NotFoundError("Account not found")
        return account

    async def change_password(self, principal: Principal, data: ChangePasswordRequest) -> None:
        account = await self.get_account(principal)
        if not verify_password(data.current_password, account.hashed_password):
            raise AuthenticationError("Current password is incorrect")

        account.hashed_password = hash_password(data.new_password)
        account.must_reset_password = False
        await AccountRepository.save(self.db, account)
        logger.info("password_changed", account_id=account.id)

    async def ensure_bootstrap_admin(self) -> Account | None:
        """Provision the first admin from the environment if it does not exist yet."""
        if not BOOTSTRAP_ADMIN_EMAIL or not BOOTSTRAP_ADMIN_PASSWORD:
            return None

        existing = await AccountRepository.get_by_email(self.db, BOOTSTRAP_ADMIN_EMAIL)
        if existing:
            return existing

        admin = Admin(
            name=BOOTSTRAP_ADMIN_NAME,
            email=BOOTSTRAP_ADMIN_EMAIL,
            hashed_password=hash_password(BOOTSTRAP_ADMIN_PASSWORD),
            must_reset_password=True,
            status="active",
        )
        admin = await AccountRepository.create(self.db, admin)
        logger.warning("bootstrap_admin_created", account_id=admin.id, email=admin.email)
        return admin
