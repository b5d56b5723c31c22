"""
Member directory: CRUD over member accounts.

Every operation takes the verified requester and enforces its own access
rule, so callers other than the HTTP router get the same guarantees.
"""
import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from services.auth_service.models import Member
from shared.errors import (
    ConcurrencyError,
    ConflictError,
    ForbiddenError,
    MembershipValidationError,
    NotFoundError,
)
from shared.security import (
    Principal,
    ensure_self_or_admin,
    generate_temporary_password,
    hash_password,
)

from .repository import MemberRepository
from .schemas import MemberCreate, MemberUpdate

logger = structlog.get_logger(__name__)

# Field mask for partial updates; anything else in a patch is ignored
UPDATABLE_FIELDS = (
    "name",
    "email",
    "phone",
    "membership_type",
    "start_date",
    "end_date",
    "status",
)


def _require_admin(requester: Principal) -> None:
    if not requester.is_admin:
        raise ForbiddenError("Unauthorized. Admin access required")


class MemberDirectoryService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_members(self, requester: Principal) -> list[Member]:
        _require_admin(requester)
        return await MemberRepository.list_members(self.db)

    async def get_member(self, member_id: str, requester: Principal) -> Member:
        ensure_self_or_admin(requester, member_id)
        member = await MemberRepository.get_member(self.db, member_id)
        if not member:
            raise NotFoundError("Member not found")
        return member

    async def create_member(self, data: MemberCreate, requester: Principal) -> tuple[Member, str]:
        """Returns the stored member and its one-time temporary password."""
        _require_admin(requester)
        if await MemberRepository.email_taken(self.db, data.email):
            raise ConflictError("User already exists")

        temporary_password = generate_temporary_password()
        member = Member(
            name=data.name,
            email=data.email,
            phone=data.phone,
            hashed_password=hash_password(temporary_password),
            must_reset_password=True,
            membership_type=data.membership_type,
            start_date=data.start_date,
            end_date=data.end_date,
            status="active",
        )
        try:
            member = await MemberRepository.create_member(self.db, member)
        except IntegrityError as exc:
            # Lost a race with a concurrent create for the same email
            await self.db.rollback()
            raise ConflictError("User already exists") from exc

        logger.info("member_created", member_id=member.id, created_by=requester.account_id)
        return member, temporary_password

    async def update_member(self, member_id: str, patch: MemberUpdate, requester: Principal) -> Member:
        _require_admin(requester)
        member = await MemberRepository.get_member(self.db, member_id)
        if not member:
            raise NotFoundError("Member not found")

        supplied = patch.model_dump(exclude_unset=True, exclude_none=True)
        changes = {field: supplied[field] for field in UPDATABLE_FIELDS if field in supplied}

        if "email" in changes and await MemberRepository.email_taken(
            self.db, changes["email"], exclude_id=member_id
        ):
            raise ConflictError("User already exists")

        start_date = changes.get("start_date", member.start_date)
        end_date = changes.get("end_date", member.end_date)
        if start_date and end_date and start_date > end_date:
            raise MembershipValidationError("startDate must not be after endDate")

        for field, value in changes.items():
            setattr(member, field, value)

        try:
            await self.db.commit()
        except StaleDataError as exc:
            await self.db.rollback()
            raise ConcurrencyError() from exc
        except IntegrityError as exc:
            await self.db.rollback()
            raise ConflictError("User already exists") from exc

        logger.info(
            "member_updated",
            member_id=member.id,
            fields=sorted(changes),
            updated_by=requester.account_id,
        )
        return member

    async def delete_member(self, member_id: str, requester: Principal) -> None:
        """Payments owned by the member are left in place."""
        _require_admin(requester)
        member = await MemberRepository.get_member(self.db, member_id)
        if not member:
            raise NotFoundError("Member not found")

        try:
            await MemberRepository.delete_member(self.db, member)
        except StaleDataError as exc:
            await self.db.rollback()
            raise ConcurrencyError() from exc

        logger.info("member_deleted", member_id=member_id, deleted_by=requester.account_id)
