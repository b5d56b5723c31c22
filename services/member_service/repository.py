from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from services.auth_service.models import Account, Member


class MemberRepository:

    @staticmethod
    async def list_members(db: AsyncSession) -> list[Member]:
        result = await db.execute(select(Member).order_by(Member.created_at, Member.name))
        return list(result.scalars().all())

    @staticmethod
    async def get_member(db: AsyncSession, member_id: str) -> Optional[Member]:
        result = await db.execute(select(Member).where(Member.id == member_id))
        return result.scalars().first()

    @staticmethod
    async def email_taken(db: AsyncSession, email: str, exclude_id: str | None = None) -> bool:
        # Email is unique across every account, admins included
        stmt = select(Account.id).where(Account.email == email)
        if exclude_id is not None:
            stmt = stmt.where(Account.id != exclude_id)
        result = await db.execute(stmt)
        return result.first() is not None

    @staticmethod
    async def create_member(db: AsyncSession, member: Member) -> Member:
        db.add(member)
        await db.commit()
        await db.refresh(member)
        return member

    @staticmethod
    async def delete_member(db: AsyncSession, member: Member) -> None:
        await db.delete(member)
        await db.commit()
