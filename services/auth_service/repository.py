from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Account


class AccountRepository:

    @staticmethod
    async def create(db: AsyncSession, account: Account) -> Account:
        db.add(account)
        await db.commit()
        await db.refresh(account)
        return account

    @staticmethod
    async def get_by_id(db: AsyncSession, account_id: str) -> Optional[Account]:
        result = await db.execute(select(Account).where(Account.id == account_id))
        return result.scalars().first()

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> Optional[Account]:
        result = await db.execute(select(Account).where(Account.email == email))
        return result.scalars().first()

    @staticmethod
    async def save(db: AsyncSession, account: Account) -> Account:
        db.add(account)
        await db.commit()
        return account
