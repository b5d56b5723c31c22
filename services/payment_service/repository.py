from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from services.auth_service.models import Account

from .models import Payment


class PaymentRepository:
    @staticmethod
    async def create_payment(db: AsyncSession, payment: Payment):
        db.add(payment)
        await db.commit()
        await db.refresh(payment)
        return payment

    @staticmethod
    async def get_by_order_ref(db: AsyncSession, order_ref: str) -> Optional[Payment]:
        result = await db.execute(
            select(Payment)
            .where(Payment.external_order_ref == order_ref)
            .order_by(Payment.created_at.desc())
        )
        return result.scalars().first()

    @staticmethod
    async def get_by_payment_ref(db: AsyncSession, payment_ref: str) -> Optional[Payment]:
        result = await db.execute(select(Payment).where(Payment.external_payment_ref == payment_ref))
        return result.scalars().first()

    @staticmethod
    async def list_with_owner(db: AsyncSession):
        """All payments with the owner's name and email; orphans get ``None``."""
        result = await db.execute(
            select(Payment, Account.name, Account.email)
            .outerjoin(Account, Account.id == Payment.user_id)
            .order_by(Payment.created_at.desc())
        )
        return result.all()

    @staticmethod
    async def list_for_user(db: AsyncSession, user_id: str) -> list[Payment]:
        result = await db.execute(
            select(Payment)
            .where(Payment.user_id == user_id)
            .order_by(Payment.created_at.desc())
        )
        return list(result.scalars().all())
