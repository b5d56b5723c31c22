from datetime import date
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from services.auth_service.models import Member
from services.payment_service.models import STATUS_COMPLETED, Payment


class ReportRepository:

    @staticmethod
    async def member_counts_by_status(db: AsyncSession) -> dict[str, int]:
        result = await db.execute(
            select(Member.status, func.count(Member.id)).group_by(Member.status)
        )
        return {status: count for status, count in result.all()}

    @staticmethod
    async def count_expiring(db: AsyncSession, after: date, until: date) -> int:
        result = await db.execute(
            select(func.count(Member.id))
            .where(Member.status == "active")
            .where(Member.end_date > after)
            .where(Member.end_date <= until)
        )
        return result.scalar_one()

    @staticmethod
    async def completed_payment_totals(db: AsyncSession) -> tuple[int, Decimal]:
        result = await db.execute(
            select(func.count(Payment.id), func.coalesce(func.sum(Payment.amount), 0))
            .where(Payment.status == STATUS_COMPLETED)
        )
        count, total = result.one()
        return count, Decimal(str(total))
