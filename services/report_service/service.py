from collections.abc import Callable
from datetime import date, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from services.membership_service.lifecycle import EXPIRY_WARNING_DAYS, utc_today
from shared.errors import ForbiddenError
from shared.security import Principal

from .repository import ReportRepository
from .schemas import MemberCounts, SummaryReport


class ReportService:

    def __init__(self, db: AsyncSession, today: Callable[[], date] = utc_today):
        self.db = db
        self.today = today

    async def summary(self, requester: Principal) -> SummaryReport:
        if not requester.is_admin:
            raise ForbiddenError("Unauthorized. Admin access required")

        counts = await ReportRepository.member_counts_by_status(self.db)
        today = self.today()
        # A member is expiring while 0 < days remaining <= warning window
        expiring = await ReportRepository.count_expiring(
            self.db, after=today, until=today + timedelta(days=EXPIRY_WARNING_DAYS)
        )
        payment_count, revenue = await ReportRepository.completed_payment_totals(self.db)

        return SummaryReport(
            members=MemberCounts(
                total=sum(counts.values()),
                active=counts.get("active", 0),
                inactive=counts.get("inactive", 0),
                pending=counts.get("pending", 0),
            ),
            expiring_soon=expiring,
            expiry_warning_days=EXPIRY_WARNING_DAYS,
            completed_payments=payment_count,
            revenue=float(revenue),
        )
