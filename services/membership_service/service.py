"""
Membership lifecycle: applying verified payments to members and reporting
where a member stands.

``verify_and_apply`` writes the payment and the member in one transaction.
The member row is versioned, so when two renewals for the same member race,
the loser's commit fails instead of overwriting; it is rolled back, reloaded
and applied again on top of the winner.
"""
import os
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timezone

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from services.auth_service.models import Member
from services.member_service.repository import MemberRepository
from services.payment_service.gateway import RazorpayGateway, from_minor_units, recorded_method
from services.payment_service.models import Payment
from services.payment_service.repository import PaymentRepository
from shared.errors import (
    ConcurrencyError,
    GatewayVerificationError,
    InvalidTransitionError,
    MembershipValidationError,
    NotFoundError,
)
from shared.observability import (
    gym_membership_renewals_total,
    gym_optimistic_retry_total,
    gym_payments_total,
)
from shared.security import Principal, ensure_self_or_admin

from .lifecycle import (
    EXPIRY_WARNING_DAYS,
    PLAN_DURATIONS,
    compute_window,
    days_remaining,
    is_expiring_soon,
    utc_today,
)

logger = structlog.get_logger(__name__)

MEMBERSHIP_APPLY_MAX_ATTEMPTS = int(os.getenv("MEMBERSHIP_APPLY_MAX_ATTEMPTS", "3"))


@dataclass(frozen=True)
class PaymentConfirmation:
    """Identifiers the processor hands back to the client after checkout."""

    payment_ref: str
    order_ref: str
    signature: str


@dataclass(frozen=True)
class MembershipStatus:
    member_id: str
    membership_type: str | None
    start_date: date | None
    end_date: date | None
    status: str
    days_remaining: int
    expiring_soon: bool
    expired: bool


class MembershipService:

    def __init__(
        self,
        db: AsyncSession,
        gateway: RazorpayGateway | None = None,
        today: Callable[[], date] = utc_today,
        max_attempts: int = MEMBERSHIP_APPLY_MAX_ATTEMPTS,
    ):
        self.db = db
        self.gateway = gateway
        self.today = today
        self.max_attempts = max(1, max_attempts)

    async def verify_and_apply(
        self,
        member_id: str,
        confirmation: PaymentConfirmation,
        plan: str,
        amount_paid: int,
    ) -> Payment:
        """
        Confirm a checkout with the processor, then record the payment as
        completed and activate the member for the purchased window.

        ``amount_paid`` is in minor units. Nothing is written when the member
        does not exist; a pending payment for the order is marked failed when
        the processor does not confirm it.
        """
        if plan not in PLAN_DURATIONS:
            raise MembershipValidationError(f"Unknown membership plan: {plan}")

        member = await MemberRepository.get_member(self.db, member_id)
        if not member:
            raise NotFoundError("Member not found")

        pending = await self._load_pending(member_id, confirmation, plan)

        try:
            processor_payment = await self.gateway.confirm_payment(
                order_id=confirmation.order_ref,
                payment_id=confirmation.payment_ref,
                signature=confirmation.signature,
                expected_amount=amount_paid,
            )
        except GatewayVerificationError as exc:
            await self._mark_failed(pending, reason=exc.message)
            raise

        for attempt in range(1, self.max_attempts + 1):
            payment = pending or Payment(
                user_id=member_id,
                amount=from_minor_units(processor_payment.amount),
                payment_type="membership",
                payment_method=recorded_method(processor_payment.method),
                external_order_ref=confirmation.order_ref,
            )
            if pending is None:
                self.db.add(payment)

            window = compute_window(plan, self.today())
            payment.amount = from_minor_units(processor_payment.amount)
            payment.payment_type = "membership"
            payment.membership = plan
            payment.mark_completed(
                window,
                payment_ref=confirmation.payment_ref,
                payment_method=recorded_method(processor_payment.method),
            )

            member.membership_type = plan
            member.start_date = window.start_date
            member.end_date = window.end_date
            member.status = "active"

            try:
                await self.db.commit()
            except StaleDataError:
                await self.db.rollback()
                gym_optimistic_retry_total.labels(operation="verify_and_apply").inc()
                logger.warning("membership_apply_conflict", member_id=member_id, attempt=attempt)
                member, pending = await self._reload(member_id, confirmation, plan)
                continue

            await self.db.refresh(payment)
            gym_payments_total.labels(status="completed").inc()
            gym_membership_renewals_total.labels(plan=plan).inc()
            logger.info(
                "membership_applied",
                member_id=member_id,
                payment_id=payment.id,
                plan=plan,
                start_date=window.start_date.isoformat(),
                end_date=window.end_date.isoformat(),
            )
            return payment

        raise ConcurrencyError()

    async def get_status(
        self, member_id: str, requester: Principal, now: datetime | None = None
    ) -> MembershipStatus:
        ensure_self_or_admin(requester, member_id)
        member = await MemberRepository.get_member(self.db, member_id)
        if not member:
            raise NotFoundError("Member not found")
        return self.describe(member, now or datetime.now(timezone.utc))

    @staticmethod
    def describe(member: Member, now: datetime) -> MembershipStatus:
        remaining = days_remaining(member.end_date, now)
        return MembershipStatus(
            member_id=member.id,
            membership_type=member.membership_type,
            start_date=member.start_date,
            end_date=member.end_date,
            status=member.status,
            days_remaining=remaining,
            expiring_soon=is_expiring_soon(remaining, EXPIRY_WARNING_DAYS),
            expired=remaining == 0,
        )

    async def _load_pending(
        self, member_id: str, confirmation: PaymentConfirmation, plan: str
    ) -> Payment | None:
        """Find the pending payment for this order and check it can be applied as ``plan``."""
        if await PaymentRepository.get_by_payment_ref(self.db, confirmation.payment_ref):
            raise InvalidTransitionError("Payment has already been applied")

        pending = await PaymentRepository.get_by_order_ref(self.db, confirmation.order_ref)
        if pending is None:
            return None
        if pending.user_id != member_id:
            raise GatewayVerificationError("Order does not belong to this member")
        if pending.is_settled:
            raise InvalidTransitionError(f"Payment is already {pending.status}")
        if pending.membership and pending.membership != plan:
            raise GatewayVerificationError("Membership plan does not match the order")
        return pending

    async def _reload(self, member_id: str, confirmation: PaymentConfirmation, plan: str):
        member = await MemberRepository.get_member(self.db, member_id)
        if not member:
            raise NotFoundError("Member not found")
        pending = await self._load_pending(member_id, confirmation, plan)
        return member, pending

    async def _mark_failed(self, pending: Payment | None, reason: str) -> None:
        if pending is None:
            return
        pending.mark_failed()
        await self.db.commit()
        gym_payments_total.labels(status="failed").inc()
        logger.warning("payment_verification_failed", payment_id=pending.id, reason=reason)
