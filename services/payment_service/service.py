import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from shared.errors import ForbiddenError
from shared.security import Principal, ensure_self_or_admin

from .gateway import PaymentIntent, RazorpayGateway, from_minor_units
from .models import STATUS_PENDING, Payment
from .repository import PaymentRepository
from .schemas import CreateOrderRequest, PaymentOwner, PaymentWithOwnerResponse

logger = structlog.get_logger(__name__)


class PaymentService:

    def __init__(self, db: AsyncSession, gateway: RazorpayGateway | None = None):
        self.db = db
        self.gateway = gateway

    async def create_intent(self, requester: Principal, data: CreateOrderRequest) -> PaymentIntent:
        """Open an order with the processor and record it as a pending payment."""
        intent = await self.gateway.create_intent(data.amount)

        payment = Payment(
            user_id=requester.account_id,
            amount=from_minor_units(intent.amount),
            payment_type="membership" if data.membership else "other",
            payment_method=data.payment_method,
            external_order_ref=intent.intent_id,
            membership=data.membership,
            status=STATUS_PENDING,
        )
        await PaymentRepository.create_payment(self.db, payment)
        logger.info(
            "payment_intent_created",
            payment_id=payment.id,
            order_ref=intent.intent_id,
            user_id=requester.account_id,
            amount=intent.amount,
            currency=intent.currency,
        )
        return intent

    async def list_payments(self, requester: Principal) -> list[PaymentWithOwnerResponse]:
        if not requester.is_admin:
            raise ForbiddenError("Unauthorized. Admin access required")

        rows = await PaymentRepository.list_with_owner(self.db)
        payments = []
        for payment, owner_name, owner_email in rows:
            owner = None
            if owner_name is not None:
                owner = PaymentOwner(id=payment.user_id, name=owner_name, email=owner_email)
            item = PaymentWithOwnerResponse.model_validate(payment)
            item.user = owner
            payments.append(item)
        return payments

    async def list_user_payments(self, user_id: str, requester: Principal) -> list[Payment]:
        ensure_self_or_admin(requester, user_id)
        return await PaymentRepository.list_for_user(self.db, user_id)
