from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from services.membership_service.service import MembershipService, PaymentConfirmation
from shared.config.database import get_db
from shared.security import PAYMENT_RATE_LIMIT, Principal, get_current_user, limiter

from .gateway import RazorpayGateway, get_payment_gateway
from .schemas import (
    CreateOrderRequest,
    CreateOrderResponse,
    PaymentResponse,
    PaymentWithOwnerResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from .service import PaymentService

router = APIRouter(tags=["Payments"])
public_router = APIRouter()  # For any public endpoints (e.g. health check)


@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "payment", "status": "running"}


@router.get("/", response_model=list[PaymentWithOwnerResponse])
async def list_payments(
    principal: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await PaymentService(db).list_payments(principal)


@router.get("/user/{user_id}", response_model=list[PaymentResponse])
async def list_user_payments(
    user_id: str,
    principal: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await PaymentService(db).list_user_payments(user_id, principal)


@router.post("/create-order", response_model=CreateOrderResponse)
@limiter.limit(PAYMENT_RATE_LIMIT)
async def create_order(
    request: Request,                          # slowapi needs this to check IP/Headers
    payload: CreateOrderRequest,
    principal: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    gateway: RazorpayGateway = Depends(get_payment_gateway),
):
    intent = await PaymentService(db, gateway).create_intent(principal, payload)
    return CreateOrderResponse(id=intent.intent_id, amount=intent.amount, currency=intent.currency)


@router.post("/verify", response_model=VerifyPaymentResponse)
async def verify_payment(
    payload: VerifyPaymentRequest,
    principal: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    gateway: RazorpayGateway = Depends(get_payment_gateway),
):
    confirmation = PaymentConfirmation(
        payment_ref=payload.payment_ref,
        order_ref=payload.order_ref,
        signature=payload.signature,
    )
    payment = await MembershipService(db, gateway).verify_and_apply(
        principal.account_id,
        confirmation,
        plan=payload.membership,
        amount_paid=payload.amount,
    )
    return VerifyPaymentResponse(
        payment_id=payment.id,
        start_date=payment.start_date,
        end_date=payment.end_date,
    )
