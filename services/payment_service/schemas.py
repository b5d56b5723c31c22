from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import Field

from shared.schemas import CamelModel

MembershipType = Literal["monthly", "quarterly", "yearly"]
PaymentMethod = Literal["card", "upi", "netbanking", "cash"]


class CreateOrderRequest(CamelModel):
    amount: Decimal = Field(gt=0, decimal_places=2)  # major units
    membership: Optional[MembershipType] = None
    payment_method: PaymentMethod = "card"


class CreateOrderResponse(CamelModel):
    id: str
    amount: int  # minor units, as returned by the processor
    currency: str


class VerifyPaymentRequest(CamelModel):
    payment_ref: str = Field(min_length=1, max_length=64)
    order_ref: str = Field(min_length=1, max_length=64)
    signature: str = Field(min_length=1)
    membership: MembershipType
    amount: int = Field(gt=0)  # minor units


class VerifyPaymentResponse(CamelModel):
    success: bool = True
    message: str = "Payment verified and membership updated"
    payment_id: str
    start_date: date
    end_date: date


class PaymentResponse(CamelModel):
    id: str
    user_id: str
    amount: float
    payment_type: str
    payment_method: str
    external_payment_ref: Optional[str] = None
    external_order_ref: Optional[str] = None
    membership: Optional[MembershipType] = None
    status: Literal["pending", "completed", "failed"]
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: datetime


class PaymentOwner(CamelModel):
    id: str
    name: str
    email: str


class PaymentWithOwnerResponse(PaymentResponse):
    user: Optional[PaymentOwner] = None
