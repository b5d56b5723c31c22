"""
Razorpay adapter.

Orders are created with a single POST (the processor has no idempotency key
for orders, so it is never retried). Payment lookups are plain GETs and are
retried on transport errors and 5xx responses. Every call is bounded by the
client timeout.
"""
import asyncio
import hashlib
import hmac
import os
import secrets
import time
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import AsyncIterator

import httpx
import structlog

from shared.errors import GatewayError, GatewayVerificationError
from shared.observability import gym_gateway_duration_seconds, gym_gateway_requests_total

logger = structlog.get_logger(__name__)

RAZORPAY_BASE_URL = os.getenv("RAZORPAY_BASE_URL", "https://api.razorpay.com/v1")
RAZORPAY_KEY_ID = os.getenv("RAZORPAY_KEY_ID", "")
RAZORPAY_KEY_SECRET = os.getenv("RAZORPAY_KEY_SECRET", "")
PAYMENT_CURRENCY = os.getenv("PAYMENT_CURRENCY", "INR")
GATEWAY_TIMEOUT_SECONDS = float(os.getenv("GATEWAY_TIMEOUT_SECONDS", "10"))
GATEWAY_MAX_ATTEMPTS = int(os.getenv("GATEWAY_MAX_ATTEMPTS", "3"))
GATEWAY_RETRY_BACKOFF_SECONDS = float(os.getenv("GATEWAY_RETRY_BACKOFF_SECONDS", "0.5"))

SETTLED_PAYMENT_STATUSES = ("captured", "authorized")
# Processor methods we record as-is; anything else is booked as card
KNOWN_METHODS = ("card", "upi", "netbanking")


@dataclass(frozen=True)
class PaymentIntent:
    intent_id: str
    amount: int  # minor units
    currency: str


@dataclass(frozen=True)
class GatewayPayment:
    payment_id: str
    order_id: str
    amount: int  # minor units
    currency: str
    status: str
    method: str


def to_minor_units(amount: Decimal) -> int:
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(amount: int) -> Decimal:
    return (Decimal(amount) / 100).quantize(Decimal("0.01"))


def compute_signature(order_id: str, payment_id: str, key_secret: str) -> str:
    """Checkout signature: HMAC-SHA256 of ``order_id|payment_id`` keyed with the API secret."""
    message = f"{order_id}|{payment_id}".encode()
    return hmac.new(key_secret.encode(), message, hashlib.sha256).hexdigest()


class RazorpayGateway:

    def __init__(
        self,
        client: httpx.AsyncClient,
        key_secret: str,
        currency: str = PAYMENT_CURRENCY,
        max_attempts: int = GATEWAY_MAX_ATTEMPTS,
        backoff_seconds: float = GATEWAY_RETRY_BACKOFF_SECONDS,
    ):
        self.client = client
        self.key_secret = key_secret
        self.currency = currency
        self.max_attempts = max(1, max_attempts)
        self.backoff_seconds = backoff_seconds

    async def create_intent(self, amount: Decimal, currency: str | None = None) -> PaymentIntent:
        currency = currency or self.currency
        payload = {
            "amount": to_minor_units(amount),
            "currency": currency,
            "receipt": f"receipt_{int(time.time() * 1000)}",
        }
        response = await self._send("create_order", "POST", "/orders", json=payload)
        if response.status_code >= 400:
            gym_gateway_requests_total.labels(operation="create_order", outcome="error").inc()
            logger.error("gateway_order_rejected", status_code=response.status_code)
            raise GatewayError("Error creating order")

        order = response.json()
        gym_gateway_requests_total.labels(operation="create_order", outcome="ok").inc()
        return PaymentIntent(
            intent_id=order["id"],
            amount=int(order["amount"]),
            currency=order.get("currency", currency),
        )

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> None:
        expected = compute_signature(order_id, payment_id, self.key_secret)
        if not signature or not secrets.compare_digest(expected, str(signature)):
            gym_gateway_requests_total.labels(operation="verify_signature", outcome="rejected").inc()
            raise GatewayVerificationError("Payment signature mismatch")

    async def fetch_payment(self, payment_id: str) -> GatewayPayment:
        response = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                response = await self._send("fetch_payment", "GET", f"/payments/{payment_id}")
            except GatewayError:
                if attempt == self.max_attempts:
                    raise
            else:
                if response.status_code < 500:
                    break
                logger.warning(
                    "gateway_server_error",
                    status_code=response.status_code,
                    attempt=attempt,
                )
            if attempt < self.max_attempts:
                await asyncio.sleep(self.backoff_seconds * attempt)

        if response.status_code >= 500:
            gym_gateway_requests_total.labels(operation="fetch_payment", outcome="error").inc()
            raise GatewayError()
        if response.status_code >= 400:
            gym_gateway_requests_total.labels(operation="fetch_payment", outcome="rejected").inc()
            raise GatewayVerificationError("Payment is unknown to the processor")

        body = response.json()
        gym_gateway_requests_total.labels(operation="fetch_payment", outcome="ok").inc()
        return GatewayPayment(
            payment_id=body["id"],
            order_id=body.get("order_id") or "",
            amount=int(body.get("amount", 0)),
            currency=body.get("currency", self.currency),
            status=body.get("status", ""),
            method=body.get("method", ""),
        )

    async def confirm_payment(
        self,
        order_id: str,
        payment_id: str,
        signature: str,
        expected_amount: int | None = None,
    ) -> GatewayPayment:
        """
        Check that ``payment_id`` really settled ``order_id``.

        The signature proves the pair came from the processor's checkout; the
        lookup proves the payment went through for the amount being claimed.
        """
        self.verify_signature(order_id, payment_id, signature)
        payment = await self.fetch_payment(payment_id)

        if payment.order_id != order_id:
            raise GatewayVerificationError("Payment does not belong to this order")
        if payment.status not in SETTLED_PAYMENT_STATUSES:
            raise GatewayVerificationError(f"Payment is {payment.status or 'not settled'}")
        if expected_amount is not None and payment.amount != expected_amount:
            raise GatewayVerificationError("Paid amount does not match the order")
        return payment

    async def _send(self, operation: str, method: str, url: str, **kwargs) -> httpx.Response:
        started = time.perf_counter()
        try:
            return await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            gym_gateway_requests_total.labels(operation=operation, outcome="error").inc()
            logger.error("gateway_transport_error", operation=operation, error=str(exc))
            raise GatewayError() from exc
        finally:
            gym_gateway_duration_seconds.labels(operation=operation).observe(
                time.perf_counter() - started
            )


def recorded_method(processor_method: str) -> str:
    return processor_method if processor_method in KNOWN_METHODS else "card"


async def get_payment_gateway() -> AsyncIterator[RazorpayGateway]:
    """Dependency: a gateway with its own HTTP client, closed after the request."""
    if not RAZORPAY_KEY_ID or not RAZORPAY_KEY_SECRET:
        raise GatewayError("Payment gateway is not configured")

    async with httpx.AsyncClient(
        base_url=RAZORPAY_BASE_URL,
        auth=(RAZORPAY_KEY_ID, RAZORPAY_KEY_SECRET),
        timeout=httpx.Timeout(GATEWAY_TIMEOUT_SECONDS),
    ) as client:
        yield RazorpayGateway(client, key_secret=RAZORPAY_KEY_SECRET)
