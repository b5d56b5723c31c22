from __future__ import annotations

from decimal import Decimal

import httpx
import pytest

from services.payment_service.gateway import (
    RazorpayGateway,
    compute_signature,
    from_minor_units,
    recorded_method,
    to_minor_units,
)
from shared.errors import GatewayError, GatewayVerificationError


def test_minor_unit_conversion():
    assert to_minor_units(Decimal("499")) == 49900
    assert to_minor_units(Decimal("0.105")) == 11
    assert from_minor_units(149900) == Decimal("1499.00")


def test_unknown_processor_methods_are_booked_as_card():
    assert recorded_method("upi") == "upi"
    assert recorded_method("netbanking") == "netbanking"
    assert recorded_method("wallet") == "card"


async def test_create_intent_sends_amount_in_minor_units(gateway, processor):
    intent = await gateway.create_intent(Decimal("499.00"))

    assert intent.amount == 49900
    assert intent.currency == "INR"
    assert intent.intent_id in processor.orders
    assert processor.requests[0].url.path == "/v1/orders"


async def test_create_intent_is_not_retried(gateway, processor):
    processor.fail_next = [503]
    with pytest.raises(GatewayError):
        await gateway.create_intent(Decimal("499.00"))
    assert len(processor.requests) == 1


async def test_confirm_payment_accepts_settled_signed_payment(gateway, processor):
    payment_id, signature = processor.settle("order_x", 49900)
    payment = await gateway.confirm_payment("order_x", payment_id, signature, expected_amount=49900)
    assert payment.payment_id == payment_id
    assert payment.status == "captured"


async def test_forged_signature_is_rejected_before_any_lookup(gateway, processor):
    payment_id, _ = processor.settle("order_x", 49900)
    forged = compute_signature("order_x", payment_id, "some-other-secret")

    with pytest.raises(GatewayVerificationError):
        await gateway.confirm_payment("order_x", payment_id, forged)
    assert processor.requests == []


async def test_signature_for_other_order_is_rejected(gateway, processor):
    payment_id, _ = processor.settle("order_x", 49900)
    signature = compute_signature("order_y", payment_id, "rzp_test_secret")

    with pytest.raises(GatewayVerificationError):
        await gateway.confirm_payment("order_x", payment_id, signature)


async def test_unsettled_payment_is_rejected(gateway, processor):
    payment_id, signature = processor.settle("order_x", 49900, status="failed")
    with pytest.raises(GatewayVerificationError):
        await gateway.confirm_payment("order_x", payment_id, signature)


async def test_amount_mismatch_is_rejected(gateway, processor):
    payment_id, signature = processor.settle("order_x", 100)
    with pytest.raises(GatewayVerificationError):
        await gateway.confirm_payment("order_x", payment_id, signature, expected_amount=49900)


async def test_unknown_payment_is_rejected(gateway):
    signature = compute_signature("order_x", "pay_missing", "rzp_test_secret")
    with pytest.raises(GatewayVerificationError):
        await gateway.confirm_payment("order_x", "pay_missing", signature)


async def test_payment_lookup_retries_server_errors(gateway, processor):
    payment_id, _ = processor.settle("order_x", 49900)
    processor.fail_next = [502, 503]

    payment = await gateway.fetch_payment(payment_id)

    assert payment.payment_id == payment_id
    assert len(processor.requests) == 3


async def test_payment_lookup_gives_up_after_max_attempts(gateway, processor):
    processor.fail_next = [500, 500, 500]
    with pytest.raises(GatewayError):
        await gateway.fetch_payment("pay_1")
    assert len(processor.requests) == 3


async def test_transport_failure_becomes_gateway_error():
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    async with httpx.AsyncClient(
        transport=httpx.MockTransport(refuse), base_url="https://api.razorpay.test/v1"
    ) as client:
        gateway = RazorpayGateway(client, key_secret="rzp_test_secret", max_attempts=2, backoff_seconds=0)
        with pytest.raises(GatewayError):
            await gateway.fetch_payment("pay_1")
        with pytest.raises(GatewayError):
            await gateway.create_intent(Decimal("10"))
