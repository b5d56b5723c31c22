from __future__ import annotations

import itertools
import json
import os
import tempfile
from datetime import date

_DB_DIR = tempfile.mkdtemp(prefix="gym-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/test.db"
os.environ.setdefault("JWT_SECRET_KEY", "test-signing-secret")
os.environ["TRACING_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["RAZORPAY_KEY_ID"] = "rzp_test_key"
os.environ["RAZORPAY_KEY_SECRET"] = "rzp_test_secret"
os.environ["GATEWAY_RETRY_BACKOFF_SECONDS"] = "0"

import httpx
import pytest

from main import app
from services.auth_service.models import Admin, Member
from services.payment_service.gateway import RazorpayGateway, compute_signature, get_payment_gateway
from services.payment_service.main import payment_app
from shared.config.database import AsyncSessionLocal, Base, engine
from shared.security import Principal, create_access_token, hash_password

KEY_SECRET = os.environ["RAZORPAY_KEY_SECRET"]
PROCESSOR_URL = "https://api.razorpay.test/v1"


class FakeProcessor:
    """In-memory stand-in for the processor's orders and payments API."""

    def __init__(self):
        self.orders: dict[str, dict] = {}
        self.payments: dict[str, dict] = {}
        self.requests: list[httpx.Request] = []
        self.fail_next: list[int] = []
        self._ids = itertools.count(1)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_next:
            return httpx.Response(self.fail_next.pop(0), json={"error": "unavailable"})

        path = request.url.path
        if request.method == "POST" and path == "/v1/orders":
            payload = json.loads(request.content)
            order_id = f"order_{next(self._ids)}"
            order = {"id": order_id, "amount": payload["amount"], "currency": payload["currency"]}
            self.orders[order_id] = order
            return httpx.Response(200, json=order)

        if request.method == "GET" and path.startswith("/v1/payments/"):
            payment = self.payments.get(path.rsplit("/", 1)[-1])
            if payment is None:
                return httpx.Response(404, json={"error": "not found"})
            return httpx.Response(200, json=payment)

        return httpx.Response(404, json={"error": "unknown route"})

    def settle(self, order_id: str, amount: int, status: str = "captured", method: str = "upi"):
        """Record a processor-side payment for ``order_id``; returns (payment_id, signature)."""
        payment_id = f"pay_{next(self._ids)}"
        self.payments[payment_id] = {
            "id": payment_id,
            "order_id": order_id,
            "amount": amount,
            "currency": "INR",
            "status": status,
            "method": method,
        }
        return payment_id, compute_signature(order_id, payment_id, KEY_SECRET)


@pytest.fixture(autouse=True)
async def database():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture()
async def db_session():
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture()
def processor() -> FakeProcessor:
    return FakeProcessor()


@pytest.fixture()
async def gateway_client(processor: FakeProcessor):
    async with httpx.AsyncClient(
        transport=httpx.MockTransport(processor.handler),
        base_url=PROCESSOR_URL,
    ) as client:
        yield client


@pytest.fixture()
def gateway(gateway_client: httpx.AsyncClient) -> RazorpayGateway:
    return RazorpayGateway(gateway_client, key_secret=KEY_SECRET, backoff_seconds=0)


@pytest.fixture()
async def client(gateway: RazorpayGateway):
    payment_app.dependency_overrides[get_payment_gateway] = lambda: gateway
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(
        transport=transport,
        base_url="http://testserver",
        follow_redirects=True,
    ) as test_client:
        yield test_client
    payment_app.dependency_overrides.clear()


async def _store(session, account):
    session.add(account)
    await session.commit()
    await session.refresh(account)
    return account


@pytest.fixture()
async def admin(db_session) -> Admin:
    return await _store(
        db_session,
        Admin(
            name="Owner",
            email="owner@gymfit.com",
            hashed_password=hash_password("owner-password"),
            status="active",
        ),
    )


@pytest.fixture()
def make_member(db_session):
    async def _make(
        email: str = "asha@gymfit.com",
        name: str = "Asha",
        membership_type: str = "monthly",
        start_date: date = date(2024, 3, 1),
        end_date: date = date(2024, 4, 1),
        status: str = "active",
        password: str = "member-password",
    ) -> Member:
        return await _store(
            db_session,
            Member(
                name=name,
                email=email,
                phone="9999999999",
                hashed_password=hash_password(password),
                membership_type=membership_type,
                start_date=start_date,
                end_date=end_date,
                status=status,
            ),
        )

    return _make


@pytest.fixture()
async def member(make_member) -> Member:
    return await make_member()


def bearer(account) -> dict[str, str]:
    token = create_access_token(account.id, account.role, password_reset=account.must_reset_password)
    return {"Authorization": f"Bearer {token}"}


def principal_of(account) -> Principal:
    return Principal(account_id=account.id, role=account.role)


@pytest.fixture()
def auth():
    return bearer


@pytest.fixture()
def as_principal():
    return principal_of
