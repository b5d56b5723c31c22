from __future__ import annotations

from datetime import timedelta

import pytest

from services.auth_service import service as auth_service_module
from services.auth_service.repository import AccountRepository
from services.auth_service.service import AuthService
from shared.errors import InvalidTokenError
from shared.security import create_access_token, verify_access_token


async def test_health_is_public(client):
    response = await client.get("/auth/health")
    assert response.status_code == 200
    assert response.json() == {"service": "auth", "status": "running"}


async def test_missing_token_is_rejected(client):
    response = await client.get("/auth/me")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


async def test_tampered_token_is_rejected(client, admin, auth):
    header = auth(admin)["Authorization"]
    response = await client.get("/auth/me", headers={"Authorization": header[:-2] + "xx"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token"


async def test_expired_token_is_rejected(client, admin):
    token = create_access_token(admin.id, "admin", expires_delta=timedelta(minutes=-1))
    response = await client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Token has expired"


async def test_token_with_unknown_role_is_rejected(client, admin):
    token = create_access_token(admin.id, "superuser")
    response = await client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


async def test_login_issues_token_with_role_claim(client, member):
    response = await client.post(
        "/auth/login", json={"email": member.email, "password": "member-password"}
    )
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["tokenType"] == "bearer"

    claims = verify_access_token(body["accessToken"])
    assert claims["sub"] == member.id
    assert claims["role"] == "member"


async def test_login_with_wrong_password(client, member):
    response = await client.post("/auth/login", json={"email": member.email, "password": "nope"})
    assert response.status_code == 401


async def test_login_of_inactive_account_is_forbidden(client, make_member):
    inactive = await make_member(email="gone@gymfit.com", status="inactive")
    response = await client.post(
        "/auth/login", json={"email": inactive.email, "password": "member-password"}
    )
    assert response.status_code == 403


async def test_me_returns_account_without_credential(client, member, auth):
    response = await client.get("/auth/me", headers=auth(member))
    assert response.status_code == 200
    body = response.json()
    assert body["id"] == member.id
    assert body["membershipType"] == "monthly"
    assert "hashedPassword" not in body
    assert "password" not in body


async def test_change_password_clears_reset_flag(client, member, auth, db_session):
    member.must_reset_password = True
    await db_session.commit()

    response = await client.post(
        "/auth/change-password",
        headers=auth(member),
        json={"currentPassword": "member-password", "newPassword": "a-much-better-one"},
    )
    assert response.status_code == 204

    login = await client.post(
        "/auth/login", json={"email": member.email, "password": "a-much-better-one"}
    )
    assert login.status_code == 200
    assert login.json()["mustResetPassword"] is False


async def test_change_password_requires_current_password(client, member, auth):
    response = await client.post(
        "/auth/change-password",
        headers=auth(member),
        json={"currentPassword": "wrong", "newPassword": "a-much-better-one"},
    )
    assert response.status_code == 401


async def test_bootstrap_admin_is_created_once(db_session, monkeypatch):
    monkeypatch.setattr(auth_service_module, "BOOTSTRAP_ADMIN_EMAIL", "boss@gymfit.com")
    monkeypatch.setattr(auth_service_module, "BOOTSTRAP_ADMIN_PASSWORD", "first-login-only")

    service = AuthService(db_session)
    first = await service.ensure_bootstrap_admin()
    second = await service.ensure_bootstrap_admin()

    assert first.id == second.id
    assert first.role == "admin"
    assert first.must_reset_password is True
    stored = await AccountRepository.get_by_email(db_session, "boss@gymfit.com")
    assert stored.id == first.id


async def test_bootstrap_admin_skipped_without_configuration(db_session, monkeypatch):
    monkeypatch.setattr(auth_service_module, "BOOTSTRAP_ADMIN_EMAIL", None)
    assert await AuthService(db_session).ensure_bootstrap_admin() is None


def test_token_carries_account_claims():
    claims = verify_access_token(create_access_token("abc123", "member"))
    assert claims["sub"] == "abc123"
    assert claims["role"] == "member"
    assert "pwd_reset" not in claims

    flagged = verify_access_token(create_access_token("abc123", "member", password_reset=True))
    assert flagged["pwd_reset"] is True


def test_malformed_token_is_told_apart_from_expired():
    with pytest.raises(InvalidTokenError) as malformed:
        verify_access_token("not-a-jwt")
    assert malformed.value.message == "Invalid token"

    with pytest.raises(InvalidTokenError) as expired:
        verify_access_token(create_access_token("abc123", "admin", expires_delta=timedelta(seconds=-5)))
    assert expired.value.message == "Token has expired"


async def test_temporary_password_only_opens_auth_routes(client, member, db_session):
    member.must_reset_password = True
    await db_session.commit()

    login = await client.post(
        "/auth/login", json={"email": member.email, "password": "member-password"}
    )
    assert login.json()["mustResetPassword"] is True
    headers = {"Authorization": f"Bearer {login.json()['accessToken']}"}

    assert (await client.get("/auth/me", headers=headers)).status_code == 200
    blocked = await client.get(f"/membership/{member.id}", headers=headers)
    assert blocked.status_code == 403
    assert blocked.json()["detail"] == "Password change required"

    changed = await client.post(
        "/auth/change-password",
        headers=headers,
        json={"currentPassword": "member-password", "newPassword": "a-much-better-one"},
    )
    assert changed.status_code == 204

    relogin = await client.post(
        "/auth/login", json={"email": member.email, "password": "a-much-better-one"}
    )
    fresh = {"Authorization": f"Bearer {relogin.json()['accessToken']}"}
    assert (await client.get(f"/membership/{member.id}", headers=fresh)).status_code == 200
