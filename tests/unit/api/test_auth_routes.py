"""Auth routes: login, token verification failures, registration, profile, 2FA enrolment."""

from datetime import datetime, timedelta, timezone

import pyotp
import pytest
from httpx import AsyncClient

EMPLOYEE_ID = "1"
ADMIN_ID = "3"

ADMIN_LOGIN = {"email": "admin@brahmaputra.gov.in", "password": "admin123"}


@pytest.mark.asyncio
async def test_login_success(async_client: AsyncClient):
    r = await async_client.post("/api/auth/login", json=ADMIN_LOGIN)
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["user"]["role"] == "administrator"
    assert "password_hash" not in body["user"]
    assert "two_factor_secret" not in body["user"]

    me = await async_client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.status_code == 200
    assert me.json()["data"]["email"] == "admin@brahmaputra.gov.in"


@pytest.mark.asyncio
async def test_login_wrong_password(async_client: AsyncClient):
    r = await async_client.post(
        "/api/auth/login", json={"email": "admin@brahmaputra.gov.in", "password": "nope"}
    )
    assert r.status_code == 401
    assert r.json() == {"success": False, "message": "Invalid credentials"}


async def test_login_invalid_email_is_validation_error(async_client: AsyncClient):
    r = await async_client.post("/api/auth/login", json={"email": "not-an-email", "password": "x"})
    assert r.status_code == 422
    assert r.json()["success"] is False


async def test_missing_token(async_client: AsyncClient):
    r = await async_client.get("/api/auth/me")
    assert r.status_code == 401
    assert r.json() == {"success": False, "message": "Access denied. No token provided."}
    assert r.headers["WWW-Authenticate"] == "Bearer"


async def test_expired_token(async_client: AsyncClient, container):
    token, _ = container.tokens.issue(ADMIN_ID, now=datetime.now(timezone.utc) - timedelta(days=30))
    r = await async_client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
    assert r.json()["message"] == "Token has expired."


async def test_tampered_token(async_client: AsyncClient, auth_headers):
    headers = auth_headers(ADMIN_ID)
    headers["Authorization"] += "x"
    r = await async_client.get("/api/auth/me", headers=headers)
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid token."


async def test_token_for_unknown_user(async_client: AsyncClient, auth_headers):
    r = await async_client.get("/api/auth/me", headers=auth_headers("999"))
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid token or user not found."


async def test_deactivated_user_token_rejected(async_client: AsyncClient, auth_headers):
    employee_headers = auth_headers(EMPLOYEE_ID)
    assert (await async_client.get("/api/auth/me", headers=employee_headers)).status_code == 200

    r = await async_client.patch(
        f"/api/users/{EMPLOYEE_ID}/status", json={"is_active": False}, headers=auth_headers(ADMIN_ID)
    )
    assert r.status_code == 200
    assert r.json()["data"]["is_active"] is False

    r = await async_client.get("/api/auth/me", headers=employee_headers)
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid token or user not found."

    login = await async_client.post(
        "/api/auth/login", json={"email": "rajesh.kumar@brahmaputra.gov.in", "password": "password123"}
    )
    assert login.status_code == 401


async def test_register_requires_administrator(async_client: AsyncClient, auth_headers):
    payload = {
        "name": "New Hire",
        "email": "new.hire@brahmaputra.gov.in",
        "password": "secret123",
        "department": "Finance",
    }
    r = await async_client.post("/api/auth/register", json=payload, headers=auth_headers(EMPLOYEE_ID))
    assert r.status_code == 403
    assert r.json() == {"success": False, "message": "Insufficient permissions."}

    r = await async_client.post("/api/auth/register", json=payload, headers=auth_headers(ADMIN_ID))
    assert r.status_code == 201
    assert r.json()["data"]["role"] == "employee"

    r = await async_client.post("/api/auth/register", json=payload, headers=auth_headers(ADMIN_ID))
    assert r.status_code == 400
    assert r.json()["message"] == "User already exists with this email"


async def test_register_short_password(async_client: AsyncClient, auth_headers):
    payload = {
        "name": "New Hire",
        "email": "new.hire@brahmaputra.gov.in",
        "password": "abc",
        "department": "Finance",
    }
    r = await async_client.post("/api/auth/register", json=payload, headers=auth_headers(ADMIN_ID))
    assert r.status_code == 400
    assert "at least" in r.json()["message"]


async def test_update_profile(async_client: AsyncClient, auth_headers):
    r = await async_client.put(
        "/api/auth/profile", json={"name": "Rajesh K."}, headers=auth_headers(EMPLOYEE_ID)
    )
    assert r.status_code == 200
    assert r.json()["data"]["name"] == "Rajesh K."

    r = await async_client.put(
        "/api/auth/profile",
        json={"email": "admin@brahmaputra.gov.in"},
        headers=auth_headers(EMPLOYEE_ID),
    )
    assert r.status_code == 400


async def test_logout_is_audited(async_client: AsyncClient, auth_headers, audit_entries):
    r = await async_client.post("/api/auth/logout", headers=auth_headers(EMPLOYEE_ID))
    assert r.status_code == 200
    entry = audit_entries()[-1]
    assert entry.action == "User Logout"
    assert entry.category.value == "logout"
    assert entry.actor_id == EMPLOYEE_ID


async def test_two_factor_enrolment(async_client: AsyncClient, auth_headers, container):
    headers = auth_headers(EMPLOYEE_ID)
    r = await async_client.post("/api/auth/setup-2fa", headers=headers)
    assert r.status_code == 200
    secret = r.json()["data"]["secret"]
    assert r.json()["data"]["provisioning_uri"].startswith("otpauth://totp/")

    r = await async_client.post("/api/auth/verify-2fa", json={"token": "12345"}, headers=headers)
    assert r.status_code == 422

    r = await async_client.post(
        "/api/auth/verify-2fa", json={"token": pyotp.TOTP(secret).now()}, headers=headers
    )
    assert r.status_code == 200
    assert (await container.users.get_by_id(EMPLOYEE_ID)).two_factor_enabled is True

    r = await async_client.post("/api/auth/setup-2fa", headers=headers)
    assert r.status_code == 400
    assert r.json()["message"] == "2FA is already enabled"

    r = await async_client.post(
        "/api/auth/disable-2fa", json={"token": pyotp.TOTP(secret).now()}, headers=headers
    )
    assert r.status_code == 200
    assert (await container.users.get_by_id(EMPLOYEE_ID)).two_factor_enabled is False


async def test_verify_2fa_without_setup(async_client: AsyncClient, auth_headers):
    r = await async_client.post(
        "/api/auth/verify-2fa", json={"token": "123456"}, headers=auth_headers(EMPLOYEE_ID)
    )
    assert r.status_code == 400
    assert r.json()["message"] == "2FA setup not initiated"
