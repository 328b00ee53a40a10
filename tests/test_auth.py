"""Integration tests for authentication routes.

Email sending is captured by the `sent_emails` fixture so no SMTP is required.
"""
from conftest import PASSWORD


async def test_register_with_password_then_login(async_client, db_session):
    payload = {"email": "Root@Platform.example.com", "name": "Root", "password": PASSWORD}

    r = await async_client.post("/auth/register", json=payload)
    assert r.status_code == 201
    body = r.json()
    assert body["success"] is True
    assert body["data"]["email"] == "root@platform.example.com"
    assert body["data"]["status"] == "active"
    assert [role["role_name"] for role in body["data"]["roles"]] == ["superadmin"]

    r = await async_client.post("/auth/register", json=payload)
    assert r.status_code == 400
    assert r.json() == {"code": 400, "message": "Email already taken"}

    r = await async_client.post("/auth/login", json={"email": payload["email"], "password": PASSWORD})
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["access_token"] and data["refresh_token"]
    assert data["roles"] == ["superadmin"]
    assert data["clinic_id"] is None


async def test_register_without_password_sends_set_password_link(async_client, db_session, sent_emails):
    from app.models.token import Token
    from app.models.user import User

    r = await async_client.post("/auth/register", json={"email": "ops@platform.example.com", "name": "Ops"})
    assert r.status_code == 201
    assert r.json()["data"]["status"] == "inactive"

    assert len(sent_emails) == 1
    assert sent_emails[0]["to"] == "ops@platform.example.com"
    assert sent_emails[0]["subject"] == "Set Your Password"

    user = db_session.query(User).filter(User.email == "ops@platform.example.com").first()
    token = db_session.query(Token).filter(Token.user_id == user.id, Token.type == "setPassword").first()
    assert token is not None
    assert f"/auth/set-password/{token.token}" in sent_emails[0]["body"]

    # Inactive until the password is set
    r = await async_client.post("/auth/login", json={"email": "ops@platform.example.com", "password": PASSWORD})
    assert r.status_code == 401

    r = await async_client.get("/auth/verify-token", params={"token": token.token})
    assert r.status_code == 200
    assert r.json()["data"]["email"] == "ops@platform.example.com"

    r = await async_client.post("/auth/reset-password", params={"token": token.token}, json={"password": PASSWORD})
    assert r.status_code == 204

    r = await async_client.post("/auth/login", json={"email": "ops@platform.example.com", "password": PASSWORD})
    assert r.status_code == 200

    # Password tokens are single use
    r = await async_client.post("/auth/reset-password", params={"token": token.token}, json={"password": PASSWORD})
    assert r.status_code == 401
    assert r.json()["message"] == "Password reset failed"


async def test_login_invalid_credentials(async_client, clinic_admin):
    r = await async_client.post("/auth/login", json={"email": clinic_admin.email, "password": "Wrong1234"})
    assert r.status_code == 401
    assert r.json() == {"code": 401, "message": "Incorrect email or password"}

    r = await async_client.post("/auth/login", json={"email": "nobody@example.com", "password": PASSWORD})
    assert r.status_code == 401


async def test_login_blocked_for_pending_clinic(async_client, db_session, clinic, clinic_admin):
    clinic.status = "pending"
    db_session.commit()

    r = await async_client.post("/auth/login", json={"email": clinic_admin.email, "password": PASSWORD})
    assert r.status_code == 401
    assert "awaiting approval" in r.json()["message"]


async def test_refresh_rotates_and_logout_revokes(async_client, clinic_admin):
    r = await async_client.post("/auth/login", json={"email": clinic_admin.email, "password": PASSWORD})
    tokens = r.json()["data"]

    r = await async_client.post("/auth/refresh-tokens", json={"refresh_token": tokens["refresh_token"]})
    assert r.status_code == 200
    rotated = r.json()["data"]
    assert rotated["refresh_token"] != tokens["refresh_token"]

    # The presented refresh token is blacklisted by rotation
    r = await async_client.post("/auth/refresh-tokens", json={"refresh_token": tokens["refresh_token"]})
    assert r.status_code == 401

    # The old access token's session now carries the new jti
    r = await async_client.get("/auth/me", headers={"Authorization": f"Bearer {tokens['access_token']}"})
    assert r.status_code == 401

    headers = {"Authorization": f"Bearer {rotated['access_token']}"}
    r = await async_client.get("/auth/me", headers=headers)
    assert r.status_code == 200
    assert r.json()["data"]["email"] == clinic_admin.email

    r = await async_client.post("/auth/logout", json={"refresh_token": rotated["refresh_token"]})
    assert r.status_code == 204

    r = await async_client.get("/auth/me", headers=headers)
    assert r.status_code == 401

    r = await async_client.post("/auth/logout", json={"refresh_token": rotated["refresh_token"]})
    assert r.status_code == 404


async def test_me_requires_token(async_client, prepare_database):
    r = await async_client.get("/auth/me")
    assert r.status_code == 401

    r = await async_client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401
    assert r.json() == {"code": 401, "message": "Please authenticate"}


async def test_forgot_password_flow(async_client, db_session, clinic_admin, sent_emails):
    from app.models.token import Token

    r = await async_client.post("/auth/forgot-password", json={"email": "ghost@example.com"})
    assert r.status_code == 404
    assert r.json()["message"] == "No users found with this email"

    r = await async_client.post("/auth/forgot-password", json={"email": clinic_admin.email})
    assert r.status_code == 204
    assert sent_emails[-1]["subject"] == "Password Reset Request"

    token = (
        db_session.query(Token)
        .filter(Token.user_id == clinic_admin.id, Token.type == "resetPassword")
        .first()
    )
    r = await async_client.post("/auth/reset-password", params={"token": token.token}, json={"password": "short"})
    assert r.status_code == 400

    r = await async_client.post("/auth/reset-password", params={"token": token.token}, json={"password": "NewPassw0rd"})
    assert r.status_code == 204

    r = await async_client.post("/auth/login", json={"email": clinic_admin.email, "password": PASSWORD})
    assert r.status_code == 401
    r = await async_client.post("/auth/login", json={"email": clinic_admin.email, "password": "NewPassw0rd"})
    assert r.status_code == 200


async def test_verify_token_rejects_unknown(async_client, prepare_database):
    r = await async_client.get("/auth/verify-token", params={"token": "garbage"})
    assert r.status_code == 401


async def test_email_verification(async_client, db_session, clinic_admin, admin_headers, sent_emails):
    from app.models.token import Token

    r = await async_client.post("/auth/send-verification-email", headers=admin_headers)
    assert r.status_code == 204
    assert sent_emails[-1]["subject"] == "Email Verification"

    token = (
        db_session.query(Token)
        .filter(Token.user_id == clinic_admin.id, Token.type == "verifyEmail")
        .first()
    )
    r = await async_client.post("/auth/verify-email", params={"token": token.token})
    assert r.status_code == 204

    db_session.expire_all()
    assert clinic_admin.is_email_verified is True

    r = await async_client.post("/auth/verify-email", params={"token": token.token})
    assert r.status_code == 401


async def test_auth_endpoints_are_rate_limited(async_client, monkeypatch):
    from app.core.config import settings

    monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", True)
    monkeypatch.setattr(settings, "RATE_LIMIT_REQUESTS", 2)

    payload = {"email": "nobody@example.com", "password": PASSWORD}
    for _ in range(2):
        r = await async_client.post("/auth/login", json=payload)
        assert r.status_code == 401

    r = await async_client.post("/auth/login", json=payload)
    assert r.status_code == 429
    assert r.json()["message"] == "Too many requests, please try again later."

    # the window is counted per path
    r = await async_client.post("/auth/forgot-password", json={"email": "nobody@example.com"})
    assert r.status_code == 404
