"""Tests for the account lifecycle: register, verify, login, resend, password reset."""

from datetime import datetime, timedelta

import pytest
from sqlalchemy import select

from app.models.user import UserModel
from app.services.auth_service import FORGOT_PASSWORD_MESSAGE
from conftest import register, register_verified


def get_user(db_session, email: str) -> UserModel:
    db_session.expire_all()
    return db_session.execute(select(UserModel).where(UserModel.email == email)).scalar_one()


@pytest.mark.asyncio
async def test_register_login_verify_scenario(client, mail):
    resp = await register(client, "ana", "ana@x.com", "secret1")
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["email_verification_required"] is True
    assert body["data"]["user"]["is_email_verified"] is False

    resp = await client.post("/api/auth/login", json={"email": "ana@x.com", "password": "secret1"})
    assert resp.status_code == 403
    body = resp.json()
    assert body["success"] is False
    assert body["code"] == "EmailNotVerified"
    assert body["data"] == {"email": "ana@x.com", "email_verification_required": True}

    code = mail.last_code("verification", "ana@x.com")
    assert code is not None and len(code) == 6 and code.isdigit()

    resp = await client.post("/api/auth/verify-email", json={"email": "ana@x.com", "code": code})
    assert resp.status_code == 200
    assert resp.json()["success"] is True
    assert resp.json()["data"]["user"]["is_email_verified"] is True

    resp = await client.post("/api/auth/login", json={"email": "ana@x.com", "password": "secret1"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["token"]
    assert body["data"]["email_verification_required"] is False


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "username,email,password",
    [
        ("bob", "bob@example.com", "hunter22"),
        ("  carol  ", "Carol@Example.com", "123456"),
    ],
)
async def test_login_before_verification_always_fails(client, username, email, password):
    resp = await register(client, username, email, password)
    assert resp.status_code == 201

    resp = await client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 403
    assert resp.json()["code"] == "EmailNotVerified"


@pytest.mark.asyncio
async def test_register_normalizes_email_and_username(client, db_session):
    await register(client, "  dave  ", "Dave@Example.COM")
    user = get_user(db_session, "dave@example.com")
    assert user.username == "dave"


@pytest.mark.asyncio
async def test_register_sends_verification_code_after_commit(client, mail, db_session):
    await register(client, "erin", "erin@example.com")
    user = get_user(db_session, "erin@example.com")

    assert mail.count("verification", "erin@example.com") == 1
    assert user.email_verification_token == mail.last_code("verification", "erin@example.com")
    assert user.email_verification_expires > datetime.utcnow()


@pytest.mark.asyncio
async def test_register_survives_mail_failure(client, mail, db_session):
    mail.fail = True
    resp = await register(client, "frank", "frank@example.com")

    assert resp.status_code == 201
    user = get_user(db_session, "frank@example.com")
    assert user.is_email_verified is False
    assert user.email_verification_token is not None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "username,email",
    [("gina", "other@example.com"), ("other", "gina@example.com")],
)
async def test_register_duplicate_account(client, username, email):
    await register(client, "gina", "gina@example.com")

    resp = await register(client, username, email)
    assert resp.status_code == 409
    assert resp.json()["code"] == "DuplicateAccount"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"username": "ab", "email": "short@example.com", "password": "secret1"},
        {"username": "valid", "email": "not-an-email", "password": "secret1"},
        {"username": "valid", "email": "pw@example.com", "password": "12345"},
        {"email": "missing@example.com", "password": "secret1"},
    ],
)
async def test_register_validation_failure(client, payload):
    resp = await client.post("/api/auth/register", json=payload)
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["code"] == "ValidationFailure"
    assert body["errors"]


@pytest.mark.asyncio
async def test_verify_email_code_is_single_use(client, mail, db_session):
    await register(client, "hana", "hana@example.com")
    code = mail.last_code("verification", "hana@example.com")

    resp = await client.post("/api/auth/verify-email", json={"email": "hana@example.com", "code": code})
    assert resp.status_code == 200

    user = get_user(db_session, "hana@example.com")
    assert user.is_email_verified is True
    assert user.email_verification_token is None
    assert user.email_verification_expires is None
    assert mail.count("welcome", "hana@example.com") == 1

    resp = await client.post("/api/auth/verify-email", json={"email": "hana@example.com", "code": code})
    assert resp.status_code == 400
    assert resp.json()["code"] == "InvalidOrExpiredCode"


@pytest.mark.asyncio
async def test_verify_email_wrong_code(client, mail, db_session):
    await register(client, "ivan", "ivan@example.com")
    code = mail.last_code("verification", "ivan@example.com")
    wrong = "000000" if code != "000000" else "111111"

    resp = await client.post("/api/auth/verify-email", json={"email": "ivan@example.com", "code": wrong})
    assert resp.status_code == 400
    assert resp.json()["code"] == "InvalidOrExpiredCode"
    assert get_user(db_session, "ivan@example.com").is_email_verified is False


@pytest.mark.asyncio
async def test_verify_email_expired_code(client, mail, db_session):
    await register(client, "jane", "jane@example.com")
    code = mail.last_code("verification", "jane@example.com")

    user = get_user(db_session, "jane@example.com")
    user.email_verification_expires = datetime.utcnow() - timedelta(minutes=1)
    db_session.commit()

    resp = await client.post("/api/auth/verify-email", json={"email": "jane@example.com", "code": code})
    assert resp.status_code == 400
    assert resp.json()["code"] == "InvalidOrExpiredCode"


@pytest.mark.asyncio
async def test_verify_email_unknown_account(client):
    resp = await client.post("/api/auth/verify-email", json={"email": "nobody@example.com", "code": "123456"})
    assert resp.status_code == 400
    assert resp.json()["code"] == "InvalidOrExpiredCode"


@pytest.mark.asyncio
async def test_login_wrong_password_and_unknown_account(client, mail):
    await register_verified(client, mail, "kate", "kate@example.com", "secret123")

    wrong = await client.post("/api/auth/login", json={"email": "kate@example.com", "password": "nope123"})
    unknown = await client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "nope123"})

    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json()
    assert wrong.json()["code"] == "InvalidCredentials"


@pytest.mark.asyncio
async def test_login_updates_last_login(client, mail, db_session):
    await register_verified(client, mail, "leo", "leo@example.com")
    assert get_user(db_session, "leo@example.com").last_login is not None


@pytest.mark.asyncio
async def test_resend_verification_code_replaces_code(client, mail, db_session):
    await register(client, "mina", "mina@example.com")
    first = mail.last_code("verification", "mina@example.com")

    resp = await client.post("/api/auth/resend-verification-code", json={"email": "mina@example.com"})
    assert resp.status_code == 200
    assert mail.count("verification", "mina@example.com") == 2

    second = mail.last_code("verification", "mina@example.com")
    assert get_user(db_session, "mina@example.com").email_verification_token == second

    if first != second:
        resp = await client.post("/api/auth/verify-email", json={"email": "mina@example.com", "code": first})
        assert resp.status_code == 400

    resp = await client.post("/api/auth/verify-email", json={"email": "mina@example.com", "code": second})
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_resend_verification_code_unknown_email(client):
    resp = await client.post("/api/auth/resend-verification-code", json={"email": "ghost@example.com"})
    assert resp.status_code == 404
    assert resp.json()["code"] == "NotFoundOrForbidden"


@pytest.mark.asyncio
async def test_resend_verification_already_verified(client, mail):
    await register_verified(client, mail, "nora", "nora@example.com")

    resp = await client.post("/api/auth/resend-verification-code", json={"email": "nora@example.com"})
    assert resp.status_code == 400
    assert resp.json()["code"] == "AlreadyVerified"


@pytest.mark.asyncio
async def test_resend_verification_with_token(client, mail):
    resp = await register(client, "oscar", "oscar@example.com")
    token = resp.json()["data"]["token"]

    resp = await client.post(
        "/api/auth/resend-verification",
        headers={"Authorization": f"Bearer {token}"},
    )
    assert resp.status_code == 200
    assert mail.count("verification", "oscar@example.com") == 2


@pytest.mark.asyncio
async def test_resend_verification_mail_failure_is_reported(client, mail):
    await register(client, "paul", "paul@example.com")
    mail.fail = True

    resp = await client.post("/api/auth/resend-verification-code", json={"email": "paul@example.com"})
    assert resp.status_code == 500
    assert resp.json()["code"] == "InternalFailure"


@pytest.mark.asyncio
async def test_forgot_password_does_not_leak_accounts(client, mail):
    await register_verified(client, mail, "quinn", "quinn@example.com")

    existing = await client.post("/api/auth/forgot-password", json={"email": "quinn@example.com"})
    missing = await client.post("/api/auth/forgot-password", json={"email": "nobody@example.com"})

    assert existing.status_code == missing.status_code == 200
    assert existing.json() == missing.json()
    assert missing.json()["success"] is True
    assert missing.json()["message"] == FORGOT_PASSWORD_MESSAGE
    assert mail.count("reset", "quinn@example.com") == 1
    assert mail.count("reset", "nobody@example.com") == 0


@pytest.mark.asyncio
async def test_forgot_password_mail_failure_keeps_code(client, mail, db_session):
    await register_verified(client, mail, "quentin", "quentin@example.com")
    mail.fail = True

    resp = await client.post("/api/auth/forgot-password", json={"email": "quentin@example.com"})
    assert resp.status_code == 500
    assert resp.json()["code"] == "InternalFailure"

    user = get_user(db_session, "quentin@example.com")
    assert user.password_reset_token is not None
    assert user.password_reset_expires > datetime.utcnow()


@pytest.mark.asyncio
async def test_reset_password_flow(client, mail, db_session):
    await register_verified(client, mail, "rosa", "rosa@example.com", "oldpass1")
    await client.post("/api/auth/forgot-password", json={"email": "rosa@example.com"})
    code = mail.last_code("reset", "rosa@example.com")

    resp = await client.post(
        "/api/auth/reset-password",
        json={"email": "rosa@example.com", "code": code, "new_password": "newpass1"},
    )
    assert resp.status_code == 200

    user = get_user(db_session, "rosa@example.com")
    assert user.password_reset_token is None
    assert user.password_reset_expires is None
    assert user.is_email_verified is True

    old = await client.post("/api/auth/login", json={"email": "rosa@example.com", "password": "oldpass1"})
    assert old.status_code == 401
    new = await client.post("/api/auth/login", json={"email": "rosa@example.com", "password": "newpass1"})
    assert new.status_code == 200

    # 사용한 코드는 재사용 불가
    resp = await client.post(
        "/api/auth/reset-password",
        json={"email": "rosa@example.com", "code": code, "new_password": "another1"},
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "InvalidOrExpiredCode"


@pytest.mark.asyncio
async def test_reset_password_expired_code_keeps_hash(client, mail, db_session):
    await register_verified(client, mail, "sam", "sam@example.com", "oldpass1")
    await client.post("/api/auth/forgot-password", json={"email": "sam@example.com"})
    code = mail.last_code("reset", "sam@example.com")

    user = get_user(db_session, "sam@example.com")
    original_hash = user.password_hash
    user.password_reset_expires = datetime.utcnow() - timedelta(seconds=1)
    db_session.commit()

    resp = await client.post(
        "/api/auth/reset-password",
        json={"email": "sam@example.com", "code": code, "new_password": "newpass1"},
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "InvalidOrExpiredCode"
    assert get_user(db_session, "sam@example.com").password_hash == original_hash


@pytest.mark.asyncio
async def test_me_and_verification_status(client, mail):
    resp = await register(client, "tina", "tina@example.com")
    headers = {"Authorization": f"Bearer {resp.json()['data']['token']}"}

    resp = await client.get("/api/auth/verification-status", headers=headers)
    assert resp.json()["data"] == {"is_email_verified": False, "email": "tina@example.com"}

    resp = await client.get("/api/auth/me", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["user"]["username"] == "tina"
    assert "password_hash" not in resp.json()["data"]["user"]


@pytest.mark.asyncio
@pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer not-a-token"}])
async def test_me_requires_valid_token(client, headers):
    resp = await client.get("/api/auth/me", headers=headers)
    assert resp.status_code == 401
    assert resp.json()["code"] == "InvalidToken"
