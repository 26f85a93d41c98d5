"""
Тесты регистрации, подтверждения email и входа
"""

from datetime import datetime, timedelta, timezone

from models import User

from .conftest import TEST_PASSWORD

REGISTER_PAYLOAD = {"email": "New.User@Example.com", "password": TEST_PASSWORD, "name": "New User"}


def register(client, payload=REGISTER_PAYLOAD):
    return client.post("/auth/register", json=payload)


# ==================== Registration ====================


def test_register_creates_unverified_user_and_sends_email(client, email_sender, db_session):
    response = register(client)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["email_sent"] is True
    assert "access_token" not in body

    user = db_session.get(User, body["user_id"])
    assert user.email == "new.user@example.com"
    assert user.email_verified_at is None
    assert email_sender.sent == [{"email": "new.user@example.com", "token": user.verification_token}]
    assert email_sender.sent_on_event_loop is False


def test_register_duplicate_email_conflict(client):
    register(client)

    response = register(client, {**REGISTER_PAYLOAD, "email": "new.user@example.com"})

    assert response.status_code == 409
    assert response.json()["message"] == "An account with this email already exists"


def test_register_weak_password_rejected(client):
    response = register(client, {**REGISTER_PAYLOAD, "password": "alllowercase1"})

    assert response.status_code == 422


def test_register_accepts_long_password_and_login_works(client, db_session):
    long_password = "Aa1" + "x" * 77
    payload = {**REGISTER_PAYLOAD, "password": long_password}

    response = register(client, payload)

    assert response.status_code == 201
    user = db_session.get(User, response.json()["user_id"])
    user.email_verified_at = datetime.now(timezone.utc)
    db_session.commit()

    login = client.post("/auth/login", json={"email": "new.user@example.com", "password": long_password})
    assert login.status_code == 200


def test_register_password_over_100_chars_rejected(client):
    response = register(client, {**REGISTER_PAYLOAD, "password": "Aa1" + "x" * 98})

    assert response.status_code == 422


def test_register_succeeds_when_email_fails(client, email_sender):
    email_sender.fail = True

    response = register(client)

    assert response.status_code == 201
    assert response.json()["email_sent"] is False


# ==================== Login ====================


def test_login_requires_verified_email(client):
    register(client)

    response = client.post("/auth/login", json={"email": "new.user@example.com", "password": TEST_PASSWORD})

    assert response.status_code == 403
    assert response.json()["message"] == "Please verify your email before signing in"


def test_login_wrong_password(client, verified_user):
    response = client.post("/auth/login", json={"email": verified_user.email, "password": "WrongPassword1"})

    assert response.status_code == 401


def test_login_and_me(client, verified_user):
    response = client.post("/auth/login", json={"email": "ALEX@example.com", "password": TEST_PASSWORD})

    assert response.status_code == 200
    token = response.json()["access_token"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "alex@example.com"
    assert me.json()["email_verified"] is True


def test_protected_endpoint_requires_token(client):
    response = client.get("/chats/")

    assert response.status_code == 401


# ==================== Email verification ====================


def test_verify_email_flow(client, email_sender):
    register(client)
    token = email_sender.last_token

    response = client.get("/auth/verify-email", params={"token": token})
    assert response.status_code == 200
    assert "Email verified" in response.text

    login = client.post("/auth/login", json={"email": "new.user@example.com", "password": TEST_PASSWORD})
    assert login.status_code == 200


def test_verify_email_missing_token(client):
    response = client.get("/auth/verify-email")

    assert response.status_code == 400


def test_verify_email_unknown_token(client):
    response = client.get("/auth/verify-email", params={"token": "does-not-exist"})

    assert response.status_code == 404


def test_verify_email_expired_token_is_kept(client, email_sender, db_session):
    user_id = register(client).json()["user_id"]
    token = email_sender.last_token

    user = db_session.get(User, user_id)
    user.verification_token_expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
    db_session.commit()

    response = client.get("/auth/verify-email", params={"token": token})

    assert response.status_code == 410
    db_session.expire_all()
    user = db_session.get(User, user_id)
    assert user.verification_token == token
    assert user.email_verified_at is None


# ==================== Resend verification ====================


def test_resend_issues_new_token(client, email_sender):
    register(client)
    first_token = email_sender.last_token

    response = client.post("/auth/resend-verification", json={"email": "new.user@example.com"})

    assert response.status_code == 200
    assert response.json()["message"] == "Verification email sent! Please check your inbox."
    assert email_sender.last_token != first_token
    assert client.get("/auth/verify-email", params={"token": first_token}).status_code == 404
    assert client.get("/auth/verify-email", params={"token": email_sender.last_token}).status_code == 200


def test_resend_unknown_email_is_generic(client, email_sender):
    response = client.post("/auth/resend-verification", json={"email": "nobody@example.com"})

    assert response.status_code == 200
    assert response.json()["message"] == (
        "If an account exists with this email, a verification link has been sent."
    )
    assert email_sender.sent == []


def test_resend_already_verified(client, verified_user, email_sender):
    response = client.post("/auth/resend-verification", json={"email": verified_user.email})

    assert response.status_code == 200
    assert response.json()["message"] == "Email already verified. Please sign in."
    assert email_sender.sent == []


def test_resend_email_failure(client, email_sender):
    register(client)
    email_sender.fail = True

    response = client.post("/auth/resend-verification", json={"email": "new.user@example.com"})

    assert response.status_code == 500
    assert response.json()["message"] == "Failed to send verification email. Please try again."
