"""
Тесты AuthMiddleware и RequestLoggingMiddleware
"""

import pytest
from server.logging_middleware import PROCESS_TIME_HEADER, REQUEST_ID_HEADER
from server.middleware import extract_bearer_token, is_public_path


@pytest.mark.parametrize(
    "header, expected",
    [
        ("Bearer abc.def.ghi", "abc.def.ghi"),
        ("bearer   token-value ", "token-value"),
        ("Basic dXNlcjpwYXNz", None),
        ("Bearer ", None),
        ("", None),
        (None, None),
    ],
)
def test_extract_bearer_token(header, expected):
    assert extract_bearer_token(header) == expected


def test_public_paths():
    assert is_public_path("/health")
    assert is_public_path("/auth/login")
    assert is_public_path("/docs/oauth2-redirect")
    assert is_public_path("/cron/cleanup-files")
    assert is_public_path("/analysis/categories")
    assert not is_public_path("/analysis")
    assert not is_public_path("/analysis/detect")
    assert not is_public_path("/auth/me")
    assert not is_public_path("/usage")


def test_protected_route_without_token_returns_401(client):
    response = client.get("/usage")

    assert response.status_code == 401
    assert response.json()["error"] == "unauthorized"
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_protected_route_with_garbage_token_returns_401(client):
    response = client.get("/usage", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


def test_expired_token_is_reported_as_unauthorized(client, verified_user, monkeypatch):
    from config import get_settings
    from core.auth import create_access_token

    monkeypatch.setattr(get_settings(), "auth_access_token_expire_days", -1)
    token = create_access_token(verified_user.id, verified_user.email)

    response = client.get("/usage", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["error"] == "unauthorized"
    assert "details" not in response.json()


def test_protected_route_with_valid_token(client, auth_headers):
    response = client.get("/usage", headers=auth_headers)

    assert response.status_code == 200


def test_request_id_is_echoed(client):
    response = client.get("/analysis/categories", headers={REQUEST_ID_HEADER: "req-123"})

    assert response.status_code == 200
    assert response.headers[REQUEST_ID_HEADER] == "req-123"
    assert response.headers[PROCESS_TIME_HEADER].endswith("ms")


def test_request_id_is_generated_when_missing(client):
    response = client.get("/analysis/categories")

    assert len(response.headers[REQUEST_ID_HEADER]) == 32
