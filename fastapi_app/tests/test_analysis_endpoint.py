"""
Тесты эндпоинта анализа: создание чата, сохранение результата, лимиты и ошибки LLM
"""

from core.exceptions import AnalysisError, ErrorType
from models import Chat, Message, UsageLog

CONTENT = "2BR apartment, $800/month, must wire first/last/deposit before viewing"


def analyze(client, headers, **payload):
    payload.setdefault("content", CONTENT)
    return client.post("/analysis", json=payload, headers=headers)


# ==================== Success ====================


def test_analysis_creates_chat_and_messages(client, auth_headers, db_session, verified_user):
    response = analyze(client, auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["category"] == "housing"
    assert body["detection"]["confidence"] == 0.92
    assert body["analysis"]["redFlagScore"] == 7.5
    assert body["analysis"]["criticalFlags"][0]["evidence"] == "wire the deposit before viewing"
    assert body["explanation"].startswith("The listing asks for money up front")
    assert body["usage"]["daily_usage"] == 1
    assert body["usage"]["can_analyze"] is True

    chat = db_session.get(Chat, body["chat_id"])
    assert chat.user_id == verified_user.id
    assert chat.category == "housing"
    assert chat.red_flag_score == 7.5
    assert chat.title == CONTENT[:50].strip()

    messages = {m.role: m for m in db_session.query(Message).filter_by(chat_id=chat.id).all()}
    assert set(messages) == {"user", "assistant"}
    assert messages["user"].content == CONTENT
    assert messages["assistant"].red_flag_data["redFlagScore"] == 7.5
    assert messages["assistant"].red_flag_data["category"] == "housing"


def test_explicit_category_skips_detection(client, auth_headers, detector_llm):
    response = analyze(client, auth_headers, category="marketplace")

    assert response.status_code == 200
    assert response.json()["category"] == "marketplace"
    assert response.json()["detection"]["confidence"] == 1.0
    assert detector_llm.calls == []


def test_analysis_in_existing_chat(client, auth_headers):
    chat_id = client.post("/chats/", json={"title": "Listings"}, headers=auth_headers).json()["id"]

    response = analyze(client, auth_headers, chat_id=chat_id)

    assert response.status_code == 200
    assert response.json()["chat_id"] == chat_id
    messages = client.get(f"/chats/{chat_id}/messages", headers=auth_headers).json()
    assert messages["total"] == 2


def test_detect_endpoint_does_not_count_usage(client, auth_headers, db_session):
    response = client.post("/analysis/detect", json={"content": CONTENT}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["category"] == "housing"
    assert db_session.query(UsageLog).count() == 0


def test_categories_are_public(client):
    response = client.get("/analysis/categories")

    assert response.status_code == 200
    ids = [c["id"] for c in response.json()["categories"]]
    assert ids == ["dating", "conversations", "jobs", "housing", "marketplace", "general"]


# ==================== Validation & limits ====================


def test_empty_content_rejected(client, auth_headers):
    response = analyze(client, auth_headers, content="   ")

    assert response.status_code == 422


def test_unknown_chat_is_not_found(client, auth_headers):
    response = analyze(client, auth_headers, chat_id=9999)

    assert response.status_code == 404


def test_daily_limit_returns_429(client, auth_headers, db_session):
    assert analyze(client, auth_headers).status_code == 200
    assert analyze(client, auth_headers).status_code == 200

    response = analyze(client, auth_headers)

    assert response.status_code == 429
    assert response.json()["error"] == "rate_limit_exceeded"
    assert int(response.headers["Retry-After"]) > 0
    assert db_session.query(UsageLog).one().analysis_count == 2


def test_usage_endpoint(client, auth_headers):
    analyze(client, auth_headers)

    response = client.get("/usage", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["daily_usage"] == 1
    assert body["monthly_usage"] == 1
    assert body["daily_limit"] == 2
    assert body["monthly_limit"] == 10


# ==================== LLM failures ====================


def test_transient_failure_returns_503_and_keeps_usage(client, auth_headers, analyzer_llm, db_session):
    analyzer_llm.script = [RuntimeError("503 Service Unavailable")]

    response = analyze(client, auth_headers)

    assert response.status_code == 503
    assert response.json()["message"] == "AI temporarily unavailable. Please try again later."
    assert response.json()["error_type"] == "transient"
    assert len(analyzer_llm.calls) == 3
    assert db_session.query(UsageLog).count() == 0
    assert db_session.query(Message).count() == 0


def test_permanent_failure_returns_400(client, auth_headers, analyzer_llm):
    analyzer_llm.script = [RuntimeError("400 Bad Request: invalid argument")]

    response = analyze(client, auth_headers)

    assert response.status_code == 400
    assert response.json()["error_type"] == "permanent"
    assert len(analyzer_llm.calls) == 1


def test_parsing_failure_returns_502(client, auth_headers, analyzer_llm):
    analyzer_llm.script = ["Sorry, I can't help with that."]

    response = analyze(client, auth_headers)

    assert response.status_code == 502
    assert response.json()["error_type"] == ErrorType.PARSING.value


def test_detector_failure_falls_back_to_keywords(client, auth_headers, detector_llm):
    detector_llm.script = [AnalysisError("boom", ErrorType.TRANSIENT)]

    response = analyze(client, auth_headers)

    assert response.status_code == 200
    assert response.json()["category"] == "housing"
    assert response.json()["detection"]["confidence"] == 0.5


# ==================== Chats ====================


def test_chat_crud(client, auth_headers):
    created = client.post("/chats/", json={}, headers=auth_headers)
    assert created.status_code == 201
    chat_id = created.json()["id"]
    assert created.json()["title"] == "Новый анализ"

    renamed = client.patch(f"/chats/{chat_id}", json={"title": "Roommate ad"}, headers=auth_headers)
    assert renamed.json()["title"] == "Roommate ad"

    listing = client.get("/chats/", headers=auth_headers).json()
    assert listing["total"] == 1

    assert client.delete(f"/chats/{chat_id}", headers=auth_headers).status_code == 204
    assert client.get(f"/chats/{chat_id}", headers=auth_headers).status_code == 404
    assert client.get("/chats/", headers=auth_headers).json()["total"] == 0


# ==================== Health ====================


def test_health_reports_dependencies(client, fake_storage, monkeypatch):
    monkeypatch.setattr("server.endpoints.get_storage_client_wrapper", lambda: fake_storage)

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "healthy",
        "service": "Red Flag Detector",
        "version": "1.0.0",
        "database": "connected",
        "s3": "connected",
    }
