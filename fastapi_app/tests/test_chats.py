"""
Тесты истории анализов: фильтр по категории, переименование и доступ к чужим чатам
"""

from datetime import datetime, timezone

from core.auth import create_access_token, create_user
from models import Chat

from .conftest import TEST_PASSWORD


def add_chat(db_session, user, title, category=None, score=None):
    chat = Chat(user_id=user.id, title=title, category=category, red_flag_score=score)
    db_session.add(chat)
    db_session.commit()
    return chat.id


def other_user_headers(db_session):
    user = create_user(db_session, email="sam@example.com", password=TEST_PASSWORD, name="Sam")
    user.email_verified_at = datetime.now(timezone.utc)
    db_session.commit()
    return {"Authorization": f"Bearer {create_access_token(user.id, user.email)}"}


def test_list_chats_filtered_by_category(client, auth_headers, db_session, verified_user):
    add_chat(db_session, verified_user, "Roommate ad", category="housing", score=6.0)
    add_chat(db_session, verified_user, "Recruiter email", category="jobs", score=8.5)
    add_chat(db_session, verified_user, "Empty")

    body = client.get("/chats/", params={"category": "jobs"}, headers=auth_headers).json()

    assert body["total"] == 1
    assert body["chats"][0]["title"] == "Recruiter email"
    assert body["chats"][0]["red_flag_score"] == 8.5
    assert client.get("/chats/", headers=auth_headers).json()["total"] == 3


def test_list_chats_rejects_unknown_category(client, auth_headers):
    response = client.get("/chats/", params={"category": "astrology"}, headers=auth_headers)

    assert response.status_code == 422
    assert response.json()["error"] == "validation_error"


def test_rename_strips_title(client, auth_headers, db_session, verified_user):
    chat_id = add_chat(db_session, verified_user, "Old")

    response = client.patch(f"/chats/{chat_id}", json={"title": "  Landlord chat  "}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["title"] == "Landlord chat"


def test_rename_rejects_blank_title(client, auth_headers, db_session, verified_user):
    chat_id = add_chat(db_session, verified_user, "Old")

    response = client.patch(f"/chats/{chat_id}", json={"title": "   "}, headers=auth_headers)

    assert response.status_code == 422
    assert "Title must not be blank" in response.json()["message"]


def test_foreign_chat_is_not_found(client, auth_headers, db_session, verified_user):
    chat_id = add_chat(db_session, verified_user, "Private")
    headers = other_user_headers(db_session)

    assert client.get(f"/chats/{chat_id}", headers=headers).status_code == 404
    assert client.get(f"/chats/{chat_id}/messages", headers=headers).status_code == 404
    assert client.delete(f"/chats/{chat_id}", headers=headers).status_code == 404
    assert client.get(f"/chats/{chat_id}", headers=auth_headers).status_code == 200
