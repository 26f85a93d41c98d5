"""
Общие фикстуры тестов: временная SQLite база, фейковые LLM, хранилище и SMTP
"""

import asyncio
import os
from datetime import datetime, timezone
from typing import Dict, List, Optional, Union

import pytest
from langchain_core.messages import AIMessage

os.environ.setdefault("DATABASE_ENDPOINT", "sqlite://")
os.environ.setdefault("S3_ENDPOINT", "localhost:9000")
os.environ.setdefault("S3_ACCESS_KEY", "test-access-key")
os.environ.setdefault("S3_SECRET_KEY", "test-secret-key")
os.environ.setdefault("AUTH_SECRET_KEY", "test-secret-key-for-jwt")

from analysis import CategoryDetector, RedFlagAnalyzer  # noqa: E402
from config import get_settings  # noqa: E402
from core.auth import create_access_token, create_user  # noqa: E402
from core.database import create_schema, get_sync_engine  # noqa: E402
from core.email import EmailResult, get_email_sender  # noqa: E402
from core.exceptions import StorageError  # noqa: E402
from core.storage_client import get_storage_client_wrapper  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

CRON_SECRET = "test-cron-secret"
TEST_PASSWORD = "SecurePassword123"

ANALYSIS_JSON = """```json
{
  "redFlagScore": 7.5,
  "verdict": "Several serious warning signs",
  "criticalFlags": [
    {"category": "Payment", "evidence": "wire the deposit before viewing", "explanation": "Classic rental scam"}
  ],
  "warnings": [],
  "notices": [],
  "positives": [],
  "advice": "Do not send money before seeing the apartment."
}
```

The listing asks for money up front, which is the most common rental scam pattern."""


# ==================== Fakes ====================


class ScriptedLLM:
    """
    Фейковая chat model: отдаёт ответы по очереди.

    Элемент сценария - строка (ответ модели) или исключение (будет выброшено).
    Последний элемент повторяется, если сценарий закончился.
    """

    def __init__(self, script: List[Union[str, Exception]]):
        self.script = list(script)
        self.calls: List[list] = []

    async def ainvoke(self, messages, **kwargs):
        self.calls.append(messages)
        index = min(len(self.calls) - 1, len(self.script) - 1)
        item = self.script[index]
        if isinstance(item, Exception):
            raise item
        return AIMessage(content=item)


def on_event_loop() -> bool:
    """True, если вызов выполняется в потоке event loop"""
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


class FakeStorage:
    """
    Хранилище объектов в памяти с интерфейсом StorageClient.

    blocking_calls: операции, вызванные прямо в event loop (должно быть пусто)
    """

    def __init__(self):
        self.objects: Dict[str, bytes] = {}
        self.failing_deletes: set = set()
        self.blocking_calls: List[str] = []

    def _record(self, operation: str) -> None:
        if on_event_loop():
            self.blocking_calls.append(operation)

    def upload_file(self, object_name: str, data: bytes, content_type: str) -> str:
        self._record("upload_file")
        self.objects[object_name] = data
        return object_name

    def get_file(self, object_name: str) -> bytes:
        self._record("get_file")
        if object_name not in self.objects:
            raise StorageError("Failed to get file", details={"object_name": object_name})
        return self.objects[object_name]

    def delete_file(self, object_name: str) -> None:
        self._record("delete_file")
        if object_name in self.failing_deletes:
            raise StorageError("Failed to delete file", details={"object_name": object_name})
        self.objects.pop(object_name, None)

    def ping(self) -> None:
        return None


class RecordingEmailSender:
    """Запоминает отправленные письма вместо SMTP"""

    def __init__(self):
        self.sent: List[Dict[str, str]] = []
        self.fail = False
        self.sent_on_event_loop = False

    def send_verification_email(self, email: str, token: str) -> EmailResult:
        self.sent_on_event_loop = self.sent_on_event_loop or on_event_loop()
        if self.fail:
            return EmailResult(success=False, error="SMTP connection refused")
        self.sent.append({"email": email, "token": token})
        return EmailResult(success=True)

    @property
    def last_token(self) -> Optional[str]:
        return self.sent[-1]["token"] if self.sent else None


# ==================== Fixtures ====================


def _clear_caches() -> None:
    from server.dependencies import get_analyzer, get_detector

    for cached in (get_settings, get_sync_engine, get_email_sender, get_detector, get_analyzer):
        cached.cache_clear()


@pytest.fixture
def test_env(tmp_path, monkeypatch):
    """Отдельная SQLite база на каждый тест"""
    monkeypatch.setenv("DATABASE_ENDPOINT", f"sqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("CRON_SECRET", CRON_SECRET)
    monkeypatch.setenv("RETRY_DELAYS", "[0, 0, 0]")
    monkeypatch.setenv("SMTP_HOST", "")
    _clear_caches()
    create_schema()
    yield get_settings()
    get_sync_engine().dispose()
    _clear_caches()


@pytest.fixture
def db_session(test_env):
    session = Session(get_sync_engine())
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_storage():
    return FakeStorage()


@pytest.fixture
def email_sender():
    return RecordingEmailSender()


@pytest.fixture
def detector_llm():
    return ScriptedLLM(['{"category": "housing", "confidence": 0.92, "reasoning": "Rental listing"}'])


@pytest.fixture
def analyzer_llm():
    return ScriptedLLM([ANALYSIS_JSON])


@pytest.fixture
def client(test_env, fake_storage, email_sender, detector_llm, analyzer_llm):
    """TestClient с подменёнными внешними зависимостями"""
    from fastapi.testclient import TestClient
    from main import app
    from server.dependencies import get_analyzer, get_detector

    app.dependency_overrides[get_storage_client_wrapper] = lambda: fake_storage
    app.dependency_overrides[get_email_sender] = lambda: email_sender
    app.dependency_overrides[get_detector] = lambda: CategoryDetector(detector_llm)
    app.dependency_overrides[get_analyzer] = lambda: RedFlagAnalyzer(analyzer_llm, retry_delays=[0, 0, 0])

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def verified_user(db_session):
    user = create_user(db_session, email="alex@example.com", password=TEST_PASSWORD, name="Alex")
    user.email_verified_at = datetime.now(timezone.utc)
    user.verification_token = None
    user.verification_token_expires_at = None
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def auth_headers(verified_user):
    token = create_access_token(verified_user.id, verified_user.email)
    return {"Authorization": f"Bearer {token}"}
