"""
Тесты отправки писем подтверждения
"""

import smtplib

import pytest
from core.email import EmailSender, build_verification_url, render_verification_email


class FakeSMTP:
    """Подмена smtplib.SMTP, запоминающая вызовы"""

    instances = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.started_tls = False
        self.logged_in = None
        self.messages = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return False

    def starttls(self):
        self.started_tls = True

    def login(self, username, password):
        self.logged_in = (username, password)

    def send_message(self, msg):
        self.messages.append(msg)


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


def make_sender(host="smtp.example.com", username="mailer"):
    return EmailSender(
        host=host,
        port=587,
        username=username,
        password="secret",
        use_tls=True,
        sender="Red Flag Detector <noreply@example.com>",
        base_url="https://api.example.com/",
    )


def test_verification_url_encodes_token():
    url = build_verification_url("https://api.example.com/", "abc+/=")

    assert url == "https://api.example.com/auth/verify-email?token=abc%2B%2F%3D"


def test_rendered_email_contains_link():
    html, text = render_verification_email("https://api.example.com/auth/verify-email?token=t1")

    assert "https://api.example.com/auth/verify-email?token=t1" in html
    assert "https://api.example.com/auth/verify-email?token=t1" in text


def test_send_verification_email(fake_smtp):
    result = make_sender().send_verification_email("alex@example.com", "tok123")

    assert result.success is True
    smtp = fake_smtp.instances[0]
    assert (smtp.host, smtp.port) == ("smtp.example.com", 587)
    assert smtp.started_tls is True
    assert smtp.logged_in == ("mailer", "secret")
    message = smtp.messages[0]
    assert message["To"] == "alex@example.com"
    assert message["Subject"] == "Verify your email address"


def test_smtp_failure_is_reported(monkeypatch):
    def refuse(*args, **kwargs):
        raise ConnectionRefusedError("connection refused")

    monkeypatch.setattr(smtplib, "SMTP", refuse)

    result = make_sender().send_verification_email("alex@example.com", "tok123")

    assert result.success is False
    assert "connection refused" in result.error


def test_without_smtp_host_link_is_logged(fake_smtp, caplog):
    result = make_sender(host="").send_verification_email("alex@example.com", "tok123")

    assert result.success is True
    assert fake_smtp.instances == []
    assert any("SMTP is not configured" in r.getMessage() for r in caplog.records)
