"""
Отправка писем подтверждения email через SMTP
"""

import logging
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from functools import lru_cache
from typing import Optional
from urllib.parse import urlencode

from config import get_settings

logger = logging.getLogger(__name__)

VERIFICATION_SUBJECT = "Verify your email address"


@dataclass
class EmailResult:
    """Результат отправки письма"""

    success: bool
    error: Optional[str] = None


def build_verification_url(base_url: str, token: str) -> str:
    return f"{base_url.rstrip('/')}/auth/verify-email?{urlencode({'token': token})}"


def render_verification_email(verification_url: str) -> tuple[str, str]:
    """
    Формирует HTML и текстовую версии письма подтверждения.

    Returns:
        (html, text)
    """
    html = f"""
    <!DOCTYPE html>
    <html>
    <head><meta charset="utf-8"></head>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
        <div style="background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); padding: 30px; border-radius: 10px 10px 0 0;">
            <h1 style="color: white; margin: 0; font-size: 28px;">🚩 Red Flag Detector</h1>
        </div>
        <div style="background: #f9fafb; padding: 30px; border-radius: 0 0 10px 10px;">
            <h2 style="color: #1f2937; margin-top: 0;">Verify your email address</h2>
            <p style="color: #4b5563; font-size: 16px;">
                Thanks for signing up! Please verify your email address to start analyzing content for red flags.
            </p>
            <div style="text-align: center; margin: 30px 0;">
                <a href="{verification_url}"
                   style="background: #667eea; color: white; padding: 14px 28px; text-decoration: none; border-radius: 6px; font-weight: 600; display: inline-block;">
                    Verify Email Address
                </a>
            </div>
            <p style="color: #6b7280; font-size: 14px;">Or copy and paste this link into your browser:</p>
            <p style="color: #667eea; font-size: 12px; word-break: break-all; background: white; padding: 10px; border-radius: 4px; border: 1px solid #e5e7eb;">
                {verification_url}
            </p>
            <hr style="border: none; border-top: 1px solid #e5e7eb; margin: 30px 0;">
            <p style="color: #9ca3af; font-size: 12px; margin-bottom: 0;">
                If you didn't create an account with Red Flag Detector, you can safely ignore this email.
            </p>
        </div>
    </body>
    </html>
    """
    text = (
        "Red Flag Detector\n\n"
        "Thanks for signing up! Please verify your email address by opening this link:\n"
        f"{verification_url}\n\n"
        "If you didn't create an account with Red Flag Detector, you can safely ignore this email."
    )
    return html, text


class EmailSender:
    """
    SMTP-отправитель транзакционных писем.

    Если SMTP_HOST не задан, письмо не отправляется, а ссылка пишется в лог
    (режим локальной разработки).
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        use_tls: bool,
        sender: str,
        base_url: str,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.sender = sender
        self.base_url = base_url

    def send_verification_email(self, email: str, token: str) -> EmailResult:
        """
        Отправляет письмо со ссылкой подтверждения.

        Args:
            email: Адрес получателя
            token: Токен подтверждения

        Returns:
            EmailResult; исключения SMTP не пробрасываются
        """
        verification_url = build_verification_url(self.base_url, token)

        if not self.host:
            logger.warning(
                "SMTP is not configured, verification link logged instead of sent",
                extra={"recipient": email, "verification_url": verification_url},
            )
            return EmailResult(success=True)

        html, text = render_verification_email(verification_url)
        msg = MIMEMultipart("alternative")
        msg["From"] = self.sender
        msg["To"] = email
        msg["Subject"] = VERIFICATION_SUBJECT
        msg.attach(MIMEText(text, "plain", "utf-8"))
        msg.attach(MIMEText(html, "html", "utf-8"))

        try:
            with smtplib.SMTP(self.host, self.port, timeout=30) as server:
                if self.use_tls:
                    server.starttls()
                if self.username:
                    server.login(self.username, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(
                f"Failed to send verification email to {email}: {e}",
                extra={"recipient": email},
            )
            return EmailResult(success=False, error=str(e) or "Failed to send email")

        logger.info(f"Verification email sent to {email}")
        return EmailResult(success=True)


@lru_cache()
def get_email_sender() -> EmailSender:
    """Dependency: EmailSender, настроенный из конфигурации"""
    settings = get_settings()
    return EmailSender(
        host=settings.smtp_host,
        port=settings.smtp_port,
        username=settings.smtp_username,
        password=settings.smtp_password,
        use_tls=settings.smtp_use_tls,
        sender=settings.email_from,
        base_url=settings.app_base_url,
    )
