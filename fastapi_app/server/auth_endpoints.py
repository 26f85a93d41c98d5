"""
Эндпоинты для авторизации, подтверждения email и управления пользователями
"""

import html
import logging

from core.auth import (
    VerificationOutcome,
    authenticate_user,
    create_access_token,
    create_user,
    get_current_user,
    get_db_session,
    refresh_verification_token,
    verify_email_token,
)
from core.email import EmailSender, get_email_sender
from core.exceptions import EmailDeliveryError, InvalidCredentialsError
from fastapi import APIRouter, Depends, Query, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse
from models import User
from schemas.auth import (
    MessageOnlyResponse,
    ResendVerificationRequest,
    SignupResponse,
    TokenResponse,
    UserLogin,
    UserRegister,
    UserResponse,
)
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

SIGNUP_MESSAGE = "Account created! Please check your email to verify your account."
SIGNUP_EMAIL_FAILED_MESSAGE = (
    "Account created, but we could not send the verification email. "
    "Please request a new verification link."
)
RESEND_GENERIC_MESSAGE = "If an account exists with this email, a verification link has been sent."
RESEND_ALREADY_VERIFIED_MESSAGE = "Email already verified. Please sign in."
RESEND_SUCCESS_MESSAGE = "Verification email sent! Please check your inbox."

VERIFICATION_PAGES = {
    "missing": (status.HTTP_400_BAD_REQUEST, "Invalid link", "The verification link is missing a token."),
    VerificationOutcome.INVALID: (
        status.HTTP_404_NOT_FOUND,
        "Invalid link",
        "This verification link is invalid or has already been used.",
    ),
    VerificationOutcome.EXPIRED: (
        status.HTTP_410_GONE,
        "Link expired",
        "This verification link has expired. Please request a new one from the sign in page.",
    ),
    VerificationOutcome.ALREADY_VERIFIED: (
        status.HTTP_200_OK,
        "Already verified",
        "Your email is already verified. You can sign in.",
    ),
    VerificationOutcome.VERIFIED: (
        status.HTTP_200_OK,
        "Email verified",
        "Your email has been verified. You can now sign in.",
    ),
}


def _verification_page(key) -> HTMLResponse:
    status_code, title, text = VERIFICATION_PAGES[key]
    body = f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>{html.escape(title)} - Red Flag Detector</title></head>
<body style="font-family: Arial, sans-serif; max-width: 480px; margin: 80px auto; text-align: center; color: #1f2937;">
    <h1>🚩 {html.escape(title)}</h1>
    <p>{html.escape(text)}</p>
</body>
</html>"""
    return HTMLResponse(content=body, status_code=status_code)


@router.post("/register", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    user_data: UserRegister,
    db: Session = Depends(get_db_session),
    email_sender: EmailSender = Depends(get_email_sender),
):
    """
    Регистрирует нового пользователя и отправляет письмо подтверждения.

    Токен доступа не выдаётся: вход возможен только после подтверждения email.
    Ошибка отправки письма не отменяет регистрацию.

    Args:
        user_data: Email, пароль и имя
        db: Сессия базы данных
        email_sender: Отправитель писем

    Returns:
        SignupResponse с ID пользователя
    """
    logger.info(f"Registration request for email: {user_data.email}")

    # ResourceAlreadyExistsError обрабатывается error handler
    user = create_user(db, email=user_data.email, password=user_data.password, name=user_data.name)
    logger.info(f"User registered successfully: {user.email} (ID: {user.id})")

    # smtplib блокирует, отправка идёт в пуле потоков
    result = await run_in_threadpool(
        email_sender.send_verification_email, user.email, user.verification_token
    )
    if not result.success:
        logger.error(
            f"Verification email was not sent for user_id={user.id}: {result.error}",
            extra={"recipient": user.email},
        )

    return SignupResponse(
        message=SIGNUP_MESSAGE if result.success else SIGNUP_EMAIL_FAILED_MESSAGE,
        user_id=user.id,
        email_sent=result.success,
    )


@router.post("/login", response_model=TokenResponse)
async def login_user(
    user_data: UserLogin,
    db: Session = Depends(get_db_session),
):
    """
    Аутентифицирует пользователя и возвращает JWT токен.

    Args:
        user_data: Email и пароль для входа
        db: Сессия базы данных

    Returns:
        JWT токен и информация о пользователе

    Raises:
        InvalidCredentialsError: Неверный email или пароль
        EmailNotVerifiedError: Email не подтверждён
    """
    logger.info(f"Login request for email: {user_data.email}")

    user = authenticate_user(db, email=user_data.email, password=user_data.password)

    if not user:
        logger.warning(f"Authentication failed for email: {user_data.email}")
        raise InvalidCredentialsError("Invalid email or password")

    logger.info(f"User logged in successfully: {user.email} (ID: {user.id})")

    access_token = create_access_token(user.id, user.email)

    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        user=UserResponse.from_user(user),
    )


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: User = Depends(get_current_user),
):
    """Информация о текущем пользователе по JWT токену"""
    logger.info(f"[ME] User info requested: id={current_user.id}, email={current_user.email}")
    return UserResponse.from_user(current_user)


@router.get("/verify-email", response_class=HTMLResponse)
async def verify_email(
    token: str = Query(default=""),
    db: Session = Depends(get_db_session),
):
    """
    Подтверждает email по ссылке из письма и отдаёт HTML страницу с результатом.

    400 - токена нет, 404 - токен неизвестен, 410 - срок истёк,
    200 - email подтверждён (или уже был подтверждён).
    """
    token = token.strip()
    if not token:
        logger.warning("[VERIFY] Verification request without token")
        return _verification_page("missing")

    outcome = verify_email_token(db, token)
    logger.info(f"[VERIFY] Verification outcome: {outcome.value}")
    return _verification_page(outcome)


@router.post("/resend-verification", response_model=MessageOnlyResponse)
async def resend_verification(
    request_data: ResendVerificationRequest,
    db: Session = Depends(get_db_session),
    email_sender: EmailSender = Depends(get_email_sender),
):
    """
    Выпускает новый токен подтверждения и отправляет письмо повторно.

    Для неизвестного email ответ такой же, как при успехе, чтобы
    нельзя было проверить наличие аккаунта.

    Raises:
        EmailDeliveryError: Письмо не удалось отправить
    """
    user = refresh_verification_token(db, request_data.email)

    if not user:
        logger.info("[VERIFY] Resend requested for unknown email")
        return MessageOnlyResponse(message=RESEND_GENERIC_MESSAGE)

    if user.is_email_verified:
        return MessageOnlyResponse(message=RESEND_ALREADY_VERIFIED_MESSAGE)

    # smtplib блокирует, отправка идёт в пуле потоков
    result = await run_in_threadpool(
        email_sender.send_verification_email, user.email, user.verification_token
    )
    if not result.success:
        raise EmailDeliveryError(
            "Failed to send verification email. Please try again.",
            details={"reason": result.error},
        )

    logger.info(f"[VERIFY] Verification email resent to user_id={user.id}")
    return MessageOnlyResponse(message=RESEND_SUCCESS_MESSAGE)
