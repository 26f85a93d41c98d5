"""
Модуль для работы с авторизацией и подтверждением email
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

import jwt
from config import get_settings
from core.constants import MAX_PASSWORD_LENGTH_BYTES, VERIFICATION_TOKEN_BYTES
from core.database import get_db_session
from core.exceptions import EmailNotVerifiedError, ResourceAlreadyExistsError, UnauthorizedError
from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from models import User
from passlib.context import CryptContext
from repositories import UserRepository
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

# Схема безопасности для Bearer токена
security = HTTPBearer()

# Контекст для хеширования паролей
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class VerificationOutcome(str, Enum):
    """Результат проверки токена подтверждения email"""

    VERIFIED = "verified"
    ALREADY_VERIFIED = "already_verified"
    EXPIRED = "expired"
    INVALID = "invalid"


def _truncate_password(password: str) -> str:
    # Bcrypt имеет ограничение в 72 байта; обрезаем по границе UTF-8 символа
    password_bytes = password.encode("utf-8")[:MAX_PASSWORD_LENGTH_BYTES]
    return password_bytes.decode("utf-8", errors="ignore")


def _as_utc(value: datetime) -> datetime:
    # SQLite возвращает naive datetime даже для timezone=True колонок
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def hash_password(password: str) -> str:
    """
    Хеширует пароль с учетом ограничения bcrypt в 72 байта.

    Args:
        password: Пароль для хеширования

    Returns:
        Хешированный пароль
    """
    return pwd_context.hash(_truncate_password(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Проверяет пароль с учетом ограничения bcrypt в 72 байта.

    Args:
        plain_password: Пароль для проверки
        hashed_password: Хешированный пароль для сравнения

    Returns:
        True если пароль совпадает, иначе False
    """
    return pwd_context.verify(_truncate_password(plain_password), hashed_password)


def generate_verification_token() -> str:
    """Случайный url-safe токен из 32 символов"""
    return secrets.token_urlsafe(VERIFICATION_TOKEN_BYTES)


def _verification_expiry() -> datetime:
    settings = get_settings()
    return datetime.now(timezone.utc) + timedelta(hours=settings.verification_token_expire_hours)


def create_access_token(user_id: int, email: str) -> str:
    """Создает JWT токен"""
    settings = get_settings()
    expire = datetime.now(timezone.utc) + timedelta(days=settings.auth_access_token_expire_days)
    to_encode = {
        "sub": str(user_id),
        "email": email,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.auth_secret_key, algorithm=settings.auth_algorithm)


def decode_access_token(token: str) -> Optional[dict]:
    """Декодирует JWT токен"""
    settings = get_settings()
    try:
        return jwt.decode(token, settings.auth_secret_key, algorithms=[settings.auth_algorithm])
    except jwt.ExpiredSignatureError:
        logger.warning("Token expired")
        return None
    except jwt.PyJWTError as e:
        logger.warning(f"JWT decode error: {e}")
        return None


def create_user(db: Session, email: str, password: str, name: Optional[str] = None) -> User:
    """
    Создает нового пользователя с неподтверждённым email и токеном подтверждения.

    Args:
        db: Сессия базы данных
        email: Email пользователя
        password: Пароль пользователя
        name: Отображаемое имя (опционально)

    Returns:
        Созданный пользователь

    Raises:
        ResourceAlreadyExistsError: Если пользователь с таким email уже существует
    """
    users = UserRepository(db)
    if users.get_by_email(email):
        raise ResourceAlreadyExistsError(
            "User", email, message="An account with this email already exists"
        )

    user = users.create_unverified(
        email=email,
        hashed_password=hash_password(password),
        name=name,
        verification_token=generate_verification_token(),
        verification_token_expires_at=_verification_expiry(),
    )
    logger.info(f"Created user: {user.email} (ID: {user.id}), awaiting email verification")
    return user


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """
    Аутентифицирует пользователя по email и паролю.

    Args:
        db: Сессия базы данных
        email: Email пользователя
        password: Пароль пользователя

    Returns:
        Пользователь, если аутентификация успешна, иначе None

    Raises:
        EmailNotVerifiedError: Пароль верный, но email ещё не подтверждён
    """
    user = UserRepository(db).get_active_by_email(email)

    if not user:
        return None

    if not verify_password(password, user.hashed_password):
        return None

    if not user.is_email_verified:
        raise EmailNotVerifiedError(user.email)

    return user


def verify_email_token(db: Session, token: str) -> VerificationOutcome:
    """
    Подтверждает email по токену из письма.

    Истёкший токен не удаляется: пользователь может запросить новое письмо.

    Args:
        db: Сессия базы данных
        token: Токен из ссылки

    Returns:
        Результат проверки
    """
    users = UserRepository(db)
    user = users.get_by_verification_token(token)
    if not user:
        return VerificationOutcome.INVALID

    if user.is_email_verified:
        return VerificationOutcome.ALREADY_VERIFIED

    expires_at = user.verification_token_expires_at
    if expires_at is not None and _as_utc(expires_at) < datetime.now(timezone.utc):
        logger.info(f"Verification token expired for user_id={user.id}")
        return VerificationOutcome.EXPIRED

    user.email_verified_at = datetime.now(timezone.utc)
    user.verification_token = None
    user.verification_token_expires_at = None
    users.save(user)

    logger.info(f"Email verified: {user.email} (ID: {user.id})")
    return VerificationOutcome.VERIFIED


def refresh_verification_token(db: Session, email: str) -> Optional[User]:
    """
    Выпускает новый токен подтверждения со свежим сроком действия.

    Returns:
        Пользователь с новым токеном, None если пользователь не найден.
        Для уже подтверждённого пользователя токен не меняется.
    """
    users = UserRepository(db)
    user = users.get_active_by_email(email)
    if not user or user.is_email_verified:
        return user

    user.verification_token = generate_verification_token()
    user.verification_token_expires_at = _verification_expiry()
    return users.save(user)


def verify_token(token: str, db: Session) -> Optional[User]:
    """
    Проверяет JWT токен и возвращает пользователя.

    Args:
        token: JWT токен для проверки
        db: Сессия базы данных

    Returns:
        Пользователь, если токен валиден, иначе None
    """
    try:
        payload = decode_access_token(token)
        if not payload:
            return None

        user_id = payload.get("sub")
        if not user_id:
            logger.warning("Token payload missing 'sub' claim")
            return None

        user = UserRepository(db).get_active(int(user_id))
        if not user:
            logger.warning(f"User with id {user_id} not found or inactive")

        return user
    except (ValueError, TypeError) as e:
        logger.error(f"Error verifying token: {e}")
        return None


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Security(security),
    db: Session = Depends(get_db_session),
) -> User:
    """
    Dependency для получения текущего пользователя из JWT токена.

    Raises:
        UnauthorizedError: Если токен невалиден
    """
    user = verify_token(credentials.credentials, db)

    if not user:
        raise UnauthorizedError("Invalid or expired token")

    return user
