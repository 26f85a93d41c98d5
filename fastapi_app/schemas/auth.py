"""
Схемы для авторизации и работы с пользователями
"""

import re
from datetime import datetime
from typing import Optional

from core.constants import (
    MAX_EMAIL_LENGTH,
    MAX_NAME_LENGTH,
    MAX_PASSWORD_LENGTH_CHARS,
    MIN_EMAIL_LENGTH,
    MIN_PASSWORD_LENGTH,
)
from pydantic import BaseModel, Field, field_validator

EMAIL_PATTERN = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"


def _normalize_email(v: str) -> str:
    v = v.strip()
    if not re.match(EMAIL_PATTERN, v):
        raise ValueError("Invalid email format")
    return v.lower()


class UserRegister(BaseModel):
    """
    Схема для регистрации нового пользователя.

    Attributes:
        email: Email пользователя (должен быть валидным)
        password: Пароль (8-100 символов, заглавные, строчные буквы и цифры)
        name: Отображаемое имя (опционально)
    """

    email: str = Field(
        ...,
        min_length=MIN_EMAIL_LENGTH,
        max_length=MAX_EMAIL_LENGTH,
        description="Email пользователя",
        examples=["alex@example.com"],
    )
    password: str = Field(
        ...,
        min_length=MIN_PASSWORD_LENGTH,
        max_length=MAX_PASSWORD_LENGTH_CHARS,
        description="Пароль (минимум 8 символов, должен содержать заглавные, строчные буквы и цифры)",
        examples=["SecurePassword123!"],
    )
    name: Optional[str] = Field(
        default=None,
        max_length=MAX_NAME_LENGTH,
        description="Имя пользователя",
        examples=["Alex"],
    )

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Нормализует email (lowercase, без пробелов) и проверяет формат"""
        return _normalize_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        """
        Валидация надёжности пароля.

        Требования:
        - Минимум одна заглавная буква
        - Минимум одна строчная буква
        - Минимум одна цифра

        Raises:
            ValueError: Если пароль не соответствует требованиям
        """
        if not re.search(r"[A-Z]", v):
            raise ValueError("Password must contain at least one uppercase letter")
        if not re.search(r"[a-z]", v):
            raise ValueError("Password must contain at least one lowercase letter")
        if not re.search(r"[0-9]", v):
            raise ValueError("Password must contain at least one digit")
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "email": "alex@example.com",
                    "password": "SecurePassword123!",
                    "name": "Alex",
                }
            ]
        }
    }


class UserLogin(BaseModel):
    """Схема для входа пользователя"""

    email: str = Field(
        ...,
        min_length=MIN_EMAIL_LENGTH,
        max_length=MAX_EMAIL_LENGTH,
        description="Email пользователя",
    )
    password: str = Field(
        ...,
        min_length=1,
        max_length=MAX_PASSWORD_LENGTH_CHARS,
        description="Пароль",
    )

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _normalize_email(v)


class ResendVerificationRequest(BaseModel):
    """Запрос на повторную отправку письма подтверждения"""

    email: str = Field(..., min_length=MIN_EMAIL_LENGTH, max_length=MAX_EMAIL_LENGTH)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _normalize_email(v)


class UserResponse(BaseModel):
    """Схема ответа с информацией о пользователе"""

    id: int
    email: str
    name: Optional[str] = None
    email_verified: bool = False
    created_at: datetime
    is_active: bool

    @classmethod
    def from_user(cls, user) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            email_verified=user.is_email_verified,
            created_at=user.created_at,
            is_active=user.is_active,
        )


class TokenResponse(BaseModel):
    """Схема ответа с JWT токеном"""

    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class SignupResponse(BaseModel):
    """Ответ на регистрацию: вход возможен только после подтверждения email"""

    success: bool = True
    message: str
    user_id: int
    email_sent: bool


class MessageOnlyResponse(BaseModel):
    """Простой ответ с сообщением для пользователя"""

    success: bool = True
    message: str
