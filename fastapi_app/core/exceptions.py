"""
Кастомные исключения приложения
"""

from enum import Enum
from typing import Any, Dict, Optional


class AppException(Exception):
    """Базовое исключение приложения с поддержкой HTTP статус кодов"""

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message
        self.details = details or {}
        if status_code:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Сериализация исключения в словарь для JSON ответа"""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class StorageError(AppException):
    """Ошибки при работе с S3/MinIO"""

    status_code = 503
    error_code = "STORAGE_ERROR"


# Analysis exceptions
class ErrorType(str, Enum):
    """Тип ошибки анализа: определяет, имеет ли смысл повторять запрос к LLM"""

    TRANSIENT = "transient"
    PERMANENT = "permanent"
    PARSING = "parsing"


class AnalysisError(AppException):
    """
    Ошибка при анализе контента через LLM.

    Attributes:
        error_type: Классификация ошибки (transient/permanent/parsing)
        original_error: Исходное исключение провайдера, если есть
    """

    error_code = "ANALYSIS_ERROR"

    STATUS_BY_TYPE = {
        ErrorType.TRANSIENT: 503,
        ErrorType.PERMANENT: 400,
        ErrorType.PARSING: 502,
    }

    def __init__(
        self,
        message: str,
        error_type: ErrorType,
        original_error: Optional[BaseException] = None,
    ):
        super().__init__(
            message=message,
            details={"error_type": error_type.value},
            status_code=self.STATUS_BY_TYPE[error_type],
        )
        self.error_type = error_type
        self.original_error = original_error


class EmailDeliveryError(AppException):
    """Не удалось отправить письмо"""

    status_code = 500
    error_code = "EMAIL_DELIVERY_ERROR"


# Auth exceptions
class AuthenticationError(AppException):
    """Ошибка аутентификации"""

    status_code = 401
    error_code = "AUTHENTICATION_ERROR"


class UnauthorizedError(AppException):
    """Неавторизованный доступ"""

    status_code = 401
    error_code = "UNAUTHORIZED"


class InvalidCredentialsError(AuthenticationError):
    """Неверные учетные данные"""

    status_code = 401
    error_code = "INVALID_CREDENTIALS"


class ForbiddenError(AppException):
    """Доступ запрещен"""

    status_code = 403
    error_code = "FORBIDDEN"


class EmailNotVerifiedError(ForbiddenError):
    """Email пользователя ещё не подтверждён"""

    error_code = "EMAIL_NOT_VERIFIED"

    def __init__(self, email: str):
        super().__init__(
            message="Please verify your email before signing in",
            details={"email": email},
        )


# Resource exceptions
class ResourceNotFoundError(AppException):
    """Ресурс не найден"""

    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, resource_type: str, resource_id: str | int):
        super().__init__(
            message=f"{resource_type} with id '{resource_id}' not found",
            details={"resource_type": resource_type, "resource_id": str(resource_id)},
        )


class ResourceAlreadyExistsError(AppException):
    """Ресурс уже существует"""

    status_code = 409
    error_code = "ALREADY_EXISTS"

    def __init__(self, resource_type: str, identifier: str, message: Optional[str] = None):
        super().__init__(
            message=message or f"{resource_type} with identifier '{identifier}' already exists",
            details={"resource_type": resource_type, "identifier": identifier},
        )


# Validation exceptions
class ValidationError(AppException):
    """Ошибка валидации данных"""

    status_code = 400
    error_code = "VALIDATION_ERROR"


# Rate limiting
class RateLimitError(AppException):
    """Превышен лимит запросов"""

    status_code = 429
    error_code = "RATE_LIMIT_EXCEEDED"

    def __init__(
        self,
        message: str = "Too many requests",
        retry_after: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, details=details)
        self.retry_after = retry_after
        if retry_after:
            self.details["retry_after"] = retry_after
