"""
Централизованная обработка ошибок для FastAPI приложения.

Все ответы об ошибках имеют вид {"error": ..., "message": ..., ["details": ...]},
где error это error_code исключения в нижнем регистре.
"""

import logging
from typing import Any, Dict, Optional, Type

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .exceptions import (
    AnalysisError,
    AppException,
    InvalidCredentialsError,
    RateLimitError,
    StorageError,
)

logger = logging.getLogger(__name__)

# Сообщения, которые заменяют текст исключения в ответе клиенту
PUBLIC_MESSAGES: Dict[Type[AppException], str] = {
    InvalidCredentialsError: "Incorrect email or password",
    StorageError: "Storage service temporarily unavailable",
    AppException: "An unexpected error occurred",
}


def _public_message(exc: AppException) -> str:
    # Только точное совпадение класса: наследники AppException со своим
    # сообщением (EmailDeliveryError, AnalysisError) отдают его как есть
    return PUBLIC_MESSAGES.get(type(exc)) or exc.message or "Request failed"


def build_error_content(exc: AppException) -> Dict[str, Any]:
    """Тело JSON ответа для исключения приложения"""
    content: Dict[str, Any] = {
        "error": exc.error_code.lower(),
        "message": _public_message(exc),
    }
    client_error = exc.status_code < 500 and exc.status_code != status.HTTP_401_UNAUTHORIZED
    if client_error and exc.details:
        content["details"] = exc.details
    if isinstance(exc, AnalysisError):
        content["error_type"] = exc.error_type.value
    return content


def build_error_headers(exc: AppException) -> Optional[Dict[str, str]]:
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        return {"WWW-Authenticate": "Bearer"}
    if isinstance(exc, RateLimitError) and exc.retry_after:
        return {"Retry-After": str(exc.retry_after)}
    return None


def register_error_handlers(app: FastAPI) -> None:
    """
    Регистрирует обработчики ошибок для FastAPI приложения.

    Args:
        app: FastAPI приложение
    """

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        """Обработка всех исключений иерархии AppException"""
        log_extra = {"error_code": exc.error_code, "path": request.url.path, "details": exc.details}
        if isinstance(exc, AnalysisError):
            log_extra["original_error"] = str(exc.original_error)

        if exc.status_code >= 500:
            logger.error(
                f"{type(exc).__name__}: {exc.message}",
                extra=log_extra,
                exc_info=not isinstance(exc, AnalysisError),
            )
        else:
            logger.warning(f"{type(exc).__name__}: {exc.message}", extra=log_extra)

        return JSONResponse(
            status_code=exc.status_code,
            content=build_error_content(exc),
            headers=build_error_headers(exc),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Ошибки валидации тела и параметров запроса (422)"""
        errors = [
            {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
            for error in exc.errors()
        ]
        logger.warning("Request validation failed", extra={"path": request.url.path, "errors": errors})
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": "validation_error",
                "message": errors[0]["msg"] if errors else "Invalid request",
                "details": {"errors": errors},
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Обработка всех необработанных исключений"""
        logger.error(f"Unhandled exception: {exc}", extra={"path": request.url.path}, exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "internal_error",
                "message": "An internal server error occurred",
            },
        )
