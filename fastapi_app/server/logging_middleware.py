"""
Middleware для логирования HTTP запросов
"""

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
PROCESS_TIME_HEADER = "X-Process-Time"

# Частые служебные запросы логируются на DEBUG
QUIET_PATHS = frozenset({"/health"})


def status_log_level(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Пишет одну запись на запрос: метод, путь, статус, длительность и пользователь.

    Работает внутри AuthMiddleware, поэтому request.state.user уже заполнен
    для авторизованных запросов. Отдаёт X-Request-ID (из запроса или новый)
    и X-Process-Time в заголовках ответа.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        context = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "client_host": request.client.host if request.client else None,
            "user_id": getattr(request.state, "user_id", None),
        }

        try:
            response = await call_next(request)
        except Exception:
            context["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)
            logger.exception("Request failed with unhandled exception", extra=context)
            raise

        duration_ms = (time.perf_counter() - started) * 1000
        context["status_code"] = response.status_code
        context["duration_ms"] = round(duration_ms, 2)

        level = status_log_level(response.status_code)
        if level == logging.INFO and request.url.path in QUIET_PATHS:
            level = logging.DEBUG
        logger.log(level, f"{request.method} {request.url.path} -> {response.status_code}", extra=context)

        response.headers[PROCESS_TIME_HEADER] = f"{duration_ms:.2f}ms"
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
