"""
Middleware для проверки авторизации
"""

import logging
from typing import Optional

from core.auth import verify_token
from core.database import get_sync_engine
from fastapi import Request, status
from fastapi.responses import JSONResponse
from models import User
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

# Пути, доступные без Bearer токена
PUBLIC_PATHS = frozenset(
    {
        "/health",
        "/openapi.json",
        "/auth/register",
        "/auth/login",
        "/auth/verify-email",
        "/auth/resend-verification",
        "/analysis/categories",
    }
)

# /cron/ защищён собственным секретом (CRON_SECRET)
PUBLIC_PREFIXES = ("/docs", "/redoc", "/cron/")


def is_public_path(path: str) -> bool:
    return path in PUBLIC_PATHS or path.startswith(PUBLIC_PREFIXES)


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Токен из заголовка вида 'Bearer <jwt>' или None"""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def _unauthorized(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"error": "unauthorized", "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


class AuthMiddleware(BaseHTTPMiddleware):
    """
    Отклоняет запросы без валидного JWT ко всем непубличным маршрутам.

    Найденный пользователь кладётся в request.state.user / request.state.user_id,
    откуда его читают RequestLoggingMiddleware и эндпоинты.
    """

    def __init__(self, app, require_auth: bool = True):
        """
        Args:
            app: FastAPI приложение
            require_auth: Требовать ли авторизацию (можно отключить для разработки)
        """
        super().__init__(app)
        self.require_auth = require_auth

    async def dispatch(self, request: Request, call_next):
        if (
            not self.require_auth
            or request.method == "OPTIONS"
            or is_public_path(request.url.path)
        ):
            return await call_next(request)

        token = extract_bearer_token(request.headers.get("Authorization"))
        if not token:
            return _unauthorized("Missing authorization token")

        try:
            user = self._authenticate(token)
        except SQLAlchemyError as e:
            logger.error(f"Database error while verifying token: {e}", exc_info=True)
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"error": "database_error", "message": "Authentication is temporarily unavailable"},
            )

        if user is None:
            return _unauthorized("Invalid or expired token")

        request.state.user = user
        request.state.user_id = user.id
        logger.debug("Authenticated request", extra={"user_id": user.id})

        # Ошибки эндпоинтов обрабатывают глобальные error handlers
        return await call_next(request)

    @staticmethod
    def _authenticate(token: str) -> Optional[User]:
        with Session(get_sync_engine(), expire_on_commit=False) as db:
            user = verify_token(token, db)
            if user is None or not user.is_active:
                return None
            # Объект используется после закрытия сессии
            db.expunge(user)
            return user
