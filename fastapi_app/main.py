"""
FastAPI приложение Red Flag Detector
"""

import logging
from contextlib import asynccontextmanager

from config import get_settings
from constants import SERVICE_NAME, SERVICE_VERSION
from core import create_schema, register_error_handlers, setup_logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from server import (
    AuthMiddleware,
    RequestLoggingMiddleware,
    auth_router,
    chat_router,
    file_router,
    maintenance_router,
    router,
    usage_router,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_schema()
    logger.info(f"{SERVICE_NAME} v{SERVICE_VERSION} started")
    yield


def create_app() -> FastAPI:
    """
    Создает и настраивает FastAPI приложение.
    """
    settings = get_settings()
    setup_logging(level=settings.log_level, json_logs=settings.json_logs)

    app = FastAPI(
        title=f"{SERVICE_NAME} API",
        description="API для поиска тревожных сигналов в анкетах, переписках, вакансиях и объявлениях",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )

    # Последний добавленный middleware внешний: CORS -> Auth -> RequestLogging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(AuthMiddleware, require_auth=True)

    # Настройка CORS с whitelist доменов из конфигурации
    allowed_origins = [origin.strip() for origin in settings.cors_allowed_origins.split(",")]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(router)
    app.include_router(auth_router)
    app.include_router(chat_router)
    app.include_router(file_router)
    app.include_router(usage_router)
    app.include_router(maintenance_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
