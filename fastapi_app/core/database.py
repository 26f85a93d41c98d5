"""
Модуль для работы с базой данных
"""

import logging
from functools import lru_cache
from typing import Iterator

from config import get_settings
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session

from .constants import DEFAULT_MAX_OVERFLOW, DEFAULT_POOL_SIZE

logger = logging.getLogger(__name__)


@lru_cache()
def get_sync_engine() -> Engine:
    """
    Создаёт синхронный SQLAlchemy engine.

    Конфигурация пула для PostgreSQL:
    - pool_size=10: базовый размер пула соединений
    - max_overflow=20: дополнительные соединения при пиковой нагрузке
    - pool_pre_ping=True: проверка соединения перед использованием
    - pool_recycle=3600: переиспользование соединения каждый час

    Для SQLite (локальная разработка, тесты) параметры пула не передаются.
    """
    settings = get_settings()
    url = settings.database_endpoint

    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            echo=False,
        )
    else:
        engine = create_engine(
            url,
            pool_pre_ping=True,
            pool_size=DEFAULT_POOL_SIZE,
            max_overflow=DEFAULT_MAX_OVERFLOW,
            pool_recycle=3600,  # 1 час
            echo=False,
        )
    logger.info("Database sync engine initialized", extra={"dialect": engine.dialect.name})
    return engine


def get_db_session() -> Iterator[Session]:
    """
    Dependency для получения сессии базы данных.
    Использует yield pattern для автоматического закрытия сессии.
    """
    session = Session(get_sync_engine())
    try:
        yield session
    finally:
        session.close()


def create_schema() -> None:
    """Создаёт все таблицы моделей, если их ещё нет"""
    from models import Base

    Base.metadata.create_all(get_sync_engine())
    logger.info("Database schema ensured")
