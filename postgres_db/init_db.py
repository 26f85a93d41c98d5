"""
Создание схемы базы данных Red Flag Detector.

Запуск (после `pip install -e .`):
    python postgres_db/init_db.py

Ждёт, пока PostgreSQL начнёт принимать подключения, и создаёт таблицы
users, chats, messages, uploaded_files и usage_logs, если их ещё нет.
"""

import logging

from config import get_settings
from core.database import create_schema, get_sync_engine
from core.logging_config import setup_logging
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

logger = logging.getLogger(__name__)


@retry(
    stop=stop_after_attempt(10),
    wait=wait_fixed(3),
    retry=retry_if_exception_type(OperationalError),
    reraise=True,
)
def wait_for_database() -> None:
    with get_sync_engine().connect() as conn:
        conn.execute(text("SELECT 1"))


def main() -> None:
    settings = get_settings()
    setup_logging(level=settings.log_level)

    logger.info("Waiting for database")
    wait_for_database()

    create_schema()
    logger.info("Database is ready")


if __name__ == "__main__":
    main()
