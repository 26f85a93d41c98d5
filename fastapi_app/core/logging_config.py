"""
Конфигурация структурированного логирования.

В development пишет цветной текст в консоль, в production (JSON_LOGS=true)
одну JSON-строку на запись. Поля из extra={...} попадают в JSON как есть,
кроме секретов (пароли, токены, ключи), которые маскируются фильтром.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Атрибуты, которые есть у любой LogRecord; всё остальное пришло из extra
_RECORD_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {
    "message",
    "asctime",
}

SENSITIVE_KEYS = frozenset(
    {
        "password",
        "hashed_password",
        "token",
        "access_token",
        "verification_token",
        "authorization",
        "api_key",
        "secret",
    }
)
MASK = "***"

# Сторонние логгеры, которые слишком разговорчивы на INFO
NOISY_LOGGERS = {
    "urllib3": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "asyncio": logging.WARNING,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "google_genai": logging.WARNING,
    "langsmith": logging.WARNING,
    "passlib": logging.ERROR,
    "PyPDF2": logging.ERROR,
}


def extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Поля, переданные в логгер через extra"""
    return {k: v for k, v in record.__dict__.items() if k not in _RECORD_ATTRS}


class SensitiveDataFilter(logging.Filter):
    """Маскирует значения секретных полей в extra"""

    def filter(self, record: logging.LogRecord) -> bool:
        for key in extra_fields(record):
            if key.lower() in SENSITIVE_KEYS:
                setattr(record, key, MASK)
        return True


class JSONFormatter(logging.Formatter):
    """Форматтер для структурированных JSON логов"""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        log_data.update(extra_fields(record))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            log_data["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class ColoredFormatter(logging.Formatter):
    """
    Форматтер с цветным уровнем для консоли (для разработки).

    Поля из extra дописываются в конец строки как key=value.
    """

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        # Копия, чтобы цвет не попал в другие handlers (например, файл с JSON)
        colored = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelname, self.RESET)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"

        line = super().format(colored)
        extras = extra_fields(record)
        if extras:
            line += " | " + " ".join(f"{k}={v}" for k, v in extras.items())
        return line


def setup_logging(
    level: str = "INFO",
    json_logs: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """
    Настройка логирования для приложения.

    Args:
        level: Уровень логирования (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Использовать JSON формат (для production)
        log_file: Путь к файлу логов (опционально, всегда JSON)

    Example:
        >>> setup_logging(level="DEBUG", json_logs=False)
        >>> logger = logging.getLogger(__name__)
        >>> logger.info("Analysis completed", extra={"chat_id": 42, "score": 7.5})
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = []

    redact = SensitiveDataFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.addFilter(redact)
    if json_logs:
        console_handler.setFormatter(JSONFormatter())
    else:
        console_handler.setFormatter(
            ColoredFormatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.addFilter(redact)
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

    for name, noisy_level in NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(noisy_level)

    root_logger.info(
        "Logging configured",
        extra={"log_level": level, "json_logs": json_logs, "log_file": log_file},
    )
