"""Конфигурация приложения."""

import os
from dataclasses import dataclass


@dataclass
class PageConfig:
    """Конфигурация страницы Streamlit."""

    title: str
    icon: str
    layout: str = "wide"
    initial_sidebar_state: str = "expanded"


@dataclass
class AppConfig:
    """Основная конфигурация приложения."""

    # API настройки
    api_url: str = os.getenv("API_URL", "http://localhost:8000")
    api_timeout: int = int(os.getenv("API_TIMEOUT", "60"))

    # Пагинация
    default_chats_limit: int = 100
    default_messages_limit: int = 100

    # Логирование
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_format: str = "[STREAMLIT] %(asctime)s - %(message)s"


# Конфигурации страниц
PAGE_CONFIGS = {
    "main": PageConfig(
        title="Red Flag Detector",
        icon="🚩",
        layout="wide",
        initial_sidebar_state="expanded"
    ),
    "auth": PageConfig(
        title="Вход - Red Flag Detector",
        icon="🔐",
        layout="centered",
        initial_sidebar_state="collapsed"
    ),
    "chat": PageConfig(
        title="Анализ - Red Flag Detector",
        icon="🚩",
        layout="wide",
        initial_sidebar_state="expanded"
    ),
}


# Глобальная конфигурация
app_config = AppConfig()
