"""
Централизованная конфигурация приложения
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Настройки приложения с валидацией через Pydantic"""

    # Database
    database_endpoint: str

    # S3/MinIO
    s3_endpoint: str
    s3_access_key: str
    s3_secret_key: str
    s3_bucket: str = "red-flag-detector"
    s3_secure: bool = False

    # LLM (Google Gemini)
    google_api_key: str = ""
    model_name: str = "gemini-2.5-flash"
    analysis_temperature: float = 0.7
    detection_temperature: float = 0.3
    analysis_max_tokens: int = 2048
    detection_max_tokens: int = 256
    llm_timeout_seconds: float = 60.0
    retry_max_attempts: int = 3
    retry_delays: List[float] = [1.0, 3.0, 5.0]
    detection_confidence_threshold: float = 0.7

    # Security
    auth_secret_key: str
    auth_algorithm: str = "HS256"
    auth_access_token_expire_days: int = 30
    verification_token_expire_hours: int = 24

    # Email (SMTP)
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_use_tls: bool = True
    email_from: str = "Red Flag Detector <noreply@redflagdetector.app>"
    app_base_url: str = "http://localhost:8000"  # публичный адрес API для ссылок в письмах

    # Лимиты использования
    daily_analysis_limit: int = 2
    monthly_analysis_limit: int = 10
    global_daily_limit: int = 1400

    # Хранение файлов
    file_retention_days: int = 7
    max_upload_size_mb: int = 100

    # Cron
    cron_secret: str = ""

    # CORS
    cors_allowed_origins: str = "http://localhost:8501,http://localhost:3000"

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Возвращает синглтон настроек"""
    return Settings()
