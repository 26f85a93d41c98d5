"""
Pydantic модели для API ответов
"""

from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from analysis import AnalysisResult, CategoryDetectionResult
from pydantic import BaseModel, Field


class UsageResponse(BaseModel):
    """Текущее использование и лимиты"""

    daily_usage: int
    daily_limit: int
    monthly_usage: int
    monthly_limit: int
    can_analyze: bool
    reset_time: datetime = Field(description="Следующая полночь UTC")


class AnalyzeResponse(BaseModel):
    """Результат анализа контента"""

    chat_id: int
    message_id: UUID
    category: str = Field(description="Категория, по которой выполнен анализ")
    detection: CategoryDetectionResult
    analysis: AnalysisResult
    explanation: str = Field(description="Пояснение модели на естественном языке")
    usage: UsageResponse
    latency_ms: float = Field(default=0.0, description="Время выполнения запроса в миллисекундах")


class CategoryInfoResponse(BaseModel):
    """Описание категории для UI"""

    id: str
    name: str
    emoji: str
    description: str


class CategoryListResponse(BaseModel):
    categories: List[CategoryInfoResponse]


class FileUploadResponse(BaseModel):
    """Результат загрузки файла"""

    id: UUID
    url: str = Field(description="Путь API для скачивания файла")
    pathname: str = Field(description="Имя файла")
    content_type: str
    size: int
    auto_delete_at: datetime


class CleanupResponse(BaseModel):
    """Отчёт задачи очистки файлов"""

    success: bool = True
    message: Optional[str] = None
    deleted: int = 0
    failed: int = 0
    details: Dict[str, List[str]] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    database: str
    s3: str
