"""
Эндпоинты FastAPI приложения: анализ, категории, health
"""

import logging

from analysis import (
    CATEGORY_INFO,
    CategoryDetectionResult,
    CategoryDetector,
    RedFlagAnalyzer,
    get_available_categories,
)
from constants import (
    SERVICE_NAME,
    SERVICE_VERSION,
    STATUS_CONNECTED,
    STATUS_DEGRADED,
    STATUS_DISCONNECTED,
    STATUS_HEALTHY,
)
from core import get_storage_client_wrapper, get_sync_engine
from core.auth import get_current_user, get_db_session
from core.storage_client import StorageClient
from fastapi import APIRouter, Depends
from langsmith import traceable
from models import User
from schemas import (
    AnalyzeRequest,
    AnalyzeResponse,
    CategoryInfoResponse,
    CategoryListResponse,
    DetectRequest,
    HealthResponse,
    UsageResponse,
)
from services import AnalysisService
from sqlalchemy import text
from sqlalchemy.orm import Session

from .dependencies import get_analyzer, get_detector

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/analysis", response_model=AnalyzeResponse, tags=["Analysis"])
@traceable(name="analyze_content", run_type="chain")
async def analyze_content(
    request: AnalyzeRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
    storage: StorageClient = Depends(get_storage_client_wrapper),
    detector: CategoryDetector = Depends(get_detector),
    analyzer: RedFlagAnalyzer = Depends(get_analyzer),
):
    """
    Анализирует контент на тревожные сигналы.

    Создает новый чат или использует существующий. Если категория не передана,
    она определяется автоматически. Успешный анализ учитывается в лимитах.

    Ошибки (обрабатываются error handlers):
    - 429: исчерпан дневной, месячный или глобальный лимит
    - 404: чат или файл не найдены
    - 503/400/502: ошибка анализа (временная, постоянная, разбор ответа)
    """
    logger.info(
        f"[ANALYZE] Request from user_id={current_user.id}",
        extra={
            "chat_id": request.chat_id,
            "category": request.category.value if request.category else None,
            "content_length": len(request.content),
            "file_count": len(request.file_ids),
        },
    )

    service = AnalysisService(db, storage, detector, analyzer)
    run = await service.run(
        current_user,
        request.content,
        chat_id=request.chat_id,
        category=request.category,
        file_ids=request.file_ids,
    )

    return AnalyzeResponse(
        chat_id=run.chat.id,
        message_id=run.message.id,
        category=run.category.value,
        detection=run.detection,
        analysis=run.outcome.result,
        explanation=run.outcome.explanation,
        usage=UsageResponse(
            daily_usage=run.usage.daily_usage,
            daily_limit=run.usage.daily_limit,
            monthly_usage=run.usage.monthly_usage,
            monthly_limit=run.usage.monthly_limit,
            can_analyze=run.usage.can_analyze,
            reset_time=run.usage.reset_time,
        ),
        latency_ms=run.latency_ms,
    )


@router.post("/analysis/detect", response_model=CategoryDetectionResult, tags=["Analysis"])
@traceable(name="detect_category_endpoint", run_type="chain")
async def detect_category(
    request: DetectRequest,
    current_user: User = Depends(get_current_user),
    detector: CategoryDetector = Depends(get_detector),
):
    """Определяет категорию контента без анализа (не учитывается в лимитах)"""
    logger.info(f"[DETECT] Request from user_id={current_user.id}")
    return await detector.detect(request.content)


@router.get("/analysis/categories", response_model=CategoryListResponse, tags=["Analysis"])
async def list_categories():
    """Список категорий анализа с описаниями для UI"""
    return CategoryListResponse(
        categories=[
            CategoryInfoResponse(id=category.value, **CATEGORY_INFO[category])
            for category in get_available_categories()
        ]
    )


@router.get("/health", response_model=HealthResponse)
def health_check():
    """
    Проверка работоспособности API и подключения к внешним сервисам.
    """
    health_status = {
        "status": STATUS_HEALTHY,
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "database": "unknown",
        "s3": "unknown",
    }

    try:
        engine = get_sync_engine()
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        health_status["database"] = STATUS_CONNECTED
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        health_status["database"] = STATUS_DISCONNECTED
        health_status["status"] = STATUS_DEGRADED

    try:
        get_storage_client_wrapper().ping()
        health_status["s3"] = STATUS_CONNECTED
    except Exception as e:
        logger.error(f"S3 health check failed: {e}")
        health_status["s3"] = STATUS_DISCONNECTED
        health_status["status"] = STATUS_DEGRADED

    return health_status
