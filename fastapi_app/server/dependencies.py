"""
Dependencies для эндпоинтов
"""

from functools import lru_cache

from analysis import CategoryDetector, RedFlagAnalyzer
from analysis.llm import create_chat_model
from config import get_settings


@lru_cache()
def get_detector() -> CategoryDetector:
    """
    Dependency: классификатор категорий.

    Низкая температура и короткий ответ: нужен только JSON с категорией.
    """
    settings = get_settings()
    llm = create_chat_model(
        temperature=settings.detection_temperature,
        max_output_tokens=settings.detection_max_tokens,
    )
    return CategoryDetector(llm, confidence_threshold=settings.detection_confidence_threshold)


@lru_cache()
def get_analyzer() -> RedFlagAnalyzer:
    """Dependency: анализатор тревожных сигналов с повторами"""
    settings = get_settings()
    llm = create_chat_model(
        temperature=settings.analysis_temperature,
        max_output_tokens=settings.analysis_max_tokens,
    )
    return RedFlagAnalyzer(
        llm,
        max_attempts=settings.retry_max_attempts,
        retry_delays=settings.retry_delays,
    )
