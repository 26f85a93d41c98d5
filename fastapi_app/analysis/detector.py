"""
Автоматическое определение категории контента через LLM
"""

import logging
import math
from typing import Any, Dict

from langchain_core.messages import HumanMessage, SystemMessage
from langsmith import traceable
from prompts import DETECTION_PROMPT

from .categories import DEFAULT_CATEGORY, RedFlagCategory, quick_detect_category
from .json_extraction import extract_json
from .llm import message_text
from .models import CategoryDetectionResult

logger = logging.getLogger(__name__)

FALLBACK_CONFIDENCE = 0.5


def parse_detection_result(text: str) -> CategoryDetectionResult:
    """
    Разбирает и валидирует ответ классификатора.

    - неизвестная категория -> general с уверенностью 0.5
    - уверенность не число или вне [0, 1] -> 0.5, категория сохраняется
    - неразбираемый ответ -> general с уверенностью 0.5
    """
    try:
        data: Dict[str, Any] = extract_json(text, "category")
    except ValueError as e:
        logger.warning(f"[DETECT] Failed to parse detection result: {e}")
        return CategoryDetectionResult(
            category=DEFAULT_CATEGORY,
            confidence=FALLBACK_CONFIDENCE,
            reasoning="Failed to parse detection result",
        )

    raw_category = data.get("category")
    try:
        category = RedFlagCategory(raw_category)
    except ValueError:
        return CategoryDetectionResult(
            category=DEFAULT_CATEGORY,
            confidence=FALLBACK_CONFIDENCE,
            reasoning=f'Invalid category "{raw_category}", falling back to general',
        )

    confidence = data.get("confidence")
    if (
        isinstance(confidence, bool)
        or not isinstance(confidence, (int, float))
        or math.isnan(confidence)
        or not 0 <= confidence <= 1
    ):
        confidence = FALLBACK_CONFIDENCE

    return CategoryDetectionResult(
        category=category,
        confidence=float(confidence),
        reasoning=str(data.get("reasoning") or "No reasoning provided"),
    )


class CategoryDetector:
    """
    Классификатор контента по категориям на базе LLM.

    Никогда не выбрасывает исключений: при любой ошибке возвращает
    безопасный fallback.
    """

    def __init__(self, llm, confidence_threshold: float = 0.7):
        """
        Args:
            llm: LangChain chat model (нужен только ainvoke)
            confidence_threshold: Минимальная уверенность для принятия категории
        """
        self.llm = llm
        self.confidence_threshold = confidence_threshold

    @traceable(name="detect_category", run_type="chain")
    async def detect(self, content: str) -> CategoryDetectionResult:
        """
        Определяет категорию контента.

        Args:
            content: Текст пользователя

        Returns:
            CategoryDetectionResult
        """
        try:
            response = await self.llm.ainvoke(
                [SystemMessage(content=DETECTION_PROMPT), HumanMessage(content=content)]
            )
        except Exception as e:
            logger.error(f"[DETECT] Category detection failed: {e}")
            quick = quick_detect_category(content)
            if quick is not None:
                return CategoryDetectionResult(
                    category=quick,
                    confidence=FALLBACK_CONFIDENCE,
                    reasoning="Detection service unavailable, matched category by keywords",
                )
            return CategoryDetectionResult(
                category=DEFAULT_CATEGORY,
                confidence=FALLBACK_CONFIDENCE,
                reasoning="Error during detection, falling back to general category",
            )

        result = parse_detection_result(message_text(response))

        if result.confidence < self.confidence_threshold:
            return CategoryDetectionResult(
                category=DEFAULT_CATEGORY,
                confidence=result.confidence,
                reasoning=f"Low confidence ({result.confidence:.2f}), using general category",
            )

        logger.info(
            f"[DETECT] Category detected: {result.category.value}",
            extra={"confidence": result.confidence},
        )
        return result
