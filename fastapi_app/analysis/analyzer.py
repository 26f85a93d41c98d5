"""
Анализ контента на тревожные сигналы через Gemini с повторными попытками
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Sequence

from core.exceptions import AnalysisError, ErrorType
from langchain_core.messages import HumanMessage, SystemMessage
from langsmith import traceable
from prompts import get_red_flag_prompt
from pydantic import ValidationError as PydanticValidationError
from tenacity import AsyncRetrying, RetryError, retry_if_exception, stop_after_attempt, wait_chain, wait_fixed

from .categories import RedFlagCategory
from .json_extraction import extract_json, split_explanation
from .llm import message_text
from .models import AnalysisResult

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "AI temporarily unavailable. Please try again later."


@dataclass
class AnalysisOutcome:
    """Результат анализа вместе с пояснением на естественном языке"""

    result: AnalysisResult
    explanation: str


def classify_error(error: Exception) -> AnalysisError:
    """
    Классифицирует ошибку провайдера по тексту сообщения.

    Rate limit, таймауты и 5xx - временные; 400/invalid - постоянные;
    всё неопознанное считается временным.
    """
    if isinstance(error, AnalysisError):
        return error

    message = str(error).lower()

    if "rate limit" in message or "quota" in message or "429" in message:
        return AnalysisError("Gemini API rate limit exceeded", ErrorType.TRANSIENT, error)

    if isinstance(error, TimeoutError) or "timeout" in message or "timed out" in message:
        return AnalysisError("Gemini API request timed out", ErrorType.TRANSIENT, error)

    if "500" in message or "503" in message:
        return AnalysisError("Gemini API server error", ErrorType.TRANSIENT, error)

    if "400" in message or "invalid" in message or "bad request" in message:
        return AnalysisError("Invalid input to Gemini API", ErrorType.PERMANENT, error)

    return AnalysisError(f"Gemini API error: {error}", ErrorType.TRANSIENT, error)


def validate_analysis(data: Dict[str, Any]) -> AnalysisResult:
    """
    Проверяет обязательные поля и собирает AnalysisResult.

    Raises:
        AnalysisError: PARSING, если поля отсутствуют или имеют неверный тип
    """
    score = data.get("redFlagScore")
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise AnalysisError("Invalid analysis result: missing redFlagScore", ErrorType.PARSING)
    if not isinstance(data.get("verdict"), str):
        raise AnalysisError("Invalid analysis result: missing verdict", ErrorType.PARSING)
    if not isinstance(data.get("criticalFlags"), list):
        raise AnalysisError("Invalid analysis result: missing criticalFlags", ErrorType.PARSING)

    try:
        return AnalysisResult.model_validate(data)
    except (PydanticValidationError, ValueError) as e:
        raise AnalysisError(f"Invalid analysis result: {e}", ErrorType.PARSING, e) from e


def _is_transient(error: BaseException) -> bool:
    return isinstance(error, AnalysisError) and error.error_type == ErrorType.TRANSIENT


class RedFlagAnalyzer:
    """
    Анализатор контента: промпт категории -> Gemini -> извлечение и валидация JSON.

    Example:
        >>> analyzer = RedFlagAnalyzer(llm, retry_delays=[1, 3, 5])
        >>> outcome = await analyzer.analyze_with_retry(RedFlagCategory.JOBS, text)
    """

    def __init__(self, llm, max_attempts: int = 3, retry_delays: Sequence[float] = (1.0, 3.0, 5.0)):
        """
        Args:
            llm: LangChain chat model (нужен только ainvoke)
            max_attempts: Максимальное число попыток
            retry_delays: Паузы между попытками в секундах
        """
        self.llm = llm
        self.max_attempts = max_attempts
        self.retry_delays = list(retry_delays) or [0.0]

    @traceable(name="analyze_red_flags", run_type="llm")
    async def analyze(
        self,
        category: RedFlagCategory,
        message: str,
        image_count: int = 0,
    ) -> AnalysisOutcome:
        """
        Одна попытка анализа.

        Args:
            category: Категория контента
            message: Текст пользователя (с извлечённым текстом PDF)
            image_count: Количество приложенных изображений

        Returns:
            AnalysisOutcome

        Raises:
            AnalysisError: классифицированная ошибка
        """
        user_content = message
        if image_count > 0:
            user_content += f"\n\n[Note: {image_count} image(s) were uploaded for analysis]"

        try:
            response = await self.llm.ainvoke(
                [
                    SystemMessage(content=get_red_flag_prompt(category)),
                    HumanMessage(content=user_content),
                ]
            )
        except Exception as e:
            raise classify_error(e) from e

        text = message_text(response)

        try:
            data = extract_json(text, "redFlagScore")
        except ValueError as e:
            logger.error(f"[ANALYZE] Failed to parse analysis JSON: {e}", extra={"response_preview": text[:500]})
            raise AnalysisError(
                "Failed to parse analysis JSON from Gemini response", ErrorType.PARSING, e
            ) from e

        result = validate_analysis(data)
        return AnalysisOutcome(result=result, explanation=split_explanation(text))

    async def analyze_with_retry(
        self,
        category: RedFlagCategory,
        message: str,
        image_count: int = 0,
    ) -> AnalysisOutcome:
        """
        Анализ с повторами для временных ошибок.

        Постоянные ошибки и ошибки разбора пробрасываются сразу. Если все
        попытки исчерпаны, выбрасывается TRANSIENT "AI temporarily unavailable".
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_chain(*[wait_fixed(delay) for delay in self.retry_delays]),
            retry=retry_if_exception(_is_transient),
            before_sleep=self._log_retry,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    return await self.analyze(category, message, image_count)
        except RetryError as e:
            last_error = e.last_attempt.exception()
            logger.error(
                f"[ANALYZE] All {self.max_attempts} attempts failed: {last_error}",
                extra={"category": category.value},
            )
            raise AnalysisError(UNAVAILABLE_MESSAGE, ErrorType.TRANSIENT, last_error) from last_error

    @staticmethod
    def _log_retry(retry_state) -> None:
        error = retry_state.outcome.exception()
        logger.warning(
            f"[ANALYZE] Attempt {retry_state.attempt_number} failed, retrying: {error}",
            extra={"attempt": retry_state.attempt_number},
        )
