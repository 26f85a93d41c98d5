"""
Фабрика LLM-клиентов Google Gemini
"""

import logging

from config import get_settings
from langchain_google_genai import ChatGoogleGenerativeAI

logger = logging.getLogger(__name__)


def create_chat_model(temperature: float, max_output_tokens: int) -> ChatGoogleGenerativeAI:
    """
    Создаёт LangChain-клиент Gemini.

    Повторы внутри клиента отключены: ими управляет RedFlagAnalyzer.analyze_with_retry.

    Args:
        temperature: Температура генерации
        max_output_tokens: Лимит токенов ответа

    Returns:
        Настроенный ChatGoogleGenerativeAI
    """
    settings = get_settings()
    logger.info(
        f"Initializing Gemini model {settings.model_name}",
        extra={"temperature": temperature, "max_output_tokens": max_output_tokens},
    )
    return ChatGoogleGenerativeAI(
        model=settings.model_name,
        google_api_key=settings.google_api_key,
        temperature=temperature,
        max_output_tokens=max_output_tokens,
        timeout=settings.llm_timeout_seconds,
        max_retries=0,
    )


def message_text(message) -> str:
    """Текст ответа модели; content может быть строкой или списком частей"""
    content = getattr(message, "content", message)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(part.get("text", ""))
        return "".join(parts)
    return str(content)
