"""
Извлечение JSON из свободного текстового ответа LLM
"""

import json
import re
from typing import Any, Dict

JSON_BLOCK_PATTERN = re.compile(r"```json\s*\n?([\s\S]*?)\n?```")


def _object_pattern(marker_key: str) -> re.Pattern:
    return re.compile(r"\{[\s\S]*\"" + re.escape(marker_key) + r"\"[\s\S]*\}")


def extract_json(text: str, marker_key: str) -> Dict[str, Any]:
    """
    Достаёт JSON-объект из ответа модели.

    Стратегии по порядку: блок ```json, жадный фрагмент {...} с ключом
    marker_key, весь текст целиком. Разбирается первый найденный кандидат.

    Args:
        text: Ответ модели
        marker_key: Ключ, который обязан присутствовать в объекте

    Returns:
        Распарсенный объект

    Raises:
        ValueError: JSON не найден, не разбирается или не является объектом
    """
    block = JSON_BLOCK_PATTERN.search(text)
    if block:
        candidate = block.group(1)
    else:
        match = _object_pattern(marker_key).search(text)
        candidate = match.group(0) if match else text

    try:
        data = json.loads(candidate.strip())
    except json.JSONDecodeError as e:
        raise ValueError(f"Could not parse JSON from model output: {e}") from e

    if not isinstance(data, dict):
        raise ValueError("Model output JSON is not an object")
    return data


def split_explanation(text: str) -> str:
    """
    Текст на естественном языке, идущий после JSON в ответе модели.

    Returns:
        Пояснение без JSON; пустая строка, если его нет
    """
    block = JSON_BLOCK_PATTERN.search(text)
    if block:
        return text[block.end():].strip()

    last_brace = text.rfind("}")
    if last_brace == -1:
        return text.strip()
    return text[last_brace + 1:].strip()
