"""
Модели результатов анализа и определения категории
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .categories import RedFlagCategory

MIN_SCORE = 0.0
MAX_SCORE = 10.0


class RedFlagItem(BaseModel):
    """Один найденный сигнал: категория, цитата-доказательство и пояснение"""

    category: str = ""
    evidence: str = ""
    explanation: str = ""
    context: Optional[str] = None


def _coerce_items(value: Any) -> List[Any]:
    # Модель иногда отдаёт строки вместо объектов или null вместо списка
    if value is None:
        return []
    if not isinstance(value, list):
        value = [value]
    items = []
    for item in value:
        if isinstance(item, dict):
            items.append(item)
        elif isinstance(item, str) and item.strip():
            items.append({"explanation": item.strip()})
    return items


class AnalysisResult(BaseModel):
    """
    Структурированный результат анализа.

    На проводе используются camelCase имена (redFlagScore, criticalFlags, ...),
    как их возвращает модель.
    """

    model_config = ConfigDict(populate_by_name=True)

    red_flag_score: float = Field(alias="redFlagScore", ge=MIN_SCORE, le=MAX_SCORE)
    verdict: str
    critical_flags: List[RedFlagItem] = Field(default_factory=list, alias="criticalFlags")
    warnings: List[RedFlagItem] = Field(default_factory=list)
    notices: List[RedFlagItem] = Field(default_factory=list)
    positives: List[RedFlagItem] = Field(default_factory=list)
    advice: str = ""

    @field_validator("red_flag_score", mode="before")
    @classmethod
    def clamp_score(cls, v: Any) -> float:
        return min(MAX_SCORE, max(MIN_SCORE, float(v)))

    @field_validator("critical_flags", "warnings", "notices", "positives", mode="before")
    @classmethod
    def coerce_items(cls, v: Any) -> List[Any]:
        return _coerce_items(v)

    @field_validator("advice", mode="before")
    @classmethod
    def coerce_advice(cls, v: Any) -> str:
        return "" if v is None else str(v)


class CategoryDetectionResult(BaseModel):
    """Результат автоматического определения категории"""

    category: RedFlagCategory
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: str
