"""
Pydantic модели для API запросов
"""

from typing import List, Optional
from uuid import UUID

from analysis import RedFlagCategory
from core.constants import MAX_CONTENT_LENGTH, MAX_UPLOAD_FILES
from pydantic import BaseModel, Field, field_validator


class AnalyzeRequest(BaseModel):
    """
    Запрос на анализ контента.

    Attributes:
        content: Текст для анализа (анкета, переписка, вакансия, объявление)
        chat_id: ID существующего чата (опционально)
        category: Категория; если не указана, определяется автоматически
        file_ids: Загруженные в чат файлы, которые нужно учесть
    """

    content: str = Field(
        ...,
        min_length=1,
        max_length=MAX_CONTENT_LENGTH,
        description="Текст для анализа",
        examples=["Looking for a rockstar ninja developer to join our family! 60hr weeks, equity only!"],
    )
    chat_id: Optional[int] = Field(
        default=None,
        ge=1,
        description="ID существующего чата (если не передан, создается новый)",
        examples=[42],
    )
    category: Optional[RedFlagCategory] = Field(
        default=None,
        description="Категория анализа (если не передана, определяется автоматически)",
        examples=["jobs"],
    )
    file_ids: List[UUID] = Field(
        default_factory=list,
        max_length=MAX_UPLOAD_FILES,
        description="ID файлов, загруженных в этот чат",
    )

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        """Удаляет пробелы по краям и не допускает пустой текст"""
        v = v.strip()
        if not v:
            raise ValueError("Content must not be empty")
        return v

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "content": "2BR apartment, $800/month, must wire first/last/deposit before viewing",
                    "chat_id": None,
                    "category": None,
                    "file_ids": [],
                }
            ]
        }
    }


class DetectRequest(BaseModel):
    """Запрос на определение категории без анализа"""

    content: str = Field(..., min_length=1, max_length=MAX_CONTENT_LENGTH)
