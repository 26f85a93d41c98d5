"""
Схемы чатов (история анализов) и их сообщений
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from analysis.categories import RedFlagCategory
from pydantic import BaseModel, Field, field_validator


class ChatCreate(BaseModel):
    """Пустой title - сервер подставит название по умолчанию"""

    title: Optional[str] = Field(default=None, max_length=255)


class ChatRename(BaseModel):
    """Новое название чата"""

    title: str = Field(..., min_length=1, max_length=255)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title must not be blank")
        return v.strip()


class ChatResponse(BaseModel):
    """
    Чат в списке истории.

    category и red_flag_score относятся к последнему анализу в чате,
    до первого анализа они пустые.
    """

    id: int
    title: str
    category: Optional[RedFlagCategory] = None
    red_flag_score: Optional[float] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ChatListResponse(BaseModel):
    chats: List[ChatResponse]
    total: int


class AttachmentInfo(BaseModel):
    """Файл, приложенный к сообщению пользователя"""

    id: UUID
    name: str
    content_type: str
    size: int
    url: str


class MessageResponse(BaseModel):
    """
    Сообщение чата.

    У сообщений пользователя бывают attachments, у ответов ассистента
    red_flag_data: оценка, вердикт, найденные сигналы, совет и категория.
    """

    id: UUID
    chat_id: int
    role: str
    content: str
    attachments: Optional[List[AttachmentInfo]] = None
    red_flag_data: Optional[Dict[str, Any]] = None
    created_at: datetime

    class Config:
        from_attributes = True


class MessageListResponse(BaseModel):
    messages: List[MessageResponse]
    total: int
