"""
Модели чатов и сообщений
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .user import Base

if TYPE_CHECKING:
    from .file import UploadedFile
    from .user import User

# JSONB в PostgreSQL, обычный JSON в остальных СУБД (SQLite в тестах)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class Chat(Base):
    """
    Модель чата пользователя. Один чат - одна серия анализов.

    Attributes:
        id: Уникальный идентификатор чата
        user_id: ID пользователя-владельца чата
        title: Название чата
        category: Категория последнего анализа (dating, jobs, ...)
        red_flag_score: Оценка последнего анализа (0-10)
        created_at: Дата и время создания чата
        updated_at: Дата и время последнего обновления
        is_active: Флаг активности чата (для мягкого удаления)
        user: Связанный пользователь
    """

    __tablename__ = "chats"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(
        String(255), nullable=False, default="Новый анализ"
    )
    category: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    red_flag_score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="chats")
    messages: Mapped[List["Message"]] = relationship(
        "Message",
        back_populates="chat",
        cascade="all, delete-orphan",
        order_by="Message.created_at",
    )
    files: Mapped[List["UploadedFile"]] = relationship(
        "UploadedFile", back_populates="chat", cascade="all, delete-orphan"
    )

    # Композитные индексы для оптимизации частых запросов
    __table_args__ = (
        Index("idx_chat_user_active", "user_id", "is_active"),
        Index("idx_chat_updated_at_desc", "updated_at"),
    )

    def __repr__(self) -> str:
        return f"<Chat(id={self.id}, user_id={self.user_id}, category={self.category}, score={self.red_flag_score})>"


class Message(Base):
    """
    Модель сообщения в чате.

    Attributes:
        id: Уникальный идентификатор сообщения
        chat_id: ID чата
        role: Роль отправителя (user/assistant)
        content: Текст сообщения (для ассистента - пояснение к анализу)
        attachments: Метаданные приложенных файлов (для сообщений пользователя)
        red_flag_data: Структурированный результат анализа (для ответов ассистента)
        created_at: Дата и время создания сообщения
        chat: Связанный чат
    """

    __tablename__ = "messages"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    chat_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("chats.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    attachments: Mapped[Optional[list]] = mapped_column(JSONType, nullable=True)
    red_flag_data: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )

    # Relationships
    chat: Mapped["Chat"] = relationship("Chat", back_populates="messages")

    # Индексы
    __table_args__ = (
        Index("idx_messages_chat_created", "chat_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Message(id={self.id}, chat_id={self.chat_id}, role='{self.role}')>"
