"""
Модель загруженных файлов с автоудалением
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlalchemy import BigInteger, DateTime, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .user import Base

if TYPE_CHECKING:
    from .chat import Chat


class UploadedFile(Base):
    """
    Файл, приложенный к чату и хранящийся в S3/MinIO.

    Attributes:
        id: Уникальный идентификатор файла
        chat_id: ID чата, к которому приложен файл
        user_id: ID владельца
        object_name: Ключ объекта в хранилище
        filename: Исходное имя файла
        file_type: MIME тип
        file_size: Размер в байтах
        created_at: Дата загрузки
        auto_delete_at: Когда файл должен быть удалён задачей очистки
        deleted_at: Когда файл фактически удалён из хранилища
    """

    __tablename__ = "uploaded_files"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    chat_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("chats.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    object_name: Mapped[str] = mapped_column(String(512), nullable=False, unique=True)
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    file_type: Mapped[str] = mapped_column(String(100), nullable=False)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    auto_delete_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    chat: Mapped["Chat"] = relationship("Chat", back_populates="files")

    __table_args__ = (
        Index("idx_uploaded_files_auto_delete", "auto_delete_at"),
    )

    def __repr__(self) -> str:
        return f"<UploadedFile(id={self.id}, chat_id={self.chat_id}, type='{self.file_type}')>"
