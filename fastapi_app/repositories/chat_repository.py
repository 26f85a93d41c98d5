"""
Репозиторий для работы с чатами и сообщениями
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from constants import DEFAULT_CHAT_TITLE
from models import Chat, Message
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ChatRepository(BaseRepository[Chat]):
    """
    Чаты пользователя и их сообщения.

    Удалённые чаты остаются в базе с is_active=False и не видны ни в одном запросе.
    """

    def __init__(self, db: Session):
        super().__init__(db, Chat)

    @staticmethod
    def _visible(user_id: int, category: Optional[str] = None) -> tuple:
        conditions = (Chat.user_id == user_id, Chat.is_active.is_(True))
        if category:
            conditions += (Chat.category == category,)
        return conditions

    def get_owned(self, chat_id: int, user_id: int) -> Optional[Chat]:
        """Активный чат пользователя или None (чужой или удалённый чат не отдаётся)"""
        return self._first(Chat.id == chat_id, *self._visible(user_id))

    def get_user_chats(
        self,
        user_id: int,
        skip: int = 0,
        limit: int = 100,
        category: Optional[str] = None,
    ) -> List[Chat]:
        """
        Чаты пользователя, последние обновлённые первыми.

        Args:
            user_id: ID пользователя
            skip: Сколько записей пропустить
            limit: Максимальное количество записей
            category: Только чаты с последним анализом этой категории
        """
        return self._list(
            *self._visible(user_id, category),
            order_by=(Chat.updated_at.desc(), Chat.id.desc()),
            skip=skip,
            limit=limit,
        )

    def count_user_chats(self, user_id: int, category: Optional[str] = None) -> int:
        return self._count(*self._visible(user_id, category))

    def create_chat(self, user_id: int, title: Optional[str] = None, commit: bool = True) -> Chat:
        """
        Создать чат.

        Args:
            user_id: ID владельца
            title: Название (по умолчанию DEFAULT_CHAT_TITLE)
            commit: Зафиксировать сразу; при False чат попадёт в транзакцию анализа
        """
        now = datetime.now(timezone.utc)
        chat = self.create(
            user_id=user_id,
            title=title or DEFAULT_CHAT_TITLE,
            created_at=now,
            updated_at=now,
            is_active=True,
        )
        if commit:
            self.db.commit()
            self.db.refresh(chat)

        logger.info("Chat created", extra={"chat_id": chat.id, "user_id": user_id})
        return chat

    def rename(self, chat: Chat, title: str) -> Chat:
        chat.title = title
        chat.updated_at = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(chat)
        return chat

    def touch(self, chat: Chat) -> Chat:
        """Обновить время последней активности чата и зафиксировать"""
        chat.updated_at = datetime.now(timezone.utc)
        self.db.commit()
        return chat

    def deactivate(self, chat: Chat) -> None:
        """Мягкое удаление: история сохраняется, но чат пропадает из выдачи"""
        chat.is_active = False
        chat.updated_at = datetime.now(timezone.utc)
        self.db.commit()
        logger.info("Chat deactivated", extra={"chat_id": chat.id, "user_id": chat.user_id})

    # ===== MESSAGES =====

    def get_messages(self, chat_id: int, skip: int = 0, limit: int = 100) -> List[Message]:
        """Сообщения чата в хронологическом порядке"""
        query = (
            select(Message)
            .where(Message.chat_id == chat_id)
            .order_by(Message.created_at)
            .offset(skip)
            .limit(limit)
        )
        return list(self.db.execute(query).scalars().all())

    def count_messages(self, chat_id: int) -> int:
        query = select(func.count(Message.id)).where(Message.chat_id == chat_id)
        return self.db.execute(query).scalar_one()

    def add_message(
        self,
        chat: Chat,
        role: str,
        content: str,
        attachments: Optional[List[Dict[str, Any]]] = None,
        red_flag_data: Optional[Dict[str, Any]] = None,
    ) -> Message:
        """
        Добавить сообщение в чат без фиксации транзакции.

        Args:
            chat: Чат
            role: Роль отправителя (user/assistant)
            content: Текст сообщения
            attachments: Метаданные приложенных файлов
            red_flag_data: Результат анализа

        Returns:
            Созданное сообщение
        """
        now = datetime.now(timezone.utc)
        message = Message(
            chat_id=chat.id,
            role=role,
            content=content,
            attachments=attachments,
            red_flag_data=red_flag_data,
            created_at=now,
        )
        self.db.add(message)
        chat.updated_at = now
        self.db.flush()
        return message
