"""
Эндпоинты истории анализов: чаты пользователя и их сообщения
"""

import logging
from typing import Optional

from analysis.categories import RedFlagCategory
from constants import DEFAULT_CHAT_LIST_LIMIT, RESOURCE_CHAT
from core.auth import get_current_user, get_db_session
from core.exceptions import ResourceNotFoundError
from fastapi import APIRouter, Depends, Query, status
from models import Chat, User
from repositories import ChatRepository
from schemas.chat import (
    ChatCreate,
    ChatListResponse,
    ChatRename,
    ChatResponse,
    MessageListResponse,
    MessageResponse,
)
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chats", tags=["Chats"])


def get_owned_chat(
    chat_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
) -> Chat:
    """Dependency: активный чат текущего пользователя, иначе 404"""
    chat = ChatRepository(db).get_owned(chat_id, current_user.id)
    if chat is None:
        # Чужой чат неотличим от несуществующего
        raise ResourceNotFoundError(RESOURCE_CHAT, chat_id)
    return chat


@router.post("/", response_model=ChatResponse, status_code=status.HTTP_201_CREATED)
async def create_chat(
    chat_data: ChatCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
):
    """Создать пустой чат, например чтобы загрузить файлы до первого анализа"""
    chat = ChatRepository(db).create_chat(current_user.id, title=chat_data.title)
    return ChatResponse.model_validate(chat)


@router.get("/", response_model=ChatListResponse)
async def list_chats(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
    category: Optional[RedFlagCategory] = Query(default=None, description="Фильтр по категории последнего анализа"),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=DEFAULT_CHAT_LIST_LIMIT, ge=1, le=100),
):
    """
    История анализов текущего пользователя, недавние первыми.

    Args:
        category: Показать только чаты этой категории
        skip: Количество чатов для пропуска
        limit: Максимальное количество чатов
    """
    repository = ChatRepository(db)
    category_value = category.value if category else None
    chats = repository.get_user_chats(current_user.id, skip=skip, limit=limit, category=category_value)
    total = repository.count_user_chats(current_user.id, category=category_value)

    logger.debug(
        "Chats listed",
        extra={"user_id": current_user.id, "returned": len(chats), "total": total, "category": category_value},
    )
    return ChatListResponse(chats=[ChatResponse.model_validate(c) for c in chats], total=total)


@router.get("/{chat_id}", response_model=ChatResponse)
async def get_chat(chat: Chat = Depends(get_owned_chat)):
    return ChatResponse.model_validate(chat)


@router.patch("/{chat_id}", response_model=ChatResponse)
async def rename_chat(
    chat_data: ChatRename,
    chat: Chat = Depends(get_owned_chat),
    db: Session = Depends(get_db_session),
):
    """Переименовать чат"""
    chat = ChatRepository(db).rename(chat, chat_data.title)
    return ChatResponse.model_validate(chat)


@router.delete("/{chat_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_chat(
    chat: Chat = Depends(get_owned_chat),
    db: Session = Depends(get_db_session),
):
    """Удалить чат из истории (мягкое удаление)"""
    ChatRepository(db).deactivate(chat)


@router.get("/{chat_id}/messages", response_model=MessageListResponse)
async def get_chat_messages(
    chat: Chat = Depends(get_owned_chat),
    db: Session = Depends(get_db_session),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
):
    """Запросы пользователя и результаты анализа в хронологическом порядке"""
    repository = ChatRepository(db)
    messages = repository.get_messages(chat.id, skip=skip, limit=limit)
    total = repository.count_messages(chat.id)

    return MessageListResponse(
        messages=[MessageResponse.model_validate(m) for m in messages],
        total=total,
    )
