"""
Репозитории для работы с данными
"""

from .base_repository import BaseRepository
from .chat_repository import ChatRepository
from .file_repository import FileRepository
from .usage_repository import UsageRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "ChatRepository",
    "FileRepository",
    "UsageRepository",
]
