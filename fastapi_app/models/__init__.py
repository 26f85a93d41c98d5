"""
Модели данных приложения
"""

from .user import User, Base
from .chat import Chat, Message
from .file import UploadedFile
from .usage import UsageLog

__all__ = ["User", "Chat", "Message", "UploadedFile", "UsageLog", "Base"]
