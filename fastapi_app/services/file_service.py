"""
Загрузка файлов в S3/MinIO и очистка файлов с истёкшим сроком хранения
"""

import logging
import re
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, List
from uuid import UUID

from config import get_settings
from constants import RESOURCE_CHAT, RESOURCE_FILE, UPLOAD_OBJECT_PATTERN
from core.constants import ALLOWED_UPLOAD_TYPES, CONTENT_TYPE_ALIASES
from core.exceptions import ResourceNotFoundError, StorageError, ValidationError
from core.storage_client import StorageClient
from models import UploadedFile, User
from repositories import ChatRepository, FileRepository
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def normalize_content_type(content_type: str) -> str:
    base = (content_type or "").split(";")[0].strip().lower()
    return CONTENT_TYPE_ALIASES.get(base, base)


def safe_filename(filename: str) -> str:
    """Имя файла без пути и небезопасных символов"""
    name = (filename or "upload").replace("\\", "/").rsplit("/", 1)[-1]
    name = UNSAFE_FILENAME_CHARS.sub("_", name).strip("._")
    return name[:200] or "upload"


@dataclass
class CleanupReport:
    """Итог очистки: сколько удалено, сколько не удалось и по каким файлам"""

    deleted: int = 0
    failed: int = 0
    details: Dict[str, List[str]] = field(default_factory=lambda: {"deleted": [], "failed": []})


class FileService:
    """Операции с пользовательскими файлами"""

    def __init__(self, db: Session, storage: StorageClient):
        """
        Args:
            db: Сессия базы данных
            storage: Клиент объектного хранилища
        """
        self.db = db
        self.storage = storage
        self.files = FileRepository(db)
        settings = get_settings()
        self.retention = timedelta(days=settings.file_retention_days)
        self.max_size = settings.max_upload_size_mb * 1024 * 1024
        self.max_size_mb = settings.max_upload_size_mb

    def validate(self, content_type: str, size: int) -> str:
        """
        Проверяет тип и размер файла.

        Returns:
            Нормализованный MIME тип

        Raises:
            ValidationError: тип не поддерживается или размер недопустим
        """
        normalized = normalize_content_type(content_type)
        if normalized not in ALLOWED_UPLOAD_TYPES:
            raise ValidationError(
                "File type should be JPEG, PNG, or PDF",
                details={"content_type": content_type},
            )
        if size <= 0:
            raise ValidationError("Uploaded file is empty")
        if size > self.max_size:
            raise ValidationError(
                f"File size should be less than {self.max_size_mb}MB",
                details={"size": size, "max_size": self.max_size},
            )
        return normalized

    def upload(
        self,
        user: User,
        chat_id: int,
        filename: str,
        content_type: str,
        data: bytes,
    ) -> UploadedFile:
        """
        Загружает файл пользователя в чат.

        Raises:
            ResourceNotFoundError: чат не найден или принадлежит другому пользователю
            ValidationError: тип или размер файла недопустимы
            StorageError: ошибка хранилища
        """
        chat = ChatRepository(self.db).get_owned(chat_id, user.id)
        if not chat:
            raise ResourceNotFoundError(RESOURCE_CHAT, chat_id)

        file_type = self.validate(content_type, len(data))
        name = safe_filename(filename)
        object_name = UPLOAD_OBJECT_PATTERN.format(
            chat_id=chat_id,
            timestamp=int(time.time() * 1000),
            filename=name,
        )

        self.storage.upload_file(object_name, data, file_type)

        now = datetime.now(timezone.utc)
        uploaded = self.files.create(
            chat_id=chat_id,
            user_id=user.id,
            object_name=object_name,
            filename=name,
            file_type=file_type,
            file_size=len(data),
            created_at=now,
            auto_delete_at=now + self.retention,
        )
        self.db.commit()

        logger.info(
            f"[FILES] Uploaded file id={uploaded.id} to chat_id={chat_id}",
            extra={"object_name": object_name, "size": len(data), "content_type": file_type},
        )
        return uploaded

    def get_owned(self, user: User, file_id: UUID) -> UploadedFile:
        uploaded = self.files.get_owned(file_id, user.id)
        if not uploaded:
            raise ResourceNotFoundError(RESOURCE_FILE, str(file_id))
        return uploaded

    def download(self, user: User, file_id: UUID) -> tuple[UploadedFile, bytes]:
        """Метаданные и содержимое файла пользователя"""
        uploaded = self.get_owned(user, file_id)
        return uploaded, self.storage.get_file(uploaded.object_name)

    def cleanup_expired(self) -> CleanupReport:
        """
        Удаляет из хранилища файлы с истёкшим сроком и помечает их удалёнными.

        Ошибка по одному файлу не прерывает обработку остальных.
        """
        report = CleanupReport()
        expired = self.files.get_expired()

        if not expired:
            logger.info("[CLEANUP] No expired files to delete")
            return report

        logger.info(f"[CLEANUP] Found {len(expired)} expired files")

        # После rollback ORM объекты истекают, имена берём заранее
        targets = [(uploaded, uploaded.id, uploaded.object_name) for uploaded in expired]

        for uploaded, file_id, object_name in targets:
            try:
                self.storage.delete_file(object_name)
                self.files.mark_deleted(uploaded)
                self.db.commit()
            except Exception as e:
                self.db.rollback()
                report.failed += 1
                report.details["failed"].append(object_name)
                logger.error(
                    f"[CLEANUP] Failed to delete {object_name}: {e}",
                    extra={"file_id": str(file_id)},
                    exc_info=not isinstance(e, StorageError),
                )
                continue

            report.deleted += 1
            report.details["deleted"].append(object_name)

        logger.info(
            f"[CLEANUP] Deleted {report.deleted} files, {report.failed} failed",
            extra={"deleted": report.deleted, "failed": report.failed},
        )
        return report
