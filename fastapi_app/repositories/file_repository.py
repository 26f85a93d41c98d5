"""
Репозиторий для загруженных файлов
"""

from datetime import datetime, timezone
from typing import List, Optional, Sequence
from uuid import UUID

from models import UploadedFile
from sqlalchemy.orm import Session

from .base_repository import BaseRepository


class FileRepository(BaseRepository[UploadedFile]):
    """Операции с метаданными файлов в S3/MinIO"""

    def __init__(self, db: Session):
        super().__init__(db, UploadedFile)

    def get_owned(self, file_id: UUID, user_id: int) -> Optional[UploadedFile]:
        """Файл пользователя, ещё не удалённый из хранилища"""
        return self._first(
            UploadedFile.id == file_id,
            UploadedFile.user_id == user_id,
            UploadedFile.deleted_at.is_(None),
        )

    def get_for_chat(self, chat_id: int, file_ids: Sequence[UUID]) -> List[UploadedFile]:
        """
        Файлы чата из переданного списка (неудалённые), в порядке загрузки.

        Args:
            chat_id: ID чата
            file_ids: Идентификаторы файлов

        Returns:
            Найденные файлы; отсутствующие ID просто пропускаются
        """
        if not file_ids:
            return []
        return self._list(
            UploadedFile.chat_id == chat_id,
            UploadedFile.id.in_(list(file_ids)),
            UploadedFile.deleted_at.is_(None),
            order_by=UploadedFile.created_at,
        )

    def get_expired(self, now: Optional[datetime] = None) -> List[UploadedFile]:
        """Файлы, срок хранения которых истёк и которые ещё не удалены"""
        now = now or datetime.now(timezone.utc)
        return self._list(
            UploadedFile.auto_delete_at <= now,
            UploadedFile.deleted_at.is_(None),
            order_by=UploadedFile.auto_delete_at,
        )

    def mark_deleted(self, uploaded_file: UploadedFile) -> UploadedFile:
        uploaded_file.deleted_at = datetime.now(timezone.utc)
        self.db.flush()
        return uploaded_file
