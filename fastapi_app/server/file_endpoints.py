"""
Эндпоинты для загрузки и получения файлов
"""

import logging
from uuid import UUID

from core.auth import get_current_user, get_db_session
from core.storage_client import StorageClient, get_storage_client_wrapper
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from models import User
from schemas import FileUploadResponse
from services import FileService
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/files", tags=["Files"])


@router.post("/upload", response_model=FileUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: UploadFile = File(...),
    chat_id: int = Form(..., ge=1),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
    storage: StorageClient = Depends(get_storage_client_wrapper),
):
    """
    Загружает изображение (JPEG, PNG) или PDF в чат пользователя.

    Файл хранится ограниченное время и затем удаляется задачей очистки.

    Args:
        file: Файл из multipart формы
        chat_id: ID чата, к которому относится файл
        current_user: Текущий пользователь
        db: Сессия базы данных
        storage: Клиент хранилища

    Returns:
        Метаданные загруженного файла
    """
    data = await file.read()
    logger.info(
        f"[FILES] Upload request from user_id={current_user.id} to chat_id={chat_id}",
        extra={"attachment": file.filename, "size": len(data)},
    )

    # Загрузка в MinIO с повторами tenacity блокирует поток
    uploaded = await run_in_threadpool(
        FileService(db, storage).upload,
        current_user,
        chat_id=chat_id,
        filename=file.filename or "upload",
        content_type=file.content_type or "",
        data=data,
    )

    return FileUploadResponse(
        id=uploaded.id,
        url=f"/files/{uploaded.id}",
        pathname=uploaded.filename,
        content_type=uploaded.file_type,
        size=uploaded.file_size,
        auto_delete_at=uploaded.auto_delete_at,
    )


@router.get("/{file_id}")
def get_file(
    file_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db_session),
    storage: StorageClient = Depends(get_storage_client_wrapper),
):
    """Отдаёт содержимое файла владельцу"""
    uploaded, content = FileService(db, storage).download(current_user, file_id)
    return Response(
        content=content,
        media_type=uploaded.file_type,
        headers={"Content-Disposition": f'inline; filename="{uploaded.filename}"'},
    )
