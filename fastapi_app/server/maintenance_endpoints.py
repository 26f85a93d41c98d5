"""
Служебные эндпоинты для планировщика задач
"""

import logging
import secrets
from typing import Optional

from config import get_settings
from core.auth import get_db_session
from core.exceptions import AppException, UnauthorizedError
from core.storage_client import StorageClient, get_storage_client_wrapper
from fastapi import APIRouter, Depends, Header
from schemas import CleanupResponse
from services import FileService
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cron", tags=["Maintenance"])


def verify_cron_secret(authorization: Optional[str] = Header(default=None)) -> None:
    """
    Проверяет заголовок Authorization: Bearer <CRON_SECRET>.

    Raises:
        AppException: CRON_SECRET не настроен (500)
        UnauthorizedError: Секрет не совпадает
    """
    cron_secret = get_settings().cron_secret
    if not cron_secret:
        logger.error("[CLEANUP] CRON_SECRET is not configured")
        raise AppException("Cron secret is not configured")

    expected = f"Bearer {cron_secret}"
    if not authorization or not secrets.compare_digest(authorization, expected):
        logger.warning("[CLEANUP] Unauthorized cron request")
        raise UnauthorizedError("Unauthorized")


@router.get("/cleanup-files", response_model=CleanupResponse, dependencies=[Depends(verify_cron_secret)])
def cleanup_files(
    db: Session = Depends(get_db_session),
    storage: StorageClient = Depends(get_storage_client_wrapper),
):
    """Удаляет файлы с истёкшим сроком хранения"""
    report = FileService(db, storage).cleanup_expired()

    if report.deleted == 0 and report.failed == 0:
        return CleanupResponse(message="No files to delete")

    return CleanupResponse(
        message=f"Deleted {report.deleted} files, {report.failed} failed",
        deleted=report.deleted,
        failed=report.failed,
        details=report.details,
    )
