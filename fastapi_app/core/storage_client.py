"""
Обёртка над MinIO клиентом для пользовательских загрузок
"""

import io
import logging
from functools import lru_cache
from urllib.parse import urlsplit

import urllib3
from config import get_settings
from core.exceptions import StorageError
from minio import Minio
from minio.error import S3Error
from tenacity import retry, stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)


class StorageClient:
    """
    Обёртка над MinIO с retry логикой и обработкой ошибок.

    Все сетевые операции повторяются до 3 раз с экспоненциальной паузой,
    после чего ошибка оборачивается в StorageError.
    """

    def __init__(self, client: Minio, bucket: str, max_file_size: int):
        """
        Args:
            client: MinIO клиент
            bucket: Название bucket
            max_file_size: Максимальный размер объекта в байтах
        """
        self.client = client
        self.bucket = bucket
        self.max_file_size = max_file_size

    def upload_file(self, object_name: str, data: bytes, content_type: str) -> str:
        """
        Загружает файл в MinIO.

        Args:
            object_name: Имя объекта в хранилище
            data: Содержимое файла
            content_type: MIME тип содержимого

        Returns:
            Имя загруженного объекта

        Raises:
            StorageError: При превышении размера или ошибке загрузки
        """
        if len(data) > self.max_file_size:
            raise StorageError(
                f"File size ({len(data)} bytes) exceeds maximum allowed size ({self.max_file_size} bytes)",
                details={"size": len(data), "max_size": self.max_file_size, "object_name": object_name},
            )
        return self._put_object(object_name, data, content_type)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    def _put_object(self, object_name: str, data: bytes, content_type: str) -> str:
        try:
            self.client.put_object(
                self.bucket,
                object_name,
                io.BytesIO(data),
                len(data),
                content_type=content_type,
            )
            logger.info(
                "File uploaded successfully",
                extra={"object_name": object_name, "size": len(data), "content_type": content_type},
            )
            return object_name
        except Exception as e:
            logger.error(
                "Failed to upload file",
                extra={"object_name": object_name, "error": str(e)},
                exc_info=True,
            )
            raise StorageError(
                f"Failed to upload file: {str(e)}",
                details={"object_name": object_name},
            )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    def get_file(self, object_name: str) -> bytes:
        """
        Получает файл из MinIO.

        Raises:
            StorageError: При ошибке чтения
        """
        try:
            response = self.client.get_object(self.bucket, object_name)
            try:
                data = response.read()
            finally:
                response.close()
                response.release_conn()

            logger.debug("File retrieved successfully", extra={"object_name": object_name, "size": len(data)})
            return data
        except Exception as e:
            logger.error(
                "Failed to get file",
                extra={"object_name": object_name, "error": str(e)},
                exc_info=True,
            )
            raise StorageError(
                f"Failed to get file: {str(e)}",
                details={"object_name": object_name},
            )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    def delete_file(self, object_name: str) -> None:
        """
        Удаляет файл из MinIO.

        Raises:
            StorageError: При ошибке удаления
        """
        try:
            self.client.remove_object(self.bucket, object_name)
            logger.info("File deleted successfully", extra={"object_name": object_name})
        except Exception as e:
            logger.error(
                "Failed to delete file",
                extra={"object_name": object_name, "error": str(e)},
                exc_info=True,
            )
            raise StorageError(
                f"Failed to delete file: {str(e)}",
                details={"object_name": object_name},
            )

    def ping(self) -> None:
        """Проверка доступности хранилища (для /health)"""
        self.client.bucket_exists(self.bucket)


def _split_endpoint(endpoint: str) -> tuple[str, bool]:
    """'https://minio:9000' -> ('minio:9000', True); без схемы TLS не включается"""
    parsed = urlsplit(endpoint if "://" in endpoint else f"//{endpoint}")
    return parsed.netloc, parsed.scheme == "https"


@lru_cache()
def get_minio_client() -> Minio:
    """
    MinIO клиент приложения. При первом вызове создаёт bucket для загрузок.

    Raises:
        StorageError: Если хранилище недоступно
    """
    settings = get_settings()
    host, https = _split_endpoint(settings.s3_endpoint)

    client = Minio(
        host,
        access_key=settings.s3_access_key,
        secret_key=settings.s3_secret_key,
        secure=settings.s3_secure or https,
    )

    try:
        if not client.bucket_exists(settings.s3_bucket):
            client.make_bucket(settings.s3_bucket)
            logger.info("Created upload bucket", extra={"bucket": settings.s3_bucket})
    except (S3Error, urllib3.exceptions.HTTPError) as e:
        raise StorageError(f"Object storage is unavailable: {e}", details={"bucket": settings.s3_bucket})

    return client


def get_storage_client_wrapper() -> StorageClient:
    """
    Dependency для получения StorageClient с retry логикой.

    Returns:
        StorageClient обёртка над MinIO
    """
    settings = get_settings()
    return StorageClient(
        get_minio_client(),
        settings.s3_bucket,
        max_file_size=settings.max_upload_size_mb * 1024 * 1024,
    )
