"""
Подготовка вложений к анализу: извлечение текста из PDF и подсчёт изображений
"""

import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Iterable, Optional, Tuple

from core.constants import IMAGE_UPLOAD_TYPES, PDF_CONTENT_TYPE
from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

logger = logging.getLogger(__name__)

MAX_PDF_CHARS = 15000


@dataclass
class AttachmentContent:
    """Вложение с уже загруженным содержимым"""

    filename: str
    content_type: str
    data: Optional[bytes] = None


def extract_pdf_text(data: bytes, max_chars: int = MAX_PDF_CHARS) -> str:
    """
    Извлекает текст из PDF постранично.

    Args:
        data: Байты PDF
        max_chars: Обрезать текст до этого количества символов

    Returns:
        Текст документа; пустая строка, если текста нет или PDF нечитаем
    """
    try:
        reader = PdfReader(BytesIO(data))
        pages = [page.extract_text() or "" for page in reader.pages]
    except (PdfReadError, ValueError, KeyError) as e:
        logger.warning(f"PDF text extraction failed: {e}")
        return ""

    text = "\n".join(p.strip() for p in pages if p.strip())
    return text[:max_chars]


def build_analysis_input(message: str, attachments: Iterable[AttachmentContent]) -> Tuple[str, int]:
    """
    Собирает текст для анализа из сообщения и вложений.

    Args:
        message: Текст пользователя
        attachments: Вложения (PDF с данными и изображения)

    Returns:
        (текст для модели, количество изображений)
    """
    parts = [message]
    image_count = 0

    for attachment in attachments:
        if attachment.content_type in IMAGE_UPLOAD_TYPES:
            image_count += 1
            continue

        if attachment.content_type == PDF_CONTENT_TYPE and attachment.data:
            text = extract_pdf_text(attachment.data)
            if not text:
                logger.warning(
                    "PDF attachment has no extractable text, skipping",
                    extra={"attachment": attachment.filename},
                )
                continue
            parts.append(f"[Attached PDF: {attachment.filename}]\n{text}")

    return "\n\n".join(parts), image_count
