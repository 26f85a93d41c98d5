"""
Оркестрация анализа: лимиты -> чат -> вложения -> категория -> LLM -> сохранение
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

from analysis import (
    AnalysisOutcome,
    AttachmentContent,
    CategoryDetectionResult,
    CategoryDetector,
    RedFlagAnalyzer,
    RedFlagCategory,
    build_analysis_input,
)
from constants import CHAT_TITLE_MAX_CHARS, DEFAULT_CHAT_TITLE, RESOURCE_CHAT, RESOURCE_FILE, ROLE_ASSISTANT, ROLE_USER
from core.constants import PDF_CONTENT_TYPE
from core.exceptions import AnalysisError, ResourceNotFoundError
from core.storage_client import StorageClient
from fastapi.concurrency import run_in_threadpool
from models import Chat, Message, UploadedFile, User
from repositories import ChatRepository, FileRepository
from sqlalchemy.orm import Session

from .usage import UsageService, UsageStatus

logger = logging.getLogger(__name__)

USER_SELECTED_REASONING = "Category selected by user"


@dataclass
class AnalysisRun:
    """Всё, что нужно эндпоинту для ответа"""

    chat: Chat
    message: Message
    category: RedFlagCategory
    detection: CategoryDetectionResult
    outcome: AnalysisOutcome
    usage: UsageStatus
    latency_ms: float


def _chat_title(content: str) -> str:
    title = " ".join(content.split())[:CHAT_TITLE_MAX_CHARS].strip()
    return title or DEFAULT_CHAT_TITLE


def _attachment_meta(uploaded: UploadedFile) -> Dict[str, Any]:
    return {
        "id": str(uploaded.id),
        "name": uploaded.filename,
        "content_type": uploaded.file_type,
        "size": uploaded.file_size,
        "url": f"/files/{uploaded.id}",
    }


class AnalysisService:
    """
    Выполняет один анализ пользователя от проверки лимитов до сохранения результата.
    """

    def __init__(
        self,
        db: Session,
        storage: StorageClient,
        detector: CategoryDetector,
        analyzer: RedFlagAnalyzer,
        usage: Optional[UsageService] = None,
    ):
        self.db = db
        self.storage = storage
        self.detector = detector
        self.analyzer = analyzer
        self.usage = usage or UsageService(db)
        self.chats = ChatRepository(db)
        self.files = FileRepository(db)

    def _resolve_chat(self, user: User, chat_id: Optional[int], content: str) -> Chat:
        if chat_id is not None:
            chat = self.chats.get_owned(chat_id, user.id)
            if not chat:
                raise ResourceNotFoundError(RESOURCE_CHAT, chat_id)
            logger.info(f"[ANALYZE] Using existing chat: id={chat.id}")
            return chat

        chat = self.chats.create_chat(user.id, title=_chat_title(content))
        logger.info(f"[ANALYZE] Created new chat: id={chat.id}")
        return chat

    def _load_files(self, chat: Chat, file_ids: Sequence[UUID]) -> List[UploadedFile]:
        if not file_ids:
            return []
        found = self.files.get_for_chat(chat.id, file_ids)
        found_ids = {f.id for f in found}
        for file_id in file_ids:
            if file_id not in found_ids:
                raise ResourceNotFoundError(RESOURCE_FILE, str(file_id))
        return found

    async def _attachment_contents(self, files: Sequence[UploadedFile]) -> List[AttachmentContent]:
        contents = []
        for uploaded in files:
            data = None
            if uploaded.file_type == PDF_CONTENT_TYPE:
                data = await run_in_threadpool(self.storage.get_file, uploaded.object_name)
            contents.append(
                AttachmentContent(filename=uploaded.filename, content_type=uploaded.file_type, data=data)
            )
        return contents

    async def _resolve_category(
        self, category: Optional[RedFlagCategory], text: str
    ) -> CategoryDetectionResult:
        if category is not None:
            return CategoryDetectionResult(
                category=category, confidence=1.0, reasoning=USER_SELECTED_REASONING
            )
        return await self.detector.detect(text)

    async def run(
        self,
        user: User,
        content: str,
        chat_id: Optional[int] = None,
        category: Optional[RedFlagCategory] = None,
        file_ids: Sequence[UUID] = (),
    ) -> AnalysisRun:
        """
        Выполняет анализ и сохраняет его в чат.

        Args:
            user: Текущий пользователь
            content: Текст для анализа
            chat_id: Существующий чат (None - создать новый)
            category: Категория, выбранная пользователем (None - определить автоматически)
            file_ids: Загруженные в чат файлы для анализа

        Returns:
            AnalysisRun

        Raises:
            RateLimitError: лимиты исчерпаны
            ResourceNotFoundError: чат или файл не найдены
            AnalysisError: анализ не удался
        """
        start_time = time.time()

        self.usage.ensure_can_analyze(user.id)

        chat = self._resolve_chat(user, chat_id, content)
        files = self._load_files(chat, file_ids)
        analysis_text, image_count = build_analysis_input(content, await self._attachment_contents(files))

        detection = await self._resolve_category(category, analysis_text)
        resolved_category = detection.category
        logger.info(
            f"[ANALYZE] chat_id={chat.id}, category={resolved_category.value}, "
            f"files={len(files)}, images={image_count}"
        )

        try:
            outcome = await self.analyzer.analyze_with_retry(resolved_category, analysis_text, image_count)
        except AnalysisError:
            # Чат остаётся в истории даже при неудачном анализе
            self.chats.touch(chat)
            raise

        result = outcome.result
        self.chats.add_message(
            chat,
            role=ROLE_USER,
            content=content,
            attachments=[_attachment_meta(f) for f in files] or None,
        )
        red_flag_data = result.model_dump(by_alias=True)
        red_flag_data["category"] = resolved_category.value
        red_flag_data["detection"] = detection.model_dump(mode="json")
        assistant_message = self.chats.add_message(
            chat,
            role=ROLE_ASSISTANT,
            content=outcome.explanation or result.verdict,
            red_flag_data=red_flag_data,
        )

        chat.category = resolved_category.value
        chat.red_flag_score = result.red_flag_score
        self.usage.increment(user.id)
        self.db.commit()
        self.db.refresh(assistant_message)

        latency_ms = (time.time() - start_time) * 1000
        logger.info(
            f"[ANALYZE] Saved analysis for chat_id={chat.id}",
            extra={"red_flag_score": result.red_flag_score, "latency_ms": round(latency_ms, 2)},
        )

        return AnalysisRun(
            chat=chat,
            message=assistant_message,
            category=resolved_category,
            detection=detection,
            outcome=outcome,
            usage=self.usage.get_status(user.id),
            latency_ms=latency_ms,
        )
