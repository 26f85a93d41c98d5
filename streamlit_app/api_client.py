"""Централизованный API клиент для взаимодействия с backend."""

import logging
from typing import Any, Dict, List, Optional

import requests

from config import app_config
from constants import (
    ANALYSIS_TIMEOUT,
    ENDPOINT_ANALYSIS,
    ENDPOINT_AUTH_LOGIN,
    ENDPOINT_AUTH_ME,
    ENDPOINT_AUTH_REGISTER,
    ENDPOINT_AUTH_RESEND,
    ENDPOINT_CATEGORIES,
    ENDPOINT_CHATS,
    ENDPOINT_DETECT,
    ENDPOINT_FILES_UPLOAD,
    ENDPOINT_HEALTH,
    ENDPOINT_USAGE,
    HEALTH_CHECK_TIMEOUT,
    HTTP_CREATED,
    HTTP_NO_CONTENT,
    HTTP_OK,
)

logger = logging.getLogger(__name__)


class APIClient:
    """Клиент для взаимодействия с FastAPI backend."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> None:
        """
        Инициализация API клиента.

        Args:
            base_url: Базовый URL API (по умолчанию из конфигурации)
            timeout: Таймаут запросов в секундах
        """
        self.base_url = base_url or app_config.api_url
        self.timeout = timeout or app_config.api_timeout
        self.token: Optional[str] = None
        # Сведения о последней ошибке для вывода пользователю
        self.last_status: Optional[int] = None
        self.last_error: Optional[str] = None
        self.last_error_code: Optional[str] = None

    def set_token(self, token: str) -> None:
        """Установить токен авторизации"""
        self.token = token

    def clear_token(self) -> None:
        """Очистить токен авторизации"""
        self.token = None

    def _get_headers(self, json_body: bool = True) -> Dict[str, str]:
        """Получить заголовки для запроса"""
        headers = {"Content-Type": "application/json"} if json_body else {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _handle_response(
        self,
        response: requests.Response,
    ) -> Optional[Dict[str, Any]]:
        """
        Обработка ответа от сервера.

        Args:
            response: Ответ от сервера

        Returns:
            JSON данные или None в случае ошибки
        """
        self.last_status = response.status_code
        self.last_error = None
        self.last_error_code = None

        if response.status_code in (HTTP_OK, HTTP_CREATED):
            try:
                return response.json()
            except ValueError as e:
                logger.error(f"Failed to parse JSON response: {e}")
                self.last_error = "Invalid server response"
                return None

        try:
            body = response.json()
        except ValueError:
            body = {}
        if isinstance(body, dict):
            self.last_error = body.get("message") or body.get("detail")
            self.last_error_code = body.get("error")
        if not isinstance(self.last_error, str):
            self.last_error = f"HTTP {response.status_code}"

        logger.error(
            f"API request failed with status {response.status_code}: "
            f"{response.text[:200]}"
        )
        return None

    def _request_failed(self, action: str, error: Exception) -> None:
        logger.error(f"{action} failed: {error}")
        self.last_status = None
        self.last_error = "Server is unavailable"
        self.last_error_code = None

    def _request(
        self,
        method: str,
        path: str,
        action: str,
        auth: bool = True,
        json_body: bool = True,
        timeout: Optional[int] = None,
        **kwargs: Any,
    ) -> Optional[requests.Response]:
        """
        Выполнить HTTP запрос к API.

        Returns:
            Ответ сервера или None, если сервер недоступен (детали в last_error)
        """
        headers = self._get_headers(json_body=json_body) if auth else {}
        try:
            return requests.request(
                method,
                f"{self.base_url}{path}",
                headers=headers,
                timeout=timeout or self.timeout,
                **kwargs,
            )
        except requests.exceptions.RequestException as e:
            self._request_failed(action, e)
            return None

    def _call(self, method: str, path: str, action: str, **kwargs: Any) -> Optional[Dict[str, Any]]:
        response = self._request(method, path, action, **kwargs)
        return self._handle_response(response) if response is not None else None

    # ==================== Auth ====================

    def register(
        self,
        email: str,
        password: str,
        name: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Регистрация нового пользователя.

        Токен в ответе не выдаётся: вход возможен только после подтверждения email.

        Returns:
            {success, message, user_id, email_sent} или None в случае ошибки
        """
        payload: Dict[str, Any] = {"email": email, "password": password}
        if name:
            payload["name"] = name
        return self._call("POST", ENDPOINT_AUTH_REGISTER, "Registration", auth=False, json=payload)

    def login(self, email: str, password: str) -> Optional[Dict[str, Any]]:
        """
        Вход пользователя.

        Returns:
            {access_token, token_type, user} или None; при неподтверждённом email
            last_status == 403
        """
        return self._call(
            "POST",
            ENDPOINT_AUTH_LOGIN,
            "Login",
            auth=False,
            json={"email": email, "password": password},
        )

    def resend_verification(self, email: str) -> Optional[Dict[str, Any]]:
        """Повторная отправка письма с подтверждением"""
        return self._call("POST", ENDPOINT_AUTH_RESEND, "Resend verification", auth=False, json={"email": email})

    def get_user_info(self) -> Optional[Dict[str, Any]]:
        return self._call("GET", ENDPOINT_AUTH_ME, "Get user info")

    # ==================== Analysis ====================

    def analyze(
        self,
        content: str,
        chat_id: Optional[int] = None,
        category: Optional[str] = None,
        file_ids: Optional[List[str]] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Анализ текста на red flags.

        Args:
            content: Текст для проверки
            chat_id: ID чата (опционально, иначе создаётся новый)
            category: Категория (опционально, иначе определяется автоматически)
            file_ids: ID ранее загруженных файлов

        Returns:
            Результат анализа или None в случае ошибки (детали в last_error)
        """
        payload: Dict[str, Any] = {"content": content}
        if chat_id:
            payload["chat_id"] = chat_id
        if category:
            payload["category"] = category
        if file_ids:
            payload["file_ids"] = file_ids
        return self._call("POST", ENDPOINT_ANALYSIS, "Analysis", json=payload, timeout=ANALYSIS_TIMEOUT)

    def detect_category(self, content: str) -> Optional[Dict[str, Any]]:
        """Определение категории без анализа"""
        return self._call("POST", ENDPOINT_DETECT, "Detect category", json={"content": content})

    def get_categories(self) -> Optional[List[Dict[str, Any]]]:
        """Список категорий анализа"""
        data = self._call("GET", ENDPOINT_CATEGORIES, "Get categories", auth=False)
        return data.get("categories", []) if data else None

    def get_usage(self) -> Optional[Dict[str, Any]]:
        """Текущее использование и лимиты"""
        return self._call("GET", ENDPOINT_USAGE, "Get usage")

    # ==================== Files ====================

    def upload_file(
        self,
        chat_id: int,
        filename: str,
        data: bytes,
        content_type: str,
    ) -> Optional[Dict[str, Any]]:
        """
        Загрузка файла в чат (multipart/form-data).

        Returns:
            {id, url, pathname, content_type, size, auto_delete_at} или None
        """
        return self._call(
            "POST",
            ENDPOINT_FILES_UPLOAD,
            "Upload file",
            json_body=False,
            files={"file": (filename, data, content_type)},
            data={"chat_id": str(chat_id)},
        )

    # ==================== Service ====================

    def get_health(self) -> Optional[Dict[str, Any]]:
        """Статус API и его зависимостей или None, если API недоступен"""
        return self._call("GET", ENDPOINT_HEALTH, "Health check", auth=False, timeout=HEALTH_CHECK_TIMEOUT)

    # ==================== Chats ====================

    def get_chats(
        self,
        skip: int = 0,
        limit: int = app_config.default_chats_limit,
        category: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        История анализов текущего пользователя.

        Args:
            skip: Количество чатов для пропуска
            limit: Максимальное количество чатов
            category: Только чаты этой категории

        Returns:
            {chats, total} или None в случае ошибки
        """
        params: Dict[str, Any] = {"skip": skip, "limit": limit}
        if category:
            params["category"] = category
        return self._call("GET", f"{ENDPOINT_CHATS}/", "Get chats", params=params)

    def create_chat(self, title: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Создание пустого чата; без title название задаёт сервер"""
        payload = {"title": title} if title else {}
        return self._call("POST", f"{ENDPOINT_CHATS}/", "Create chat", json=payload)

    def delete_chat(self, chat_id: int) -> bool:
        """True, если чат удалён"""
        response = self._request("DELETE", f"{ENDPOINT_CHATS}/{chat_id}", "Delete chat")
        return response is not None and response.status_code == HTTP_NO_CONTENT

    def get_chat_messages(
        self,
        chat_id: int,
        skip: int = 0,
        limit: int = app_config.default_messages_limit,
    ) -> Optional[Dict[str, Any]]:
        """Сообщения чата в хронологическом порядке: {messages, total} или None"""
        return self._call(
            "GET",
            f"{ENDPOINT_CHATS}/{chat_id}/messages",
            "Get chat messages",
            params={"skip": skip, "limit": limit},
        )
