"""Модуль core для работы с аутентификацией, сессиями и хранилищем токена."""

from core.auth import (
    get_api_client,
    logout,
    persist_token,
    require_authentication,
    restore_session,
    validate_password,
)
from core.session import check_authentication, clear_session_state, init_session_state
from core.storage import get_stored_token, remove_token, save_token

__all__ = [
    # auth
    "get_api_client",
    "logout",
    "persist_token",
    "require_authentication",
    "restore_session",
    "validate_password",
    # session
    "check_authentication",
    "clear_session_state",
    "init_session_state",
    # storage
    "get_stored_token",
    "remove_token",
    "save_token",
]
