"""Утилиты для аутентификации и валидации."""

import logging
from typing import Optional

import streamlit as st

from api_client import APIClient
from constants import (
    MAX_PASSWORD_LENGTH,
    MIN_PASSWORD_LENGTH,
    SESSION_AUTHENTICATED,
    SESSION_TOKEN,
    SESSION_TOKEN_CHECKED,
    SESSION_TOKEN_SAVED,
    SESSION_USER_INFO,
)
from core.session import check_authentication, clear_session_state
from core.storage import get_stored_token, remove_token, save_token

logger = logging.getLogger(__name__)


def validate_password(password: str) -> Optional[str]:
    """
    Валидация пароля по тем же правилам, что и на сервере:
    длина, заглавная и строчная буквы, цифра.

    Args:
        password: Пароль для валидации

    Returns:
        Сообщение об ошибке (на русском) или None если всё ок
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Пароль должен быть минимум {MIN_PASSWORD_LENGTH} символов"

    if len(password) > MAX_PASSWORD_LENGTH:
        return f"Пароль не может быть длиннее {MAX_PASSWORD_LENGTH} символов"

    if not any(ch.isupper() for ch in password):
        return "Пароль должен содержать хотя бы одну заглавную букву"

    if not any(ch.islower() for ch in password):
        return "Пароль должен содержать хотя бы одну строчную букву"

    if not any(ch.isdigit() for ch in password):
        return "Пароль должен содержать хотя бы одну цифру"

    return None


def restore_session() -> None:
    """
    Восстановить вход по токену, сохранённому в браузере.

    Выполняется один раз за сессию Streamlit: токен проверяется запросом /auth/me,
    просроченный или отозванный токен удаляется из браузера.
    """
    if check_authentication() or st.session_state.get(SESSION_TOKEN_CHECKED):
        return
    st.session_state[SESSION_TOKEN_CHECKED] = True

    token = get_stored_token()
    if not token:
        return

    client = APIClient()
    client.set_token(token)
    user_info = client.get_user_info()

    if user_info:
        st.session_state[SESSION_AUTHENTICATED] = True
        st.session_state[SESSION_TOKEN] = token
        st.session_state[SESSION_USER_INFO] = user_info
        st.session_state[SESSION_TOKEN_SAVED] = True
        logger.info(f"Session restored for user_id={user_info.get('id')}")
    elif client.last_status is not None:
        # Сервер ответил, но токен не принят
        logger.info("Stored token rejected, removing it")
        remove_token()


def logout() -> None:
    """Выход из системы и очистка session state."""
    logger.info("User logged out")
    remove_token()
    clear_session_state()
    # Не восстанавливать сессию из cookie текущего запроса
    st.session_state[SESSION_TOKEN_CHECKED] = True


def require_authentication() -> None:
    """Требует авторизацию, иначе перенаправляет на страницу входа."""
    restore_session()
    if not check_authentication():
        st.switch_page("pages/1_auth.py")


def get_api_client() -> APIClient:
    """
    Получить API клиент с установленным токеном.

    Returns:
        Настроенный API клиент
    """
    client = APIClient()
    if st.session_state.get(SESSION_TOKEN):
        client.set_token(st.session_state[SESSION_TOKEN])
    return client


def persist_token() -> None:
    """Сохранить токен текущей сессии в браузере, если это ещё не сделано"""
    token = st.session_state.get(SESSION_TOKEN)
    if token and not st.session_state.get(SESSION_TOKEN_SAVED):
        save_token(token)
        st.session_state[SESSION_TOKEN_SAVED] = True
