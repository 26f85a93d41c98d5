"""Утилиты для работы с сессиями Streamlit."""

import logging
from typing import Any, Dict

import streamlit as st

from constants import (
    SESSION_AUTHENTICATED,
    SESSION_CATEGORIES,
    SESSION_CHAT_ID,
    SESSION_MESSAGES,
    SESSION_MESSAGES_LOADED,
    SESSION_PENDING_EMAIL,
    SESSION_SHOW_PROFILE_MODAL,
    SESSION_TOKEN,
    SESSION_TOKEN_CHECKED,
    SESSION_TOKEN_SAVED,
    SESSION_USAGE,
    SESSION_USER_INFO,
)

logger = logging.getLogger(__name__)

# Ключи, которые переживают выход из аккаунта
_PRESERVED_ON_LOGOUT = frozenset({SESSION_CATEGORIES})


def _defaults() -> Dict[str, Any]:
    # Функция, а не константа: списки не должны разделяться между сессиями
    return {
        SESSION_AUTHENTICATED: False,
        SESSION_TOKEN: None,
        SESSION_USER_INFO: None,
        SESSION_MESSAGES: [],
        SESSION_CHAT_ID: None,
        SESSION_MESSAGES_LOADED: False,
        SESSION_USAGE: None,
        SESSION_CATEGORIES: [],
        SESSION_PENDING_EMAIL: None,
        SESSION_TOKEN_CHECKED: False,
        SESSION_TOKEN_SAVED: False,
        SESSION_SHOW_PROFILE_MODAL: False,
    }


def init_session_state() -> None:
    """Инициализация session state с значениями по умолчанию."""
    for key, value in _defaults().items():
        if key not in st.session_state:
            st.session_state[key] = value


def check_authentication() -> bool:
    """
    Проверка авторизации пользователя.

    Returns:
        True если пользователь авторизован, иначе False
    """
    return st.session_state.get(SESSION_AUTHENTICATED, False)


def clear_session_state() -> None:
    """Сброс session state к значениям по умолчанию (logout)."""
    logger.info("Clearing session state")
    for key, value in _defaults().items():
        if key not in _PRESERVED_ON_LOGOUT:
            st.session_state[key] = value
