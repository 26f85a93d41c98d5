"""
Хранение JWT в браузере.

Токен пишется в localStorage и дублируется в cookie: cookie приходит вместе
с запросом страницы, и Streamlit отдаёт её в st.context.cookies, поэтому
после перезагрузки вкладки сессию можно восстановить на сервере.
"""

import json
import logging
from typing import Optional

import streamlit as st
import streamlit.components.v1 as components

from constants import AUTH_COOKIE_MAX_AGE_SECONDS, LOCALSTORAGE_AUTH_TOKEN_KEY, MIN_TOKEN_LENGTH

logger = logging.getLogger(__name__)


def _run_script(body: str) -> None:
    # components.html рендерит iframe того же origin, поэтому доступен window.parent
    components.html(f"<script>{body}</script>", height=0)


def get_stored_token() -> Optional[str]:
    """
    Токен из cookie текущего запроса.

    Returns:
        Токен или None если его нет или он явно невалиден
    """
    token = st.context.cookies.get(LOCALSTORAGE_AUTH_TOKEN_KEY)
    if token and len(token) > MIN_TOKEN_LENGTH:
        return token
    return None


def save_token(token: str) -> None:
    """Сохранить токен в localStorage и cookie"""
    key = json.dumps(LOCALSTORAGE_AUTH_TOKEN_KEY)
    value = json.dumps(token)
    _run_script(
        f"window.parent.localStorage.setItem({key}, {value});"
        f"window.parent.document.cookie = {key} + '=' + {value}"
        f" + '; path=/; max-age={AUTH_COOKIE_MAX_AGE_SECONDS}; SameSite=Strict';"
    )
    logger.info("Auth token saved in browser")


def remove_token() -> None:
    """Удалить токен из localStorage и cookie"""
    key = json.dumps(LOCALSTORAGE_AUTH_TOKEN_KEY)
    _run_script(
        f"window.parent.localStorage.removeItem({key});"
        f"window.parent.document.cookie = {key} + '=; path=/; max-age=0; SameSite=Strict';"
    )
    logger.info("Auth token removed from browser")
