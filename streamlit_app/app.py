"""Точка входа: восстановление сессии и переход на нужную страницу."""

import streamlit as st

from api_client import APIClient
from config import PAGE_CONFIGS, app_config
from core import check_authentication, init_session_state, restore_session

page_config = PAGE_CONFIGS["main"]
st.set_page_config(
    page_title=page_config.title,
    page_icon=page_config.icon,
    layout=page_config.layout,
    initial_sidebar_state=page_config.initial_sidebar_state,
)

init_session_state()

# Без backend ни вход, ни анализ не работают
if APIClient().get_health() is None:
    st.error(f"❌ API недоступен по адресу {app_config.api_url}. Попробуйте обновить страницу позже.")
    st.stop()

restore_session()

st.switch_page("pages/2_chat.py" if check_authentication() else "pages/1_auth.py")
