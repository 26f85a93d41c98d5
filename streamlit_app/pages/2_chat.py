"""Страница анализа текста на red flags."""

import logging

import streamlit as st

from components import (
    get_categories,
    render_analysis_result,
    render_category_selector,
    render_chat_list,
    render_logo,
    render_logout_button,
    render_usage_indicator,
    render_user_profile_button,
)
from config import PAGE_CONFIGS, app_config
from constants import (
    HTTP_TOO_MANY_REQUESTS,
    MAX_UPLOAD_FILES,
    MSG_ANALYSIS_ERROR,
    MSG_CHAT_CREATE_ERROR,
    MSG_EMPTY_CONTENT,
    MSG_LIMIT_REACHED,
    MSG_UPLOAD_ERROR,
    ROLE_ASSISTANT,
    ROLE_USER,
    SESSION_CHAT_ID,
    SESSION_MESSAGES,
    SESSION_MESSAGES_LOADED,
    SESSION_USAGE,
    UPLOAD_FILE_TYPES,
)
from core import (
    get_api_client,
    init_session_state,
    persist_token,
    require_authentication,
)
from styles import ANALYSIS_FORM_STYLE

# Настройка логирования
logging.basicConfig(level=app_config.log_level, format=app_config.log_format)
logger = logging.getLogger(__name__)

# Конфигурация страницы
page_config = PAGE_CONFIGS["chat"]
st.set_page_config(
    page_title=page_config.title,
    page_icon=page_config.icon,
    layout=page_config.layout,
    initial_sidebar_state=page_config.initial_sidebar_state,
)

# Инициализация сессии
init_session_state()

# Восстановление входа и проверка аутентификации
require_authentication()
persist_token()

api_client = get_api_client()

st.markdown(ANALYSIS_FORM_STYLE, unsafe_allow_html=True)

# ===== SIDEBAR =====
with st.sidebar:
    render_logo()

    render_user_profile_button(api_client)
    render_usage_indicator(api_client)
    render_chat_list(api_client, current_chat_id=st.session_state.get(SESSION_CHAT_ID))

    st.markdown(" ")
    st.markdown("---")

    render_logout_button()

# ===== MAIN CONTENT =====

st.markdown("## Проверка на red flags")
st.caption(
    "Вставьте объявление, переписку или профиль. "
    "Можно приложить скриншоты (PNG, JPEG) или PDF."
)

categories = get_categories(api_client)

# Загрузка истории сообщений при открытии чата
if st.session_state.get(SESSION_CHAT_ID) and not st.session_state.get(SESSION_MESSAGES_LOADED, False):
    chat_id = st.session_state[SESSION_CHAT_ID]
    logger.info(f"Loading message history for chat_id={chat_id}")
    with st.spinner("Загрузка истории..."):
        messages_data = api_client.get_chat_messages(chat_id)
        if messages_data and "messages" in messages_data:
            st.session_state[SESSION_MESSAGES] = [
                {
                    "role": msg["role"],
                    "content": msg["content"],
                    "attachments": msg.get("attachments") or [],
                    "red_flag_data": msg.get("red_flag_data"),
                }
                for msg in messages_data["messages"]
            ]
            st.session_state[SESSION_MESSAGES_LOADED] = True
            logger.info(f"Loaded {len(st.session_state[SESSION_MESSAGES])} messages from history")

# Отображение истории
for message in st.session_state.get(SESSION_MESSAGES, []):
    role = message.get("role", ROLE_USER)
    content = message.get("content", "")

    with st.chat_message(role):
        if role == ROLE_ASSISTANT and message.get("red_flag_data"):
            render_analysis_result(message["red_flag_data"], categories)
            if content:
                with st.expander("Подробный разбор"):
                    st.markdown(content)
        else:
            st.markdown(content)
            for attachment in message.get("attachments", []):
                st.caption(f"📎 {attachment.get('name', '')}")

# Форма анализа
usage = st.session_state.get(SESSION_USAGE) or {}
if usage and not usage.get("can_analyze", True):
    st.warning(MSG_LIMIT_REACHED.format(reset_time=usage["reset_time"][:16].replace("T", " ")))

with st.form(key="analysis_form", clear_on_submit=True):
    category = render_category_selector(api_client)

    user_input = st.text_area(
        "Текст для проверки:",
        placeholder="Например: «Сдаю 2-комнатную квартиру, предоплата переводом до просмотра...»",
        height=180,
        key="analysis_input",
    )

    uploaded_files = st.file_uploader(
        "Вложения",
        type=UPLOAD_FILE_TYPES,
        accept_multiple_files=True,
        key="analysis_files",
    )

    submit_button = st.form_submit_button("Проверить", type="primary", width='stretch')

if submit_button:
    if not user_input or not user_input.strip():
        st.error(MSG_EMPTY_CONTENT)
        st.stop()

    files = (uploaded_files or [])[:MAX_UPLOAD_FILES]
    logger.info(f"User submitted analysis: {user_input[:50]}... files={len(files)}")

    with st.spinner("Анализирую..."):
        # Файлы привязываются к чату, поэтому чат создаётся до загрузки
        if files and not st.session_state.get(SESSION_CHAT_ID):
            chat_result = api_client.create_chat(title=user_input.strip()[:50])
            if not chat_result:
                st.error(MSG_CHAT_CREATE_ERROR)
                st.stop()
            st.session_state[SESSION_CHAT_ID] = chat_result["id"]

        file_ids = []
        for uploaded in files:
            result = api_client.upload_file(
                chat_id=st.session_state[SESSION_CHAT_ID],
                filename=uploaded.name,
                data=uploaded.getvalue(),
                content_type=uploaded.type or "application/octet-stream",
            )
            if result:
                file_ids.append(result["id"])
            else:
                st.error(MSG_UPLOAD_ERROR.format(name=uploaded.name, error=api_client.last_error))
                st.stop()

        response = api_client.analyze(
            content=user_input,
            chat_id=st.session_state.get(SESSION_CHAT_ID),
            category=category,
            file_ids=file_ids,
        )

    if response:
        logger.info(
            f"Analysis done: chat_id={response['chat_id']}, category={response['category']}, "
            f"score={response['analysis']['redFlagScore']}"
        )
        st.session_state[SESSION_CHAT_ID] = response["chat_id"]
        st.session_state[SESSION_MESSAGES_LOADED] = False
        st.session_state[SESSION_USAGE] = response.get("usage")
        st.rerun()
    elif api_client.last_status == HTTP_TOO_MANY_REQUESTS:
        render_usage_indicator(api_client, refresh=True)
        st.warning(api_client.last_error)
    else:
        st.error(MSG_ANALYSIS_ERROR.format(error=api_client.last_error))
