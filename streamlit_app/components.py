"""Общие компоненты для Streamlit приложения."""

from typing import Any, Dict, List, Optional

import streamlit as st

from api_client import APIClient
from constants import (
    AUTO_DETECT_LABEL,
    DEFAULT_CHAT_TITLE,
    FLAG_SECTIONS,
    MSG_CHAT_CREATE_ERROR,
    MSG_CHATS_LOAD_ERROR,
    MSG_NO_CHATS_YET,
    SESSION_CATEGORIES,
    SESSION_CHAT_ID,
    SESSION_MESSAGES,
    SESSION_MESSAGES_LOADED,
    SESSION_SHOW_PROFILE_MODAL,
    SESSION_USAGE,
    SESSION_USER_INFO,
)
from core.auth import logout
from styles import (
    SIDEBAR_BUTTON_STYLE,
    get_logo_html,
    get_score_card_html,
    get_usage_indicator_html,
)


def render_logo() -> None:
    """Отображает заголовок приложения."""
    st.markdown(get_logo_html(), unsafe_allow_html=True)


def get_categories(api_client: APIClient) -> List[Dict[str, Any]]:
    """Список категорий, закешированный в session state"""
    if not st.session_state.get(SESSION_CATEGORIES):
        st.session_state[SESSION_CATEGORIES] = api_client.get_categories() or []
    return st.session_state[SESSION_CATEGORIES]


def category_label(categories: List[Dict[str, Any]], category_id: Optional[str]) -> str:
    for category in categories:
        if category["id"] == category_id:
            return f"{category['emoji']} {category['name']}"
    return category_id or ""


def render_category_selector(api_client: APIClient) -> Optional[str]:
    """
    Выбор категории анализа.

    Returns:
        ID категории или None для автоматического определения
    """
    categories = get_categories(api_client)
    options: List[Optional[str]] = [None] + [c["id"] for c in categories]

    return st.selectbox(
        "Категория",
        options,
        format_func=lambda c: AUTO_DETECT_LABEL if c is None else category_label(categories, c),
        key="category_select",
    )


def render_chat_list(
    api_client: APIClient,
    current_chat_id: Optional[int] = None,
) -> None:
    """
    Отображает список анализов пользователя.

    Args:
        api_client: API клиент
        current_chat_id: ID текущего открытого чата
    """
    st.markdown(SIDEBAR_BUTTON_STYLE, unsafe_allow_html=True)

    if st.button(
        f"+ {DEFAULT_CHAT_TITLE}",
        use_container_width=True,
        type="primary",
        key="new_chat_btn",
    ):
        result = api_client.create_chat()
        if result:
            st.session_state[SESSION_CHAT_ID] = result.get("id")
            st.session_state[SESSION_MESSAGES] = []
            st.session_state[SESSION_MESSAGES_LOADED] = True  # Новый чат, история пустая
            st.rerun()
        else:
            st.error(MSG_CHAT_CREATE_ERROR)

    st.markdown("")

    st.markdown("#### Ваши анализы")

    chats_data = api_client.get_chats()
    if chats_data and "chats" in chats_data:
        chats = chats_data["chats"]

        if not chats:
            st.info(MSG_NO_CHATS_YET)
        else:
            for chat in chats:
                chat_id = chat["id"]
                title = chat["title"]
                score = chat.get("red_flag_score")
                if score is not None:
                    title = f"{score:.1f} · {title}"

                is_active = chat_id == current_chat_id

                col1, col2 = st.columns([4, 1])

                with col1:
                    if st.button(
                        title,
                        key=f"chat_{chat_id}",
                        use_container_width=True,
                        type="primary" if is_active else "secondary",
                    ):
                        # При смене чата очищаем состояние и загружаем историю
                        st.session_state[SESSION_CHAT_ID] = chat_id
                        st.session_state[SESSION_MESSAGES] = []
                        st.session_state[SESSION_MESSAGES_LOADED] = False
                        st.rerun()

                with col2:
                    if st.button("⨯", key=f"delete_{chat_id}", help="Удалить анализ"):
                        if api_client.delete_chat(chat_id):
                            if chat_id == current_chat_id:
                                st.session_state[SESSION_CHAT_ID] = None
                                st.session_state[SESSION_MESSAGES] = []
                            st.rerun()
    else:
        st.warning(MSG_CHATS_LOAD_ERROR)


def render_usage_indicator(api_client: APIClient, refresh: bool = False) -> None:
    """
    Отображает дневной и месячный лимиты анализов.

    Args:
        api_client: API клиент
        refresh: Перезапросить данные у сервера
    """
    if refresh or not st.session_state.get(SESSION_USAGE):
        st.session_state[SESSION_USAGE] = api_client.get_usage()

    usage = st.session_state.get(SESSION_USAGE)
    if not usage:
        return

    st.markdown("#### Лимиты")
    st.markdown(
        get_usage_indicator_html(usage["daily_usage"], usage["daily_limit"], "Сегодня"),
        unsafe_allow_html=True,
    )
    st.markdown(
        get_usage_indicator_html(usage["monthly_usage"], usage["monthly_limit"], "В этом месяце"),
        unsafe_allow_html=True,
    )
    if not usage.get("can_analyze", True):
        st.caption(f"Сброс лимита: {usage['reset_time'][:16].replace('T', ' ')} UTC")


def render_analysis_result(red_flag_data: Dict[str, Any], categories: List[Dict[str, Any]]) -> None:
    """
    Отображает результат анализа: карточку с оценкой, сигналы по уровням и совет.

    Args:
        red_flag_data: Сохранённый результат анализа (camelCase поля)
        categories: Список категорий для подписи
    """
    score = float(red_flag_data.get("redFlagScore", 0))
    label = category_label(categories, red_flag_data.get("category"))
    st.markdown(
        get_score_card_html(score, red_flag_data.get("verdict", ""), label),
        unsafe_allow_html=True,
    )

    for key, title in FLAG_SECTIONS:
        items = red_flag_data.get(key) or []
        if not items:
            continue
        with st.expander(f"{title} ({len(items)})", expanded=key == "criticalFlags"):
            for item in items:
                header = item.get("category") or "—"
                st.markdown(f"**{header}**")
                if item.get("evidence"):
                    st.markdown(f"> {item['evidence']}")
                if item.get("explanation"):
                    st.write(item["explanation"])

    if red_flag_data.get("advice"):
        st.info(f"💡 {red_flag_data['advice']}")


def render_user_profile_button(api_client: APIClient) -> None:
    """
    Отображает кнопку профиля пользователя с модальным окном настроек.

    Args:
        api_client: API клиент
    """
    user_info = st.session_state.get(SESSION_USER_INFO)

    if user_info:
        email = user_info.get("email", "Пользователь")

        if st.button(
            user_info.get("name") or email,
            use_container_width=True,
            type="secondary",
            key="profile_btn",
        ):
            st.session_state[SESSION_SHOW_PROFILE_MODAL] = not st.session_state.get(
                SESSION_SHOW_PROFILE_MODAL,
                False,
            )
            st.rerun()

        if st.session_state.get(SESSION_SHOW_PROFILE_MODAL, False):
            with st.expander("Профиль", expanded=True):
                st.text_input(
                    "Email",
                    value=email,
                    disabled=True,
                    key="profile_email",
                )

                created_at = user_info.get("created_at", "")
                if created_at:
                    st.text_input(
                        "Дата регистрации",
                        value=created_at[:10],
                        disabled=True,
                        key="profile_date",
                    )

                if user_info.get("email_verified"):
                    st.success("Email подтверждён")
                st.caption("💡 Нажмите кнопку профиля снова, чтобы закрыть")


def render_logout_button() -> None:
    """Отображает кнопку выхода."""
    if st.button("Выйти из системы", use_container_width=True, type="secondary"):
        logout()
        st.switch_page("pages/1_auth.py")
