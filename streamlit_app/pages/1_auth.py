"""Страница входа, регистрации и подтверждения email."""

import logging

import streamlit as st

from api_client import APIClient
from config import PAGE_CONFIGS
from constants import (
    HTTP_FORBIDDEN,
    MAX_PASSWORD_LENGTH,
    MSG_EMAIL_NOT_VERIFIED,
    MSG_EMPTY_FIELDS,
    MSG_LOGIN_ERROR,
    MSG_LOGIN_SUCCESS,
    MSG_PASSWORDS_MISMATCH,
    MSG_REGISTER_EMAIL_FAILED,
    MSG_REGISTER_ERROR,
    MSG_REGISTER_SUCCESS,
    MSG_RESEND_ERROR,
    SESSION_AUTHENTICATED,
    SESSION_PENDING_EMAIL,
    SESSION_TOKEN,
    SESSION_USER_INFO,
)
from core import (
    init_session_state,
    restore_session,
    validate_password,
)
from styles import SIDEBAR_HIDE_STYLE, get_logo_html

logger = logging.getLogger(__name__)

# Настройка страницы
page_config = PAGE_CONFIGS["auth"]
st.set_page_config(
    page_title=page_config.title,
    page_icon=page_config.icon,
    layout=page_config.layout,
    initial_sidebar_state=page_config.initial_sidebar_state,
)

# Инициализация session state
init_session_state()

# Восстановление входа по сохранённому токену
restore_session()

# API клиент
api_client = APIClient()

# Скрываем sidebar и навигацию для неавторизованных пользователей
st.markdown(SIDEBAR_HIDE_STYLE, unsafe_allow_html=True)

# Проверка уже авторизованного пользователя
if st.session_state.get(SESSION_AUTHENTICATED, False):
    st.switch_page("pages/2_chat.py")


def render_resend_form(default_email: str = "") -> None:
    """Форма повторной отправки письма с подтверждением"""
    with st.form(key="resend_form"):
        resend_email = st.text_input(
            "Email для подтверждения:",
            value=default_email,
            placeholder="your@email.com",
        )
        submit_resend = st.form_submit_button("Отправить письмо ещё раз", width='stretch')

        if submit_resend:
            if not resend_email:
                st.error(MSG_EMPTY_FIELDS)
            else:
                with st.spinner("Отправляю письмо..."):
                    result = api_client.resend_verification(resend_email)
                if result:
                    st.success(f"✅ {result.get('message')}")
                else:
                    st.error(api_client.last_error or MSG_RESEND_ERROR)


st.markdown(get_logo_html(), unsafe_allow_html=True)

col1, col2, col3 = st.columns([1, 2, 1])

with col2:
    st.markdown("### Добро пожаловать!")
    st.caption("Проверка объявлений, переписок и профилей на red flags")

    tab1, tab2, tab3 = st.tabs(["Вход", "Регистрация", "Подтверждение email"])

    with tab1:
        st.markdown("#### Вход в систему")

        with st.form(key="login_form"):
            login_email = st.text_input(
                "Email:",
                placeholder="your@email.com",
            )

            login_password = st.text_input(
                "Пароль:",
                type="password",
                placeholder="Введите пароль",
                max_chars=MAX_PASSWORD_LENGTH,
            )

            submit_login = st.form_submit_button("Войти", width='stretch')

            if submit_login:
                if not login_email or not login_password:
                    st.error(MSG_EMPTY_FIELDS)
                else:
                    with st.spinner("Выполняю вход..."):
                        result = api_client.login(login_email, login_password)

                    if result:
                        token = result.get("access_token")
                        user = result.get("user")

                        st.session_state[SESSION_AUTHENTICATED] = True
                        st.session_state[SESSION_TOKEN] = token
                        st.session_state[SESSION_USER_INFO] = user
                        st.session_state[SESSION_PENDING_EMAIL] = None
                        logger.info(f"User logged in: {user.get('email')}")
                        st.success(MSG_LOGIN_SUCCESS.format(email=user.get('email')))
                        st.switch_page("pages/2_chat.py")
                    elif api_client.last_status == HTTP_FORBIDDEN:
                        st.session_state[SESSION_PENDING_EMAIL] = login_email
                        st.warning(MSG_EMAIL_NOT_VERIFIED.format(email=login_email))
                        st.caption("Не пришло письмо? Откройте вкладку «Подтверждение email»")
                    else:
                        st.error(MSG_LOGIN_ERROR)

    with tab2:
        st.markdown("#### Создать новый аккаунт")
        st.info("💡 После регистрации подтвердите email по ссылке из письма")

        with st.form(key="register_form"):
            register_name = st.text_input(
                "Имя:",
                placeholder="Как к вам обращаться (необязательно)",
            )

            register_email = st.text_input(
                "Email:",
                placeholder="your@email.com",
            )

            register_password = st.text_input(
                "Пароль:",
                type="password",
                placeholder="Минимум 8 символов: заглавная, строчная буква и цифра",
                max_chars=MAX_PASSWORD_LENGTH,
            )

            register_password_confirm = st.text_input(
                "Подтвердите пароль:",
                type="password",
                placeholder="Введите пароль ещё раз",
                max_chars=MAX_PASSWORD_LENGTH,
            )

            submit_register = st.form_submit_button("Зарегистрироваться", width='stretch')

            if submit_register:
                if not register_email or not register_password:
                    st.error(MSG_EMPTY_FIELDS)
                elif register_password != register_password_confirm:
                    st.error(MSG_PASSWORDS_MISMATCH)
                else:
                    password_error = validate_password(register_password)
                    if password_error:
                        st.error(f"❌ {password_error}")
                    else:
                        with st.spinner("Создаю аккаунт..."):
                            result = api_client.register(
                                register_email,
                                register_password,
                                register_name or None,
                            )

                        if result:
                            st.session_state[SESSION_PENDING_EMAIL] = register_email
                            logger.info(f"User registered: {result.get('user_id')}")
                            if result.get("email_sent"):
                                st.success(MSG_REGISTER_SUCCESS.format(email=register_email))
                            else:
                                st.warning(MSG_REGISTER_EMAIL_FAILED)
                        else:
                            st.error(f"{MSG_REGISTER_ERROR}: {api_client.last_error}")

    with tab3:
        st.markdown("#### Подтверждение email")
        st.caption("Ссылка из письма действует 24 часа. Если она истекла, запросите новую.")
        render_resend_form(st.session_state.get(SESSION_PENDING_EMAIL) or "")
