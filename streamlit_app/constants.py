"""Константы приложения."""

from typing import Final

# ===== HTTP STATUS CODES =====
HTTP_OK: Final[int] = 200
HTTP_CREATED: Final[int] = 201
HTTP_NO_CONTENT: Final[int] = 204
HTTP_BAD_REQUEST: Final[int] = 400
HTTP_UNAUTHORIZED: Final[int] = 401
HTTP_FORBIDDEN: Final[int] = 403
HTTP_NOT_FOUND: Final[int] = 404
HTTP_TOO_MANY_REQUESTS: Final[int] = 429
HTTP_INTERNAL_SERVER_ERROR: Final[int] = 500

# ===== SESSION STATE KEYS =====
SESSION_AUTHENTICATED: Final[str] = "authenticated"
SESSION_TOKEN: Final[str] = "token"
SESSION_USER_INFO: Final[str] = "user_info"
SESSION_MESSAGES: Final[str] = "messages"
SESSION_CHAT_ID: Final[str] = "chat_id"
SESSION_MESSAGES_LOADED: Final[str] = "messages_loaded"
SESSION_USAGE: Final[str] = "usage"
SESSION_CATEGORIES: Final[str] = "categories"
SESSION_PENDING_EMAIL: Final[str] = "pending_email"
SESSION_TOKEN_CHECKED: Final[str] = "token_checked"
SESSION_TOKEN_SAVED: Final[str] = "token_saved"
SESSION_SHOW_PROFILE_MODAL: Final[str] = "show_profile_modal"

# ===== LOCALSTORAGE KEYS =====
LOCALSTORAGE_AUTH_TOKEN_KEY: Final[str] = "auth_token"
AUTH_COOKIE_MAX_AGE_SECONDS: Final[int] = 30 * 24 * 3600

# ===== PASSWORD VALIDATION =====
MIN_PASSWORD_LENGTH: Final[int] = 8
MAX_PASSWORD_LENGTH: Final[int] = 100

# ===== TIMEOUTS =====
ANALYSIS_TIMEOUT: Final[int] = 180
HEALTH_CHECK_TIMEOUT: Final[int] = 5

# ===== TOKEN VALIDATION =====
MIN_TOKEN_LENGTH: Final[int] = 10

# ===== FILES =====
MAX_UPLOAD_FILES: Final[int] = 5
UPLOAD_FILE_TYPES: Final[list] = ["png", "jpg", "jpeg", "pdf"]

# ===== UI MESSAGES =====
MSG_LOGIN_SUCCESS: Final[str] = "✅ Добро пожаловать, {email}!"
MSG_LOGIN_ERROR: Final[str] = "❌ Неверный email или пароль"
MSG_EMAIL_NOT_VERIFIED: Final[str] = "📧 Подтвердите email перед входом. Ссылка отправлена на {email}"
MSG_REGISTER_SUCCESS: Final[str] = "✅ Аккаунт создан! Мы отправили ссылку для подтверждения на {email}"
MSG_REGISTER_EMAIL_FAILED: Final[str] = "⚠️ Аккаунт создан, но письмо не отправилось. Запросите ссылку повторно"
MSG_REGISTER_ERROR: Final[str] = "❌ Ошибка регистрации"
MSG_RESEND_ERROR: Final[str] = "❌ Не удалось отправить письмо. Попробуйте позже"
MSG_EMPTY_FIELDS: Final[str] = "❌ Заполните все поля"
MSG_PASSWORDS_MISMATCH: Final[str] = "❌ Пароли не совпадают"
MSG_CHAT_CREATE_ERROR: Final[str] = "Не удалось создать чат"
MSG_CHATS_LOAD_ERROR: Final[str] = "Не удалось загрузить список анализов"
MSG_NO_CHATS_YET: Final[str] = "У вас пока нет анализов. Начните новый!"
MSG_EMPTY_CONTENT: Final[str] = "❌ Вставьте текст для проверки"
MSG_UPLOAD_ERROR: Final[str] = "❌ Не удалось загрузить файл {name}: {error}"
MSG_ANALYSIS_ERROR: Final[str] = "❌ Анализ не выполнен: {error}"
MSG_LIMIT_REACHED: Final[str] = "⏳ Лимит анализов исчерпан. Сброс: {reset_time}"

# ===== ROLES =====
ROLE_USER: Final[str] = "user"
ROLE_ASSISTANT: Final[str] = "assistant"

# ===== CATEGORY SELECTOR =====
AUTO_DETECT_LABEL: Final[str] = "🔍 Определить автоматически"

# ===== FLAG SECTIONS =====
FLAG_SECTIONS: Final[list] = [
    ("criticalFlags", "🚩 Критичные сигналы"),
    ("warnings", "⚠️ Предупреждения"),
    ("notices", "ℹ️ Стоит обратить внимание"),
    ("positives", "✅ Положительные признаки"),
]

# ===== DEFAULT CHAT TITLE =====
DEFAULT_CHAT_TITLE: Final[str] = "Новый анализ"

# ===== API ENDPOINTS =====
ENDPOINT_HEALTH: Final[str] = "/health"
ENDPOINT_AUTH_REGISTER: Final[str] = "/auth/register"
ENDPOINT_AUTH_LOGIN: Final[str] = "/auth/login"
ENDPOINT_AUTH_ME: Final[str] = "/auth/me"
ENDPOINT_AUTH_RESEND: Final[str] = "/auth/resend-verification"
ENDPOINT_ANALYSIS: Final[str] = "/analysis"
ENDPOINT_DETECT: Final[str] = "/analysis/detect"
ENDPOINT_CATEGORIES: Final[str] = "/analysis/categories"
ENDPOINT_FILES_UPLOAD: Final[str] = "/files/upload"
ENDPOINT_USAGE: Final[str] = "/usage"
ENDPOINT_CHATS: Final[str] = "/chats"
