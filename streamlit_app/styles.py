"""Централизованные стили для Streamlit приложения."""

import html
from typing import Final

# ===== COLORS =====
PRIMARY_COLOR: Final[str] = "#D32F2F"
PRIMARY_COLOR_DARK: Final[str] = "#B71C1C"
PRIMARY_COLOR_LIGHT: Final[str] = "#E57373"
PRIMARY_COLOR_LIGHTER: Final[str] = "#D84343"

# ===== GRADIENT STYLES =====
PRIMARY_GRADIENT: Final[str] = "linear-gradient(135deg, #D32F2F 0%, #E57373 100%)"
PRIMARY_GRADIENT_HOVER: Final[str] = "linear-gradient(135deg, #B71C1C 0%, #D84343 100%)"

# ===== SIDEBAR STYLES =====
SIDEBAR_HIDE_STYLE: Final[str] = """
<style>
    [data-testid="stSidebar"] {
        display: none;
    }
    [data-testid="stSidebarNav"] {
        display: none;
    }
</style>
"""

SIDEBAR_BUTTON_STYLE: Final[str] = """
<style>
/* Кастомная кнопка "Новый анализ" */
div[data-testid="stSidebar"] button[kind="primary"] {
    background: linear-gradient(135deg, #D32F2F 0%, #E57373 100%) !important;
    color: white !important;
    border: none !important;
    font-weight: 600 !important;
    text-align: left !important;
    padding-left: 1rem !important;
}

div[data-testid="stSidebar"] button[kind="primary"]:hover {
    background: linear-gradient(135deg, #B71C1C 0%, #D84343 100%) !important;
    box-shadow: 0 2px 8px rgba(211, 47, 47, 0.3) !important;
}

/* Выравнивание текста по левому краю для всех кнопок в сайдбаре */
div[data-testid="stSidebar"] .stButton button {
    text-align: left !important;
    justify-content: flex-start !important;
}

/* Стиль для кнопок чатов в сайдбаре */
[data-testid="stSidebar"] .stButton button {
    text-align: left !important;
    white-space: nowrap;
    overflow: hidden;
    text-overflow: ellipsis;
}
</style>
"""


# ===== ANALYSIS FORM STYLES =====
ANALYSIS_FORM_STYLE: Final[str] = """
<style>
/* Скрыть стандартный sidebar toggle */
[data-testid="collapsedControl"] {
    display: none;
}

/* Скрыть стандартную навигацию Streamlit */
[data-testid="stSidebarNav"] {
    display: none;
}

/* Форма анализа */
[data-testid="stForm"] {
    border: 1px solid #f0d0d0 !important;
    border-radius: 12px !important;
    padding: 1rem !important;
}

[data-testid="stForm"] textarea {
    font-size: 1rem !important;
}

[data-testid="stForm"] textarea:focus {
    border-color: #D32F2F !important;
    box-shadow: none !important;
}

/* Кнопка запуска анализа */
[data-testid="stForm"] button[kind="primary"],
[data-testid="stForm"] button[type="submit"] {
    background: linear-gradient(135deg, #D32F2F 0%, #E57373 100%) !important;
    color: white !important;
    border: none !important;
    font-weight: 600 !important;
    transition: all 0.2s ease !important;
}

[data-testid="stForm"] button[kind="primary"]:hover,
[data-testid="stForm"] button[type="submit"]:hover {
    background: linear-gradient(135deg, #B71C1C 0%, #D84343 100%) !important;
    box-shadow: 0 2px 8px rgba(211, 47, 47, 0.3) !important;
}
</style>
"""


def get_score_style(score: float) -> tuple[str, str]:
    """
    Получить цвет и подпись для оценки red flags.

    Args:
        score: Оценка от 0 до 10

    Returns:
        Кортеж (цвет, подпись)
    """
    if score < 3:
        return "#4CAF50", "Низкий риск"
    elif score < 5:
        return "#FF9800", "Есть сомнения"
    elif score < 7:
        return "#FF5722", "Высокий риск"
    else:
        return "#F44336", "Критический риск"


def get_score_card_html(score: float, verdict: str, category_label: str) -> str:
    """
    Генерирует HTML карточки с итоговой оценкой.

    Args:
        score: Оценка от 0 до 10
        verdict: Краткий вывод модели
        category_label: Название категории с эмодзи

    Returns:
        HTML строка с карточкой
    """
    color, status = get_score_style(score)
    verdict = html.escape(verdict)
    category_label = html.escape(category_label)

    return f"""
    <div style="background: linear-gradient(90deg, {color} 0%, {color}44 100%);
                padding: 1rem; border-radius: 10px; margin-bottom: 1rem; color: white;">
        <div style="display: flex; justify-content: space-between; align-items: center;">
            <div>
                <div style="font-weight: bold; font-size: 1.1rem;">{status}</div>
                <div style="font-size: 0.9rem; opacity: 0.9;">{category_label}</div>
            </div>
            <div style="font-size: 2rem; font-weight: bold;">{score:.1f} / 10</div>
        </div>
        <div style="margin-top: 0.5rem; font-size: 1rem;">{verdict}</div>
    </div>
    """


def get_usage_indicator_html(usage: int, limit: int, label: str) -> str:
    """
    Генерирует HTML индикатора использования лимита.

    Args:
        usage: Использовано анализов
        limit: Лимит анализов
        label: Подпись ("Сегодня", "В этом месяце")

    Returns:
        HTML строка с индикатором
    """
    percent = (usage / limit) * 100 if limit > 0 else 100
    color = "#4CAF50" if percent < 75 else "#FF9800" if percent < 100 else "#F44336"

    return f"""
    <div style="margin-bottom: 0.75rem;">
        <div style="display: flex; justify-content: space-between; font-size: 0.9rem;">
            <span>{label}</span>
            <span>{usage} / {limit}</span>
        </div>
        <div style="background: #eee; height: 6px; border-radius: 3px; overflow: hidden;">
            <div style="background: {color}; height: 100%; width: {min(percent, 100)}%;"></div>
        </div>
    </div>
    """


def get_logo_html() -> str:
    """Генерирует HTML заголовка приложения."""
    return """
    <div style="text-align: center; padding: 1rem 0 1.5rem 0;">
        <h1 style="font-size: 4rem; margin: 0;">🚩</h1>
        <p style="margin: 0.5rem 0 0 0; color: #666; font-size: 1rem; font-weight: 500;">Red Flag Detector</p>
    </div>
    """
