"""
Категории анализа и быстрая эвристика их определения по ключевым словам
"""

import re
from enum import Enum
from typing import Dict, List, Optional


class RedFlagCategory(str, Enum):
    """Тип анализируемого контента"""

    DATING = "dating"
    CONVERSATIONS = "conversations"
    JOBS = "jobs"
    HOUSING = "housing"
    MARKETPLACE = "marketplace"
    GENERAL = "general"


DEFAULT_CATEGORY = RedFlagCategory.GENERAL

CATEGORY_INFO: Dict[RedFlagCategory, Dict[str, str]] = {
    RedFlagCategory.DATING: {
        "name": "Dating Profiles",
        "emoji": "💕",
        "description": "Analyze Tinder, Bumble, Hinge profiles for red flags",
    },
    RedFlagCategory.CONVERSATIONS: {
        "name": "Conversations",
        "emoji": "💬",
        "description": "Detect toxic communication patterns in message threads",
    },
    RedFlagCategory.JOBS: {
        "name": "Job Postings",
        "emoji": "💼",
        "description": "Spot exploitative job ads and unrealistic expectations",
    },
    RedFlagCategory.HOUSING: {
        "name": "Housing/Roommates",
        "emoji": "🏠",
        "description": "Identify scams and red flags in rental listings",
    },
    RedFlagCategory.MARKETPLACE: {
        "name": "Marketplace",
        "emoji": "💰",
        "description": "Detect scam listings on Facebook, Craigslist, etc.",
    },
    RedFlagCategory.GENERAL: {
        "name": "General",
        "emoji": "🔍",
        "description": "General purpose analysis",
    },
}

# Порядок проверки важен: первая совпавшая категория побеждает
KEYWORD_PATTERNS: Dict[RedFlagCategory, List[re.Pattern]] = {
    RedFlagCategory.DATING: [
        re.compile(r"\b(tinder|bumble|hinge|dating|swipe|match|profile|bio)\b"),
        re.compile(r"\b(looking for|seeking|age|height|ft|cm)\b"),
        re.compile(r"\b(relationship|hookup|fwb|nsa)\b"),
    ],
    RedFlagCategory.JOBS: [
        re.compile(r"\b(job|hiring|position|role|salary|compensation|benefits)\b"),
        re.compile(r"\b(company|employer|team|office|remote|hybrid)\b"),
        re.compile(r"\b(apply|resume|cv|experience|skills)\b"),
    ],
    RedFlagCategory.HOUSING: [
        re.compile(r"\b(rent|lease|apartment|room|roommate|landlord)\b"),
        re.compile(r"\b(br|bedroom|bath|utilities|deposit|tenant)\b"),
        re.compile(r"\b(furnished|unfurnished|pets|smoking)\b"),
    ],
    RedFlagCategory.MARKETPLACE: [
        re.compile(r"\b(selling|sale|price|obo|firm|cash|paypal|venmo)\b"),
        re.compile(r"\b(brand new|like new|used|condition|shipping)\b"),
        re.compile(r"\b(iphone|ps5|xbox|laptop|tv|furniture)\b"),
    ],
}

GREETING_PATTERN = re.compile(r"^(hey|hi|hello|sup|yo)\b", re.IGNORECASE)
CONVERSATION_MIN_LINES = 3


def get_available_categories() -> List[RedFlagCategory]:
    return list(RedFlagCategory)


def quick_detect_category(content: str) -> Optional[RedFlagCategory]:
    """
    Быстрое определение категории по ключевым словам, без обращения к LLM.

    Args:
        content: Текст пользователя

    Returns:
        Категория или None, если эвристика ничего не распознала
    """
    lower = content.lower()

    for category, patterns in KEYWORD_PATTERNS.items():
        if any(pattern.search(lower) for pattern in patterns):
            return category

    # Переписка: больше трёх строк и хотя бы одна начинается с приветствия
    lines = content.split("\n")
    if len(lines) > CONVERSATION_MIN_LINES and any(
        GREETING_PATTERN.match(line.strip()) for line in lines
    ):
        return RedFlagCategory.CONVERSATIONS

    return None
