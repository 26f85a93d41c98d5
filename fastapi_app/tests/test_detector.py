"""
Тесты определения категории: эвристика по ключевым словам и LLM-классификатор
"""

import pytest
from analysis import CATEGORY_INFO, CategoryDetector, RedFlagCategory, get_available_categories, quick_detect_category
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from .conftest import ScriptedLLM


# ==================== quick_detect_category ====================


@pytest.mark.parametrize(
    "content, expected",
    [
        ("Check out my Tinder bio, 6 ft, love hiking", RedFlagCategory.DATING),
        ("We are hiring a senior engineer, competitive salary", RedFlagCategory.JOBS),
        ("Sunny 2BR apartment, utilities included, landlord lives upstairs", RedFlagCategory.HOUSING),
        ("Selling PS5, brand new, cash only", RedFlagCategory.MARKETPLACE),
    ],
)
def test_keyword_detection(content, expected):
    assert quick_detect_category(content) == expected


def test_dating_checked_before_jobs():
    # "profile" и "experience" совпадают сразу с двумя категориями
    assert quick_detect_category("My profile says I have experience") == RedFlagCategory.DATING


def test_conversation_detected_by_greeting_and_lines():
    content = "hey\nwhy didn't you answer\nwho were you with\nanswer me now"

    assert quick_detect_category(content) == RedFlagCategory.CONVERSATIONS


def test_short_greeting_is_not_conversation():
    assert quick_detect_category("hey\nwhat's up") is None


def test_unrecognized_content_returns_none():
    assert quick_detect_category("Lorem ipsum dolor sit amet") is None


def test_every_category_has_ui_info():
    assert get_available_categories() == list(RedFlagCategory)
    for category in get_available_categories():
        assert {"name", "emoji", "description"} <= set(CATEGORY_INFO[category])


# ==================== CategoryDetector ====================


@pytest.mark.asyncio
async def test_detector_returns_confident_category():
    llm = ScriptedLLM(['{"category": "jobs", "confidence": 0.88, "reasoning": "Job posting"}'])

    result = await CategoryDetector(llm).detect("Looking for a rockstar developer")

    assert result.category == RedFlagCategory.JOBS
    assert result.confidence == 0.88
    assert len(llm.calls) == 1


@pytest.mark.asyncio
async def test_low_confidence_falls_back_to_general():
    llm = ScriptedLLM(['{"category": "dating", "confidence": 0.4, "reasoning": "unsure"}'])

    result = await CategoryDetector(llm, confidence_threshold=0.7).detect("something vague")

    assert result.category == RedFlagCategory.GENERAL
    assert result.confidence == 0.4
    assert "Low confidence" in result.reasoning


@pytest.mark.asyncio
async def test_llm_failure_uses_keyword_fallback():
    llm = ScriptedLLM([RuntimeError("503 Service Unavailable")])

    result = await CategoryDetector(llm).detect("Room for rent, $500 deposit required")

    assert result.category == RedFlagCategory.HOUSING
    assert result.confidence == 0.5


@pytest.mark.asyncio
async def test_llm_failure_without_keywords_is_general():
    llm = ScriptedLLM([RuntimeError("connection reset")])

    result = await CategoryDetector(llm).detect("Lorem ipsum dolor sit amet")

    assert result.category == RedFlagCategory.GENERAL
    assert result.confidence == 0.5


@pytest.mark.asyncio
async def test_detector_with_langchain_fake_model():
    llm = FakeListChatModel(
        responses=['```json\n{"category": "marketplace", "confidence": 0.95, "reasoning": "Sale ad"}\n```']
    )

    result = await CategoryDetector(llm).detect("iPhone 15 for sale, like new")

    assert result.category == RedFlagCategory.MARKETPLACE
    assert result.confidence == 0.95
