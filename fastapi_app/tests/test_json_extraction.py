"""
Тесты извлечения JSON из ответов модели и разбора результата классификатора
"""

import pytest
from analysis import RedFlagCategory, extract_json, parse_detection_result, split_explanation


# ==================== extract_json ====================


def test_extracts_fenced_json_block():
    text = 'Here you go:\n```json\n{"redFlagScore": 3, "verdict": "ok"}\n```\nExplanation follows.'

    assert extract_json(text, "redFlagScore") == {"redFlagScore": 3, "verdict": "ok"}


def test_extracts_bare_object_with_marker_key():
    text = 'Sure! {"category": "jobs", "confidence": 0.8, "reasoning": "ad"} Hope it helps'

    assert extract_json(text, "category")["category"] == "jobs"


def test_parses_whole_text_as_last_resort():
    assert extract_json('  {"a": 1}  ', "redFlagScore") == {"a": 1}


def test_fenced_block_wins_over_other_braces():
    text = 'Note {not json}\n```json\n{"redFlagScore": 1}\n```'

    assert extract_json(text, "redFlagScore") == {"redFlagScore": 1}


@pytest.mark.parametrize(
    "text",
    [
        "no json here at all",
        '```json\n{"redFlagScore": 5,\n```',
        "[1, 2, 3]",
    ],
)
def test_invalid_json_raises_value_error(text):
    with pytest.raises(ValueError):
        extract_json(text, "redFlagScore")


# ==================== split_explanation ====================


def test_explanation_after_fenced_block():
    text = '```json\n{"redFlagScore": 2}\n```\n\nLooks mostly fine.'

    assert split_explanation(text) == "Looks mostly fine."


def test_explanation_after_bare_object():
    assert split_explanation('{"redFlagScore": 2} Trailing words') == "Trailing words"


def test_explanation_empty_when_only_json():
    assert split_explanation('```json\n{"redFlagScore": 2}\n```') == ""


# ==================== parse_detection_result ====================


def test_parse_valid_detection():
    result = parse_detection_result('{"category": "dating", "confidence": 0.9, "reasoning": "Tinder bio"}')

    assert result.category == RedFlagCategory.DATING
    assert result.confidence == 0.9
    assert result.reasoning == "Tinder bio"


def test_unknown_category_falls_back_to_general():
    result = parse_detection_result('{"category": "crypto", "confidence": 0.95, "reasoning": "x"}')

    assert result.category == RedFlagCategory.GENERAL
    assert result.confidence == 0.5
    assert "crypto" in result.reasoning


@pytest.mark.parametrize("confidence", ['"high"', "1.7", "-0.2", "true"])
def test_invalid_confidence_becomes_half(confidence):
    result = parse_detection_result(
        '{"category": "jobs", "confidence": %s, "reasoning": "job ad"}' % confidence
    )

    assert result.category == RedFlagCategory.JOBS
    assert result.confidence == 0.5


def test_unparseable_detection_is_general():
    result = parse_detection_result("I think this is a job posting")

    assert result.category == RedFlagCategory.GENERAL
    assert result.confidence == 0.5
