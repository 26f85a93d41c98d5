"""
Analysis модуль: категории, определение категории и анализ тревожных сигналов
"""

from .analyzer import AnalysisOutcome, RedFlagAnalyzer, classify_error, validate_analysis
from .attachments import AttachmentContent, build_analysis_input, extract_pdf_text
from .categories import (
    CATEGORY_INFO,
    DEFAULT_CATEGORY,
    RedFlagCategory,
    get_available_categories,
    quick_detect_category,
)
from .detector import CategoryDetector, parse_detection_result
from .json_extraction import extract_json, split_explanation
from .models import AnalysisResult, CategoryDetectionResult, RedFlagItem

__all__ = [
    # Categories
    "RedFlagCategory",
    "DEFAULT_CATEGORY",
    "CATEGORY_INFO",
    "get_available_categories",
    "quick_detect_category",
    # Models
    "RedFlagItem",
    "AnalysisResult",
    "CategoryDetectionResult",
    # Parsing
    "extract_json",
    "split_explanation",
    "parse_detection_result",
    "validate_analysis",
    "classify_error",
    # Services
    "CategoryDetector",
    "RedFlagAnalyzer",
    "AnalysisOutcome",
    # Attachments
    "AttachmentContent",
    "build_analysis_input",
    "extract_pdf_text",
]
