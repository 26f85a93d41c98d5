"""
Промпты для LLM
"""

from .detection import DETECTION_PROMPT
from .red_flags import BASE_INSTRUCTIONS, CATEGORY_PROMPTS, get_red_flag_prompt

__all__ = [
    "DETECTION_PROMPT",
    "BASE_INSTRUCTIONS",
    "CATEGORY_PROMPTS",
    "get_red_flag_prompt",
]
