"""
Сервисный слой: сценарии, объединяющие репозитории, хранилище и LLM
"""

from .analysis_service import AnalysisRun, AnalysisService
from .file_service import CleanupReport, FileService
from .usage import UsageService, UsageStatus

__all__ = [
    "AnalysisService",
    "AnalysisRun",
    "FileService",
    "CleanupReport",
    "UsageService",
    "UsageStatus",
]
