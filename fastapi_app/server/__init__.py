"""
Модуль server с эндпоинтами FastAPI
"""

from .auth_endpoints import router as auth_router
from .chat_endpoints import router as chat_router
from .dependencies import get_analyzer, get_detector
from .endpoints import router
from .file_endpoints import router as file_router
from .logging_middleware import RequestLoggingMiddleware
from .maintenance_endpoints import router as maintenance_router
from .middleware import AuthMiddleware
from .usage_endpoints import router as usage_router

__all__ = [
    "router",
    "auth_router",
    "chat_router",
    "file_router",
    "usage_router",
    "maintenance_router",
    "AuthMiddleware",
    "RequestLoggingMiddleware",
    "get_detector",
    "get_analyzer",
]
